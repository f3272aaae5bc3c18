"""
gnuish entry point: tokenize argv, dispatch one command, surface faults.

    from gnuish import Cli

    Cli(Files(), prog="files", sources=["tools.*"]).run()

Runtime options (keyword arguments of Cli)
- prog: str — program name shown in help and faults (__main__.__prog__ wins when set).
- sources: iterable — descriptor files, open files or module globs, merged in order.
- conversion: Conversion — converter registry owned by the dispatcher.
- validator: Validator | None — optional constraint checks.
- shell: bool — render faults on stderr and exit(1) instead of raising them.
- colorful / fancy: rendering flags for help and faults.

Reserved flags
- '--verbose' logs at INFO, '--debug' logs at DEBUG and prints full tracebacks.
- '--help' prints the usage of the requested command.
"""
import logging
import os
import sys

from rich.console import Console

from . import faults, help
from .dispatch import Dispatcher, Registry
from .faults import CliException, trigger
from .logs import configure, get_logger
from .tokens import parse
from .utils import Unset

logger = get_logger(__name__)


class Cli:
    def __init__(
            self,
            *handlers,
            prog=Unset,
            sources=(),
            conversion=Unset,
            validator=None,
            shell=True,
            colorful=True,
            fancy=False,
            console=Unset,
    ):
        self.prog = getattr(
            __import__("__main__"),
            "__prog__",
            os.path.basename(sys.argv[0]) if prog is Unset else prog,
        )
        self.shell = shell
        self.colorful = colorful
        self.fancy = fancy
        self.console = Console() if console is Unset else console

        self.registry = Registry(*sources)
        for handler in handlers:
            self.registry.include(handler)

        self.dispatcher = Dispatcher(
            self.registry,
            conversion=conversion,
            validator=validator,
            console=self.console,
            colorful=colorful,
            fancy=fancy,
        )

    def run(self, args=Unset, /):
        """
        run one command; returns the operation result (None for help screens).
        """
        invocation = parse(sys.argv[1:] if args is Unset else args)

        if invocation.debug:
            configure(logging.DEBUG)
        elif invocation.verbose:
            configure(logging.INFO)
        else:
            configure(logging.WARNING)

        if not invocation.command:
            self.console.print(help.summary(self.registry, prog=self.prog, colorful=self.colorful, fancy=self.fancy))
            return None

        try:
            return self.dispatcher.dispatch(invocation)
        except CliException as fault:
            if invocation.debug:
                faults.console.print_exception()
            trigger(
                fault,
                shell=self.shell,
                prog=self.prog,
                colorful=self.colorful,
                fancy=self.fancy,
            )
        except Exception:
            if invocation.debug:
                faults.console.print_exception()
            raise


def run(*handlers, args=Unset, **options):
    """shortcut for Cli(*handlers, **options).run(args)."""
    return Cli(*handlers, **options).run(args)


__all__ = (
    "Cli",
    "run",
)
