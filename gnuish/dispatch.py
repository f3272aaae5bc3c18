"""
gnuish dispatch: command registry and the dispatcher that binds an Invocation to an operation.

Registry
- Holds CommandDescriptors keyed by command name. Sources merge in order and the last
  registration of a key wins, whether it came from a descriptor file, a discovered
  package resource or a live handler passed to include().
- Remembers how to obtain the handler of each command: the live instance given to
  include(), the class given to include() (instantiated per bind), or, for commands
  loaded from files, the class named by the descriptor's handler reference.

Dispatcher
- dispatch(invocation, handler) runs one invocation through strictly sequential states:

    IDLE → RESOLVING → RECONCILING → CONVERTING → VALIDATING → INVOKING → DONE
                                                                        ↘ FAILED (from any state)

  1. resolve the descriptor by name (CommandNotFoundError when absent);
  2. '--help' renders the command usage and stops;
  3. reconcile positionals against the arity: drop trailing excess tokens, or append the
     declared default literals of the missing trailing parameters (None where none is declared);
  4. convert every positional to its parameter type (WrongArgumentTypeError);
  5. inject options: short key first, then long key; absent options leave the field as is
     (WrongOptionTypeError on bad values);
  6. run the validator, options before arguments, when one is configured;
  7. call the operation. Whatever the operation raises reaches the caller untouched.

- The dispatcher only reads descriptors; it never inspects handler classes.
- ConversionUnsupportedError is a configuration problem and propagates as-is; any other
  unexpected failure of the machinery is wrapped in DispatchError (chained).
"""
import os
from enum import IntEnum

from rich.console import Console

from . import help
from .conversion import Conversion
from .descriptors import CommandDescriptor, discover, load
from .faults import (
    CliException,
    CommandNotFoundError,
    ConversionError,
    ConversionUnsupportedError,
    DescriptorError,
    DispatchError,
    wrong_type,
)
from .handlers import describe
from .logs import get_logger
from .utils import Unset, resolve

logger = get_logger(__name__)


class Registry:
    """
    namespace of available commands.

        registry = Registry("build/commands.json")
        registry.include(Files())
        registry.lookup("ls")
    """

    def __init__(self, *sources):
        self._commands = {}
        self._handlers = {}
        for source in sources:
            self.load(source)

    def __contains__(self, name):
        return name in self._commands

    def __iter__(self):
        return iter(self._commands.values())

    def __len__(self):
        return len(self._commands)

    def register(self, descriptor, /, handler=Unset):
        """
        add or replace a command; `handler` is a live instance or a handler class.
        """
        if not isinstance(descriptor, CommandDescriptor):
            raise TypeError("register() argument must be a command descriptor")
        if descriptor.command in self._commands:
            logger.debug("command %r replaced by %s", descriptor.command, descriptor.handler)
        self._commands[descriptor.command] = descriptor
        if handler is Unset:
            self._handlers.pop(descriptor.command, None)
        else:
            self._handlers[descriptor.command] = handler
        return descriptor

    def include(self, handler, /):
        """
        describe a live handler (instance or class) and register all of its commands.
        """
        descriptors = [self.register(descriptor, handler) for descriptor in describe(handler)]
        logger.debug("included %d commands from %r", len(descriptors), handler)
        return descriptors

    def load(self, source, /):
        """
        register descriptors from a file path, an open file, a module glob, or an
        iterable of CommandDescriptors.
        """
        if hasattr(source, "read") or isinstance(source, os.PathLike):
            descriptors = load(source)
        elif isinstance(source, str):
            if source.endswith(".json") or os.path.exists(source):
                descriptors = load(source)
            else:
                descriptors = discover(source)
        else:
            descriptors = list(source)
        for descriptor in descriptors:
            self.register(descriptor)
        return descriptors

    def lookup(self, name, /):
        return self._commands.get(name)

    def bind(self, name, /):
        """
        return the handler instance that owns command `name`.
        """
        descriptor = self._commands[name]
        handler = self._handlers.get(name, Unset)
        if handler is Unset:
            try:
                handler = resolve(descriptor.handler)
            except (ImportError, AttributeError) as exception:
                raise DescriptorError(
                    "cannot import handler %r of command %r" % (descriptor.handler, name),
                    hint="check that the package declaring %r is installed" % descriptor.handler,
                ) from exception
        if isinstance(handler, type):
            handler = handler()
        return handler


class State(IntEnum):
    IDLE = 0
    RESOLVING = 1
    RECONCILING = 2
    CONVERTING = 3
    VALIDATING = 4
    INVOKING = 5
    DONE = 6
    FAILED = 7


class Dispatcher:
    """
    binds parsed invocations to handler operations.

    parameters
    - registry: Registry
    - conversion: Conversion — created with the built-in converters when omitted.
    - validator: Validator | None — optional constraint checks (see gnuish.validation).
    - console: rich Console used for '--help' output.
    - colorful / fancy: rendering flags for help output.
    """

    def __init__(self, registry, /, *, conversion=Unset, validator=None, console=Unset, colorful=True, fancy=False):
        self.registry = registry
        self.conversion = Conversion() if conversion is Unset else conversion
        self.validator = validator
        self.console = Console() if console is Unset else console
        self.colorful = colorful
        self.fancy = fancy
        self.state = State.IDLE

    def _transition(self, state):
        logger.debug("dispatcher %s → %s", self.state.name.lower(), state.name.lower())
        self.state = state

    def reconcile(self, descriptor, tokens, /):
        """
        fit the positional tokens to the operation arity.

        excess tokens are dropped from the end; missing trailing parameters receive
        their declared default literal (None when no default is declared).
        """
        have = len(tokens)
        want = descriptor.arity
        if have > want:
            logger.debug("dropping %d excess arguments of %r", have - want, descriptor.command)
            return list(tokens[:want])
        return list(tokens) + list(descriptor.defaults[have:])

    def convert(self, descriptor, tokens, /):
        """convert reconciled tokens into operation arguments."""
        arguments = []
        for argument, raw in zip(descriptor.arguments, tokens):
            try:
                arguments.append(self.conversion.convert(raw, argument.type))
            except ConversionUnsupportedError:
                raise
            except ConversionError as exception:
                raise wrong_type("argument", argument.name, argument.type, raw) from exception
        return arguments

    def inject(self, descriptor, invocation, handler, /):
        """set every option field whose short or long key was supplied."""
        for option in descriptor.options:
            raw = invocation.shorts.get(option.short) if option.short else None
            if raw is None:
                raw = invocation.longs.get(option.long)
            if raw is None:
                continue
            try:
                value = self.conversion.convert(raw, option.type)
            except ConversionUnsupportedError:
                raise
            except ConversionError as exception:
                raise wrong_type("option", option.field, option.type, raw) from exception
            setattr(handler, option.field, value)
            logger.debug("option %r of %r set to %r", option.field, descriptor.command, value)

    def dispatch(self, invocation, handler=Unset, /):
        """
        run one invocation; returns whatever the operation returns (None for --help).

        when `handler` is omitted it is obtained from the registry.
        """
        self.state = State.IDLE
        try:
            result = self._dispatch(invocation, handler)
        except BaseException:
            self._transition(State.FAILED)
            raise
        self._transition(State.DONE)
        return result

    def _dispatch(self, invocation, handler):
        self._transition(State.RESOLVING)
        descriptor = self.registry.lookup(invocation.command)
        if descriptor is None:
            raise CommandNotFoundError(
                "%s: command not found" % invocation.command,
                name=invocation.command,
                hint="run without arguments to list the available commands",
            )

        if invocation.help:
            self.console.print(help.usage(descriptor, colorful=self.colorful, fancy=self.fancy))
            return None

        try:
            if handler is Unset:
                handler = self.registry.bind(descriptor.command)
            self._transition(State.RECONCILING)
            tokens = self.reconcile(descriptor, invocation.arguments)
            self._transition(State.CONVERTING)
            arguments = self.convert(descriptor, tokens)
            self.inject(descriptor, invocation, handler)
            self._transition(State.VALIDATING)
            if self.validator is not None:
                self.validator.validate_options(handler, descriptor)
                self.validator.validate_arguments(handler, descriptor, arguments)
            operation = getattr(handler, descriptor.operation)
        except CliException:
            raise
        except Exception as exception:
            raise DispatchError(
                "failed to dispatch %r: %s" % (descriptor.command, exception),
                name=descriptor.command,
                hint="run with --debug to see the full trace",
            ) from exception

        self._transition(State.INVOKING)
        logger.info("invoking %s.%s with %r", descriptor.handler, descriptor.operation, arguments)
        return operation(*arguments)


__all__ = (
    "Registry",
    "State",
    "Dispatcher",
)
