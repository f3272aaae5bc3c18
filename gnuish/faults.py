"""
gnuish faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing failure.
  Codes are grouped by domain to keep copy consistent and make logs/searches predictable.
- CliException: base type that carries a message plus context options (code, title,
  hint, ...) and knows how to render itself in a friendly, lowercased, actionable way.
- trigger(): central entry point to surface a fault (respecting shell/colorful/fancy).

Taxonomy
- routing: CommandNotFoundError
- input: WrongArgumentTypeError, WrongOptionTypeError, ConstraintViolationError
- conversion: ConversionError (value not parseable), ConversionUnsupportedError
  (no converter reachable, or no factory on the target type)
- configuration: ConverterConfigurationError, DescriptorError
- machinery: DispatchError (unexpected internal failure, chained to its cause)

Failures raised by an invoked operation never pass through here; they reach the
caller exactly as the operation raised them.

UX goals
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the framework (stable identifiers).

    grouping (by high-level domain)
    - routing (2110x)
      • COMMAND_NOT_FOUND
    - user input (2111x)
      • WRONG_ARGUMENT_TYPE, WRONG_OPTION_TYPE, CONSTRAINT_VIOLATION
    - conversion (2112x)
      • CONVERSION_FAILED, CONVERSION_UNSUPPORTED
    - configuration (2113x)
      • CONVERTER_CONFIGURATION, BAD_DESCRIPTOR
    - machinery (2114x)
      • DISPATCH_FAILED

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- routing errors ---
    COMMAND_NOT_FOUND       = 21101

    # --- user input errors ---
    WRONG_ARGUMENT_TYPE     = 21111
    WRONG_OPTION_TYPE       = 21112
    CONSTRAINT_VIOLATION    = 21113

    # --- conversion errors ---
    CONVERSION_FAILED       = 21121
    CONVERSION_UNSUPPORTED  = 21122

    # --- configuration errors ---
    CONVERTER_CONFIGURATION = 21131
    BAD_DESCRIPTOR          = 21132

    # --- machinery errors ---
    DISPATCH_FAILED         = 21141

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CliException(Exception):
    """
    base of every failure the framework raises on its own.

    the message is what users see by default; options carry rendering context
    (code, title, hint, prog, colorful, fancy) plus fault-specific payload such
    as the offending name/type/value.
    """
    __code__ = FaultCode.DISPATCH_FAILED
    __title__ = "command failed"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __getattr__(self, name):
        # payload (name, type, value, ...) is readable as attributes
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(name) from None

    @property
    def code(self):
        return self.options.get("code", type(self).__code__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    def __rich__(self):
        main = __import__("__main__")

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("prog", "cli")), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.code.normalize(), styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replica = type(self)(self.message, **{**self.options, **overrides})
        replica.__cause__ = self.__cause__
        replica.__traceback__ = self.__traceback__
        return replica


class CommandNotFoundError(CliException):
    __code__ = FaultCode.COMMAND_NOT_FOUND
    __title__ = "command not found"


class WrongArgumentTypeError(CliException):
    __code__ = FaultCode.WRONG_ARGUMENT_TYPE
    __title__ = "wrong argument type"


class WrongOptionTypeError(CliException):
    __code__ = FaultCode.WRONG_OPTION_TYPE
    __title__ = "wrong option type"


class ConstraintViolationError(CliException):
    __code__ = FaultCode.CONSTRAINT_VIOLATION
    __title__ = "constraint violation"


class ConversionError(CliException):
    __code__ = FaultCode.CONVERSION_FAILED
    __title__ = "conversion failed"


class ConversionUnsupportedError(ConversionError):
    __code__ = FaultCode.CONVERSION_UNSUPPORTED
    __title__ = "conversion unsupported"


class ConverterConfigurationError(CliException, TypeError):
    __code__ = FaultCode.CONVERTER_CONFIGURATION
    __title__ = "bad converter"


class DescriptorError(CliException, ValueError):
    __code__ = FaultCode.BAD_DESCRIPTOR
    __title__ = "bad descriptor"


class DispatchError(CliException):
    __code__ = FaultCode.DISPATCH_FAILED
    __title__ = "dispatch failed"


def wrong_type(kind, name, type, value, /):
    """
    build the three-part message shared by argument and option type failures.

    kind is "argument" or "option"; type may be a class or an identifier.
    """
    typename = getattr(type, "__qualname__", str(type))
    factory = WrongArgumentTypeError if kind == "argument" else WrongOptionTypeError
    return factory(
        "%s %s with input value %r should be %s" % (kind, name, value, typename),
        name=name,
        type=type,
        value=value,
        hint="run the command with --help to see the expected %s types" % kind,
    )


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CliException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode the fault is rendered on stderr and the process exits with status 1;
      otherwise the (merged) fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "CliException",
    "CommandNotFoundError",
    "WrongArgumentTypeError",
    "WrongOptionTypeError",
    "ConstraintViolationError",
    "ConversionError",
    "ConversionUnsupportedError",
    "ConverterConfigurationError",
    "DescriptorError",
    "DispatchError",
    "trigger",
)
