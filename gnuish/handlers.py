r"""
gnuish handler declarations: mark operations, option fields and default literals.

A handler is a plain class. Its decorated methods become commands, its Option
attributes become option-bound fields shared by all of its commands:

    from pathlib import Path
    from gnuish import command, Option, Default

    class Files:
        long: bool = Option("l", default=False, descr="use a long listing format")
        width: int = Option("w", default=80)

        @command
        def ls(self, path: Path = Default(".")):
            '''
            list directory contents.

            :param path: directory to list
            '''

        @command(name="cat")
        def concatenate(self, first: Path, second: Path = Default("/dev/null")): ...

Conventions
- command key: the method name, unless @command(name=...) says otherwise.
- positional arguments: the parameters after self, in order; their type is the
  annotation (str when missing). Optional[X], X | None and Annotated[X, ...] unwrap to X.
- default literal: Default("text") as parameter default; the text is converted like
  user input. Plain Python defaults are not used for positional reconciliation.
- option field: short key is the character given to Option, long key the attribute
  name unless Option(long=...) overrides it; the field type is the class annotation.
  the long keys 'help', 'debug' and 'verbose' are reserved.
- summaries: the docstring text before the first ':field' line is the command summary,
  ':param name: text' lines document arguments.

describe() walks this surface once, at registration time, and produces descriptors;
nothing here is consulted again while dispatching.
"""
import inspect
import re
import types
import typing

from .descriptors import ArgumentDescriptor, CommandDescriptor, OptionDescriptor
from .faults import DescriptorError
from .tokens import RESERVED
from .utils import Unset, coalesce, rename


class Default:
    """
    declared default literal for an operation parameter.

        def ls(self, path: Path = Default(".")): ...
    """
    __slots__ = ("value",)

    def __init__(self, value, /):
        if not isinstance(value, str):
            raise TypeError("Default() argument must be a string literal")
        self.value = value

    def __repr__(self):
        return "Default(%r)" % self.value


class Option:
    """
    option-bound field descriptor.

    parameters
    - short: str | None — single character addressed as '-x'.
    - long: str — key addressed as '--key' (defaults to the attribute name).
    - default: any — value read back while the option was never supplied.
    - descr: str — one-line help text.

    the field stores values per instance; reading an unset field yields the default.
    """

    def __init__(self, short=None, /, *, long=Unset, default=None, descr=""):
        if short is not None and (not isinstance(short, str) or len(short) != 1 or short == "-"):
            raise ValueError("Option() short key must be a single character other than '-'")
        if long is not Unset and (not isinstance(long, str) or not long.strip()):
            raise ValueError("Option() long key must be a non-empty string")
        if not isinstance(descr, str):
            raise TypeError("Option() descr must be a string")
        self.short = short
        self._long = long
        self.default = default
        self.descr = descr
        self.name = None

    @property
    def long(self):
        return coalesce(self._long, self.name)

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return instance.__dict__.get(self.name, self.default)

    def __set__(self, instance, value):
        instance.__dict__[self.name] = value

    def __repr__(self):
        return "Option(short=%r, long=%r, default=%r)" % (self.short, self.long, self.default)


def command(source=Unset, /, *, name=Unset):
    """
    mark a handler method as a command; usable bare or with a name override.

        @command
        def ls(self): ...

        @command(name="list")
        def ls(self): ...
    """
    if name is not Unset and (not isinstance(name, str) or not name.strip()):
        raise ValueError("@command() name must be a non-empty string")

    @rename("command")
    def wrapper(function, /):
        target = getattr(function, "__func__", function)
        if not callable(target):
            raise TypeError("@command() must be applied to a callable")
        target.__command__ = coalesce(name, target.__name__).strip()
        return function

    return wrapper(source) if source is not Unset else wrapper


def _unwrap(annotation, where):
    """reduce an annotation to the class values are converted into."""
    if annotation is inspect.Parameter.empty:
        return str
    origin = typing.get_origin(annotation)
    if origin is typing.Annotated:
        return _unwrap(typing.get_args(annotation)[0], where)
    if origin is typing.Union or origin is types.UnionType:
        members = [member for member in typing.get_args(annotation) if member is not type(None)]
        if len(members) != 1:
            raise DescriptorError("%s must declare a single type, not %r" % (where, annotation))
        return _unwrap(members[0], where)
    if isinstance(origin, type):
        return origin
    if isinstance(annotation, type):
        return annotation
    raise DescriptorError("%s has an unsupported type %r" % (where, annotation))


def _hints(object, where):
    try:
        return typing.get_type_hints(object)
    except Exception as exception:
        raise DescriptorError("cannot evaluate the annotations of %s" % where) from exception


def _docstring(object):
    """split a docstring into (summary, {parameter: text})."""
    summary = []
    parameters = {}
    current = None
    for line in (inspect.getdoc(object) or "").splitlines():
        stripped = line.strip()
        if match := re.match(r":param\s+(?:[^:]+\s+)?(\w+)\s*:\s*(.*)", stripped):
            current = match[1]
            parameters[current] = match[2].strip()
        elif stripped.startswith(":"):
            current = Unset
        elif current is None:
            summary.append(line)
        elif current is not Unset and stripped:
            parameters[current] = (parameters[current] + " " + stripped).strip()
    return "\n".join(summary).strip(), parameters


def _members(cls):
    """class attributes in definition order, subclasses overriding their bases."""
    members = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        members.update(vars(klass))
    return members


def options(cls, /):
    """describe the option-bound fields of a handler class."""
    hints = None
    shorts = {}
    longs = {}
    described = []
    for name, member in _members(cls).items():
        if not isinstance(member, Option):
            continue
        if hints is None:
            hints = _hints(cls, cls.__qualname__)
        where = "option %r of %s" % (name, cls.__qualname__)
        option = OptionDescriptor(
            short=member.short,
            long=member.long,
            field=name,
            type=_unwrap(hints.get(name, inspect.Parameter.empty), where),
            summary=member.descr,
        )
        if option.long in RESERVED:
            raise DescriptorError("%s uses the reserved long key %r" % (where, option.long))
        if option.short is not None and shorts.setdefault(option.short, name) != name:
            raise DescriptorError("%s reuses short key %r of field %r" % (where, option.short, shorts[option.short]))
        if longs.setdefault(option.long, name) != name:
            raise DescriptorError("%s reuses long key %r of field %r" % (where, option.long, longs[option.long]))
        described.append(option)
    return tuple(described)


def _arguments(member, function, where):
    signature = inspect.signature(function)
    hints = _hints(function, where)
    parameters = list(signature.parameters.values())
    if not isinstance(member, staticmethod):
        # self / cls
        parameters = parameters[1:]

    _, summaries = _docstring(function)
    arguments = []
    for parameter in parameters:
        match parameter.kind:
            case inspect.Parameter.POSITIONAL_ONLY | inspect.Parameter.POSITIONAL_OR_KEYWORD:
                pass
            case inspect.Parameter.KEYWORD_ONLY if parameter.default is not inspect.Parameter.empty:
                continue
            case _:
                raise DescriptorError("%s: parameter %r cannot be bound positionally" % (where, parameter.name))
        default = parameter.default.value if isinstance(parameter.default, Default) else None
        arguments.append(ArgumentDescriptor(
            name=parameter.name,
            type=_unwrap(hints.get(parameter.name, inspect.Parameter.empty), "parameter %r of %s" % (parameter.name, where)),
            position=len(arguments),
            default=default,
            summary=summaries.get(parameter.name, ""),
        ))
    return tuple(arguments)


def describe(handler, /):
    """
    build the CommandDescriptors of a handler class (or of an instance's class).

    every command of the class shares the class's option fields.

    raises
    - DescriptorError for unsupported parameters/annotations or clashing keys.
    """
    cls = handler if isinstance(handler, type) else type(handler)
    identity = "%s:%s" % (cls.__module__, cls.__qualname__)
    shared = options(cls)

    descriptors = []
    seen = {}
    for name, member in _members(cls).items():
        function = getattr(member, "__func__", member)
        if (key := getattr(function, "__command__", None)) is None:
            continue
        where = "command %r of %s" % (key, cls.__qualname__)
        if seen.setdefault(key, name) != name:
            raise DescriptorError("%s is declared twice (%s and %s)" % (where, seen[key], name))
        summary, _ = _docstring(function)
        descriptors.append(CommandDescriptor(
            command=key,
            handler=identity,
            operation=name,
            summary=summary,
            arguments=_arguments(member, function, where),
            options=shared,
        ))
    return descriptors


__all__ = (
    "Default",
    "Option",
    "command",
    "options",
    "describe",
)
