"""
gnuish descriptors: static metadata about commands, and their interchange format.

Types
- ArgumentDescriptor(name, type, position, default, summary)
  • one positional parameter of an operation; position is zero-based and significant.
  • default is the declared default literal (a string) or None when there is none.
- OptionDescriptor(short, long, field, type, summary)
  • one option-bound field of a handler; '-short' and '--long' both address it.
- CommandDescriptor(command, handler, operation, summary, arguments, options)
  • a user-invocable command: its key, the owning handler identity ("module:QualName"),
    the operation (method) name, and the ordered arguments plus options.

All descriptors are immutable tuples. Types are real classes in memory and dotted
identifiers ("pathlib.Path") on disk.

Interchange (JSON)
    {
      "commands": [
        {
          "command": "ls",
          "handler": "tools.files:Files",
          "operation": "ls",
          "summary": "list directory contents.",
          "arguments": [{"name": "path", "position": 0, "type": "pathlib.Path",
                         "default": ".", "summary": "directory to list"}],
          "options": [{"short": "l", "long": "long", "field": "long",
                       "type": "builtins.bool", "summary": "long listing"}]
        }
      ]
    }

Discovery
- discover(pattern) expands a module glob (see utils.mglob) and loads the
  ``commands.json`` resource shipped inside every matching package.
  Matching plain modules (no __path__) are skipped.

Validation
- Documents are checked against pydantic record models (DescriptorDocument) before any
  type is resolved; every violation is reported in one DescriptorError.
"""
import importlib
import importlib.resources
import json
from typing import NamedTuple

from pydantic import BaseModel, Field, ValidationError

from .faults import DescriptorError
from .logs import get_logger
from .utils import mglob, qualify, resolve

logger = get_logger(__name__)

RESOURCE = "commands.json"


class ArgumentDescriptor(NamedTuple):
    name: str
    type: type
    position: int
    default: str | None = None
    summary: str = ""


class OptionDescriptor(NamedTuple):
    short: str | None
    long: str
    field: str
    type: type
    summary: str = ""


class CommandDescriptor(NamedTuple):
    command: str
    handler: str
    operation: str
    summary: str = ""
    arguments: tuple[ArgumentDescriptor, ...] = ()
    options: tuple[OptionDescriptor, ...] = ()

    @property
    def arity(self):
        return len(self.arguments)

    @property
    def defaults(self):
        """per-position default literals (None where no default is declared)."""
        return tuple(argument.default for argument in self.arguments)


class ArgumentRecord(BaseModel):
    name: str = Field(..., min_length=1)
    position: int | None = Field(default=None, ge=0)
    type: str = Field(default="builtins.str", min_length=1)
    default: str | None = None
    summary: str | None = ""


class OptionRecord(BaseModel):
    short: str | None = Field(default=None, pattern=r"^[^-]$")
    long: str = Field(..., min_length=1)
    field: str | None = None
    type: str = Field(default="builtins.str", min_length=1)
    summary: str | None = ""


class CommandRecord(BaseModel):
    command: str = Field(..., min_length=1)
    handler: str = Field(..., min_length=1)
    operation: str | None = None
    summary: str | None = ""
    arguments: list[ArgumentRecord] = Field(default_factory=list)
    options: list[OptionRecord] = Field(default_factory=list)


class DescriptorDocument(BaseModel):
    commands: list[CommandRecord]


def _type(identifier, where):
    try:
        klass = resolve(identifier)
    except (ImportError, AttributeError) as exception:
        raise DescriptorError("cannot resolve type %r of %s" % (identifier, where)) from exception
    if not isinstance(klass, type):
        raise DescriptorError("%r of %s is not a class" % (identifier, where))
    return klass


def _from_record(record):
    where = "command %r" % record.command

    arguments = []
    for index, argument in enumerate(record.arguments):
        arguments.append(ArgumentDescriptor(
            name=argument.name,
            type=_type(argument.type, "argument %r of %s" % (argument.name, where)),
            position=index if argument.position is None else argument.position,
            default=argument.default,
            summary=argument.summary or "",
        ))
    arguments.sort(key=lambda argument: argument.position)
    if [argument.position for argument in arguments] != list(range(len(arguments))):
        raise DescriptorError("argument positions of %s must be 0..%d" % (where, len(arguments) - 1))

    options = tuple(
        OptionDescriptor(
            short=option.short,
            long=option.long,
            field=option.field or option.long,
            type=_type(option.type, "option %r of %s" % (option.long, where)),
            summary=option.summary or "",
        )
        for option in record.options
    )

    return CommandDescriptor(
        command=record.command,
        handler=record.handler,
        operation=record.operation or record.command,
        summary=record.summary or "",
        arguments=tuple(arguments),
        options=options,
    )


def _to_record(descriptor):
    arguments = []
    for argument in descriptor.arguments:
        record = {
            "name": argument.name,
            "position": argument.position,
            "type": qualify(argument.type),
        }
        if argument.default is not None:
            record["default"] = argument.default
        record["summary"] = argument.summary
        arguments.append(record)
    return {
        "command": descriptor.command,
        "handler": descriptor.handler,
        "operation": descriptor.operation,
        "summary": descriptor.summary,
        "arguments": arguments,
        "options": [
            {
                "short": option.short,
                "long": option.long,
                "field": option.field,
                "type": qualify(option.type),
                "summary": option.summary,
            }
            for option in descriptor.options
        ],
    }


def loads(text, /):
    """parse a descriptor document and return its CommandDescriptors, in file order."""
    try:
        document = DescriptorDocument.model_validate(json.loads(text))
    except json.JSONDecodeError as exception:
        raise DescriptorError("malformed descriptor document: %s" % exception) from exception
    except ValidationError as exception:
        violations = [
            "%s %s" % (".".join(map(str, error["loc"])) or "document", error["msg"].lower())
            for error in exception.errors()
        ]
        raise DescriptorError(
            "invalid descriptor document, %s" % "; ".join(violations),
            violations=tuple(violations),
            hint="regenerate the file with 'python -m gnuish generate'",
        ) from exception
    return [_from_record(record) for record in document.commands]


def load(source, /):
    """
    load descriptors from a path or a readable text file.
    """
    if hasattr(source, "read"):
        return loads(source.read())
    with open(source, encoding="utf-8") as file:
        descriptors = loads(file.read())
    logger.debug("loaded %d descriptors from %s", len(descriptors), source)
    return descriptors


def dumps(descriptors, /):
    return json.dumps({"commands": [_to_record(descriptor) for descriptor in descriptors]}, indent=2)


def dump(descriptors, file, /):
    """write descriptors to a path or a writable text file."""
    if hasattr(file, "write"):
        file.write(dumps(descriptors) + "\n")
        return
    with open(file, "w", encoding="utf-8") as stream:
        stream.write(dumps(descriptors) + "\n")


def discover(pattern, /):
    """
    load every ``commands.json`` resource found in the packages matching a module glob.

    sources are returned in sorted module order so later packages win on key collisions.
    """
    descriptors = []
    for module in mglob(pattern):
        try:
            package = importlib.import_module(module)
        except ImportError:
            continue
        # plain modules would expose the resources of their parent package
        if not hasattr(package, "__path__"):
            continue
        resource = importlib.resources.files(package).joinpath(RESOURCE)
        if not resource.is_file():
            continue
        logger.debug("discovered descriptors in %s", module)
        descriptors.extend(loads(resource.read_text(encoding="utf-8")))
    return descriptors


__all__ = (
    "ArgumentDescriptor",
    "OptionDescriptor",
    "CommandDescriptor",
    "DescriptorDocument",
    "loads",
    "load",
    "dumps",
    "dump",
    "discover",
)
