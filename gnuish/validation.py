"""
gnuish validation: optional constraint checks run before an operation is invoked.

The dispatcher accepts any object implementing the Validator protocol and calls it
twice per invocation, options first:

    validator.validate_options(handler, descriptor)
    validator.validate_arguments(handler, descriptor, arguments)

Either call rejects the invocation by raising ConstraintViolationError. Without a
validator the step is skipped.

PydanticValidator checks every option field and every operation argument against its
annotation with pydantic, so constraints can be declared in place:

    from typing import Annotated
    from pydantic import Field

    class Server:
        port: Annotated[int, Field(ge=1, le=65535)] = Option("p", default=8080)

        @command
        def serve(self, workers: Annotated[int, Field(gt=0)] = Default("1")): ...

None (an option never supplied, a parameter without default literal) passes unless
the annotation carries the NotNull marker:

    output: Annotated[str, NotNull] = Option("o")
"""
import typing
from typing import Protocol, runtime_checkable

from pydantic import ConfigDict, TypeAdapter, ValidationError

from .faults import ConstraintViolationError
from .logs import get_logger

logger = get_logger(__name__)


@runtime_checkable
class Validator(Protocol):
    def validate_options(self, handler, descriptor, /): ...

    def validate_arguments(self, handler, descriptor, arguments, /): ...


class NotNull:
    """Annotated marker: None is rejected for this option or argument."""


def _required(annotation):
    if typing.get_origin(annotation) is not typing.Annotated:
        return False
    return any(marker is NotNull or isinstance(marker, NotNull) for marker in annotation.__metadata__)


class PydanticValidator:
    """validate option fields and operation arguments against their annotations."""

    config = ConfigDict(arbitrary_types_allowed=True)

    def _violations(self, path, annotation, value):
        if not _required(annotation):
            annotation = typing.Optional[annotation]
        try:
            TypeAdapter(annotation, config=self.config).validate_python(value)
        except ValidationError as exception:
            for error in exception.errors():
                location = ".".join(map(str, (path, *error["loc"])))
                yield "%s %s" % (location, error["msg"].lower())

    def validate_options(self, handler, descriptor, /):
        hints = typing.get_type_hints(type(handler), include_extras=True)
        violations = []
        for option in descriptor.options:
            if (annotation := hints.get(option.field)) is None:
                continue
            violations.extend(self._violations(option.field, annotation, getattr(handler, option.field)))
        if violations:
            logger.debug("option violations for %r: %r", descriptor.command, violations)
            raise ConstraintViolationError(
                "options validation failed, %s" % "; ".join(violations),
                violations=tuple(violations),
                hint="run '%s --help' to see the accepted options" % descriptor.command,
            )

    def validate_arguments(self, handler, descriptor, arguments, /):
        operation = getattr(type(handler), descriptor.operation)
        hints = typing.get_type_hints(operation, include_extras=True)
        violations = []
        for argument, value in zip(descriptor.arguments, arguments):
            if (annotation := hints.get(argument.name)) is None:
                continue
            path = "%s.%s" % (descriptor.operation, argument.name)
            violations.extend(self._violations(path, annotation, value))
        if violations:
            logger.debug("argument violations for %r: %r", descriptor.command, violations)
            raise ConstraintViolationError(
                "argument validation failed, %s" % "; ".join(violations),
                violations=tuple(violations),
                hint="run '%s --help' to see the expected arguments" % descriptor.command,
            )


__all__ = (
    "Validator",
    "NotNull",
    "PydanticValidator",
)
