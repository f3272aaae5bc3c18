r"""
gnuish conversion engine: coerce raw values into declared types.

Overview
- Converter[S, T]
  • Unit of conversion logic. Subclasses parameterize the generic base with their
    source and target capabilities, e.g. ``class Upper(Converter[str, MyType])``.
    The capabilities are read from that declaration when the converter is registered;
    a converter that does not declare them is rejected with ConverterConfigurationError.

- Conversion
  • Explicit registry of converters plus a lookup cache keyed by the concrete
    (runtime source type, target type) pair. Constructed by the caller (normally the
    dispatcher owns one); there is no process-wide instance.

- distance(concrete, capability)
  • Number of hops up the concrete class's base graph (breadth-first over __bases__)
    needed to reach the capability. 0 when identical, None when unreachable, and
    FALLBACK (the largest rank) when the capability is ``object``, so universal
    converters lose to anything more specific but still match.

Resolution (per concrete pair, then cached)
1. every registered converter whose source and target capabilities are both reachable
   is a candidate;
2. the smallest target distance wins, then the smallest source distance;
3. remaining ties go to the most recent registration (callers override built-ins by
   registering their own converter for the same capabilities).

Built-ins (registered unless ``Conversion(defaults=False)``)
- StringToBoolean   str → bool     ("true/on/yes/y/1", "false/off/no/n/0", any case)
- StringToNumber    str → Number   (int, float, complex, Decimal, Fraction, gnuish.scalars)
- StringToEnum      str → Enum     (exact member name)
- StringToObject    str → object   (static/class ``valueof(text)``, else a one-argument constructor)
- ObjectToString    object → str   (str(value))

Failures
- ConversionUnsupportedError: no converter reachable for the pair, or the target offers
  neither a factory nor a suitable constructor (a configuration problem).
- ConversionError: the value itself cannot be parsed as the target type (a user problem).

Threading
- Registration swaps in a new registration tuple and a fresh cache under one lock.
- Cache hits read the current cache without locking; misses resolve under the lock.
"""
import decimal
import enum
import fractions
import inspect
import itertools
import numbers
import sys
import threading
import types
import typing
from abc import ABC, abstractmethod
from typing import Generic, NamedTuple, TypeVar

from .faults import ConversionError, ConversionUnsupportedError, ConverterConfigurationError
from .logs import get_logger

logger = get_logger(__name__)

S = TypeVar("S")
T = TypeVar("T")

FALLBACK = sys.maxsize


class Converter(ABC, Generic[S, T]):
    """
    base class for converters; parameterize it as Converter[Source, Target].

    convert() receives the source value and the concrete target class requested by
    the caller (which may be a subclass of the declared target capability).
    """

    @abstractmethod
    def convert(self, source, target, /):
        raise NotImplementedError

    def __repr__(self):
        return type(self).__name__


def capabilities(converter, /):
    """
    return the (source, target) classes a converter declared on its generic base.

    raises
    - ConverterConfigurationError when no parameterized Converter base is found, or
      when the declared arguments are not classes.
    """
    for klass in type(converter).__mro__:
        for base in types.get_original_bases(klass) if "__orig_bases__" in klass.__dict__ else ():
            if typing.get_origin(base) is not Converter:
                continue
            arguments = []
            for argument in typing.get_args(base):
                # list[str] and friends collapse to their raw class
                argument = typing.get_origin(argument) or argument
                if not isinstance(argument, type):
                    break
                arguments.append(argument)
            if len(arguments) == 2:
                return tuple(arguments)
    raise ConverterConfigurationError(
        "unable to determine the source and target types of converter %r; "
        "declare them on the base class, e.g. Converter[str, int]" % type(converter).__qualname__,
        converter=converter,
    )


def distance(concrete, capability, /):
    """
    rank how far `capability` sits above `concrete` in the class hierarchy.

    returns
    - 0 when both are the same class
    - FALLBACK when the capability is ``object`` (last-resort match)
    - n >= 1 hops found by walking __bases__ breadth-first
    - len(concrete.__mro__) - 1 for virtual subclasses (ABC.register)
    - None when the capability is not reachable at all
    """
    if concrete is capability:
        return 0
    if capability is object:
        return FALLBACK

    seen = {concrete}
    frontier = [concrete]
    hops = 0
    while frontier:
        hops += 1
        upper = []
        for klass in frontier:
            for base in klass.__bases__:
                if base is capability:
                    return hops
                if base not in seen:
                    seen.add(base)
                    upper.append(base)
        frontier = upper

    try:
        if issubclass(concrete, capability):
            return len(concrete.__mro__) - 1
    except TypeError:
        pass
    return None


class Registration(NamedTuple):
    source: type
    target: type
    converter: Converter
    sequence: int


class Conversion:
    """
    registry of converters with best-match resolution and a (source, target) cache.

        >>> conversion = Conversion()
        >>> conversion.convert("0", bool)
        False
        >>> conversion.convert("42", int)
        42
    """

    def __init__(self, *converters, defaults=True):
        self._lock = threading.Lock()
        self._sequence = itertools.count()
        self._registrations = ()
        self._cache = {}
        if defaults:
            self.register(*builtins())
        self.register(*converters)

    @property
    def converters(self):
        return tuple(registration.converter for registration in self._registrations)

    def register(self, *converters):
        """
        add converters; a converter whose class is already registered is ignored.

        any effective change replaces the whole lookup cache.
        """
        if not converters:
            return self
        with self._lock:
            registrations = {type(registration.converter): registration for registration in self._registrations}
            changed = False
            for converter in converters:
                if not isinstance(converter, Converter):
                    raise ConverterConfigurationError(
                        "register() arguments must be converters, not %r" % type(converter).__qualname__,
                        converter=converter,
                    )
                if type(converter) in registrations:
                    continue
                source, target = capabilities(converter)
                registrations[type(converter)] = Registration(source, target, converter, next(self._sequence))
                logger.debug("registered %r for %s → %s", converter, source.__qualname__, target.__qualname__)
                changed = True
            if changed:
                self._registrations = tuple(registrations.values())
                self._cache = {}
                logger.debug("conversion cache invalidated")
        return self

    def unregister(self, *classes):
        """remove the converters of the given classes, if registered."""
        with self._lock:
            registrations = tuple(
                registration for registration in self._registrations
                if type(registration.converter) not in classes
            )
            if len(registrations) != len(self._registrations):
                self._registrations = registrations
                self._cache = {}
                logger.debug("conversion cache invalidated")
        return self

    def lookup(self, source, target, /):
        """
        return the converter chosen for a concrete (source, target) pair.

        raises
        - ConversionUnsupportedError when nothing matches.
        """
        key = (source, target)
        converter = self._cache.get(key)
        if converter is not None:
            return converter
        with self._lock:
            if (converter := self._cache.get(key)) is None:
                converter = self._cache[key] = self._resolve(source, target)
        return converter

    def _resolve(self, source, target):
        best = None
        rank = None
        for registration in self._registrations:
            if (sourced := distance(source, registration.source)) is None:
                continue
            if (targeted := distance(target, registration.target)) is None:
                continue
            candidate = (targeted, sourced, -registration.sequence)
            if rank is None or candidate < rank:
                best, rank = registration.converter, candidate

        if best is None:
            raise ConversionUnsupportedError(
                "no suitable converter found for target class %s and source value %s; "
                "available converters are %s" % (
                    target.__qualname__,
                    source.__qualname__,
                    ", ".join(map(repr, self.converters)) or "none",
                ),
                source=source,
                target=target,
                hint="register a converter for %s → %s" % (source.__qualname__, target.__qualname__),
            )

        logger.debug("resolved %s → %s with %r", source.__qualname__, target.__qualname__, best)
        return best

    def convert(self, value, target, /):
        """
        convert `value` into an instance of `target`.

        None converts to None without consulting any converter.
        """
        if value is None:
            return None
        if not isinstance(target, type):
            raise TypeError("convert() second argument must be a class")
        converter = self.lookup(type(value), target)
        try:
            return converter.convert(value, target)
        except (ValueError, ArithmeticError) as exception:
            raise ConversionError(
                "cannot convert %r to %s" % (value, target.__qualname__),
                value=value,
                target=target,
            ) from exception


class ObjectToString(Converter[object, str]):
    def convert(self, source, target, /):
        return str(source)


class StringToBoolean(Converter[str, bool]):
    TRUE = frozenset({"true", "on", "yes", "y", "1"})
    FALSE = frozenset({"false", "off", "no", "n", "0"})

    def convert(self, source, target, /):
        value = source.strip().lower()
        if value in self.TRUE:
            return True
        if value in self.FALSE:
            return False
        raise ConversionError("invalid boolean value %r" % source, value=source, target=target)


class StringToNumber(Converter[str, numbers.Number]):
    # abstract numeric targets parse into these concrete types
    ABSTRACT = {
        numbers.Number: decimal.Decimal,
        numbers.Complex: complex,
        numbers.Real: float,
        numbers.Rational: fractions.Fraction,
        numbers.Integral: int,
    }

    def convert(self, source, target, /):
        value = source.strip()
        factory = self.ABSTRACT.get(target, target)
        try:
            return factory(value)
        except (ValueError, TypeError, ArithmeticError) as exception:
            raise ConversionError(
                "cannot convert %r to %s" % (source, target.__qualname__),
                value=source,
                target=target,
            ) from exception


class StringToEnum(Converter[str, enum.Enum]):
    def convert(self, source, target, /):
        try:
            return target[source]
        except KeyError:
            raise ConversionError(
                "could not convert value %r to any of the possible values: %s" % (
                    source, ", ".join(target.__members__)
                ),
                value=source,
                target=target,
            ) from None


class StringToObject(Converter[str, object]):
    def convert(self, source, target, /):
        if isinstance(inspect.getattr_static(target, "valueof", None), (staticmethod, classmethod)):
            factory = target.valueof
        elif _accepts_text(target):
            factory = target
        else:
            raise ConversionUnsupportedError(
                "no static valueof(str) method or single-string constructor exists on %s" % target.__qualname__,
                source=type(source),
                target=target,
                hint="add a valueof(text) classmethod to %s or register a converter" % target.__qualname__,
            )
        try:
            return factory(source)
        except Exception as exception:
            raise ConversionError(
                "cannot convert %r to %s" % (source, target.__qualname__),
                value=source,
                target=target,
            ) from exception


def _accepts_text(target):
    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError):
        # no metadata (some builtins); let the call decide
        return True
    try:
        signature.bind("")
    except TypeError:
        return False
    return True


def builtins():
    """fresh instances of the built-in converters, in registration order."""
    return (
        StringToEnum(),
        StringToObject(),
        ObjectToString(),
        StringToNumber(),
        StringToBoolean(),
    )


__all__ = (
    "FALLBACK",
    "Converter",
    "Conversion",
    "capabilities",
    "distance",
    "builtins",
    "ObjectToString",
    "StringToBoolean",
    "StringToNumber",
    "StringToEnum",
    "StringToObject",
)
