"""
Conversion engine behavioral tests (built-ins, resolution, caching).

Scope
- Validate the built-in converters (boolean, numeric, enum, object, string).
- Validate best-match resolution: target distance first, then source distance,
  then the most recent registration.
- Validate registration faults, cache invalidation and boundary round-trips.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Conversion, Converter, distance, scalars).
"""

import decimal
import enum
import fractions
import numbers
import pathlib
import threading
import unittest
from unittest import TestCase

from gnuish import (
    FALLBACK,
    Conversion,
    ConversionError,
    ConversionUnsupportedError,
    Converter,
    ConverterConfigurationError,
    capabilities,
    distance,
    float32,
    int8,
    int16,
    int32,
    int64,
)


class Color(enum.Enum):
    RED = 1
    GREEN = 2


class Version:
    def __init__(self, major, minor):
        self.major = major
        self.minor = minor

    @classmethod
    def valueof(cls, text):
        major, minor = text.split(".")
        return cls(int(major), int(minor))


class Pair:
    def __init__(self, left, right):
        self.left = left
        self.right = right


class Tag:
    def __init__(self, text):
        self.text = text


class StringToInt(Converter[str, int]):
    def convert(self, source, target, /):
        return int(source) * 10


class StringToNumberish(Converter[str, numbers.Number]):
    def convert(self, source, target, /):
        return -1


class Unparameterized(Converter):
    def convert(self, source, target, /):
        return source


class TestBuiltins(TestCase):
    """Behavioral tests for the default converters."""

    def setUp(self):
        self.conversion = Conversion()

    def testBooleanValues(self):
        self.assertIs(self.conversion.convert("true", bool), True)
        self.assertIs(self.conversion.convert("0", bool), False)
        self.assertIs(self.conversion.convert("YES", bool), True)
        self.assertIs(self.conversion.convert("off", bool), False)

    def testBooleanRejectsUnknown(self):
        with self.assertRaises(ConversionError):
            self.conversion.convert("maybe", bool)

    def testNoneConvertsToNone(self):
        self.assertIsNone(self.conversion.convert(None, int))

    def testNumbers(self):
        self.assertEqual(self.conversion.convert("42", int), 42)
        self.assertEqual(self.conversion.convert("-2.5", float), -2.5)
        self.assertEqual(self.conversion.convert("1.10", decimal.Decimal), decimal.Decimal("1.10"))
        self.assertEqual(self.conversion.convert("3/4", fractions.Fraction), fractions.Fraction(3, 4))
        self.assertEqual(self.conversion.convert("1+2j", complex), 1 + 2j)

    def testAbstractNumberFallsBackToDecimal(self):
        value = self.conversion.convert("12.50", numbers.Number)
        self.assertIsInstance(value, decimal.Decimal)
        self.assertEqual(value, decimal.Decimal("12.50"))

    def testMalformedNumberFails(self):
        with self.assertRaises(ConversionError) as context:
            self.conversion.convert("abc", int)
        self.assertNotIsInstance(context.exception, ConversionUnsupportedError)

    def testEnumByName(self):
        self.assertIs(self.conversion.convert("GREEN", Color), Color.GREEN)

    def testEnumFailureListsMembers(self):
        with self.assertRaises(ConversionError) as context:
            self.conversion.convert("BLUE", Color)
        self.assertIn("RED, GREEN", str(context.exception))

    def testObjectFromValueof(self):
        version = self.conversion.convert("1.2", Version)
        self.assertEqual((version.major, version.minor), (1, 2))

    def testObjectFromConstructor(self):
        self.assertEqual(self.conversion.convert("/tmp", pathlib.Path), pathlib.Path("/tmp"))
        self.assertEqual(self.conversion.convert("x", Tag).text, "x")

    def testObjectWithoutFactoryIsUnsupported(self):
        with self.assertRaises(ConversionUnsupportedError):
            self.conversion.convert("a", Pair)

    def testAnyToString(self):
        self.assertEqual(self.conversion.convert(12, str), "12")
        self.assertEqual(self.conversion.convert("text", str), "text")

    def testNoConverterIsUnsupported(self):
        with self.assertRaises(ConversionUnsupportedError):
            self.conversion.convert(12, int)

    def testTargetMustBeClass(self):
        with self.assertRaises(TypeError):
            self.conversion.convert("1", "int")


class TestScalars(TestCase):
    """Boundary round-trips through the numeric converter."""

    def setUp(self):
        self.conversion = Conversion()

    def testFixedIntegerBoundaries(self):
        for kind in (int8, int16, int32, int64):
            for value in (kind.MIN, kind.MAX, 0):
                with self.subTest(kind=kind.__name__, value=value):
                    converted = self.conversion.convert(str(value), kind)
                    self.assertIsInstance(converted, kind)
                    self.assertEqual(converted, value)

    def testFixedIntegerOverflowFails(self):
        for kind in (int8, int16, int32, int64):
            with self.subTest(kind=kind.__name__):
                with self.assertRaises(ConversionError):
                    self.conversion.convert(str(kind.MAX + 1), kind)
                with self.assertRaises(ConversionError):
                    self.conversion.convert(str(kind.MIN - 1), kind)

    def testFloatBoundaries(self):
        for kind, value in ((float, 1.7976931348623157e308), (float, -1.7976931348623157e308),
                            (float, 5e-324), (float32, float32.MAX), (float32, float32.MIN)):
            with self.subTest(kind=kind.__name__, value=value):
                self.assertEqual(self.conversion.convert(repr(value), kind), value)

    def testFloat32OverflowFails(self):
        with self.assertRaises(ConversionError):
            self.conversion.convert("1e39", float32)

    def testWideIntegers(self):
        value = 2 ** 100
        self.assertEqual(self.conversion.convert(str(value), int), value)
        self.assertEqual(self.conversion.convert(str(-value), int), -value)


class TestResolution(TestCase):
    """Behavioral tests for best-match resolution and the registry."""

    def testDistance(self):
        self.assertEqual(distance(int, int), 0)
        self.assertEqual(distance(bool, int), 1)
        self.assertEqual(distance(int, object), FALLBACK)
        self.assertEqual(distance(fractions.Fraction, numbers.Rational), 1)
        self.assertIsNone(distance(str, int))
        # virtual subclass: reachable, but only through ABC registration
        self.assertEqual(distance(int, numbers.Number), len(int.__mro__) - 1)

    def testCapabilities(self):
        self.assertEqual(capabilities(StringToInt()), (str, int))

    def testUnparameterizedConverterIsRejected(self):
        with self.assertRaises(ConverterConfigurationError):
            Conversion(Unparameterized())

    def testNonConverterIsRejected(self):
        with self.assertRaises(ConverterConfigurationError):
            Conversion().register(object())

    def testSpecificTargetWinsRegardlessOfOrder(self):
        for order in ((StringToInt(), StringToNumberish()), (StringToNumberish(), StringToInt())):
            with self.subTest(order=[type(converter).__name__ for converter in order]):
                conversion = Conversion(*order, defaults=False)
                self.assertEqual(conversion.convert("5", int), 50)
                self.assertIsInstance(conversion.lookup(str, int), StringToInt)

    def testLaterRegistrationWinsTies(self):
        conversion = Conversion()
        conversion.register(StringToNumberish())
        self.assertEqual(conversion.convert("5", float), -1)

    def testRegistrationIsIdempotent(self):
        conversion = Conversion(defaults=False)
        conversion.register(StringToInt())
        conversion.register(StringToInt())
        self.assertEqual(len(conversion.converters), 1)

    def testRegistrationInvalidatesCache(self):
        conversion = Conversion()
        self.assertEqual(conversion.convert("5", int), 5)
        conversion.register(StringToInt())
        self.assertEqual(conversion.convert("5", int), 50)
        conversion.unregister(StringToInt)
        self.assertEqual(conversion.convert("5", int), 5)

    def testLookupIsCached(self):
        conversion = Conversion()
        self.assertIs(conversion.lookup(str, int), conversion.lookup(str, int))

    def testConcurrentLookups(self):
        conversion = Conversion()
        results = []

        def work():
            results.append(conversion.convert("7", int))

        threads = [threading.Thread(target=work) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(results, [7] * 8)


if __name__ == "__main__":
    unittest.main()
