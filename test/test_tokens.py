"""
Tokenizer behavioral tests (GNU-ish argument grammar).

Scope
- Validate option classification: long, short, bundled flags and positionals.
- Validate value slurping, including negative numbers and reserved flags.
- Validate the empty vector and the last-occurrence-wins policy.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (parse, Invocation).
"""

import unittest
from unittest import TestCase

from gnuish import Invocation, parse


class TestTokenizer(TestCase):
    """Behavioral tests for parse()."""

    def testEmptyVectorYieldsEmptyInvocation(self):
        invocation = parse([])
        self.assertEqual(invocation, Invocation())
        self.assertEqual(invocation.command, "")
        self.assertFalse(invocation.shorts)
        self.assertFalse(invocation.longs)
        self.assertEqual(invocation.arguments, ())

    def testCommandNameIsTrimmed(self):
        self.assertEqual(parse(["  ls  "]).command, "ls")

    def testBundledShortFlags(self):
        invocation = parse(["cmd", "-abc"])
        self.assertEqual(dict(invocation.shorts), {"a": "true", "b": "true", "c": "true"})
        self.assertEqual(dict(invocation.longs), {})
        self.assertEqual(invocation.arguments, ())

    def testBundleNeverSlurps(self):
        invocation = parse(["cmd", "-ab", "value"])
        self.assertEqual(dict(invocation.shorts), {"a": "true", "b": "true"})
        self.assertEqual(invocation.arguments, ("value",))

    def testNegativeNumberIsSlurped(self):
        invocation = parse(["cmd", "-n", "-5"])
        self.assertEqual(dict(invocation.shorts), {"n": "-5"})
        self.assertEqual(invocation.arguments, ())

    def testLongOptionWithoutValueIsTrue(self):
        invocation = parse(["cmd", "--flag"])
        self.assertEqual(dict(invocation.longs), {"flag": "true"})

    def testLongOptionSlurpsValue(self):
        invocation = parse(["cmd", "--output", "out.txt", "input.txt"])
        self.assertEqual(dict(invocation.longs), {"output": "out.txt"})
        self.assertEqual(invocation.arguments, ("input.txt",))

    def testOptionBeforeOptionIsTrue(self):
        invocation = parse(["cmd", "-o", "--long", "-x"])
        self.assertEqual(dict(invocation.shorts), {"o": "true", "x": "true"})
        self.assertEqual(dict(invocation.longs), {"long": "true"})

    def testReservedFlagsNeverTakeValues(self):
        invocation = parse(["cmd", "--verbose", "a", "--debug", "b", "--help", "c"])
        self.assertEqual(dict(invocation.longs), {"verbose": "true", "debug": "true", "help": "true"})
        self.assertEqual(invocation.arguments, ("a", "b", "c"))
        self.assertTrue(invocation.verbose)
        self.assertTrue(invocation.debug)
        self.assertTrue(invocation.help)

    def testPositionalsKeepOrder(self):
        invocation = parse(["cmd", "a", "b", "c"])
        self.assertEqual(invocation.arguments, ("a", "b", "c"))

    def testLastOccurrenceWins(self):
        invocation = parse(["cmd", "-o", "first", "-o", "second", "--key", "1", "--key", "2"])
        self.assertEqual(invocation.shorts["o"], "second")
        self.assertEqual(invocation.longs["key"], "2")

    def testLoneDashIsPositional(self):
        invocation = parse(["cmd", "-i", "-", "-"])
        self.assertEqual(dict(invocation.shorts), {"i": "-"})
        self.assertEqual(invocation.arguments, ("-",))

    def testUnknownKeysAreKept(self):
        invocation = parse(["cmd", "--whatever", "x", "-z"])
        self.assertEqual(invocation.longs["whatever"], "x")
        self.assertEqual(invocation.shorts["z"], "true")

    def testInvocationIsImmutable(self):
        invocation = parse(["cmd", "-o", "x"])
        with self.assertRaises(TypeError):
            invocation.shorts["o"] = "y"  # type: ignore[index]

    def testRejectsPlainString(self):
        with self.assertRaises(TypeError):
            parse("cmd -o x")

    def testRejectsNonStringItems(self):
        with self.assertRaises(TypeError):
            parse(["cmd", 1])

    def testAcceptsIterables(self):
        invocation = parse(iter(["cmd", "-v", "1"]))
        self.assertEqual(invocation.shorts["v"], "1")


if __name__ == "__main__":
    unittest.main()
