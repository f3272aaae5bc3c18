"""
Handler declaration tests (command, Option, Default, describe).

Scope
- Validate the descriptors built from live handler classes and instances.
- Validate annotation unwrapping, docstring summaries and default literals.
- Validate declaration faults (duplicate keys, var-args, bad annotations).

Conventions
- Test method names follow CamelCase per project convention.
- Handler classes live at module level so their annotations resolve.
"""

import pathlib
import unittest
from typing import Annotated, Optional
from unittest import TestCase

from gnuish import Default, DescriptorError, Option, command, describe, int8, options


class Files:
    long: bool = Option("l", default=False, descr="use a long listing format")
    width: int = Option("w", long="columns", default=80)
    name = Option()

    @command
    def ls(self, path: pathlib.Path = Default(".")):
        """
        list directory contents.

        :param path: directory to list
        """
        return path

    @command(name="cat")
    def concatenate(self, first: Optional[pathlib.Path], second: Annotated[int8, "meta"] = Default("1"), *, flag=False):
        """Concatenate files. Second sentence."""

    def helper(self):
        pass


class Static:
    @command
    @staticmethod
    def echo(text):
        return text


class Child(Files):
    depth: int = Option("d", default=1)

    @command
    def ls(self, path: str):
        return path


class ClashingShort:
    first: str = Option("x")
    second: str = Option("x")


class Reserved:
    help: bool = Option("x", default=False)

    @command
    def run(self):
        pass


class RenamedReserved:
    trace: bool = Option(long="debug", default=False)


class VarArgs:
    @command
    def run(self, *rest):
        pass


class BadAnnotation:
    @command
    def run(self, value: int | str):
        pass


class Twice:
    @command(name="go")
    def first(self):
        pass

    @command(name="go")
    def second(self):
        pass


class TestDeclarations(TestCase):
    """Behavioral tests for the declaration surface."""

    def testDescribeCommands(self):
        descriptors = {descriptor.command: descriptor for descriptor in describe(Files)}
        self.assertEqual(set(descriptors), {"ls", "cat"})

        ls = descriptors["ls"]
        self.assertEqual(ls.handler, "%s:Files" % __name__)
        self.assertEqual(ls.operation, "ls")
        self.assertEqual(ls.summary, "list directory contents.")
        self.assertEqual(ls.arity, 1)
        (path,) = ls.arguments
        self.assertEqual((path.name, path.type, path.position, path.default, path.summary),
                         ("path", pathlib.Path, 0, ".", "directory to list"))

    def testRenamedCommandAndUnwrappedTypes(self):
        (cat,) = [descriptor for descriptor in describe(Files()) if descriptor.command == "cat"]
        self.assertEqual(cat.operation, "concatenate")
        self.assertEqual([argument.type for argument in cat.arguments], [pathlib.Path, int8])
        self.assertEqual(cat.defaults, (None, "1"))

    def testOptionsAreSharedByCommands(self):
        for descriptor in describe(Files):
            keys = [(option.short, option.long, option.field, option.type) for option in descriptor.options]
            self.assertEqual(keys, [
                ("l", "long", "long", bool),
                ("w", "columns", "width", int),
                (None, "name", "name", str),
            ])

    def testOptionDefaultsAndStorage(self):
        first, second = Files(), Files()
        self.assertEqual(first.width, 80)
        first.width = 120
        self.assertEqual(first.width, 120)
        self.assertEqual(second.width, 80)
        self.assertIsInstance(Files.width, Option)

    def testStaticOperationKeepsFirstParameter(self):
        (echo,) = describe(Static)
        self.assertEqual([argument.name for argument in echo.arguments], ["text"])
        self.assertEqual(echo.arguments[0].type, str)

    def testSubclassOverridesAndInherits(self):
        descriptors = {descriptor.command: descriptor for descriptor in describe(Child)}
        self.assertEqual(set(descriptors), {"ls", "cat"})
        self.assertEqual(descriptors["ls"].arguments[0].type, str)
        self.assertEqual(descriptors["ls"].handler, "%s:Child" % __name__)
        self.assertIn("depth", [option.field for option in descriptors["ls"].options])

    def testClashingShortKeysRaise(self):
        with self.assertRaises(DescriptorError):
            options(ClashingShort)

    def testReservedLongKeysRaise(self):
        with self.assertRaises(DescriptorError):
            describe(Reserved)
        with self.assertRaises(DescriptorError):
            options(RenamedReserved)

    def testVarArgsRaise(self):
        with self.assertRaises(DescriptorError):
            describe(VarArgs)

    def testUnionAnnotationRaises(self):
        with self.assertRaises(DescriptorError):
            describe(BadAnnotation)

    def testDuplicateCommandKeyRaises(self):
        with self.assertRaises(DescriptorError):
            describe(Twice)

    def testOptionShortKeyValidation(self):
        with self.assertRaises(ValueError):
            Option("ab")
        with self.assertRaises(ValueError):
            Option("-")

    def testDefaultMustBeText(self):
        with self.assertRaises(TypeError):
            Default(1)

    def testCommandNameValidation(self):
        with self.assertRaises(ValueError):
            command(name=" ")


if __name__ == "__main__":
    unittest.main()
