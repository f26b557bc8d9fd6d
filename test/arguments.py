"""
Arguments module behavioral tests.

Scope
- Validate Argument declarations: field sanitization and classification into Flag/Option/Positional.
- Validate direct construction of Flag, Option and Positional specs.
- Validate the read-only surface (properties, relation tuples, labels and usage forms).

Conventions
- Test method names follow CamelCase per project convention.
- Never pass explicit None for any parameter; omit instead.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argmatch import Argument, Flag, Option, Positional


class TestArgumentClassification(TestCase):
    """Argument.classify() picks exactly one spec kind."""

    def testIndexClassifiesAsPositional(self):
        spec = Argument("file", help="Input file", index=1, required=True).classify()
        self.assertIsInstance(spec, Positional)
        self.assertEqual(spec.index, 1)
        self.assertTrue(spec.required)
        self.assertEqual(spec.help, "Input file")

    def testTakesValueClassifiesAsOption(self):
        spec = Argument("name", "n", "name", "Your name", takes_value=True, multiple=True).classify()
        self.assertIsInstance(spec, Option)
        self.assertEqual((spec.short, spec.long), ("n", "name"))
        self.assertTrue(spec.multiple)

    def testPlainDeclarationClassifiesAsFlag(self):
        spec = Argument("config", "c", "config", "Sets a custom config file").classify()
        self.assertIsInstance(spec, Flag)
        self.assertFalse(spec.required)

    def testRelationsSurviveClassification(self):
        spec = Argument("debug", "d", excludes=["quiet"], requires=["config"]).classify()
        self.assertEqual(spec.excludes, ("quiet",))
        self.assertEqual(spec.requires, ("config",))

    def testPositionalWithShortRejected(self):
        with self.assertRaises(TypeError):
            Argument("file", "f", index=1).classify()

    def testPositionalWithLongRejected(self):
        with self.assertRaises(TypeError):
            Argument("file", long="file", index=1).classify()

    def testPositionalWithMultipleRejected(self):
        with self.assertRaises(TypeError):
            Argument("file", index=1, multiple=True).classify()

    def testPositionalWithTakesValueRejected(self):
        with self.assertRaises(TypeError):
            Argument("file", index=1, takes_value=True).classify()

    def testOptionWithoutFormsRejected(self):
        with self.assertRaises(TypeError):
            Argument("name", takes_value=True).classify()

    def testRequiredFlagRejected(self):
        with self.assertRaises(TypeError):
            Argument("config", "c", required=True).classify()

    def testFlagWithoutFormsRejected(self):
        with self.assertRaises(TypeError):
            Argument("config").classify()


class TestArgumentSanitization(TestCase):
    """Field-level validation performed on construction."""

    def testNameMustBeString(self):
        with self.assertRaises(TypeError):
            Argument(42)

    def testNameCannotBeEmpty(self):
        with self.assertRaises(ValueError):
            Argument("   ")

    def testNameIsTrimmed(self):
        self.assertEqual(Argument("  config ", "c").name, "config")

    def testNameRejectsSpaces(self):
        with self.assertRaises(ValueError):
            Argument("two words", "c")

    def testHelpDefaultsToNone(self):
        self.assertIsNone(Argument("config", "c").help)

    def testHelpExplicitNoneRejected(self):
        with self.assertRaises(TypeError):
            Argument("config", "c", help=None)

    def testHelpCannotBeEmpty(self):
        with self.assertRaises(ValueError):
            Argument("config", "c", help="  ")

    def testShortMustBeSingleCharacter(self):
        with self.assertRaises(ValueError):
            Argument("config", "cc")

    def testShortCannotBeDash(self):
        with self.assertRaises(ValueError):
            Argument("config", "-")

    def testShortCannotBeEquals(self):
        with self.assertRaises(ValueError):
            Argument("config", "=")

    def testLongCannotStartWithDash(self):
        with self.assertRaises(ValueError):
            Argument("config", long="--config")

    def testLongCannotContainEquals(self):
        with self.assertRaises(ValueError):
            Argument("config", long="con=fig")

    def testIndexMustBePositive(self):
        with self.assertRaises(ValueError):
            Argument("file", index=0)

    def testIndexRejectsBooleans(self):
        with self.assertRaises(TypeError):
            Argument("file", index=True)

    def testBooleanFieldsMustBeBooleans(self):
        with self.assertRaises(TypeError):
            Argument("config", "c", multiple="yes")

    def testRelationsRejectBareString(self):
        with self.assertRaises(TypeError):
            Argument("config", "c", excludes="quiet")

    def testRelationsCannotNameSelf(self):
        with self.assertRaises(ValueError):
            Argument("config", "c", excludes=["config"])
        with self.assertRaises(ValueError):
            Argument("config", "c", requires=["config"])

    def testRelationsCollapseDuplicatesKeepingOrder(self):
        argument = Argument("config", "c", excludes=["b", "a", "b"])
        self.assertEqual(argument.excludes, ("b", "a"))


class TestSpecs(TestCase):
    """Direct construction of specs and their read-only surface."""

    def testFlagNeedsAForm(self):
        with self.assertRaises(TypeError):
            Flag("verbose")

    def testFlagIsNeverRequired(self):
        self.assertFalse(Flag("verbose", "V").required)

    def testOptionNeedsAForm(self):
        with self.assertRaises(TypeError):
            Option("name")

    def testPositionalNeedsValidIndex(self):
        with self.assertRaises(TypeError):
            Positional("file", "1")

    def testLabelPrefersLongForm(self):
        self.assertEqual(Flag("verbose", "V", "verbose").label, "--verbose")
        self.assertEqual(Flag("verbose", "V").label, "-V")
        self.assertEqual(Positional("file", 1).label, "<file>")

    def testOptionUsageForms(self):
        self.assertEqual(Option("name", "n", "name").usage, "-n <name>")
        self.assertEqual(Option("name", long="name").usage, "--name=<name>")

    def testSpecsAreReadOnly(self):
        flag = Flag("verbose", "V")
        with self.assertRaises(AttributeError):
            flag.name = "other"  # NOQA: read-only property

    def testRelationsAreTuples(self):
        option = Option("name", "n", excludes={"x"}, requires=["y"])
        self.assertIsInstance(option.excludes, tuple)
        self.assertIsInstance(option.requires, tuple)

    def testReprUsesTypename(self):
        self.assertTrue(repr(Flag("verbose", "V")).startswith("flag(name='verbose'"))
        self.assertTrue(repr(Positional("file", 1)).startswith("positional("))


if __name__ == "__main__":
    unittest.main()
