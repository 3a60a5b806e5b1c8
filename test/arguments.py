"""
Arguments module behavioral tests (declarations, kinds, matching).

Scope
- Validate Kind resolution and kind defaults.
- Validate Option/Usage/Parameters construction, normalization and rejection rules.
- Validate descriptor binding (field names, per-instance values, read-only metadata).
- Validate alias matching (joined text first, then single aliases, first declared wins).

Conventions
- Test method names follow CamelCase per project convention.
- Never pass explicit None for 'descr'; omit instead.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argbinder import Configuration, Kind, Option, Usage, Parameters, Argument, match


class TestKind(TestCase):
    """Kind lookup by Python type and kind defaults."""

    def testKindFromType(self):
        self.assertIs(Kind(bool), Kind.BOOLEAN)
        self.assertIs(Kind(int), Kind.INTEGER)
        self.assertIs(Kind(str), Kind.STRING)
        self.assertIs(Kind(list), Kind.STRINGS)

    def testKindDefaults(self):
        self.assertIs(Kind.BOOLEAN.default, False)
        self.assertEqual(Kind.INTEGER.default, 0)
        self.assertIsNone(Kind.STRING.default)
        self.assertEqual(Kind.STRINGS.default, ())


class TestOption(TestCase):
    """Behavioral tests for Option declarations."""

    def testAliasesAreSplitAndTrimmed(self):
        o = Option(" name , n ")
        self.assertEqual(o.aliases, ["name", "n"])
        self.assertEqual(o.text, "name,n")

    def testQuestionMarkAlias(self):
        o = Option("h,?")
        self.assertEqual(o.aliases, ["h", "?"])

    def testEmptyAliasRejected(self):
        with self.assertRaises(ValueError):
            Option("name,,n")

    def testBlankAliasesRejected(self):
        with self.assertRaises(ValueError):
            Option("  ")

    def testAliasWithSpaceRejected(self):
        with self.assertRaises(ValueError):
            Option("dry run")

    def testDuplicateAliasRejected(self):
        with self.assertRaises(ValueError):
            Option("v,verbose,v")

    def testAliasesMustBeString(self):
        with self.assertRaises(TypeError):
            Option(["v", "verbose"])

    def testDefaultTypeIsString(self):
        o = Option("name")
        self.assertIs(o.kind, Kind.STRING)
        self.assertIsNone(o.default)

    def testUnsupportedTypeRejected(self):
        with self.assertRaises(TypeError):
            Option("ratio", type=float)

    def testBooleanDefaultMustBeBool(self):
        with self.assertRaises(TypeError):
            Option("v", type=bool, default=1)

    def testIntegerDefaultRejectsBool(self):
        with self.assertRaises(TypeError):
            Option("r", type=int, default=True)

    def testStringDefaultMustBeString(self):
        with self.assertRaises(TypeError):
            Option("name", default=3)

    def testListDefaultRejectsPlainString(self):
        with self.assertRaises(TypeError):
            Option("tags", type=list, default="a,b")

    def testListDefaultRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            Option("tags", type=list, default=["a", 1])

    def testListDefaultIsFrozenCopy(self):
        source = ["a", "b"]
        o = Option("tags", type=list, default=source)
        source.append("c")
        self.assertEqual(o.default, ["a", "b"])

    def testDescrDefaultsToNone(self):
        self.assertIsNone(Option("v", type=bool).descr)

    def testDescrIsTrimmed(self):
        self.assertEqual(Option("v", type=bool, descr="  be loud ").descr, "be loud")

    def testDescrExplicitNoneRejected(self):
        with self.assertRaises(TypeError):
            Option("v", type=bool, descr=None)

    def testDescrEmptyRejected(self):
        with self.assertRaises(ValueError):
            Option("v", type=bool, descr="   ")

    def testRequiredCoercedToBool(self):
        self.assertIs(Option("name", required=1).required, True)

    def testMetadataIsReadOnly(self):
        o = Option("v", type=bool)
        with self.assertRaises(AttributeError):
            o.required = True

    def testAliasesCopyCannotMutateDeclaration(self):
        o = Option("v,verbose", type=bool)
        o.aliases.append("x")
        self.assertEqual(o.aliases, ["v", "verbose"])

    def testMatchesJoinedTextAndAliases(self):
        o = Option("name,n")
        self.assertTrue(o.matches("name,n"))
        self.assertTrue(o.matches("name"))
        self.assertTrue(o.matches("n"))
        self.assertFalse(o.matches("N"))
        self.assertFalse(o.matches("na"))

    def testReprUsesTypename(self):
        self.assertTrue(repr(Option("v", type=bool)).startswith("option("))
        self.assertTrue(repr(Parameters()).startswith("parameters("))


class TestUsage(TestCase):
    """Behavioral tests for Usage declarations."""

    def testUsageIsStringOptionWithTextDefault(self):
        u = Usage("h,help", "usage: tool")
        self.assertIsInstance(u, Option)
        self.assertIs(u.kind, Kind.STRING)
        self.assertEqual(u.default, "usage: tool")

    def testUsageTextMustBeString(self):
        with self.assertRaises(TypeError):
            Usage("h", 42)


class TestParameters(TestCase):
    """Behavioral tests for Parameters declarations."""

    def testParametersAreStringList(self):
        p = Parameters()
        self.assertIs(p.kind, Kind.STRINGS)
        self.assertEqual(p.default, [])
        self.assertFalse(p.required)

    def testParametersDescr(self):
        self.assertEqual(Parameters(descr="input files").descr, "input files")


class TestBinding(TestCase):
    """Descriptor behavior once declarations are attached to a configuration."""

    def testArgumentIsAbstract(self):
        with self.assertRaises(TypeError):
            Argument()

    def testFieldNameIsRecorded(self):
        class Settings(Configuration):
            verbose = Option("v", type=bool)

        self.assertEqual(Settings.verbose.field, "verbose")

    def testClassAccessReturnsDeclaration(self):
        class Settings(Configuration):
            verbose = Option("v", type=bool)

        self.assertIsInstance(Settings.verbose, Option)

    def testInstanceAccessReturnsValue(self):
        class Settings(Configuration):
            verbose = Option("v", type=bool, default=True)
            files = Parameters()

        s = Settings()
        self.assertIs(s.verbose, True)
        self.assertEqual(s.files, [])
        s.verbose = False
        self.assertIs(s.verbose, False)

    def testListDefaultsAreNotShared(self):
        class Settings(Configuration):
            tags = Option("tags", type=list, default=["a"])

        first, second = Settings(), Settings()
        first.tags.append("b")
        self.assertEqual(second.tags, ["a"])

    def testDeclarationBoundTwiceRejected(self):
        shared = Option("v", type=bool)
        with self.assertRaises(TypeError):
            class Settings(Configuration):
                first = shared
                second = shared


class TestMatch(TestCase):
    """match() over a declaration sequence."""

    def testFirstDeclaredWins(self):
        first = Option("v,verbose", type=bool)
        second = Option("v,version", type=bool)
        self.assertIs(match("v", (first, second)), first)
        self.assertIs(match("version", (first, second)), second)

    def testNoMatchReturnsNone(self):
        self.assertIsNone(match("x", (Option("v", type=bool),)))
        self.assertIsNone(match("v", ()))


if __name__ == "__main__":
    unittest.main()
