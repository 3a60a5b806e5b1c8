"""
Tests for the internal helpers.

This module verifies:
- The Unset sentinel (singleton, falsy, printable, final, usable in unions).
- coalesce() only replacing Unset.
- rename() in both call forms.
- mirror() exposing copies of private containers.
- ordinal() labels used in position-first fault messages.
"""
import unittest
from unittest import TestCase

from argbinder.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)

    def testFalsyAndPrintable(self) -> None:
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnionIsinstance(self) -> None:
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | Unset))
        self.assertFalse(isinstance(1, str | Unset))

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Subset", (UnsetType,), {})


class HelpersTest(TestCase):
    """
    Test suite for coalesce, rename, mirror and ordinal.
    """

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 5), 0)

    def testRenameForms(self) -> None:
        def anonymous():
            pass

        self.assertEqual(rename(anonymous, "named").__name__, "named")

        @rename("decorated")
        def other():
            pass

        self.assertEqual(other.__qualname__, "decorated")

    def testRenameRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(42, "name")
        with self.assertRaises(TypeError):
            rename()

    def testMirrorCopiesContainers(self) -> None:
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ("a", "b")

        holder = Holder()
        self.assertEqual(holder.items, ["a", "b"])
        holder.items.append("c")
        self.assertEqual(holder.items, ["a", "b"])
        with self.assertRaises(AttributeError):
            holder.items = []

    def testOrdinal(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(111), "111th")

    def testOrdinalRejectsBadNumbers(self) -> None:
        with self.assertRaises(TypeError):
            ordinal(True)
        with self.assertRaises(ValueError):
            ordinal(0)


if __name__ == '__main__':
    unittest.main()
