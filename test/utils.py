"""
Tests for the internal helpers.

This module verifies:
- Semantic guarantees of the `Unset` sentinel (singleton, falsy, final, unions).
- coalesce() only replacing Unset.
- rename() and mirror() building stable, read-only accessors.
- The Introspective metaclass (typename, mirrored fields, repr).
- Message helpers ordinal() and progname().
"""
import copy
import pickle
import unittest
from types import MappingProxyType
from unittest import TestCase

from argmatch.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` singleton.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(UnsetType(), Unset)

    def testFalsely(self) -> None:
        """
        The sentinel is falsy but not equal to other falsy values.
        """
        self.assertFalse(bool(Unset))
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testUnionWithTypes(self) -> None:
        """
        `str | Unset` builds a union usable with isinstance().
        """
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("name", str | Unset)
        self.assertNotIsInstance(42, str | Unset)

    def testCopyAndPicklePreserveSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinalClass(self) -> None:
        """
        The class is final: attempts to subclass must fail with TypeError.
        """
        with self.assertRaises(TypeError):
            type("unset", (UnsetType,), {})


class HelpersTest(TestCase):

    def testCoalesceReplacesOnlyUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertEqual(coalesce("name", "fallback"), "name")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(Unset))

    def testRenameDirectForm(self) -> None:
        function = rename(lambda: None, "accessor")
        self.assertEqual(function.__name__, "accessor")
        self.assertEqual(function.__qualname__, "accessor")

    def testRenameDecoratorForm(self) -> None:
        @rename("accessor")
        def function():
            pass
        self.assertEqual(function.__name__, "accessor")

    def testRenameRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(42, "name")
        with self.assertRaises(TypeError):
            rename(len, 42)
        with self.assertRaises(TypeError):
            rename()

    def testOrdinalWords(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")

    def testOrdinalSuffixes(self) -> None:
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(113), "113th")

    def testProgname(self) -> None:
        self.assertEqual(progname("/usr/local/bin/tool"), "tool")
        self.assertEqual(progname("tool"), "tool")
        self.assertEqual(progname("bin/"), "bin")
        with self.assertRaises(TypeError):
            progname(42)


class IntrospectiveTest(TestCase):

    def setUp(self) -> None:
        class SampleRecord(metaclass=Introspective):
            __introspectable__ = ("name", "items", "table")

            def __new__(cls, name, items, table):
                self = super().__new__(cls)
                self._name = name
                self._items = items
                self._table = table
                return self

        self.record = SampleRecord("sample", ["a", "b"], {"key": "value"})

    def testTypename(self) -> None:
        self.assertEqual(type(self.record).__typename__, "sample-record")

    def testMirroredFieldsAreReadOnlyViews(self) -> None:
        self.assertEqual(self.record.items, ("a", "b"))
        self.assertIsInstance(self.record.table, MappingProxyType)
        with self.assertRaises(AttributeError):
            self.record.name = "other"  # NOQA: read-only property
        with self.assertRaises(TypeError):
            self.record.table["key"] = "other"  # NOQA: read-only view

    def testRepr(self) -> None:
        self.assertEqual(repr(self.record), "sample-record(name='sample', items=('a', 'b'), table=mappingproxy({'key': 'value'}))")

    def testMirrorRejectsNonStrings(self) -> None:
        with self.assertRaises(TypeError):
            mirror(42)


if __name__ == '__main__':
    unittest.main()
