"""
Tests for the shared helpers.

This module verifies the guarantees of the `Unset` sentinel and of the small
helpers built around it:
- Singleton identity, falsy semantics and representation.
- Copying, deep copying, pickling and thread safety of the sentinel.
- Finality (type cannot be subclassed).
- coalesce(), rename(), mirror() and ordinal() behaviour.
"""
import copy
import pickle
import unittest
from threading import Lock, Thread
from types import MappingProxyType
from unittest import TestCase

from flint.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def setUp(self) -> None:
        self.unset: UnsetType = UnsetType()

    def testSingleton(self) -> None:
        self.assertIs(self.unset, UnsetType())
        self.assertIs(Unset, self.unset)

    def testFalsyButDistinct(self) -> None:
        """
        Unset is falsy, yet never equal to the other falsy values.
        """
        self.assertFalse(self.unset)
        for value in (None, 0, "", False):
            with self.subTest(value=value):
                self.assertNotEqual(self.unset, value)

    def testRepr(self) -> None:
        self.assertEqual(repr(self.unset), "Unset")

    def testCopyAndPickle(self) -> None:
        self.assertIs(copy.copy(self.unset), self.unset)
        self.assertIs(copy.deepcopy(self.unset), self.unset)
        self.assertIs(pickle.loads(pickle.dumps(self.unset)), self.unset)

    def testUnionWithTypes(self) -> None:
        # isinstance() checks against "str | Unset" are used across the package
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("name", Unset | str)

    def testThreadSafety(self) -> None:
        """
        Concurrent construction attempts always observe the same instance.
        """
        lock = Lock()
        seen = set()

        def worker():
            instance = UnsetType()
            with lock:
                seen.add(id(instance))

        threads = [Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(seen, {id(self.unset)})

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Sub", (UnsetType,), {})


class HelpersTest(TestCase):
    """
    Test suite for coalesce(), rename(), mirror() and ordinal().
    """

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)

    def testRenameFunctionForm(self) -> None:
        def original():
            pass

        self.assertIs(rename(original, "renamed"), original)
        self.assertEqual(original.__name__, "renamed")
        self.assertEqual(original.__qualname__, "renamed")

    def testRenameDecoratorForm(self) -> None:
        @rename("renamed")
        def original():
            pass

        self.assertEqual(original.__name__, "renamed")

    def testRenameChecks(self) -> None:
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(len, 1)
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(1)

    def testMirror(self) -> None:
        class Holder:
            items = mirror("items")
            table = mirror("table")
            tags = mirror("tags")
            name = mirror("name")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}
                self._tags = {"x"}
                self._name = "holder"

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertIsInstance(holder.table, MappingProxyType)
        self.assertEqual(holder.tags, frozenset({"x"}))
        self.assertEqual(holder.name, "holder")
        with self.assertRaises(AttributeError):
            holder.name = "other"
        with self.assertRaises(TypeError):
            mirror(1)

    def testOrdinal(self) -> None:
        cases = {
            1: "first",
            3: "third",
            10: "tenth",
            11: "11th",
            12: "12th",
            13: "13th",
            21: "21st",
            22: "22nd",
            23: "23rd",
            101: "101st",
            111: "111th",
            112: "112th",
        }
        for number, label in cases.items():
            with self.subTest(number=number):
                self.assertEqual(ordinal(number), label)


if __name__ == "__main__":
    unittest.main()
