"""
Tests for the internal helpers (Unset sentinel, coalesce, rename, mirror, ordinal).

This module verifies semantic guarantees of the `Unset` sentinel:
- Singleton identity (single instance per interpreter process).
- Falsy semantics distinct from None.
- Copying, deep copying and pickling preserve identity.
- Finality (type cannot be subclassed).
"""
import copy
import pickle
import unittest
from threading import Thread, Lock
from unittest import TestCase

from argscan.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsyButNotNone(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNotNone(Unset)
        self.assertNotEqual(Unset, None)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testUnion(self) -> None:
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("x", Unset | str)
        self.assertNotIsInstance(None, str | Unset)

    def testCopy(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testPickle(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testThreadSafety(self) -> None:
        """
        Concurrent construction attempts all yield the same instance.
        """
        instances = []
        lock = Lock()

        def build():
            instance = UnsetType()
            with lock:
                instances.append(instance)

        threads = [Thread(target=build) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertTrue(all(instance is Unset for instance in instances))

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            class Sub(UnsetType):
                pass


class CoalesceTest(TestCase):
    def testReplacesUnset(self) -> None:
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testKeepsFalsyValues(self) -> None:
        for value in (None, "", 0, False):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):
    def testDirectForm(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testDecoratorForm(self) -> None:
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")

    def testRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(print, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename("name")(1)


class MirrorTest(TestCase):
    def testReadOnlyReference(self) -> None:
        class Holder:
            value = mirror("value")

            def __init__(self, value):
                self._value = value

        backing = []
        holder = Holder(backing)
        self.assertIs(holder.value, backing)
        with self.assertRaises(AttributeError):
            holder.value = []

    def testRejectsNonString(self) -> None:
        with self.assertRaises(TypeError):
            mirror(1)


class OrdinalTest(TestCase):
    def testWords(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(2), "second")
        self.assertEqual(ordinal(10), "tenth")

    def testSuffixes(self) -> None:
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(13), "13th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(102), "102nd")
        self.assertEqual(ordinal(111), "111th")

    def testRejectsInvalid(self) -> None:
        with self.assertRaises(TypeError):
            ordinal(True)
        with self.assertRaises(TypeError):
            ordinal(1.0)
        with self.assertRaises(ValueError):
            ordinal(0)


if __name__ == "__main__":
    unittest.main()
