"""
Tests for the internal helpers.

Scope
- The Unset sentinel: identity, falsiness, copies, pickling, finality.
- nullify, normalize and ordinal.

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from textcmd.utils import *


class UnsetTest(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyButNotNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertEqual(repr(Unset), "Unset")

    def testCopiesPreserveIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinal(self):
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})

    def testNullify(self):
        self.assertIsNone(nullify(Unset))
        self.assertEqual(nullify(Unset, 3), 3)
        self.assertEqual(nullify(0, 3), 0)


class HelpersTest(TestCase):

    def testNormalize(self):
        self.assertEqual(normalize("  dry run "), "dry_run")
        with self.assertRaises(TypeError):
            normalize(None)

    def testOrdinal(self):
        self.assertEqual(
            [ordinal(n) for n in (1, 2, 10, 11, 12, 13, 21, 22, 23, 101, 111)],
            ["first", "second", "tenth", "11th", "12th", "13th", "21st", "22nd", "23rd", "101st", "111th"]
        )

    def testViewFreezesContainers(self):
        class Holder:
            items = view("items")
            table = view("table")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        with self.assertRaises(TypeError):
            holder.table["b"] = 2
        with self.assertRaises(AttributeError):
            holder.items = ()


if __name__ == "__main__":
    unittest.main()
