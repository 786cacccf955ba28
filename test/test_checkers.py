"""
Type checker tests (string, bool, int, float, and registration).

Scope
- Validate the literal forms every built-in checker accepts and rejects.
- Validate range handling (64-bit ints, float overflow).
- Validate checker() registration and resolve() fallbacks.

Conventions
- Test method names follow CamelCase per project convention.
"""
from __future__ import annotations

import math
import unittest
from unittest import TestCase

from rollcall.checkers import CHECKERS, INT_MAX, INT_MIN, checker, resolve


class TestBuiltinCheckers(TestCase):

    def testStringIsIdentity(self):
        for value in ("", "Ada", " spaced ", "123"):
            self.assertEqual(CHECKERS["string"](value), value)

    def testBoolAcceptsCanonicalLiterals(self):
        for value in ("1", "t", "T", "TRUE", "true", "True"):
            self.assertIs(CHECKERS["bool"](value), True)
        for value in ("0", "f", "F", "FALSE", "false", "False"):
            self.assertIs(CHECKERS["bool"](value), False)

    def testBoolRejectsOtherForms(self):
        for value in ("yes", "no", "tRUE", "", " true", "2"):
            with self.subTest(value=value), self.assertRaises(ValueError):
                CHECKERS["bool"](value)

    def testIntAcceptsSignedDecimal(self):
        self.assertEqual(CHECKERS["int"]("42"), 42)
        self.assertEqual(CHECKERS["int"]("-7"), -7)
        self.assertEqual(CHECKERS["int"]("+7"), 7)
        self.assertEqual(CHECKERS["int"]("007"), 7)

    def testIntRejectsNonDecimal(self):
        for value in ("x", "", "1.0", " 1", "1_000", "0x10", "1e3", "-"):
            with self.subTest(value=value), self.assertRaises(ValueError):
                CHECKERS["int"](value)

    def testIntRange(self):
        self.assertEqual(CHECKERS["int"](str(INT_MAX)), INT_MAX)
        self.assertEqual(CHECKERS["int"](str(INT_MIN)), INT_MIN)
        with self.assertRaises(ValueError):
            CHECKERS["int"](str(INT_MAX + 1))
        with self.assertRaises(ValueError):
            CHECKERS["int"](str(INT_MIN - 1))

    def testFloatAcceptsDecimalAndExponent(self):
        self.assertEqual(CHECKERS["float"]("1.5"), 1.5)
        self.assertEqual(CHECKERS["float"](".5"), 0.5)
        self.assertEqual(CHECKERS["float"]("2."), 2.0)
        self.assertEqual(CHECKERS["float"]("-3"), -3.0)
        self.assertEqual(CHECKERS["float"]("1e3"), 1000.0)
        self.assertEqual(CHECKERS["float"]("+2.5E-1"), 0.25)

    def testFloatAcceptsSpecialValues(self):
        self.assertEqual(CHECKERS["float"]("inf"), math.inf)
        self.assertEqual(CHECKERS["float"]("-Infinity"), -math.inf)
        self.assertTrue(math.isnan(CHECKERS["float"]("NaN")))

    def testFloatRejectsMalformed(self):
        for value in ("x", "", ".", "1.2.3", " 1.0", "1_0.0", "e3", "1e"):
            with self.subTest(value=value), self.assertRaises(ValueError):
                CHECKERS["float"](value)

    def testFloatOverflowFails(self):
        with self.assertRaises(ValueError):
            CHECKERS["float"]("1e400")


class TestRegistration(TestCase):

    def testCheckerRegistersIntoTable(self):
        @checker("upper")
        def upper(value):
            return value.upper()

        self.addCleanup(CHECKERS.pop, "upper")
        self.assertIs(CHECKERS["upper"], upper)
        self.assertEqual(resolve("upper"), ("upper", upper))

    def testCheckerValidatesTag(self):
        with self.assertRaises(TypeError):
            checker(1)
        with self.assertRaises(ValueError):
            checker("two words")
        with self.assertRaises(TypeError):
            checker("fine")(42)

    def testResolveFallsBackToString(self):
        self.assertEqual(resolve(None), ("string", CHECKERS["string"]))
        self.assertEqual(resolve(""), ("string", CHECKERS["string"]))
        self.assertEqual(resolve("integer"), ("string", CHECKERS["string"]))

    def testResolveUsesGivenTable(self):
        table = {"string": str, "n": int}
        self.assertEqual(resolve("n", table), ("n", int))
        self.assertEqual(resolve("int", table), ("string", str))


if __name__ == "__main__":
    unittest.main()
