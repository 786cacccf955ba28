"""
Placeholder descriptor tests.

Scope
- Validate name/annotation/default handling at construction time.
- Validate conversion, optionality and textual rendering.

Conventions
- Test method names follow CamelCase per project convention.
- Only the public attributes of Placeholder are inspected.
"""
from __future__ import annotations

import unittest
from unittest import TestCase

from rollcall.arguments import Placeholder
from rollcall.checkers import CHECKERS
from rollcall.utils import Unset


class TestPlaceholderConstruction(TestCase):

    def testDefaultsToString(self):
        name = Placeholder("name")
        self.assertEqual(name.name, "name")
        self.assertEqual(name.type, "string")
        self.assertIsNone(name.annotation)
        self.assertIs(name.checker, CHECKERS["string"])
        self.assertIs(name.default, Unset)
        self.assertFalse(name.optional)

    def testEmptyAnnotationMeansNone(self):
        self.assertIsNone(Placeholder("name", "").annotation)

    def testKnownAnnotation(self):
        to = Placeholder("to", "int")
        self.assertEqual(to.type, "int")
        self.assertEqual(to.annotation, "int")
        self.assertIs(to.checker, CHECKERS["int"])

    def testUnknownAnnotationFallsBackToString(self):
        size = Placeholder("size", "integer")
        self.assertEqual(size.type, "string")
        self.assertEqual(size.annotation, "integer")
        self.assertEqual(size("12"), "12")

    def testDefaultIsConvertedEagerly(self):
        double = Placeholder("double", "bool", "false")
        self.assertTrue(double.optional)
        self.assertIs(double.default, False)

        ratio = Placeholder("ratio", "float", "0.5")
        self.assertEqual(ratio.default, 0.5)

    def testFalsyDefaultStillOptional(self):
        self.assertTrue(Placeholder("count", "int", "0").optional)
        self.assertTrue(Placeholder("label", None, "x").optional)

    def testInvalidDefaultRaises(self):
        with self.assertRaises(ValueError) as context:
            Placeholder("n", "int", "abc")
        self.assertIn("'n'", str(context.exception))
        self.assertIn("int", str(context.exception))
        self.assertIn("'abc'", str(context.exception))

    def testInvalidName(self):
        for name in ("", "a-b", "two words", "é"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Placeholder(name)
        with self.assertRaises(TypeError):
            Placeholder(1)

    def testInvalidAnnotationOrLiteralType(self):
        with self.assertRaises(TypeError):
            Placeholder("n", 1)
        with self.assertRaises(TypeError):
            Placeholder("n", "int", 1)

    def testCustomTypes(self):
        table = {"string": str, "upper": str.upper}
        shout = Placeholder("shout", "upper", "hi", types=table)
        self.assertEqual(shout.type, "upper")
        self.assertEqual(shout.default, "HI")
        self.assertEqual(shout("abc"), "ABC")

    def testNonCallableChecker(self):
        with self.assertRaises(TypeError):
            Placeholder("n", "broken", types={"string": str, "broken": 42})


class TestPlaceholderBehavior(TestCase):

    def testCallConverts(self):
        self.assertEqual(Placeholder("to", "int")("3"), 3)
        with self.assertRaises(ValueError):
            Placeholder("to", "int")("x")

    def testAttributesAreReadOnly(self):
        placeholder = Placeholder("to", "int")
        with self.assertRaises(AttributeError):
            placeholder.name = "other"

    def testStrRendersFragment(self):
        self.assertEqual(str(Placeholder("name")), "<name>")
        self.assertEqual(str(Placeholder("to", "int")), "<to:int>")
        self.assertEqual(str(Placeholder("n", "int", "007")), "<n:int=7>")

    def testRepr(self):
        self.assertEqual(
            repr(Placeholder("to", "int")),
            "placeholder(name='to', type='int', annotation='int', default=Unset)",
        )

    def testRichRepr(self):
        fields = dict(Placeholder("double", "bool", "false").__rich_repr__())
        self.assertEqual(fields, {"name": "double", "type": "bool", "annotation": "bool", "default": False})


if __name__ == "__main__":
    unittest.main()
