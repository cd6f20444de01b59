"""
Table construction, lookup and help-printing tests.
"""
from __future__ import annotations

import io
import unittest
import warnings
from unittest import TestCase

from rich.text import Text

from argscan import (
    Table,
    describe,
    Slot,
    Unary,
    Keyword,
    Positional,
    FaultCode,
    UnreachablePositionalWarning,
)


class TestTableConstruction(TestCase):
    def testEmptyTable(self):
        table = Table()
        self.assertEqual(len(table), 0)
        self.assertEqual(list(table), [])

    def testRejectsNonDescriptors(self):
        with self.assertRaises(TypeError):
            Table(Unary("--foo"), "--bar")

    def testRejectsDuplicateNames(self):
        with self.assertRaises(ValueError):
            Table(Unary("--foo"), Keyword("--foo"))

    def testRejectsNameClashingWithNegation(self):
        with self.assertRaises(ValueError):
            Table(Unary("--foo", negation="--no-foo"), Unary("--no-foo"))

    def testRejectsDuplicateFlags(self):
        with self.assertRaises(ValueError):
            Table(Unary("--foo", flag="f"), Unary("--fast", flag="f"))

    def testPositionalsNeedNoSpelling(self):
        table = Table(Positional(Slot()), Positional(Slot()))
        self.assertEqual(len(table.positionals), 2)

    def testImmutable(self):
        table = Table(Unary("--foo"))
        with self.assertRaises(AttributeError):
            table.extra = 1
        with self.assertRaises(AttributeError):
            del table._arguments


class TestTableSequence(TestCase):
    def setUp(self):
        self.foo = Unary("--foo", flag="f", negation="--no-foo")
        self.key = Keyword("--key")
        self.first = Positional(Slot())
        self.table = Table(self.foo, self.key, self.first)

    def testIndexingAndIteration(self):
        self.assertEqual(len(self.table), 3)
        self.assertIs(self.table[0], self.foo)
        self.assertIs(self.table[-1], self.first)
        self.assertEqual(list(self.table), [self.foo, self.key, self.first])
        self.assertIn(self.key, self.table)

    def testSliceIsTable(self):
        head = self.table[:2]
        self.assertIsInstance(head, Table)
        self.assertEqual(list(head), [self.foo, self.key])

    def testKindViews(self):
        self.assertEqual(self.table.unaries, (self.foo,))
        self.assertEqual(self.table.keywords, (self.key,))
        self.assertEqual(self.table.positionals, (self.first,))

    def testLookup(self):
        self.assertEqual(self.table.lookup("--foo"), (self.foo, False))
        self.assertEqual(self.table.lookup("--no-foo"), (self.foo, True))
        self.assertEqual(self.table.lookup("--key"), (self.key, False))
        self.assertEqual(self.table.lookup("--fo"), (None, False))
        self.assertEqual(self.table.lookup("-f"), (None, False))

    def testFlagged(self):
        self.assertIs(self.table.flagged("f"), self.foo)
        self.assertIsNone(self.table.flagged("x"))

    def testRepr(self):
        self.assertTrue(repr(self.table).startswith("table(unary(name='--foo'"))


class TestReachability(TestCase):
    def testWarnsForShadowedPositional(self):
        with self.assertWarns(UnreachablePositionalWarning) as context:
            Table(Positional(Slot()), Positional(), Positional(Slot()))
        self.assertIs(context.warning.code, FaultCode.UNREACHABLE_POSITIONAL)
        self.assertEqual(context.warning.options["index"], 2)

    def testSlicingDoesNotWarnAgain(self):
        with self.assertWarns(UnreachablePositionalWarning):
            table = Table(Unary("--foo"), Positional(), Positional(Slot()))
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            head = table[1:]
        self.assertEqual(caught, [])
        self.assertEqual(len(head), 2)

    def testCatchAllLastIsFine(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            Table(Positional(Slot()), Unary("--foo"), Positional())
        self.assertEqual(caught, [])


class TestDescribe(TestCase):
    def setUp(self):
        self.foo = Slot("YES")
        self.table = Table(
            Unary("--foo", flag="f", negation="--no-foo", slot=self.foo,
                  descr=" -f, --foo    Sets foo.\n --no-foo     Unsets foo."),
            Unary("--quiet"),
            Keyword("--key", descr=" --key <val>  Sets key to val.   "),
            Positional(Slot(), descr=" pos1         [bold]not markup[/bold]"),
        )

    def render(self):
        buffer = io.StringIO()
        describe(self.table, file=buffer)
        return buffer.getvalue()

    def testPrintsInOrderSkippingMissing(self):
        self.assertEqual(self.render(), (
            " -f, --foo    Sets foo.\n"
            " --no-foo     Unsets foo.\n"
            " --key <val>  Sets key to val.\n"
            " pos1         [bold]not markup[/bold]\n"
        ))

    def testIdempotent(self):
        self.assertEqual(self.render(), self.render())
        self.assertEqual(self.foo.value, "YES")

    def testAcceptsRichText(self):
        buffer = io.StringIO()
        describe(Table(Unary("--foo", descr=Text(" --foo  styled", style="bold"))), file=buffer)
        self.assertIn(" --foo  styled", buffer.getvalue())

    def testEmptyTablePrintsNothing(self):
        buffer = io.StringIO()
        describe(Table(), file=buffer)
        self.assertEqual(buffer.getvalue(), "")

    def testRejectsNonTable(self):
        with self.assertRaises(TypeError):
            describe([Unary("--foo")])


if __name__ == "__main__":
    unittest.main()
