# python
"""
Parse engine tests (Scan over normalized tokens).

Scope
- Value extraction per arity, positionals, literal mode.
- Unknown-token bookkeeping and missing required values.

Conventions
- Test method names follow CamelCase per project convention.
- Scans are fed already-normalized tokens; no value resolution happens here.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from pennant import Option, Registry, Scan, Assignment
from pennant.faults import MissingArgumentError
from pennant.utils import Unset


def scan(tokens, *flags):
    s = Scan(tokens, Registry([Option(flag) for flag in flags]))
    return [(a.option.long, a.value) for a in s], s


class TestScan(TestCase):

    def testRequiredValueIsConsumed(self):
        assignments, s = scan(["--chdir", "/tmp", "file"], "-c, --chdir <path>")
        self.assertEqual(assignments, [("--chdir", "/tmp")])
        self.assertEqual(s.positionals, ["file"])

    def testRequiredValueMayLookLikeAFlag(self):
        assignments, _ = scan(["-k", "-5"], "-k, --known <v>")
        self.assertEqual(assignments, [("--known", "-5")])

    def testMissingRequiredValueRaises(self):
        with self.assertRaises(MissingArgumentError) as context:
            scan(["--known"], "-k, --known <v>")
        self.assertEqual(str(context.exception), "option '-k, --known <v>' argument missing")

    def testOptionalValueIsConsumed(self):
        assignments, _ = scan(["--cheese", "brie"], "-c, --cheese [type]")
        self.assertEqual(assignments, [("--cheese", "brie")])

    def testOptionalValueSkipsFlags(self):
        assignments, s = scan(["--cheese", "--pepper"], "-c, --cheese [type]", "-p, --pepper")
        self.assertEqual(assignments, [("--cheese", None), ("--pepper", Unset)])

    def testOptionalValueAcceptsLoneDash(self):
        assignments, _ = scan(["--cheese", "-"], "-c, --cheese [type]")
        self.assertEqual(assignments, [("--cheese", "-")])

    def testOptionalValueAtEnd(self):
        assignments, _ = scan(["--cheese"], "-c, --cheese [type]")
        self.assertEqual(assignments, [("--cheese", None)])

    def testFlagCarriesNoValue(self):
        assignments, _ = scan(["-p", "file"], "-p, --pepper")
        self.assertEqual(assignments, [("--pepper", Unset)])

    def testRepeatedOccurrencesAreAllReported(self):
        assignments, _ = scan(["-p", "-p"], "-p, --pepper")
        self.assertEqual(len(assignments), 2)

    def testUnknownFlagKeepsItsValue(self):
        assignments, s = scan(["--mystery", "42", "file"])
        self.assertEqual(assignments, [])
        self.assertEqual(s.unknown, ["--mystery", "42"])
        self.assertEqual(s.positionals, ["file"])

    def testUnknownFlagFollowedByFlag(self):
        _, s = scan(["--mystery", "-p"], "-p, --pepper")
        self.assertEqual(s.unknown, ["--mystery"])

    def testUnknownFlagKeepsLoneDash(self):
        _, s = scan(["-x", "-"])
        self.assertEqual(s.unknown, ["-x", "-"])
        self.assertEqual(s.positionals, [])

    def testLiteralModeAfterTerminator(self):
        assignments, s = scan(["a", "--", "-p", "--chdir", "b"], "-p, --pepper", "-c, --chdir <path>")
        self.assertEqual(assignments, [])
        self.assertEqual(s.positionals, ["a", "-p", "--chdir", "b"])

    def testLoneDashIsPositional(self):
        _, s = scan(["-"])
        self.assertEqual(s.positionals, ["-"])

    def testAssignmentFields(self):
        s = Scan(["-p"], Registry([Option("-p, --pepper")]))
        assignment, = list(s)
        self.assertIsInstance(assignment, Assignment)
        self.assertEqual(assignment.token, "-p")

    def testScanIsSingleUse(self):
        s = Scan([], Registry())
        list(s)
        self.assertTrue(s.done)
        with self.assertRaises(RuntimeError):
            list(s)


if __name__ == "__main__":
    unittest.main()
