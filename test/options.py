"""
Options module behavioral tests (left-biased merging).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from types import MappingProxyType
from unittest import TestCase

from keydefs.options import merge


class TestMerge(TestCase):
    """Behavioral tests for merge(primary, secondary)."""

    def testPrimaryWinsOnCollision(self):
        self.assertEqual(merge({"keymaps": "local"}, {"keymaps": "global"}), {"keymaps": "local"})

    def testMissingKeysComeFromSecondary(self):
        merged = merge({"keymaps": "local"}, {"keymaps": "global", "prefix": "C-c"})
        self.assertEqual(merged, {"keymaps": "local", "prefix": "C-c"})
        self.assertEqual(list(merged), ["keymaps", "prefix"])

    def testIdempotent(self):
        options = {"keymaps": "m", "prefix": "C-c"}
        self.assertEqual(merge(options, options), options)

    def testDisjointMapsCommute(self):
        left, right = {"keymaps": "m"}, {"prefix": "C-c"}
        self.assertEqual(merge(left, right), merge(right, left))

    def testInputsAreNotMutated(self):
        primary, secondary = {"keymaps": "m"}, {"prefix": "C-c"}
        merged = merge(primary, secondary)
        self.assertIsNot(merged, primary)
        self.assertEqual(primary, {"keymaps": "m"})
        self.assertEqual(secondary, {"prefix": "C-c"})

    def testValuesAreSharedByReference(self):
        keymaps = ["m1", "m2"]
        self.assertIs(merge({"keymaps": keymaps}, {})["keymaps"], keymaps)

    def testAcceptsReadOnlyMappings(self):
        merged = merge(MappingProxyType({"keymaps": "m"}), MappingProxyType({"prefix": "C-c"}))
        self.assertEqual(merged, {"keymaps": "m", "prefix": "C-c"})

    def testRejectsNonMappings(self):
        with self.assertRaises(TypeError):
            merge([("keymaps", "m")], {})  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
