"""
Chains module behavioral tests (positional parser chain and default registry).

Scope
- Validate positional() parser factories and their arity matching.
- Validate ParserChain ordering, first-match semantics and result validation.
- Validate the process-wide default chain and register().

Conventions
- Test method names follow CamelCase per project convention.
- Mutations of the process-wide chain are always undone via addCleanup.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from keydefs.chains import ParserChain, positional, parsers, register


class TestPositionalFactory(TestCase):
    """Behavioral tests for positional(*names)."""

    def testSingleNameMatchesOneValue(self):
        parser = positional("keymaps")
        self.assertEqual(parser(("global",)), {"keymaps": "global"})
        self.assertIsNone(parser(()))
        self.assertIsNone(parser(("a", "b")))

    def testSeveralNamesMatchInOrder(self):
        parser = positional("keymaps", "package")
        self.assertEqual(parser(("global", "evil")), {"keymaps": "global", "package": "evil"})

    def testParserHasReadableName(self):
        self.assertEqual(positional("keymaps", "package").__name__, "positional[keymaps,package]")

    def testRequiresNames(self):
        with self.assertRaises(TypeError):
            positional()

    def testRejectsDuplicateNames(self):
        with self.assertRaises(ValueError):
            positional("keymaps", "keymaps")

    def testRejectsEmptyNames(self):
        with self.assertRaises(TypeError):
            positional("")


class TestParserChain(TestCase):
    """Behavioral tests for ParserChain."""

    def testFirstMatchWins(self):
        chain = ParserChain(lambda args: {"first": args}, lambda args: {"second": args})
        self.assertEqual(chain.convert(("x",)), {"first": ("x",)})

    def testDecliningParsersAreSkipped(self):
        chain = ParserChain(positional("keymaps", "package"), positional("keymaps"))
        self.assertEqual(chain.convert(["m"]), {"keymaps": "m"})

    def testAllDeclineReturnsNone(self):
        chain = ParserChain(positional("keymaps"))
        self.assertIsNone(chain.convert(("a", "b", "c")))

    def testEmptyMappingIsAMatch(self):
        chain = ParserChain(lambda args: {}, positional("keymaps"))
        self.assertEqual(chain.convert(("m",)), {})

    def testNonMappingResultRejected(self):
        chain = ParserChain(lambda args: ["keymaps"])
        with self.assertRaises(TypeError):
            chain.convert(("m",))

    def testConvertReturnsFreshDict(self):
        shared = {"keymaps": "m"}
        chain = ParserChain(lambda args: shared)
        result = chain.convert(("m",))
        result["extra"] = True
        self.assertNotIn("extra", shared)

    def testRegisterFirstPrepends(self):
        chain = ParserChain(positional("keymaps"))
        special = chain.register(lambda args: {"states": args[0]}, first=True)
        self.assertIs(chain.parsers[0], special)
        self.assertEqual(chain.convert(("normal",)), {"states": "normal"})

    def testRegisterRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            ParserChain().register("keymaps")  # type: ignore[arg-type]

    def testUnregisterUnknownParser(self):
        with self.assertRaises(LookupError):
            ParserChain().unregister(positional("keymaps"))

    def testCopyIsIndependent(self):
        chain = ParserChain(positional("keymaps"))
        clone = chain.copy()
        clone.register(positional("keymaps", "package"))
        self.assertEqual(len(chain), 1)
        self.assertEqual(len(clone), 2)


class TestDefaultChain(TestCase):
    """Behavioral tests for the process-wide chain."""

    def testDefaultParsesSingleKeymap(self):
        self.assertEqual(parsers.convert(("global",)), {"keymaps": "global"})
        self.assertIsNone(parsers.convert(("global", "evil")))

    def testRegisterAppendsToDefaultChain(self):
        parser = register(positional("keymaps", "package"))
        self.addCleanup(parsers.unregister, parser)
        self.assertIs(parsers.parsers[-1], parser)
        self.assertEqual(parsers.convert(("global", "evil")), {"keymaps": "global", "package": "evil"})


if __name__ == "__main__":
    unittest.main()
