"""
Definers module behavioral tests (emitting, baked-in defaults, shell mode).

Scope
- Validate that every parsed group reaches the installer once, in stream order.
- Validate baked-in defaults: precedence, reset scoping, derive() and fault positions.
- Validate all-or-nothing installation on malformed streams.
- Validate factory/decorator forms and shell-mode rendering.

Conventions
- Test method names follow CamelCase per project convention.
- Installers are recording functions; nothing touches a real key-dispatch table.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from keydefs import Definer, definer, define, K, S, SEP, RESET, Binding, ParserChain, positional
from keydefs.faults import MissingDefinitionError, UnexpectedTokenError


class TestDefiner(TestCase):
    """Behavioral tests for Definer and its factories."""

    def setUp(self) -> None:
        self.calls = []

        def record(options, bindings):
            self.calls.append((dict(options), bindings))

        self.record = record

    def testInstallsEachGroupInOrder(self):
        define(self.record, S.m1, "a", S.x, RESET, S.m2, "b", S.y)
        self.assertEqual(self.calls, [
            ({"keymaps": S.m1}, (Binding("a", S.x),)),
            ({"keymaps": S.m2}, (Binding("b", S.y),)),
        ])

    def testDefaultsApplyToCallerBindings(self):
        bind = definer(self.record, keymaps=S.global_map)
        bind("a", S.x)
        self.assertEqual(self.calls, [({"keymaps": S.global_map}, (Binding("a", S.x),))])

    def testCallerOptionsWinOverDefaults(self):
        bind = definer(self.record, keymaps=S.global_map, prefix="C-c")
        bind(S.local_map, SEP, "a", S.x)
        self.assertEqual(self.calls, [({"keymaps": S.local_map, "prefix": "C-c"}, (Binding("a", S.x),))])

    def testResetDropsDefaults(self):
        bind = definer(self.record, keymaps=S.global_map)
        bind(K.prefix, "C-c", "a", S.x, RESET, "b", S.y)
        self.assertEqual(self.calls, [
            ({"prefix": "C-c", "keymaps": S.global_map}, (Binding("a", S.x),)),
            ({}, (Binding("b", S.y),)),
        ])

    def testMalformedStreamInstallsNothing(self):
        bind = definer(self.record, keymaps=S.global_map)
        with self.assertRaises(MissingDefinitionError):
            bind("a", S.x, RESET, "b")
        self.assertEqual(self.calls, [])

    def testFaultPositionsIgnoreDefaults(self):
        bind = definer(self.record, keymaps=S.global_map, prefix="C-c")
        with self.assertRaises(MissingDefinitionError) as context:
            bind("a")
        self.assertEqual(context.exception.index, 1)
        self.assertIn("first position", context.exception.message)

    def testParseIsDryRun(self):
        bind = definer(self.record, keymaps=S.global_map)
        groups = bind.parse("a", S.x)
        self.assertEqual(dict(groups[0].options), {"keymaps": S.global_map})
        self.assertEqual(self.calls, [])

    def testPrefixSpelling(self):
        bind = definer(self.record, keymaps=S.global_map)
        self.assertEqual(bind.prefix, (K.keymaps, S.global_map, SEP))
        self.assertEqual(definer(self.record).prefix, ())

    def testDeriveOverlaysDefaults(self):
        bind = definer(self.record, keymaps=S.global_map)
        leader = bind.derive(prefix="SPC")
        other = leader.derive(keymaps=S.local_map)
        self.assertEqual(bind.defaults, {"keymaps": S.global_map})
        self.assertEqual(leader.defaults, {"keymaps": S.global_map, "prefix": "SPC"})
        self.assertEqual(other.defaults, {"keymaps": S.local_map, "prefix": "SPC"})
        self.assertIs(other.installer, self.record)

    def testDecoratorForm(self):
        @definer(keymaps=S.global_map)
        def bind(options, bindings):
            self.calls.append((dict(options), bindings))

        self.assertIsInstance(bind, Definer)
        self.assertEqual(bind.name, "bind")
        bind("a", S.x)
        self.assertEqual(self.calls, [({"keymaps": S.global_map}, (Binding("a", S.x),))])

    def testDecoratorRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            definer(keymaps=S.global_map)(42)

    def testKeywordDefaultsAccepted(self):
        bind = Definer(self.record, {K.keymaps: S.global_map})
        self.assertEqual(bind.defaults, {"keymaps": S.global_map})

    def testInvalidDefaultsRejected(self):
        with self.assertRaises(ValueError):
            Definer(self.record, {SEP: S.global_map})
        with self.assertRaises(ValueError):
            Definer(self.record, {"keymaps": RESET})
        with self.assertRaises(ValueError):
            Definer(self.record, {":keymaps": S.global_map})
        with self.assertRaises(TypeError):
            Definer(self.record, {42: S.global_map})

    def testInstallerMustBeCallable(self):
        with self.assertRaises(TypeError):
            Definer(42)  # type: ignore[arg-type]

    def testExplicitChainIsUsed(self):
        chain = ParserChain(positional("keymaps", "package"))
        bind = Definer(self.record, chain=chain)
        bind(S.m, S.evil, SEP, "a", S.x)
        self.assertEqual(self.calls, [({"keymaps": S.m, "package": S.evil}, (Binding("a", S.x),))])

    def testDwimIsForwarded(self):
        bind = Definer(self.record, dwim=True)
        bind(S.m, 42, S.x)
        self.assertEqual(self.calls, [({"keymaps": S.m}, (Binding(42, S.x),))])

    def testRepr(self):
        bind = definer(self.record, keymaps=S.global_map)
        self.assertEqual(repr(bind), "definer(name='record', defaults={'keymaps': 'global_map}, dwim=Unset, strict=Unset)")
        self.assertIn(("defaults", {"keymaps": S.global_map}), list(bind.__rich_repr__()))

    def testShellModePrintsAndExits(self):
        bind = Definer(self.record, name="keys", shell=True)
        stream = io.StringIO()
        with mock.patch("keydefs.faults.console", Console(file=stream, width=120)):
            with self.assertRaises(SystemExit) as context:
                bind("a", S.x, K.prefix, "C-c")
        self.assertEqual(context.exception.code, 1)
        output = stream.getvalue()
        self.assertIn("keys", output)
        self.assertIn("Unexpected Token", output)
        self.assertIn("third position", output)
        self.assertEqual(self.calls, [])

    def testNonShellModeRaises(self):
        with self.assertRaises(UnexpectedTokenError):
            Definer(self.record)("a", S.x, K.prefix, "C-c")


if __name__ == "__main__":
    unittest.main()
