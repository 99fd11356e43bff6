"""Default key bindings and registry lookup tests."""

from __future__ import annotations

import unittest

from mailpick.commands.operations import Operation
from mailpick.input.key_registry import KeyComboBinding, KeyComboRegistry
from mailpick.input.keymap import DEFAULT_BINDINGS, build_keymap, help_bar


class KeyComboRegistryTests(unittest.TestCase):
    def test_later_binding_overrides_combo(self) -> None:
        registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("x",), Operation.EXIT),
            KeyComboBinding(("x", "y"), Operation.HELP),
        )
        self.assertIs(registry.lookup("x"), Operation.HELP)
        self.assertEqual(registry.keys_for(Operation.HELP), ("x", "y"))
        self.assertEqual(registry.keys_for(Operation.EXIT), ())

    def test_normalizer_applies_to_lookup(self) -> None:
        registry = KeyComboRegistry(normalize=str.lower).register_binding(KeyComboBinding(("Q",), Operation.EXIT))
        self.assertIs(registry.lookup("q"), Operation.EXIT)
        self.assertIsNone(registry.lookup("z"))


class DefaultKeymapTests(unittest.TestCase):
    def test_every_operation_is_reachable(self) -> None:
        bound = {binding.operation for binding in DEFAULT_BINDINGS}
        self.assertEqual(bound, set(Operation))

    def test_no_key_is_bound_twice(self) -> None:
        keys = [key for binding in DEFAULT_BINDINGS for key in binding.combos]
        self.assertEqual(len(keys), len(set(keys)))

    def test_common_keys(self) -> None:
        keymap = build_keymap()
        self.assertIs(keymap.lookup("ENTER"), Operation.SELECT_ENTRY)
        self.assertIs(keymap.lookup("q"), Operation.EXIT)
        self.assertIs(keymap.lookup(" "), Operation.VIEW_FILE)
        self.assertIs(keymap.lookup("7"), Operation.JUMP)
        self.assertIs(keymap.lookup("TAB"), Operation.TOGGLE_MAILBOXES)
        self.assertIsNone(keymap.lookup("ESC"))

    def test_help_bar(self) -> None:
        self.assertEqual(help_bar(build_keymap()), "q:Exit  c:Chdir  =:Goto  m:Mask  ?:Help")


if __name__ == "__main__":
    unittest.main()
