"""Tests for config loading and input sanitization.

Malformed fields fall back to their defaults one by one instead of
discarding the whole file.
"""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from mailpick.browser_model.sorting import SortKey
from mailpick.runtime import config


def _write(tmp: str, data: object) -> Path:
    path = Path(tmp) / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class ConfigLoadTests(unittest.TestCase):
    def test_missing_file_gives_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            loaded = config.load_config(Path(tmp) / "absent.json")
        self.assertEqual(loaded, config.BrowserConfig())
        self.assertEqual(loaded.mask, config.DEFAULT_MASK)
        self.assertIs(loaded.sort_spec.key, SortKey.ALPHA)

    def test_default_path_is_used_when_none_given(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = _write(tmp, {"folder": "~/Mail"})
            with mock.patch("mailpick.runtime.config.DEFAULT_CONFIG_PATH", path):
                self.assertEqual(config.load_config().folder, "~/Mail")

    def test_valid_fields_are_loaded(self) -> None:
        data = {
            "folder": " /home/u/Mail ",
            "spool_file": "/var/mail/u",
            "mask": "^[a-z]",
            "sort_browser": "reverse-date",
            "browser_abbreviate_mailboxes": False,
            "imap_list_subscribed": True,
            "imap_timeout": 5,
            "mailboxes": ["=inbox", {"path": "imaps://me@host/INBOX", "name": "Remote", "hidden": True}],
        }
        with tempfile.TemporaryDirectory() as tmp:
            loaded = config.load_config(_write(tmp, data))
        self.assertEqual(loaded.folder, "/home/u/Mail")
        self.assertEqual(loaded.mask, "^[a-z]")
        self.assertEqual(loaded.sort_browser, "reverse-date")
        self.assertTrue(loaded.sort_spec.descending)
        self.assertFalse(loaded.browser_abbreviate_mailboxes)
        self.assertTrue(loaded.imap_list_subscribed)
        self.assertEqual(loaded.imap_timeout, 5)
        self.assertEqual(
            loaded.mailboxes,
            [
                {"path": "=inbox", "hidden": False},
                {"path": "imaps://me@host/INBOX", "hidden": True, "name": "Remote"},
            ],
        )

    def test_invalid_fields_fall_back_individually(self) -> None:
        data = {
            "folder": 3,
            "mask": "(",
            "sort_browser": "shoe-size",
            "imap_list_subscribed": "yes",
            "imap_timeout": True,
            "folder_format": "%i",
            "mailboxes": [{"name": "no path"}, 7, {"path": ""}],
        }
        with tempfile.TemporaryDirectory() as tmp:
            loaded = config.load_config(_write(tmp, data))
        self.assertIsNone(loaded.folder)
        self.assertEqual(loaded.mask, config.DEFAULT_MASK)
        self.assertEqual(loaded.sort_browser, config.DEFAULT_SORT)
        self.assertFalse(loaded.imap_list_subscribed)
        self.assertEqual(loaded.imap_timeout, config.DEFAULT_IMAP_TIMEOUT)
        self.assertEqual(loaded.folder_format, "%i")
        self.assertEqual(loaded.mailboxes, [])

    def test_malformed_json_and_non_object_are_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            broken = Path(tmp) / "broken.json"
            broken.write_text("{not json", encoding="utf-8")
            self.assertEqual(config.read_config_file(broken), {})
            self.assertEqual(config.read_config_file(_write(tmp, [1, 2])), {})

    def test_file_mask_property_compiles_current_mask(self) -> None:
        settings = config.BrowserConfig(mask="!^\\.")
        self.assertFalse(settings.file_mask.matches(".x"))
        settings.mask = ""
        self.assertTrue(settings.file_mask.matches(".x"))


if __name__ == "__main__":
    unittest.main()
