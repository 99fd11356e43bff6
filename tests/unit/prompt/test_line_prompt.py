"""Line prompt editing and path completion tests.

Keys are fed from a list; output is captured but only cursor-visibility
bookkeeping is asserted.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from browser_doubles import make_tree

from mailpick.browser_model.errors import InputCancelled
from mailpick.complete import complete_path
from mailpick.prompt import LinePrompt
from mailpick.runtime.state import PromptKind


def _prompt(keys: list[str], completer=None) -> tuple[LinePrompt, list[str]]:
    feed = list(keys)
    written: list[str] = []
    prompt = LinePrompt(
        read_key=lambda: feed.pop(0) if feed else "",
        write=written.append,
        screen_size=lambda: (80, 24),
        completer=completer,
    )
    return prompt, written


class LinePromptTests(unittest.TestCase):
    def test_typing_and_enter(self) -> None:
        prompt, written = _prompt(list("abc") + ["ENTER"])
        self.assertEqual(prompt.get_line("Search for: ", PromptKind.PATTERN, ""), "abc")
        self.assertTrue(written[-1].startswith("\033[?25l"))

    def test_initial_text_is_editable(self) -> None:
        keys = ["BACKSPACE", "HOME", "DELETE", "END", "x", "LEFT", "LEFT", "y", "ENTER"]
        prompt, _ = _prompt(keys)
        self.assertEqual(prompt.get_line("Chdir to: ", PromptKind.PATH, "/mail/"), "maiylx")

    def test_word_delete_and_kill_line(self) -> None:
        prompt, _ = _prompt(["CTRL_W", "ENTER"])
        self.assertEqual(prompt.get_line("Chdir to: ", PromptKind.PATH, "/home/u/Mail/"), "/home/u/")
        prompt, _ = _prompt(["CTRL_U", "z", "ENTER"])
        self.assertEqual(prompt.get_line("File Mask: ", PromptKind.MASK, "^x"), "z")

    def test_cancel_keys_raise(self) -> None:
        for key in ("CTRL_G", "ESC", ""):
            with self.subTest(key=key):
                prompt, _ = _prompt(["a", key])
                with self.assertRaises(InputCancelled):
                    prompt.get_line("Jump to: ", PromptKind.NUMBER, "")

    def test_pending_digit_prefills_once(self) -> None:
        prompt, _ = _prompt(["2", "ENTER", "ENTER"])
        prompt.pending_text = "1"
        self.assertEqual(prompt.get_line("Jump to: ", PromptKind.NUMBER, ""), "12")
        self.assertEqual(prompt.get_line("Jump to: ", PromptKind.NUMBER, ""), "")

    def test_tab_completes_only_path_like_prompts(self) -> None:
        completer = lambda text: text + "ive/"
        prompt, _ = _prompt(["TAB", "ENTER", "TAB", "ENTER"], completer)
        self.assertEqual(prompt.get_line("Chdir to: ", PromptKind.PATH, "=arch"), "=archive/")
        self.assertEqual(prompt.get_line("Search for: ", PromptKind.PATTERN, "arch"), "arch")

    def test_choose_returns_letter_index(self) -> None:
        prompt, _ = _prompt(["x", "Z"])
        self.assertEqual(prompt.choose("Sort?", "dazecwn"), 2)
        prompt, _ = _prompt(["CTRL_G"])
        with self.assertRaises(InputCancelled):
            prompt.choose("Sort?", "dazecwn")

    def test_confirm(self) -> None:
        cases = [(["y"], False, True), (["n"], True, False), (["ENTER"], True, True), (["ESC"], True, False)]
        for keys, default, expected in cases:
            with self.subTest(keys=keys, default=default):
                prompt, _ = _prompt(keys)
                self.assertIs(prompt.confirm("Really delete?", default), expected)


class CompletePathTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = make_tree(
            Path(self._tmp.name).resolve(),
            {"archive": {"2023.mbox": ""}, "art.mbox": "", "inbox": ""},
        )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_common_prefix_for_several_matches(self) -> None:
        self.assertEqual(complete_path("ar", cwd=str(self.root)), "ar")
        self.assertEqual(complete_path(f"{self.root}/a"), f"{self.root}/ar")

    def test_single_directory_gets_slash(self) -> None:
        self.assertEqual(complete_path("arc", cwd=str(self.root)), "archive/")
        self.assertEqual(complete_path("archive/2", cwd=str(self.root)), "archive/2023.mbox")

    def test_folder_and_spool_shortcuts_are_kept(self) -> None:
        self.assertEqual(complete_path("=in", folder=str(self.root)), "=inbox")
        self.assertEqual(complete_path("+archive/", folder=str(self.root)), "+archive/2023.mbox")
        self.assertEqual(complete_path("!in", spool_file=str(self.root)), "!inbox")

    def test_no_match_or_unreadable_directory(self) -> None:
        self.assertIsNone(complete_path("zz", cwd=str(self.root)))
        self.assertIsNone(complete_path("missing/x", cwd=str(self.root)))


if __name__ == "__main__":
    unittest.main()
