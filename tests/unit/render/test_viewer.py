"""File viewer tests: decoding, sanitizing, highlighting and paging."""

from __future__ import annotations

import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from mailpick.ansi import ANSI_ESCAPE_RE
from mailpick.viewer import (
    DEFAULT_PAGER,
    DEFAULT_STYLE,
    TerminalFileViewer,
    colorize_source,
    read_text,
    resolve_style,
    sanitize_terminal_text,
)


class ViewerHelperTests(unittest.TestCase):
    def test_sanitize_escapes_control_bytes(self) -> None:
        self.assertEqual(sanitize_terminal_text("ok\x1b[2Jdone\n"), "ok\\x1b[2Jdone\n")
        self.assertEqual(sanitize_terminal_text("tab\tline\n"), "tab\tline\n")

    def test_read_text_falls_back_to_latin1(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "legacy.txt"
            path.write_bytes(b"caf\xe9\n")
            self.assertEqual(read_text(path), "caf\xe9\n")

    def test_unknown_style_uses_default(self) -> None:
        self.assertEqual(resolve_style("no-such-style"), DEFAULT_STYLE)
        self.assertEqual(resolve_style("default"), "default")

    def test_colorize_keeps_source_text(self) -> None:
        rendered = colorize_source("def f():\n    return 1\n", Path("x.py"))
        self.assertIn("\x1b[", rendered)
        self.assertEqual(ANSI_ESCAPE_RE.sub("", rendered), "def f():\n    return 1\n")

    def test_unknown_extension_is_plain_text(self) -> None:
        rendered = colorize_source("From a@b\n", Path("inbox.zzz-unknown"))
        self.assertEqual(ANSI_ESCAPE_RE.sub("", rendered), "From a@b\n")


class TerminalFileViewerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "note.txt"
        self.path.write_text("hello\n", encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_pager_defaults(self) -> None:
        with mock.patch.dict("os.environ", {}, clear=True):
            self.assertEqual(TerminalFileViewer().pager, DEFAULT_PAGER)
        with mock.patch.dict("os.environ", {"PAGER": "more"}):
            self.assertEqual(TerminalFileViewer().pager, "more")

    def test_pipes_rendered_text_to_pager(self) -> None:
        viewer = TerminalFileViewer(pager="less -R -X", output_fd=9)
        completed = subprocess.CompletedProcess(["less"], 0)
        with mock.patch("mailpick.viewer.subprocess.run", return_value=completed) as run:
            viewer(str(self.path))
        command = run.call_args.args[0]
        self.assertEqual(command, ["less", "-R", "-X"])
        self.assertEqual(run.call_args.kwargs["stdout"], 9)
        self.assertIn(b"hello", run.call_args.kwargs["input"])

    def test_pager_failure_raises_oserror(self) -> None:
        viewer = TerminalFileViewer(pager="less")
        with mock.patch("mailpick.viewer.subprocess.run", return_value=subprocess.CompletedProcess(["less"], 2)):
            with self.assertRaises(OSError):
                viewer(str(self.path))

    def test_missing_file_raises_oserror(self) -> None:
        with self.assertRaises(OSError):
            TerminalFileViewer(pager="less")(str(self.path.with_name("gone.txt")))


if __name__ == "__main__":
    unittest.main()
