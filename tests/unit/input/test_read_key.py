"""Regression tests for raw-key decoding.

Covers ESC timing, CSI navigation sequences, control-key tokens and UTF-8.
These tests protect interactive input handling in raw terminal mode.
"""

import os
import time
import unittest

from mailpick.input import reader


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        reader._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        reader._PENDING_BYTES.clear()

    def _keys(self, data: bytes, count: int) -> list[str]:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, data)
            return [reader.read_key(read_fd, timeout_ms=20) for _ in range(count)]
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        started = time.monotonic()
        keys = self._keys(b"\x1b", 1)
        self.assertEqual(keys, ["ESC"])
        self.assertLess(time.monotonic() - started, 0.2)

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(self._keys(b"\x1bq", 2), ["ESC", "q"])

    def test_csi_navigation_keys(self) -> None:
        data = b"\x1b[A\x1b[B\x1b[C\x1b[D\x1b[H\x1b[F\x1bOA"
        self.assertEqual(self._keys(data, 7), ["UP", "DOWN", "RIGHT", "LEFT", "HOME", "END", "UP"])

    def test_tilde_keys(self) -> None:
        data = b"\x1b[5~\x1b[6~\x1b[3~\x1b[1~\x1b[4~"
        self.assertEqual(self._keys(data, 5), ["PAGE_UP", "PAGE_DOWN", "DELETE", "HOME", "END"])

    def test_control_tokens(self) -> None:
        data = b"\r\n\t\x7f\x08\x07\x0c\x15\x17"
        expected = ["ENTER", "ENTER", "TAB", "BACKSPACE", "BACKSPACE", "CTRL_G", "CTRL_L", "CTRL_U", "CTRL_W"]
        self.assertEqual(self._keys(data, len(expected)), expected)

    def test_multibyte_utf8_is_one_key(self) -> None:
        self.assertEqual(self._keys("é€".encode("utf-8"), 2), ["é", "€"])

    def test_timeout_returns_empty_token(self) -> None:
        self.assertEqual(self._keys(b"", 1), [""])


if __name__ == "__main__":
    unittest.main()
