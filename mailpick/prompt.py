"""Single-line prompts drawn on the bottom terminal row.

``LinePrompt`` implements the ``get_line``, ``choose`` and ``confirm``
session callbacks. Ctrl-G or Esc cancels a prompt.
"""

from __future__ import annotations

from collections.abc import Callable

from .ansi import RESET, clip_ansi_line, display_width
from .browser_model.errors import InputCancelled
from .complete import complete_path
from .runtime.state import PromptKind

CANCEL_KEYS = frozenset({"CTRL_G", "ESC"})
COMPLETING_KINDS = frozenset({PromptKind.PATH, PromptKind.FILENAME, PromptKind.MAILBOX})


class LinePrompt:
    """Line editor bound to a key source and an output sink."""

    def __init__(
        self,
        read_key: Callable[[], str],
        write: Callable[[str], None],
        screen_size: Callable[[], tuple[int, int]],
        completer: Callable[[str], str | None] | None = None,
    ) -> None:
        self._read_key = read_key
        self._write = write
        self._screen_size = screen_size
        self._completer = completer if completer is not None else complete_path
        self.pending_text = ""

    def _draw(self, prompt: str, text: str, cursor: int) -> None:
        width, height = self._screen_size()
        line = clip_ansi_line(prompt + text, max(1, width - 1))
        column = min(display_width(prompt + text[:cursor]) + 1, max(1, width - 1))
        self._write(f"\033[{height};1H\033[2K{line}{RESET}\033[{height};{column}H\033[?25h")

    def _finish(self) -> None:
        _width, height = self._screen_size()
        self._write(f"\033[?25l\033[{height};1H\033[2K")

    def get_line(self, prompt: str, kind: PromptKind, initial: str) -> str:
        """Edit a line of text; raises ``InputCancelled`` on Ctrl-G or Esc."""
        text = initial + self.pending_text
        self.pending_text = ""
        cursor = len(text)
        try:
            while True:
                self._draw(prompt, text, cursor)
                key = self._read_key()
                if key == "" or key in CANCEL_KEYS:
                    raise InputCancelled(prompt)
                if key == "ENTER":
                    return text
                if key == "BACKSPACE":
                    if cursor:
                        text = text[: cursor - 1] + text[cursor:]
                        cursor -= 1
                elif key == "DELETE":
                    text = text[:cursor] + text[cursor + 1 :]
                elif key == "CTRL_U":
                    text, cursor = "", 0
                elif key == "CTRL_W":
                    head = text[:cursor].rstrip("/ ")
                    start = max(head.rfind("/"), head.rfind(" ")) + 1
                    text = text[:start] + text[cursor:]
                    cursor = start
                elif key in ("LEFT", "CTRL_B"):
                    cursor = max(0, cursor - 1)
                elif key in ("RIGHT", "CTRL_F"):
                    cursor = min(len(text), cursor + 1)
                elif key in ("HOME", "CTRL_A"):
                    cursor = 0
                elif key in ("END", "CTRL_E"):
                    cursor = len(text)
                elif key == "TAB" and kind in COMPLETING_KINDS:
                    completed = self._completer(text)
                    if completed is not None:
                        text, cursor = completed, len(completed)
                elif len(key) == 1 and key.isprintable():
                    text = text[:cursor] + key + text[cursor:]
                    cursor += 1
        finally:
            self._finish()

    def choose(self, prompt: str, letters: str) -> int:
        """Wait for one of ``letters``; return its index."""
        try:
            while True:
                self._draw(prompt + " ", "", 0)
                key = self._read_key()
                if key == "" or key in CANCEL_KEYS:
                    raise InputCancelled(prompt)
                index = letters.find(key.lower()) if len(key) == 1 else -1
                if index >= 0:
                    return index
        finally:
            self._finish()

    def confirm(self, prompt: str, default: bool) -> bool:
        """Yes/no question; Enter takes ``default`` and cancel means no."""
        hint = " ([yes]/no): " if default else " (yes/[no]): "
        try:
            while True:
                self._draw(prompt + hint, "", 0)
                key = self._read_key()
                if key == "" or key in CANCEL_KEYS:
                    return False
                if key == "ENTER":
                    return default
                if key.lower() == "y":
                    return True
                if key.lower() == "n":
                    return False
        finally:
            self._finish()


__all__ = ["LinePrompt", "CANCEL_KEYS", "COMPLETING_KINDS"]
