"""Terminal control helpers for the browser front end.

Owns raw-mode lifecycle and alternate-screen switching on the controlling
tty, so stdout stays free for printing the selection.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

DEFAULT_SIZE = (80, 24)


class TerminalController:
    """Manage terminal mode transitions for one tty."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind input/output file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    @classmethod
    def open_tty(cls, path: str = "/dev/tty") -> TerminalController:
        fd = os.open(path, os.O_RDWR | os.O_NOCTTY)
        return cls(fd, fd)

    def write(self, text: str) -> None:
        os.write(self.stdout_fd, text.encode("utf-8", errors="replace"))

    def size(self) -> tuple[int, int]:
        """Return ``(columns, rows)`` of the tty."""
        try:
            size = os.get_terminal_size(self.stdout_fd)
        except OSError:
            return DEFAULT_SIZE
        return size.columns, size.lines

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l\x1b[H\x1b[J")

    def disable_tui_mode(self) -> None:
        """Restore the main screen buffer and the saved tty state."""
        os.write(self.stdout_fd, b"\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()

    @contextlib.contextmanager
    def suspended(self):
        """Hand the terminal to a child process (e.g. a pager) for a while."""
        self.disable_tui_mode()
        try:
            yield
        finally:
            self.enable_tui_mode()

    def close(self) -> None:
        if self.stdin_fd == self.stdout_fd:
            os.close(self.stdin_fd)
