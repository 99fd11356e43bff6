"""Terminal composition layer.

Wires the menu renderer, key map, line prompt and viewer into
``SessionCallbacks`` and runs one selection session on the controlling tty.
"""

from __future__ import annotations

import logging
import os
import sys
from functools import partial

from ..commands.operations import Operation
from ..complete import complete_path
from ..input.keymap import build_keymap, help_bar
from ..input.reader import read_key
from ..mailboxes import Mailbox
from ..prompt import LinePrompt
from ..render.menu import MenuRenderer, render_help_page
from ..viewer import DEFAULT_STYLE, TerminalFileViewer
from .session import FileBrowser
from .state import BrowserView, SelectFlags, SelectionResult, SessionCallbacks
from .terminal import TerminalController

logger = logging.getLogger(__name__)

UNBOUND_MESSAGE = "Key is not bound.  Press '?' for help."


class TerminalFrontEnd:
    """Default front end: one instance per terminal session."""

    def __init__(self, browser: FileBrowser, terminal: TerminalController, style: str = DEFAULT_STYLE) -> None:
        config = browser.config
        self.browser = browser
        self.terminal = terminal
        self.keymap = build_keymap()
        self.renderer = MenuRenderer(config.folder_format, config.date_format, help_bar(self.keymap))
        self.viewer = TerminalFileViewer(style=style, output_fd=terminal.stdout_fd)
        self.prompt = LinePrompt(
            partial(read_key, terminal.stdin_fd),
            terminal.write,
            terminal.size,
            completer=self._complete,
        )
        self._message = ""
        self._message_is_error = False

    def _complete(self, text: str) -> str | None:
        config = self.browser.config
        return complete_path(text, config.folder, config.spool_file, self.browser.cursors.current_location or None)

    @property
    def pending_error(self) -> str:
        """Error raised after the last drawn frame, if any."""
        return self._message if self._message_is_error else ""

    def message(self, text: str) -> None:
        self._message = text
        self._message_is_error = False

    def error(self, text: str) -> None:
        self._message = text
        self._message_is_error = True

    def next_operation(self, view: BrowserView) -> Operation:
        """Draw the menu and wait for a bound key."""
        while True:
            width, height = self.terminal.size()
            self.terminal.write(self.renderer.frame(view, width, height, self._message, self._message_is_error))
            view.needs_redraw = False
            key = read_key(self.terminal.stdin_fd)
            self._message = ""
            if key == "":
                return Operation.EXIT
            operation = self.keymap.lookup(key)
            if operation is None:
                self.error(UNBOUND_MESSAGE)
                continue
            if operation is Operation.JUMP and key.isdigit():
                self.prompt.pending_text = key
            return operation

    def show_help(self) -> None:
        width, height = self.terminal.size()
        self.terminal.write(render_help_page(self.keymap, width, height))
        read_key(self.terminal.stdin_fd)
        self.terminal.write("\033[H\033[J")

    def view_file(self, path: str) -> None:
        with self.terminal.suspended():
            self.viewer(path)

    def callbacks(self) -> SessionCallbacks:
        return SessionCallbacks(
            next_operation=self.next_operation,
            get_line=self.prompt.get_line,
            choose=self.prompt.choose,
            confirm=self.prompt.confirm,
            message=self.message,
            error=self.error,
            view_file=self.view_file,
            show_help=self.show_help,
        )


def run_browser(
    browser: FileBrowser,
    initial: str = "",
    flags: SelectFlags | None = None,
    active_mailbox: Mailbox | None = None,
    style: str = DEFAULT_STYLE,
) -> SelectionResult:
    """Run one interactive session on the controlling terminal."""
    terminal = TerminalController.open_tty()
    front_end = TerminalFrontEnd(browser, terminal, style)
    logger.info("starting session in %s", initial or os.getcwd())
    try:
        with terminal.raw_mode():
            result = browser.select_file(initial, flags, active_mailbox, front_end.callbacks())
    finally:
        terminal.close()
    if front_end.pending_error:
        sys.stderr.write(front_end.pending_error + "\n")
    return result


__all__ = ["TerminalFrontEnd", "run_browser", "UNBOUND_MESSAGE"]
