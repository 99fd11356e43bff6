"""Full-screen menu drawing for the browser listing.

Layout: help bar on the first row, listing rows, status bar with the view
title, then one message row. Rendering only reads session state, except for
keeping ``view.top`` and ``view.page_size`` in step with the screen.
"""

from __future__ import annotations

from ..ansi import BOLD, ERROR_STYLE, KEY_STYLE, RESET, REVERSE, TITLE_STYLE, fit_line, styled
from ..browser_model.types import FolderEntry
from ..input.key_registry import KeyComboRegistry
from ..runtime.state import BrowserView
from .folder_format import format_folder_row

CHROME_ROWS = 3


def listing_rows(height: int) -> int:
    return max(1, height - CHROME_ROWS)


def scroll_to_cursor(view: BrowserView, rows: int) -> None:
    """Adjust ``view.top`` so the cursor row is visible."""
    view.page_size = rows
    if view.cursor < view.top:
        view.top = view.cursor
    elif view.cursor >= view.top + rows:
        view.top = view.cursor - rows + 1
    view.top = max(0, min(view.top, max(0, view.entry_count - rows)))


class MenuRenderer:
    """Builds one frame of the browser screen as a string."""

    def __init__(self, folder_format: str, date_format: str, help_bar: str = "") -> None:
        self.folder_format = folder_format
        self.date_format = date_format
        self.help_bar = help_bar

    def row_text(self, entry: FolderEntry, index: int) -> str:
        return format_folder_row(self.folder_format, entry, index, date_format=self.date_format)

    def frame(self, view: BrowserView, width: int, height: int, message: str = "", is_error: bool = False) -> str:
        rows = listing_rows(height)
        scroll_to_cursor(view, rows)
        out: list[str] = ["\033[H"]
        out.append(styled(fit_line(self.help_bar, width), REVERSE))
        for offset in range(rows):
            index = view.top + offset
            out.append(f"\033[{offset + 2};1H")
            if index >= view.entry_count:
                out.append("\033[2K")
                continue
            line = fit_line(self.row_text(view.state[index], index), width)
            out.append(styled(line, REVERSE + BOLD) if index == view.cursor else line)
        status = f"-- mailpick: {view.title}"
        out.append(f"\033[{rows + 2};1H")
        out.append(styled(fit_line(status, width), REVERSE))
        out.append(f"\033[{rows + 3};1H\033[2K")
        if message:
            out.append(styled(fit_line(message, width - 1), ERROR_STYLE if is_error else RESET))
        return "".join(out)


def render_help_page(registry: KeyComboRegistry, width: int, height: int) -> str:
    """Full-screen list of key bindings."""
    out: list[str] = ["\033[H\033[J", styled(fit_line("mailpick help", width), TITLE_STYLE)]
    row = 2
    for binding in registry.bindings():
        if row >= height:
            break
        keys = " ".join(key if key != " " else "Space" for key in binding.combos)
        line = f"{KEY_STYLE}{keys:<20}{RESET} {binding.label or binding.operation.value}"
        out.append(f"\033[{row};1H")
        out.append(fit_line(line, width))
        row += 1
    out.append(f"\033[{height};1H")
    out.append(styled(fit_line("Press any key to return", width - 1), BOLD))
    return "".join(out)


__all__ = ["CHROME_ROWS", "listing_rows", "scroll_to_cursor", "MenuRenderer", "render_help_page"]
