"""ANSI-aware width measurement and line fitting for menu rows.

Escape sequences never count toward width; wide characters count as two
columns.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8

RESET = "\033[0m"
REVERSE = "\033[7m"
BOLD = "\033[1m"
ERROR_STYLE = "\033[1;31m"
TITLE_STYLE = "\033[1;38;5;81m"
KEY_STYLE = "\033[38;5;229m"


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``."""
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Visible column count of ``text``."""
    col = 0
    for ch in ANSI_ESCAPE_RE.sub("", text):
        col += char_display_width(ch, col)
    return col


def _tokens(text: str):
    """Yield ``(escape, None)`` for escape sequences and ``(None, char)`` otherwise."""
    pos = 0
    for match in ANSI_ESCAPE_RE.finditer(text):
        for ch in text[pos : match.start()]:
            yield None, ch
        yield match.group(0), None
        pos = match.end()
    for ch in text[pos:]:
        yield None, ch


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escape sequences before the cut are kept verbatim; tabs become spaces.
    """
    out: list[str] = []
    col = 0
    for escape, ch in _tokens(text):
        if escape is not None:
            out.append(escape)
            continue
        width = char_display_width(ch, col)
        if col + width > max_cols:
            break
        out.append(" " * width if ch == "\t" else ch)
        col += width
    return "".join(out)


def fit_line(text: str, width: int) -> str:
    """Clip or right-pad ``text`` to exactly ``width`` columns."""
    clipped = clip_ansi_line(text, width)
    return clipped + " " * max(0, width - display_width(clipped))


def styled(text: str, style: str) -> str:
    return f"{style}{text}{RESET}"


__all__ = [
    "ANSI_ESCAPE_RE",
    "RESET",
    "REVERSE",
    "BOLD",
    "ERROR_STYLE",
    "TITLE_STYLE",
    "KEY_STYLE",
    "char_display_width",
    "display_width",
    "clip_ansi_line",
    "fit_line",
    "styled",
]
