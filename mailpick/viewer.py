"""Syntax-highlighted file viewer backed by an external pager.

Text is decoded leniently, stripped of terminal control bytes, highlighted
with Pygments and piped to ``$PAGER`` (default ``less -R``).
"""

from __future__ import annotations

import logging
import os
import re
import shlex
import subprocess
from pathlib import Path

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"
DEFAULT_PAGER = "less -R"
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def read_text(path: Path) -> str:
    for encoding in ("utf-8", "utf-8-sig"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("latin-1")


def sanitize_terminal_text(source: str) -> str:
    """Escape control bytes so viewed files cannot drive the terminal."""
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group(0)):02x}", source)


def resolve_style(style: str) -> str:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        logger.warning("unknown pygments style %r, using %s", style, DEFAULT_STYLE)
        return DEFAULT_STYLE
    return style


def colorize_source(source: str, path: Path, style: str = DEFAULT_STYLE) -> str:
    """Highlight ``source`` for a 256-colour terminal, guessing the lexer from ``path``."""
    try:
        lexer = get_lexer_for_filename(path.name, source)
    except ClassNotFound:
        lexer = TextLexer()
    return highlight(source, lexer, Terminal256Formatter(style=resolve_style(style)))


class TerminalFileViewer:
    """``view_file`` collaborator: highlight then page."""

    def __init__(self, style: str = DEFAULT_STYLE, pager: str | None = None, output_fd: int | None = None) -> None:
        self.style = style
        self.pager = pager or os.environ.get("PAGER") or DEFAULT_PAGER
        self.output_fd = output_fd

    def render(self, path: str) -> str:
        target = Path(path)
        return colorize_source(sanitize_terminal_text(read_text(target)), target, self.style)

    def __call__(self, path: str) -> None:
        """Show ``path``; raises ``OSError`` when it cannot be read or paged."""
        rendered = self.render(path)
        command = shlex.split(self.pager)
        logger.debug("paging %s with %s", path, command)
        completed = subprocess.run(
            command,
            input=rendered.encode("utf-8", errors="replace"),
            stdout=self.output_fd,
            check=False,
        )
        if completed.returncode not in (0, 1):
            raise OSError(f"pager exited with status {completed.returncode}")


__all__ = [
    "DEFAULT_STYLE",
    "DEFAULT_PAGER",
    "read_text",
    "sanitize_terminal_text",
    "resolve_style",
    "colorize_source",
    "TerminalFileViewer",
]
