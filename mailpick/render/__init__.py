"""Row formatting and menu frame rendering."""

from __future__ import annotations

from .folder_format import format_folder_row, pretty_size
from .menu import MenuRenderer, render_help_page

__all__ = ["format_folder_row", "pretty_size", "MenuRenderer", "render_help_page"]
