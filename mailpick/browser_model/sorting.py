"""Sort keys and in-place ordering of browser listings."""

from __future__ import annotations

import locale
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from .types import BrowserState, FolderEntry

REVERSE_PREFIX = "reverse-"


class SortKey(Enum):
    """Browser sort keys; values are the ``sort_browser`` config names."""

    ALPHA = "alpha"
    DATE = "date"
    SIZE = "size"
    DESCRIPTION = "desc"
    COUNT = "count"
    UNREAD = "new"
    UNSORTED = "unsorted"

    @classmethod
    def from_letter(cls, letter: str) -> SortKey:
        """Map one letter of the ``dazecwn`` sort menu to a key."""
        try:
            return SORT_MENU_LETTERS[letter.lower()]
        except KeyError:
            raise ValueError(f"unknown sort letter {letter!r}") from None


SORT_MENU_LETTERS: dict[str, SortKey] = {
    "d": SortKey.DATE,
    "a": SortKey.ALPHA,
    "z": SortKey.SIZE,
    "e": SortKey.DESCRIPTION,
    "c": SortKey.COUNT,
    "w": SortKey.UNREAD,
    "n": SortKey.UNSORTED,
}
SORT_MENU_PROMPT = "(d)ate, (a)lpha, si(z)e, d(e)scription, (c)ount, ne(w) count, or do(n)'t sort?"
REVERSE_SORT_MENU_PROMPT = (
    "Reverse sort by (d)ate, (a)lpha, si(z)e, d(e)scription, (c)ount, ne(w) count, or do(n)'t sort?"
)


@dataclass(frozen=True)
class SortSpec:
    """Active sort key plus direction."""

    key: SortKey = SortKey.ALPHA
    descending: bool = False

    @classmethod
    def parse(cls, text: str) -> SortSpec:
        """Parse ``sort_browser`` values such as ``date`` or ``reverse-alpha``.

        Raises ``ValueError`` for unknown keys.
        """
        raw = text.strip().lower()
        descending = raw.startswith(REVERSE_PREFIX)
        if descending:
            raw = raw[len(REVERSE_PREFIX) :]
        if raw == "description":
            raw = SortKey.DESCRIPTION.value
        return cls(key=SortKey(raw), descending=descending)

    def __str__(self) -> str:
        prefix = REVERSE_PREFIX if self.descending else ""
        return f"{prefix}{self.key.value}"


def _collate(text: str) -> str:
    try:
        return locale.strxfrm(text)
    except (ValueError, OSError):
        return text


def _mtime(entry: FolderEntry) -> int:
    return entry.local_meta.mtime if entry.local_meta is not None else 0


def _size(entry: FolderEntry) -> int:
    return entry.local_meta.size if entry.local_meta is not None else 0


def _count(entry: FolderEntry) -> int:
    return entry.mailbox_meta.msg_count if entry.mailbox_meta is not None else 0


def _unread(entry: FolderEntry) -> int:
    return entry.mailbox_meta.msg_unread if entry.mailbox_meta is not None else 0


SORT_KEY_FUNCS: dict[SortKey, Callable[[FolderEntry], object]] = {
    SortKey.ALPHA: lambda entry: _collate(entry.name),
    SortKey.DATE: _mtime,
    SortKey.SIZE: _size,
    SortKey.DESCRIPTION: lambda entry: _collate(entry.display_description),
    SortKey.COUNT: _count,
    SortKey.UNREAD: _unread,
    SortKey.UNSORTED: lambda entry: entry.order,
}


def sort_entries(entries: list[FolderEntry], key: SortKey, descending: bool = False) -> list[FolderEntry]:
    """Return ``entries`` ordered by ``key`` with parent rows pinned first."""
    parents = [entry for entry in entries if entry.is_parent]
    others = [entry for entry in entries if not entry.is_parent]
    others.sort(key=SORT_KEY_FUNCS[key], reverse=descending)
    return parents + others


def sort_browser_state(state: BrowserState, key: SortKey, descending: bool = False) -> BrowserState:
    """Sort ``state`` in place without rescanning; returns ``state`` for chaining."""
    state.entries[:] = sort_entries(state.entries, key, descending)
    return state


__all__ = [
    "SortKey",
    "SortSpec",
    "SORT_MENU_LETTERS",
    "SORT_MENU_PROMPT",
    "REVERSE_SORT_MENU_PROMPT",
    "sort_entries",
    "sort_browser_state",
]
