"""Per-session browser state and the collaborator contract.

``BrowserView`` is mutated in place by command handlers. It is created when
a session starts and discarded when the session returns its selection.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..browser_model.types import BrowserState, FolderEntry

if TYPE_CHECKING:
    from ..commands.operations import Operation


class PromptKind(Enum):
    """What a line prompt asks for; front ends pick completion from it."""

    PATH = "path"
    FILENAME = "filename"
    MASK = "mask"
    PATTERN = "pattern"
    MAILBOX = "mailbox"
    NUMBER = "number"


@dataclass(frozen=True)
class SelectFlags:
    """How a selection session was requested."""

    mailbox: bool = False
    multiple: bool = False
    folder: bool = False


@dataclass(frozen=True)
class SelectionResult:
    """Final outcome of one session.

    ``path`` is the single selection; ``paths`` holds the multi-select list.
    Both are empty when the user left without choosing anything.
    """

    path: str | None = None
    paths: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.path is None and not self.paths

    def all_paths(self) -> tuple[str, ...]:
        if self.paths:
            return self.paths
        return (self.path,) if self.path is not None else ()


@dataclass(frozen=True)
class SessionCallbacks:
    """Injected front-end operations used by ``BrowserSession``.

    ``get_line`` and ``choose`` raise ``InputCancelled`` when the user aborts.
    ``choose`` returns the index of the chosen letter.
    """

    next_operation: Callable[[BrowserView], Operation]
    get_line: Callable[[str, PromptKind, str], str]
    choose: Callable[[str, str], int]
    confirm: Callable[[str, bool], bool]
    message: Callable[[str], None]
    error: Callable[[str], None]
    view_file: Callable[[str], None]
    show_help: Callable[[], None] | None = None


@dataclass
class BrowserView:
    """Mutable state of one browsing session."""

    state: BrowserState = field(default_factory=BrowserState)
    flags: SelectFlags = field(default_factory=SelectFlags)
    cursor: int = 0
    top: int = 0
    page_size: int = 10
    title: str = ""
    prefix: str = ""
    kill_prefix: bool = False
    goto_swapper: str = ""
    last_selected_mailbox: int = -1
    search_pattern: str | None = None
    search_reverse: bool = False
    selected_file: str | None = None
    tagged_paths: list[str] = field(default_factory=list)
    needs_redraw: bool = True

    @property
    def current(self) -> FolderEntry | None:
        if 0 <= self.cursor < len(self.state):
            return self.state[self.cursor]
        return None

    @property
    def entry_count(self) -> int:
        return len(self.state)


__all__ = [
    "PromptKind",
    "SelectFlags",
    "SelectionResult",
    "SessionCallbacks",
    "BrowserView",
]
