"""Navigation primitives: location cursors, parent paths, and cursor placement.

This module has no UI concerns. Remote delimiter logic is always delegated
to the ``RemoteClient`` that owns a location.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..browser_model.errors import ScanError
from ..browser_model.sorting import SortKey
from ..browser_model.types import BrowserState, EntryKind, FolderEntry
from ..mailboxes import expand_path, probe_mailbox_type

if TYPE_CHECKING:
    from ..remote.client import RemoteClient

logger = logging.getLogger(__name__)

TRACKING_SORT_KEYS = frozenset({SortKey.UNSORTED, SortKey.DESCRIPTION})


@dataclass
class NavigationCursors:
    """Where the browser is and where it just came from.

    One instance lives for the whole process so a later session reopens where
    the previous one left off.
    """

    current_location: str = ""
    previous_location: str = ""

    def move_to(self, location: str) -> None:
        """Record a navigation step from the current location to ``location``."""
        self.previous_location = self.current_location
        self.current_location = location

    def came_up_from_child(self) -> bool:
        """Whether ``previous_location`` strictly extends ``current_location``."""
        current = self.current_location
        previous = self.previous_location
        return bool(current) and bool(previous) and previous != current and previous.startswith(current)


def tracking_enabled(sort_key: SortKey) -> bool:
    """Directory tracking only runs under sort keys that keep listings stable."""
    return sort_key in TRACKING_SORT_KEYS


def local_tracking_name(location: str) -> str:
    """Basename of a local path, as listed in its parent directory."""
    return location.rstrip("/").rpartition("/")[2] if location.rstrip("/") else location


def default_index(state: BrowserState) -> int:
    """Skip a leading parent pseudo-entry unless it is the only row."""
    if len(state) and state[0].is_parent:
        return 1 if len(state) > 1 else 0
    return 0


def clamp_index(index: int, count: int) -> int:
    if count <= 0:
        return 0
    return max(0, min(index, count - 1))


def place_cursor(
    state: BrowserState,
    cursors: NavigationCursors,
    previous_index: int = 0,
    tracking_name: Callable[[str], str] | None = None,
    tracking: bool = True,
) -> int:
    """Pick the highlighted row after a scan.

    When we just came up from a child location the row naming that child
    wins; otherwise the default rule applies.
    """
    index = clamp_index(previous_index, len(state))
    if not len(state):
        return index
    if tracking and cursors.came_up_from_child():
        namer = tracking_name or local_tracking_name
        target = namer(cursors.previous_location)
        found = state.index_of(target)
        if found is not None:
            return found
    return default_index(state)


def local_parent_location(location: str) -> str:
    """Location reached by selecting the ``..`` row of a local listing.

    A trailing ``..`` is extended rather than collapsed so the later realpath
    step resolves it against the real filesystem.
    """
    if len(location) > 1 and location.endswith(".."):
        return location + "/.."
    cut = location.rfind("/", 1) if len(location) > 1 else -1
    if cut > 0:
        return location[:cut]
    if location.startswith("/"):
        return "/"
    return location + "/.."


def parent_location(location: str, client: RemoteClient | None = None) -> str:
    """Parent of ``location``; remote locations ask their client."""
    if client is not None:
        return client.parent_path(location)
    if not location:
        return location
    path = location[:-1] if len(location) > 1 and location.endswith("/") else location
    cut = path.rfind("/")
    if cut > 0:
        return path[:cut]
    return "/"


def canonicalize(location: str) -> str:
    """Resolve ``location`` to an absolute path without symlinks.

    Raises ``ScanError`` when a component does not exist or cannot be read.
    """
    try:
        return os.path.realpath(location, strict=True)
    except OSError as exc:
        raise ScanError(f"{location}: {exc.strerror or exc}") from exc


def join_location(directory: str, name: str) -> str:
    """Concatenate a directory and a child name the way paths are shown."""
    if not directory:
        return name
    if name.startswith("/"):
        return name
    if directory.endswith("/"):
        return directory + name
    return f"{directory}/{name}"


def entry_path(
    entry: FolderEntry,
    location: str | None,
    mailbox_list: bool = False,
    folder: str | None = None,
) -> str:
    """Full path or URL an entry stands for."""
    if entry.kind is EntryKind.REMOTE_HIERARCHY:
        return entry.name
    if mailbox_list or entry.kind is EntryKind.MAILBOX_REGISTRY:
        return expand_path(entry.name, folder)
    return join_location(location or "", entry.name)


def select_dir(cursors: NavigationCursors, path: str, client: RemoteClient | None = None) -> None:
    """Open the parent of ``path`` with ``path`` remembered for tracking."""
    cursors.previous_location = path
    cursors.current_location = parent_location(path, client)


def seed_from_active_mailbox(
    cursors: NavigationCursors,
    active_path: str | None,
    sort_key: SortKey,
    folder: str | None = None,
    spool_file: str | None = None,
    client_for: Callable[[str], RemoteClient | None] | None = None,
) -> None:
    """Pre-position the cursors when browsing for a folder.

    With an active mailbox the listing opens on its containing directory with
    the mailbox itself as tracking target. Without one, the first session
    starts at ``folder`` (or next to the spool file when the folder is unset).
    Tracking memory is dropped when the sort key does not support it.
    """
    lookup = client_for or (lambda _location: None)
    if active_path:
        if active_path != cursors.previous_location or not cursors.current_location:
            select_dir(cursors, active_path, lookup(active_path))
    elif not cursors.current_location:
        if folder:
            cursors.current_location = folder
        elif spool_file:
            select_dir(cursors, spool_file, lookup(spool_file))

    if not tracking_enabled(sort_key):
        cursors.previous_location = ""
    logger.debug(
        "seeded cursors current=%s previous=%s",
        cursors.current_location,
        cursors.previous_location,
    )


def is_mailbox_store(path: str) -> bool:
    """Whether ``path`` probes as a complete mailbox rather than a plain directory."""
    return probe_mailbox_type(path).is_mailbox


def split_initial_path(path: str, cwd: str) -> tuple[str, str]:
    """Split a start path into ``(directory, name prefix)``.

    Existing directories open with no prefix; anything else opens its parent
    filtered on the final component.
    """
    if os.path.isdir(path):
        return (path if path.startswith("/") else join_location(cwd, path)), ""
    head, sep, tail = path.rpartition("/")
    if not sep:
        return cwd, path
    if not head:
        return "/", tail
    directory = head if head.startswith("/") else join_location(cwd, head)
    return directory, tail


__all__ = [
    "TRACKING_SORT_KEYS",
    "NavigationCursors",
    "tracking_enabled",
    "local_tracking_name",
    "default_index",
    "clamp_index",
    "place_cursor",
    "local_parent_location",
    "parent_location",
    "canonicalize",
    "join_location",
    "entry_path",
    "select_dir",
    "seed_from_active_mailbox",
    "is_mailbox_store",
    "split_initial_path",
]
