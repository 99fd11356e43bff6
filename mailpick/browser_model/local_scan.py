"""Local directory scanning into ``BrowserState`` listings.

Handles the vanished-directory recovery walk, prefix and mask filtering, and
cross-referencing children against the mailbox registry.
"""

from __future__ import annotations

import logging
import os
import re
import stat as stat_mod
from dataclasses import dataclass

from ..mailboxes import Mailbox, MailboxRegistry
from .errors import ScanError
from .sorting import SortSpec, sort_browser_state
from .types import BrowserState, EntryKind, FolderEntry, LocalStat, MailboxStats, ViewMode

logger = logging.getLogger(__name__)

MATCH_ALL_PATTERN = "."


@dataclass(frozen=True)
class FileMask:
    """Compiled file mask; a leading ``!`` inverts the match."""

    pattern: str
    regex: re.Pattern[str]
    negate: bool = False

    @classmethod
    def parse(cls, pattern: str) -> FileMask:
        """Compile ``pattern``; empty means match everything.

        Raises ``re.error`` for an invalid expression.
        """
        text = pattern or MATCH_ALL_PATTERN
        negate = text.startswith("!")
        body = text[1:] if negate else text
        return cls(pattern=text, regex=re.compile(body or MATCH_ALL_PATTERN), negate=negate)

    def matches(self, name: str) -> bool:
        found = self.regex.search(name) is not None
        return found != self.negate


def _stat_failure(path: str, exc: OSError) -> ScanError:
    reason = exc.strerror or str(exc)
    return ScanError(f"{path}: {reason}")


def recover_directory(location: str) -> tuple[str, os.stat_result]:
    """Walk up from ``location`` until an existing path is found.

    Only "not found" triggers the walk; any other stat failure is reported.
    """
    path = location
    while True:
        try:
            return path, os.stat(path)
        except FileNotFoundError as exc:
            parent, sep, _tail = path.rstrip("/").rpartition("/")
            if not sep:
                raise _stat_failure(location, exc) from exc
            path = parent or "/"
        except OSError as exc:
            raise _stat_failure(path, exc) from exc


def link_is_dir(path: str) -> bool:
    """Return whether ``path`` resolves to a directory after following links."""
    return os.path.isdir(path)


def entry_is_container(entry: FolderEntry, path: str | None = None) -> bool:
    """Whether ``entry`` can be descended into.

    Directories and symlinks to directories are containers locally (``path``
    is the entry's full path, used to follow the link); remote nodes are
    containers when the server reports children.
    """
    if entry.kind is EntryKind.REMOTE_HIERARCHY:
        return entry.remote_attrs.has_children
    if entry.kind is EntryKind.LOCAL:
        st = entry.stat
        if st.is_dir:
            return True
        if st.is_symlink:
            return path is not None and link_is_dir(path)
    return False


def lstat_child(path: str) -> LocalStat | None:
    try:
        st = os.lstat(path)
    except OSError as exc:
        logger.warning("skipping %s: %s", path, exc.strerror or exc)
        return None
    mode = st.st_mode
    if stat_mod.S_ISDIR(mode) or stat_mod.S_ISLNK(mode):
        return LocalStat.from_stat_result(st, size=0)
    if stat_mod.S_ISREG(mode):
        return LocalStat.from_stat_result(st)
    logger.debug("skipping special file %s", path)
    return None


def attach_registry_counts(
    path: str,
    registry: MailboxRegistry | None,
    active_mailbox: Mailbox | None,
) -> MailboxStats | None:
    """Return live counters for ``path`` when it is a registered mailbox."""
    if registry is None:
        return None
    mailbox = registry.find_by_realpath(path)
    if mailbox is None:
        return None
    if active_mailbox is not None and mailbox is not active_mailbox and mailbox.realpath == active_mailbox.realpath:
        mailbox.copy_counts_from(active_mailbox)
    return MailboxStats.from_mailbox(mailbox)


def examine_directory(
    location: str,
    prefix: str = "",
    mask: FileMask | None = None,
    registry: MailboxRegistry | None = None,
    active_mailbox: Mailbox | None = None,
    sort: SortSpec | None = None,
) -> BrowserState:
    """Scan one local directory into a new sorted ``BrowserState``.

    The returned state's ``location`` is the directory actually listed, which
    is an ancestor of ``location`` when the requested directory vanished.
    """
    directory, st = recover_directory(location)
    if not stat_mod.S_ISDIR(st.st_mode):
        raise ScanError(f"{directory} is not a directory")
    if directory != location:
        logger.info("%s is gone, listing %s instead", location, directory)

    try:
        with os.scandir(directory) as listing:
            names = [child.name for child in listing]
    except OSError as exc:
        raise ScanError(f"Couldn't open {directory}: {exc.strerror or exc}") from exc

    state = BrowserState(view_mode=ViewMode.FILE_SYSTEM, location=directory)
    if directory != "/":
        names.insert(0, "..")

    for name in names:
        if name == ".":
            continue
        if prefix and not name.startswith(prefix):
            continue
        if name != ".." and mask is not None and not mask.matches(name):
            continue
        full_path = os.path.join(directory, name)
        child_stat = lstat_child(full_path)
        if child_stat is None:
            continue
        counts = attach_registry_counts(full_path, registry, active_mailbox)
        state.add(FolderEntry.local(name, child_stat, mailbox=counts))

    if sort is not None:
        sort_browser_state(state, sort.key, sort.descending)
    return state


__all__ = [
    "MATCH_ALL_PATTERN",
    "FileMask",
    "recover_directory",
    "link_is_dir",
    "lstat_child",
    "entry_is_container",
    "attach_registry_counts",
    "examine_directory",
]
