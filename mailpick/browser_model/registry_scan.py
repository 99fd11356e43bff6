"""Listing of the configured mailbox registry."""

from __future__ import annotations

import dataclasses
import logging
import os

from ..mailboxes import Mailbox, MailboxRegistry, MailboxType, pretty_mailbox
from .errors import ScanError
from .local_scan import lstat_child
from .sorting import SortSpec, sort_browser_state
from .types import BrowserState, FolderEntry, LocalStat, MailboxStats, ViewMode

logger = logging.getLogger(__name__)


def _dir_mtime(path: str) -> int:
    try:
        return int(os.stat(path).st_mtime)
    except OSError:
        return 0


def maildir_mtime(path: str) -> int:
    """Effective maildir mtime: the later of ``new/`` and ``cur/``."""
    return max(_dir_mtime(os.path.join(path, "new")), _dir_mtime(os.path.join(path, "cur")))


def _local_mailbox_stat(mailbox: Mailbox) -> LocalStat | None:
    path = os.path.expanduser(mailbox.path)
    st = lstat_child(path)
    if st is None:
        return None
    if mailbox.type is MailboxType.MAILDIR:
        st = dataclasses.replace(st, mtime=maildir_mtime(path))
    return st


def examine_mailboxes(
    registry: MailboxRegistry,
    active_mailbox: Mailbox | None = None,
    abbreviate: bool = False,
    folder: str | None = None,
    sort: SortSpec | None = None,
) -> BrowserState:
    """Build the mailbox-list view from ``registry``.

    Remote mailboxes are listed from registry data alone. Local ones are
    ``lstat``-ed and skipped when the path is gone or of an odd file type.
    """
    if len(registry) == 0:
        raise ScanError("No mailboxes defined")

    registry.sync_active(active_mailbox)
    state = BrowserState(view_mode=ViewMode.MAILBOX_REGISTRY)
    for mailbox in registry:
        if mailbox.hidden:
            continue
        name = pretty_mailbox(mailbox.path, folder) if abbreviate else mailbox.path
        counts = MailboxStats.from_mailbox(mailbox)
        if mailbox.type.is_remote:
            state.add(FolderEntry.registry(name, mailbox.name, counts))
            continue
        st = _local_mailbox_stat(mailbox)
        if st is None:
            continue
        state.add(FolderEntry.local(name, st, description=mailbox.name, mailbox=counts))

    if sort is not None:
        sort_browser_state(state, sort.key, sort.descending)
    return state


__all__ = ["maildir_mtime", "examine_mailboxes"]
