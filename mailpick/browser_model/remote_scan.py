"""Remote hierarchy listing through a ``RemoteClient``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..mailboxes import Mailbox, MailboxRegistry
from .local_scan import attach_registry_counts
from .sorting import SortSpec, sort_browser_state
from .types import BrowserState, ViewMode

if TYPE_CHECKING:
    from ..remote.client import RemoteClient


def examine_remote(
    client: RemoteClient,
    location: str,
    registry: MailboxRegistry | None = None,
    active_mailbox: Mailbox | None = None,
    sort: SortSpec | None = None,
) -> BrowserState:
    """List ``location`` via ``client``; ``BackendError`` propagates unchanged.

    Entry semantics (children, delimiter, subscription) are left exactly as
    the client reported them; only registry counters are attached.
    """
    state = BrowserState(view_mode=ViewMode.REMOTE_HIERARCHY, remote_root=location, location=location)
    client.browse(location, state)
    for entry in state:
        if entry.is_parent or entry.mailbox_meta is not None:
            continue
        entry.mailbox_meta = attach_registry_counts(entry.name, registry, active_mailbox)
    if sort is not None:
        sort_browser_state(state, sort.key, sort.descending)
    return state


__all__ = ["examine_remote"]
