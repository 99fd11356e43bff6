"""Browser engine data model and backend collectors.

This package contains non-UI primitives:
- entry/state datatypes and the error taxonomy
- local directory, mailbox registry and remote hierarchy scans
- sort keys and listing order
"""

from __future__ import annotations

from .errors import (
    BackendError,
    BrowserError,
    EntryKindError,
    InputCancelled,
    InvariantViolation,
    OperationUnsupported,
    ScanError,
    SessionAborted,
)
from .types import (
    PARENT_DESCRIPTIONS,
    BrowserState,
    EntryKind,
    FolderEntry,
    LocalStat,
    MailboxStats,
    RemoteAttrs,
    ViewMode,
)
from .sorting import SortKey, SortSpec, sort_browser_state, sort_entries
from .local_scan import FileMask, entry_is_container, examine_directory, link_is_dir
from .registry_scan import examine_mailboxes
from .remote_scan import examine_remote

__all__ = [
    "BrowserError",
    "ScanError",
    "BackendError",
    "InputCancelled",
    "OperationUnsupported",
    "InvariantViolation",
    "SessionAborted",
    "EntryKindError",
    "PARENT_DESCRIPTIONS",
    "EntryKind",
    "ViewMode",
    "LocalStat",
    "MailboxStats",
    "RemoteAttrs",
    "FolderEntry",
    "BrowserState",
    "SortKey",
    "SortSpec",
    "sort_entries",
    "sort_browser_state",
    "FileMask",
    "link_is_dir",
    "entry_is_container",
    "examine_directory",
    "examine_mailboxes",
    "examine_remote",
]
