"""Domain datatypes for browser scan results.

``FolderEntry`` is a single tagged variant: ``kind`` says which metadata
payload is meaningful. ``BrowserState`` is the ordered list produced by one
scan of one namespace.
"""

from __future__ import annotations

import stat as stat_mod
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from enum import Enum

from .errors import EntryKindError

PARENT_DESCRIPTIONS = frozenset({"..", "../"})


class EntryKind(Enum):
    """Which backend produced an entry."""

    LOCAL = "local"
    MAILBOX_REGISTRY = "mailbox_registry"
    REMOTE_HIERARCHY = "remote_hierarchy"


class ViewMode(Enum):
    """Which namespace a ``BrowserState`` represents."""

    FILE_SYSTEM = "file_system"
    MAILBOX_REGISTRY = "mailbox_registry"
    REMOTE_HIERARCHY = "remote_hierarchy"


@dataclass(frozen=True)
class LocalStat:
    """Filesystem metadata observed by ``lstat``."""

    mode: int
    size: int = 0
    mtime: int = 0
    uid: int = 0
    gid: int = 0
    nlink: int = 1

    @classmethod
    def from_stat_result(cls, st, *, size: int | None = None, mtime: int | None = None) -> LocalStat:
        """Build from an ``os.stat_result``, optionally overriding size/mtime."""
        return cls(
            mode=int(st.st_mode),
            size=int(st.st_size) if size is None else size,
            mtime=int(st.st_mtime) if mtime is None else mtime,
            uid=int(st.st_uid),
            gid=int(st.st_gid),
            nlink=int(st.st_nlink),
        )

    @property
    def is_dir(self) -> bool:
        return stat_mod.S_ISDIR(self.mode)

    @property
    def is_symlink(self) -> bool:
        return stat_mod.S_ISLNK(self.mode)

    @property
    def is_executable(self) -> bool:
        return bool(self.mode & stat_mod.S_IXUSR)


@dataclass(frozen=True)
class MailboxStats:
    """Live counters copied from the mailbox registry."""

    msg_count: int = 0
    msg_unread: int = 0
    has_new_mail: bool = False
    generation: int = 0

    @classmethod
    def from_mailbox(cls, mailbox) -> MailboxStats:
        """Snapshot the live counters of a registry ``Mailbox``."""
        return cls(
            msg_count=mailbox.msg_count,
            msg_unread=mailbox.msg_unread,
            has_new_mail=mailbox.has_new,
            generation=mailbox.generation,
        )


@dataclass(frozen=True)
class RemoteAttrs:
    """Hierarchy attributes reported by a remote protocol client."""

    delimiter: str = ""
    has_children: bool = False
    selectable: bool = True
    subscribed: bool = False


@dataclass
class FolderEntry:
    """One row in the browsable list."""

    name: str
    kind: EntryKind
    description: str | None = None
    local_meta: LocalStat | None = None
    mailbox_meta: MailboxStats | None = None
    remote_meta: RemoteAttrs | None = None
    tagged: bool = False
    order: int = -1

    def __post_init__(self) -> None:
        if not self.description:
            self.description = self.name
        if self.kind is EntryKind.LOCAL:
            if self.local_meta is None or self.remote_meta is not None:
                raise EntryKindError(f"local entry {self.name!r} needs stat metadata only")
        elif self.kind is EntryKind.REMOTE_HIERARCHY:
            if self.remote_meta is None or self.local_meta is not None:
                raise EntryKindError(f"remote entry {self.name!r} needs remote metadata only")
        elif self.local_meta is not None or self.remote_meta is not None:
            raise EntryKindError(f"registry entry {self.name!r} cannot carry stat or remote metadata")

    @classmethod
    def local(
        cls,
        name: str,
        st: LocalStat,
        description: str | None = None,
        mailbox: MailboxStats | None = None,
    ) -> FolderEntry:
        return cls(name=name, kind=EntryKind.LOCAL, description=description, local_meta=st, mailbox_meta=mailbox)

    @classmethod
    def registry(cls, name: str, description: str | None, mailbox: MailboxStats | None) -> FolderEntry:
        return cls(name=name, kind=EntryKind.MAILBOX_REGISTRY, description=description, mailbox_meta=mailbox)

    @classmethod
    def remote(
        cls,
        name: str,
        attrs: RemoteAttrs,
        description: str | None = None,
        mailbox: MailboxStats | None = None,
    ) -> FolderEntry:
        return cls(
            name=name,
            kind=EntryKind.REMOTE_HIERARCHY,
            description=description,
            remote_meta=attrs,
            mailbox_meta=mailbox,
        )

    @property
    def display_description(self) -> str:
        return self.description or self.name

    @property
    def stat(self) -> LocalStat:
        """Local metadata; only valid for ``EntryKind.LOCAL`` rows."""
        if self.kind is not EntryKind.LOCAL or self.local_meta is None:
            raise EntryKindError(f"{self.name!r} is a {self.kind.value} entry without stat metadata")
        return self.local_meta

    @property
    def remote_attrs(self) -> RemoteAttrs:
        """Remote metadata; only valid for ``EntryKind.REMOTE_HIERARCHY`` rows."""
        if self.kind is not EntryKind.REMOTE_HIERARCHY or self.remote_meta is None:
            raise EntryKindError(f"{self.name!r} is a {self.kind.value} entry without remote metadata")
        return self.remote_meta

    @property
    def is_local(self) -> bool:
        return self.kind is EntryKind.LOCAL

    @property
    def is_remote(self) -> bool:
        return self.kind is EntryKind.REMOTE_HIERARCHY

    @property
    def has_mailbox(self) -> bool:
        return self.mailbox_meta is not None

    @property
    def is_parent(self) -> bool:
        """Whether this row is the synthetic parent-directory pseudo-entry."""
        return self.display_description in PARENT_DESCRIPTIONS

    def update_remote_attrs(self, **changes: object) -> None:
        """Replace fields of the remote payload in place (e.g. after subscribe)."""
        self.remote_meta = replace(self.remote_attrs, **changes)


@dataclass
class BrowserState:
    """Scan result for the namespace currently displayed.

    ``location`` is the effective location the scan ended up listing, which
    can differ from the requested one after a vanished-directory walk.
    """

    view_mode: ViewMode = ViewMode.FILE_SYSTEM
    entries: list[FolderEntry] = field(default_factory=list)
    remote_root: str | None = None
    location: str | None = None

    def __post_init__(self) -> None:
        if self.remote_root is not None and self.view_mode is not ViewMode.REMOTE_HIERARCHY:
            raise ValueError("remote_root is only meaningful in the remote hierarchy view")

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[FolderEntry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> FolderEntry:
        return self.entries[index]

    def add(self, entry: FolderEntry) -> FolderEntry:
        """Append ``entry`` in discovery order."""
        entry.order = len(self.entries)
        self.entries.append(entry)
        return entry

    def remove(self, entry: FolderEntry) -> None:
        """Remove one entry by identity; the only in-place patch allowed."""
        for idx, candidate in enumerate(self.entries):
            if candidate is entry:
                del self.entries[idx]
                return
        raise ValueError(f"{entry.name!r} is not in this listing")

    def clear(self) -> None:
        """Release every entry; the state is unusable for display afterwards."""
        self.entries.clear()
        self.remote_root = None
        self.location = None

    def index_of(self, name: str) -> int | None:
        for idx, entry in enumerate(self.entries):
            if entry.name == name:
                return idx
        return None

    @property
    def is_remote(self) -> bool:
        return self.view_mode is ViewMode.REMOTE_HIERARCHY

    @property
    def is_mailbox_list(self) -> bool:
        return self.view_mode is ViewMode.MAILBOX_REGISTRY


__all__ = [
    "PARENT_DESCRIPTIONS",
    "EntryKind",
    "ViewMode",
    "LocalStat",
    "MailboxStats",
    "RemoteAttrs",
    "FolderEntry",
    "BrowserState",
]
