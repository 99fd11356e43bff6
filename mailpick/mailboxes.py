"""Mailbox registry, store-type probing, and mailbox path shortcuts.

The registry is owned by the embedding program; the browser only iterates it
and copies live counters from the active mailbox into matching records.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

MMDF_SEPARATOR = b"\x01\x01\x01\x01\n"
MH_MARKER_FILES = (".mh_sequences", ".xmhcache", ".mew_cache", ".mew-cache", ".sylpheed_cache", ".overview")


class MailboxType(Enum):
    """Mailbox store formats the browser can recognise."""

    UNKNOWN = "unknown"
    ERROR = "error"
    MBOX = "mbox"
    MMDF = "mmdf"
    MH = "mh"
    MAILDIR = "maildir"
    IMAP = "imap"
    POP = "pop"
    NNTP = "nntp"
    NOTMUCH = "notmuch"

    @property
    def is_remote(self) -> bool:
        return self in REMOTE_TYPES

    @property
    def is_mailbox(self) -> bool:
        return self not in {MailboxType.UNKNOWN, MailboxType.ERROR}


REMOTE_TYPES = frozenset({MailboxType.IMAP, MailboxType.POP, MailboxType.NNTP, MailboxType.NOTMUCH})

_SCHEME_TYPES: dict[str, MailboxType] = {
    "imap": MailboxType.IMAP,
    "imaps": MailboxType.IMAP,
    "pop": MailboxType.POP,
    "pops": MailboxType.POP,
    "news": MailboxType.NNTP,
    "snews": MailboxType.NNTP,
    "nntp": MailboxType.NNTP,
    "notmuch": MailboxType.NOTMUCH,
}


def scheme_mailbox_type(path: str) -> MailboxType | None:
    """Return the remote type implied by a URL scheme, or ``None`` for plain paths."""
    scheme, sep, _rest = path.partition("://")
    if not sep:
        return None
    return _SCHEME_TYPES.get(scheme.lower())


def probe_mailbox_type(path: str) -> MailboxType:
    """Guess the mailbox store format of ``path``.

    Directories are maildir when they hold ``cur/``, MH when one of the usual
    MH marker files exists. Files are mbox when they start with ``From `` (or
    are empty) and MMDF when they start with the MMDF separator.
    """
    remote = scheme_mailbox_type(path)
    if remote is not None:
        return remote

    target = Path(path)
    try:
        st = target.stat()
    except FileNotFoundError:
        return MailboxType.UNKNOWN
    except OSError:
        return MailboxType.ERROR

    if target.is_dir():
        if (target / "cur").is_dir():
            return MailboxType.MAILDIR
        if any((target / marker).exists() for marker in MH_MARKER_FILES):
            return MailboxType.MH
        return MailboxType.UNKNOWN

    if st.st_size == 0:
        return MailboxType.MBOX
    try:
        with target.open("rb") as handle:
            head = handle.read(len(MMDF_SEPARATOR))
    except OSError:
        return MailboxType.ERROR
    if head.startswith(b"From "):
        return MailboxType.MBOX
    if head == MMDF_SEPARATOR:
        return MailboxType.MMDF
    return MailboxType.UNKNOWN


def expand_path(path: str, folder: str | None = None, spool_file: str | None = None) -> str:
    """Expand ``~``, ``=``/``+`` (folder) and ``!`` (spool file) shortcuts."""
    if not path:
        return path
    if path[0] in "=+" and folder:
        folder = os.path.expanduser(folder)
        rest = path[1:]
        if not rest:
            return folder
        if folder.endswith("/"):
            return folder + rest.lstrip("/")
        return f"{folder}/{rest.lstrip('/')}"
    if path == "!" and spool_file:
        return expand_path(spool_file, folder, None)
    if path.startswith("~"):
        return os.path.expanduser(path)
    return path


def pretty_mailbox(path: str, folder: str | None = None, home: str | None = None) -> str:
    """Abbreviate ``path`` with ``=`` for the folder root or ``~`` for home."""
    if folder:
        root = folder.rstrip("/")
        if root and path.startswith(root + "/") and len(path) > len(root) + 1:
            return "=" + path[len(root) + 1 :]
    home = home if home is not None else os.path.expanduser("~")
    if home and home != "/" and (path == home or path.startswith(home + "/")):
        return "~" + path[len(home) :]
    return path


def _realpath(path: str) -> str:
    if scheme_mailbox_type(path) is not None:
        return path
    return os.path.realpath(os.path.expanduser(path))


@dataclass
class Mailbox:
    """One configured mailbox with live counters."""

    path: str
    name: str | None = None
    type: MailboxType = MailboxType.UNKNOWN
    msg_count: int = 0
    msg_unread: int = 0
    has_new: bool = False
    generation: int = 0
    hidden: bool = False

    @property
    def realpath(self) -> str:
        return _realpath(self.path)

    def copy_counts_from(self, other: Mailbox) -> None:
        """Copy live message counters handed over by the active mailbox."""
        self.msg_count = other.msg_count
        self.msg_unread = other.msg_unread


@dataclass
class MailboxRegistry:
    """Ordered collection of configured mailboxes."""

    mailboxes: list[Mailbox] = field(default_factory=list)
    _next_generation: int = 1

    def __iter__(self) -> Iterator[Mailbox]:
        return iter(self.mailboxes)

    def __len__(self) -> int:
        return len(self.mailboxes)

    def add(self, mailbox: Mailbox) -> Mailbox:
        """Register ``mailbox``, probing its type and stamping a generation."""
        if mailbox.type is MailboxType.UNKNOWN:
            mailbox.type = probe_mailbox_type(os.path.expanduser(mailbox.path))
        mailbox.generation = self._next_generation
        self._next_generation += 1
        self.mailboxes.append(mailbox)
        logger.debug("registered mailbox %s (%s)", mailbox.path, mailbox.type.value)
        return mailbox

    def find_by_realpath(self, path: str) -> Mailbox | None:
        target = _realpath(path)
        for mailbox in self.mailboxes:
            if mailbox.realpath == target:
                return mailbox
        return None

    def sync_active(self, active: Mailbox | None) -> None:
        """Copy the active mailbox's live counters into its registry record."""
        if active is None:
            return
        for mailbox in self.mailboxes:
            if mailbox is not active and mailbox.realpath == active.realpath:
                mailbox.copy_counts_from(active)

    def with_new_mail(self) -> list[Mailbox]:
        return [mailbox for mailbox in self.mailboxes if mailbox.has_new]

    @classmethod
    def from_config(cls, entries: Iterable[dict[str, object]], folder: str | None = None) -> MailboxRegistry:
        """Build a registry from config ``mailboxes`` records (already validated)."""
        registry = cls()
        for raw in entries:
            path = expand_path(str(raw["path"]), folder)
            name = raw.get("name")
            registry.add(
                Mailbox(
                    path=path,
                    name=name if isinstance(name, str) and name else None,
                    hidden=bool(raw.get("hidden", False)),
                )
            )
        return registry


__all__ = [
    "MailboxType",
    "Mailbox",
    "MailboxRegistry",
    "probe_mailbox_type",
    "scheme_mailbox_type",
    "expand_path",
    "pretty_mailbox",
]
