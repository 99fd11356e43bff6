"""IMAP hierarchy browsing with imapclient.

Connections are opened lazily per account and reused for the life of the
client. Hierarchy delimiters are learned from the server on first use.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from imapclient import IMAPClient
from imapclient.exceptions import IMAPClientError

from ..browser_model.errors import BackendError
from ..browser_model.types import BrowserState, FolderEntry, RemoteAttrs
from .client import RemoteClient
from .credentials import get_password
from .url import IMAP_SCHEMES, ImapUrl

logger = logging.getLogger(__name__)

NO_CHILDREN_FLAGS = frozenset({"\\noinferiors", "\\hasnochildren"})
NOT_SELECTABLE_FLAGS = frozenset({"\\noselect", "\\nonexistent"})
FALLBACK_DELIMITERS = "/."


def _text(value: object) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return "" if value is None else str(value)


def _normalize_flags(flags: Iterable[object]) -> frozenset[str]:
    return frozenset(_text(flag).lower() for flag in flags)


class ImapHierarchyClient(RemoteClient):
    """``RemoteClient`` backed by ``imapclient.IMAPClient``."""

    schemes = IMAP_SCHEMES

    def __init__(
        self,
        timeout: int = 30,
        password_lookup: Callable[[str, str], str | None] = get_password,
        client_factory: Callable[..., IMAPClient] = IMAPClient,
    ) -> None:
        super().__init__()
        self.timeout = timeout
        self._password_lookup = password_lookup
        self._client_factory = client_factory
        self._connections: dict[tuple, IMAPClient] = {}
        self._delimiters: dict[tuple, str] = {}

    def _parse(self, location: str) -> ImapUrl:
        try:
            return ImapUrl.parse(location)
        except ValueError as exc:
            raise BackendError(str(exc)) from exc

    def _connect(self, url: ImapUrl) -> IMAPClient:
        key = url.account_key
        conn = self._connections.get(key)
        if conn is not None:
            return conn
        if not url.user:
            raise BackendError(f"No username given for {url.host}")
        try:
            conn = self._client_factory(
                host=url.host,
                port=url.effective_port,
                ssl=url.secure,
                timeout=self.timeout,
            )
        except (IMAPClientError, OSError) as exc:
            raise BackendError(f"Cannot connect to {url.host}:{url.effective_port}: {exc}") from exc

        password = self._password_lookup(url.user, url.host)
        if password is None:
            raise BackendError(f"No password found for {url.user}@{url.host}")
        try:
            conn.login(url.user, password)
        except (IMAPClientError, OSError) as exc:
            raise BackendError(f"Authentication failed for {url.user}: {exc}") from exc
        logger.info("Authenticated %s@%s", url.user, url.host)
        self._connections[key] = conn
        return conn

    def _delimiter(self, conn: IMAPClient, url: ImapUrl) -> str:
        key = url.account_key
        if key not in self._delimiters:
            try:
                listing = conn.list_folders("", "")
            except (IMAPClientError, OSError) as exc:
                raise BackendError(str(exc)) from exc
            delimiter = ""
            for _flags, raw_delim, _name in listing:
                delimiter = _text(raw_delim)
                break
            self._delimiters[key] = delimiter
            logger.debug("hierarchy delimiter for %s is %r", url.host, delimiter)
        return self._delimiters[key]

    def _known_delimiter(self, url: ImapUrl) -> str | None:
        return self._delimiters.get(url.account_key)

    def _strip_delimiter(self, url: ImapUrl, path: str) -> str:
        delimiter = self._known_delimiter(url)
        if delimiter:
            return path[: -len(delimiter)] if path.endswith(delimiter) else path
        if path and path[-1] in FALLBACK_DELIMITERS:
            return path[:-1]
        return path

    def _call(self, action: Callable[[], object]) -> object:
        try:
            return action()
        except (IMAPClientError, OSError) as exc:
            raise BackendError(str(exc)) from exc

    def browse(self, location: str, state: BrowserState) -> None:
        url = self._parse(location)
        conn = self._connect(url)
        delimiter = self._delimiter(conn, url)

        prefix = url.path
        if prefix and delimiter and not prefix.endswith(delimiter):
            prefix += delimiter
        pattern = f"{prefix}%"

        subscribed_rows = self._call(lambda: conn.lsub_folders("", pattern))
        subscribed = {_text(name) for _flags, _delim, name in subscribed_rows}
        if self.subscribed_only:
            rows = subscribed_rows
        else:
            rows = self._call(lambda: conn.list_folders("", pattern))

        if prefix:
            state.add(
                FolderEntry.remote(
                    self.parent_path(str(url.with_path(prefix))),
                    RemoteAttrs(delimiter=delimiter, has_children=True, selectable=False),
                    description="../",
                )
            )

        own_name = self._strip_delimiter(url, prefix)
        for raw_flags, raw_delim, raw_name in rows:
            name = _text(raw_name)
            if not name or name == own_name or name == prefix:
                continue
            flags = _normalize_flags(raw_flags)
            entry_delim = _text(raw_delim) or delimiter
            has_children = not (flags & NO_CHILDREN_FLAGS)
            relative = name[len(prefix) :] if name.startswith(prefix) else name
            if has_children and entry_delim:
                relative += entry_delim
            state.add(
                FolderEntry.remote(
                    str(url.with_path(name)),
                    RemoteAttrs(
                        delimiter=entry_delim,
                        has_children=has_children,
                        selectable=not (flags & NOT_SELECTABLE_FLAGS),
                        subscribed=name in subscribed,
                    ),
                    description=relative,
                )
            )
        logger.debug("listed %d folders under %s", len(state), location)

    def mailbox_path(self, location: str) -> str:
        url = self._parse(location)
        return self._strip_delimiter(url, url.path)

    def location_for(self, location: str, mailbox: str) -> str:
        return str(self._parse(location).with_path(mailbox))

    def subscribe(self, location: str, subscribe: bool) -> None:
        url = self._parse(location)
        conn = self._connect(url)
        path = self.mailbox_path(location)
        if subscribe:
            self._call(lambda: conn.subscribe_folder(path))
        else:
            self._call(lambda: conn.unsubscribe_folder(path))
        logger.info("%s %s", "subscribed to" if subscribe else "unsubscribed from", path)

    def create(self, location: str) -> None:
        url = self._parse(location)
        conn = self._connect(url)
        path = self.mailbox_path(location)
        if not path:
            raise BackendError("Mailbox name is empty")
        self._call(lambda: conn.create_folder(path))
        logger.info("created mailbox %s", path)

    def delete(self, location: str) -> None:
        url = self._parse(location)
        conn = self._connect(url)
        path = self.mailbox_path(location)
        self._call(lambda: conn.delete_folder(path))
        logger.info("deleted mailbox %s", path)

    def rename(self, location: str, new_location: str) -> None:
        url = self._parse(location)
        target = self._parse(new_location)
        if target.account_key != url.account_key:
            raise BackendError("Cannot rename a mailbox across accounts")
        conn = self._connect(url)
        old_path = self.mailbox_path(location)
        new_path = self.mailbox_path(new_location)
        self._call(lambda: conn.rename_folder(old_path, new_path))
        logger.info("renamed mailbox %s to %s", old_path, new_path)

    def parent_path(self, location: str) -> str:
        url = self._parse(location)
        path = self._strip_delimiter(url, url.path)
        delimiter = self._known_delimiter(url) or "/"
        cut = path.rfind(delimiter)
        if cut < 0:
            return str(url.with_path(""))
        return str(url.with_path(path[: cut + len(delimiter)]))

    def tracking_name(self, location: str) -> str:
        url = self._parse(location)
        return str(url.with_path(self._strip_delimiter(url, url.path)))

    def child_location(self, entry: FolderEntry) -> str:
        if entry.is_parent:
            return entry.name
        url = self._parse(entry.name)
        delimiter = entry.remote_attrs.delimiter
        if url.path and delimiter and not url.path.endswith(delimiter):
            return str(url.with_path(url.path + delimiter))
        return entry.name

    def close(self) -> None:
        for key, conn in list(self._connections.items()):
            try:
                conn.logout()
            except (IMAPClientError, OSError) as exc:
                logger.debug("logout from %s failed: %s", key[2], exc)
        self._connections.clear()


__all__ = ["ImapHierarchyClient"]
