"""Contract between the browser engine and remote hierarchy backends.

The engine never parses remote locations itself: delimiters, parent paths and
the cursor-tracking name of a location are all answered by the client.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from ..browser_model.types import BrowserState, FolderEntry

logger = logging.getLogger(__name__)


class RemoteClient(ABC):
    """One remote protocol backend (e.g. IMAP).

    Every method may raise ``BackendError`` carrying the server's text.
    """

    schemes: tuple[str, ...] = ()

    def __init__(self) -> None:
        self.subscribed_only = False

    def handles(self, location: str) -> bool:
        scheme, sep, _rest = location.partition("://")
        return bool(sep) and scheme.lower() in self.schemes

    @abstractmethod
    def browse(self, location: str, state: BrowserState) -> None:
        """Populate ``state`` with the children of ``location``."""

    @abstractmethod
    def subscribe(self, location: str, subscribe: bool) -> None:
        """Subscribe to (or unsubscribe from) the mailbox at ``location``."""

    @abstractmethod
    def create(self, location: str) -> None:
        pass

    @abstractmethod
    def delete(self, location: str) -> None:
        pass

    @abstractmethod
    def rename(self, location: str, new_location: str) -> None:
        pass

    @abstractmethod
    def parent_path(self, location: str) -> str:
        """Return the browse location one hierarchy level above ``location``."""

    @abstractmethod
    def tracking_name(self, location: str) -> str:
        """Return the entry name ``location`` has in its parent's listing."""

    @abstractmethod
    def child_location(self, entry: FolderEntry) -> str:
        """Return the browse location for descending into ``entry``."""

    def mailbox_path(self, location: str) -> str:
        """Return the server-side mailbox name of ``location``."""
        return location

    @abstractmethod
    def location_for(self, location: str, mailbox: str) -> str:
        """Return the location of server-side ``mailbox`` on the account of ``location``."""

    def close(self) -> None:
        pass


class RemoteClients:
    """Ordered set of remote clients, looked up by location scheme."""

    def __init__(self, clients: Iterable[RemoteClient] = ()) -> None:
        self._clients: list[RemoteClient] = list(clients)

    def __iter__(self):
        return iter(self._clients)

    def for_location(self, location: str | None) -> RemoteClient | None:
        if not location:
            return None
        for client in self._clients:
            if client.handles(location):
                return client
        return None

    def set_subscribed_only(self, subscribed_only: bool) -> None:
        for client in self._clients:
            client.subscribed_only = subscribed_only

    def close(self) -> None:
        for client in self._clients:
            client.close()


__all__ = ["RemoteClient", "RemoteClients"]
