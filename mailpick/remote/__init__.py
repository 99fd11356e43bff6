"""Remote hierarchy backends.

``RemoteClient`` is the contract the browser engine talks to;
``ImapHierarchyClient`` implements it over imapclient.
"""

from __future__ import annotations

from .client import RemoteClient, RemoteClients
from .imap import ImapHierarchyClient
from .url import ImapUrl

__all__ = ["RemoteClient", "RemoteClients", "ImapHierarchyClient", "ImapUrl"]
