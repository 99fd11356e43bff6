"""Parsing and formatting of ``imap://`` / ``imaps://`` locations."""

from __future__ import annotations

from dataclasses import dataclass, replace

IMAP_SCHEMES = ("imap", "imaps")
DEFAULT_PORTS = {"imap": 143, "imaps": 993}


@dataclass(frozen=True)
class ImapUrl:
    """``scheme://[user@]host[:port]/[mailbox path]``"""

    scheme: str
    host: str
    user: str | None = None
    port: int | None = None
    path: str = ""

    @classmethod
    def parse(cls, location: str) -> ImapUrl:
        """Parse ``location``; raises ``ValueError`` when it is not an IMAP URL."""
        scheme, sep, rest = location.partition("://")
        scheme = scheme.lower()
        if not sep or scheme not in IMAP_SCHEMES:
            raise ValueError(f"{location} is not an IMAP URL")
        authority, _slash, path = rest.partition("/")
        user: str | None = None
        if "@" in authority:
            user, _at, authority = authority.rpartition("@")
        host, colon, port_text = authority.partition(":")
        if not host:
            raise ValueError(f"{location} has no host")
        port: int | None = None
        if colon:
            try:
                port = int(port_text)
            except ValueError:
                raise ValueError(f"{location} has an invalid port") from None
        return cls(scheme=scheme, host=host, user=user or None, port=port, path=path)

    @property
    def secure(self) -> bool:
        return self.scheme == "imaps"

    @property
    def effective_port(self) -> int:
        return self.port if self.port is not None else DEFAULT_PORTS[self.scheme]

    @property
    def account_key(self) -> tuple[str, str | None, str, int]:
        """Identity of the server account, ignoring the mailbox path."""
        return (self.scheme, self.user, self.host.lower(), self.effective_port)

    def with_path(self, path: str) -> ImapUrl:
        return replace(self, path=path)

    def __str__(self) -> str:
        user = f"{self.user}@" if self.user else ""
        port = f":{self.port}" if self.port is not None else ""
        return f"{self.scheme}://{user}{self.host}{port}/{self.path}"


__all__ = ["IMAP_SCHEMES", "DEFAULT_PORTS", "ImapUrl"]
