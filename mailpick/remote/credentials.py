"""Credential storage via the system keyring."""

from __future__ import annotations

import logging

import keyring
from keyring.errors import KeyringError

logger = logging.getLogger(__name__)

SERVICE_NAME = "mailpick"


def _service(host: str) -> str:
    return f"{SERVICE_NAME}:{host}"


def get_password(username: str, host: str) -> str | None:
    """Retrieve the password for ``username`` on ``host``; ``None`` if unknown."""
    try:
        return keyring.get_password(_service(host), username)
    except KeyringError as exc:
        logger.warning("keyring get failed: %s", exc)
        return None


def set_password(username: str, host: str, password: str) -> bool:
    """Store a password in the system keyring. Returns True on success."""
    try:
        keyring.set_password(_service(host), username, password)
        return True
    except KeyringError as exc:
        logger.warning("keyring set failed: %s", exc)
        return False


__all__ = ["SERVICE_NAME", "get_password", "set_password"]
