"""Error taxonomy shared by collectors, navigation and command handlers.

None of these are fatal to the process. The command dispatcher converts them
into handler results and user-facing messages.
"""

from __future__ import annotations


class BrowserError(Exception):
    """Base class for recoverable browser failures."""


class ScanError(BrowserError):
    """Target missing, not a directory, or unreadable."""


class BackendError(BrowserError):
    """Remote protocol failure; the message carries the backend text verbatim."""


class InputCancelled(BrowserError):
    """User aborted a prompt."""


class OperationUnsupported(BrowserError):
    """Current view mode does not support the requested operation."""


class InvariantViolation(BrowserError):
    """Request would break an entry invariant (e.g. tagging a container)."""


class SessionAborted(BrowserError):
    """Navigation failed and the previous listing could not be restored."""


class EntryKindError(TypeError):
    """Kind-specific metadata accessed on an entry of another kind."""


__all__ = [
    "BrowserError",
    "ScanError",
    "BackendError",
    "InputCancelled",
    "OperationUnsupported",
    "InvariantViolation",
    "SessionAborted",
    "EntryKindError",
]
