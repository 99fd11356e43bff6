"""Session orchestration entry points.

``FileBrowser`` runs selection sessions; ``run_browser`` wires it to the
default terminal front end.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .session import BrowserSession, FileBrowser
    from .state import SelectFlags, SelectionResult, SessionCallbacks


def run_browser(*args, **kwargs):
    """Lazily import the terminal front end to keep package imports lightweight."""
    from .app import run_browser as _run_browser

    return _run_browser(*args, **kwargs)


def __getattr__(name: str):
    if name in {"BrowserSession", "FileBrowser"}:
        from . import session as _session

        return getattr(_session, name)
    if name in {"SelectFlags", "SelectionResult", "SessionCallbacks"}:
        from . import state as _state

        return getattr(_state, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "run_browser",
    "FileBrowser",
    "BrowserSession",
    "SelectFlags",
    "SelectionResult",
    "SessionCallbacks",
]
