"""Public package surface for mailpick.

Exports ``main`` for programmatic CLI invocation.
The browser engine lives in ``mailpick.browser_model`` and ``mailpick.runtime``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["main"]
