"""Filename completion for path prompts.

``=``/``+`` complete under the configured folder and ``!`` under the spool
file's directory; the shortcut stays in the completed text.
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def _split(text: str, folder: str | None, spool_file: str | None, cwd: str) -> tuple[str, str, str]:
    """Return ``(shown directory part, directory to list, partial name)``."""
    if text and text[0] in "=+!":
        root = (spool_file if text[0] == "!" else folder) or ""
        root = os.path.expanduser(root)
        rest = text[1:]
        head, sep, tail = rest.rpartition("/")
        if sep:
            return text[0] + head + "/", os.path.join(root, head), tail
        return text[0], root, rest
    head, sep, tail = text.rpartition("/")
    if not sep:
        return "", cwd, text
    if not head:
        return "/", "/", tail
    listed = os.path.expanduser(head)
    if not os.path.isabs(listed):
        listed = os.path.join(cwd, listed)
    return head + "/", listed, tail


def complete_path(
    text: str,
    folder: str | None = None,
    spool_file: str | None = None,
    cwd: str | None = None,
) -> str | None:
    """Extend ``text`` to the longest unambiguous path.

    A single directory match gets a trailing ``/``. Returns ``None`` when
    nothing matches or the directory cannot be listed.
    """
    shown, listed, partial = _split(text, folder, spool_file, cwd or os.getcwd())
    try:
        names = os.listdir(listed or ".")
    except OSError as exc:
        logger.debug("completion cannot list %s: %s", listed, exc)
        return None

    matches = sorted(name for name in names if name.startswith(partial) and name not in (".", ".."))
    if not matches:
        return None
    if len(matches) == 1:
        completed = matches[0]
        if os.path.isdir(os.path.join(listed, completed)):
            completed += "/"
    else:
        completed = os.path.commonprefix(matches)
    return shown + completed


__all__ = ["complete_path"]
