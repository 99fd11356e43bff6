"""Logging bootstrap: everything goes to a file because the TUI owns the tty."""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

from .runtime.config import APP_NAME

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / f"{APP_NAME}.log"


def setup_logging(level: str | int = logging.WARNING, log_path: Path | None = None) -> Path:
    """Send ``mailpick`` logs at ``level`` to ``log_path`` and return the path used."""
    path = log_path if log_path is not None else DEFAULT_LOG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.FileHandler(path, encoding="utf-8")],
        force=True,
    )
    return path


__all__ = ["LOG_FORMAT", "DEFAULT_LOG_PATH", "setup_logging"]
