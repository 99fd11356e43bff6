"""JSON config loading for the browser.

The config file is read once per process; invalid fields fall back to their
defaults individually. Mask, sort and subscription-listing changes made in a
session only live in the in-memory ``BrowserConfig``.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from ..browser_model.local_scan import FileMask
from ..browser_model.sorting import SortSpec

logger = logging.getLogger(__name__)

APP_NAME = "mailpick"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_MASK = r"!^\.[^.]"
DEFAULT_SORT = "alpha"
DEFAULT_FOLDER_FORMAT = "%2C %t %N %F %2l %-8.8u %-8.8g %8s %d %i"
DEFAULT_DATE_FORMAT = "!%a, %b %d, %Y at %I:%M:%S%p %Z"
DEFAULT_IMAP_TIMEOUT = 30


@dataclass
class BrowserConfig:
    """Browser settings; mutable so session operations can update them."""

    folder: str | None = None
    spool_file: str | None = None
    mask: str = DEFAULT_MASK
    sort_browser: str = DEFAULT_SORT
    folder_format: str = DEFAULT_FOLDER_FORMAT
    date_format: str = DEFAULT_DATE_FORMAT
    browser_abbreviate_mailboxes: bool = True
    imap_list_subscribed: bool = False
    imap_timeout: int = DEFAULT_IMAP_TIMEOUT
    mailboxes: list[dict[str, object]] = field(default_factory=list)

    @property
    def sort_spec(self) -> SortSpec:
        return SortSpec.parse(self.sort_browser)

    @property
    def file_mask(self) -> FileMask:
        return FileMask.parse(self.mask)


def read_config_file(path: Path) -> dict[str, object]:
    """Load the JSON object at ``path``.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring config %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring config %s: top level is not an object", path)
        return {}
    return data


def _optional_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _valid_mask(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    try:
        FileMask.parse(value)
    except re.error as exc:
        logger.warning("ignoring invalid mask %r: %s", value, exc)
        return None
    return value


def _valid_sort(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    try:
        return str(SortSpec.parse(value))
    except ValueError:
        logger.warning("ignoring unknown sort_browser %r", value)
        return None


def _positive_int(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return None
    return value


def _mailbox_records(value: object) -> list[dict[str, object]]:
    """Keep well-formed ``{path, name, hidden}`` records; drop the rest.

    Bare strings are accepted as path-only records.
    """
    if not isinstance(value, list):
        return []
    records: list[dict[str, object]] = []
    for raw in value:
        if isinstance(raw, str):
            raw = {"path": raw}
        if not isinstance(raw, dict):
            continue
        path = _optional_str(raw.get("path"))
        if path is None:
            continue
        record: dict[str, object] = {"path": path, "hidden": raw.get("hidden") is True}
        name = _optional_str(raw.get("name"))
        if name is not None:
            record["name"] = name
        records.append(record)
    return records


def config_from_dict(data: dict[str, object]) -> BrowserConfig:
    """Build a ``BrowserConfig``, validating each field independently."""
    config = BrowserConfig()
    config.folder = _optional_str(data.get("folder"))
    config.spool_file = _optional_str(data.get("spool_file"))
    config.mask = _valid_mask(data.get("mask")) or config.mask
    config.sort_browser = _valid_sort(data.get("sort_browser")) or config.sort_browser
    config.folder_format = _optional_str(data.get("folder_format")) or config.folder_format
    config.date_format = _optional_str(data.get("date_format")) or config.date_format
    for key in ("browser_abbreviate_mailboxes", "imap_list_subscribed"):
        value = data.get(key)
        if isinstance(value, bool):
            setattr(config, key, value)
    config.imap_timeout = _positive_int(data.get("imap_timeout")) or config.imap_timeout
    config.mailboxes = _mailbox_records(data.get("mailboxes"))
    return config


def load_config(path: Path | None = None) -> BrowserConfig:
    """Load the browser config from ``path`` (default: the per-user config file)."""
    config_path = path if path is not None else DEFAULT_CONFIG_PATH
    config = config_from_dict(read_config_file(config_path))
    logger.debug("loaded config from %s", config_path)
    return config


__all__ = [
    "APP_NAME",
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_MASK",
    "DEFAULT_SORT",
    "DEFAULT_FOLDER_FORMAT",
    "DEFAULT_DATE_FORMAT",
    "BrowserConfig",
    "read_config_file",
    "config_from_dict",
    "load_config",
]
