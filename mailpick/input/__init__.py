"""Input-layer public API for key decoding and key-to-operation mapping."""

from .reader import ESC_SEQUENCE_TIMEOUT_MS, read_key
from .key_registry import KeyComboBinding, KeyComboRegistry
from .keymap import DEFAULT_BINDINGS, build_keymap, help_bar

__all__ = [
    "read_key",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "DEFAULT_BINDINGS",
    "build_keymap",
    "help_bar",
]
