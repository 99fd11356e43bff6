"""Default key bindings for the terminal front end."""

from __future__ import annotations

from ..commands.operations import Operation
from .key_registry import KeyComboBinding, KeyComboRegistry

DEFAULT_BINDINGS: tuple[KeyComboBinding, ...] = (
    KeyComboBinding(("ENTER",), Operation.SELECT_ENTRY, "Select"),
    KeyComboBinding(("RIGHT", "l"), Operation.DESCEND_DIRECTORY, "Descend"),
    KeyComboBinding(("p", "LEFT", "BACKSPACE"), Operation.GOTO_PARENT, "Parent"),
    KeyComboBinding(("c",), Operation.CHANGE_DIRECTORY, "Chdir"),
    KeyComboBinding(("TAB",), Operation.TOGGLE_MAILBOXES, "Mailboxes"),
    KeyComboBinding(("$",), Operation.CHECK_NEW, "Rescan"),
    KeyComboBinding(("=",), Operation.GOTO_FOLDER, "Goto"),
    KeyComboBinding(("m",), Operation.ENTER_MASK, "Mask"),
    KeyComboBinding(("o",), Operation.SORT, "Sort"),
    KeyComboBinding(("O",), Operation.SORT_REVERSE, "Reverse sort"),
    KeyComboBinding(("N",), Operation.NEW_FILE, "New file"),
    KeyComboBinding((" ",), Operation.VIEW_FILE, "View"),
    KeyComboBinding(("@",), Operation.TELL, "Show name"),
    KeyComboBinding((".",), Operation.MAILBOX_LIST, "New mail"),
    KeyComboBinding(("q",), Operation.EXIT, "Exit"),
    KeyComboBinding(("s",), Operation.SUBSCRIBE, "Subscribe"),
    KeyComboBinding(("u",), Operation.UNSUBSCRIBE, "Unsubscribe"),
    KeyComboBinding(("S",), Operation.SUBSCRIBE_PATTERN, "Subscribe pattern"),
    KeyComboBinding(("U",), Operation.UNSUBSCRIBE_PATTERN, "Unsubscribe pattern"),
    KeyComboBinding(("C",), Operation.CREATE_MAILBOX, "Create"),
    KeyComboBinding(("d",), Operation.DELETE_MAILBOX, "Delete"),
    KeyComboBinding(("r",), Operation.RENAME_MAILBOX, "Rename"),
    KeyComboBinding(("T",), Operation.TOGGLE_SUBSCRIBED, "Subscribed only"),
    KeyComboBinding(("DOWN", "j"), Operation.NEXT_ENTRY, "Down"),
    KeyComboBinding(("UP", "k"), Operation.PREV_ENTRY, "Up"),
    KeyComboBinding(("HOME", "g"), Operation.FIRST_ENTRY, "First"),
    KeyComboBinding(("END", "G"), Operation.LAST_ENTRY, "Last"),
    KeyComboBinding(("PAGE_DOWN", ">", "CTRL_F"), Operation.NEXT_PAGE, "Page down"),
    KeyComboBinding(("PAGE_UP", "<", "CTRL_B"), Operation.PREV_PAGE, "Page up"),
    KeyComboBinding(("CTRL_D", "]"), Operation.HALF_DOWN, "Half down"),
    KeyComboBinding(("CTRL_U", "["), Operation.HALF_UP, "Half up"),
    KeyComboBinding(tuple("123456789"), Operation.JUMP, "Jump"),
    KeyComboBinding(("t",), Operation.TAG, "Tag"),
    KeyComboBinding(("/",), Operation.SEARCH, "Search"),
    KeyComboBinding(("\\",), Operation.SEARCH_REVERSE, "Reverse search"),
    KeyComboBinding(("n",), Operation.SEARCH_NEXT, "Next match"),
    KeyComboBinding(("?",), Operation.HELP, "Help"),
    KeyComboBinding(("CTRL_L",), Operation.REDRAW, "Redraw"),
)


def build_keymap() -> KeyComboRegistry:
    """Registry holding the default bindings."""
    return KeyComboRegistry().register_bindings(*DEFAULT_BINDINGS)


def help_bar(registry: KeyComboRegistry) -> str:
    """One-line key summary shown above the listing."""
    items = []
    for operation, label in (
        (Operation.EXIT, "Exit"),
        (Operation.CHANGE_DIRECTORY, "Chdir"),
        (Operation.GOTO_FOLDER, "Goto"),
        (Operation.ENTER_MASK, "Mask"),
        (Operation.HELP, "Help"),
    ):
        keys = registry.keys_for(operation)
        if keys:
            items.append(f"{keys[0]}:{label}")
    return "  ".join(items)


__all__ = ["DEFAULT_BINDINGS", "build_keymap", "help_bar"]
