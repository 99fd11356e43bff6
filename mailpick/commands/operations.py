"""Operation identifiers and handler result codes."""

from __future__ import annotations

from enum import Enum


class Operation(Enum):
    """User-initiated browser operations."""

    # browser scope
    SELECT_ENTRY = "select-entry"
    DESCEND_DIRECTORY = "descend-directory"
    GOTO_PARENT = "goto-parent"
    CHANGE_DIRECTORY = "change-dir"
    TOGGLE_MAILBOXES = "toggle-mailboxes"
    CHECK_NEW = "check-new"
    GOTO_FOLDER = "goto-folder"
    ENTER_MASK = "enter-mask"
    SORT = "sort"
    SORT_REVERSE = "sort-reverse"
    NEW_FILE = "select-new"
    VIEW_FILE = "view-file"
    TELL = "display-filename"
    MAILBOX_LIST = "mailbox-list"
    EXIT = "exit"

    # remote scope
    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"
    SUBSCRIBE_PATTERN = "subscribe-pattern"
    UNSUBSCRIBE_PATTERN = "unsubscribe-pattern"
    CREATE_MAILBOX = "create-mailbox"
    DELETE_MAILBOX = "delete-mailbox"
    RENAME_MAILBOX = "rename-mailbox"
    TOGGLE_SUBSCRIBED = "toggle-subscribed"

    # menu scope
    NEXT_ENTRY = "next-entry"
    PREV_ENTRY = "previous-entry"
    FIRST_ENTRY = "first-entry"
    LAST_ENTRY = "last-entry"
    NEXT_PAGE = "next-page"
    PREV_PAGE = "previous-page"
    HALF_DOWN = "half-down"
    HALF_UP = "half-up"
    JUMP = "jump"
    TAG = "tag-entry"
    SEARCH = "search"
    SEARCH_REVERSE = "search-reverse"
    SEARCH_NEXT = "search-next"

    # global scope
    HELP = "help"
    REDRAW = "redraw-screen"


class HandlerResult(Enum):
    """Outcome of dispatching one operation."""

    SUCCESS = "success"
    NO_ACTION = "no_action"
    ERROR = "error"
    DONE = "done"
    NOT_IMPLEMENTED = "not_implemented"
    UNKNOWN = "unknown"


__all__ = ["Operation", "HandlerResult"]
