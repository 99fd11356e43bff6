"""Menu-scope movement, tagging and search, plus global help/redraw."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..browser_model.errors import InvariantViolation, OperationUnsupported
from ..runtime.state import PromptKind
from .operations import HandlerResult, Operation

if TYPE_CHECKING:
    from ..runtime.session import BrowserSession

HELP_MESSAGE = "q:Exit  c:Chdir  =:Goto  m:Mask  ?:Help"


def _report(session: BrowserSession, message: str) -> HandlerResult:
    session.callbacks.error(message)
    return HandlerResult.ERROR


def _move_to(session: BrowserSession, index: int) -> HandlerResult:
    session.view.cursor = index
    session.view.needs_redraw = True
    return HandlerResult.SUCCESS


def next_entry(session: BrowserSession, operation: Operation) -> HandlerResult:
    view = session.view
    if view.cursor >= view.entry_count - 1:
        return _report(session, "You are on the last entry.")
    return _move_to(session, view.cursor + 1)


def previous_entry(session: BrowserSession, operation: Operation) -> HandlerResult:
    view = session.view
    if view.cursor <= 0:
        return _report(session, "You are on the first entry.")
    return _move_to(session, view.cursor - 1)


def first_entry(session: BrowserSession, operation: Operation) -> HandlerResult:
    if not session.view.entry_count:
        return _report(session, "No entries.")
    return _move_to(session, 0)


def last_entry(session: BrowserSession, operation: Operation) -> HandlerResult:
    count = session.view.entry_count
    if not count:
        return _report(session, "No entries.")
    return _move_to(session, count - 1)


def page_move(session: BrowserSession, operation: Operation) -> HandlerResult:
    """Page and half-page movement relative to the cursor."""
    view = session.view
    step = max(1, view.page_size)
    if operation in (Operation.HALF_DOWN, Operation.HALF_UP):
        step = max(1, step // 2)
    last = view.entry_count - 1
    if operation in (Operation.NEXT_PAGE, Operation.HALF_DOWN):
        if view.cursor >= last:
            return _report(session, "You are on the last page.")
        return _move_to(session, min(last, view.cursor + step))
    if view.cursor <= 0:
        return _report(session, "You are on the first page.")
    return _move_to(session, max(0, view.cursor - step))


def jump(session: BrowserSession, operation: Operation) -> HandlerResult:
    text = session.callbacks.get_line("Jump to: ", PromptKind.NUMBER, "").strip()
    if not text:
        return HandlerResult.NO_ACTION
    try:
        number = int(text)
    except ValueError:
        return _report(session, "Invalid index number.")
    if not 1 <= number <= session.view.entry_count:
        return _report(session, "Invalid index number.")
    return _move_to(session, number - 1)


def tag_entry(session: BrowserSession, operation: Operation) -> HandlerResult:
    """Toggle the tag on the highlighted entry; containers cannot be tagged."""
    view = session.view
    if not view.flags.multiple:
        raise OperationUnsupported("Tagging is not supported.")
    entry = view.current
    if entry is None:
        return _report(session, "No entries.")
    if session.is_container(entry):
        raise InvariantViolation("Can't attach a directory")
    path = session.entry_path(entry)
    entry.tagged = not entry.tagged
    if entry.tagged:
        if path not in view.tagged_paths:
            view.tagged_paths.append(path)
    elif path in view.tagged_paths:
        view.tagged_paths.remove(path)
    view.needs_redraw = True
    return HandlerResult.SUCCESS


def _compile_search(pattern: str) -> re.Pattern[str]:
    # all-lowercase patterns match case-insensitively
    flags = re.IGNORECASE if pattern == pattern.lower() else 0
    return re.compile(pattern, flags)


def _search(session: BrowserSession, reverse: bool) -> HandlerResult:
    view = session.view
    try:
        regex = _compile_search(view.search_pattern or "")
    except re.error as exc:
        return _report(session, f"Invalid search pattern: {exc}")
    count = view.entry_count
    step = -1 if reverse else 1
    for offset in range(1, count + 1):
        index = (view.cursor + step * offset) % count
        entry = view.state[index]
        if regex.search(entry.display_description) or regex.search(entry.name):
            return _move_to(session, index)
    return _report(session, "Not found.")


def search(session: BrowserSession, operation: Operation) -> HandlerResult:
    view = session.view
    reverse = operation is Operation.SEARCH_REVERSE
    prompt = "Reverse search for: " if reverse else "Search for: "
    text = session.callbacks.get_line(prompt, PromptKind.PATTERN, view.search_pattern or "").strip()
    if not text:
        return HandlerResult.NO_ACTION
    view.search_pattern = text
    view.search_reverse = reverse
    return _search(session, reverse)


def search_next(session: BrowserSession, operation: Operation) -> HandlerResult:
    if not session.view.search_pattern:
        return _report(session, "No search pattern.")
    return _search(session, session.view.search_reverse)


def show_help(session: BrowserSession, operation: Operation) -> HandlerResult:
    if session.callbacks.show_help is not None:
        session.callbacks.show_help()
        session.view.needs_redraw = True
    else:
        session.callbacks.message(HELP_MESSAGE)
    return HandlerResult.SUCCESS


def redraw(session: BrowserSession, operation: Operation) -> HandlerResult:
    session.view.needs_redraw = True
    return HandlerResult.SUCCESS


MENU_FUNCTIONS = {
    Operation.NEXT_ENTRY: next_entry,
    Operation.PREV_ENTRY: previous_entry,
    Operation.FIRST_ENTRY: first_entry,
    Operation.LAST_ENTRY: last_entry,
    Operation.NEXT_PAGE: page_move,
    Operation.PREV_PAGE: page_move,
    Operation.HALF_DOWN: page_move,
    Operation.HALF_UP: page_move,
    Operation.JUMP: jump,
    Operation.TAG: tag_entry,
    Operation.SEARCH: search,
    Operation.SEARCH_REVERSE: search,
    Operation.SEARCH_NEXT: search_next,
}

GLOBAL_FUNCTIONS = {
    Operation.HELP: show_help,
    Operation.REDRAW: redraw,
}


__all__ = ["MENU_FUNCTIONS", "GLOBAL_FUNCTIONS", "HELP_MESSAGE"]
