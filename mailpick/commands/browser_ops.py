"""Browser-scope operation handlers.

Every handler takes the running ``BrowserSession`` and the operation being
dispatched. Errors from the browser taxonomy propagate to the dispatcher,
which turns them into messages and result codes.
"""

from __future__ import annotations

import logging
import os
import re
from typing import TYPE_CHECKING

from ..browser_model.errors import InvariantViolation, OperationUnsupported, ScanError
from ..browser_model.local_scan import FileMask
from ..browser_model.sorting import (
    REVERSE_SORT_MENU_PROMPT,
    SORT_MENU_LETTERS,
    SORT_MENU_PROMPT,
    SortKey,
    SortSpec,
    sort_browser_state,
)
from ..mailboxes import pretty_mailbox
from ..runtime.navigation import canonicalize, default_index, is_mailbox_store, join_location, parent_location
from ..runtime.state import PromptKind
from .operations import HandlerResult, Operation

if TYPE_CHECKING:
    from ..runtime.session import BrowserSession

logger = logging.getLogger(__name__)

NO_MATCH_MESSAGE = "No files match the file mask"


def _require_entry(session: BrowserSession):
    entry = session.view.current
    if entry is None:
        raise ScanError(NO_MATCH_MESSAGE)
    return entry


def select_entry(session: BrowserSession, operation: Operation) -> HandlerResult:
    """Descend into containers; finalize on anything else.

    A plain select on a directory that is itself a mailbox store picks the
    mailbox instead of opening it.
    """
    view = session.view
    entry = _require_entry(session)
    path = session.entry_path(entry)

    if session.is_container(entry):
        if (
            operation is Operation.DESCEND_DIRECTORY
            or entry.is_parent
            or entry.is_remote
            or not is_mailbox_store(path)
        ):
            session.descend(entry)
            view.goto_swapper = ""
            return HandlerResult.SUCCESS
    elif operation is Operation.DESCEND_DIRECTORY:
        raise InvariantViolation(f"{entry.name} is not a directory")

    if view.state.is_mailbox_list:
        view.last_selected_mailbox = view.cursor
    view.selected_file = path
    return session.finish()


def goto_parent(session: BrowserSession, operation: Operation) -> HandlerResult:
    current = session.cursors.current_location
    session.navigate(parent_location(current, session.client_for(current)))
    return HandlerResult.SUCCESS


def change_directory(session: BrowserSession, operation: Operation) -> HandlerResult:
    current = session.cursors.current_location
    initial = current
    if current and session.client_for(current) is None and not current.endswith("/"):
        initial = current + "/"
    text = session.callbacks.get_line("Chdir to: ", PromptKind.PATH, initial).strip()
    if not text:
        return HandlerResult.NO_ACTION

    path = session.expand(text)
    if session.client_for(path) is None:
        if not path.startswith("/"):
            path = join_location(current, path)
        if not os.path.isdir(canonicalize(path)):
            raise ScanError(f"{path} is not a directory")
    session.navigate(path)
    session.view.goto_swapper = ""
    return HandlerResult.SUCCESS


def toggle_mailboxes(session: BrowserSession, operation: Operation) -> HandlerResult:
    """Shared handler for the registry toggle, new-mail rescan and folder swap."""
    view = session.view
    cursors = session.cursors
    show_mailboxes = view.state.is_mailbox_list
    if show_mailboxes:
        view.last_selected_mailbox = view.cursor
    if operation is Operation.TOGGLE_MAILBOXES:
        show_mailboxes = not show_mailboxes

    saved = (cursors.current_location, cursors.previous_location, view.goto_swapper)
    if operation is Operation.GOTO_FOLDER and session.folder and not show_mailboxes:
        if view.goto_swapper:
            cursors.move_to(view.goto_swapper)
            view.goto_swapper = ""
        elif cursors.current_location != session.folder:
            view.goto_swapper = cursors.current_location
            cursors.move_to(session.folder)

    view.prefix = ""
    view.kill_prefix = False
    try:
        if show_mailboxes:
            new_state = session.scan_mailboxes()
        else:
            new_state = session.scan_location(cursors.current_location)
    except ScanError:
        cursors.current_location, cursors.previous_location, view.goto_swapper = saved
        raise
    session.install(new_state)
    return HandlerResult.SUCCESS


def enter_mask(session: BrowserSession, operation: Operation) -> HandlerResult:
    text = session.callbacks.get_line("File Mask: ", PromptKind.MASK, session.config.mask).strip()
    try:
        mask = FileMask.parse(text)
    except re.error as exc:
        session.callbacks.error(f"Error in mask: {exc}")
        return HandlerResult.ERROR

    session.config.mask = mask.pattern
    view = session.view
    view.prefix = ""
    view.kill_prefix = False
    if view.state.is_mailbox_list:
        session.install(session.scan_location(session.cursors.current_location))
    else:
        session.rescan()
    if not len(view.state):
        session.callbacks.error(NO_MATCH_MESSAGE)
    return HandlerResult.SUCCESS


def sort_listing(session: BrowserSession, operation: Operation) -> HandlerResult:
    descending = operation is Operation.SORT_REVERSE
    prompt = REVERSE_SORT_MENU_PROMPT if descending else SORT_MENU_PROMPT
    letters = "".join(SORT_MENU_LETTERS)
    index = session.callbacks.choose(prompt, letters)
    key = SortKey.from_letter(letters[index])

    session.config.sort_browser = str(SortSpec(key, descending))
    view = session.view
    sort_browser_state(view.state, key, descending)
    view.cursor = default_index(view.state)
    view.top = 0
    view.needs_redraw = True
    return HandlerResult.SUCCESS


def new_file(session: BrowserSession, operation: Operation) -> HandlerResult:
    current = session.cursors.current_location
    text = session.callbacks.get_line("New file name: ", PromptKind.FILENAME, join_location(current, "")).strip()
    if not text:
        return HandlerResult.NO_ACTION
    return session.finish_with(session.expand(text))


def view_file(session: BrowserSession, operation: Operation) -> HandlerResult:
    entry = _require_entry(session)
    if entry.is_remote and entry.remote_attrs.selectable:
        session.view.selected_file = entry.name
        return session.finish()
    if session.is_container(entry):
        raise InvariantViolation("Can't view a directory")
    if not entry.is_local:
        raise OperationUnsupported("Only local files can be viewed")

    path = session.entry_path(entry)
    try:
        session.callbacks.view_file(path)
    except OSError as exc:
        logger.warning("viewer failed for %s: %s", path, exc)
        session.callbacks.error("Error trying to view file")
        return HandlerResult.ERROR
    session.view.needs_redraw = True
    return HandlerResult.SUCCESS


def tell(session: BrowserSession, operation: Operation) -> HandlerResult:
    entry = session.view.current
    if entry is None:
        return HandlerResult.ERROR
    session.callbacks.message(entry.name)
    return HandlerResult.SUCCESS


def mailbox_list(session: BrowserSession, operation: Operation) -> HandlerResult:
    with_new = session.registry.with_new_mail()
    if not with_new:
        session.callbacks.message("No new mail")
        return HandlerResult.SUCCESS
    names = ", ".join(pretty_mailbox(mailbox.path, session.folder) for mailbox in with_new)
    session.callbacks.message(f"New mail in {names}")
    return HandlerResult.SUCCESS


def exit_browser(session: BrowserSession, operation: Operation) -> HandlerResult:
    return session.finish()


BROWSER_FUNCTIONS = {
    Operation.SELECT_ENTRY: select_entry,
    Operation.DESCEND_DIRECTORY: select_entry,
    Operation.GOTO_PARENT: goto_parent,
    Operation.CHANGE_DIRECTORY: change_directory,
    Operation.TOGGLE_MAILBOXES: toggle_mailboxes,
    Operation.CHECK_NEW: toggle_mailboxes,
    Operation.GOTO_FOLDER: toggle_mailboxes,
    Operation.ENTER_MASK: enter_mask,
    Operation.SORT: sort_listing,
    Operation.SORT_REVERSE: sort_listing,
    Operation.NEW_FILE: new_file,
    Operation.VIEW_FILE: view_file,
    Operation.TELL: tell,
    Operation.MAILBOX_LIST: mailbox_list,
    Operation.EXIT: exit_browser,
}


__all__ = ["BROWSER_FUNCTIONS", "NO_MATCH_MESSAGE"]
