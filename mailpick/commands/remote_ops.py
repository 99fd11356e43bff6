"""Remote-scope handlers: subscriptions and mailbox management.

These only work while a remote hierarchy is displayed; anywhere else they
raise ``OperationUnsupported``.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from ..browser_model.errors import InvariantViolation, OperationUnsupported
from ..browser_model.types import FolderEntry
from ..remote.client import RemoteClient
from ..runtime.state import PromptKind
from .operations import HandlerResult, Operation

if TYPE_CHECKING:
    from ..runtime.session import BrowserSession

logger = logging.getLogger(__name__)


def _remote_client(session: BrowserSession, action: str) -> RemoteClient:
    client = session.current_client
    if client is None:
        raise OperationUnsupported(f"{action} is only supported for IMAP mailboxes")
    return client


def _remote_entry(session: BrowserSession, action: str) -> tuple[RemoteClient, FolderEntry]:
    client = _remote_client(session, action)
    entry = session.view.current
    if entry is None or not entry.is_remote or entry.is_parent:
        raise OperationUnsupported(f"{action} needs a remote mailbox entry")
    return client, entry


def subscribe(session: BrowserSession, operation: Operation) -> HandlerResult:
    wanted = operation is Operation.SUBSCRIBE
    client, entry = _remote_entry(session, "Subscribe" if wanted else "Unsubscribe")
    client.subscribe(entry.name, wanted)
    entry.update_remote_attrs(subscribed=wanted)
    label = client.mailbox_path(entry.name)
    session.callbacks.message(f"Subscribed to {label}" if wanted else f"Unsubscribed from {label}")
    if not wanted and session.config.imap_list_subscribed:
        session.rescan(placement=False)
    else:
        session.view.needs_redraw = True
    return HandlerResult.SUCCESS


def subscribe_pattern(session: BrowserSession, operation: Operation) -> HandlerResult:
    """Apply (un)subscribe to every listed mailbox matching a regex."""
    wanted = operation is Operation.SUBSCRIBE_PATTERN
    client = _remote_client(session, "Subscribe" if wanted else "Unsubscribe")
    prompt = "Subscribe pattern: " if wanted else "Unsubscribe pattern: "
    text = session.callbacks.get_line(prompt, PromptKind.PATTERN, "").strip()
    if not text:
        return HandlerResult.NO_ACTION
    try:
        pattern = re.compile(text)
    except re.error as exc:
        session.callbacks.error(f"Invalid pattern: {exc}")
        return HandlerResult.ERROR

    changed = 0
    for entry in list(session.view.state):
        if not entry.is_remote or entry.is_parent:
            continue
        if entry.remote_attrs.subscribed == wanted:
            continue
        if pattern.search(client.mailbox_path(entry.name)) is None:
            continue
        client.subscribe(entry.name, wanted)
        entry.update_remote_attrs(subscribed=wanted)
        changed += 1
    verb = "subscribed" if wanted else "unsubscribed"
    session.callbacks.message(f"{changed} mailboxes {verb}")
    if changed and not wanted and session.config.imap_list_subscribed:
        session.rescan(placement=False)
    else:
        session.view.needs_redraw = True
    return HandlerResult.SUCCESS


def create_mailbox(session: BrowserSession, operation: Operation) -> HandlerResult:
    client = _remote_client(session, "Create")
    current = session.cursors.current_location
    name = session.callbacks.get_line("Create mailbox: ", PromptKind.MAILBOX, client.mailbox_path(current)).strip()
    if not name:
        return HandlerResult.NO_ACTION
    client.create(client.location_for(current, name))
    session.callbacks.message("Mailbox created")
    session.rescan()
    return HandlerResult.SUCCESS


def delete_mailbox(session: BrowserSession, operation: Operation) -> HandlerResult:
    """Delete the highlighted remote mailbox after confirmation."""
    client, entry = _remote_entry(session, "Delete")
    active = session.active_mailbox
    target = client.tracking_name(entry.name)
    if active is not None and client.handles(active.path) and client.tracking_name(active.path) == target:
        raise InvariantViolation("Can't delete currently selected mailbox")
    displayed = session.view.state.remote_root or session.cursors.current_location
    if client.tracking_name(displayed) == target:
        raise InvariantViolation("Can't delete the mailbox being displayed")

    label = client.mailbox_path(entry.name)
    if not session.callbacks.confirm(f'Really delete mailbox "{label}"?', False):
        session.callbacks.message("Mailbox not deleted")
        return HandlerResult.NO_ACTION

    client.delete(entry.name)
    view = session.view
    if entry.name in view.tagged_paths:
        view.tagged_paths.remove(entry.name)
    view.state.remove(entry)
    view.cursor = min(view.cursor, max(len(view.state) - 1, 0))
    view.needs_redraw = True
    session.callbacks.message("Mailbox deleted")
    return HandlerResult.SUCCESS


def rename_mailbox(session: BrowserSession, operation: Operation) -> HandlerResult:
    client, entry = _remote_entry(session, "Rename")
    old_path = client.mailbox_path(entry.name)
    new_path = session.callbacks.get_line(f"Rename mailbox {old_path} to: ", PromptKind.MAILBOX, old_path).strip()
    if not new_path or new_path == old_path:
        return HandlerResult.NO_ACTION
    client.rename(entry.name, client.location_for(entry.name, new_path))
    session.callbacks.message("Mailbox renamed")
    session.rescan(placement=False)
    return HandlerResult.SUCCESS


def toggle_subscribed(session: BrowserSession, operation: Operation) -> HandlerResult:
    _remote_client(session, "Listing subscribed mailboxes")
    config = session.config
    config.imap_list_subscribed = not config.imap_list_subscribed
    session.clients.set_subscribed_only(config.imap_list_subscribed)
    logger.debug("imap_list_subscribed=%s", config.imap_list_subscribed)
    session.rescan()
    return HandlerResult.SUCCESS


REMOTE_FUNCTIONS = {
    Operation.SUBSCRIBE: subscribe,
    Operation.UNSUBSCRIBE: subscribe,
    Operation.SUBSCRIBE_PATTERN: subscribe_pattern,
    Operation.UNSUBSCRIBE_PATTERN: subscribe_pattern,
    Operation.CREATE_MAILBOX: create_mailbox,
    Operation.DELETE_MAILBOX: delete_mailbox,
    Operation.RENAME_MAILBOX: rename_mailbox,
    Operation.TOGGLE_SUBSCRIBED: toggle_subscribed,
}


__all__ = ["REMOTE_FUNCTIONS"]
