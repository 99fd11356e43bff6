"""Session controller: one interactive selection from start to result.

``FileBrowser`` owns the process-lifetime pieces (config, mailbox registry,
remote clients, navigation cursors). Each ``select_file`` call runs a fresh
``BrowserSession`` that scans, dispatches operations and returns a
``SelectionResult``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from enum import Enum

from ..browser_model.errors import BrowserError, ScanError, SessionAborted
from ..browser_model.local_scan import entry_is_container, examine_directory
from ..browser_model.registry_scan import examine_mailboxes
from ..browser_model.remote_scan import examine_remote
from ..browser_model.sorting import SortSpec
from ..browser_model.types import BrowserState, FolderEntry
from ..commands.dispatcher import CommandDispatcher, build_dispatcher
from ..commands.operations import HandlerResult
from ..mailboxes import Mailbox, MailboxRegistry, expand_path, pretty_mailbox
from ..remote.client import RemoteClient, RemoteClients
from .config import BrowserConfig
from .navigation import (
    NavigationCursors,
    canonicalize,
    clamp_index,
    entry_path,
    join_location,
    local_parent_location,
    local_tracking_name,
    place_cursor,
    seed_from_active_mailbox,
    split_initial_path,
    tracking_enabled,
)
from .state import BrowserView, SelectFlags, SelectionResult, SessionCallbacks

logger = logging.getLogger(__name__)


class SessionPhase(Enum):
    INIT = "init"
    SCANNING = "scanning"
    DISPLAYING = "displaying"
    DISPATCHING = "dispatching"
    DONE = "done"


class BrowserSession:
    """State machine for one selection session."""

    def __init__(
        self,
        browser: FileBrowser,
        flags: SelectFlags,
        active_mailbox: Mailbox | None,
        callbacks: SessionCallbacks,
    ) -> None:
        self.browser = browser
        self.config = browser.config
        self.registry = browser.registry
        self.clients = browser.clients
        self.cursors = browser.cursors
        self.dispatcher = browser.dispatcher
        self.active_mailbox = active_mailbox
        self.callbacks = callbacks
        self.view = BrowserView(flags=flags)
        self.phase = SessionPhase.INIT
        self.result: SelectionResult | None = None

    # -- lookups -------------------------------------------------------------

    @property
    def sort_spec(self) -> SortSpec:
        return self.config.sort_spec

    @property
    def tracking(self) -> bool:
        return tracking_enabled(self.sort_spec.key)

    def client_for(self, location: str | None) -> RemoteClient | None:
        return self.clients.for_location(location)

    @property
    def current_client(self) -> RemoteClient | None:
        """Client owning the displayed remote listing, if any."""
        if not self.view.state.is_remote:
            return None
        return self.client_for(self.cursors.current_location)

    @property
    def folder(self) -> str | None:
        """Configured folder root with ``~`` expanded."""
        return os.path.expanduser(self.config.folder) if self.config.folder else None

    def expand(self, text: str) -> str:
        return expand_path(text, self.folder, self.config.spool_file)

    def entry_path(self, entry: FolderEntry) -> str:
        return entry_path(
            entry,
            self.cursors.current_location,
            self.view.state.is_mailbox_list,
            self.folder,
        )

    def is_container(self, entry: FolderEntry) -> bool:
        return entry_is_container(entry, self.entry_path(entry))

    # -- scanning ------------------------------------------------------------

    def scan_location(self, location: str) -> BrowserState:
        """Scan a filesystem or remote location into a fresh listing."""
        self.phase = SessionPhase.SCANNING
        client = self.client_for(location)
        if client is not None:
            return examine_remote(client, location, self.registry, self.active_mailbox, self.sort_spec)
        return examine_directory(
            location,
            prefix=self.view.prefix,
            mask=self.config.file_mask,
            registry=self.registry,
            active_mailbox=self.active_mailbox,
            sort=self.sort_spec,
        )

    def scan_mailboxes(self) -> BrowserState:
        self.phase = SessionPhase.SCANNING
        return examine_mailboxes(
            self.registry,
            active_mailbox=self.active_mailbox,
            abbreviate=self.config.browser_abbreviate_mailboxes,
            folder=self.folder,
            sort=self.sort_spec,
        )

    def _tracking_namer(self) -> Callable[[str], str]:
        client = self.client_for(self.cursors.previous_location)
        return client.tracking_name if client is not None else local_tracking_name

    def install(self, new_state: BrowserState, *, placement: bool = True) -> None:
        """Swap ``new_state`` in as the displayed listing.

        The old listing is released only after the swap. ``placement`` runs
        directory tracking; otherwise the cursor index is just clamped.
        """
        old_state = self.view.state
        if new_state.location and not new_state.is_remote and not new_state.is_mailbox_list:
            self.cursors.current_location = new_state.location
        tagged = set(self.view.tagged_paths)
        self.view.state = new_state
        for entry in new_state:
            entry.tagged = self.entry_path(entry) in tagged

        if placement:
            self.view.cursor = place_cursor(
                new_state,
                self.cursors,
                self.view.cursor,
                self._tracking_namer(),
                self.tracking,
            )
        else:
            self.view.cursor = clamp_index(self.view.cursor, len(new_state))
        if new_state.is_mailbox_list and 0 <= self.view.last_selected_mailbox < len(new_state):
            self.view.cursor = self.view.last_selected_mailbox
        self.view.top = 0
        self.view.title = self.title()
        self.view.needs_redraw = True
        if old_state is not new_state:
            old_state.clear()

    def rescan(self, *, placement: bool = True) -> None:
        """Rebuild the displayed view from its backend."""
        if self.view.state.is_mailbox_list:
            new_state = self.scan_mailboxes()
        else:
            new_state = self.scan_location(self.cursors.current_location)
        self.install(new_state, placement=placement)

    def show_mailboxes(self) -> None:
        self.install(self.scan_mailboxes())

    # -- navigation ----------------------------------------------------------

    def navigate(self, location: str) -> None:
        """Move to ``location`` and display it.

        On failure the previous location is restored and rescanned before the
        original error propagates. ``SessionAborted`` means even that failed.
        """
        saved_current = self.cursors.current_location
        saved_previous = self.cursors.previous_location
        was_mailbox_list = self.view.state.is_mailbox_list
        if self.view.kill_prefix:
            self.view.prefix = ""
            self.view.kill_prefix = False
        try:
            target = location if self.client_for(location) is not None else canonicalize(location)
            new_state = self.scan_location(target)
        except BrowserError as exc:
            logger.warning("cannot open %s: %s", location, exc)
            self._restore(saved_current, saved_previous, was_mailbox_list)
            raise
        self.cursors.move_to(target)
        self.install(new_state)

    def _restore(self, current: str, previous: str, mailbox_list: bool) -> None:
        self.cursors.current_location = current
        self.cursors.previous_location = previous
        try:
            new_state = self.scan_mailboxes() if mailbox_list else self.scan_location(current)
        except BrowserError as exc:
            raise SessionAborted(f"Error scanning directory: {exc}") from exc
        self.install(new_state, placement=False)

    def descend(self, entry: FolderEntry) -> None:
        """Open the container ``entry`` stands for."""
        current = self.cursors.current_location
        if entry.is_remote:
            client = self.client_for(entry.name)
            if client is None:
                raise ScanError(f"No client for {entry.name}")
            location = client.child_location(entry)
        elif self.view.state.is_mailbox_list:
            location = self.entry_path(entry)
        elif entry.is_parent:
            location = local_parent_location(current)
        else:
            location = join_location(current, entry.name)
        self.navigate(location)

    # -- display -------------------------------------------------------------

    def title(self) -> str:
        if self.view.state.is_mailbox_list:
            return f"Mailboxes [{len(self.registry.with_new_mail())}]"
        location = self.cursors.current_location
        if not self.view.state.is_remote:
            location = pretty_mailbox(location, self.folder)
        if self.view.state.is_remote and self.config.imap_list_subscribed:
            return f"Subscribed [{location}], File mask: {self.config.mask}"
        return f"Directory [{location}], File mask: {self.config.mask}"

    # -- results -------------------------------------------------------------

    def finish(self) -> HandlerResult:
        """Build the session result from tags or the selection and stop."""
        view = self.view
        if view.flags.multiple:
            if view.tagged_paths:
                self.result = SelectionResult(paths=tuple(view.tagged_paths))
            elif view.selected_file is not None:
                self.result = SelectionResult(path=view.selected_file, paths=(view.selected_file,))
            elif view.current is not None and not view.current.is_parent:
                path = self.entry_path(view.current)
                self.result = SelectionResult(path=path, paths=(path,))
        elif view.selected_file is not None:
            self.result = SelectionResult(path=view.selected_file)
        return HandlerResult.DONE

    def finish_with(self, path: str) -> HandlerResult:
        """End the session with exactly ``path``, ignoring tags."""
        self.view.selected_file = path
        self.result = SelectionResult(path=path, paths=(path,) if self.view.flags.multiple else ())
        return HandlerResult.DONE

    # -- lifecycle -----------------------------------------------------------

    def _start_location(self, initial: str) -> None:
        flags = self.view.flags
        if initial:
            path = self.expand(initial)
            if self.client_for(path) is not None:
                self.cursors.current_location = path
                return
            directory, prefix = split_initial_path(path, os.getcwd())
            self.cursors.current_location = directory
            if prefix:
                self.view.prefix = prefix
                self.view.kill_prefix = True
        elif flags.folder:
            seed_from_active_mailbox(
                self.cursors,
                self.active_mailbox.path if self.active_mailbox is not None else None,
                self.sort_spec.key,
                self.folder,
                self.expand(self.config.spool_file) if self.config.spool_file else None,
                self.client_for,
            )
        else:
            self.cursors.current_location = ""
        if not self.cursors.current_location:
            self.cursors.current_location = os.getcwd()

    def start(self, initial: str = "") -> None:
        """Pick the start location and install the first listing."""
        self._start_location(initial)
        if self.view.flags.mailbox:
            new_state = self.scan_mailboxes()
        else:
            new_state = self.scan_location(self.cursors.current_location)
        self.install(new_state)

    def run(self, initial: str = "") -> SelectionResult:
        """Drive the session until an operation reports ``DONE``."""
        try:
            self.start(initial)
        except BrowserError as exc:
            logger.warning("initial scan failed: %s", exc)
            self.callbacks.error(str(exc))
            self.phase = SessionPhase.DONE
            return SelectionResult()

        while True:
            self.phase = SessionPhase.DISPLAYING
            operation = self.callbacks.next_operation(self.view)
            self.phase = SessionPhase.DISPATCHING
            if self.dispatcher.dispatch(self, operation) is HandlerResult.DONE:
                break

        self.phase = SessionPhase.DONE
        self.view.state.clear()
        return self.result or SelectionResult()


class FileBrowser:
    """Process-level browser: one instance serves many selection sessions."""

    def __init__(
        self,
        config: BrowserConfig | None = None,
        registry: MailboxRegistry | None = None,
        clients: RemoteClients | None = None,
        cursors: NavigationCursors | None = None,
        dispatcher: CommandDispatcher | None = None,
    ) -> None:
        self.config = config if config is not None else BrowserConfig()
        self.registry = registry if registry is not None else MailboxRegistry()
        self.clients = clients if clients is not None else RemoteClients()
        self.clients.set_subscribed_only(self.config.imap_list_subscribed)
        self.cursors = cursors if cursors is not None else NavigationCursors()
        self.dispatcher = dispatcher if dispatcher is not None else build_dispatcher()

    @classmethod
    def from_config(cls, config: BrowserConfig) -> FileBrowser:
        """Build a browser with the registry and IMAP client the config describes."""
        from ..remote.imap import ImapHierarchyClient

        registry = MailboxRegistry.from_config(config.mailboxes, config.folder)
        clients = RemoteClients([ImapHierarchyClient(timeout=config.imap_timeout)])
        return cls(config, registry, clients)

    def select_file(
        self,
        initial: str = "",
        flags: SelectFlags | None = None,
        active_mailbox: Mailbox | None = None,
        callbacks: SessionCallbacks | None = None,
    ) -> SelectionResult:
        """Run one interactive session and return what the user picked."""
        if callbacks is None:
            raise ValueError("select_file needs session callbacks")
        session = BrowserSession(self, flags or SelectFlags(), active_mailbox, callbacks)
        result = session.run(initial)
        logger.debug("session ended with %s", result.all_paths())
        return result

    def close(self) -> None:
        self.clients.close()


__all__ = ["SessionPhase", "BrowserSession", "FileBrowser"]
