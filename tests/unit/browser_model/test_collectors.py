"""Mailbox-registry and remote-hierarchy collector tests."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from browser_doubles import FAKE_ROOT, FakeRemoteClient, make_tree

from mailpick.browser_model.errors import BackendError, ScanError
from mailpick.browser_model.registry_scan import examine_mailboxes, maildir_mtime
from mailpick.browser_model.remote_scan import examine_remote
from mailpick.browser_model.types import EntryKind, ViewMode
from mailpick.mailboxes import Mailbox, MailboxRegistry, MailboxType


class ExamineMailboxesTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        make_tree(
            self.root,
            {
                "work": {"cur": {}, "new": {}, "tmp": {}},
                "lists": "From a@b Mon Jan  1 00:00:00 2024\n",
            },
        )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_empty_registry_is_an_error(self) -> None:
        with self.assertRaises(ScanError) as ctx:
            examine_mailboxes(MailboxRegistry())
        self.assertEqual(str(ctx.exception), "No mailboxes defined")

    def test_lists_visible_mailboxes_in_registry_order(self) -> None:
        registry = MailboxRegistry()
        registry.add(Mailbox(path=str(self.root / "work"), name="Work"))
        registry.add(Mailbox(path=str(self.root / "secret"), hidden=True))
        registry.add(Mailbox(path=str(self.root / "vanished")))
        registry.add(Mailbox(path=str(self.root / "lists")))
        registry.add(Mailbox(path="imaps://me@mail.example.com/INBOX", name="Remote"))

        state = examine_mailboxes(registry, abbreviate=True, folder=str(self.root))

        self.assertEqual(state.view_mode, ViewMode.MAILBOX_REGISTRY)
        self.assertEqual([entry.name for entry in state], ["=work", "=lists", "imaps://me@mail.example.com/INBOX"])
        work, lists, remote = state.entries
        self.assertEqual(work.kind, EntryKind.LOCAL)
        self.assertEqual(work.description, "Work")
        self.assertEqual(lists.description, "=lists")
        self.assertEqual(remote.kind, EntryKind.MAILBOX_REGISTRY)
        self.assertEqual(remote.description, "Remote")
        self.assertIsNone(remote.local_meta)

    def test_full_paths_without_abbreviation(self) -> None:
        registry = MailboxRegistry()
        registry.add(Mailbox(path=str(self.root / "lists")))
        state = examine_mailboxes(registry, abbreviate=False, folder=str(self.root))
        self.assertEqual(state[0].name, str(self.root / "lists"))

    def test_maildir_mtime_is_latest_of_new_and_cur(self) -> None:
        work = self.root / "work"
        os.utime(work / "new", (2000, 2000))
        os.utime(work / "cur", (1000, 1000))
        os.utime(work, (5, 5))
        self.assertEqual(maildir_mtime(str(work)), 2000)

        registry = MailboxRegistry()
        registry.add(Mailbox(path=str(work)))
        self.assertIs(registry.mailboxes[0].type, MailboxType.MAILDIR)
        state = examine_mailboxes(registry)
        self.assertEqual(state[0].stat.mtime, 2000)

    def test_active_mailbox_counters_are_synced(self) -> None:
        registry = MailboxRegistry()
        registry.add(Mailbox(path=str(self.root / "lists"), msg_count=1))
        active = Mailbox(path=str(self.root / "lists"), msg_count=40, msg_unread=3)
        state = examine_mailboxes(registry, active_mailbox=active)
        self.assertEqual(state[0].mailbox_meta.msg_count, 40)
        self.assertEqual(state[0].mailbox_meta.msg_unread, 3)


class ExamineRemoteTests(unittest.TestCase):
    def test_remote_listing_keeps_client_semantics(self) -> None:
        client = FakeRemoteClient(["INBOX", "lists", "lists/python", "lists/rust"], subscribed=["INBOX"])
        state = examine_remote(client, FAKE_ROOT)
        self.assertEqual(state.view_mode, ViewMode.REMOTE_HIERARCHY)
        self.assertEqual(state.remote_root, FAKE_ROOT)
        by_name = {entry.name: entry for entry in state}
        self.assertTrue(by_name[FAKE_ROOT + "INBOX"].remote_attrs.subscribed)
        self.assertTrue(by_name[FAKE_ROOT + "lists"].remote_attrs.has_children)
        self.assertEqual(by_name[FAKE_ROOT + "lists"].description, "lists/")

    def test_child_listing_has_parent_row_without_counters(self) -> None:
        client = FakeRemoteClient(["lists", "lists/python"])
        registry = MailboxRegistry()
        registry.add(Mailbox(path=FAKE_ROOT + "lists/python", msg_count=12))
        state = examine_remote(client, FAKE_ROOT + "lists/", registry=registry)
        parent, python = state.entries
        self.assertTrue(parent.is_parent)
        self.assertIsNone(parent.mailbox_meta)
        self.assertEqual(python.mailbox_meta.msg_count, 12)

    def test_backend_failure_propagates(self) -> None:
        client = FakeRemoteClient(["INBOX"])
        client.failing.add(FAKE_ROOT + "nope/")
        with self.assertRaises(BackendError):
            examine_remote(client, FAKE_ROOT + "nope/")


if __name__ == "__main__":
    unittest.main()
