"""IMAP hierarchy client tests against a mocked ``IMAPClient``.

The mock answers ``LIST``/``LSUB`` like a server using ``.`` as delimiter.
"""

from __future__ import annotations

import unittest
from unittest import mock

from imapclient.exceptions import IMAPClientError

from mailpick.browser_model.errors import BackendError
from mailpick.browser_model.types import BrowserState, FolderEntry, RemoteAttrs, ViewMode
from mailpick.remote.imap import ImapHierarchyClient
from mailpick.remote.url import ImapUrl

ROOT = "imaps://me@mail.example.com/"

FOLDERS = [
    ((b"\\HasNoChildren",), b".", "INBOX"),
    ((b"\\HasChildren",), b".", "lists"),
    ((b"\\HasNoChildren",), b".", "lists.python"),
    ((b"\\Noselect", b"\\HasChildren"), b".", "archive"),
]


def _list_folders(directory: str = "", pattern: str = "*"):
    if pattern == "":
        return [((b"\\Noselect",), b".", "")]
    prefix = pattern[:-1]
    return [
        row for row in FOLDERS if row[2].startswith(prefix) and "." not in row[2][len(prefix) :]
    ]


def _server() -> mock.MagicMock:
    conn = mock.MagicMock()
    conn.list_folders.side_effect = _list_folders
    conn.lsub_folders.side_effect = lambda directory="", pattern="*": [
        row for row in _list_folders(directory, pattern) if row[2] == "INBOX"
    ]
    return conn


class ImapUrlTests(unittest.TestCase):
    def test_parse_and_format(self) -> None:
        url = ImapUrl.parse("imaps://me@mail.example.com:1993/lists.python")
        self.assertEqual((url.user, url.host, url.port, url.path), ("me", "mail.example.com", 1993, "lists.python"))
        self.assertTrue(url.secure)
        self.assertEqual(str(url), "imaps://me@mail.example.com:1993/lists.python")

    def test_default_ports(self) -> None:
        self.assertEqual(ImapUrl.parse("imap://host").effective_port, 143)
        self.assertEqual(ImapUrl.parse("imaps://host/").effective_port, 993)

    def test_account_key_ignores_path_and_host_case(self) -> None:
        a = ImapUrl.parse("imaps://me@Mail.Example.com/INBOX")
        b = ImapUrl.parse("imaps://me@mail.example.com/Sent")
        self.assertEqual(a.account_key, b.account_key)

    def test_rejects_non_imap_and_bad_port(self) -> None:
        for text in ("pop://host/", "/var/mail/me", "imap:///INBOX", "imap://host:abc/"):
            with self.subTest(text=text), self.assertRaises(ValueError):
                ImapUrl.parse(text)


class ImapHierarchyClientTests(unittest.TestCase):
    def setUp(self) -> None:
        self.conn = _server()
        self.factory = mock.Mock(return_value=self.conn)
        self.client = ImapHierarchyClient(
            timeout=7,
            password_lookup=lambda user, host: "secret",
            client_factory=self.factory,
        )

    def _browse(self, location: str) -> BrowserState:
        state = BrowserState(view_mode=ViewMode.REMOTE_HIERARCHY, remote_root=location, location=location)
        self.client.browse(location, state)
        return state

    def test_top_level_listing(self) -> None:
        state = self._browse(ROOT)
        self.factory.assert_called_once_with(host="mail.example.com", port=993, ssl=True, timeout=7)
        self.conn.login.assert_called_once_with("me", "secret")
        by_desc = {entry.description: entry for entry in state}
        self.assertEqual(set(by_desc), {"INBOX", "lists.", "archive."})
        self.assertTrue(by_desc["INBOX"].remote_attrs.subscribed)
        self.assertFalse(by_desc["INBOX"].remote_attrs.has_children)
        self.assertFalse(by_desc["archive."].remote_attrs.selectable)
        self.assertEqual(by_desc["lists."].name, ROOT + "lists")
        self.assertEqual(by_desc["lists."].remote_attrs.delimiter, ".")

    def test_child_listing_has_parent_row(self) -> None:
        state = self._browse(ROOT + "lists.")
        parent, child = state.entries
        self.assertTrue(parent.is_parent)
        self.assertEqual(parent.name, ROOT)
        self.assertEqual(child.name, ROOT + "lists.python")
        self.assertEqual(child.description, "python")

    def test_subscribed_only_uses_lsub(self) -> None:
        self.client.subscribed_only = True
        state = self._browse(ROOT)
        self.assertEqual([entry.description for entry in state], ["INBOX"])

    def test_connection_is_reused(self) -> None:
        self._browse(ROOT)
        self._browse(ROOT + "lists.")
        self.assertEqual(self.factory.call_count, 1)

    def test_missing_password_is_backend_error(self) -> None:
        client = ImapHierarchyClient(password_lookup=lambda user, host: None, client_factory=self.factory)
        with self.assertRaises(BackendError) as ctx:
            client.browse(ROOT, BrowserState(view_mode=ViewMode.REMOTE_HIERARCHY))
        self.assertIn("No password", str(ctx.exception))

    def test_missing_user_is_backend_error(self) -> None:
        with self.assertRaises(BackendError):
            self.client.browse("imaps://mail.example.com/", BrowserState(view_mode=ViewMode.REMOTE_HIERARCHY))

    def test_server_errors_carry_server_text(self) -> None:
        self._browse(ROOT)
        self.conn.delete_folder.side_effect = IMAPClientError("NO [CANNOT] mailbox in use")
        with self.assertRaises(BackendError) as ctx:
            self.client.delete(ROOT + "INBOX")
        self.assertIn("mailbox in use", str(ctx.exception))

    def test_mailbox_management_uses_server_names(self) -> None:
        self._browse(ROOT)
        self.client.subscribe(ROOT + "lists.python", True)
        self.client.subscribe(ROOT + "lists.python", False)
        self.client.create(ROOT + "lists.go")
        self.client.rename(ROOT + "lists.go", ROOT + "lists.golang")
        self.conn.subscribe_folder.assert_called_once_with("lists.python")
        self.conn.unsubscribe_folder.assert_called_once_with("lists.python")
        self.conn.create_folder.assert_called_once_with("lists.go")
        self.conn.rename_folder.assert_called_once_with("lists.go", "lists.golang")

    def test_rename_across_accounts_is_refused(self) -> None:
        with self.assertRaises(BackendError):
            self.client.rename(ROOT + "a", "imaps://other@mail.example.com/a")

    def test_path_helpers_use_learned_delimiter(self) -> None:
        self._browse(ROOT)
        self.assertEqual(self.client.parent_path(ROOT + "lists.python"), ROOT + "lists.")
        self.assertEqual(self.client.parent_path(ROOT + "lists."), ROOT)
        self.assertEqual(self.client.tracking_name(ROOT + "lists."), ROOT + "lists")
        self.assertEqual(self.client.mailbox_path(ROOT + "lists."), "lists")
        self.assertEqual(self.client.location_for(ROOT + "lists.", "lists.go"), ROOT + "lists.go")

    def test_child_location_appends_delimiter(self) -> None:
        entry = FolderEntry.remote(ROOT + "lists", RemoteAttrs(delimiter=".", has_children=True))
        self.assertEqual(self.client.child_location(entry), ROOT + "lists.")

    def test_close_logs_out_and_tolerates_errors(self) -> None:
        self._browse(ROOT)
        self.conn.logout.side_effect = OSError("broken pipe")
        self.client.close()
        self.conn.logout.assert_called_once()
        self.assertTrue(self.client.handles(ROOT))
        self.assertFalse(self.client.handles("/var/mail/me"))


if __name__ == "__main__":
    unittest.main()
