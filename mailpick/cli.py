"""Command-line front door for mailpick.

Parses CLI options, loads config and logging, runs one browser session on
the controlling terminal and prints what was selected.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import os
import sys
from pathlib import Path

from .logs import setup_logging
from .mailboxes import Mailbox, MailboxRegistry, scheme_mailbox_type
from .remote.credentials import set_password
from .remote.url import ImapUrl
from .runtime import run_browser
from .runtime.config import DEFAULT_CONFIG_PATH, load_config
from .runtime.session import FileBrowser
from .runtime.state import SelectFlags, SelectionResult
from .viewer import DEFAULT_STYLE

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mailpick",
        description="Browse local directories, configured mailboxes and IMAP folders; print the selection.",
    )
    parser.add_argument("path", nargs="?", default="", help="Start path or IMAP URL (default: current directory).")
    parser.add_argument("-y", "--mailboxes", action="store_true", help="Start in the mailbox list.")
    parser.add_argument("-m", "--multiple", action="store_true", help="Allow selecting several entries with tags.")
    parser.add_argument("--folder", action="store_true", help="Browse for a folder, starting near --active.")
    parser.add_argument("--active", metavar="PATH", default=None, help="Path of the currently open mailbox.")
    parser.add_argument("--config", type=Path, default=None, help=f"Config file (default: {DEFAULT_CONFIG_PATH}).")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING", help="Log file verbosity.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs here instead of the default.")
    parser.add_argument("-0", "--null", action="store_true", help="Separate printed paths with NUL.")
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name for the file viewer.")
    parser.add_argument(
        "--set-password",
        metavar="URL",
        default=None,
        help="Store the password for an imap[s]://user@host URL in the keyring and exit.",
    )
    return parser


def active_mailbox_for(path: str | None, registry: MailboxRegistry) -> Mailbox | None:
    """Registry record for ``path``, or a free-standing record when unregistered."""
    if not path:
        return None
    found = registry.find_by_realpath(path)
    if found is not None:
        return found
    if scheme_mailbox_type(path) is None:
        path = os.path.abspath(os.path.expanduser(path))
    return Mailbox(path=path)


def store_password(url_text: str) -> int:
    try:
        url = ImapUrl.parse(url_text)
    except ValueError as exc:
        sys.stderr.write(f"{exc}\n")
        return 2
    if not url.user:
        sys.stderr.write("The URL needs a user name (imaps://user@host).\n")
        return 2
    password = getpass.getpass(f"Password for {url.user}@{url.host}: ")
    if not set_password(url.user, url.host, password):
        sys.stderr.write("Could not store the password in the keyring.\n")
        return 1
    return 0


def print_selection(result: SelectionResult, null_separated: bool) -> None:
    separator = "\0" if null_separated else "\n"
    sys.stdout.write("".join(path + separator for path in result.all_paths()))
    sys.stdout.flush()


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments, run a session and exit with status 1 on no selection."""
    args = build_parser().parse_args(argv)
    log_path = setup_logging(args.log_level, args.log_file)
    logger.debug("logging to %s", log_path)

    if args.set_password is not None:
        raise SystemExit(store_password(args.set_password))

    config = load_config(args.config)
    browser = FileBrowser.from_config(config)
    flags = SelectFlags(mailbox=args.mailboxes, multiple=args.multiple, folder=args.folder)
    try:
        result = run_browser(
            browser,
            args.path,
            flags,
            active_mailbox_for(args.active, browser.registry),
            style=args.style,
        )
    except OSError as exc:
        raise SystemExit(f"mailpick: cannot use the terminal: {exc}") from exc
    finally:
        browser.close()

    if result.is_empty:
        raise SystemExit(1)
    print_selection(result, args.null)


if __name__ == "__main__":
    main()
