"""Expand ``folder_format`` strings into listing rows.

Supported expandos::

    %C  entry number            %l  hard links
    %d  mtime (short form)      %m  message count
    %D  mtime via date_format   %N  "N" if the mailbox has new mail
    %F  permission string       %n  unread count
    %f  name with type suffix   %s  pretty size
    %g  group name              %t  "*" if tagged
    %i  description + suffix    %u  owner name

Each expando accepts printf-style ``[-][width][.precision]`` and the
conditional form ``%?X?then&else?`` (``&else`` optional). Only ``%m`` and
``%n`` are ever false, when their count is zero.
"""

from __future__ import annotations

import grp
import locale
import pwd
import re
import stat as stat_mod
import time

from ..browser_model.types import FolderEntry

ONE_YEAR_SECONDS = 31536000
RECENT_DATE_FORMAT = "%b %d %H:%M"
OLD_DATE_FORMAT = "%b %d  %Y"

_SPEC_RE = re.compile(r"(-?)(0?)(\d*)(?:\.(\d+))?")


def pretty_size(size: int) -> str:
    """Human-readable byte count (``999``, ``9.9K``, ``123K``, ``1.5M``, ``42M``)."""
    if size < 1000:
        return str(size)
    if size < 10189:
        return f"{size / 1024:3.1f}K"
    if size < 1023949:
        return f"{(size + 51) // 1024}K"
    if size < 10433332:
        return f"{size / 1048576:3.1f}M"
    return f"{(size + 52428) // 1048576}M"


def permission_string(mode: int) -> str:
    """``ls -l`` style permission column for a mode word."""
    if stat_mod.S_ISDIR(mode):
        kind = "d"
    elif stat_mod.S_ISLNK(mode):
        kind = "l"
    else:
        kind = "-"

    def bit(mask: int, char: str) -> str:
        return char if mode & mask else "-"

    def exec_bit(special: int, execute: int, special_char: str) -> str:
        if mode & special:
            return special_char
        return "x" if mode & execute else "-"

    return "".join(
        (
            kind,
            bit(stat_mod.S_IRUSR, "r"),
            bit(stat_mod.S_IWUSR, "w"),
            exec_bit(stat_mod.S_ISUID, stat_mod.S_IXUSR, "s"),
            bit(stat_mod.S_IRGRP, "r"),
            bit(stat_mod.S_IWGRP, "w"),
            exec_bit(stat_mod.S_ISGID, stat_mod.S_IXGRP, "s"),
            bit(stat_mod.S_IROTH, "r"),
            bit(stat_mod.S_IWOTH, "w"),
            exec_bit(stat_mod.S_ISVTX, stat_mod.S_IXOTH, "t"),
        )
    )


def type_suffix(entry: FolderEntry) -> str:
    if not entry.is_local:
        return ""
    st = entry.stat
    if st.is_symlink:
        return "@"
    if st.is_dir:
        return "/"
    if st.is_executable:
        return "*"
    return ""


def format_date(mtime: int, fmt: str) -> str:
    """``strftime`` in local time; a leading ``!`` forces the C locale."""
    if not fmt.startswith("!"):
        return time.strftime(fmt, time.localtime(mtime))
    saved = locale.setlocale(locale.LC_TIME)
    try:
        locale.setlocale(locale.LC_TIME, "C")
        return time.strftime(fmt[1:], time.localtime(mtime))
    finally:
        locale.setlocale(locale.LC_TIME, saved)


def _user_name(uid: int) -> str | None:
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return None


def _group_name(gid: int) -> str | None:
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return None


def apply_spec(text: str, spec: str) -> str:
    """Apply ``[-][0][width][.precision]`` to ``text``."""
    if not spec:
        return text
    match = _SPEC_RE.fullmatch(spec)
    if match is None:
        return text
    left, zero, width, precision = match.groups()
    if precision is not None:
        text = text[: int(precision)]
    if width:
        size = int(width)
        if left:
            return text.ljust(size)
        return text.rjust(size, "0" if zero and text.isdigit() else " ")
    return text


class _RowFormatter:
    def __init__(self, entry: FolderEntry, index: int, date_format: str, now: float) -> None:
        self.entry = entry
        self.index = index
        self.date_format = date_format
        self.now = now

    def truth(self, op: str) -> bool:
        mailbox = self.entry.mailbox_meta
        if op == "m":
            return mailbox is not None and mailbox.msg_count != 0
        if op == "n":
            return mailbox is not None and mailbox.msg_unread != 0
        return True

    def value(self, op: str) -> str:
        entry = self.entry
        local = entry.local_meta if entry.is_local else None
        mailbox = entry.mailbox_meta
        if op == "C":
            return str(self.index + 1)
        if op in ("d", "D"):
            if local is None:
                return ""
            if op == "D":
                fmt = self.date_format
            elif self.now - local.mtime < ONE_YEAR_SECONDS:
                fmt = RECENT_DATE_FORMAT
            else:
                fmt = OLD_DATE_FORMAT
            return format_date(local.mtime, fmt)
        if op == "f":
            return entry.name + type_suffix(entry)
        if op == "i":
            return entry.display_description + type_suffix(entry)
        if op == "F":
            if local is not None:
                return permission_string(local.mode)
            if entry.is_remote:
                attrs = entry.remote_attrs
                return "IMAP +" if attrs.has_children and attrs.selectable else "IMAP  "
            return ""
        if op == "g":
            if local is None:
                return ""
            return _group_name(local.gid) or str(local.gid)
        if op == "u":
            if local is None:
                return ""
            return _user_name(local.uid) or str(local.uid)
        if op == "l":
            return str(local.nlink) if local is not None else ""
        if op == "m":
            return str(mailbox.msg_count) if mailbox is not None else ""
        if op == "n":
            return str(mailbox.msg_unread) if mailbox is not None else ""
        if op == "N":
            return "N" if mailbox is not None and mailbox.has_new_mail else " "
        if op == "s":
            return pretty_size(local.size) if local is not None else ""
        if op == "t":
            return "*" if entry.tagged else " "
        return op

    def expand(self, fmt: str) -> str:
        out: list[str] = []
        pos = 0
        length = len(fmt)
        while pos < length:
            char = fmt[pos]
            if char != "%" or pos + 1 >= length:
                out.append(char)
                pos += 1
                continue
            pos += 1
            if fmt[pos] == "%":
                out.append("%")
                pos += 1
                continue
            if fmt[pos] == "?":
                pos = self._expand_conditional(fmt, pos + 1, out)
                continue
            match = _SPEC_RE.match(fmt, pos)
            spec = match.group(0) if match else ""
            pos += len(spec)
            if pos >= length:
                break
            out.append(apply_spec(self.value(fmt[pos]), spec))
            pos += 1
        return "".join(out)

    def _expand_conditional(self, fmt: str, pos: int, out: list[str]) -> int:
        # %?X?then&else?
        if pos + 1 >= len(fmt) or fmt[pos + 1] != "?":
            out.append("%?")
            return pos
        op = fmt[pos]
        end = fmt.find("?", pos + 2)
        if end < 0:
            end = len(fmt)
        body = fmt[pos + 2 : end]
        then_part, _sep, else_part = body.partition("&")
        out.append(self.expand(then_part if self.truth(op) else else_part))
        return end + 1


def format_folder_row(
    fmt: str,
    entry: FolderEntry,
    index: int,
    *,
    date_format: str = "%a, %b %d, %Y at %I:%M:%S%p %Z",
    now: float | None = None,
) -> str:
    """Render one listing row for ``entry`` at zero-based ``index``."""
    formatter = _RowFormatter(entry, index, date_format, time.time() if now is None else now)
    return formatter.expand(fmt)


__all__ = [
    "pretty_size",
    "permission_string",
    "type_suffix",
    "format_date",
    "apply_spec",
    "format_folder_row",
]
