from __future__ import annotations

import stat
import time
from collections.abc import Callable
from typing import TextIO

from .chain import Action, DetailListAction, PrintAction
from .identity import Identity
from .metadata import EntryMetadata

# Fixed English abbreviations; strftime("%b") would follow the locale.
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_PERM_BITS = (
    (stat.S_IRUSR, "r"), (stat.S_IWUSR, "w"), (stat.S_IXUSR, "x"),
    (stat.S_IRGRP, "r"), (stat.S_IWGRP, "w"), (stat.S_IXGRP, "x"),
    (stat.S_IROTH, "r"), (stat.S_IWOTH, "w"), (stat.S_IXOTH, "x"),
)

Clock = Callable[[float], time.struct_time]


def permission_string(mode: int) -> str:
    head = "d" if stat.S_ISDIR(mode) else "-"
    return head + "".join(ch if mode & bit else "-" for bit, ch in _PERM_BITS)


def format_mtime(mtime: float, clock: Clock = time.localtime) -> str:
    tm = clock(int(mtime))
    return f"{_MONTHS[tm.tm_mon - 1]} {tm.tm_mday:2d} {tm.tm_hour:02d}:{tm.tm_min:02d}"


def format_ls_line(
    meta: EntryMetadata,
    path: str,
    identity: Identity,
    clock: Clock = time.localtime,
) -> str:
    """Render one ``-ls`` line, without the trailing newline.

    Columns are right-aligned to fixed widths: inode (10), 1K blocks (7),
    permissions (11), links (4), owner (11), group (11), size (10) and
    modification time (13), then a space and the path.
    """
    user = identity.user_name(meta.uid) or str(meta.uid)
    group = identity.group_name(meta.gid) or str(meta.gid)
    return (
        f"{meta.inode:>10}"
        f"{meta.blocks // 2:>7}"
        f"{permission_string(meta.mode):>11}"
        f"{meta.nlink:>4}"
        f"{user:>11}"
        f"{group:>11}"
        f"{meta.size:>10}"
        f"{format_mtime(meta.mtime, clock):>13}"
        f" {path}"
    )


def perform(
    meta: EntryMetadata,
    path: str,
    spec: Action,
    identity: Identity,
    out: TextIO,
    clock: Clock = time.localtime,
) -> None:
    if isinstance(spec, PrintAction):
        out.write(path + "\n")
    elif isinstance(spec, DetailListAction):
        out.write(format_ls_line(meta, path, identity, clock) + "\n")
    else:
        raise TypeError(f"not an action: {spec!r}")
