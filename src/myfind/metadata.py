from __future__ import annotations

import os
import stat
from collections.abc import Callable
from dataclasses import dataclass

from .chain import EntryKind
from .errors import AccessDenied, OtherIOError

StatFn = Callable[[str], os.stat_result]

_KIND_TESTS = (
    (stat.S_ISBLK, EntryKind.BLOCK),
    (stat.S_ISCHR, EntryKind.CHAR),
    (stat.S_ISDIR, EntryKind.DIR),
    (stat.S_ISFIFO, EntryKind.FIFO),
    (stat.S_ISREG, EntryKind.REGULAR),
    (stat.S_ISLNK, EntryKind.SYMLINK),
    (stat.S_ISSOCK, EntryKind.SOCKET),
)


def kind_of(mode: int) -> EntryKind | None:
    for test, kind in _KIND_TESTS:
        if test(mode):
            return kind
    return None


@dataclass(frozen=True)
class EntryMetadata:
    inode: int
    mode: int
    nlink: int
    uid: int
    gid: int
    size: int
    mtime: float
    blocks: int  # 512-byte units

    @classmethod
    def from_stat(cls, st: os.stat_result) -> EntryMetadata:
        return cls(
            inode=st.st_ino,
            mode=st.st_mode,
            nlink=st.st_nlink,
            uid=st.st_uid,
            gid=st.st_gid,
            size=st.st_size,
            mtime=st.st_mtime,
            blocks=getattr(st, "st_blocks", 0),
        )

    @property
    def kind(self) -> EntryKind | None:
        return kind_of(self.mode)

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.mode)


def fetch(path: str, stat_fn: StatFn = os.lstat) -> EntryMetadata:
    """Snapshot the metadata of ``path`` without following symlinks.

    Raises AccessDenied for permission failures and OtherIOError for
    anything else the OS reports.
    """
    try:
        st = stat_fn(path)
    except PermissionError:
        raise AccessDenied("stat", path) from None
    except OSError as e:
        raise OtherIOError("stat", path, e.errno, e.strerror) from e
    return EntryMetadata.from_stat(st)
