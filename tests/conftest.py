from __future__ import annotations

import stat
from pathlib import Path

import pytest

from myfind.metadata import EntryMetadata


class StubIdentity:
    def __init__(self, users: dict[str, int] | None = None, groups: dict[str, int] | None = None) -> None:
        self.users = dict(users or {})
        self.groups = dict(groups or {})

    def user_name(self, uid: int) -> str | None:
        return next((n for n, i in self.users.items() if i == uid), None)

    def user_id(self, name: str) -> int | None:
        return self.users.get(name)

    def group_name(self, gid: int) -> str | None:
        return next((n for n, i in self.groups.items() if i == gid), None)

    def group_id(self, name: str) -> int | None:
        return self.groups.get(name)


def make_meta(mode: int = stat.S_IFREG | 0o644, **overrides) -> EntryMetadata:
    fields = dict(inode=1, mode=mode, nlink=1, uid=1000, gid=1000, size=0, mtime=0.0, blocks=0)
    fields.update(overrides)
    return EntryMetadata(**fields)


def touch(p: Path, data: bytes = b"") -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data)


@pytest.fixture
def identity() -> StubIdentity:
    return StubIdentity(users={"alice": 1000, "bob": 1001}, groups={"staff": 1000})
