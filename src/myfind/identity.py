from __future__ import annotations

import grp
import pwd
from typing import Protocol


class Identity(Protocol):
    def user_name(self, uid: int) -> str | None: ...

    def user_id(self, name: str) -> int | None: ...

    def group_name(self, gid: int) -> str | None: ...

    def group_id(self, name: str) -> int | None: ...


class PosixIdentity:
    """Resolves users and groups through the system password and group databases."""

    def user_name(self, uid: int) -> str | None:
        try:
            return pwd.getpwuid(uid).pw_name
        except KeyError:
            return None

    def user_id(self, name: str) -> int | None:
        try:
            return pwd.getpwnam(name).pw_uid
        except KeyError:
            return None

    def group_name(self, gid: int) -> str | None:
        try:
            return grp.getgrgid(gid).gr_name
        except KeyError:
            return None

    def group_id(self, name: str) -> int | None:
        try:
            return grp.getgrnam(name).gr_gid
        except KeyError:
            return None
