from __future__ import annotations

import fnmatch
import os

from .chain import NameFilter, Predicate, TypeFilter, UserFilter
from .errors import IdentityResolutionError
from .identity import Identity
from .metadata import EntryMetadata

# Longer digit strings are looked up as user names instead.
_MAX_NUMERIC_UID_LEN = 19


def _is_numeric(text: str) -> bool:
    # Deliberately true for "", like the character loop it replaces.
    return all(ch in "0123456789" for ch in text)


def resolve_owner(owner: str, identity: Identity) -> int:
    if _is_numeric(owner) and len(owner) < _MAX_NUMERIC_UID_LEN:
        uid = int(owner) if owner else 0
        # A literal 0 is indistinguishable from a failed conversion here,
        # so root cannot be selected by id.
        if uid == 0:
            raise IdentityResolutionError("Failed converting user ID.")
        return uid

    uid = identity.user_id(owner)
    if uid is None:
        raise IdentityResolutionError(f"User does not exist: {owner}")
    return uid


def match_user(meta: EntryMetadata, owner: str, identity: Identity) -> bool:
    return meta.uid == resolve_owner(owner, identity)


def basename(path: str) -> str:
    return os.path.basename(path.rstrip(os.sep)) or path


def posix_pattern(pattern: str) -> str:
    """Rewrite bracket expressions opening with ``^`` to use ``!``.

    fnmatch only knows ``[!...]`` as negation, while the C library also
    accepts ``[^...]``. A ``]`` right after the opening bracket is a member.
    """
    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        if pattern[i] != "[":
            out.append(pattern[i])
            i += 1
            continue
        j = i + 1
        if j < n and pattern[j] in "!^":
            j += 1
        if j < n and pattern[j] == "]":
            j += 1
        while j < n and pattern[j] != "]":
            j += 1
        if j >= n:
            # unterminated, so the bracket is literal
            out.append("[")
            i += 1
            continue
        body = pattern[i + 1 : j]
        if body.startswith("^"):
            body = "!" + body[1:]
        out.append("[" + body + "]")
        i = j + 1
    return "".join(out)


def match_name(path: str, pattern: str) -> bool:
    # fnmatch has no escape character, so a backslash is always literal.
    return fnmatch.fnmatchcase(basename(path), posix_pattern(pattern))


def match_type(meta: EntryMetadata, spec: TypeFilter) -> bool:
    return meta.kind is spec.kind


def evaluate(meta: EntryMetadata, path: str, spec: Predicate, identity: Identity) -> bool:
    if isinstance(spec, UserFilter):
        return match_user(meta, spec.owner, identity)
    if isinstance(spec, NameFilter):
        return match_name(path, spec.pattern)
    if isinstance(spec, TypeFilter):
        return match_type(meta, spec)
    raise TypeError(f"not a predicate: {spec!r}")
