from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union

from .errors import ArgumentError


class EntryKind(enum.Enum):
    BLOCK = "b"
    CHAR = "c"
    DIR = "d"
    FIFO = "p"
    REGULAR = "f"
    SYMLINK = "l"
    SOCKET = "s"


@dataclass(frozen=True)
class UserFilter:
    owner: str


@dataclass(frozen=True)
class NameFilter:
    pattern: str


@dataclass(frozen=True)
class TypeFilter:
    kind: EntryKind

    def __post_init__(self) -> None:
        if isinstance(self.kind, EntryKind):
            return
        try:
            kind = EntryKind(self.kind)
        except ValueError:
            raise ArgumentError(f"Type does not exist: {self.kind!r}") from None
        object.__setattr__(self, "kind", kind)


@dataclass(frozen=True)
class PrintAction:
    pass


@dataclass(frozen=True)
class DetailListAction:
    pass


Predicate = Union[UserFilter, NameFilter, TypeFilter]
Action = Union[PrintAction, DetailListAction]
Spec = Union[UserFilter, NameFilter, TypeFilter, PrintAction, DetailListAction]

PREDICATES = (UserFilter, NameFilter, TypeFilter)
ACTIONS = (PrintAction, DetailListAction)


def build_chain(specs: Iterable[Spec]) -> tuple[Spec, ...]:
    """Freeze ``specs`` in order, appending ``-print`` when no action was given."""
    chain = tuple(specs)
    for spec in chain:
        if not isinstance(spec, PREDICATES + ACTIONS):
            raise ArgumentError(f"not a filter or action: {spec!r}")
    if not any(isinstance(spec, ACTIONS) for spec in chain):
        chain += (PrintAction(),)
    return chain
