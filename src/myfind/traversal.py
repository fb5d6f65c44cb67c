from __future__ import annotations

import logging
import os
import sys
import time
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any, TextIO

from .actions import Clock, perform
from .chain import ACTIONS, Spec, build_chain
from .errors import AccessDenied, OtherIOError, PathLengthExceeded
from .identity import Identity, PosixIdentity
from .metadata import EntryMetadata, StatFn, fetch
from .predicates import evaluate

logger = logging.getLogger(__name__)

MAX_PATH_LENGTH = 4096

ScandirFn = Callable[[str], Any]

# (directory path, open listing, iterator over the listing)
_Frame = tuple[str, Any, Iterator[Any]]


@dataclass(frozen=True)
class ScanOptions:
    max_path_length: int = MAX_PATH_LENGTH


class Scanner:
    """Depth-first, pre-order walk that runs a request chain on every entry.

    Open directory listings are kept on an explicit stack, so the depth of
    the tree is bounded by ``max_path_length`` and not by the interpreter's
    recursion limit. Permission failures are written to the output as
    one-line notices and the affected entry or subtree is skipped. Every
    other error propagates after all open listings are closed.
    """

    def __init__(
        self,
        chain: Iterable[Spec],
        identity: Identity | None = None,
        options: ScanOptions | None = None,
        out: TextIO | None = None,
        stat_fn: StatFn | None = None,
        scandir_fn: ScandirFn | None = None,
        clock: Clock = time.localtime,
    ) -> None:
        self.chain = build_chain(chain)
        self.identity = identity if identity is not None else PosixIdentity()
        self.options = options if options is not None else ScanOptions()
        self._out = out
        self._stat = stat_fn if stat_fn is not None else os.lstat
        self._scandir = scandir_fn if scandir_fn is not None else os.scandir
        self._clock = clock

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def run(self, root: str = ".") -> None:
        if len(root) >= self.options.max_path_length:
            raise PathLengthExceeded(root, self.options.max_path_length)

        stack: list[_Frame] = []
        try:
            self._enter(root, stack)
            while stack:
                path, _, it = stack[-1]
                try:
                    entry = next(it)
                except StopIteration:
                    self._pop(stack)
                    continue
                except PermissionError:
                    self._notice(f"readdir({path}) failed.")
                    self._pop(stack)
                    continue
                except OSError as e:
                    raise OtherIOError("readdir", path, e.errno, e.strerror) from e

                if entry.name in (".", ".."):
                    continue
                self._enter(self.child_path(path, entry.name), stack)
        finally:
            while stack:
                self._pop(stack)

    def visit(self, path: str) -> EntryMetadata | None:
        """Fetch ``path`` and run the chain on it; None if it could not be read."""
        try:
            meta = fetch(path, self._stat)
        except AccessDenied:
            self._notice(f'stat("{path}") failed.')
            return None

        self.evaluate_chain(meta, path)
        return meta

    def evaluate_chain(self, meta: EntryMetadata, path: str) -> bool:
        """Run the chain left to right and return the combined predicate result.

        Actions run when they are reached; the first failing predicate ends
        the evaluation for this entry.
        """
        for spec in self.chain:
            if isinstance(spec, ACTIONS):
                perform(meta, path, spec, self.identity, self.out, self._clock)
            elif not evaluate(meta, path, spec, self.identity):
                logger.debug("%s: rejected by %r", path, spec)
                return False
        logger.debug("%s: accepted", path)
        return True

    def open_listing(self, path: str) -> Any | None:
        try:
            listing = self._scandir(path)
        except PermissionError:
            self._notice(f"opendir({path}) failed.")
            return None
        except OSError as e:
            raise OtherIOError("opendir", path, e.errno, e.strerror) from e
        logger.debug("descending into %s", path)
        return listing

    def child_path(self, parent: str, name: str) -> str:
        if parent.endswith(os.sep):
            child = parent + name
        else:
            child = parent + os.sep + name
        if len(child) >= self.options.max_path_length:
            raise PathLengthExceeded(child, self.options.max_path_length)
        return child

    def _enter(self, path: str, stack: list[_Frame]) -> None:
        meta = self.visit(path)
        if meta is None or not meta.is_dir:
            return
        listing = self.open_listing(path)
        if listing is not None:
            stack.append((path, listing, iter(listing)))

    @staticmethod
    def _pop(stack: list[_Frame]) -> None:
        _, listing, _ = stack.pop()
        listing.close()

    def _notice(self, message: str) -> None:
        logger.debug("skipping: %s", message)
        self.out.write(message + "\n")
