from __future__ import annotations

import argparse
import contextlib
import logging
import sys
from collections.abc import Callable, Sequence
from typing import Any

from .chain import DetailListAction, NameFilter, PrintAction, Spec, TypeFilter, UserFilter, build_chain
from .errors import ArgumentError, FindError
from .traversal import ScanOptions, Scanner

VERSION = "myfind 0.1.0"

LOG_FORMAT = "myfind: %(levelname)s: %(name)s: %(message)s"


class _ChainAppend(argparse.Action):
    """Append a filter or action to ``namespace.chain`` in command-line order."""

    def __init__(self, option_strings: Sequence[str], dest: str, factory: Callable[..., Spec], **kwargs: Any) -> None:
        self.factory = factory
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):  # type: ignore[override]
        chain = list(getattr(namespace, self.dest, None) or [])
        try:
            spec = self.factory() if self.nargs == 0 else self.factory(values)
        except ArgumentError as e:
            parser.error(str(e))
        chain.append(spec)
        setattr(namespace, self.dest, chain)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="myfind",
        description="Walk a directory tree and print entries matching -user, -name and -type.",
        allow_abbrev=False,
    )
    p.set_defaults(chain=[])
    p.add_argument("path", nargs="?", default=None, help="Root path (must come first, default: .)")
    p.add_argument(
        "-user",
        dest="chain",
        action=_ChainAppend,
        factory=UserFilter,
        metavar="NAME",
        help="Match entries owned by user NAME or numeric id",
    )
    p.add_argument(
        "-name",
        dest="chain",
        action=_ChainAppend,
        factory=NameFilter,
        metavar="PATTERN",
        help="Match entries whose basename matches the shell glob PATTERN",
    )
    p.add_argument(
        "-type",
        dest="chain",
        action=_ChainAppend,
        factory=TypeFilter,
        choices=["b", "c", "d", "p", "f", "l", "s"],
        help="Match entries of the given type",
    )
    p.add_argument(
        "-print",
        dest="chain",
        action=_ChainAppend,
        factory=PrintAction,
        nargs=0,
        help="Print the path (default when no action is given)",
    )
    p.add_argument(
        "-ls",
        dest="chain",
        action=_ChainAppend,
        factory=DetailListAction,
        nargs=0,
        help="List the entry in ls -dils format",
    )
    p.add_argument("-D", "--debug", action="store_true", help="Log traversal details to stderr")
    p.add_argument("--version", action="version", version=VERSION)
    return p


def normalize_argv(p: argparse.ArgumentParser, argv: Sequence[str]) -> list[str]:
    """Reject unknown flags and bind every option value as ``-flag=value``.

    argparse would otherwise expand prefixes such as ``-nam`` on older
    interpreters and refuse values that start with ``-`` (``-name '-*'``).
    """
    known = p._option_string_actions
    normalized: list[str] = []
    args = iter(argv)
    for arg in args:
        action = known.get(arg)
        if action is not None:
            value = next(args, None) if action.nargs is None else None
            normalized.append(arg if value is None else f"{arg}={value}")
        elif arg.startswith("-") and arg != "-":
            p.error(f"{arg} is not a valid command.")
        else:
            normalized.append(arg)
    return normalized


def configure_logging(debug: bool) -> None:
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger("myfind").setLevel(logging.DEBUG if debug else logging.WARNING)


def main(argv: Sequence[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    p = build_parser()
    ns = p.parse_args(normalize_argv(p, argv))

    if ns.path is not None and argv[0] != ns.path:
        p.error(f"{ns.path} is not a valid command (the path must come first)")

    options = ScanOptions()
    root = ns.path if ns.path is not None else "."
    if len(root) >= options.max_path_length:
        p.error(f"path is longer than {options.max_path_length - 1} characters")

    configure_logging(ns.debug)
    scanner = Scanner(build_chain(ns.chain), options=options)

    try:
        scanner.run(root)
        sys.stdout.flush()
    except BrokenPipeError:
        with contextlib.suppress(Exception):
            sys.stdout.close()
        return 0
    except FindError as e:
        sys.stdout.flush()
        print(f"myfind: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
