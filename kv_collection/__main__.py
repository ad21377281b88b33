"""Interface for ``python -m kv_collection``."""

from __future__ import annotations

import logging
from argparse import ArgumentParser
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Sequence

from ._version import version
from .mappings import Collection
from .sorting import SORT_STRATEGIES


__all__ = ["main"]


def main(args: Sequence[str] | None = None) -> None:
    """Argument parser for the CLI."""
    parser = ArgumentParser(prog="kv_collection")
    _ = parser.add_argument("-v", "--version", action="version", version=version)
    _ = parser.add_argument("--formats", action="store_true", help="list registered export formats")
    _ = parser.add_argument("--strategies", action="store_true", help="list built-in sort strategies")
    _ = parser.add_argument("--debug", action="store_true", help="enable debug logging")
    options = parser.parse_args(args)

    if options.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    if options.formats:
        for name in Collection.formats():
            print(name)
    if options.strategies:
        for name in SORT_STRATEGIES:
            print(name)


if __name__ == "__main__":
    main()
