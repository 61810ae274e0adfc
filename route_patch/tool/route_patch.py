"""Command line tool for generating a route list patch from route manifests."""

import argparse
import asyncio
import logging
import sys
import traceback

from route_patch.exceptions import (
    ConfigException,
    InputException,
    RoutePatchException,
    StaleOutputException,
    StorageException,
)
from . import diff, generate, get

_LOGGER = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_CONFIG = 2
EXIT_STORAGE = 3
EXIT_INPUT = 4
EXIT_STALE = 5


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Command line utility for generating a route list patch.",
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )

    subparsers = parser.add_subparsers(dest="command", help="Command", required=True)

    generate.GenerateAction.register(subparsers)
    diff.DiffAction.register(subparsers)
    get.GetAction.register(subparsers)
    return parser


def exit_code(err: RoutePatchException) -> int:
    """Return the process exit code for an error."""
    if isinstance(err, ConfigException):
        return EXIT_CONFIG
    if isinstance(err, StorageException):
        return EXIT_STORAGE
    if isinstance(err, InputException):
        return EXIT_INPUT
    if isinstance(err, StaleOutputException):
        return EXIT_STALE
    return EXIT_ERROR


def main() -> None:
    """Route-patch command line tool main entry point."""
    parser = _make_parser()
    args = parser.parse_args()

    if args.log_level:
        logging.basicConfig(level=args.log_level)

    action = args.cls()
    try:
        asyncio.run(action.run(**vars(args)))
    except RoutePatchException as err:
        if args.log_level == "DEBUG":
            traceback.print_exc(file=sys.stderr)
        print("route-patch error: ", err, file=sys.stderr)
        sys.exit(exit_code(err))


if __name__ == "__main__":
    main()
