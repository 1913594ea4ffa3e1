"""Command-line front door for blink-search.

Parses CLI options, loads the config and resolves the requested location.
Then dispatches into one of the one-shot modes or the interactive loop.
"""

from __future__ import annotations

import argparse
import logging
import os
import shutil
import sys

from . import config as config_mod
from .errors import BlinkError, FilterAbortedError
from .logs import setup_logging
from .normalize import Separator, normalize_stream
from .session import open_in_location, resolve_location, run_session
from .sources import FdSource, spawn_candidates

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bl",
        description="Fuzzy find files or folders in a list of configured locations.",
    )
    parser.add_argument(
        "location",
        nargs="?",
        default=None,
        help="Location to search. Accepts a shortened name if unique. Defaults to the first configured location.",
    )
    parser.add_argument(
        "-c",
        "--create-cache",
        action="store_true",
        help="Write all files or folders of the location to stdout. Useful for creating cache files.",
    )
    parser.add_argument("-l", "--list-locations", action="store_true", help="List all available locations.")
    parser.add_argument("-g", "--get-config-path", action="store_true", help="Print the config path.")
    parser.add_argument("--open-path", metavar="PATH", help="Directly open PATH inside the location.")
    parser.add_argument(
        "--normalize-paths",
        type=Separator,
        choices=list(Separator),
        metavar="{null,newline}",
        help="Normalize paths from stdin to native paths separated by newlines.",
    )
    return parser


def _normalize_stdin(separator: Separator) -> None:
    try:
        normalize_stream(sys.stdin.buffer, sys.stdout.buffer, separator)
    except BrokenPipeError:
        # fzf stopped reading; point stdout at devnull so the final flush is silent.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        raise SystemExit(0) from None


def _print_missing_locations() -> None:
    print("No locations defined")
    print(f"Define locations in {config_mod.config_path()}")
    print("Example config with some locations:")
    print(config_mod.EXAMPLE_CONFIG)


def _create_cache(config: config_mod.Config, location_name: str) -> None:
    logger.debug("Creating cache for %s", location_name)
    location = config.locations[location_name]
    candidates = spawn_candidates(FdSource(location, config.fd_flags))
    try:
        shutil.copyfileobj(candidates.stdout, sys.stdout.buffer)
        sys.stdout.buffer.flush()
    finally:
        candidates.close()


def run(args: argparse.Namespace) -> None:
    setup_logging(config_mod.config_dir())
    logger.debug("Command line: %s", sys.argv)
    config = config_mod.load_config()

    if args.get_config_path:
        print(config_mod.config_path())
        return

    if args.list_locations:
        for name in config.locations:
            print(config.describe(name))
        return

    if not config.locations:
        _print_missing_locations()
        return

    location_name = resolve_location(args.location, config)

    if args.create_cache:
        _create_cache(config, location_name)
        return

    if args.open_path is not None:
        open_in_location(config, location_name, args.open_path)
        return

    run_session(config, location_name)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run blink-search.

    ``BlinkError`` failures are logged and turned into ``SystemExit`` with
    the error's exit code; a plain fzf abort exits with 130 silently.
    """
    args = build_parser().parse_args(argv)

    if args.normalize_paths is not None:
        _normalize_stdin(args.normalize_paths)
        return

    try:
        run(args)
    except FilterAbortedError as exc:
        logger.info("Aborted by user")
        raise SystemExit(exc.exit_code) from None
    except BlinkError as exc:
        logger.exception("blink-search failed")
        print(f"bl: {exc}", file=sys.stderr)
        raise SystemExit(exc.exit_code) from None


if __name__ == "__main__":
    main()
