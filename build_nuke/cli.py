"""Command line entry point for the bin/obj purge.

Settings resolve CLI flag -> ``NUKE_*`` environment variable -> ``.env.nuke``
-> built-in default.  Exit codes: 0 clean run, 1 some entries failed,
2 the solution or projects could not be discovered.
"""
from __future__ import annotations

import argparse
import logging
import sys

from .app import configure_logging
from .command import run_nuke
from .config import load_config
from .discovery import DiscoveryError, discover_projects


LOGGER = logging.getLogger("build_nuke")

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_DISCOVERY_ERROR = 2


def _print_notice(title: str, message: str) -> None:
    print(f"[build-nuke] {title}: {message}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="build-nuke",
        description="Delete the bin and obj directories of every project in a solution",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Solution file, or a directory holding a solution or project files (default: current directory)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        dest="verbose",
        action="store_true",
        default=None,
        help="Print every removed file and directory. Resolution: CLI -> NUKE_VERBOSE env var -> .env.nuke",
    )
    verbosity.add_argument(
        "--quiet",
        dest="verbose",
        action="store_false",
        help="Only print failures and the summary",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=None,
        help="Passes over a directory before giving up on it. Resolution: CLI -> NUKE_MAX_ATTEMPTS env var -> .env.nuke -> 3",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level. Resolution: CLI -> NUKE_LOG_LEVEL env var -> .env.nuke -> INFO",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Settings file to read (default: .env.nuke in the current directory)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(
            overrides={
                "verbose": args.verbose,
                "max_attempts": args.max_attempts,
                "log_level": args.log_level,
            },
            env_file=args.env_file,
        )
    except ValueError as exc:
        parser.error(str(exc))

    configure_logging(config.log_level)

    try:
        projects = discover_projects(args.path)
    except DiscoveryError as exc:
        LOGGER.error("[NUKE]: %s", exc)
        print(f"[build-nuke] {exc}", file=sys.stderr)
        return EXIT_DISCOVERY_ERROR

    report = run_nuke(
        projects,
        print,
        verbose=config.verbose,
        max_attempts=config.max_attempts,
        notify=_print_notice,
    )
    return EXIT_FAILURES if report.failures else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
