"""
Command line entry point for targz.

Usage:
    targz SOURCE DESTINATION [-v] [--log-format {text,json}]

Logging is configured from TARGZ_LOG_LEVEL / TARGZ_LOG_FORMAT; the flags
override the environment.
"""

from __future__ import annotations

import argparse
import logging
import sys

import json_log_formatter

from .archiver import compress
from .config import Settings
from .errors import TargzError

logger = logging.getLogger(__name__)


def setup_logging(settings: Settings) -> None:
    """Configure the root logger.

    Args:
        settings: CLI settings
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="targz",
        description="Create a .tar.gz archive containing a directory and everything below it",
    )
    parser.add_argument("source", help="Directory to archive")
    parser.add_argument("destination", help="Archive file to create (parents are created)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        help="Log format (default: TARGZ_LOG_FORMAT or text)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    settings = Settings()
    overrides = {}
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    if args.log_format:
        overrides["log_format"] = args.log_format
    if overrides:
        settings = settings.model_copy(update=overrides)

    setup_logging(settings)

    try:
        summary = compress(args.source, args.destination)
    except TargzError as e:
        logger.error(e.message, extra={"code": e.code, **e.details})
        print(f"Compress failed: {e.message}", file=sys.stderr)
        return 1

    print(f"Archive written: {summary.destination}")
    print(f"  Entries: {summary.entries}")
    print(f"  Content bytes: {summary.content_bytes}")
    print(f"  Skipped: {summary.skipped}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
