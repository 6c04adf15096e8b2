"""bmsearch command line entry points.

Usage: bmsearch <skip table> <text file> [--config FILE] [--log-level LEVEL]
       bmtable <pattern> [-o FILE] [--alphabet CHARS]
"""
import argparse
import sys
from typing import List, Optional

from bmsearch.config.config import Config, ConfigError
from bmsearch.driver import run_search
from bmsearch.search.base import SearchError
from bmsearch.search.skiptable import build_skip_table, format_skip_table, write_skip_table

USAGE = "Usage: bmsearch <skip table> <text file>"


class UsageError(Exception):
    """Raised when the command line does not name both input files."""
    pass


def _build_search_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bmsearch",
        description="Print the lines of a text file that contain the pattern of a skip table.",
    )
    parser.add_argument("table_file", nargs="?", help="Skip table definition file")
    parser.add_argument("text_file", nargs="?", help="Text file to search")
    parser.add_argument(
        "--config", default=None,
        help="INI configuration file (default: built-in settings)",
    )
    parser.add_argument(
        "--log-level", default=None, choices=sorted(Config.VALID_LOG_LEVELS),
        help="Override the configured log level",
    )
    return parser


def _require_files(args: argparse.Namespace) -> None:
    if not args.table_file or not args.text_file:
        raise UsageError(USAGE)


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_search_parser().parse_args(argv)
    try:
        _require_files(args)
    except UsageError as e:
        print(e)
        return 0

    try:
        config = Config(args.config, log_level=args.log_level)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    try:
        run_search(args.table_file, args.text_file, config)
    except SearchError as e:
        config.logger.error("Invalid skip table: %s", e)
        return 1
    except OSError as e:
        config.logger.error("%s", e, exc_info=config.debug)
        return 1
    return 0


def _build_table_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bmtable",
        description="Write a skip table definition for a pattern.",
    )
    parser.add_argument("pattern", help="Pattern; characters other than letters and digits are dropped")
    parser.add_argument(
        "-o", "--output", default=None,
        help="Output file (default: standard output)",
    )
    parser.add_argument(
        "--alphabet", default=None,
        help="Characters to emit entries for (default: printable ASCII)",
    )
    return parser


def make_table(argv: Optional[List[str]] = None) -> int:
    args = _build_table_parser().parse_args(argv)
    try:
        definition = build_skip_table(args.pattern, alphabet=args.alphabet)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output is None:
        for line in format_skip_table(definition):
            print(line)
        return 0

    try:
        write_skip_table(definition, args.output)
    except OSError as e:
        print(f"Error: cannot write '{args.output}': {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
