"""Command-line interface for colorcat."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import BinaryIO

from colorcat import __version__
from colorcat.config.loader import find_rules_file, load_settings
from colorcat.core.engine import RuleEngine
from colorcat.core.parser import load_rules
from colorcat.errors import ColorcatError, ConfigParseError
from colorcat.stream import colorize_stream

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(name)s: %(levelname)s: %(message)s"


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="colorcat",
        description="Colorize standard input using a grc rule file",
        epilog="Example: ping example.com | colorcat conf.ping",
    )

    parser.add_argument(
        "--settings",
        "-s",
        type=Path,
        metavar="FILE",
        help="Settings file path (default: ~/.config/colorcat/config.yaml)",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colors, only apply skip rules",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug messages to stderr",
    )

    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "conffile",
        help="Rule file name or path, looked up in the grc directories",
    )

    return parser.parse_args(args)


def setup_logging(level: str) -> None:
    """Send log records to stderr; stdout carries the colored stream."""
    logging.basicConfig(level=level, stream=sys.stderr, format=LOG_FORMAT)


def main(
    args: list[str] | None = None,
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
) -> int:
    """Main entry point.

    Args:
        args: Command-line arguments
        stdin: Binary input stream (defaults to sys.stdin.buffer)
        stdout: Binary output stream (defaults to sys.stdout.buffer)

    Returns:
        Exit code
    """
    parsed = parse_args(args)

    try:
        settings = load_settings(parsed.settings)
    except ColorcatError as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    setup_logging("DEBUG" if parsed.verbose else settings.log_level)

    if parsed.no_color:
        settings.color = False

    # Load rules before reading any input
    try:
        rules_path = find_rules_file(parsed.conffile, settings)
    except ColorcatError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        rules = load_rules(rules_path)
    except ConfigParseError as e:
        print(f"Error in {rules_path}: {e}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading {rules_path}: {e}", file=sys.stderr)
        return 1

    engine = RuleEngine(rules, color=settings.color)
    source = stdin if stdin is not None else sys.stdin.buffer
    sink = stdout if stdout is not None else sys.stdout.buffer

    try:
        written = colorize_stream(engine, source, sink)
        logger.debug("Wrote %d lines", written)
        return 0

    except KeyboardInterrupt:
        return 130
    except BrokenPipeError:
        # Reader went away; keep the interpreter from failing on the final flush
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        return 0


if __name__ == "__main__":
    sys.exit(main())
