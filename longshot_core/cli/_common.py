"""Helpers shared by the longshot command-line tools."""

import argparse
import logging

from ..config import parse_bool
from ..diagnostics import set_log_level


def bool_arg(value: str) -> bool:
    """argparse type for yes/no style values (true/false, 1/0, on/off)."""
    parsed = parse_bool(value, None)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"expected a boolean, got {value!r}")
    return parsed


def add_logging_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')
    parser.add_argument('--quiet', '-q', action='store_true', help='Only print errors')


def configure_logging(args) -> None:
    if args.verbose:
        set_log_level(logging.DEBUG)
    elif args.quiet:
        set_log_level(logging.ERROR)
