#!/usr/bin/env python3
"""
Longshot - long screenshot of one page

Usage:
    longshot --url https://example.com/dashboard --output shots/dashboard.png
    longshot --url ... --output ... --user-data-dir ./.profile --headless false
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from ..browser_setup import capture_url
from ..config import config
from ..diagnostics import get_logger
from ..error_handler import format_error_for_logging
from ._common import add_logging_arguments, bool_arg, configure_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='longshot',
        description="Capture the main scrollable region of a page as one PNG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--url', required=True, help='Page to capture')
    parser.add_argument('--output', '-o', required=True, help='Output PNG path')
    parser.add_argument('--wait-ms', type=int, help=f'Wait after navigation (default {config.wait_ms})')
    parser.add_argument('--scroll-wait-ms', type=int,
                        help=f'Settle delay after each scroll (default {config.scroll_wait_ms})')
    parser.add_argument('--stitch', type=bool_arg,
                        help='Tile and stitch inner scroll regions (default true)')
    parser.add_argument('--width', type=int, help=f'Viewport width (default {config.viewport_width})')
    parser.add_argument('--height', type=int, help=f'Viewport height (default {config.viewport_height})')
    parser.add_argument('--timeout-ms', type=int, help=f'Navigation timeout (default {config.timeout_ms})')
    parser.add_argument('--chrome-path', help='Chrome/Edge/Chromium executable')
    parser.add_argument('--user-data-dir', help='Persistent browser profile (keeps logins)')
    parser.add_argument('--profile-directory', help='Profile name inside --user-data-dir')
    parser.add_argument('--headless', type=bool_arg, help='Run the browser headless (default true)')
    add_logging_arguments(parser)
    return parser


def settings_from_args(args):
    return config.with_overrides(
        wait_ms=args.wait_ms,
        scroll_wait_ms=args.scroll_wait_ms,
        stitch=args.stitch,
        viewport_width=args.width,
        viewport_height=args.height,
        timeout_ms=args.timeout_ms,
        chrome_path=args.chrome_path,
        user_data_dir=args.user_data_dir,
        profile_directory=args.profile_directory,
        headless=args.headless,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    args = build_parser().parse_args(argv)
    configure_logging(args)
    settings = settings_from_args(args)

    try:
        result = asyncio.run(capture_url(args.url, args.output, settings))
    except Exception as e:
        logger.debug("Capture failed", exc_info=True)
        print(format_error_for_logging(e, context=args.url), file=sys.stderr)
        return 1

    print(f"{result.path} ({result.mode}, {result.width}x{result.height}, {result.tile_count} tile(s))")
    return 0


if __name__ == "__main__":
    sys.exit(main())
