#!/usr/bin/env python3
"""
Longshot Batch - long screenshots for the targets in a YAML file

Usage:
    longshot-batch --config longshot.yaml
    longshot-batch --config longshot.yaml --target overview --headful
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from ..diagnostics import get_logger
from ..error_handler import format_error_for_logging
from ..exceptions import ConfigError
from ..runner import build_jobs, load_targets_config, run_jobs
from ._common import add_logging_arguments, bool_arg, configure_logging

logger = get_logger(__name__)

DEFAULT_CONFIG_NAME = "longshot.yaml"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='longshot-batch',
        description="Capture long screenshots for every target in a YAML file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--config', '-c', default=DEFAULT_CONFIG_NAME,
                        help=f'Targets file (default {DEFAULT_CONFIG_NAME})')
    parser.add_argument('--target', '-t', help='Only capture the target with this name or id')
    parser.add_argument('--out-dir', help='Output directory; supports ${name} ${date} ${timestamp}')
    parser.add_argument('--profile-dir', help='Persistent browser profile directory')
    parser.add_argument('--profile-name', help='Profile name inside --profile-dir')
    parser.add_argument('--width', type=int, help='Viewport width')
    parser.add_argument('--height', type=int, help='Viewport height')
    parser.add_argument('--wait', type=float, help='Seconds to wait after navigation')
    parser.add_argument('--scroll-wait-ms', type=int, help='Settle delay after each scroll')
    parser.add_argument('--stitch', type=bool_arg, help='Tile and stitch inner scroll regions')
    parser.add_argument('--headless', type=bool_arg, default=True, help='Run headless (default true)')
    parser.add_argument('--headful', action='store_true', help='Show the browser window')
    add_logging_arguments(parser)
    return parser


def overrides_from_args(args) -> dict:
    return {
        "out_dir": args.out_dir,
        "profile_dir": args.profile_dir,
        "profile_name": args.profile_name,
        "width": args.width,
        "height": args.height,
        "wait": args.wait,
        "scroll_wait_ms": args.scroll_wait_ms,
        "stitch": args.stitch,
        "headless": False if args.headful else args.headless,
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    args = build_parser().parse_args(argv)
    configure_logging(args)

    config_path = Path(args.config).resolve()
    try:
        data = load_targets_config(config_path)
        jobs = build_jobs(
            data,
            base_dir=config_path.parent,
            overrides=overrides_from_args(args),
            target_name=args.target,
        )
    except ConfigError as e:
        logger.error(str(e))
        return 1

    try:
        results = asyncio.run(run_jobs(jobs))
    except Exception as e:
        logger.debug("Batch failed", exc_info=True)
        print(format_error_for_logging(e, context="batch"), file=sys.stderr)
        return 1

    for result in results:
        print(f"{result.path} ({result.mode})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
