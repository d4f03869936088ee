"""
longshot_core package: long screenshots of pages whose content scrolls

Usage:
    from longshot_core import capture_long_screenshot, capture_url

    # Page you already navigated with Playwright
    result = await capture_long_screenshot(page, "shots/board.png")

    # Or let longshot open the browser
    result = await capture_url("https://example.com", "shots/board.png")
"""
from .config import Config, config
from .exceptions import (
    CaptureError,
    ConfigError,
    GeometryError,
    LongshotError,
    StitchError,
)
from .models import CaptureResult, CaptureTarget, ScrollCandidate, StitchedImage, Tile
from .scroll_target import score, select_scroll_target
from .tiling import capture_tiles, compute_scroll_offsets
from .stitcher import write_stitched_png
from .pipeline import capture_long_screenshot, disable_animations
from .browser_setup import capture_url

__all__ = [
    "Config",
    "config",
    "LongshotError",
    "GeometryError",
    "CaptureError",
    "StitchError",
    "ConfigError",
    "CaptureResult",
    "CaptureTarget",
    "ScrollCandidate",
    "StitchedImage",
    "Tile",
    "score",
    "select_scroll_target",
    "compute_scroll_offsets",
    "capture_tiles",
    "write_stitched_png",
    "capture_long_screenshot",
    "disable_animations",
    "capture_url",
]
