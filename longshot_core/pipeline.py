"""
Long screenshot pipeline

Chains the four capture stages against one already-navigated page:

    expand containers -> select target -> capture tiles -> stitch

The page belongs to the caller; nothing here opens or closes it. Every page
interaction runs sequentially because scroll position and layout are shared
page state.
"""

from pathlib import Path
from typing import Optional, Union

from .config import Config, config as default_config
from .container_expander import expand_scrollable_containers
from .diagnostics import get_logger
from .exceptions import GeometryError
from .models import CaptureResult
from .retry import retry_async
from .scroll_target import Scorer, score, select_scroll_target
from .stitcher import png_size, write_stitched_png
from .tiling import build_capture_target, capture_full_page, capture_tiles

logger = get_logger(__name__)

DISABLE_ANIMATIONS_CSS = """
*, *::before, *::after {
  transition-duration: 0s !important;
  animation-duration: 0s !important;
  caret-color: transparent !important;
}
"""


async def disable_animations(page) -> None:
    """Freeze CSS transitions and animations so repeated captures match."""
    await page.add_style_tag(content=DISABLE_ANIMATIONS_CSS)


async def _write_full_page(page, path: Path) -> CaptureResult:
    tile = await capture_full_page(page)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(tile.data)
    width, height = png_size(tile.data)
    logger.info(f"Full-page screenshot written to {path} ({width}x{height})")
    return CaptureResult(path=path, mode="full_page", tile_count=1, width=width, height=height)


async def capture_long_screenshot(
    page,
    output_path: Union[str, Path],
    settings: Optional[Config] = None,
    scorer: Scorer = score,
) -> CaptureResult:
    """
    Capture the page's main scrollable content into one PNG.

    Args:
        page: Navigated Playwright page, owned by the caller
        output_path: Destination PNG; parent directories are created
        settings: Capture settings (scroll_wait_ms, stitch, geometry_retry_delay_ms)
        scorer: Candidate scoring function for target selection

    Returns:
        CaptureResult describing the written file

    Raises:
        GeometryError: target lost its bounding box, even after one retry,
            or shrank while being captured
        CaptureError: a screenshot failed; nothing is written
    """
    settings = settings or default_config
    path = Path(output_path)

    await expand_scrollable_containers(page)
    selection = await select_scroll_target(page, scorer=scorer)

    if selection.is_document:
        return await _write_full_page(page, path)
    if not settings.stitch:
        logger.info("Stitching disabled; taking a full-page screenshot instead")
        return await _write_full_page(page, path)

    measure = retry_async(
        max_attempts=2,
        delay=settings.geometry_retry_delay_ms / 1000,
        retryable_exceptions=(GeometryError,),
    )(build_capture_target)
    target = await measure(page, selection.element)

    tiles = await capture_tiles(page, target, settings.scroll_wait_ms)
    buffers = [t.data for t in tiles]
    write_stitched_png(buffers, path)

    sizes = [png_size(b) for b in buffers]
    return CaptureResult(
        path=path,
        mode="stitched",
        tile_count=len(tiles),
        width=max(w for w, _ in sizes),
        height=sum(h for _, h in sizes),
    )
