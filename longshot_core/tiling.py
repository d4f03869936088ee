"""
Tile Capture - walk a scroll region through viewport-sized screenshots

Scroll position is shared page state, so tiles are taken strictly one after
another: scroll, settle, screenshot. The scroll offset is passed explicitly to
capture_tile rather than read back from the page.
"""

import math
from typing import List

from .diagnostics import get_logger
from .exceptions import CaptureError, GeometryError
from .models import CaptureTarget, Rect, Tile
from .stitcher import png_size

logger = get_logger(__name__)

_ELEMENT_METRICS_JS = "(el) => ({ scrollHeight: el.scrollHeight, clientHeight: el.clientHeight })"
_SCROLL_TO_JS = "(el, top) => { el.scrollTop = top; return el.scrollHeight; }"


def compute_scroll_offsets(scroll_height: int, client_height: int) -> List[int]:
    """
    Scroll offsets covering the whole region without gaps.

    Steps by client_height from 0 and always ends at the last full viewport
    (scroll_height - client_height) so a trailing partial slice is never lost.
    """
    if client_height <= 0:
        raise ValueError(f"client_height must be positive, got {client_height}")
    scroll_height = int(scroll_height)
    client_height = int(client_height)
    offsets = list(range(0, max(scroll_height - client_height, 0), client_height))
    offsets.append(max(0, scroll_height - client_height))
    return sorted(set(offsets))


def effective_clip_height(clip_height: float, scroll_height: float, scroll_top: float) -> int:
    """Clip height for one tile: never past the end of content, at least 1px."""
    remaining = max(0, scroll_height - scroll_top)
    return max(1, math.ceil(min(clip_height, remaining)))


async def build_capture_target(page, element) -> CaptureTarget:
    """
    Freeze the geometry of the element to tile.

    Raises:
        GeometryError: element has no bounding box (detached or hidden)
    """
    try:
        metrics = await element.evaluate(_ELEMENT_METRICS_JS)
        bbox = await element.bounding_box()
    except Exception as e:
        raise GeometryError(f"Cannot measure scroll region: {e}") from e
    if not bbox:
        raise GeometryError("Scroll region has no bounding box")

    clip = Rect(
        x=float(bbox["x"]),
        y=float(bbox["y"]),
        width=math.ceil(bbox["width"]),
        height=math.ceil(bbox["height"]),
    )
    if clip.width <= 0 or clip.height <= 0:
        raise GeometryError(f"Scroll region has an empty bounding box: {bbox}")

    scroll_height = int(metrics.get("scrollHeight") or 0)
    client_height = int(metrics.get("clientHeight") or 0) or int(clip.height)
    return CaptureTarget(
        element=element,
        clip=clip,
        scroll_height=scroll_height,
        client_height=client_height,
    )


async def capture_full_page(page) -> Tile:
    """Single full-page screenshot, used when the document itself scrolls."""
    try:
        data = await page.screenshot(full_page=True)
    except Exception as e:
        raise CaptureError(f"Full-page screenshot failed: {e}", offset=0) from e
    _, height = png_size(data)
    return Tile(scroll_top=0, clip_height=height, data=data)


async def capture_tile(page, target: CaptureTarget, scroll_top: int, settle_ms: int) -> Tile:
    try:
        live_height = await target.element.evaluate(_SCROLL_TO_JS, scroll_top)
    except Exception as e:
        raise GeometryError(f"Cannot scroll region to {scroll_top}: {e}") from e
    if live_height is not None and live_height < target.scroll_height:
        raise GeometryError(
            f"Scroll region shrank from {target.scroll_height}px to {live_height}px during capture"
        )

    if settle_ms > 0:
        await page.wait_for_timeout(settle_ms)

    height = effective_clip_height(target.clip.height, target.scroll_height, scroll_top)
    clip = {
        "x": target.clip.x,
        "y": target.clip.y,
        "width": target.clip.width,
        "height": height,
    }
    try:
        data = await page.screenshot(clip=clip)
    except Exception as e:
        raise CaptureError(f"Screenshot failed: {e}", offset=scroll_top) from e
    logger.debug(f"Captured tile at scrollTop={scroll_top} height={height}")
    return Tile(scroll_top=scroll_top, clip_height=height, data=data)


async def capture_tiles(page, target: CaptureTarget, settle_ms: int) -> List[Tile]:
    """
    Capture every tile of the target, top to bottom.

    Any failure aborts the run; tiles already taken are dropped with it.
    """
    offsets = compute_scroll_offsets(target.scroll_height, target.client_height)
    logger.info(
        f"Capturing {len(offsets)} tile(s): scrollHeight={target.scroll_height} "
        f"clientHeight={target.client_height}"
    )
    tiles: List[Tile] = []
    for top in offsets:
        tiles.append(await capture_tile(page, target, top, settle_ms))
    return tiles
