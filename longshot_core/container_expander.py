"""
Container Expander - flatten nested scroll boxes before target selection

Some layouts wrap the real content in an inner element with its own scrollbar,
sometimes two levels deep. Forcing the largest of those boxes to render their
full content lets the target selector see a single scrollable region.

Split into:
- measure_scroll_containers: reads geometry in the page
- plan_container_overrides: pure decision, unit-testable without a browser
- apply_style_overrides: writes inline styles back
"""

from typing import Any, Dict, List, Sequence, Tuple

from .diagnostics import get_logger
from .models import StyleOverride
from .scroll_target import MIN_SCROLLABLE_DISTANCE, SCROLLABLE_OVERFLOW

logger = get_logger(__name__)

MAX_EXPANDED_CONTAINERS = 5

EXPANDED_STYLES: Dict[str, str] = {
    "overflow": "visible",
    "overflowY": "visible",
    "maxHeight": "none",
    "height": "auto",
}

_ELEMENT_POOL_JS = "() => Array.from(document.querySelectorAll('*'))"

_MEASURE_JS = """
(elements) => {
    const out = [];
    elements.forEach((el, index) => {
        const style = window.getComputedStyle(el);
        if (!style) return;
        const overflowY = style.overflowY;
        if (overflowY !== 'auto' && overflowY !== 'scroll') return;
        out.push({
            index,
            overflowY,
            clientHeight: el.clientHeight,
            scrollHeight: el.scrollHeight,
        });
    });
    return out;
}
"""

_APPLY_JS = """
(elements, overrides) => {
    let applied = 0;
    for (const { index, styles } of overrides) {
        const el = elements[index];
        if (!el) continue;
        Object.assign(el.style, styles);
        applied += 1;
    }
    return applied;
}
"""


def plan_container_overrides(
    measurements: Sequence[Dict[str, Any]],
    limit: int = MAX_EXPANDED_CONTAINERS,
    min_scrollable: int = MIN_SCROLLABLE_DISTANCE,
) -> List[StyleOverride]:
    """
    Decide which scroll containers to expand.

    Args:
        measurements: Records with index, overflowY, clientHeight, scrollHeight
        limit: Maximum number of containers to expand
        min_scrollable: Minimum hidden height (scrollHeight - clientHeight)

    Returns:
        Overrides for the tallest qualifying containers, tallest first
    """
    eligible = []
    for m in measurements:
        if m.get("overflowY") not in SCROLLABLE_OVERFLOW:
            continue
        client_height = m.get("clientHeight") or 0
        scroll_height = m.get("scrollHeight") or 0
        if not client_height or not scroll_height:
            continue
        if scroll_height - client_height < min_scrollable:
            continue
        eligible.append(m)

    eligible.sort(key=lambda m: m["scrollHeight"], reverse=True)
    return [StyleOverride(index=int(m["index"]), styles=dict(EXPANDED_STYLES)) for m in eligible[:limit]]


async def measure_scroll_containers(page) -> Tuple[Any, List[Dict[str, Any]]]:
    """Return (element pool handle, overflow measurements) for the page."""
    pool = await page.evaluate_handle(_ELEMENT_POOL_JS)
    measurements = await pool.evaluate(_MEASURE_JS)
    return pool, measurements


async def apply_style_overrides(pool, overrides: Sequence[StyleOverride]) -> int:
    if not overrides:
        return 0
    payload = [{"index": o.index, "styles": o.styles} for o in overrides]
    return int(await pool.evaluate(_APPLY_JS, payload))


async def expand_scrollable_containers(page) -> int:
    """
    Best-effort expansion of inner scroll containers.

    Mutates live page styles for the rest of the page session. Never raises;
    returns the number of containers expanded.
    """
    pool = None
    try:
        pool, measurements = await measure_scroll_containers(page)
        overrides = plan_container_overrides(measurements)
        expanded = await apply_style_overrides(pool, overrides)
        if expanded:
            logger.info(f"Expanded {expanded} nested scroll container(s)")
        else:
            logger.debug("No nested scroll containers to expand")
        return expanded
    except Exception as e:
        logger.warning(f"Container expansion skipped: {e}")
        return 0
    finally:
        if pool is not None:
            try:
                await pool.dispose()
            except Exception as e:
                logger.debug(f"Element pool dispose failed: {e}")
