"""
Scroll Target Selector - pick the one scrollable region to capture

Every element in the document is measured once in the page; admission and
scoring run in Python so alternative heuristics can be swapped in through the
``scorer`` argument and tested without a browser.

Score = hidden height + 2 * on-screen height + on-screen width, plus a fixed
bonus for the document scroller. Hidden content dominates, visual footprint
breaks near-ties and the bonus favours a plain full-page capture when no inner
container stands out.
"""

from dataclasses import replace
from typing import Any, Callable, Dict, List, Sequence, Tuple

from .diagnostics import get_logger
from .models import ScrollCandidate, ScrollSelection

logger = get_logger(__name__)

MIN_SCROLLABLE_DISTANCE = 300
MIN_WIDTH_RATIO = 0.5
MIN_HEIGHT_RATIO = 0.4
DOCUMENT_SCROLLER_BONUS = 100
SCROLLABLE_OVERFLOW = ("auto", "scroll")

Scorer = Callable[[ScrollCandidate], float]

# Seeds first so that, on equal scores, the stable sort keeps the document
# scroller ahead of any inner element.
_CANDIDATE_POOL_JS = """
() => {
    const scroller = document.scrollingElement || document.documentElement || document.body;
    const seen = new Set();
    const pool = [];
    for (const el of [scroller, document.documentElement, document.body, ...document.querySelectorAll('*')]) {
        if (!el || seen.has(el)) continue;
        seen.add(el);
        pool.push(el);
    }
    return pool;
}
"""

_CANDIDATE_METRICS_JS = """
(pool) => {
    const scroller = document.scrollingElement || document.documentElement || document.body;
    const roots = new Set([scroller, document.documentElement, document.body]);
    const candidates = [];
    pool.forEach((el, index) => {
        const isRoot = roots.has(el);
        // Elements without any hidden content can never be admitted
        if (!isRoot && el.scrollHeight <= el.clientHeight) return;
        const style = window.getComputedStyle(el);
        const rect = el.getBoundingClientRect();
        candidates.push({
            index,
            clientHeight: el.clientHeight,
            clientWidth: el.clientWidth,
            scrollHeight: el.scrollHeight,
            rect: { x: rect.x, y: rect.y, width: rect.width, height: rect.height },
            overflowY: style ? style.overflowY : 'visible',
            isDocumentScroller: el === scroller,
            isDocumentRoot: isRoot,
        });
    });
    return {
        viewport: { width: window.innerWidth, height: window.innerHeight },
        candidates,
    };
}
"""

_PICK_FROM_POOL_JS = "(pool, index) => pool[index]"


def is_admissible(candidate: ScrollCandidate, viewport_width: float, viewport_height: float) -> bool:
    """Whether a candidate is a plausible content region at all."""
    if candidate.client_height <= 0 or candidate.client_width <= 0 or candidate.scroll_height <= 0:
        return False
    if candidate.hidden_height < MIN_SCROLLABLE_DISTANCE:
        return False
    rect = candidate.bounding_rect
    if rect.width < viewport_width * MIN_WIDTH_RATIO:
        return False
    if rect.height < viewport_height * MIN_HEIGHT_RATIO:
        return False
    return candidate.overflow_y in SCROLLABLE_OVERFLOW or candidate.is_document_scroller


def score(candidate: ScrollCandidate) -> float:
    rect = candidate.bounding_rect
    bonus = DOCUMENT_SCROLLER_BONUS if candidate.is_document_scroller else 0
    return candidate.hidden_height + rect.height * 2 + rect.width + bonus


def rank_candidates(
    candidates: Sequence[ScrollCandidate],
    viewport_width: float,
    viewport_height: float,
    scorer: Scorer = score,
) -> List[ScrollCandidate]:
    """Admitted candidates with scores attached, best first (stable on ties)."""
    admitted = [
        replace(c, score=scorer(c))
        for c in candidates
        if is_admissible(c, viewport_width, viewport_height)
    ]
    admitted.sort(key=lambda c: c.score, reverse=True)
    return admitted


async def collect_candidates(page) -> Tuple[Any, Dict[str, float], List[ScrollCandidate]]:
    """
    Measure every element in one round trip.

    Returns:
        (pool handle, viewport {width, height}, candidates)
    """
    pool = await page.evaluate_handle(_CANDIDATE_POOL_JS)
    data = await pool.evaluate(_CANDIDATE_METRICS_JS)
    viewport = data.get("viewport") or {}
    candidates = [ScrollCandidate.from_metrics(m) for m in data.get("candidates") or []]
    return pool, viewport, candidates


async def select_scroll_target(page, scorer: Scorer = score) -> ScrollSelection:
    """
    Choose the element to capture.

    Returns ScrollSelection with element=None when the whole document should
    be captured: nothing was admitted, or the winner is the scrolling element,
    documentElement or body.
    """
    pool, viewport, candidates = await collect_candidates(page)
    try:
        ranked = rank_candidates(
            candidates,
            float(viewport.get("width") or 0),
            float(viewport.get("height") or 0),
            scorer=scorer,
        )
        logger.debug(f"Scroll candidates: {len(candidates)} measured, {len(ranked)} admitted")

        if not ranked:
            logger.info("No scrollable region found; capturing the whole document")
            return ScrollSelection()

        best = ranked[0]
        if best.is_document_root:
            logger.info(f"Document scroller selected (score={best.score:.0f})")
            return ScrollSelection(candidate=best)

        handle = await pool.evaluate_handle(_PICK_FROM_POOL_JS, best.index)
        element = handle.as_element()
        if element is None:
            logger.warning("Selected scroll region is not an element; capturing the whole document")
            return ScrollSelection(candidate=best)

        logger.info(
            f"Inner scroll region selected: scrollHeight={best.scroll_height:.0f} "
            f"clientHeight={best.client_height:.0f} score={best.score:.0f}"
        )
        return ScrollSelection(element=element, candidate=best)
    finally:
        await pool.dispose()
