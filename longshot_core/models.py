"""
Data carried between the capture stages.

Everything here is created fresh for each capture run and discarded after the
output image is written.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rect":
        return cls(
            x=float(data.get("x", 0)),
            y=float(data.get("y", 0)),
            width=float(data.get("width", 0)),
            height=float(data.get("height", 0)),
        )


@dataclass(frozen=True)
class ScrollCandidate:
    """Geometry of one element that might hold the page's real content."""
    index: int
    client_height: float
    client_width: float
    scroll_height: float
    bounding_rect: Rect
    overflow_y: str = "visible"
    is_document_scroller: bool = False
    is_document_root: bool = False
    score: float = 0.0

    @property
    def hidden_height(self) -> float:
        return self.scroll_height - self.client_height

    @classmethod
    def from_metrics(cls, data: Dict[str, Any]) -> "ScrollCandidate":
        return cls(
            index=int(data["index"]),
            client_height=float(data.get("clientHeight") or 0),
            client_width=float(data.get("clientWidth") or 0),
            scroll_height=float(data.get("scrollHeight") or 0),
            bounding_rect=Rect.from_dict(data.get("rect") or {}),
            overflow_y=str(data.get("overflowY") or "visible"),
            is_document_scroller=bool(data.get("isDocumentScroller")),
            is_document_root=bool(data.get("isDocumentRoot")),
        )


@dataclass(frozen=True)
class ScrollSelection:
    """Outcome of target selection; element None means the whole document."""
    element: Optional[Any] = None
    candidate: Optional[ScrollCandidate] = None

    @property
    def is_document(self) -> bool:
        return self.element is None


@dataclass(frozen=True)
class CaptureTarget:
    element: Any
    clip: Rect
    scroll_height: int
    client_height: int


@dataclass(frozen=True)
class Tile:
    scroll_top: int
    clip_height: int
    data: bytes = field(repr=False)


@dataclass
class StitchedImage:
    width: int
    height: int
    pixels: np.ndarray = field(repr=False)


@dataclass(frozen=True)
class StyleOverride:
    """Inline styles to set on one pooled element."""
    index: int
    styles: Dict[str, str]


@dataclass(frozen=True)
class CaptureResult:
    path: Path
    mode: str
    tile_count: int
    width: Optional[int] = None
    height: Optional[int] = None

