"""
Long-page capture exceptions
"""

from typing import Optional


class LongshotError(Exception):
    """Base exception for longshot"""
    pass


class GeometryError(LongshotError):
    """Capture target has no usable bounding box or shrank during capture"""
    pass


class CaptureError(LongshotError):
    """Screenshot primitive failed in the middle of a capture run"""

    def __init__(self, message: str, offset: Optional[int] = None):
        super().__init__(message)
        self.offset = offset

    def __str__(self) -> str:
        base = super().__str__()
        if self.offset is None:
            return base
        return f"{base} (scrollTop={self.offset})"


class StitchError(LongshotError):
    """Tile buffers cannot be stitched (empty input or zero-sized tile)"""
    pass


class ConfigError(LongshotError):
    """Invalid or incomplete capture configuration"""
    pass
