"""
Shared fixtures: PNG tile factory and Playwright page doubles
"""

from io import BytesIO
import struct
import zlib
from unittest.mock import AsyncMock, MagicMock

import numpy as np
import pytest
from PIL import Image


def png_bytes(width: int, height: int, color=(255, 0, 0, 255)) -> bytes:
    """Solid-colour RGBA PNG."""
    img = Image.new("RGBA", (width, height), color)
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def gradient_png(width: int, height: int, seed: int = 0) -> bytes:
    """RGBA PNG whose rows differ, so misplaced rows are detectable."""
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    buf = BytesIO()
    Image.fromarray(pixels).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def make_png():
    return png_bytes


@pytest.fixture
def make_gradient_png():
    return gradient_png


@pytest.fixture
def mock_page():
    """Page double with the async methods the capture code calls."""
    page = MagicMock()
    page.evaluate = AsyncMock()
    page.evaluate_handle = AsyncMock()
    page.screenshot = AsyncMock(return_value=png_bytes(10, 10))
    page.wait_for_timeout = AsyncMock()
    page.add_style_tag = AsyncMock()
    return page


def _make_pool(evaluate_result=None, picked_element=None):
    """JSHandle double for the element pool built in the page."""
    pool = MagicMock()
    pool.evaluate = AsyncMock(return_value=evaluate_result)
    pool.dispose = AsyncMock()
    handle = MagicMock()
    handle.as_element = MagicMock(return_value=picked_element)
    pool.evaluate_handle = AsyncMock(return_value=handle)
    return pool


@pytest.fixture
def make_pool():
    return _make_pool


def header_only_png(width: int, height: int) -> bytes:
    """PNG signature and IHDR chunk only; enough to carry dimensions."""
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    chunk = b"IHDR" + ihdr
    return (
        b"\x89PNG\r\n\x1a\n"
        + struct.pack(">I", len(ihdr))
        + chunk
        + struct.pack(">I", zlib.crc32(chunk) & 0xFFFFFFFF)
    )


@pytest.fixture
def make_header_only_png():
    return header_only_png
