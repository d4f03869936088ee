"""
Image Stitcher - vertical concatenation of captured tiles

Tiles arrive top to bottom, each clipped to the content left below its
scroll offset, and are copied row for row into a zero-filled RGBA canvas as
wide as the widest tile.
"""

from io import BytesIO
import struct
from pathlib import Path
from typing import Sequence, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .diagnostics import get_logger
from .exceptions import StitchError
from .models import StitchedImage

logger = get_logger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def decode_png(data: bytes) -> np.ndarray:
    """Decode PNG bytes into an RGBA array of shape (height, width, 4)."""
    try:
        with Image.open(BytesIO(data)) as img:
            rgba = np.asarray(img.convert("RGBA"), dtype=np.uint8)
    except (UnidentifiedImageError, OSError) as e:
        raise StitchError(f"Tile is not a readable image: {e}") from e
    if rgba.ndim != 3 or rgba.shape[0] == 0 or rgba.shape[1] == 0:
        raise StitchError(f"Tile has zero dimensions: {rgba.shape}")
    return rgba


def stitch_arrays(arrays: Sequence[np.ndarray]) -> StitchedImage:
    if not arrays:
        raise StitchError("No tiles to stitch")
    for i, arr in enumerate(arrays):
        if arr.ndim != 3 or arr.shape[0] == 0 or arr.shape[1] == 0:
            raise StitchError(f"Tile {i} has zero dimensions: {arr.shape}")

    width = max(arr.shape[1] for arr in arrays)
    height = sum(arr.shape[0] for arr in arrays)
    # Narrower tiles leave the rest of their rows transparent
    canvas = np.zeros((height, width, 4), dtype=np.uint8)

    offset = 0
    for arr in arrays:
        h, w = arr.shape[:2]
        canvas[offset:offset + h, :w] = arr
        offset += h

    return StitchedImage(width=width, height=height, pixels=canvas)


def encode_png(image: StitchedImage) -> bytes:
    buf = BytesIO()
    Image.fromarray(image.pixels).save(buf, format="PNG")
    return buf.getvalue()


def stitch_png_buffers(buffers: Sequence[bytes]) -> StitchedImage:
    return stitch_arrays([decode_png(b) for b in buffers])


def write_stitched_png(buffers: Sequence[bytes], output_path: Union[str, Path]) -> Path:
    """
    Stitch PNG tiles and write the result.

    Args:
        buffers: PNG-encoded tiles, top to bottom
        output_path: Destination file; parent directories are created

    Returns:
        The written path

    A single tile is written byte for byte, without decoding.
    """
    if not buffers:
        raise StitchError("No tiles to stitch")

    path = Path(output_path)
    if len(buffers) == 1:
        # Still validate the tile so a broken capture fails before writing
        decode_png(buffers[0])
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(buffers[0])
        logger.info(f"Single tile written to {path}")
        return path

    image = stitch_png_buffers(buffers)
    data = encode_png(image)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.info(f"Stitched {len(buffers)} tiles into {image.width}x{image.height} image: {path}")
    return path


def png_size(data: bytes) -> Tuple[int, int]:
    """
    (width, height) read from the IHDR chunk.

    Only the header is parsed, so full-page captures larger than Pillow's
    decompression-bomb limit can still be measured.
    """
    if len(data) < 24 or data[:8] != PNG_SIGNATURE or data[12:16] != b"IHDR":
        raise StitchError("Data is not a PNG image")
    return struct.unpack(">II", data[16:24])
