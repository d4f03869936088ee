"""Tests for vertical tile stitching."""

from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from longshot_core.exceptions import StitchError
from longshot_core.stitcher import (
    decode_png,
    encode_png,
    png_size,
    stitch_arrays,
    stitch_png_buffers,
    write_stitched_png,
)


def read_pixels(path) -> np.ndarray:
    with Image.open(path) as img:
        return np.asarray(img.convert("RGBA"))


def test_equal_width_tiles_sum_heights(make_png):
    buffers = [make_png(120, 90), make_png(120, 90), make_png(120, 45)]
    image = stitch_png_buffers(buffers)
    assert image.width == 120
    assert image.height == 225
    assert image.pixels.shape == (225, 120, 4)


def test_rows_land_at_running_offset(make_gradient_png):
    top = make_gradient_png(40, 30, seed=1)
    bottom = make_gradient_png(40, 20, seed=2)
    image = stitch_png_buffers([top, bottom])
    assert np.array_equal(image.pixels[:30], decode_png(top))
    assert np.array_equal(image.pixels[30:], decode_png(bottom))


def test_narrow_tile_left_aligned_on_transparent_background(make_png):
    wide = make_png(100, 10, color=(0, 255, 0, 255))
    narrow = make_png(60, 10, color=(0, 0, 255, 255))
    image = stitch_png_buffers([wide, narrow])

    assert image.width == 100
    assert (image.pixels[10:, :60] == [0, 0, 255, 255]).all()
    assert (image.pixels[10:, 60:] == 0).all()
    assert (image.pixels[:10] == [0, 255, 0, 255]).all()


def test_rgb_tiles_become_opaque_rgba():
    buf = BytesIO()
    Image.new("RGB", (8, 4), (10, 20, 30)).save(buf, format="PNG")
    pixels = decode_png(buf.getvalue())
    assert pixels.shape == (4, 8, 4)
    assert (pixels == [10, 20, 30, 255]).all()


def test_empty_input_rejected():
    with pytest.raises(StitchError):
        stitch_arrays([])


def test_zero_height_tile_fails_loudly(make_png):
    empty = np.zeros((0, 10, 4), dtype=np.uint8)
    with pytest.raises(StitchError):
        stitch_arrays([decode_png(make_png(10, 10)), empty])


def test_reencode_is_lossless(make_gradient_png):
    image = stitch_png_buffers([make_gradient_png(32, 16, seed=3), make_gradient_png(32, 16, seed=4)])
    again = decode_png(encode_png(image))
    assert np.array_equal(again, image.pixels)
    assert np.array_equal(decode_png(encode_png(stitch_arrays([again]))), again)


class TestWriteStitchedPng:

    def test_single_tile_copied_verbatim(self, tmp_path, make_gradient_png):
        data = make_gradient_png(50, 40, seed=5)
        out = write_stitched_png([data], tmp_path / "single.png")
        assert out.read_bytes() == data

    def test_creates_parent_directories(self, tmp_path, make_png):
        out = tmp_path / "a" / "b" / "shot.png"
        write_stitched_png([make_png(10, 10), make_png(10, 5)], out)
        assert out.exists()
        assert png_size(out.read_bytes()) == (10, 15)

    def test_written_pixels_match_tiles(self, tmp_path, make_gradient_png):
        tiles = [make_gradient_png(24, 12, seed=s) for s in range(3)]
        out = write_stitched_png(tiles, tmp_path / "stitched.png")
        pixels = read_pixels(out)
        expected = np.concatenate([decode_png(t) for t in tiles], axis=0)
        assert np.array_equal(pixels, expected)

    def test_empty_list_writes_nothing(self, tmp_path):
        out = tmp_path / "none.png"
        with pytest.raises(StitchError):
            write_stitched_png([], out)
        assert not out.exists()

    def test_truncated_tile_writes_nothing(self, tmp_path, make_gradient_png):
        out = tmp_path / "truncated.png"
        data = make_gradient_png(64, 64, seed=6)
        with pytest.raises(StitchError):
            write_stitched_png([data, data[: len(data) // 2]], out)
        assert not out.exists()

    def test_corrupt_tile_writes_nothing(self, tmp_path, make_png):
        out = tmp_path / "bad.png"
        with pytest.raises(StitchError):
            write_stitched_png([make_png(10, 10), b"not a png"], out)
        assert not out.exists()


class TestPngSize:

    def test_reads_header(self, make_png):
        assert png_size(make_png(37, 21)) == (37, 21)

    def test_dimensions_beyond_pillow_pixel_limit(self, make_header_only_png):
        # 3200 x 60000 is a 30000px tall page at device scale 2
        assert png_size(make_header_only_png(3200, 60000)) == (3200, 60000)

    def test_not_a_png(self):
        with pytest.raises(StitchError):
            png_size(b"GIF89a not a png at all")


def test_truncated_tile_is_stitch_error(make_gradient_png):
    data = make_gradient_png(64, 64, seed=7)
    with pytest.raises(StitchError):
        decode_png(data[: len(data) // 2])
