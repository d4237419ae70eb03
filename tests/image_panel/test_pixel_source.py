# tests/image_panel/test_pixel_source.py

from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

import numpy as np
import pytest
from PIL import Image

from nicepanzoom.image_panel.errors import DecodeError, SurfaceAllocationError
from nicepanzoom.image_panel.pixel_source import (
    ImageBuffer,
    load_from_path,
    load_from_raw,
    premultiply,
    to_surface,
)


# --- premultiply ---


def test_premultiply_truncates():
    """channel * alpha // 255, never rounded."""
    px = np.array([[[200, 100, 50, 128]]], dtype=np.uint8)
    out = premultiply(px)
    # 200*128/255 = 100.39, 100*128/255 = 50.19, 50*128/255 = 25.09
    assert out[0, 0].tolist() == [100, 50, 25, 128]


def test_premultiply_matches_integer_formula_everywhere():
    rng = np.random.default_rng(0)
    px = rng.integers(0, 256, size=(17, 23, 4), dtype=np.uint8)
    out = premultiply(px)

    for y in range(px.shape[0]):
        for x in range(px.shape[1]):
            r, g, b, a = (int(v) for v in px[y, x])
            assert out[y, x].tolist() == [r * a // 255, g * a // 255, b * a // 255, a]


def test_premultiply_extremes(rgba_pixels: np.ndarray):
    out = premultiply(rgba_pixels)
    assert out[0, 0].tolist() == [255, 0, 0, 255]    # opaque unchanged
    assert out[0, 2].tolist() == [0, 0, 0, 0]        # fully transparent -> black
    assert out[1, 0].tolist() == [1, 1, 1, 1]


# --- load_from_raw ---


def test_load_from_raw_rgba_copies_input():
    data = bytearray([1, 2, 3, 4] * 6)
    buf = load_from_raw(data, 3, 2)

    assert buf.size == (3, 2)
    assert buf.pixels.shape == (2, 3, 4)

    data[0] = 99
    assert buf.pixels[0, 0, 0] == 1


def test_load_from_raw_rgb_gets_opaque_alpha():
    data = bytes([10, 20, 30] * 4)
    buf = load_from_raw(data, 2, 2, has_alpha=False)

    assert buf.pixels.shape == (2, 2, 4)
    assert (buf.pixels[..., 3] == 255).all()
    assert buf.pixels[1, 1].tolist() == [10, 20, 30, 255]


def test_load_from_raw_rgb_with_alpha_plane():
    data = bytes([10, 20, 30] * 4)
    alpha = bytes([0, 64, 128, 255])
    buf = load_from_raw(data, 2, 2, has_alpha=False, alpha=alpha)

    assert buf.pixels[..., 3].tolist() == [[0, 64], [128, 255]]


def test_load_from_raw_accepts_numpy(rgba_pixels: np.ndarray):
    buf = load_from_raw(rgba_pixels, 3, 2)
    np.testing.assert_array_equal(buf.pixels, rgba_pixels)
    assert buf.pixels is not rgba_pixels


@pytest.mark.parametrize(
    "width, height, nbytes",
    [
        (0, 2, 0),
        (2, 0, 0),
        (-1, 2, 8),
        (2, 2, 15),  # one byte short
        (2, 2, 17),
    ],
)
def test_load_from_raw_rejects_bad_sizes(width: int, height: int, nbytes: int):
    with pytest.raises(DecodeError):
        load_from_raw(bytes(nbytes), width, height)


def test_load_from_raw_rejects_overflow():
    with pytest.raises(DecodeError) as exc_info:
        load_from_raw(b"", sys.maxsize, 2)
    assert "overflow" in str(exc_info.value)


def test_load_from_raw_rejects_alpha_plane_with_rgba():
    with pytest.raises(DecodeError):
        load_from_raw(bytes(16), 2, 2, has_alpha=True, alpha=bytes(4))


def test_load_from_raw_rejects_non_uint8_array():
    with pytest.raises(DecodeError):
        load_from_raw(np.zeros((2, 2, 4), dtype=np.float32), 2, 2)


def test_image_buffer_is_read_only(rgba_pixels: np.ndarray):
    buf = load_from_raw(rgba_pixels, 3, 2)
    assert buf.pixels.flags.writeable is False
    with pytest.raises(ValueError):
        buf.pixels[0, 0, 0] = 1


def test_image_buffer_rejects_wrong_shape():
    with pytest.raises(ValueError):
        ImageBuffer(np.zeros((2, 2, 3), dtype=np.uint8))


@pytest.mark.parametrize("shape", [(0, 5, 4), (2, 0, 4), (0, 0, 4)])
def test_image_buffer_rejects_empty(shape):
    with pytest.raises(ValueError):
        ImageBuffer(np.zeros(shape, dtype=np.uint8))


# --- load_from_path ---


def test_load_from_path_rgb_png(landscape_png: Path):
    buf = load_from_path(landscape_png)

    assert buf.size == (160, 90)
    assert buf.pixels.shape == (90, 160, 4)
    assert buf.pixels[0, 0].tolist() == [10, 20, 30, 255]


def test_load_from_path_keeps_alpha(portrait_png: Path):
    buf = load_from_path(portrait_png)

    assert buf.size == (90, 160)
    assert buf.pixels[5, 5].tolist() == [200, 100, 50, 128]


def test_load_from_path_missing_file(tmp_path: Path):
    with pytest.raises(DecodeError):
        load_from_path(tmp_path / "does-not-exist.png")


def test_load_from_path_corrupt_file(tmp_path: Path):
    p = tmp_path / "garbage.png"
    p.write_bytes(b"this is not an image")
    with pytest.raises(DecodeError):
        load_from_path(p)


def test_load_from_path_directory(tmp_path: Path):
    with pytest.raises(DecodeError):
        load_from_path(tmp_path)


def test_load_from_path_out_of_memory(landscape_png: Path, monkeypatch: pytest.MonkeyPatch):
    def _no_memory(self, *args, **kwargs):
        raise MemoryError

    monkeypatch.setattr(Image.Image, "convert", _no_memory)
    with pytest.raises(DecodeError, match="out of memory"):
        load_from_path(landscape_png)


# --- to_surface ---


def test_to_surface_is_premultiplied(rgba_pixels: np.ndarray):
    buf = load_from_raw(rgba_pixels, 3, 2)
    surface = to_surface(buf)

    assert surface.size == (3, 2)
    assert surface.image.mode == "RGBa"
    np.testing.assert_array_equal(surface.pixels, premultiply(rgba_pixels))
    # the source buffer still holds straight alpha
    assert buf.pixels[0, 1].tolist() == [200, 100, 50, 128]


def test_to_surface_rejects_oversize(rgba_pixels: np.ndarray):
    buf = load_from_raw(rgba_pixels, 3, 2)
    with pytest.raises(SurfaceAllocationError):
        to_surface(buf, max_pixels=5)


def test_to_surface_rejects_empty():
    # anything sized like a buffer but without pixels
    empty = SimpleNamespace(size=(0, 4), pixels=np.zeros((4, 0, 4), dtype=np.uint8))
    with pytest.raises(DecodeError):
        to_surface(empty)
