# nicepanzoom/src/nicepanzoom/image_panel/pixel_source.py
"""Pixel sources for the image panel.

Turns a file path or a raw pixel buffer into an `ImageBuffer` (straight RGBA,
``uint8``, shape ``(height, width, 4)``) and an `ImageBuffer` into a drawable
`Surface` with premultiplied alpha.

Decoding is delegated to Pillow. Every loader always yields 4 channels; an
opaque alpha channel is derived when the source has none.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np
from PIL import Image

from nicepanzoom.utils.logging import get_logger
from .config import DEFAULT_MAX_SURFACE_PIXELS
from .errors import DecodeError, SurfaceAllocationError

logger = get_logger(__name__)

RawData = Union[bytes, bytearray, memoryview, np.ndarray]


@dataclass(frozen=True, eq=False)
class ImageBuffer:
    """Decoded straight-alpha RGBA pixels, row-major, top to bottom.

    The array is flagged read-only; a buffer never changes after creation.
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        px = self.pixels
        if px.dtype != np.uint8 or px.ndim != 3 or px.shape[2] != 4:
            raise ValueError(
                f"ImageBuffer expects a (height, width, 4) uint8 array, got {px.dtype} {px.shape}"
            )
        if px.shape[0] == 0 or px.shape[1] == 0:
            raise ValueError(f"ImageBuffer cannot be empty, got {px.shape[1]}x{px.shape[0]}")
        px.setflags(write=False)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True, eq=False)
class Surface:
    """Drawable image: premultiplied RGBA pixels plus the matching Pillow "RGBa" image."""

    pixels: np.ndarray
    image: Image.Image

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size


def _check_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise DecodeError(f"invalid image size {width}x{height}")
    if width * height * 4 > sys.maxsize:
        raise DecodeError(f"image size {width}x{height} overflows addressable memory")


def load_from_path(path: Union[str, os.PathLike]) -> ImageBuffer:
    """Decode an image file into an RGBA `ImageBuffer`.

    Raises:
        DecodeError: if the path is missing/unreadable, the data is corrupt or
            in an unsupported format, or the image is too large to address.
    """
    p = Path(path)
    try:
        with Image.open(p) as img:
            # Header only so far; check the size before decoding any pixels.
            width, height = img.size
            _check_dimensions(width, height)
            rgba = img.convert("RGBA")
        pixels = np.array(rgba, dtype=np.uint8)
    except MemoryError as e:
        raise DecodeError(f"out of memory decoding {p}") from e
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"could not decode {p}: {e}") from e

    logger.debug(f"decoded {p.name}: {width}x{height} (source mode {rgba.mode})")
    return ImageBuffer(pixels)


def _as_uint8(data: Any, what: str) -> np.ndarray:
    if isinstance(data, np.ndarray):
        if data.dtype != np.uint8:
            raise DecodeError(f"{what} must be uint8, got {data.dtype}")
        return data.reshape(-1)
    try:
        return np.frombuffer(data, dtype=np.uint8)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"{what} is not a byte buffer: {e}") from e


def load_from_raw(
    data: RawData,
    width: int,
    height: int,
    has_alpha: bool = True,
    alpha: Optional[RawData] = None,
) -> ImageBuffer:
    """Build an `ImageBuffer` from raw interleaved pixels.

    Args:
        data: RGBA bytes (``has_alpha``) or RGB bytes, row-major, top to bottom.
        width: Image width in pixels.
        height: Image height in pixels.
        has_alpha: Whether ``data`` carries a 4th channel.
        alpha: Optional separate alpha plane (``width * height`` bytes) for RGB data.

    The caller's data is copied, never referenced or modified.

    Raises:
        DecodeError: on non-positive or overflowing dimensions or a length mismatch.
    """
    _check_dimensions(width, height)
    if has_alpha and alpha is not None:
        raise DecodeError("a separate alpha plane is only valid for RGB data")

    channels = 4 if has_alpha else 3
    flat = _as_uint8(data, "pixel data")
    expected = width * height * channels
    if flat.size != expected:
        raise DecodeError(
            f"expected {expected} bytes for {width}x{height}x{channels}, got {flat.size}"
        )
    src = flat.reshape(height, width, channels)

    if has_alpha:
        pixels = src.copy()
    else:
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[..., :3] = src
        if alpha is None:
            pixels[..., 3] = 255
        else:
            a = _as_uint8(alpha, "alpha plane")
            if a.size != width * height:
                raise DecodeError(
                    f"expected {width * height} alpha bytes for {width}x{height}, got {a.size}"
                )
            pixels[..., 3] = a.reshape(height, width)

    return ImageBuffer(pixels)


def premultiply(pixels: np.ndarray) -> np.ndarray:
    """Return a premultiplied copy of straight RGBA pixels.

    Each color channel becomes ``channel * alpha // 255`` (truncating), so the
    result matches integer reference renderers bit for bit. Alpha is unchanged.
    """
    wide = pixels.astype(np.uint16)
    wide[..., :3] = wide[..., :3] * wide[..., 3:4] // 255
    return wide.astype(np.uint8)


def to_surface(
    buffer: ImageBuffer,
    max_pixels: int = DEFAULT_MAX_SURFACE_PIXELS,
) -> Surface:
    """Convert a buffer into a drawable premultiplied `Surface`.

    Raises:
        SurfaceAllocationError: if the surface exceeds ``max_pixels`` or the
            allocation fails.
        DecodeError: if the buffer has no pixels.
    """
    width, height = buffer.size
    if width == 0 or height == 0:
        raise DecodeError(f"refusing empty image {width}x{height}")
    if width * height > max_pixels:
        raise SurfaceAllocationError(
            f"surface {width}x{height} exceeds the limit of {max_pixels} pixels"
        )
    try:
        pm = premultiply(buffer.pixels)
        image = Image.frombytes("RGBa", (width, height), pm.tobytes())
    except (MemoryError, ValueError) as e:
        raise SurfaceAllocationError(f"could not allocate a {width}x{height} surface: {e}") from e

    pm.setflags(write=False)
    return Surface(pixels=pm, image=image)
