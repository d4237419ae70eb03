# nicepanzoom/src/nicepanzoom/image_panel/config.py

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from PIL import Image


class ResizePolicy(Enum):
    """What the panel does with the transform when the viewport is resized."""

    REFIT_IF_UNTOUCHED = "refit_if_untouched"  # refit unless the user zoomed/panned
    ALWAYS = "always"
    NEVER = "never"


_RESAMPLE_FILTERS = {
    "nearest": Image.NEAREST,
    "bilinear": Image.BILINEAR,
    "bicubic": Image.BICUBIC,
    "lanczos": Image.LANCZOS,
}

# Pillow's own decompression-bomb threshold is a reasonable default ceiling.
DEFAULT_MAX_SURFACE_PIXELS = 2 * 89_478_485


@dataclass
class ImagePanelConfig:
    # Viewport (display surface) size in pixels
    viewport_width: int = 800
    viewport_height: int = 600

    # Wheel zoom behavior
    zoom_step: float = 0.07                 # fractional change per wheel notch
    min_scale: float = 0.1
    max_scale: float = 10.0
    symmetric_zoom: bool = True             # zoom out divides by (1 + step)

    # Resize behavior
    resize_policy: ResizePolicy = ResizePolicy.REFIT_IF_UNTOUCHED

    # Loading placeholder, drawn centered at unit scale while a load is in flight
    loading_screen_path: Optional[str] = None

    # Surface limits
    max_surface_pixels: int = DEFAULT_MAX_SURFACE_PIXELS

    # Rendering
    background_rgba: Tuple[int, int, int, int] = (0, 0, 0, 255)
    resample: str = "bilinear"              # "nearest", "bilinear", "bicubic", "lanczos"
    image_border_width: int = 0             # in pixels

    # Panning
    pan_button: int = 0                     # 0 = left mouse button

    def __post_init__(self) -> None:
        if self.viewport_width <= 0 or self.viewport_height <= 0:
            raise ValueError(
                f"viewport size must be positive, got {self.viewport_width}x{self.viewport_height}"
            )
        if not 0.0 < self.zoom_step < 1.0:
            raise ValueError(f"zoom_step must be in (0, 1), got {self.zoom_step}")
        if not 0.0 < self.min_scale < self.max_scale:
            raise ValueError(
                f"expected 0 < min_scale < max_scale, got {self.min_scale}, {self.max_scale}"
            )
        if self.max_surface_pixels <= 0:
            raise ValueError("max_surface_pixels must be positive")
        if self.resample not in _RESAMPLE_FILTERS:
            raise ValueError(
                f"resample must be one of {sorted(_RESAMPLE_FILTERS)}, got {self.resample!r}"
            )
        if isinstance(self.resize_policy, str):
            self.resize_policy = ResizePolicy(self.resize_policy)

    @property
    def viewport_size(self) -> tuple[int, int]:
        return self.viewport_width, self.viewport_height

    @property
    def resample_filter(self) -> int:
        return _RESAMPLE_FILTERS[self.resample]

    @classmethod
    def from_env(cls, **overrides) -> "ImagePanelConfig":
        """Build a config, taking viewport size and zoom step from the environment.

        Recognized variables: NICEPANZOOM_VIEWPORT_WIDTH, NICEPANZOOM_VIEWPORT_HEIGHT,
        NICEPANZOOM_ZOOM_STEP. Explicit keyword overrides win over the environment.
        """
        values: dict = {}
        width = os.environ.get("NICEPANZOOM_VIEWPORT_WIDTH")
        height = os.environ.get("NICEPANZOOM_VIEWPORT_HEIGHT")
        step = os.environ.get("NICEPANZOOM_ZOOM_STEP")
        if width:
            values["viewport_width"] = int(width)
        if height:
            values["viewport_height"] = int(height)
        if step:
            values["zoom_step"] = float(step)
        values.update(overrides)
        return cls(**values)
