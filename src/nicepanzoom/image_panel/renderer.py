# nicepanzoom/src/nicepanzoom/image_panel/renderer.py

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image

from .pixel_source import Surface
from .transform import compute_draw_position
from .view_state import Size, Vec2, ViewState


@dataclass(frozen=True, eq=False)
class DrawCall:
    """One draw: `surface` at `position` in a coordinate system scaled by `scale`."""

    surface: Surface
    position: Vec2
    scale: float


class Renderer:
    """Produce the draw call for a repaint. Never mutates the view state."""

    def render(
        self,
        state: ViewState,
        surface: Optional[Surface],
        *,
        loading: bool = False,
        placeholder: Optional[Surface] = None,
    ) -> Optional[DrawCall]:
        if loading and placeholder is not None:
            vp_w, vp_h = state.viewport_size
            return DrawCall(
                surface=placeholder,
                position=((vp_w - placeholder.width) // 2, (vp_h - placeholder.height) // 2),
                scale=1.0,
            )
        if surface is None or state.scale <= 0:
            return None
        return DrawCall(
            surface=surface,
            position=compute_draw_position(state),
            scale=state.scale,
        )


def compose_frame(
    draw_call: Optional[DrawCall],
    viewport_size: Size,
    background: Tuple[int, int, int, int] = (0, 0, 0, 255),
    resample: int = Image.BILINEAR,
) -> Image.Image:
    """Rasterize a draw call into a viewport-sized RGBA frame.

    The scale applies to position and size alike. Only the part of the
    surface that lands inside the viewport is resampled.
    """
    vp_w, vp_h = viewport_size
    frame = Image.new("RGBA", (max(1, vp_w), max(1, vp_h)), background)
    if draw_call is None:
        return frame

    s = draw_call.scale
    pos_x, pos_y = draw_call.position
    src_w, src_h = draw_call.surface.size

    # Visible region in surface pixels
    x0 = max(0.0, -pos_x)
    y0 = max(0.0, -pos_y)
    x1 = min(float(src_w), vp_w / s - pos_x)
    y1 = min(float(src_h), vp_h / s - pos_y)
    if x1 <= x0 or y1 <= y0:
        return frame

    left, top = int(math.floor(x0)), int(math.floor(y0))
    right, bottom = int(math.ceil(x1)), int(math.ceil(y1))

    tile = draw_call.surface.image.crop((left, top, right, bottom))
    dst_w = max(1, int(round((right - left) * s)))
    dst_h = max(1, int(round((bottom - top) * s)))
    if tile.size != (dst_w, dst_h):
        tile = tile.resize((dst_w, dst_h), resample)
    tile = tile.convert("RGBA")

    dest = (int(round((pos_x + left) * s)), int(round((pos_y + top) * s)))
    frame.paste(tile, dest, tile)
    return frame
