# nicepanzoom/src/nicepanzoom/image_panel/transform.py
"""Image-space <-> viewport-space transform for the image panel.

The image is drawn in a coordinate system pre-scaled by ``state.scale``:
it is centered in the viewport, then shifted by the pan amount (viewport
pixels) converted to image units by dividing by the scale.

All functions take the `ViewState` they operate on explicitly.
"""

from __future__ import annotations

from nicepanzoom.utils.logging import get_logger
from .view_state import Size, Vec2, ViewState

logger = get_logger(__name__)

ZOOM_IN = 1
ZOOM_OUT = -1


# ------------------ fit ------------------

def fit_scale(image_size: Size, viewport_size: Size) -> float:
    """Uniform scale that fits an image to the viewport.

    A landscape image taller than the viewport is bound to the viewport
    width; everything else is bound to the viewport height.
    """
    img_w, img_h = image_size
    vp_w, vp_h = viewport_size
    if img_w <= 0 or img_h <= 0 or vp_w <= 0 or vp_h <= 0:
        return 1.0

    aspect_ratio = img_w / float(img_h)
    if img_h < img_w and img_h > vp_h:
        new_img_h = vp_w / aspect_ratio
    else:
        new_img_h = float(vp_h)
    return new_img_h / img_h


def fit_to_viewport(state: ViewState) -> float:
    """Fit the image to the viewport and re-center it.

    Resets pan offset, pan delta and any active gesture. When there is no
    image or the viewport is empty the scale stays at 1.0 until the next fit.
    """
    state.reset_transforms()
    state.scale = fit_scale(state.image_size, state.viewport_size)
    logger.debug(
        f"fit: image={state.image_size} viewport={state.viewport_size} scale={state.scale:.4f}"
    )
    return state.scale


# ------------------ drawing ------------------

def compute_draw_position(state: ViewState) -> Vec2:
    """Top-left of the image in the scaled drawing coordinate system."""
    s = state.scale
    img_w, img_h = state.image_size
    vp_w, vp_h = state.viewport_size
    pan_x, pan_y = state.total_pan
    pos_x = (vp_w / s - img_w) / 2.0 + pan_x / s
    pos_y = (vp_h / s - img_h) / 2.0 + pan_y / s
    return pos_x, pos_y


def image_to_view(state: ViewState, x: float, y: float) -> Vec2:
    """Image pixel coords -> viewport pixel coords."""
    pos_x, pos_y = compute_draw_position(state)
    return (x + pos_x) * state.scale, (y + pos_y) * state.scale


def view_to_image(state: ViewState, vx: float, vy: float) -> Vec2:
    """Viewport pixel coords -> image pixel coords."""
    pos_x, pos_y = compute_draw_position(state)
    return vx / state.scale - pos_x, vy / state.scale - pos_y


# ------------------ zoom ------------------

def apply_zoom_step(
    state: ViewState,
    direction: int,
    *,
    step: float = 0.07,
    min_scale: float = 0.1,
    max_scale: float = 10.0,
    symmetric: bool = True,
) -> bool:
    """Zoom one wheel notch about the viewport center.

    direction > 0 -> zoom in, direction < 0 -> zoom out.

    Zooming in multiplies by ``1 + step``. Zooming out divides by ``1 + step``
    when ``symmetric``, otherwise subtracts ``step * scale``. A step that would
    carry the scale past ``max_scale`` (in) or below ``min_scale`` (out) is
    dropped.

    Returns:
        True if the scale changed.
    """
    if direction == 0:
        return False

    old = state.scale
    if direction > 0:
        new = old * (1.0 + step)
        if new > max_scale:
            logger.debug(f"zoom in dropped at scale={old:.4f}")
            return False
    else:
        new = old / (1.0 + step) if symmetric else old - step * old
        if new < min_scale:
            logger.debug(f"zoom out dropped at scale={old:.4f}")
            return False

    state.scale = new
    state.user_transformed = True
    return True


# ------------------ pan ------------------

def begin_pan(state: ViewState, cursor: Vec2) -> None:
    """Record the pan anchor. The committed offset is not touched."""
    if state.is_panning:
        # A second press without a release: keep what was dragged so far.
        commit_pan(state)
    state.pan_anchor = (float(cursor[0]), float(cursor[1]))
    state.pan_delta = (0.0, 0.0)


def update_pan(state: ViewState, cursor: Vec2) -> bool:
    """Set the in-flight delta relative to the anchor. No-op while idle."""
    if state.pan_anchor is None:
        return False
    ax, ay = state.pan_anchor
    state.pan_delta = (float(cursor[0]) - ax, float(cursor[1]) - ay)
    return True


def commit_pan(state: ViewState) -> bool:
    """Fold the delta into the offset and end the gesture. No-op while idle."""
    if state.pan_anchor is None:
        return False
    dx, dy = state.pan_delta
    ox, oy = state.pan_offset
    state.pan_offset = (ox + dx, oy + dy)
    state.pan_delta = (0.0, 0.0)
    state.pan_anchor = None
    if dx != 0.0 or dy != 0.0:
        state.user_transformed = True
    return True
