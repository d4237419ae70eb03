# nicepanzoom/src/nicepanzoom/image_panel/input_controller.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from nicepanzoom.utils.logging import get_logger
from . import transform
from .config import ImagePanelConfig
from .view_state import ViewState

logger = get_logger(__name__)


class InputKind(Enum):
    WHEEL = "wheel"
    POINTER_DOWN = "pointer_down"
    POINTER_MOVE = "pointer_move"
    POINTER_UP = "pointer_up"
    SECONDARY_CLICK = "secondary_click"


class PanMode(Enum):
    IDLE = "idle"
    PANNING = "panning"


@dataclass(frozen=True)
class InputEvent:
    """A pointer or wheel event in viewport pixel coordinates.

    For WHEEL events only `delta` is used: positive rotates away from the
    user (zoom in), negative zooms out.
    """

    kind: InputKind
    x: float = 0.0
    y: float = 0.0
    delta: float = 0.0

    @classmethod
    def wheel(cls, delta: float) -> "InputEvent":
        return cls(InputKind.WHEEL, delta=float(delta))

    @classmethod
    def pointer_down(cls, x: float, y: float) -> "InputEvent":
        return cls(InputKind.POINTER_DOWN, x=float(x), y=float(y))

    @classmethod
    def pointer_move(cls, x: float, y: float) -> "InputEvent":
        return cls(InputKind.POINTER_MOVE, x=float(x), y=float(y))

    @classmethod
    def pointer_up(cls) -> "InputEvent":
        return cls(InputKind.POINTER_UP)

    @classmethod
    def secondary_click(cls, x: float, y: float) -> "InputEvent":
        return cls(InputKind.SECONDARY_CLICK, x=float(x), y=float(y))


class InputController:
    """Translate pointer/wheel events into transform calls on one ViewState.

    Panning is a two-state machine: IDLE --down--> PANNING --move--> PANNING
    --up--> IDLE. Moves while IDLE and ups without a down are ignored.
    """

    def __init__(self, state: ViewState, config: ImagePanelConfig | None = None) -> None:
        self._state = state
        self.config = config if config is not None else ImagePanelConfig()
        self.last_pixel_location: tuple[float, float] | None = None

    @property
    def state(self) -> ViewState:
        return self._state

    @state.setter
    def state(self, value: ViewState) -> None:
        self._state = value

    @property
    def mode(self) -> PanMode:
        return PanMode.PANNING if self._state.is_panning else PanMode.IDLE

    def handle(self, event: InputEvent) -> bool:
        """Apply one event. Returns True if a repaint is needed."""
        kind = event.kind

        if kind is InputKind.WHEEL:
            if event.delta == 0:
                return False
            cfg = self.config
            direction = transform.ZOOM_IN if event.delta > 0 else transform.ZOOM_OUT
            changed = transform.apply_zoom_step(
                self._state,
                direction,
                step=cfg.zoom_step,
                min_scale=cfg.min_scale,
                max_scale=cfg.max_scale,
                symmetric=cfg.symmetric_zoom,
            )
            if changed:
                logger.debug(f"zoom {'in' if direction > 0 else 'out'}: scale={self._state.scale:.4f}")
            return changed

        if kind is InputKind.POINTER_DOWN:
            transform.begin_pan(self._state, (event.x, event.y))
            return False

        if kind is InputKind.POINTER_MOVE:
            return transform.update_pan(self._state, (event.x, event.y))

        if kind is InputKind.POINTER_UP:
            committed = transform.commit_pan(self._state)
            if committed:
                logger.debug(f"pan committed: offset={self._state.pan_offset}")
            return committed

        if kind is InputKind.SECONDARY_CLICK:
            ix, iy = transform.view_to_image(self._state, event.x, event.y)
            self.last_pixel_location = (ix, iy)
            logger.info(
                f"pixel location: view=({event.x:.1f}, {event.y:.1f}) image=({ix:.1f}, {iy:.1f})"
            )
            return False

        return False
