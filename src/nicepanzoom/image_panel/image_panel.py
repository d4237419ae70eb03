# nicepanzoom/src/nicepanzoom/image_panel/image_panel.py

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Union

from PIL import Image

from nicepanzoom.utils.logging import get_logger
from . import transform
from .config import ImagePanelConfig, ResizePolicy
from .errors import ImagePanelError
from .input_controller import InputController, InputEvent, PanMode
from .pixel_source import (
    ImageBuffer,
    RawData,
    Surface,
    load_from_path,
    load_from_raw,
    to_surface,
)
from .renderer import DrawCall, Renderer, compose_frame
from .view_state import Vec2, ViewState

logger = get_logger(__name__)

PathLike = Union[str, os.PathLike]


class LoadPhase(Enum):
    IDLE = "idle"
    LOADING = "loading"


@dataclass(frozen=True)
class LoadTicket:
    """Sequence token handed out when a load starts.

    Only the most recently issued ticket may commit its result.
    """

    token: int


class ImagePanel:
    """Headless pan/zoom image viewer.

    Owns the view state, the active image buffer and its surface. All
    mutations happen through the load methods, `on_resize` and `handle`;
    callers only ever see copies of the view state.

    Events (via callback registration):
        on_repaint(handler): Handler called as handler() whenever the panel
            needs to be redrawn.
    """

    def __init__(
        self,
        config: ImagePanelConfig | None = None,
        *,
        viewport_size: tuple[int, int] | None = None,
    ) -> None:
        self.config = config if config is not None else ImagePanelConfig()

        if viewport_size is None:
            viewport_size = self.config.viewport_size
        self._state = ViewState(viewport_size=viewport_size)

        self._buffer: Optional[ImageBuffer] = None
        self._surface: Optional[Surface] = None

        self._controller = InputController(self._state, self.config)
        self._renderer = Renderer()

        self._load_seq: int = 0
        self._phase = LoadPhase.IDLE

        self._repaint_handlers: List[Callable[[], None]] = []

        self._placeholder: Optional[Surface] = None
        if self.config.loading_screen_path:
            try:
                self._placeholder = to_surface(
                    load_from_path(self.config.loading_screen_path),
                    self.config.max_surface_pixels,
                )
            except ImagePanelError as e:
                logger.warning(f"loading screen unavailable: {e}")

        logger.info(
            f"ImagePanel initialized: viewport={viewport_size[0]}x{viewport_size[1]}, "
            f"zoom_step={self.config.zoom_step}, resize_policy={self.config.resize_policy.value}"
        )

    # ------------- properties -------------

    @property
    def view_state(self) -> ViewState:
        """A copy of the current view state."""
        return self._state.copy()

    @property
    def scale(self) -> float:
        return self._state.scale

    @property
    def image(self) -> Optional[ImageBuffer]:
        return self._buffer

    @property
    def surface(self) -> Optional[Surface]:
        return self._surface

    @property
    def phase(self) -> LoadPhase:
        return self._phase

    @property
    def is_loading(self) -> bool:
        return self._phase is LoadPhase.LOADING

    @property
    def pan_mode(self) -> PanMode:
        return self._controller.mode

    # ------------- public event registration API -------------

    def on_repaint(self, handler: Callable[[], None]) -> None:
        """Register a callback for repaint requests.

        Handler is called with no arguments.
        """
        self._repaint_handlers.append(handler)

    # ------------- loading -------------

    def begin_load(self) -> LoadTicket:
        """Start a load; any load started earlier becomes stale."""
        self._load_seq += 1
        self._phase = LoadPhase.LOADING
        self._request_repaint()
        return LoadTicket(self._load_seq)

    def is_current(self, ticket: LoadTicket) -> bool:
        return ticket.token == self._load_seq

    def finish_load(self, ticket: LoadTicket, buffer: ImageBuffer, surface: Surface) -> bool:
        """Make a decoded image active, unless a newer load has started.

        Returns:
            True if the image was committed, False if the result was stale.
        """
        if not self.is_current(ticket):
            logger.info(
                f"discarding stale load #{ticket.token} (current is #{self._load_seq})"
            )
            return False

        self._buffer = buffer
        self._surface = surface
        self._state.image_size = buffer.size
        transform.fit_to_viewport(self._state)
        self._phase = LoadPhase.IDLE

        logger.info(
            f"image loaded: {buffer.width}x{buffer.height}, fit scale={self._state.scale:.4f}"
        )
        self._request_repaint()
        return True

    def abandon_load(self, ticket: LoadTicket, error: Exception) -> None:
        """End a failed load. Image and view state are left as they were."""
        logger.warning(f"load #{ticket.token} abandoned: {error}")
        if self.is_current(ticket):
            self._phase = LoadPhase.IDLE
            self._request_repaint()

    def load_path(self, path: PathLike) -> bool:
        """Decode and display the image at `path`. Returns False if abandoned."""
        ticket = self.begin_load()
        try:
            buffer, surface = self._decode_path(path)
        except ImagePanelError as e:
            self.abandon_load(ticket, e)
            return False
        except Exception as e:
            self.abandon_load(ticket, e)
            raise
        return self.finish_load(ticket, buffer, surface)

    async def load_path_async(self, path: PathLike) -> bool:
        """Like `load_path`, decoding in a worker thread.

        The result is committed on the calling event loop, and only if no
        other load started in the meantime.
        """
        ticket = self.begin_load()
        try:
            buffer, surface = await asyncio.to_thread(self._decode_path, path)
        except ImagePanelError as e:
            self.abandon_load(ticket, e)
            return False
        except Exception as e:
            self.abandon_load(ticket, e)
            raise
        return self.finish_load(ticket, buffer, surface)

    def load_raw(
        self,
        data: RawData,
        width: int,
        height: int,
        has_alpha: bool = True,
        alpha: Optional[RawData] = None,
    ) -> bool:
        """Display raw RGB/RGBA pixels. Returns False if abandoned."""
        ticket = self.begin_load()
        try:
            buffer = load_from_raw(data, width, height, has_alpha=has_alpha, alpha=alpha)
            surface = to_surface(buffer, self.config.max_surface_pixels)
        except ImagePanelError as e:
            self.abandon_load(ticket, e)
            return False
        except Exception as e:
            self.abandon_load(ticket, e)
            raise
        return self.finish_load(ticket, buffer, surface)

    def load_buffer(self, buffer: ImageBuffer) -> bool:
        """Display an already decoded buffer. Returns False if abandoned."""
        ticket = self.begin_load()
        try:
            surface = to_surface(buffer, self.config.max_surface_pixels)
        except ImagePanelError as e:
            self.abandon_load(ticket, e)
            return False
        except Exception as e:
            self.abandon_load(ticket, e)
            raise
        return self.finish_load(ticket, buffer, surface)

    def _decode_path(self, path: PathLike) -> tuple[ImageBuffer, Surface]:
        buffer = load_from_path(path)
        return buffer, to_surface(buffer, self.config.max_surface_pixels)

    # ------------- viewport -------------

    def on_resize(self, width: int, height: int) -> None:
        """Track a new viewport size and refit according to the resize policy."""
        if width < 0 or height < 0:
            raise ValueError(f"viewport size must not be negative, got {width}x{height}")

        self._state.viewport_size = (int(width), int(height))

        policy = self.config.resize_policy
        refit = policy is ResizePolicy.ALWAYS or (
            policy is ResizePolicy.REFIT_IF_UNTOUCHED and not self._state.user_transformed
        )
        if refit and not self._state.is_panning:
            transform.fit_to_viewport(self._state)

        logger.debug(f"resize: {width}x{height}, refit={refit}, scale={self._state.scale:.4f}")
        self._request_repaint()

    def reset_view(self) -> None:
        """Refit the current image and redraw."""
        transform.fit_to_viewport(self._state)
        self._request_repaint()
        logger.debug("reset_view: refit to viewport")

    # ------------- input -------------

    def handle(self, event: InputEvent) -> bool:
        """Apply one input event. Returns True if it changed the view."""
        changed = self._controller.handle(event)
        if changed:
            self._request_repaint()
        return changed

    def on_wheel(self, delta: float) -> bool:
        return self.handle(InputEvent.wheel(delta))

    def on_pointer_down(self, x: float, y: float) -> bool:
        return self.handle(InputEvent.pointer_down(x, y))

    def on_pointer_move(self, x: float, y: float) -> bool:
        return self.handle(InputEvent.pointer_move(x, y))

    def on_pointer_up(self) -> bool:
        return self.handle(InputEvent.pointer_up())

    def on_secondary_click(self, x: float, y: float) -> Vec2:
        """Report the image pixel under viewport point (x, y)."""
        self.handle(InputEvent.secondary_click(x, y))
        return transform.view_to_image(self._state, x, y)

    # ------------- rendering -------------

    def paint(self) -> Optional[DrawCall]:
        """The draw call for the current state (None if nothing to draw)."""
        return self._renderer.render(
            self._state,
            self._surface,
            loading=self.is_loading,
            placeholder=self._placeholder,
        )

    def render_frame(self) -> Image.Image:
        """Compose the current draw call into a viewport-sized RGBA image."""
        return compose_frame(
            self.paint(),
            self._state.viewport_size,
            background=self.config.background_rgba,
            resample=self.config.resample_filter,
        )

    def _request_repaint(self) -> None:
        for handler in list(self._repaint_handlers):
            try:
                handler()
            except Exception:
                logger.exception("Error in repaint handler")
