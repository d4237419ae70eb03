# nicepanzoom/src/nicepanzoom/image_panel/widget.py
"""NiceGUI surface for `ImagePanel`.

Browser mouse/wheel events on a ``ui.interactive_image`` are translated into
`InputEvent`s; every repaint pushes a freshly composed viewport-sized frame.
"""

from __future__ import annotations

import os
from typing import Optional, Union

from nicegui import events, ui

from nicepanzoom.utils.logging import get_logger
from .config import ImagePanelConfig
from .image_panel import ImagePanel
from .input_controller import PanMode
from .pixel_source import RawData

logger = get_logger(__name__)

SECONDARY_BUTTON = 2

# MouseEvent.button -> bit in MouseEvent.buttons
_BUTTON_MASKS = {0: 1, 1: 4, 2: 2}


class ImagePanelWidget:
    """Reusable NiceGUI pan/zoom image viewer.

    - Input: optional image path to load on construction.
    - Drag with the pan button to pan, wheel to zoom about the center,
      right click logs the image pixel under the cursor.
    """

    def __init__(
        self,
        source: Optional[Union[str, os.PathLike]] = None,
        *,
        parent=None,
        config: ImagePanelConfig | None = None,
    ) -> None:
        self.config = config if config is not None else ImagePanelConfig()
        self.panel = ImagePanel(self.config)

        container = parent if parent is not None else ui.element("div").classes("w-full")

        with container:
            self.interactive = (
                ui.interactive_image(
                    self.panel.render_frame(),
                    events=["mousedown", "mousemove", "mouseup"],
                )
                .classes("w-full")
                .style(self._style())
            )
            self.interactive.on_mouse(self._on_mouse)
            self.interactive.on("wheel", self._on_wheel)

        self.panel.on_repaint(self._update_image)

        if source is not None:
            self.panel.load_path(source)

    # ------------- public API -------------

    def load_path(self, path: Union[str, os.PathLike]) -> bool:
        return self.panel.load_path(path)

    async def load_path_async(self, path: Union[str, os.PathLike]) -> bool:
        return await self.panel.load_path_async(path)

    def load_raw(
        self,
        data: RawData,
        width: int,
        height: int,
        has_alpha: bool = True,
        alpha: Optional[RawData] = None,
    ) -> bool:
        return self.panel.load_raw(data, width, height, has_alpha=has_alpha, alpha=alpha)

    def resize(self, width: int, height: int) -> None:
        """Change the viewport (display) size."""
        self.panel.on_resize(width, height)

    def reset_view(self) -> None:
        self.panel.reset_view()

    # ------------- internals: rendering -------------

    def _style(self) -> str:
        vp_w, vp_h = self.panel.view_state.viewport_size
        return (
            f"aspect-ratio: {max(1, vp_w)} / {max(1, vp_h)}; "
            f"object-fit: contain; border: {self.config.image_border_width}px solid #666;"
        )

    def _update_image(self) -> None:
        self.interactive.set_source(self.panel.render_frame())
        self.interactive.style(self._style())

    # ------------- internals: events -------------

    def _pan_mask(self) -> int:
        return _BUTTON_MASKS.get(self.config.pan_button, 1)

    def _on_mouse(self, e: events.MouseEventArguments) -> None:
        x, y = float(e.image_x), float(e.image_y)

        if e.type == "mousedown":
            if e.button == self.config.pan_button:
                self.panel.on_pointer_down(x, y)
            elif e.button == SECONDARY_BUTTON:
                self.panel.on_secondary_click(x, y)
            return

        if e.type == "mousemove":
            if self.panel.pan_mode is PanMode.PANNING and not (e.buttons & self._pan_mask()):
                logger.debug("pan button released outside the image, ending pan")
                self.panel.on_pointer_up()
                return
            self.panel.on_pointer_move(x, y)
            return

        if e.type == "mouseup" and e.button == self.config.pan_button:
            self.panel.on_pointer_up()

    def _on_wheel(self, e: events.GenericEventArguments) -> None:
        args = e.args or {}
        dy = args.get("deltaY", 0)
        dx = args.get("deltaX", 0)

        # Shift+wheel scrolls horizontally in most browsers
        if not isinstance(dy, (int, float)):
            dy = 0
        if dy == 0 and isinstance(dx, (int, float)):
            dy = dx
        if dy == 0:
            return

        # Browser deltaY < 0 is a rotation away from the user -> zoom in
        self.panel.on_wheel(-dy)
