from __future__ import annotations

import sys

import numpy as np
from nicegui import ui

from nicepanzoom.image_panel import ImagePanelConfig
from nicepanzoom.image_panel.widget import ImagePanelWidget
from nicepanzoom.utils.logging import configure_logging


def create_demo_image(height: int = 300, width: int = 800) -> np.ndarray:
    """RGBA demo image: sine waves in red/green, a vertical alpha ramp."""
    x = np.linspace(0, 4 * np.pi, width)
    img = np.zeros((height, width, 4), dtype=np.uint8)
    for y in range(height):
        phase = 2 * np.pi * (y / height)
        img[y, :, 0] = (127.5 + 127.5 * np.sin(x + phase)).astype(np.uint8)
        img[y, :, 1] = (127.5 + 127.5 * np.cos(x - phase)).astype(np.uint8)
        img[y, :, 2] = 96
        img[y, :, 3] = int(255 * (0.25 + 0.75 * y / (height - 1)))
    return img


if __name__ in {"__main__", "__mp_main__"}:
    configure_logging(level="DEBUG")

    config = ImagePanelConfig(viewport_width=640, viewport_height=400, image_border_width=1)

    with ui.column().classes("w-full gap-2"):
        ui.label("ImagePanelWidget demo").classes("text-lg font-bold")
        ui.label("Drag to pan, wheel to zoom, right click to report the pixel.")

        widget = ImagePanelWidget(config=config)
        if len(sys.argv) > 1:
            widget.load_path(sys.argv[1])
        else:
            demo = create_demo_image()
            widget.load_raw(demo, demo.shape[1], demo.shape[0])

        with ui.row().classes("items-center gap-2"):
            ui.button("Reset view", on_click=widget.reset_view)
            ui.button("Small viewport", on_click=lambda: widget.resize(320, 200))
            ui.button("Large viewport", on_click=lambda: widget.resize(960, 600))

    ui.run()
