"""
nicepanzoom: a pan/zoom image viewer for NiceGUI.

This package provides:
- ImagePanel: headless viewer core (loading, fit-to-viewport, pan/zoom, draw calls)
- ImagePanelWidget: NiceGUI surface driving an ImagePanel from mouse/wheel events
- Logging utilities for library and application use

For logging configuration in standalone scripts/demos:
    ```python
    from nicepanzoom.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```

When used as a library, logging is handled by the parent application's
configuration.
"""

import logging

from nicepanzoom.utils.logging import configure_logging, get_logger

from nicepanzoom.image_panel import (
    DecodeError,
    ImagePanel,
    ImagePanelConfig,
    SurfaceAllocationError,
)
from nicepanzoom.image_panel.widget import ImagePanelWidget

# NullHandler so logs don't reach the root logger until an application
# calls configure_logging().
_logger = logging.getLogger("nicepanzoom")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "DecodeError",
    "ImagePanel",
    "ImagePanelConfig",
    "ImagePanelWidget",
    "SurfaceAllocationError",
    "configure_logging",
    "get_logger",
]

__version__ = "0.1.0"
