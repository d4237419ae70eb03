"""Image Panel - pan/zoom image viewer with premultiplied-alpha surfaces."""

from .config import ImagePanelConfig, ResizePolicy
from .errors import DecodeError, ImagePanelError, SurfaceAllocationError
from .image_panel import ImagePanel, LoadPhase, LoadTicket
from .input_controller import InputController, InputEvent, InputKind, PanMode
from .pixel_source import ImageBuffer, Surface, load_from_path, load_from_raw, to_surface
from .renderer import DrawCall, Renderer, compose_frame
from .view_state import ViewState

__all__ = [
    "DecodeError",
    "DrawCall",
    "ImageBuffer",
    "ImagePanel",
    "ImagePanelConfig",
    "ImagePanelError",
    "InputController",
    "InputEvent",
    "InputKind",
    "LoadPhase",
    "LoadTicket",
    "PanMode",
    "Renderer",
    "ResizePolicy",
    "Surface",
    "SurfaceAllocationError",
    "ViewState",
    "compose_frame",
    "load_from_path",
    "load_from_raw",
    "to_surface",
]
