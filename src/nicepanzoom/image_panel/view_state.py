# nicepanzoom/src/nicepanzoom/image_panel/view_state.py

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Optional, Tuple

Vec2 = Tuple[float, float]
Size = Tuple[int, int]


@dataclass
class ViewState:
    """Scale and pan state of one image panel.

    Pan amounts are in viewport pixels. `pan_delta` is the uncommitted drag
    translation and is only non-zero while a pan gesture is active
    (`pan_anchor` is not None).
    """

    image_size: Size = (0, 0)
    viewport_size: Size = (0, 0)
    scale: float = 1.0
    pan_offset: Vec2 = (0.0, 0.0)
    pan_delta: Vec2 = (0.0, 0.0)
    pan_anchor: Optional[Vec2] = None
    user_transformed: bool = False

    def __post_init__(self) -> None:
        # from_dict() may be fed JSON lists
        self.image_size = (int(self.image_size[0]), int(self.image_size[1]))
        self.viewport_size = (int(self.viewport_size[0]), int(self.viewport_size[1]))
        self.pan_offset = (float(self.pan_offset[0]), float(self.pan_offset[1]))
        self.pan_delta = (float(self.pan_delta[0]), float(self.pan_delta[1]))
        if self.pan_anchor is not None:
            self.pan_anchor = (float(self.pan_anchor[0]), float(self.pan_anchor[1]))

    @property
    def image_width(self) -> int:
        return self.image_size[0]

    @property
    def image_height(self) -> int:
        return self.image_size[1]

    @property
    def viewport_width(self) -> int:
        return self.viewport_size[0]

    @property
    def viewport_height(self) -> int:
        return self.viewport_size[1]

    @property
    def aspect_ratio(self) -> float:
        """Image width / height as a float, 0.0 when no image is set."""
        w, h = self.image_size
        if h <= 0:
            return 0.0
        return w / float(h)

    @property
    def has_image(self) -> bool:
        return self.image_size[0] > 0 and self.image_size[1] > 0

    @property
    def is_panning(self) -> bool:
        return self.pan_anchor is not None

    @property
    def total_pan(self) -> Vec2:
        """Committed offset plus the in-flight delta."""
        return (
            self.pan_offset[0] + self.pan_delta[0],
            self.pan_offset[1] + self.pan_delta[1],
        )

    def reset_transforms(self) -> None:
        """Back to identity: unit scale, no pan, no active gesture."""
        self.scale = 1.0
        self.pan_offset = (0.0, 0.0)
        self.pan_delta = (0.0, 0.0)
        self.pan_anchor = None
        self.user_transformed = False

    def copy(self) -> "ViewState":
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ViewState":
        return cls(**data)
