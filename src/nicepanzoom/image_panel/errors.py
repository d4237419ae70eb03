# nicepanzoom/src/nicepanzoom/image_panel/errors.py
"""Errors raised while turning a source into a displayable image.

Both are recoverable: the panel abandons the load and keeps showing the
previous image.
"""

from __future__ import annotations


class ImagePanelError(Exception):
    """Base class for image panel load failures."""


class DecodeError(ImagePanelError):
    """The source could not be read or parsed into RGBA pixels."""


class SurfaceAllocationError(ImagePanelError):
    """A drawable surface could not be allocated at the requested size."""
