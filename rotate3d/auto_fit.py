"""
Auto-fit policies reconciling the projected footprint with the output canvas.

    out  the canvas becomes exactly the footprint's bounding box
    c    the bounding box is centred in a canvas the size of the input
    zc   the bounding box is scaled to fill the input-sized canvas along its
         larger dimension, then centred
    None corners are used as projected; the canvas keeps the input size

Bounding box extents follow the pixel-count convention: a box spanning
umin..umax covers umax - umin + 1 pixels.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from rotate3d.errors import InvalidParameter
from rotate3d.pixel_point import PixelPoint
from rotate3d.projection import CornerSet
from rotate3d.types import Pixels, PixelsFloat

logger = logging.getLogger(__name__)


class FitMode(str, Enum):
    """Auto-fit policy. Absence of a mode is represented by None."""

    OUT = "out"
    """Resize the canvas to the bounding box of the transformed image."""

    CENTER = "c"
    """Center the bounding box in an input-sized canvas."""

    ZOOM_CENTER = "zc"
    """Zoom the bounding box to fill an input-sized canvas, then center it."""


def parse_fit_mode(value: Union[str, FitMode, None]) -> Optional[FitMode]:
    """
    Parse an auto-fit value; None and empty strings mean "unset".

    Raises:
        InvalidParameter: If the value is not one of out, c, zc.
    """
    if value is None or value == "":
        return None
    try:
        return FitMode(value)
    except ValueError:
        valid = ", ".join(m.value for m in FitMode)
        raise InvalidParameter(f"AUTO={value} IS NOT A VALID VALUE. Must be one of: {valid}") from None


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box of projected corners."""

    umin: PixelsFloat
    umax: PixelsFloat
    vmin: PixelsFloat
    vmax: PixelsFloat

    @classmethod
    def from_corners(cls, corners: CornerSet) -> BoundingBox:
        us = [p.x for p in corners]
        vs = [p.y for p in corners]
        return cls(
            umin=PixelsFloat(min(us)),
            umax=PixelsFloat(max(us)),
            vmin=PixelsFloat(min(vs)),
            vmax=PixelsFloat(max(vs)),
        )

    @property
    def delu(self) -> PixelsFloat:
        """Width in pixels (inclusive of both ends)."""
        return PixelsFloat(self.umax - self.umin + 1.0)

    @property
    def delv(self) -> PixelsFloat:
        """Height in pixels (inclusive of both ends)."""
        return PixelsFloat(self.vmax - self.vmin + 1.0)

    @property
    def area(self) -> float:
        return self.delu * self.delv

    @property
    def center(self) -> tuple[float, float]:
        return ((self.umin + self.umax) / 2.0, (self.vmin + self.vmax) / 2.0)


@dataclass(frozen=True)
class FitResult:
    """Output of the auto-fit step.

    Attributes:
        corners: Output corners in canonical order, possibly adjusted.
        canvas_size: Output canvas (width, height) in pixels.
        canvas_offset: Output-space position of the canvas' top-left pixel.
    """

    corners: CornerSet
    canvas_size: tuple[float, float]
    canvas_offset: tuple[float, float] = (0.0, 0.0)


def resolve_fit(
    corners: CornerSet,
    width: Pixels,
    height: Pixels,
    mode: Union[FitMode, str, None] = None,
) -> FitResult:
    """
    Apply an auto-fit policy to the projected corners.

    Args:
        corners: Projected output corners (UL, UR, BR, BL).
        width: Input image width in pixels.
        height: Input image height in pixels.
        mode: FitMode (or its string value), or None for no fitting.

    Returns:
        FitResult with the final corners, canvas size and canvas offset.

    Raises:
        InvalidParameter: If mode is not a recognised value.
    """
    mode = parse_fit_mode(mode)
    bbox = BoundingBox.from_corners(corners)
    delu, delv = bbox.delu, bbox.delv

    logger.info(
        f"Footprint bounding box: u=[{bbox.umin:.2f}, {bbox.umax:.2f}], "
        f"v=[{bbox.vmin:.2f}, {bbox.vmax:.2f}] ({delu:.2f}x{delv:.2f})"
    )

    if mode is FitMode.OUT:
        return FitResult(
            corners=corners,
            canvas_size=(delu, delv),
            canvas_offset=(bbox.umin, bbox.vmin),
        )

    if mode is FitMode.CENTER:
        du = (width - delu) / 2.0 - bbox.umin
        dv = (height - delv) / 2.0 - bbox.vmin
        return FitResult(
            corners=corners.map(lambda p: p.translated(du, dv)),
            canvas_size=(float(width), float(height)),
        )

    if mode is FitMode.ZOOM_CENTER:
        k = width / delu if delu >= delv else height / delv
        offset_u = (width - delu * k) / 2.0
        offset_v = (height - delv * k) / 2.0
        logger.debug(f"Zoom-center scale {k:.6f}, offset ({offset_u:.3f}, {offset_v:.3f})")

        origin = PixelPoint(bbox.umin, bbox.vmin)
        shift_u, shift_v = offset_u - bbox.umin, offset_v - bbox.vmin
        return FitResult(
            corners=corners.map(lambda p: p.scaled_about(origin, k).translated(shift_u, shift_v)),
            canvas_size=(float(width), float(height)),
        )

    return FitResult(corners=corners, canvas_size=(float(width), float(height)))
