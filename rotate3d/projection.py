"""
Forward (and inverse) projection of image corners through a 3x3 matrix.

The four corners are always kept in the canonical order UL, UR, BR, BL.
The perspective warp treats the four (input, output) pairs as an exact
polygon correspondence, so the order must never be permuted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

import numpy as np

from rotate3d.matrix import apply, homogeneous_divide, invert
from rotate3d.pixel_point import PixelPoint
from rotate3d.types import Matrix3, Pixels

logger = logging.getLogger(__name__)

CORNER_NAMES = ("UL", "UR", "BR", "BL")


@dataclass(frozen=True)
class CornerSet:
    """Four image corners in canonical order UL, UR, BR, BL."""

    ul: PixelPoint
    ur: PixelPoint
    br: PixelPoint
    bl: PixelPoint

    def __iter__(self) -> Iterator[PixelPoint]:
        return iter((self.ul, self.ur, self.br, self.bl))

    def __len__(self) -> int:
        return 4

    def as_array(self, dtype=np.float64) -> np.ndarray:
        """Return the corners as a 4x2 array in canonical order."""
        return np.array([[p.x, p.y] for p in self], dtype=dtype)

    @classmethod
    def from_points(cls, points) -> CornerSet:
        """Build from any 4 (x, y) pairs given in canonical order.

        Raises:
            ValueError: If there are not exactly 4 points.
        """
        points = [PixelPoint(float(x), float(y)) for x, y in points]
        if len(points) != 4:
            raise ValueError(f"A corner set needs exactly 4 points, got {len(points)}")
        return cls(*points)

    def map(self, fn) -> CornerSet:
        """Apply fn to every corner, preserving order."""
        return CornerSet(*(fn(p) for p in self))


def canonical_corners(width: Pixels, height: Pixels) -> CornerSet:
    """Return the input corners (0,0), (W-1,0), (W-1,H-1), (0,H-1)."""
    max_x = float(width - 1)
    max_y = float(height - 1)
    return CornerSet(
        ul=PixelPoint(0.0, 0.0),
        ur=PixelPoint(max_x, 0.0),
        br=PixelPoint(max_x, max_y),
        bl=PixelPoint(0.0, max_y),
    )


def forward_project(P: Matrix3, i: float, j: float) -> tuple[float, float]:
    """
    Project an input pixel (i, j) to the output plane.

    Raises:
        DegenerateProjection: If the homogeneous denominator is ~0.
    """
    return homogeneous_divide(apply(P, PixelPoint(i, j).homogeneous()))


def project_corners(P: Matrix3, corners: CornerSet) -> CornerSet:
    """Forward project every corner of a CornerSet, keeping canonical order."""
    projected = corners.map(lambda p: PixelPoint(*forward_project(P, p.x, p.y)))

    for name, src, dst in zip(CORNER_NAMES, corners, projected):
        logger.debug(f"  {name}: ({src.x:g}, {src.y:g}) -> ({dst.x:.4f}, {dst.y:.4f})")

    return projected


def inverse_project(P: Matrix3, u: float, v: float) -> tuple[float, float]:
    """
    Map an output pixel (u, v) back to the input image through P's inverse.

    Raises:
        SingularMatrix: If P cannot be inverted.
        DegenerateProjection: If (u, v) maps to a point at infinity.
    """
    Q = invert(P)
    return homogeneous_divide(apply(Q, PixelPoint(u, v).homogeneous()))
