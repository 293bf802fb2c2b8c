"""Pixel coordinate representation for input (i, j) and output (u, v) points."""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class PixelPoint:
    """A point in image pixel coordinates.

    Coordinates are floats: projected corners rarely land on whole pixels.

    Attributes:
        x: Column (i on the input image, u on the output canvas).
        y: Row (j on the input image, v on the output canvas).
    """

    x: float
    y: float

    def __iter__(self):
        yield self.x
        yield self.y

    def homogeneous(self) -> np.ndarray:
        """Return (x, y, 1) for multiplication by a 3x3 matrix."""
        return np.array([self.x, self.y, 1.0])

    def translated(self, dx: float, dy: float) -> "PixelPoint":
        """Return this point shifted by (dx, dy)."""
        return PixelPoint(self.x + dx, self.y + dy)

    def scaled_about(self, origin: "PixelPoint", k: float) -> "PixelPoint":
        """Return this point scaled by k about origin."""
        return PixelPoint(origin.x + (self.x - origin.x) * k, origin.y + (self.y - origin.y) * k)
