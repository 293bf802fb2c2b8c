"""
Unit type annotations for numeric parameters.

These NewType aliases document the unit a value is expected in (degrees
for pan/tilt/roll, pixels for offsets and image sizes, unitless for pef and
zoom). They are erased at runtime and only help static analysis catch
mismatches such as passing radians where degrees are expected.

Usage Example:
    >>> from rotate3d.types import Pixels, PixelsFloat, Unitless
    >>>
    >>> def focal_length(width: Pixels, height: Pixels, pef: Unitless) -> PixelsFloat:
    ...     pass
"""

from typing import NewType

import numpy as np
import numpy.typing as npt

# Angular units
Degrees = NewType('Degrees', float)
"""Angle in degrees (pan, tilt, roll, field of view)"""

Radians = NewType('Radians', float)
"""Angle in radians (intermediate trigonometric calculations)"""

# Image coordinate units
Pixels = NewType('Pixels', int)
"""Image dimensions in pixels (width, height)"""

PixelsFloat = NewType('PixelsFloat', float)
"""Floating-point image coordinates in pixels (corners, offsets, focal length)"""

# Dimensionless quantities
Unitless = NewType('Unitless', float)
"""Dimensionless scalar (perspective exaggeration factor, zoom, scale)"""

# Array shapes
Matrix3 = npt.NDArray[np.float64]
"""3x3 float64 matrix, row-major"""

Vector3 = npt.NDArray[np.float64]
"""Homogeneous point (x, y, w)"""
