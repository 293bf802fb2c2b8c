"""
Rotation composition for the image-bearing plane.

The picture lies on the Z=0 ground plane. Pan turns it about its vertical
centerline, tilt about its horizontal centerline and roll about the image
center. Operations are applied in the order the caller supplies them and
may repeat; each one pre-multiplies the accumulated rotation:

    R := R_op @ R        (starting from the identity)

so ``pan=30, tilt=20`` and ``tilt=20, pan=30`` give different results.

Sign conventions (right-handed, angles in degrees):
    - Positive pan turns the right side of the image away from the viewer.
    - Positive tilt turns the top of the image away from the viewer.
    - Positive roll turns the image clockwise.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

import numpy as np

from rotate3d.errors import InvalidParameter
from rotate3d.matrix import identity, is_rotation_matrix
from rotate3d.types import Degrees, Matrix3

logger = logging.getLogger(__name__)

ANGLE_MIN = -180.0
ANGLE_MAX = 180.0


class RotationAxis(str, Enum):
    """Axis a single rotation operation turns the picture plane about."""

    PAN = "pan"
    """Rotation about the image vertical centerline."""

    TILT = "tilt"
    """Rotation about the image horizontal centerline."""

    ROLL = "roll"
    """In-plane rotation about the image center."""


@dataclass(frozen=True)
class RotationOp:
    """A single pan, tilt or roll step.

    Attributes:
        axis: Axis to rotate about.
        angle: Rotation angle in degrees, [-180, 180].
    """

    axis: RotationAxis
    angle: Degrees

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "axis", RotationAxis(self.axis))
        except ValueError:
            raise InvalidParameter(
                f"Unknown rotation axis '{self.axis}'. Must be one of: pan, tilt, roll"
            ) from None

    @classmethod
    def pan(cls, angle: float) -> "RotationOp":
        return cls(RotationAxis.PAN, Degrees(float(angle)))

    @classmethod
    def tilt(cls, angle: float) -> "RotationOp":
        return cls(RotationAxis.TILT, Degrees(float(angle)))

    @classmethod
    def roll(cls, angle: float) -> "RotationOp":
        return cls(RotationAxis.ROLL, Degrees(float(angle)))


def validate_angle(angle: float, name: str = "angle") -> None:
    """
    Check that an angle is a finite number of degrees in [-180, 180].

    Raises:
        InvalidParameter: If the angle is not finite or out of range.
    """
    try:
        value = float(angle)
    except (TypeError, ValueError):
        raise InvalidParameter(f"{name.upper()}={angle!r} IS NOT A NUMBER") from None
    if not math.isfinite(value):
        raise InvalidParameter(f"{name.upper()}={angle} IS NOT A NUMBER")
    if value < ANGLE_MIN or value > ANGLE_MAX:
        raise InvalidParameter(
            f"{name.upper()}={angle} must be between {ANGLE_MIN:g} and {ANGLE_MAX:g} degrees"
        )


def elementary_rotation(axis: RotationAxis, angle: Degrees) -> Matrix3:
    """
    Build the 3x3 rotation matrix for one axis.

    Args:
        axis: Pan, tilt or roll.
        angle: Angle in degrees.

    Returns:
        The elementary rotation matrix.
    """
    axis = RotationAxis(axis)
    theta = math.radians(angle)
    c, s = math.cos(theta), math.sin(theta)

    if axis is RotationAxis.PAN:
        return np.array([
            [c, 0.0, s],
            [0.0, 1.0, 0.0],
            [-s, 0.0, c]
        ])
    if axis is RotationAxis.TILT:
        return np.array([
            [1.0, 0.0, 0.0],
            [0.0, c, s],
            [0.0, -s, c]
        ])
    return np.array([
        [c, s, 0.0],
        [-s, c, 0.0],
        [0.0, 0.0, 1.0]
    ])


def compose_rotation(ops: Iterable[RotationOp]) -> Matrix3:
    """
    Compose an ordered sequence of rotation operations into one matrix.

    Every angle is validated before any trigonometry runs, so an invalid
    operation anywhere in the sequence aborts the whole composition.

    Args:
        ops: Rotation operations in application order.

    Returns:
        The composed rotation matrix (identity for an empty sequence).

    Raises:
        InvalidParameter: If any angle is outside [-180, 180].
    """
    ops = tuple(ops)
    for op in ops:
        validate_angle(op.angle, RotationAxis(op.axis).value)

    R = identity()
    for op in ops:
        R = elementary_rotation(op.axis, op.angle) @ R
        logger.debug(f"Applied {RotationAxis(op.axis).value}={op.angle:g}, R=\n{R}")

    if not is_rotation_matrix(R):
        logger.warning(
            f"Composed rotation drifted from orthonormal (det={np.linalg.det(R):.9f}). "
            f"Check the rotation sequence."
        )

    return R
