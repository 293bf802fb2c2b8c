"""
Virtual camera model: focal length and forward projection matrix.

The picture is painted on the Z=0 ground plane, rotated by R, and viewed by
a camera a distance f above the plane looking straight down along -Z. With
input pixel coordinates I = (i, j, 1) and output coordinates O = (u, v, 1):

    (x, y, f) = M T B I          (camera frame)
    A O = M T B I   =>   O = Aim T B I = P I

where
    B    converts input pixels to plane coordinates centred on the rotation
         pivot (y flipped: image rows grow downward, the plane frame is
         right-handed);
    T    is R with its third column replaced by (0, 0, -f). Since the plane
         point is (X, Y, 0) = (X, Y, 1) - (0, 0, 1), the third column of R
         never contributes and the -f term moves the plane to the camera
         height;
    M    is the camera orientation, the identity with M22 = -1;
    A    scales and offsets output coordinates. Its inverse is merged with
         M into a single matrix Aim.

P is deliberately not orthonormal: it carries the focal transform.
"""

import logging
import math

import numpy as np

from rotate3d.errors import InvalidParameter
from rotate3d.types import Matrix3, Pixels, PixelsFloat, Unitless

logger = logging.getLogger(__name__)

# 35 mm film frame (36 x 24 mm) normal-lens field of view, about 56.3 degrees.
# PEF_MAX scales it to just under 180.
REFERENCE_DFOV_DEG = math.degrees(math.atan(36.0 / 24.0))

PEF_MIN = 0.0
PEF_MAX = 3.19

# Narrowest field of view; pef == 0 (and anything that would go below) uses this
ZERO_PEF_DFOV_DEG = 0.01

# Fields of view at or above this stretch the far side of a tilted picture
# toward the horizon
WIDE_DFOV_WARN_DEG = 170.0


def validate_image_size(width: Pixels, height: Pixels) -> None:
    """
    Raises:
        InvalidParameter: If width or height is not a positive number.
    """
    for name, value in (("width", width), ("height", height)):
        if (
            isinstance(value, bool)
            or not isinstance(value, (int, float, np.integer, np.floating))
            or not math.isfinite(value)
            or value <= 0
        ):
            raise InvalidParameter(f"Image {name} must be a positive number of pixels, got {value!r}")


def validate_pef(pef: Unitless) -> None:
    """
    Raises:
        InvalidParameter: If pef is not a number in [0, 3.19].
    """
    try:
        value = float(pef)
    except (TypeError, ValueError):
        raise InvalidParameter(f"PEF={pef!r} IS NOT A NUMBER") from None
    if not math.isfinite(value) or value < PEF_MIN or value > PEF_MAX:
        raise InvalidParameter(f"PEF={pef} must be between {PEF_MIN:g} and {PEF_MAX:g}")


def zoom_scale(zoom: Unitless) -> Unitless:
    """
    Convert the zoom option to the uniform output scale factor.

    zoom >= 1 gives 1/zoom and zoom <= -1 gives -zoom, so positive zoom
    values shrink the projected footprint and negative values enlarge it.

    Raises:
        InvalidParameter: If -1 < zoom < 1 or zoom is not finite.
    """
    try:
        value = float(zoom)
    except (TypeError, ValueError):
        raise InvalidParameter(f"ZOOM={zoom!r} IS NOT A NUMBER") from None
    if not math.isfinite(value):
        raise InvalidParameter(f"ZOOM={zoom} IS NOT A NUMBER")
    if value >= 1.0:
        return Unitless(1.0 / value)
    if value <= -1.0:
        return Unitless(-value)
    raise InvalidParameter(f"ZOOM={zoom} must be greater than or equal to 1 or less than or equal to -1")


def focal_length(width: Pixels, height: Pixels, pef: Unitless = Unitless(1.0)) -> PixelsFloat:
    """
    Derive the virtual camera's focal length (its height above the plane).

    The diagonal field of view is the 35 mm reference scaled by pef. A pef
    of 0 is remapped to a tiny positive field of view (0.01 degrees) instead
    of being rejected, which approaches an orthographic view. Fields of view
    below that floor are raised to it.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        pef: Perspective exaggeration factor in [0, 3.19].

    Returns:
        Focal length in pixels.

    Raises:
        InvalidParameter: If the size or pef is invalid.
    """
    validate_image_size(width, height)
    validate_pef(pef)

    dfov = max(float(pef) * REFERENCE_DFOV_DEG, ZERO_PEF_DFOV_DEG)
    if dfov >= WIDE_DFOV_WARN_DEG:
        logger.warning(
            f"Field of view {dfov:.1f}° (pef={pef}) is close to 180°. "
            f"Tilted pictures may cross the horizon of the virtual camera."
        )

    diag = math.hypot(width, height)
    f = diag / (2.0 * math.tan(math.radians(dfov / 2.0)))

    logger.debug(f"dfov={dfov:.4f}°, diag={diag:.3f}px, focal={f:.6f}px")
    return PixelsFloat(f)


def input_offset_matrix(cx: PixelsFloat, cy: PixelsFloat) -> Matrix3:
    """Matrix B: input pixels to plane coordinates about the pivot (cx, cy)."""
    return np.array([
        [1.0, 0.0, -cx],
        [0.0, -1.0, cy],
        [0.0, 0.0, 1.0]
    ])


def camera_transform(R: Matrix3, f: PixelsFloat) -> Matrix3:
    """Matrix T: R with the third column set to (0, 0, -f)."""
    T = np.array(R, dtype=np.float64, copy=True)
    T[:, 2] = 0.0
    T[2, 2] = -f
    return T


def output_inverse_matrix(s: Unitless, ax: PixelsFloat, ay: PixelsFloat, f: PixelsFloat) -> Matrix3:
    """
    Matrix Aim: inverse output scale/offset merged with the camera reflection.

    Args:
        s: Uniform output scale (from zoom_scale).
        ax: Output x position of the pivot in pixels.
        ay: Output y position of the pivot in pixels.
        f: Focal length.
    """
    return np.array([
        [s, 0.0, -ax / f],
        [0.0, -s, -ay / f],
        [0.0, 0.0, -1.0 / f]
    ])


def build_projection(
    R: Matrix3,
    f: PixelsFloat,
    width: Pixels,
    height: Pixels,
    idx: PixelsFloat = PixelsFloat(0.0),
    idy: PixelsFloat = PixelsFloat(0.0),
    odx: PixelsFloat = PixelsFloat(0.0),
    ody: PixelsFloat = PixelsFloat(0.0),
    zoom: Unitless = Unitless(1.0),
) -> Matrix3:
    """
    Build the forward projection matrix P = Aim @ T @ B.

    Args:
        R: Composed rotation matrix.
        f: Focal length in pixels.
        width: Input image width in pixels.
        height: Input image height in pixels.
        idx: Rotation pivot offset from the input center (right positive).
        idy: Rotation pivot offset from the input center (down positive).
        odx: Where the pivot lands relative to the output center (right positive).
        ody: Where the pivot lands relative to the output center (down positive).
        zoom: Output zoom, |zoom| >= 1.

    Returns:
        P, mapping (i, j, 1) to unnormalised output coordinates.

    Raises:
        InvalidParameter: If zoom or the image size is invalid.
        ValueError: If f is zero or not finite.
    """
    validate_image_size(width, height)
    s = zoom_scale(zoom)
    if not math.isfinite(f) or f == 0.0:
        raise ValueError(f"Focal length must be finite and non-zero, got {f}")

    # Pivot relative to pixel (0, 0)
    cx = PixelsFloat((width - 1) / 2.0 + idx)
    cy = PixelsFloat((height - 1) / 2.0 + idy)

    B = input_offset_matrix(cx, cy)
    T = camera_transform(R, f)
    Aim = output_inverse_matrix(s, PixelsFloat(cx + odx), PixelsFloat(cy + ody), f)

    P = Aim @ (T @ B)
    logger.debug(f"Projection matrix P:\n{P}")
    return P
