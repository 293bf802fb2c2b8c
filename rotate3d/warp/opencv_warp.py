"""
OpenCV implementation of the perspective warp capability.

The homography is recovered from the four corner pairs with
cv2.getPerspectiveTransform and applied with cv2.warpPerspective. Canvas
regions whose preimage lies behind the virtual camera (beyond the
perspective horizon) are painted with the sky colour; the remaining
uncovered regions follow the virtual-pixel method.

Virtual-pixel methods map onto OpenCV border modes:

    background   BORDER_CONSTANT with the background colour
    edge         BORDER_REPLICATE
    mirror       BORDER_REFLECT
    tile         BORDER_WRAP
    transparent  BORDER_CONSTANT, fully transparent (output gains alpha)
    none         same as transparent
    dither       BORDER_REPLICATE (approximation)
    random       BORDER_REFLECT_101 (approximation)
"""

import logging
import math

import cv2
import numpy as np

from rotate3d.matrix import invert
from rotate3d.warp.colors import parse_color
from rotate3d.warp.interface import WarpCapability
from rotate3d.warp_spec import VirtualPixelMethod, WarpSpec

logger = logging.getLogger(__name__)

BORDER_MODES = {
    VirtualPixelMethod.BACKGROUND: cv2.BORDER_CONSTANT,
    VirtualPixelMethod.EDGE: cv2.BORDER_REPLICATE,
    VirtualPixelMethod.MIRROR: cv2.BORDER_REFLECT,
    VirtualPixelMethod.TILE: cv2.BORDER_WRAP,
    VirtualPixelMethod.TRANSPARENT: cv2.BORDER_CONSTANT,
    VirtualPixelMethod.NONE: cv2.BORDER_CONSTANT,
    VirtualPixelMethod.DITHER: cv2.BORDER_REPLICATE,
    VirtualPixelMethod.RANDOM: cv2.BORDER_REFLECT_101,
}

_APPROXIMATED = (VirtualPixelMethod.DITHER, VirtualPixelMethod.RANDOM)
_TRANSPARENT = (VirtualPixelMethod.TRANSPARENT, VirtualPixelMethod.NONE)


def _canvas_dimensions(spec: WarpSpec) -> tuple[int, int]:
    """Integer canvas size, rounding fractional footprints up."""
    w, h = spec.canvas_size
    return max(1, math.ceil(w - 1e-6)), max(1, math.ceil(h - 1e-6))


def _with_alpha(image: np.ndarray) -> np.ndarray:
    """Return image as 4-channel BGRA."""
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)
    if image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2BGRA)
    return image


def _channel_scale(dtype: np.dtype) -> float:
    """Factor from 0-255 colour channels to the value range of dtype."""
    if np.issubdtype(dtype, np.integer):
        return np.iinfo(dtype).max / 255.0
    # Floating point images are in [0, 1]
    return 1.0 / 255.0


def _fill_value(bgra: tuple[int, int, int, int], image: np.ndarray):
    """Adapt a BGRA colour to the channel layout and dtype range of image."""
    k = _channel_scale(image.dtype)
    if np.issubdtype(image.dtype, np.integer):
        b, g, r, a = (int(round(c * k)) for c in bgra)
        luma = int(round(0.114 * b + 0.587 * g + 0.299 * r))
    else:
        b, g, r, a = (c * k for c in bgra)
        luma = 0.114 * b + 0.587 * g + 0.299 * r
    if image.ndim == 2:
        return luma
    channels = image.shape[2]
    if channels == 1:
        return (luma,)
    if channels == 3:
        return (b, g, r)
    return (b, g, r, a)


def sky_mask(homography: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Boolean mask of canvas pixels that see beyond the perspective horizon.

    The homography is normalised so that points of the source image have
    positive homogeneous weight; a canvas pixel whose inverse-mapped weight
    is not positive corresponds to a point behind the camera.

    Args:
        homography: 3x3 matrix mapping source pixels to canvas pixels.
        width: Canvas width.
        height: Canvas height.

    Returns:
        (height, width) boolean array, True where the sky colour applies.
    """
    Q = invert(homography)
    xs, ys = np.meshgrid(np.arange(width, dtype=np.float64), np.arange(height, dtype=np.float64))
    weight = Q[2, 0] * xs + Q[2, 1] * ys + Q[2, 2]
    return weight <= 0.0


class OpenCVPerspectiveWarp(WarpCapability):
    """Perspective warp backed by cv2.warpPerspective.

    Args:
        interpolation: OpenCV interpolation flag.
    """

    def __init__(self, interpolation: int = cv2.INTER_LINEAR):
        self.interpolation = interpolation

    def homography(self, spec: WarpSpec) -> np.ndarray:
        """
        Source-to-canvas homography for spec, with positive weight on the source.

        The canvas offset is subtracted from the output corners so canvas
        pixel (0, 0) is the spec's canvas_offset in output space.
        """
        src = spec.input_points()
        dst = spec.output_points() - np.array(spec.canvas_offset, dtype=np.float32)
        H = cv2.getPerspectiveTransform(src, dst).astype(np.float64)

        center = src.mean(axis=0)
        if (H[2, 0] * center[0] + H[2, 1] * center[1] + H[2, 2]) < 0:
            H = -H
        return H

    def warp(self, image: np.ndarray, spec: WarpSpec) -> np.ndarray:
        if image is None or image.size == 0:
            raise ValueError("Cannot warp an empty image")

        height, width = image.shape[:2]
        expected = spec.input_corners.br
        if (width - 1, height - 1) != (expected.x, expected.y):
            raise ValueError(
                f"Image size {width}x{height} does not match the warp spec "
                f"({expected.x + 1:g}x{expected.y + 1:g})"
            )

        method = spec.fill.virtual_pixel
        if method in _APPROXIMATED:
            logger.warning(
                f"Virtual-pixel method '{method.value}' is approximated by "
                f"{'edge replication' if method is VirtualPixelMethod.DITHER else 'reflection'}"
            )

        if method in _TRANSPARENT:
            image = _with_alpha(image)
            border_value = (0, 0, 0, 0)
        else:
            border_value = _fill_value(parse_color(spec.fill.background), image)

        out_w, out_h = _canvas_dimensions(spec)
        H = self.homography(spec)
        logger.debug(f"Canvas {out_w}x{out_h}, homography:\n{H}")

        warped = cv2.warpPerspective(
            image,
            H,
            (out_w, out_h),
            flags=self.interpolation,
            borderMode=BORDER_MODES[method],
            borderValue=border_value,
        )

        mask = sky_mask(H, out_w, out_h)
        if mask.any():
            sky = parse_color(spec.fill.sky)
            warped[mask] = _fill_value(sky, warped)
            logger.info(f"Filled {int(mask.sum())} sky pixels with '{spec.fill.sky}'")

        return warped
