"""Perspective warp capability and its OpenCV implementation."""

from rotate3d.warp.colors import parse_color
from rotate3d.warp.interface import WarpCapability
from rotate3d.warp.opencv_warp import OpenCVPerspectiveWarp, sky_mask

__all__ = [
    "WarpCapability",
    "OpenCVPerspectiveWarp",
    "parse_color",
    "sky_mask",
]
