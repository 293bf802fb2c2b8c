"""
Abstract interface for the perspective warp capability.

The core computes a WarpSpec; rendering pixels is delegated to an
implementation of WarpCapability. Implementations receive the source image
and the spec and return a new image of the spec's canvas size. They must not
reorder the corner pairs: the four pairs are an exact polygon
correspondence in the order UL, UR, BR, BL.
"""

from abc import ABC, abstractmethod

import numpy as np

from rotate3d.warp_spec import WarpSpec


class WarpCapability(ABC):
    """Renders a source image through a WarpSpec.

    Thread Safety:
        Implementations should be stateless across calls so that several
        images can be warped concurrently with one instance.
    """

    @abstractmethod
    def warp(self, image: np.ndarray, spec: WarpSpec) -> np.ndarray:
        """Apply the perspective warp described by spec to image.

        Args:
            image: Source image (H x W or H x W x C).
            spec: WarpSpec computed for this image's size.

        Returns:
            The warped image on the spec's output canvas.

        Raises:
            ValueError: If the image cannot be warped with this spec.
        """
        pass
