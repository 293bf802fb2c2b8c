"""
End-to-end computation of a WarpSpec from a RotateConfig.

    config -> compose_rotation -> focal_length / build_projection
           -> project_corners -> resolve_fit -> emit_warp_spec

Everything here is a pure function of the configuration and the input
image size; invocations share no state and may run concurrently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from rotate3d.auto_fit import resolve_fit
from rotate3d.camera_model import build_projection, focal_length, validate_image_size
from rotate3d.config import RotateConfig
from rotate3d.matrix import invert
from rotate3d.projection import CornerSet, canonical_corners, inverse_project, project_corners
from rotate3d.rotation import compose_rotation
from rotate3d.types import Matrix3, Pixels, PixelsFloat
from rotate3d.warp_spec import WarpSpec, emit_warp_spec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectionResult:
    """Intermediate results of the forward projection.

    Attributes:
        rotation: Composed rotation matrix R.
        focal_length: Virtual camera focal length in pixels.
        projection: Forward projection matrix P.
        input_corners: Canonical input corners.
        projected_corners: Input corners projected through P.
    """

    rotation: Matrix3
    focal_length: PixelsFloat
    projection: Matrix3
    input_corners: CornerSet
    projected_corners: CornerSet

    def inverse(self) -> Matrix3:
        """Inverse projection matrix Q = P^-1 (output to input)."""
        return invert(self.projection)

    def to_input(self, u: float, v: float) -> tuple[float, float]:
        """Map an output pixel back to input pixel coordinates."""
        return inverse_project(self.projection, u, v)


def compute_projection(config: RotateConfig, width: Pixels, height: Pixels) -> ProjectionResult:
    """
    Compose the rotation, build P and forward project the input corners.

    Offsets and zoom superseded by the auto-fit mode are neutralised first.

    Raises:
        InvalidParameter: If the image size is invalid.
        DegenerateProjection: If a corner projects to infinity.
    """
    validate_image_size(width, height)
    effective = config.effective()

    R = compose_rotation(effective.rotations)
    f = focal_length(width, height, effective.pef)
    P = build_projection(
        R, f, width, height,
        idx=effective.idx,
        idy=effective.idy,
        odx=effective.odx,
        ody=effective.ody,
        zoom=effective.zoom,
    )

    corners = canonical_corners(width, height)
    projected = project_corners(P, corners)

    logger.info(f"Focal length: {f:.3f}px for {width}x{height} image (pef={effective.pef:g})")
    logger.debug(f"Rotation matrix R:\n{np.array2string(R, precision=6)}")

    return ProjectionResult(
        rotation=R,
        focal_length=f,
        projection=P,
        input_corners=corners,
        projected_corners=projected,
    )


def compute_warp_spec(config: RotateConfig, width: Pixels, height: Pixels) -> WarpSpec:
    """
    Compute the WarpSpec for an image of the given size.

    Args:
        config: Validated rotate configuration.
        width: Input image width in pixels.
        height: Input image height in pixels.

    Returns:
        Immutable WarpSpec for the external perspective warp.

    Raises:
        InvalidParameter: If the image size is invalid.
        DegenerateProjection: If a corner projects to infinity.
    """
    result = compute_projection(config, width, height)
    fit = resolve_fit(result.projected_corners, width, height, config.auto)

    spec = emit_warp_spec(
        input_corners=result.input_corners,
        output_corners=fit.corners,
        canvas_size=fit.canvas_size,
        fill=config.fill_policy(),
        canvas_offset=fit.canvas_offset,
        fit_mode=config.auto,
    )

    logger.info(
        f"Warp spec: canvas {spec.canvas_size[0]:.2f}x{spec.canvas_size[1]:.2f}, "
        f"auto={config.auto.value if config.auto else 'none'}, "
        f"vp={spec.fill.virtual_pixel.value}"
    )
    logger.info(f"  Control points: {spec.to_control_points()}")
    return spec
