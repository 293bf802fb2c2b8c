"""
3-D Rotate: virtual camera perspective views of a flat image.

The image is treated as if painted on the Z=0 ground plane. The plane is
rotated by an ordered sequence of pan/tilt/roll operations and viewed by a
camera at height f looking straight down. The package computes the four
corner correspondences (a WarpSpec) that drive a perspective warp; pixel
resampling is delegated to a WarpCapability such as OpenCVPerspectiveWarp.

Example Usage:
    >>> from rotate3d import RotateConfig, RotationOp, compute_warp_spec
    >>>
    >>> config = RotateConfig(
    ...     rotations=(RotationOp.pan(30), RotationOp.tilt(20)),
    ...     pef=1.0,
    ...     auto='c',
    ... )
    >>> spec = compute_warp_spec(config, 640, 480)
    >>> spec.to_control_points()
    '0,0 ...'

Available Classes:
    Configuration:
        - RotateConfig: Validated parameters, from dict/YAML/option tokens
        - RotationOp, RotationAxis: Ordered pan/tilt/roll operations
        - FitMode: Auto-fit policy (out, c, zc)
        - VirtualPixelMethod, FillPolicy: Fill behaviour of the warp

    Results:
        - ProjectionResult: Rotation, focal length, projection matrix, corners
        - WarpSpec: Corner correspondences, canvas and fill policy

    Errors:
        - InvalidParameter, SingularMatrix, DegenerateProjection
"""

from rotate3d.auto_fit import BoundingBox, FitMode, FitResult, resolve_fit
from rotate3d.camera_model import build_projection, focal_length, zoom_scale
from rotate3d.config import RotateConfig, get_default_config
from rotate3d.errors import DegenerateProjection, InvalidParameter, Rotate3DError, SingularMatrix
from rotate3d.matrix import determinant, homogeneous_divide, invert, multiply
from rotate3d.pipeline import ProjectionResult, compute_projection, compute_warp_spec
from rotate3d.pixel_point import PixelPoint
from rotate3d.projection import (
    CornerSet,
    canonical_corners,
    forward_project,
    inverse_project,
    project_corners,
)
from rotate3d.rotation import RotationAxis, RotationOp, compose_rotation, elementary_rotation
from rotate3d.warp_spec import (
    CornerPair,
    FillPolicy,
    VirtualPixelMethod,
    WarpSpec,
    emit_warp_spec,
)

# Define public API
__all__ = [
    # Configuration
    'RotateConfig',
    'get_default_config',
    'RotationAxis',
    'RotationOp',
    'FitMode',
    'VirtualPixelMethod',
    'FillPolicy',

    # Matrix kernel
    'multiply',
    'invert',
    'determinant',
    'homogeneous_divide',

    # Pipeline stages
    'compose_rotation',
    'elementary_rotation',
    'focal_length',
    'zoom_scale',
    'build_projection',
    'canonical_corners',
    'forward_project',
    'inverse_project',
    'project_corners',
    'resolve_fit',
    'emit_warp_spec',
    'compute_projection',
    'compute_warp_spec',

    # Values
    'PixelPoint',
    'CornerSet',
    'BoundingBox',
    'FitResult',
    'CornerPair',
    'ProjectionResult',
    'WarpSpec',

    # Errors
    'Rotate3DError',
    'InvalidParameter',
    'SingularMatrix',
    'DegenerateProjection',
]

# Package metadata
__version__ = '0.1.0'
__description__ = 'Virtual camera 3-D rotation of flat images via perspective warp'
