"""Exceptions raised by the rotate3d core.

All errors derive from ValueError so callers that already guard numeric
input with ``except ValueError`` keep working.
"""


class Rotate3DError(ValueError):
    """Base class for every error raised while computing a warp."""


class InvalidParameter(Rotate3DError):
    """A configuration value is outside its allowed domain.

    Raised before any matrix arithmetic runs: angles outside [-180, 180],
    pef outside [0, 3.19], zoom with magnitude below 1, unknown auto-fit or
    virtual-pixel values, unknown options, non-positive image sizes.
    """


class SingularMatrix(Rotate3DError):
    """A matrix inversion was requested on a matrix with near-zero determinant."""


class DegenerateProjection(Rotate3DError):
    """A forward projection produced a (near-)zero homogeneous denominator."""
