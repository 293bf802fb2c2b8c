"""
3x3 matrix kernel used by the rotation composer and the camera model.

Matrices are numpy float64 arrays of shape (3, 3), row-major. Points are
homogeneous vectors (x, y, w); a 2-D point (i, j) is represented as
(i, j, 1).

Inversion uses the adjoint method: the inverse is the transpose of the
matrix of cofactors divided by the determinant. The determinant is taken
from the same cofactors (first row dotted with its cofactors), so a
near-singular matrix is detected before any division happens.
"""

import logging

import numpy as np

from rotate3d.errors import DegenerateProjection, SingularMatrix
from rotate3d.types import Matrix3, Vector3

logger = logging.getLogger(__name__)

# Determinant below which a matrix is treated as singular
SINGULAR_EPSILON = 1e-9

# Homogeneous weight below which a projected point is at infinity
DEGENERATE_EPSILON = 1e-10

# Tolerance for the rotation orthonormality check
ROTATION_TOLERANCE = 1e-6


def _validate_matrix(M: np.ndarray, name: str = "matrix") -> np.ndarray:
    """Coerce to a float64 array and check it is a finite 3x3 matrix.

    Raises:
        ValueError: If the shape is not (3, 3) or any entry is NaN/Infinity.
    """
    M = np.asarray(M, dtype=np.float64)
    if M.shape != (3, 3):
        raise ValueError(f"{name} must be 3x3, got shape {M.shape}")
    if not np.all(np.isfinite(M)):
        raise ValueError(f"{name} contains NaN or Infinity values")
    return M


def identity() -> Matrix3:
    """Return a fresh 3x3 identity matrix."""
    return np.eye(3, dtype=np.float64)


def multiply(M: Matrix3, N: Matrix3) -> Matrix3:
    """Return the 3x3 product M x N."""
    M = _validate_matrix(M, "M")
    N = _validate_matrix(N, "N")
    return M @ N


def cofactors(M: Matrix3) -> Matrix3:
    """Return the matrix of cofactors of M."""
    M = _validate_matrix(M)
    (m00, m01, m02), (m10, m11, m12), (m20, m21, m22) = M

    return np.array([
        [m11 * m22 - m21 * m12, m20 * m12 - m10 * m22, m10 * m21 - m20 * m11],
        [m21 * m02 - m01 * m22, m00 * m22 - m20 * m02, m20 * m01 - m00 * m21],
        [m01 * m12 - m11 * m02, m10 * m02 - m00 * m12, m00 * m11 - m10 * m01],
    ], dtype=np.float64)


def determinant(M: Matrix3) -> float:
    """Return det(M) as the dot product of the first row with its cofactors."""
    M = _validate_matrix(M)
    return float(np.dot(M[0], cofactors(M)[0]))


def invert(M: Matrix3, eps: float = SINGULAR_EPSILON) -> Matrix3:
    """
    Invert a 3x3 matrix using the method of the adjoint.

    Args:
        M: Matrix to invert.
        eps: Smallest accepted absolute determinant.

    Returns:
        The inverse of M.

    Raises:
        SingularMatrix: If |det(M)| < eps.
    """
    M = _validate_matrix(M)
    C = cofactors(M)
    det = float(np.dot(M[0], C[0]))

    if abs(det) < eps:
        raise SingularMatrix(
            f"Matrix is singular (det={det:.2e}, threshold={eps:.0e}). Cannot compute inverse."
        )

    logger.debug(f"Inverting matrix with det={det:.6e}")
    return C.T / det


def apply(M: Matrix3, vec: Vector3) -> Vector3:
    """Multiply a homogeneous vector by M."""
    M = _validate_matrix(M)
    vec = np.asarray(vec, dtype=np.float64)
    if vec.shape != (3,):
        raise ValueError(f"Homogeneous vector must have 3 elements, got shape {vec.shape}")
    return M @ vec


def homogeneous_divide(vec: Vector3, eps: float = DEGENERATE_EPSILON) -> tuple[float, float]:
    """
    Convert a homogeneous vector (x, y, w) to the 2-D point (x/w, y/w).

    Raises:
        DegenerateProjection: If |w| < eps (point at infinity).
    """
    x, y, w = (float(c) for c in vec)
    if abs(w) < eps:
        raise DegenerateProjection(
            f"Projection yields invalid homogeneous coordinate (w={w:.2e}). "
            f"The point lies on the horizon of the virtual camera."
        )
    return x / w, y / w


def is_rotation_matrix(M: Matrix3, tol: float = ROTATION_TOLERANCE) -> bool:
    """Check that M is orthonormal (M @ M.T = I) with |det(M)| = 1 within tol."""
    M = _validate_matrix(M)
    if not np.allclose(M @ M.T, np.eye(3), atol=tol):
        return False
    return abs(abs(determinant(M)) - 1.0) <= tol
