#!/usr/bin/env python3
"""
Tests for corner projection: canonical corner order, forward projection,
degenerate denominators and the inverse mapping.

Run with: python -m pytest tests/test_projection.py -v
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from rotate3d.errors import DegenerateProjection, SingularMatrix
from rotate3d.pixel_point import PixelPoint
from rotate3d.projection import (
    CornerSet,
    canonical_corners,
    forward_project,
    inverse_project,
    project_corners,
)


def test_canonical_corner_order():
    corners = canonical_corners(640, 480)
    assert list(corners) == [
        PixelPoint(0.0, 0.0),
        PixelPoint(639.0, 0.0),
        PixelPoint(639.0, 479.0),
        PixelPoint(0.0, 479.0),
    ]
    assert len(corners) == 4


def test_single_pixel_image_collapses_corners():
    corners = canonical_corners(1, 1)
    assert all(p == PixelPoint(0.0, 0.0) for p in corners)


def test_corner_set_as_array():
    corners = canonical_corners(3, 2)
    arr = corners.as_array(np.float32)
    assert arr.dtype == np.float32
    np.testing.assert_array_equal(arr, [[0, 0], [2, 0], [2, 1], [0, 1]])


def test_corner_set_from_points():
    corners = CornerSet.from_points([(0, 0), (1, 0), (1, 1), (0, 1)])
    assert corners.br == PixelPoint(1.0, 1.0)


def test_corner_set_from_points_requires_four():
    with pytest.raises(ValueError, match="exactly 4"):
        CornerSet.from_points([(0, 0), (1, 0), (1, 1)])


def test_forward_project_affine():
    P = np.array([
        [2.0, 0.0, 1.0],
        [0.0, 3.0, -2.0],
        [0.0, 0.0, 1.0]
    ])
    assert forward_project(P, 4.0, 5.0) == pytest.approx((9.0, 13.0))


def test_forward_project_divides_by_weight():
    P = np.array([
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, 0.0, 2.0]
    ])
    assert forward_project(P, 4.0, 6.0) == pytest.approx((2.0, 3.0))


def test_forward_project_degenerate():
    # Weight row (1, 0, -4) vanishes at i = 4
    P = np.array([
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [1.0, 0.0, -4.0]
    ])
    with pytest.raises(DegenerateProjection):
        forward_project(P, 4.0, 0.0)


def test_project_corners_preserves_order():
    P = np.array([
        [1.0, 0.0, 10.0],
        [0.0, 1.0, 20.0],
        [0.0, 0.0, 1.0]
    ])
    projected = project_corners(P, canonical_corners(50, 50))
    assert projected.ul == PixelPoint(10.0, 20.0)
    assert projected.ur == PixelPoint(59.0, 20.0)
    assert projected.br == PixelPoint(59.0, 69.0)
    assert projected.bl == PixelPoint(10.0, 69.0)


def test_project_corners_aborts_on_any_degenerate_corner():
    # Only BR (99, 99) hits the horizon
    P = np.array([
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [-0.5, -0.5, 99.0]
    ])
    with pytest.raises(DegenerateProjection):
        project_corners(P, canonical_corners(100, 100))


def test_inverse_project_recovers_input():
    P = np.array([
        [1.2, 0.1, 5.0],
        [-0.2, 0.9, 3.0],
        [0.001, 0.002, 1.0]
    ])
    u, v = forward_project(P, 30.0, 40.0)
    i, j = inverse_project(P, u, v)
    assert i == pytest.approx(30.0)
    assert j == pytest.approx(40.0)


def test_inverse_project_singular():
    P = np.array([
        [1.0, 2.0, 3.0],
        [2.0, 4.0, 6.0],
        [0.0, 0.0, 1.0]
    ])
    with pytest.raises(SingularMatrix):
        inverse_project(P, 1.0, 1.0)


def test_pixel_point_helpers():
    p = PixelPoint(3.0, 4.0)
    np.testing.assert_array_equal(p.homogeneous(), [3.0, 4.0, 1.0])
    assert tuple(p) == (3.0, 4.0)
    assert p.translated(1.0, -2.0) == PixelPoint(4.0, 2.0)
    assert p.scaled_about(PixelPoint(1.0, 1.0), 2.0) == PixelPoint(5.0, 7.0)
