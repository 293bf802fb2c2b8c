#!/usr/bin/env python3
"""
Tests for rotation composition: elementary pan/tilt/roll matrices, ordered
composition and angle validation.

Run with: python -m pytest tests/test_rotation.py -v
"""

import math
import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import rotate3d.rotation as rotation_module
from rotate3d.errors import InvalidParameter
from rotate3d.matrix import is_rotation_matrix
from rotate3d.rotation import (
    RotationAxis,
    RotationOp,
    compose_rotation,
    elementary_rotation,
    validate_angle,
)

TOLERANCE = 1e-12


# ============================================================================
# Elementary matrices
# ============================================================================


def test_pan_90():
    expected = np.array([
        [0.0, 0.0, 1.0],
        [0.0, 1.0, 0.0],
        [-1.0, 0.0, 0.0]
    ])
    np.testing.assert_allclose(elementary_rotation(RotationAxis.PAN, 90.0), expected, atol=TOLERANCE)


def test_tilt_90():
    expected = np.array([
        [1.0, 0.0, 0.0],
        [0.0, 0.0, 1.0],
        [0.0, -1.0, 0.0]
    ])
    np.testing.assert_allclose(elementary_rotation(RotationAxis.TILT, 90.0), expected, atol=TOLERANCE)


def test_roll_90():
    expected = np.array([
        [0.0, 1.0, 0.0],
        [-1.0, 0.0, 0.0],
        [0.0, 0.0, 1.0]
    ])
    np.testing.assert_allclose(elementary_rotation(RotationAxis.ROLL, 90.0), expected, atol=TOLERANCE)


def test_elementary_accepts_axis_string():
    np.testing.assert_allclose(
        elementary_rotation("roll", 30.0),
        elementary_rotation(RotationAxis.ROLL, 30.0),
    )


@pytest.mark.parametrize("axis", list(RotationAxis))
def test_zero_angle_is_identity(axis):
    np.testing.assert_allclose(elementary_rotation(axis, 0.0), np.eye(3), atol=TOLERANCE)


# ============================================================================
# Composition
# ============================================================================


def test_empty_sequence_is_identity():
    np.testing.assert_allclose(compose_rotation([]), np.eye(3))


def test_composition_premultiplies_in_sequence_order():
    R = compose_rotation([RotationOp.pan(30), RotationOp.tilt(20)])
    expected = elementary_rotation(RotationAxis.TILT, 20) @ elementary_rotation(RotationAxis.PAN, 30)
    np.testing.assert_allclose(R, expected, atol=TOLERANCE)


def test_composition_is_not_commutative():
    pan_then_tilt = compose_rotation([RotationOp.pan(30), RotationOp.tilt(20)])
    tilt_then_pan = compose_rotation([RotationOp.tilt(20), RotationOp.pan(30)])
    assert np.max(np.abs(pan_then_tilt - tilt_then_pan)) > 1e-6


def test_repeated_axis_accumulates():
    R = compose_rotation([RotationOp.pan(30), RotationOp.pan(30)])
    np.testing.assert_allclose(R, elementary_rotation(RotationAxis.PAN, 60), atol=TOLERANCE)


def test_interleaved_sequence_stays_orthonormal():
    ops = [
        RotationOp.pan(35), RotationOp.roll(-120), RotationOp.tilt(75),
        RotationOp.pan(-170), RotationOp.tilt(12.5), RotationOp.roll(180),
    ]
    R = compose_rotation(ops)
    assert is_rotation_matrix(R)
    assert np.linalg.det(R) == pytest.approx(1.0, abs=1e-9)


def test_composition_accepts_generator():
    R = compose_rotation(RotationOp.roll(a) for a in (10, 20))
    np.testing.assert_allclose(R, elementary_rotation(RotationAxis.ROLL, 30), atol=TOLERANCE)


# ============================================================================
# Validation
# ============================================================================


@pytest.mark.parametrize("angle", [180.0, -180.0, 0.0, 179.999])
def test_boundary_angles_accepted(angle):
    validate_angle(angle, "pan")
    compose_rotation([RotationOp.pan(angle)])


@pytest.mark.parametrize("angle", [200.0, -180.5, 360.0, math.nan, math.inf])
def test_out_of_range_angles_rejected(angle):
    with pytest.raises(InvalidParameter):
        compose_rotation([RotationOp.tilt(angle)])


def test_non_numeric_angle_rejected():
    with pytest.raises(InvalidParameter, match="NOT A NUMBER"):
        validate_angle("abc", "roll")


def test_validation_runs_before_any_matrix_is_built(monkeypatch):
    def _fail(*args, **kwargs):
        raise AssertionError("elementary_rotation must not run for invalid input")

    monkeypatch.setattr(rotation_module, "elementary_rotation", _fail)

    with pytest.raises(InvalidParameter):
        rotation_module.compose_rotation([RotationOp.pan(10), RotationOp.pan(200)])


def test_rotation_op_normalises_axis():
    op = RotationOp("tilt", 10.0)
    assert op.axis is RotationAxis.TILT


def test_rotation_op_rejects_unknown_axis():
    with pytest.raises(InvalidParameter, match="yaw"):
        RotationOp("yaw", 10.0)


def test_rotation_op_factories():
    assert RotationOp.pan(5) == RotationOp(RotationAxis.PAN, 5.0)
    assert RotationOp.tilt(5) == RotationOp(RotationAxis.TILT, 5.0)
    assert RotationOp.roll(5) == RotationOp(RotationAxis.ROLL, 5.0)
