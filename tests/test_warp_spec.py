#!/usr/bin/env python3
"""
Tests for WarpSpec construction, serialisation and the fill policy.

Run with: python -m pytest tests/test_warp_spec.py -v
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from rotate3d.auto_fit import FitMode
from rotate3d.errors import InvalidParameter
from rotate3d.pixel_point import PixelPoint
from rotate3d.projection import CornerSet, canonical_corners
from rotate3d.warp_spec import (
    CornerPair,
    FillPolicy,
    VirtualPixelMethod,
    WarpSpec,
    emit_warp_spec,
    parse_virtual_pixel,
)


@pytest.fixture
def identity_spec() -> WarpSpec:
    corners = canonical_corners(3, 2)
    return emit_warp_spec(corners, corners, (3, 2))


def test_pairs_are_in_canonical_order(identity_spec):
    sources = [pair.source for pair in identity_spec.pairs]
    assert sources == [PixelPoint(0, 0), PixelPoint(2, 0), PixelPoint(2, 1), PixelPoint(0, 1)]
    assert identity_spec.input_corners == canonical_corners(3, 2)
    assert identity_spec.output_corners == canonical_corners(3, 2)


def test_control_points_identity(identity_spec):
    assert identity_spec.to_control_points() == "0,0 0,0   2,0 2,0   2,1 2,1   0,1 0,1"


def test_control_points_fractional_and_negative():
    src = canonical_corners(2, 2)
    dst = CornerSet.from_points([(-0.5, 1e-12), (1.25, -0.0), (2.0000004, 1.5), (-3.1234567, 1)])
    spec = emit_warp_spec(src, dst, (4, 4))
    assert spec.to_control_points() == "0,0 -0.5,0   1,0 1.25,0   1,1 2,1.5   0,1 -3.123457,1"


def test_points_arrays_are_float32(identity_spec):
    src = identity_spec.input_points()
    dst = identity_spec.output_points()
    assert src.dtype == np.float32
    assert src.shape == (4, 2)
    np.testing.assert_array_equal(src, dst)


def test_canvas_values_are_floats():
    corners = canonical_corners(10, 10)
    spec = emit_warp_spec(corners, corners, (10, 10), canvas_offset=(1, 2))
    assert spec.canvas_size == (10.0, 10.0)
    assert spec.canvas_offset == (1.0, 2.0)
    assert spec.fit_mode is None


def test_warp_spec_requires_four_pairs():
    pair = CornerPair(PixelPoint(0, 0), PixelPoint(0, 0))
    with pytest.raises(ValueError, match="exactly 4"):
        WarpSpec(pairs=(pair, pair, pair), canvas_size=(1.0, 1.0))


def test_warp_spec_is_immutable(identity_spec):
    with pytest.raises(AttributeError):
        identity_spec.canvas_size = (5.0, 5.0)


def test_to_dict():
    corners = canonical_corners(3, 2)
    fill = FillPolicy(background="white", sky="skyblue", virtual_pixel="tile")
    spec = emit_warp_spec(corners, corners, (3, 2), fill=fill, fit_mode=FitMode.CENTER)
    data = spec.to_dict()

    assert data["pairs"][2] == {"input": [2.0, 1.0], "output": [2.0, 1.0]}
    assert data["canvas_size"] == [3.0, 2.0]
    assert data["canvas_offset"] == [0.0, 0.0]
    assert data["fit_mode"] == "c"
    assert data["fill"] == {"background": "white", "sky": "skyblue", "virtual_pixel": "tile"}


# ============================================================================
# Fill policy
# ============================================================================


def test_fill_policy_defaults():
    fill = FillPolicy()
    assert fill.background == "black"
    assert fill.sky == "black"
    assert fill.virtual_pixel is VirtualPixelMethod.BACKGROUND


def test_fill_policy_normalises_virtual_pixel():
    assert FillPolicy(virtual_pixel="mirror").virtual_pixel is VirtualPixelMethod.MIRROR


@pytest.mark.parametrize("value", [m.value for m in VirtualPixelMethod])
def test_parse_virtual_pixel_accepts_all_methods(value):
    assert parse_virtual_pixel(value).value == value


@pytest.mark.parametrize("value", ["clamp", "Edge", ""])
def test_parse_virtual_pixel_rejects_unknown(value):
    with pytest.raises(InvalidParameter, match="VP"):
        parse_virtual_pixel(value)
