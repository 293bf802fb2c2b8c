#!/usr/bin/env python3
"""
Tests for the rotate3d CLI commands (spec and render).

Run with: python -m pytest tests/test_cli.py -v
"""

import json
import os
import sys

import cv2
import numpy as np
import yaml

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from typer.testing import CliRunner

from rotate3d.cli import app

runner = CliRunner()


# ============================================================================
# spec
# ============================================================================


def test_spec_points_roll_180():
    result = runner.invoke(app, ["spec", "roll=180", "--width", "200", "--height", "100", "--format", "points"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "0,0 199,99   199,0 0,99   199,99 0,0   0,99 199,0"


def test_spec_json_default():
    result = runner.invoke(app, ["spec", "--width", "3", "--height", "2"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["canvas_size"] == [3.0, 2.0]
    assert data["pairs"][1] == {"input": [2.0, 0.0], "output": [2.0, 0.0]}
    assert data["fill"]["virtual_pixel"] == "background"


def test_spec_yaml_with_auto():
    result = runner.invoke(app, ["spec", "pan=30", "auto=out", "--width", "100", "--height", "100", "-f", "yaml"])
    assert result.exit_code == 0, result.output
    data = yaml.safe_load(result.output)
    assert data["fit_mode"] == "out"
    assert len(data["pairs"]) == 4


def test_spec_invalid_angle_exits_with_error():
    result = runner.invoke(app, ["spec", "pan=200", "--width", "100", "--height", "100"])
    assert result.exit_code == 1
    assert "PAN=200" in result.output


def test_spec_unknown_option_exits_with_error():
    result = runner.invoke(app, ["spec", "yaw=10", "--width", "100", "--height", "100"])
    assert result.exit_code == 1
    assert "NOT A VALID ARGUMENT" in result.output


def test_spec_invalid_width():
    result = runner.invoke(app, ["spec", "--width", "0", "--height", "100"])
    assert result.exit_code == 1


def test_spec_with_config_file(tmp_path):
    config_path = tmp_path / "rotate.yaml"
    config_path.write_text("rotate3d:\n  rotations:\n    - roll: 180\n")
    result = runner.invoke(
        app, ["spec", "--width", "200", "--height", "100", "--config", str(config_path), "--format", "points"]
    )
    assert result.exit_code == 0, result.output
    assert result.output.startswith("0,0 199,99")


def test_spec_missing_config_file(tmp_path):
    result = runner.invoke(
        app, ["spec", "--width", "10", "--height", "10", "--config", str(tmp_path / "missing.yaml")]
    )
    assert result.exit_code == 1
    assert "not found" in result.output


# ============================================================================
# render
# ============================================================================


def test_render_writes_output(tmp_path):
    infile = tmp_path / "in.png"
    outfile = tmp_path / "out.png"
    cv2.imwrite(str(infile), np.full((40, 60, 3), 200, dtype=np.uint8))

    result = runner.invoke(app, ["render", "tilt=20", "auto=c", str(infile), str(outfile)])
    assert result.exit_code == 0, result.output

    written = cv2.imread(str(outfile), cv2.IMREAD_UNCHANGED)
    assert written is not None
    assert written.shape == (40, 60, 3)


def test_render_transparent_writes_alpha(tmp_path):
    infile = tmp_path / "in.png"
    outfile = tmp_path / "out.png"
    cv2.imwrite(str(infile), np.full((20, 20, 3), 90, dtype=np.uint8))

    result = runner.invoke(app, ["render", "zoom=2", "vp=transparent", str(infile), str(outfile)])
    assert result.exit_code == 0, result.output
    assert cv2.imread(str(outfile), cv2.IMREAD_UNCHANGED).shape == (20, 20, 4)


def test_render_missing_input(tmp_path):
    result = runner.invoke(app, ["render", str(tmp_path / "nope.png"), str(tmp_path / "out.png")])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_render_requires_two_files(tmp_path):
    result = runner.invoke(app, ["render", "in.png"])
    assert result.exit_code == 1


def test_render_invalid_option(tmp_path):
    infile = tmp_path / "in.png"
    cv2.imwrite(str(infile), np.zeros((10, 10, 3), dtype=np.uint8))
    result = runner.invoke(app, ["render", "pef=5", str(infile), str(tmp_path / "out.png")])
    assert result.exit_code == 1
    assert not (tmp_path / "out.png").exists()
