"""Render and spec CLI commands.

Rotation and camera options use the ``option=value`` form, in the order they
should be applied:

    rotate3d render pan=30 tilt=-20 auto=zc vp=tile input.png output.png
    rotate3d spec tilt=45 pef=1.5 --width 640 --height 480 --format json
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

import cv2
import typer
import yaml

from rotate3d.cli.main import app
from rotate3d.config import RotateConfig, get_default_config
from rotate3d.errors import Rotate3DError
from rotate3d.pipeline import compute_warp_spec
from rotate3d.types import Pixels
from rotate3d.warp import OpenCVPerspectiveWarp

logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    """Output format options."""

    JSON = "json"
    YAML = "yaml"
    POINTS = "points"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s - %(message)s'
    )


def _load_config(options: List[str], config_file: Optional[Path]) -> RotateConfig:
    """Build the config from an optional YAML file plus option=value tokens."""
    base = RotateConfig.from_yaml(str(config_file)) if config_file else get_default_config()
    return RotateConfig.from_option_args(options, base=base)


@app.command("render")
def render_command(
    arguments: List[str] = typer.Argument(
        ...,
        help="option=value settings (pan, tilt, roll, pef, idx, idy, odx, ody, zoom, "
             "bgcolor, skycolor, auto, vp) followed by INFILE and OUTFILE",
        metavar="[OPTION=VALUE]... INFILE OUTFILE",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML file with a 'rotate3d' section; option=value settings override it",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """
    Render a perspective view of INFILE rotated in 3-D and write OUTFILE.

    Example:
        rotate3d render pan=30 input.png output.png
        rotate3d render tilt=45 roll=10 auto=c skycolor=skyblue input.png output.png
    """
    _configure_logging(verbose)

    if len(arguments) < 2:
        typer.echo("Error: INFILE and OUTFILE are required", err=True)
        raise typer.Exit(1)
    *options, infile, outfile = arguments

    infile_path = Path(infile)
    if not infile_path.exists():
        typer.echo(f"Error: Image not found: {infile}", err=True)
        raise typer.Exit(1)

    try:
        config = _load_config(options, config_file)
    except (Rotate3DError, FileNotFoundError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    image = cv2.imread(str(infile_path), cv2.IMREAD_UNCHANGED)
    if image is None:
        typer.echo(f"Error: Could not read image: {infile}", err=True)
        raise typer.Exit(1)

    height, width = image.shape[:2]
    try:
        spec = compute_warp_spec(config, Pixels(width), Pixels(height))
        warped = OpenCVPerspectiveWarp().warp(image, spec)
    except Rotate3DError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not cv2.imwrite(str(outfile), warped):
        typer.echo(f"Error: Could not write image: {outfile}", err=True)
        raise typer.Exit(1)

    logger.info(f"Wrote {warped.shape[1]}x{warped.shape[0]} image to {outfile}")


@app.command("spec")
def spec_command(
    options: Optional[List[str]] = typer.Argument(
        None,
        help="option=value settings, in application order",
        metavar="[OPTION=VALUE]...",
    ),
    width: int = typer.Option(..., "--width", help="Input image width in pixels"),
    height: int = typer.Option(..., "--height", help="Input image height in pixels"),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML file with a 'rotate3d' section; option=value settings override it",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.JSON,
        "--format",
        "-f",
        help="Output format",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """
    Print the WarpSpec (corner correspondences, canvas, fill policy).

    Example:
        rotate3d spec pan=30 tilt=20 --width 640 --height 480
        rotate3d spec roll=180 --width 200 --height 100 --format points
    """
    _configure_logging(verbose)

    try:
        config = _load_config(options or [], config_file)
        spec = compute_warp_spec(config, Pixels(width), Pixels(height))
    except (Rotate3DError, FileNotFoundError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if output_format == OutputFormat.JSON:
        output = json.dumps(spec.to_dict(), indent=2)
    elif output_format == OutputFormat.YAML:
        output = yaml.safe_dump(spec.to_dict(), default_flow_style=False, sort_keys=False)
    else:  # POINTS
        output = spec.to_control_points()

    typer.echo(output)
