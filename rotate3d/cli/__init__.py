"""CLI module for rotate3d.

Provides the `rotate3d` command-line interface for rendering 3-D rotated
views of an image and for printing the computed WarpSpec.
"""

from rotate3d.cli.main import app

__all__ = ["app"]
