"""Main Typer CLI application for rotate3d."""

import typer

app = typer.Typer(
    help="Apply a 3-D pan/tilt/roll perspective rotation to an image",
    no_args_is_help=True,
)


def _register_commands() -> None:
    """
    Import command modules to register commands with the app.

    Commands use the @app.command() decorator, which registers them when
    the module is imported.
    """
    from rotate3d.cli import render

    # Avoid "imported but unused" warnings by explicitly using the module
    _ = render


_register_commands()


if __name__ == "__main__":
    app()
