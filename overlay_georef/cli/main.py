"""Main Typer CLI application for overlay georeferencing."""

import logging

import typer

app = typer.Typer(
    help="Align image overlays to the map, convert coordinates and optimize routes",
    no_args_is_help=True,
)

route_app = typer.Typer(help="Route commands")
transform_app = typer.Typer(help="Coordinate conversion commands")

app.add_typer(route_app, name="route")
app.add_typer(transform_app, name="transform")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(levelname)s - %(message)s',
        force=True,
    )


def _register_commands() -> None:
    """
    Import command modules to register commands with their respective apps.

    Commands use decorators like @route_app.command() which register
    themselves when the module is imported.
    """
    from overlay_georef.cli import calibrate, route, transform

    # Avoid "imported but unused" warnings by explicitly using the module
    _ = calibrate
    _ = route
    _ = transform


_register_commands()


if __name__ == "__main__":
    app()
