"""Coordinate conversion CLI commands."""

from pathlib import Path

import typer
import yaml

from overlay_georef.cli.frame_io import load_frame
from overlay_georef.cli.main import transform_app
from overlay_georef.coordinate_transform import geo_to_pixel, image_bounds, pixel_to_geo
from overlay_georef.geo_point import GeoPoint
from overlay_georef.outcome import Failure
from overlay_georef.pixel_point import PixelPoint
from overlay_georef.reference_frame import ImageDimensions, ReferenceFrame
from overlay_georef.types import Pixels


def _frame_or_exit(frame: Path) -> ReferenceFrame:
    try:
        return load_frame(frame)
    except FileNotFoundError:
        typer.echo(f"Error: Frame file not found: {frame}", err=True)
        raise typer.Exit(1)
    except (KeyError, ValueError, yaml.YAMLError) as e:
        typer.echo(f"Error: Invalid frame file: {e}", err=True)
        raise typer.Exit(1)


@transform_app.command("pixel-to-geo")
def pixel_to_geo_command(
    x: float = typer.Option(..., help="Pixel x (column) in the natural image"),
    y: float = typer.Option(..., help="Pixel y (row) in the natural image"),
    frame: Path = typer.Option(..., help="Frame file written by 'georef calibrate'"),
    width: int = typer.Option(..., help="Natural image width in pixels"),
    height: int = typer.Option(..., help="Natural image height in pixels"),
) -> None:
    """
    Convert an image pixel to latitude/longitude.

    Example:
        georef transform pixel-to-geo --x 363 --y 312 --frame frame.yaml --width 726 --height 624
    """
    dims = ImageDimensions(Pixels(width), Pixels(height))
    result = pixel_to_geo(PixelPoint(x, y), dims, _frame_or_exit(frame))
    if isinstance(result, Failure):
        typer.echo(f"Error: {result}", err=True)
        raise typer.Exit(1)
    typer.echo(f"{result.lat:.7f}, {result.lng:.7f}")


@transform_app.command("geo-to-pixel")
def geo_to_pixel_command(
    lat: float = typer.Option(..., help="Latitude in degrees"),
    lng: float = typer.Option(..., help="Longitude in degrees"),
    frame: Path = typer.Option(..., help="Frame file written by 'georef calibrate'"),
    width: int = typer.Option(..., help="Natural image width in pixels"),
    height: int = typer.Option(..., help="Natural image height in pixels"),
) -> None:
    """
    Locate a latitude/longitude on the image, via the bounds the frame gives the image.

    Example:
        georef transform geo-to-pixel --lat 34.8537 --lng 135.4720 --frame frame.yaml
            --width 726 --height 624
    """
    dims = ImageDimensions(Pixels(width), Pixels(height))
    bounds = image_bounds(dims, _frame_or_exit(frame))
    if isinstance(bounds, Failure):
        typer.echo(f"Error: {bounds}", err=True)
        raise typer.Exit(1)
    result = geo_to_pixel(GeoPoint(lat, lng), bounds, dims)
    if isinstance(result, Failure):
        typer.echo(f"Error: {result}", err=True)
        raise typer.Exit(1)
    typer.echo(f"{result.x:.2f}, {result.y:.2f}")
