"""Calibration CLI command."""

from dataclasses import replace
from pathlib import Path

import typer
import yaml

from overlay_georef.cli.frame_io import save_frame
from overlay_georef.cli.main import app
from overlay_georef.config import OverlayConfig, get_default_config
from overlay_georef.control_points import ControlPointRegistry, ImagePointSet, match_points
from overlay_georef.geo_calibrator import GeoCalibrator
from overlay_georef.outcome import Failure
from overlay_georef.reference_frame import ImageDimensions
from overlay_georef.types import Pixels


@app.command("calibrate")
def calibrate_command(
    image_points: Path = typer.Option(..., help="JSON/YAML file of points digitized on the image"),
    control_points: Path = typer.Option(..., help="JSON/YAML file of surveyed control points"),
    width: int = typer.Option(..., help="Natural image width in pixels"),
    height: int = typer.Option(..., help="Natural image height in pixels"),
    config: Path | None = typer.Option(None, help="Overlay configuration YAML file"),
    zoom: int | None = typer.Option(None, help="Zoom level (default: from configuration)"),
    output: Path | None = typer.Option(None, help="Write the fitted frame to this file"),
) -> None:
    """
    Fit the overlay center and scale from matched control points.

    Image points and control points are joined on their (normalized) ids;
    at least two must match.

    Example:
        georef calibrate --image-points points.json --control-points gcps.yaml
            --width 726 --height 624 --output frame.yaml
    """
    try:
        overlay_config = OverlayConfig.from_yaml(str(config)) if config else get_default_config()
        registry = ControlPointRegistry.load(control_points)
        points = ImagePointSet.load(image_points)
    except FileNotFoundError as e:
        typer.echo(f"Error: File not found: {e.filename or e}", err=True)
        raise typer.Exit(1)
    except (KeyError, ValueError, yaml.YAMLError) as e:
        typer.echo(f"Error: Failed to load input: {e}", err=True)
        raise typer.Exit(1)

    matches = match_points(points, registry)
    typer.echo(f"Matched {matches.matched_count} of {len(points)} image points")
    if matches.unmatched_ids:
        typer.echo(f"Unmatched ids: {', '.join(matches.unmatched_ids)}")

    frame = overlay_config.initial_frame()
    if zoom is not None:
        frame = replace(frame, zoom_level=zoom)

    dims = ImageDimensions(Pixels(width), Pixels(height))
    result = GeoCalibrator(dims, overlay_config.calibration).calibrate(matches.pairs, frame)
    if isinstance(result, Failure):
        typer.echo(f"Error: Calibration failed: {result}", err=True)
        raise typer.Exit(1)

    center = result.frame.center
    typer.echo(f"Center: {center.lat:.7f}, {center.lng:.7f}")
    typer.echo(f"Scale:  {result.frame.scale:.6f} (zoom {result.frame.zoom_level})")
    typer.echo(f"RMS error: {result.rms_error:.2f} m over {result.pair_count} pairs")
    for pair, error in zip(matches.pairs, result.per_pair_errors):
        typer.echo(f"  {pair.id}: {error:.2f} m")

    if output is not None:
        save_frame(
            output,
            result.frame,
            total_squared_error=result.total_squared_error,
            rms_error=result.rms_error,
        )
        typer.echo(f"Frame written to {output}")
