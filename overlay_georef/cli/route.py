"""Route CLI commands."""

import json
from pathlib import Path

import typer
import yaml

from overlay_georef.cli.frame_io import load_frame, read_document
from overlay_georef.cli.main import route_app
from overlay_georef.control_points import ControlPointRegistry
from overlay_georef.outcome import Failure
from overlay_georef.reference_frame import ImageDimensions
from overlay_georef.route_optimizer import FrameProjector, RouteOptimizer
from overlay_georef.routes import (
    RouteDocumentError,
    load_route_document,
    save_filename,
    to_route_document,
)
from overlay_georef.types import Pixels


@route_app.command("optimize")
def optimize_command(
    route: Path = typer.Option(..., help="Route JSON file (any legacy layout)"),
    control_points: Path = typer.Option(..., help="JSON/YAML file of surveyed control points"),
    frame: Path = typer.Option(..., help="Frame file written by 'georef calibrate'"),
    width: int = typer.Option(..., help="Natural image width in pixels"),
    height: int = typer.Option(..., help="Natural image height in pixels"),
    image: str | None = typer.Option(None, help="File name of the loaded image, checked against the route"),
    output: Path | None = typer.Option(
        None, help="Write the optimized route here (a directory gets the standard file name)"
    ),
) -> None:
    """
    Reorder a route's waypoints by greedy nearest neighbour.

    Start and end stay fixed; waypoints are renumbered 1..N in the new order.
    The result is never longer than the route's current order.

    Example:
        georef route optimize --route trail_route_A-01_to_B-02.json
            --control-points gcps.yaml --frame frame.yaml --width 726 --height 624
    """
    try:
        registry = ControlPointRegistry.load(control_points)
        document = load_route_document(
            read_document(route), control_points=registry, image_reference=image
        )
        reference_frame = load_frame(frame)
    except FileNotFoundError as e:
        typer.echo(f"Error: File not found: {e.filename or e}", err=True)
        raise typer.Exit(1)
    except RouteDocumentError as e:
        typer.echo(f"Error: Invalid route: {e}", err=True)
        raise typer.Exit(1)
    except (KeyError, ValueError, yaml.YAMLError) as e:
        typer.echo(f"Error: Failed to load input: {e}", err=True)
        raise typer.Exit(1)

    for warning in document.warnings:
        typer.echo(f"Warning: {warning}", err=True)

    dims = ImageDimensions(Pixels(width), Pixels(height))
    optimizer = RouteOptimizer(FrameProjector(dims, reference_frame))
    result = optimizer.optimize_route(document.route, registry)
    if isinstance(result, Failure):
        typer.echo(f"Error: Optimization failed: {result}", err=True)
        raise typer.Exit(1)

    typer.echo(
        f"Route {result.route.start_id} -> {result.route.end_id}: "
        f"{len(result.waypoints)} waypoints"
    )
    typer.echo(f"Distance: {result.original_distance:.1f} m -> {result.optimized_distance:.1f} m")

    if output is not None:
        image_reference = image or document.image_reference or ""
        target = output / save_filename(result.route, image_reference) if output.is_dir() else output
        saved = to_route_document(result.route, image_reference=image_reference, dims=dims)
        target.write_text(json.dumps(saved, indent=2, ensure_ascii=False), encoding="utf-8")
        typer.echo(f"Route written to {target}")
