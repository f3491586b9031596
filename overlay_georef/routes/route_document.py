"""
Route JSON documents: legacy key normalization, load validation and save format.

Route files have been written by several generations of the editor, so the
waypoint array and the start/end references appear under different keys:

    waypoints: wayPoint | wayPoints | points
    start:     startPoint | start | startPointId | routeInfo.startPoint
    end:       endPoint | end | endPointId | routeInfo.endPoint

Everything is normalized into a ``Route`` on load and written back in the
current format on save:

    {
      "routeInfo": {"startPoint": "A-01", "endPoint": "B-02", "waypointCount": 2},
      "imageReference": "trail.png",
      "imageInfo": {"width": 726, "height": 624},
      "points": [{"type": "waypoint", "index": 1, "imageX": 10, "imageY": 20}, ...],
      "exportedAt": "2024-05-01T09:30:00.000Z"
    }
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from overlay_georef.control_points.registry import ControlPointRegistry
from overlay_georef.pixel_point import PixelPoint
from overlay_georef.reference_frame import ImageDimensions
from overlay_georef.routes.route import Route
from overlay_georef.routes.waypoint import Waypoint, round_half_up

logger = logging.getLogger(__name__)

WAYPOINT_KEYS = ("wayPoint", "wayPoints", "points")
START_KEYS = ("startPoint", "start", "startPointId")
END_KEYS = ("endPoint", "end", "endPointId")
WAYPOINT_COUNT_KEYS = ("wayPointCount", "waypointCount")

# Image size written when the caller doesn't know it
DEFAULT_IMAGE_INFO = ImageDimensions(width=726, height=624)


class RouteDocumentError(ValueError):
    """Raised when a route document can't be loaded."""


@dataclass(frozen=True)
class RouteDocument:
    """A loaded route plus what the file said about itself.

    Attributes:
        route: Normalized route.
        image_reference: Image file name recorded in the document, if any.
        warnings: Non-fatal validation messages.
    """

    route: Route
    image_reference: str | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)


def _route_info(data: dict[str, Any]) -> dict[str, Any]:
    info = data.get("routeInfo")
    return info if isinstance(info, dict) else {}


def _first_present(data: dict[str, Any], keys: Iterable[str], fallback: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return fallback


def _endpoint(data: dict[str, Any], keys: tuple[str, ...], info_key: str) -> str:
    value = _first_present(data, keys, _route_info(data).get(info_key))
    return str(value) if value is not None else ""


def raw_waypoints(data: dict[str, Any]) -> list[dict[str, Any]]:
    """The waypoint array under whichever legacy key the document uses."""
    for key in WAYPOINT_KEYS:
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, list):
            raise RouteDocumentError(f"'{key}' must be a list, got {type(value).__name__}")
        return value
    return []


def declared_waypoint_count(data: dict[str, Any]) -> int | None:
    value = _first_present(data, WAYPOINT_COUNT_KEYS, _route_info(data).get("waypointCount"))
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise RouteDocumentError(f"Invalid waypointCount {value!r}: {e}") from e


def normalize_route(data: dict[str, Any]) -> Route:
    """
    Build the canonical Route from any legacy document variant.

    Waypoints without an index get their array position + 1; pixel
    coordinates are rounded to integers as the editor stores them.

    Raises:
        RouteDocumentError: If the document is not a mapping or a waypoint
            lacks finite coordinates.
    """
    if not isinstance(data, dict):
        raise RouteDocumentError(f"Route document must be a mapping, got {type(data).__name__}")

    waypoints = []
    for position, item in enumerate(raw_waypoints(data)):
        try:
            waypoint = Waypoint.from_dict(item, position=position)
        except (KeyError, TypeError, ValueError) as e:
            raise RouteDocumentError(f"Waypoint {position + 1} is malformed: {e}") from e
        if not waypoint.pixel.is_finite():
            raise RouteDocumentError(f"Waypoint {position + 1} has non-finite coordinates")
        pixel = PixelPoint(round_half_up(waypoint.pixel.x), round_half_up(waypoint.pixel.y))
        waypoints.append(Waypoint(index=waypoint.index, pixel=pixel))

    return Route(
        start_id=_endpoint(data, START_KEYS, "startPoint"),
        end_id=_endpoint(data, END_KEYS, "endPoint"),
        waypoints=tuple(waypoints),
    )


def _check_document(
    data: dict[str, Any],
    control_points: ControlPointRegistry | None,
    loaded_routes: Iterable[Route],
    image_reference: str | None,
) -> list[tuple[bool, str]]:
    """Validation findings as (fatal, message) pairs."""
    findings: list[tuple[bool, str]] = []
    route = normalize_route(data)
    start, end = route.start_id, route.end_id

    if start and end and start == end:
        findings.append(
            (True, f'Start point "{start}" and end point "{end}" are the same; use different points.')
        )

    if start and end and any(loaded.key == route.key for loaded in loaded_routes):
        findings.append((True, f"Route {start} -> {end} is already loaded; duplicate skipped."))

    document_image = data.get("imageReference")
    if document_image and image_reference and document_image != image_reference:
        findings.append(
            (False, f'imageReference "{document_image}" does not match loaded image "{image_reference}".')
        )

    declared = declared_waypoint_count(data)
    actual = len(raw_waypoints(data))
    if declared is not None and declared != actual:
        findings.append(
            (False, f'waypointCount "{declared}" does not match actual waypoint count "{actual}".')
        )

    if control_points is not None and len(control_points) > 0:
        if start and start not in control_points:
            findings.append((False, f'startPoint "{start}" not found among control points.'))
        if end and end not in control_points:
            findings.append((False, f'endPoint "{end}" not found among control points.'))

    return findings


def validate_route_document(
    data: dict[str, Any],
    control_points: ControlPointRegistry | None = None,
    loaded_routes: Iterable[Route] = (),
    image_reference: str | None = None,
) -> list[str]:
    """
    Check a route document against the current session.

    Args:
        data: Parsed route document
        control_points: Known control points; start/end membership is only
            checked when this is non-empty
        loaded_routes: Routes already loaded, for duplicate detection
        image_reference: File name of the image currently loaded

    Returns:
        List of warning messages (empty when the document is clean)
    """
    return [message for _, message in _check_document(data, control_points, loaded_routes, image_reference)]


def load_route_document(
    data: dict[str, Any],
    control_points: ControlPointRegistry | None = None,
    loaded_routes: Iterable[Route] = (),
    image_reference: str | None = None,
) -> RouteDocument:
    """
    Normalize and validate a route document.

    Raises:
        RouteDocumentError: If start and end are the same point, the route is
            already loaded, or the document is malformed. Other findings are
            returned as warnings on the document.
    """
    findings = _check_document(data, control_points, list(loaded_routes), image_reference)
    fatal = [message for is_fatal, message in findings if is_fatal]
    if fatal:
        raise RouteDocumentError("\n".join(fatal))

    warnings = tuple(message for _, message in findings)
    for warning in warnings:
        logger.warning("Route document: %s", warning)

    return RouteDocument(
        route=normalize_route(data),
        image_reference=data.get("imageReference") or None,
        warnings=warnings,
    )


def to_route_document(
    route: Route,
    image_reference: str = "",
    dims: ImageDimensions | None = None,
    exported_at: datetime | None = None,
) -> dict[str, Any]:
    """Serialize a route in the current save format (waypoints in storage order)."""
    info = dims if dims is not None and not dims.is_empty else DEFAULT_IMAGE_INFO
    stamp = exported_at if exported_at is not None else datetime.now(timezone.utc)
    return {
        "routeInfo": {
            "startPoint": route.start_id,
            "endPoint": route.end_id,
            "waypointCount": len(route.waypoints),
        },
        "imageReference": image_reference,
        "imageInfo": info.to_dict(),
        "points": [waypoint.to_dict() for waypoint in route.waypoints],
        "exportedAt": stamp.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }


def save_filename(route: Route, image_reference: str | None = None) -> str:
    """File name for a saved route, e.g. ``trail_route_A-01_to_B-02.json``."""
    image_name = image_reference or "unknown"
    if image_name.lower().endswith(".png"):
        image_name = image_name[:-4]
    return f"{image_name}_route_{route.start_id or 'start'}_to_{route.end_id or 'end'}.json"
