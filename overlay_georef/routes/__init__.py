"""Routes authored over the overlay image."""

from overlay_georef.routes.route import Route
from overlay_georef.routes.route_document import (
    RouteDocument,
    RouteDocumentError,
    load_route_document,
    normalize_route,
    save_filename,
    to_route_document,
    validate_route_document,
)
from overlay_georef.routes.waypoint import Waypoint, next_waypoint_index

__all__ = [
    "Route",
    "RouteDocument",
    "RouteDocumentError",
    "Waypoint",
    "load_route_document",
    "next_waypoint_index",
    "normalize_route",
    "save_filename",
    "to_route_document",
    "validate_route_document",
]
