"""
Greedy nearest-neighbour reordering of route waypoints.

Start and end are fixed ground control points; only the intermediate
waypoints are reordered. From the start, the closest remaining waypoint is
visited next until none remain, then the route closes at the end point.

This is a heuristic, not an exact travelling-salesman solver: the greedy tour
can be far from the shortest one. The only guarantee is that the result is
never longer than the order it was given.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol, TypeVar

from overlay_georef.control_points.registry import ControlPointRegistry
from overlay_georef.coordinate_transform import pixel_to_geo, pixel_to_geo_in_bounds
from overlay_georef.geo_point import GeoPoint
from overlay_georef.outcome import Failure, FailureReason
from overlay_georef.pixel_point import PixelPoint
from overlay_georef.reference_frame import ImageDimensions, RectBounds, ReferenceFrame
from overlay_georef.routes.route import Route
from overlay_georef.routes.waypoint import Waypoint
from overlay_georef.spherical_geometry import haversine_distance
from overlay_georef.types import Meters

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _identity(item):
    return item


def total_distance(
    start: GeoPoint,
    end: GeoPoint,
    ordered: Sequence[T],
    key: Callable[[T], GeoPoint] | None = None,
) -> Meters:
    """
    Length of the path start -> ordered... -> end.

    Args:
        start: First point of the path
        end: Last point of the path
        ordered: Intermediate items in visiting order
        key: Maps an item to its GeoPoint (default: items are GeoPoints)

    Returns:
        Sum of consecutive haversine distances in meters
    """
    locate = key or _identity
    path = [start, *(locate(item) for item in ordered), end]
    return Meters(sum(haversine_distance(a, b) for a, b in zip(path, path[1:])))


def optimize_order(
    start: GeoPoint,
    end: GeoPoint,
    waypoints: Sequence[T],
    key: Callable[[T], GeoPoint] | None = None,
) -> list[T]:
    """
    Greedy nearest-neighbour order from ``start``, never longer than the input order.

    Ties go to the candidate that comes first in ``waypoints``. ``end`` is not
    part of the result. If the greedy tour is longer than the given order, the
    given order is returned unchanged.

    Args:
        start: Fixed start point
        end: Fixed end point
        waypoints: Items to reorder
        key: Maps an item to its GeoPoint (default: items are GeoPoints)

    Returns:
        New list with the same items in visiting order
    """
    if len(waypoints) <= 1:
        return list(waypoints)

    locate = key or _identity
    remaining = list(waypoints)
    ordered: list[T] = []
    current = start
    while remaining:
        best_idx = 0
        best_dist = haversine_distance(current, locate(remaining[0]))
        for idx in range(1, len(remaining)):
            dist = haversine_distance(current, locate(remaining[idx]))
            if dist < best_dist:
                best_idx, best_dist = idx, dist
        chosen = remaining.pop(best_idx)
        ordered.append(chosen)
        current = locate(chosen)

    if total_distance(start, end, ordered, key) > total_distance(start, end, waypoints, key):
        return list(waypoints)
    return ordered


class WaypointProjector(Protocol):
    """Maps image pixels to geographic positions."""

    def project(self, pixel: PixelPoint) -> GeoPoint | Failure:
        ...


@dataclass(frozen=True)
class FrameProjector:
    """Projects through a reference frame (analytic transform)."""

    dims: ImageDimensions
    frame: ReferenceFrame

    def project(self, pixel: PixelPoint) -> GeoPoint | Failure:
        return pixel_to_geo(pixel, self.dims, self.frame)


@dataclass(frozen=True)
class BoundsProjector:
    """Projects through the displayed image bounds."""

    bounds: RectBounds
    dims: ImageDimensions

    def project(self, pixel: PixelPoint) -> GeoPoint | Failure:
        return pixel_to_geo_in_bounds(pixel, self.bounds, self.dims)


@dataclass(frozen=True)
class RouteOptimization:
    """Result of optimizing a route.

    Attributes:
        route: Route with reordered waypoints, reindexed 1..N.
        original_distance: Path length in the route's index order (meters).
        optimized_distance: Path length in the new order (meters).
    """

    route: Route
    original_distance: float
    optimized_distance: float

    @property
    def waypoints(self) -> tuple[Waypoint, ...]:
        return self.route.waypoints

    @property
    def saved_distance(self) -> float:
        return self.original_distance - self.optimized_distance


class RouteOptimizer:
    """Reorders a route's waypoints using a projector to place them on the ground."""

    def __init__(self, projector: WaypointProjector):
        self.projector = projector

    def _endpoints(
        self, route: Route, control_points: ControlPointRegistry
    ) -> tuple[GeoPoint, GeoPoint] | Failure:
        start = control_points.geo(route.start_id) if route.start_id else None
        end = control_points.geo(route.end_id) if route.end_id else None
        missing = [
            point_id or "<unset>"
            for point_id, geo in ((route.start_id, start), (route.end_id, end))
            if geo is None
        ]
        if missing:
            logger.warning("Route control points not found: %s", ", ".join(missing))
            return Failure(
                FailureReason.MISSING_CONTROL_POINT,
                f"control point(s) not found: {', '.join(missing)}",
            )
        return start, end

    def _project_waypoints(
        self, waypoints: Sequence[Waypoint]
    ) -> list[tuple[Waypoint, GeoPoint]] | Failure:
        located = []
        for waypoint in waypoints:
            geo = self.projector.project(waypoint.pixel)
            if isinstance(geo, Failure):
                return geo
            located.append((waypoint, geo))
        return located

    def route_path(
        self, route: Route, control_points: ControlPointRegistry
    ) -> list[GeoPoint] | Failure:
        """Polyline start -> waypoints in index order -> end."""
        endpoints = self._endpoints(route, control_points)
        if isinstance(endpoints, Failure):
            return endpoints
        located = self._project_waypoints(route.ordered_waypoints())
        if isinstance(located, Failure):
            return located
        start, end = endpoints
        return [start, *(geo for _, geo in located), end]

    def optimize_route(
        self, route: Route, control_points: ControlPointRegistry
    ) -> RouteOptimization | Failure:
        """
        Reorder a route's waypoints and renumber them 1..N.

        The route's index order is the baseline; the result is never longer.

        Returns:
            RouteOptimization, or Failure (MISSING_CONTROL_POINT, or the
            projector's failure for any waypoint)
        """
        endpoints = self._endpoints(route, control_points)
        if isinstance(endpoints, Failure):
            return endpoints
        start, end = endpoints

        located = self._project_waypoints(route.ordered_waypoints())
        if isinstance(located, Failure):
            logger.warning("Cannot place route waypoints: %s", located)
            return located

        def locate(item: tuple[Waypoint, GeoPoint]) -> GeoPoint:
            return item[1]

        original = total_distance(start, end, located, locate)
        ordered = optimize_order(start, end, located, locate)
        optimized = total_distance(start, end, ordered, locate)

        waypoints = [waypoint.with_index(i) for i, (waypoint, _) in enumerate(ordered, start=1)]
        logger.info(
            "Optimized route %s -> %s (%d waypoints): %.1f m -> %.1f m",
            route.start_id, route.end_id, len(waypoints), original, optimized,
        )
        return RouteOptimization(
            route=route.with_waypoints(waypoints),
            original_distance=original,
            optimized_distance=optimized,
        )
