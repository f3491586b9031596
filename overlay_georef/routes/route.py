"""Route between two ground control points."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from overlay_georef.routes.waypoint import Waypoint


@dataclass(frozen=True)
class Route:
    """A chain from a start control point through waypoints to an end control point.

    Attributes:
        start_id: Identifier of the start ground control point.
        end_id: Identifier of the end ground control point.
        waypoints: Intermediate points, in storage order.
    """

    start_id: str
    end_id: str
    waypoints: tuple[Waypoint, ...] = ()

    @property
    def key(self) -> tuple[str, str]:
        return (self.start_id, self.end_id)

    def ordered_waypoints(self) -> list[Waypoint]:
        """Waypoints in visiting order (stable sort by index)."""
        return sorted(self.waypoints, key=lambda waypoint: waypoint.index)

    def with_waypoints(self, waypoints: Sequence[Waypoint]) -> Route:
        return replace(self, waypoints=tuple(waypoints))
