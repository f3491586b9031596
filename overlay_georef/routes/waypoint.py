"""Route waypoint representation."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any

from overlay_georef.pixel_point import PixelPoint


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class Waypoint:
    """An intermediate route point digitized on the image.

    Attributes:
        index: Visiting order tag; sparse values are allowed, only order matters.
        pixel: Position in the natural pixel grid.
    """

    index: int
    pixel: PixelPoint

    def with_index(self, index: int) -> Waypoint:
        return replace(self, index=index)

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the saved route format (integer pixels)."""
        return {
            "type": "waypoint",
            "index": self.index,
            "imageX": round_half_up(self.pixel.x),
            "imageY": round_half_up(self.pixel.y),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], position: int = 0) -> Waypoint:
        """Create a Waypoint from a route document entry.

        Args:
            data: Dictionary with imageX/imageY (or x/y) and optional index.
            position: Zero-based position in the document array, used as
                ``position + 1`` when no index is present.

        Raises:
            KeyError: If coordinates are missing.
            ValueError: If values are not numeric.
        """
        index = data.get("index")
        return cls(
            index=int(index) if index is not None else position + 1,
            pixel=PixelPoint.from_dict(data),
        )


def next_waypoint_index(waypoints: Iterable[Waypoint]) -> int:
    """Index to give a newly added waypoint: one past the current maximum, or 1."""
    return max((waypoint.index for waypoint in waypoints), default=0) + 1
