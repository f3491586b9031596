"""Ground control point representation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from overlay_georef.geo_point import GeoPoint


@dataclass(frozen=True)
class ControlPoint:
    """A surveyed ground marker with a known geographic position.

    Attributes:
        id: Canonical identifier (e.g., "A-01").
        lat: Latitude in degrees.
        lng: Longitude in degrees.
        altitude: Elevation in meters, if surveyed.
        location: Free-text description of where the marker is.
    """

    id: str
    lat: float
    lng: float
    altitude: float | None = None
    location: str = ""

    @property
    def geo(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "lat": self.lat, "lng": self.lng}
        if self.altitude is not None:
            data["altitude"] = self.altitude
        if self.location:
            data["location"] = self.location
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any], point_id: str | None = None) -> ControlPoint:
        """Create a ControlPoint from a dictionary.

        Args:
            data: Dictionary with id, lat/latitude, lng/lon/longitude and
                optional altitude and location keys.
            point_id: Identifier to use instead of ``data["id"]``.

        Raises:
            KeyError: If id or a coordinate is missing.
            ValueError: If a coordinate is not numeric.
        """
        geo = GeoPoint.from_dict(data)
        altitude = data.get("altitude", data.get("elevation"))
        return cls(
            id=point_id if point_id is not None else str(data["id"]),
            lat=geo.lat,
            lng=geo.lng,
            altitude=float(altitude) if altitude is not None else None,
            location=str(data.get("location") or ""),
        )
