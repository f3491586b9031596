"""Geographic coordinate representation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

_LAT_KEYS = ("lat", "latitude")
_LNG_KEYS = ("lng", "lon", "longitude")


def _first_key(data: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    raise KeyError(f"Missing coordinate, expected one of: {', '.join(keys)}")


@dataclass(frozen=True)
class GeoPoint:
    """A WGS84 position in decimal degrees.

    Attributes:
        lat: Latitude in degrees, positive north.
        lng: Longitude in degrees, positive east.
    """

    lat: float
    lng: float

    def is_finite(self) -> bool:
        """Whether both components are finite numbers."""
        return math.isfinite(self.lat) and math.isfinite(self.lng)

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GeoPoint:
        """Create from a dictionary.

        Accepts ``lat``/``latitude`` for latitude and ``lng``/``lon``/``longitude``
        for longitude, since control point exports use both spellings.

        Raises:
            KeyError: If a coordinate is missing.
            ValueError: If a coordinate is not numeric.
        """
        return cls(
            lat=float(_first_key(data, _LAT_KEYS)),
            lng=float(_first_key(data, _LNG_KEYS)),
        )
