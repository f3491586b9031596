"""Image dimensions, geographic bounds and the overlay reference frame."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any

from overlay_georef.geo_point import GeoPoint
from overlay_georef.pixel_point import PixelPoint
from overlay_georef.types import Unitless, ZoomLevel

DEFAULT_CENTER = GeoPoint(lat=34.853667, lng=135.472041)
DEFAULT_ZOOM_LEVEL = ZoomLevel(15)
DEFAULT_SCALE = Unitless(0.8)


@dataclass(frozen=True)
class ImageDimensions:
    """Natural pixel size of the overlay image.

    Attributes:
        width: Width in pixels.
        height: Height in pixels.
    """

    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        """True when no usable image is loaded (either side is zero or negative)."""
        return self.width <= 0 or self.height <= 0

    @property
    def center(self) -> PixelPoint:
        return PixelPoint(self.width / 2, self.height / 2)

    def to_dict(self) -> dict[str, int]:
        return {"width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ImageDimensions:
        return cls(width=int(data["width"]), height=int(data["height"]))


@dataclass(frozen=True)
class RectBounds:
    """Axis-aligned geographic rectangle (the displayed image footprint).

    Attributes:
        north: Latitude of the top edge.
        south: Latitude of the bottom edge.
        east: Longitude of the right edge.
        west: Longitude of the left edge.
    """

    north: float
    south: float
    east: float
    west: float

    @property
    def is_degenerate(self) -> bool:
        """True when the rectangle has zero extent or a non-finite edge."""
        edges = (self.north, self.south, self.east, self.west)
        if not all(math.isfinite(edge) for edge in edges):
            return True
        return self.north == self.south or self.east == self.west

    @property
    def center(self) -> GeoPoint:
        return GeoPoint((self.north + self.south) / 2, (self.east + self.west) / 2)

    @property
    def north_west(self) -> GeoPoint:
        return GeoPoint(self.north, self.west)

    @property
    def north_east(self) -> GeoPoint:
        return GeoPoint(self.north, self.east)

    @property
    def south_east(self) -> GeoPoint:
        return GeoPoint(self.south, self.east)

    @property
    def south_west(self) -> GeoPoint:
        return GeoPoint(self.south, self.west)

    def to_dict(self) -> dict[str, float]:
        return {"north": self.north, "south": self.south, "east": self.east, "west": self.west}


@dataclass(frozen=True)
class ReferenceFrame:
    """Calibration state of the overlay.

    The image center pixel is pinned to ``center``; ``scale`` multiplies the
    Web-Mercator ground resolution at ``zoom_level`` to give meters per image
    pixel. Frames are immutable: calibration produces a new frame and the
    caller decides whether to install it.

    Attributes:
        center: Geographic position of the image center pixel.
        scale: Positive overlay scale factor.
        zoom_level: Web-Mercator zoom level used for the ground resolution.

    Raises:
        ValueError: If scale is not a positive finite number, the center is not
            finite, or the zoom level is not an integer.
    """

    center: GeoPoint
    scale: Unitless
    zoom_level: ZoomLevel

    def __post_init__(self) -> None:
        if not math.isfinite(self.scale) or self.scale <= 0:
            raise ValueError(f"scale must be a positive finite number, got {self.scale}")
        if not self.center.is_finite():
            raise ValueError(f"center must be finite, got {self.center}")
        if isinstance(self.zoom_level, bool) or not isinstance(self.zoom_level, int):
            raise ValueError(f"zoom_level must be an integer, got {self.zoom_level!r}")

    @classmethod
    def default(cls) -> ReferenceFrame:
        return cls(center=DEFAULT_CENTER, scale=DEFAULT_SCALE, zoom_level=DEFAULT_ZOOM_LEVEL)

    def with_center(self, center: GeoPoint) -> ReferenceFrame:
        return replace(self, center=center)

    def with_scale(self, scale: Unitless) -> ReferenceFrame:
        return replace(self, scale=scale)

    def to_dict(self) -> dict[str, Any]:
        return {
            "center": self.center.to_dict(),
            "scale": self.scale,
            "zoom_level": self.zoom_level,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReferenceFrame:
        """Create a frame from a dictionary as written by ``to_dict``.

        ``center`` and ``zoom_level`` fall back to the defaults when absent.

        Raises:
            KeyError: If scale is missing.
            ValueError: If any value is invalid.
        """
        center_data = data.get("center")
        center = GeoPoint.from_dict(center_data) if center_data else DEFAULT_CENTER
        return cls(
            center=center,
            scale=Unitless(float(data["scale"])),
            zoom_level=ZoomLevel(int(data.get("zoom_level", DEFAULT_ZOOM_LEVEL))),
        )
