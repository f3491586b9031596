"""Pixel coordinate representation."""

import math
from dataclasses import dataclass
from typing import Any

from overlay_georef.types import PixelsFloat


@dataclass(frozen=True)
class PixelPoint:
    """Pixel coordinates in the natural (unscaled) pixel grid of an image.

    The origin is the top-left corner, x grows rightward and y grows downward.
    Values outside the image rectangle are legal.

    Attributes:
        x: Pixel x coordinate (column).
        y: Pixel y coordinate (row).
    """

    x: float
    y: float

    def distance_to(self, other: "PixelPoint") -> PixelsFloat:
        """Euclidean distance in pixels to another point."""
        return PixelsFloat(math.hypot(self.x - other.x, self.y - other.y))

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PixelPoint":
        """Create from a dictionary with x/y or imageX/imageY keys.

        Raises:
            KeyError: If neither key spelling is present.
        """
        if "imageX" in data or "imageY" in data:
            return cls(x=float(data["imageX"]), y=float(data["imageY"]))
        return cls(x=float(data["x"]), y=float(data["y"]))
