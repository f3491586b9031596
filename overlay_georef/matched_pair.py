"""Pixel/geo correspondence used as calibration input."""

from dataclasses import dataclass

from overlay_georef.geo_point import GeoPoint
from overlay_georef.pixel_point import PixelPoint


@dataclass(frozen=True)
class MatchedPair:
    """An image pixel known to correspond to a ground position.

    Attributes:
        id: Control point identifier the pair was joined on (diagnostics only).
        pixel: Digitized position on the image.
        geo: Surveyed position of the same feature.
    """

    id: str
    pixel: PixelPoint
    geo: GeoPoint
