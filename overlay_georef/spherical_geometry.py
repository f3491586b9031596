"""
Spherical Earth helpers: haversine distance and Web-Mercator ground resolution.

Two Earth radii are used on purpose. Great-circle distances use the mean radius
(6,371,000 m); the flat-Earth meter/degree conversion used by the coordinate
transform uses the equatorial radius (6,378,137 m), matching the Web-Mercator
tile grid.

None of these functions raise on bad input. Non-finite input yields non-finite
output, and callers turn that into a typed failure.
"""

import math

import numpy as np

from overlay_georef.geo_point import GeoPoint
from overlay_georef.reference_frame import RectBounds
from overlay_georef.types import Degrees, Meters

EARTH_RADIUS_M = 6_371_000.0
EARTH_EQUATORIAL_RADIUS_M = 6_378_137.0
WEB_MERCATOR_RESOLUTION_M = 156543.03392


def haversine_distance(a: GeoPoint, b: GeoPoint) -> Meters:
    """
    Great-circle distance between two points using the Haversine formula.

    Args:
        a: First point (decimal degrees)
        b: Second point (decimal degrees)

    Returns:
        Distance in meters
    """
    if not (a.is_finite() and b.is_finite()):
        return Meters(math.nan)

    lat1_rad = math.radians(a.lat)
    lat2_rad = math.radians(b.lat)
    delta_lat = math.radians(b.lat - a.lat)
    delta_lon = math.radians(b.lng - a.lng)

    h = math.sin(delta_lat / 2) ** 2 + \
        math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    # Rounding can push h a hair above 1 for antipodal points
    h = min(max(h, 0.0), 1.0)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return Meters(EARTH_RADIUS_M * c)


def haversine_distance_array(lat1, lng1, lat2, lng2) -> np.ndarray:
    """
    Vectorized haversine distance. Arguments broadcast like numpy arrays.

    Returns:
        Array of distances in meters
    """
    lat1_rad = np.radians(lat1)
    lat2_rad = np.radians(lat2)
    delta_lat = np.radians(np.subtract(lat2, lat1))
    delta_lon = np.radians(np.subtract(lng2, lng1))

    h = np.sin(delta_lat / 2) ** 2 + \
        np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(delta_lon / 2) ** 2
    h = np.clip(h, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(h), np.sqrt(1 - h))

    return EARTH_RADIUS_M * c


def meters_per_pixel(lat: Degrees, zoom_level: int) -> Meters:
    """
    Web-Mercator ground resolution of one tile pixel.

    Args:
        lat: Latitude in degrees
        zoom_level: Tile zoom level

    Returns:
        Meters per pixel; 0 at the poles, NaN for non-finite latitude
    """
    if not math.isfinite(lat):
        return Meters(math.nan)
    return Meters(WEB_MERCATOR_RESOLUTION_M * math.cos(math.radians(lat)) / 2 ** zoom_level)


def meters_to_degrees(east_m: Meters, north_m: Meters, ref_lat: Degrees) -> tuple[Degrees, Degrees]:
    """
    Flat-Earth conversion of a metric offset to a (lat, lng) degree offset.

    Args:
        east_m: Offset toward east in meters
        north_m: Offset toward north in meters
        ref_lat: Latitude the offset is taken around

    Returns:
        Tuple of (delta_lat, delta_lng) in degrees
    """
    delta_lat = north_m / EARTH_EQUATORIAL_RADIUS_M * (180 / math.pi)
    delta_lng = east_m / (EARTH_EQUATORIAL_RADIUS_M * math.cos(math.radians(ref_lat))) * (180 / math.pi)
    return Degrees(delta_lat), Degrees(delta_lng)


def bounds_extent(bounds: RectBounds) -> tuple[Meters, Meters]:
    """
    Ground size of a displayed rectangle, measured through its center.

    Returns:
        Tuple of (width_m, height_m)
    """
    center = bounds.center
    width = haversine_distance(GeoPoint(center.lat, bounds.west), GeoPoint(center.lat, bounds.east))
    height = haversine_distance(GeoPoint(bounds.north, center.lng), GeoPoint(bounds.south, center.lng))
    return width, height
