"""
Georeferencing of image overlays.

Aligns a raster image (e.g. a hand-drawn trail map) with a geographic map from
matched ground control points, converts between image pixels and geographic
coordinates, and reorders route waypoints drawn on the image.

Example Usage:
    >>> from overlay_georef import (
    ...     GeoCalibrator, ImageDimensions, ReferenceFrame, pixel_to_geo, Failure
    ... )
    >>>
    >>> dims = ImageDimensions(width=726, height=624)
    >>> result = GeoCalibrator(dims).calibrate(pairs, ReferenceFrame.default())
    >>> if not isinstance(result, Failure):
    ...     geo = pixel_to_geo(PixelPoint(100, 200), dims, result.frame)
"""

from overlay_georef.coordinate_transform import (
    geo_to_pixel,
    image_bounds,
    pixel_to_geo,
    pixel_to_geo_in_bounds,
)
from overlay_georef.geo_calibrator import CalibrationResult, CalibrationSettings, GeoCalibrator
from overlay_georef.geo_point import GeoPoint
from overlay_georef.matched_pair import MatchedPair
from overlay_georef.outcome import Failure, FailureCategory, FailureReason
from overlay_georef.pixel_point import PixelPoint
from overlay_georef.reference_frame import ImageDimensions, RectBounds, ReferenceFrame
from overlay_georef.route_optimizer import (
    BoundsProjector,
    FrameProjector,
    RouteOptimization,
    RouteOptimizer,
    optimize_order,
    total_distance,
)
from overlay_georef.spherical_geometry import bounds_extent, haversine_distance, meters_per_pixel

__version__ = "0.1.0"

__all__ = [
    "BoundsProjector",
    "CalibrationResult",
    "CalibrationSettings",
    "Failure",
    "FailureCategory",
    "FailureReason",
    "FrameProjector",
    "GeoCalibrator",
    "GeoPoint",
    "ImageDimensions",
    "MatchedPair",
    "PixelPoint",
    "RectBounds",
    "ReferenceFrame",
    "RouteOptimization",
    "RouteOptimizer",
    "bounds_extent",
    "geo_to_pixel",
    "haversine_distance",
    "image_bounds",
    "meters_per_pixel",
    "optimize_order",
    "pixel_to_geo",
    "pixel_to_geo_in_bounds",
    "total_distance",
]
