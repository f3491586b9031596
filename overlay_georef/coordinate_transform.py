"""
Pixel <-> geographic conversion for the image overlay.

Two conversion paths exist and are deliberately not exact inverses of each
other:

* ``pixel_to_geo`` is analytic: it pins the image center to the frame center
  and scales pixel offsets by the frame's ground resolution, using a flat-Earth
  approximation around the center.
* ``geo_to_pixel`` / ``pixel_to_geo_in_bounds`` are bounds-relative: they
  interpolate linearly inside the rectangle the image currently occupies on the
  map. They agree with the analytic path only when the bounds were derived from
  the same frame (see ``image_bounds``); bounds cached across a frame change
  are stale.

All functions return ``Failure`` values instead of raising.
"""

from __future__ import annotations

import math

import numpy as np

from overlay_georef.geo_point import GeoPoint
from overlay_georef.outcome import Failure, FailureReason
from overlay_georef.pixel_point import PixelPoint
from overlay_georef.reference_frame import ImageDimensions, RectBounds, ReferenceFrame
from overlay_georef.spherical_geometry import (
    EARTH_EQUATORIAL_RADIUS_M,
    meters_per_pixel,
    meters_to_degrees,
)


def _check_dims(dims: ImageDimensions) -> Failure | None:
    if dims.is_empty:
        return Failure(FailureReason.NO_IMAGE, f"image dimensions {dims.width}x{dims.height}")
    return None


def _frame_resolution(frame: ReferenceFrame) -> float | Failure:
    """Meters on the ground per natural image pixel under ``frame``."""
    mpp = meters_per_pixel(frame.center.lat, frame.zoom_level)
    if not math.isfinite(mpp) or mpp <= 0:
        return Failure(
            FailureReason.NON_FINITE,
            f"no ground resolution at latitude {frame.center.lat}",
        )
    return frame.scale * mpp


def pixel_to_geo(
    pixel: PixelPoint, dims: ImageDimensions, frame: ReferenceFrame
) -> GeoPoint | Failure:
    """
    Project an image pixel to a geographic position under a reference frame.

    Args:
        pixel: Point in the natural pixel grid (may lie outside the image)
        dims: Natural image size
        frame: Calibration state

    Returns:
        GeoPoint, or Failure (NO_IMAGE, NON_FINITE)
    """
    failure = _check_dims(dims)
    if failure is not None:
        return failure
    resolution = _frame_resolution(frame)
    if isinstance(resolution, Failure):
        return resolution

    east_m = (pixel.x - dims.width / 2) * resolution
    # Pixel y grows downward
    north_m = -(pixel.y - dims.height / 2) * resolution
    delta_lat, delta_lng = meters_to_degrees(east_m, north_m, frame.center.lat)

    result = GeoPoint(frame.center.lat + delta_lat, frame.center.lng + delta_lng)
    if not result.is_finite():
        return Failure(FailureReason.NON_FINITE, f"pixel ({pixel.x}, {pixel.y}) projects to {result}")
    return result


def project_pixels(
    xs: np.ndarray, ys: np.ndarray, dims: ImageDimensions, frame: ReferenceFrame
) -> tuple[np.ndarray, np.ndarray] | Failure:
    """
    Vectorized ``pixel_to_geo`` for arrays of pixel coordinates.

    Returns:
        Tuple of (lats, lngs) arrays, or Failure (NO_IMAGE, NON_FINITE).
        Individual non-finite entries are left for the caller to check.
    """
    failure = _check_dims(dims)
    if failure is not None:
        return failure
    resolution = _frame_resolution(frame)
    if isinstance(resolution, Failure):
        return resolution

    east_m = (np.asarray(xs, dtype=float) - dims.width / 2) * resolution
    north_m = -(np.asarray(ys, dtype=float) - dims.height / 2) * resolution
    to_deg = 180 / math.pi
    lats = frame.center.lat + north_m / EARTH_EQUATORIAL_RADIUS_M * to_deg
    lngs = frame.center.lng + east_m / (
        EARTH_EQUATORIAL_RADIUS_M * math.cos(math.radians(frame.center.lat))
    ) * to_deg
    return lats, lngs


def image_bounds(dims: ImageDimensions, frame: ReferenceFrame) -> RectBounds | Failure:
    """
    Rectangle occupied by the whole image under ``frame``.

    Derived from ``pixel_to_geo`` of the top-left and bottom-right corners, so
    it is the correct input for ``geo_to_pixel`` while ``frame`` is current.
    """
    top_left = pixel_to_geo(PixelPoint(0, 0), dims, frame)
    if isinstance(top_left, Failure):
        return top_left
    bottom_right = pixel_to_geo(PixelPoint(dims.width, dims.height), dims, frame)
    if isinstance(bottom_right, Failure):
        return bottom_right
    return RectBounds(
        north=top_left.lat,
        south=bottom_right.lat,
        east=bottom_right.lng,
        west=top_left.lng,
    )


def _check_bounds(bounds: RectBounds, dims: ImageDimensions) -> Failure | None:
    failure = _check_dims(dims)
    if failure is not None:
        return failure
    if bounds.is_degenerate:
        return Failure(FailureReason.DEGENERATE_BOUNDS, f"bounds {bounds.to_dict()}")
    return None


def geo_to_pixel(geo: GeoPoint, bounds: RectBounds, dims: ImageDimensions) -> PixelPoint | Failure:
    """
    Locate a geographic position on the image by its place inside ``bounds``.

    Args:
        geo: Position to locate
        bounds: Rectangle the image currently occupies on the map
        dims: Natural image size

    Returns:
        PixelPoint (may lie outside the image), or Failure
        (NO_IMAGE, DEGENERATE_BOUNDS, NON_FINITE)
    """
    failure = _check_bounds(bounds, dims)
    if failure is not None:
        return failure

    x = (geo.lng - bounds.west) / (bounds.east - bounds.west) * dims.width
    y = (bounds.north - geo.lat) / (bounds.north - bounds.south) * dims.height
    if not (math.isfinite(x) and math.isfinite(y)):
        return Failure(FailureReason.NON_FINITE, f"{geo} has no pixel position")
    return PixelPoint(x, y)


def pixel_to_geo_in_bounds(
    pixel: PixelPoint, bounds: RectBounds, dims: ImageDimensions
) -> GeoPoint | Failure:
    """
    Bounds-relative forward projection, the counterpart of ``geo_to_pixel``.

    Used to place markers while the displayed bounds are being changed
    directly rather than through a frame.
    """
    failure = _check_bounds(bounds, dims)
    if failure is not None:
        return failure

    lat = bounds.north - (bounds.north - bounds.south) * (pixel.y / dims.height)
    lng = bounds.west + (bounds.east - bounds.west) * (pixel.x / dims.width)
    result = GeoPoint(lat, lng)
    if not result.is_finite():
        return Failure(FailureReason.NON_FINITE, f"pixel ({pixel.x}, {pixel.y}) projects to {result}")
    return result
