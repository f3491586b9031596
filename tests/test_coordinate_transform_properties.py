#!/usr/bin/env python3
"""
Property-based tests for pixel <-> geo conversion using Hypothesis.

Properties Verified:
-------------------
1. Round Trip: geo_to_pixel(pixel_to_geo(p), image_bounds(frame)) == p
   while the bounds were derived from the same frame
2. Center Pinning: the image center always maps to the frame center
3. Orientation: pixels further right are further east, pixels further down are further south
"""

import unittest
import sys
import os

# Add parent directory to path to import modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from hypothesis import given, strategies as st, settings
from overlay_georef.coordinate_transform import geo_to_pixel, image_bounds, pixel_to_geo
from overlay_georef.geo_point import GeoPoint
from overlay_georef.pixel_point import PixelPoint
from overlay_georef.reference_frame import ImageDimensions, RectBounds, ReferenceFrame


dims_strategy = st.builds(
    ImageDimensions,
    st.integers(min_value=16, max_value=4000),
    st.integers(min_value=16, max_value=4000),
)

frame_strategy = st.builds(
    ReferenceFrame,
    center=st.builds(
        GeoPoint,
        st.floats(min_value=-60.0, max_value=60.0, allow_nan=False, allow_infinity=False),
        st.floats(min_value=-179.0, max_value=179.0, allow_nan=False, allow_infinity=False),
    ),
    scale=st.floats(min_value=0.1, max_value=5.0, allow_nan=False, allow_infinity=False),
    zoom_level=st.integers(min_value=10, max_value=18),
)

# Fractions of the image size; slightly outside [0, 1] is allowed
fraction_strategy = st.floats(min_value=-0.5, max_value=1.5, allow_nan=False, allow_infinity=False)


class TestCoordinateTransformProperties(unittest.TestCase):
    """Property-based tests for the two conversion paths."""

    @given(dims_strategy, frame_strategy, fraction_strategy, fraction_strategy)
    @settings(max_examples=200)
    def test_round_trip_with_fresh_bounds(self, dims, frame, fx, fy):
        """Property: geo_to_pixel inverts pixel_to_geo against bounds from the same frame."""
        pixel = PixelPoint(fx * dims.width, fy * dims.height)
        bounds = image_bounds(dims, frame)
        geo = pixel_to_geo(pixel, dims, frame)
        self.assertIsInstance(bounds, RectBounds)
        self.assertIsInstance(geo, GeoPoint)

        back = geo_to_pixel(geo, bounds, dims)

        self.assertIsInstance(back, PixelPoint)
        self.assertAlmostEqual(back.x, pixel.x, delta=1e-4)
        self.assertAlmostEqual(back.y, pixel.y, delta=1e-4)

    @given(dims_strategy, frame_strategy)
    @settings(max_examples=100)
    def test_center_pixel_is_frame_center(self, dims, frame):
        """Property: the image center pixel maps exactly to the frame center."""
        result = pixel_to_geo(PixelPoint(dims.width / 2, dims.height / 2), dims, frame)

        self.assertEqual(result, frame.center)

    @given(dims_strategy, frame_strategy, fraction_strategy, fraction_strategy)
    @settings(max_examples=100)
    def test_orientation(self, dims, frame, fx, fy):
        """Property: +x is east and +y is south."""
        pixel = PixelPoint(fx * dims.width, fy * dims.height)
        base = pixel_to_geo(pixel, dims, frame)
        right = pixel_to_geo(PixelPoint(pixel.x + 1, pixel.y), dims, frame)
        down = pixel_to_geo(PixelPoint(pixel.x, pixel.y + 1), dims, frame)

        self.assertGreater(right.lng, base.lng)
        self.assertLess(down.lat, base.lat)


if __name__ == '__main__':
    unittest.main()
