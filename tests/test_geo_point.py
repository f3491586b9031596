"""Unit tests for overlay_georef.geo_point."""

import math

import pytest

from overlay_georef.geo_point import GeoPoint


class TestGeoPoint:
    """Tests for GeoPoint frozen dataclass."""

    def test_frozen(self) -> None:
        point = GeoPoint(34.85, 135.47)

        with pytest.raises(AttributeError):
            point.lat = 0.0  # type: ignore[misc]

    def test_hashable(self) -> None:
        assert len({GeoPoint(1.0, 2.0), GeoPoint(1.0, 2.0), GeoPoint(2.0, 1.0)}) == 2

    @pytest.mark.parametrize(
        "point,expected",
        [
            (GeoPoint(34.85, 135.47), True),
            (GeoPoint(math.nan, 135.47), False),
            (GeoPoint(34.85, -math.inf), False),
        ],
        ids=["finite", "nan-lat", "inf-lng"],
    )
    def test_is_finite(self, point: GeoPoint, expected: bool) -> None:
        assert point.is_finite() is expected

    def test_to_dict(self) -> None:
        assert GeoPoint(34.85, 135.47).to_dict() == {"lat": 34.85, "lng": 135.47}

    @pytest.mark.parametrize(
        "data",
        [
            {"lat": 34.85, "lng": 135.47},
            {"latitude": 34.85, "longitude": 135.47},
            {"lat": "34.85", "lon": "135.47"},
        ],
        ids=["short-keys", "long-keys", "string-values"],
    )
    def test_from_dict_key_variants(self, data: dict) -> None:
        assert GeoPoint.from_dict(data) == GeoPoint(34.85, 135.47)

    def test_from_dict_missing_coordinate(self) -> None:
        with pytest.raises(KeyError):
            GeoPoint.from_dict({"lat": 34.85})

    def test_from_dict_non_numeric(self) -> None:
        with pytest.raises(ValueError):
            GeoPoint.from_dict({"lat": "north", "lng": 135.47})
