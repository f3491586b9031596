"""Unit tests for overlay_georef.control_points.registry."""

import json
from pathlib import Path

import pytest
import yaml

from overlay_georef.control_points import (
    ControlPoint,
    ControlPointRegistry,
    ImagePoint,
    ImagePointSet,
)
from overlay_georef.geo_point import GeoPoint
from overlay_georef.pixel_point import PixelPoint


class InMemoryFileSystem:
    """FileSystem test double backed by a dict."""

    def __init__(self, files: dict[str, str] | None = None):
        self.files = dict(files or {})

    def read_text(self, path: str | Path) -> str:
        try:
            return self.files[str(path)]
        except KeyError:
            raise FileNotFoundError(str(path)) from None

    def write_text(self, path: str | Path, content: str) -> None:
        self.files[str(path)] = content


REGISTRY_DATA = {
    "points": [
        {"id": "A-01", "lat": 34.8501, "lng": 135.4702, "altitude": 120.5, "location": "Trail head"},
        {"id": "b2", "latitude": 34.8555, "longitude": 135.4788},
    ]
}


class TestControlPoint:
    """Tests for ControlPoint."""

    def test_geo(self) -> None:
        point = ControlPoint(id="A-01", lat=34.85, lng=135.47)

        assert point.geo == GeoPoint(34.85, 135.47)

    def test_dict_round_trip(self) -> None:
        point = ControlPoint(id="A-01", lat=34.85, lng=135.47, altitude=100.0, location="Summit")

        assert ControlPoint.from_dict(point.to_dict()) == point

    def test_optional_fields_omitted(self) -> None:
        assert ControlPoint(id="A-01", lat=1.0, lng=2.0).to_dict() == {"id": "A-01", "lat": 1.0, "lng": 2.0}

    def test_elevation_alias(self) -> None:
        point = ControlPoint.from_dict({"id": "A-01", "lat": 1, "lng": 2, "elevation": "55"})

        assert point.altitude == 55.0

    def test_missing_id(self) -> None:
        with pytest.raises(KeyError):
            ControlPoint.from_dict({"lat": 1.0, "lng": 2.0})


class TestControlPointRegistry:
    """Tests for ControlPointRegistry."""

    def test_from_dict_normalizes_ids(self) -> None:
        registry = ControlPointRegistry.from_dict(REGISTRY_DATA)

        assert registry.ids() == ["A-01", "B-02"]
        assert registry.points["B-02"].id == "B-02"

    def test_lookup_normalizes_query(self) -> None:
        registry = ControlPointRegistry.from_dict(REGISTRY_DATA)

        assert registry.get("ａ１") is registry.points["A-01"]
        assert registry.geo("B-02") == GeoPoint(34.8555, 135.4788)
        assert registry.get("Z-99") is None
        assert registry.geo("Z-99") is None

    def test_contains_and_len(self) -> None:
        registry = ControlPointRegistry.from_dict(REGISTRY_DATA)

        assert len(registry) == 2
        assert "a1" in registry
        assert "Z-99" not in registry
        assert 42 not in registry

    def test_bare_list(self) -> None:
        registry = ControlPointRegistry.from_dict(REGISTRY_DATA["points"])

        assert len(registry) == 2

    def test_later_duplicates_win(self) -> None:
        registry = ControlPointRegistry.from_points([
            ControlPoint(id="A1", lat=1.0, lng=1.0),
            ControlPoint(id="A-01", lat=2.0, lng=2.0),
        ])

        assert len(registry) == 1
        assert registry.geo("A-01") == GeoPoint(2.0, 2.0)

    def test_invalid_points_field(self) -> None:
        with pytest.raises(ValueError):
            ControlPointRegistry.from_dict({"points": {"id": "A-01"}})

    def test_json_round_trip(self) -> None:
        registry = ControlPointRegistry.from_dict(REGISTRY_DATA)

        assert ControlPointRegistry.from_json(registry.to_json()) == registry

    def test_save_and_load_json(self) -> None:
        fs = InMemoryFileSystem()
        registry = ControlPointRegistry.from_dict(REGISTRY_DATA)

        registry.save("points.json", fs=fs)
        loaded = ControlPointRegistry.load("points.json", fs=fs)

        assert json.loads(fs.files["points.json"])["points"][0]["id"] == "A-01"
        assert loaded == registry

    def test_load_yaml(self) -> None:
        fs = InMemoryFileSystem({"gcps.yaml": yaml.safe_dump(REGISTRY_DATA)})

        registry = ControlPointRegistry.load("gcps.yaml", fs=fs)

        assert registry.ids() == ["A-01", "B-02"]

    def test_save_yaml(self) -> None:
        fs = InMemoryFileSystem()
        registry = ControlPointRegistry.from_dict(REGISTRY_DATA)

        registry.save("gcps.yml", fs=fs)

        assert yaml.safe_load(fs.files["gcps.yml"]) == registry.to_dict()

    def test_load_missing_file(self) -> None:
        with pytest.raises(FileNotFoundError):
            ControlPointRegistry.load("missing.json", fs=InMemoryFileSystem())

    def test_default_file_system(self, tmp_path: Path) -> None:
        path = tmp_path / "points.json"
        registry = ControlPointRegistry.from_dict(REGISTRY_DATA)

        registry.save(path)

        assert ControlPointRegistry.load(path) == registry


class TestImagePointSet:
    """Tests for digitized image points."""

    def test_from_dict(self) -> None:
        data = {
            "imageReference": "trail.png",
            "points": [
                {"id": "a1", "imageX": 100, "imageY": 200},
                {"id": "B-02", "imageX": 150.5, "imageY": 250},
                {"imageX": 10, "imageY": 20},
                {"id": "C-03", "imageX": 5},
            ],
        }

        point_set = ImagePointSet.from_dict(data)

        assert point_set.image_reference == "trail.png"
        assert point_set.points == (
            ImagePoint("A-01", PixelPoint(100.0, 200.0)),
            ImagePoint("B-02", PixelPoint(150.5, 250.0)),
            ImagePoint("", PixelPoint(10.0, 20.0)),
        )

    def test_round_trip(self) -> None:
        point_set = ImagePointSet(
            points=(ImagePoint("A-01", PixelPoint(1.0, 2.0)),), image_reference="map.png"
        )

        assert ImagePointSet.from_dict(point_set.to_dict()) == point_set

    def test_load(self) -> None:
        fs = InMemoryFileSystem({"points.json": json.dumps({"points": [{"id": "A-01", "imageX": 1, "imageY": 2}]})})

        point_set = ImagePointSet.load("points.json", fs=fs)

        assert len(point_set) == 1
        assert point_set.image_reference is None
