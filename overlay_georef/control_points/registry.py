"""Collections of ground control points and digitized image points."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import yaml

from overlay_georef.control_points.control_point import ControlPoint
from overlay_georef.control_points.point_id import format_point_id
from overlay_georef.geo_point import GeoPoint
from overlay_georef.pixel_point import PixelPoint

_YAML_SUFFIXES = (".yaml", ".yml")


class FileSystem(Protocol):
    """Protocol for file system operations."""

    def read_text(self, path: str | Path) -> str:
        """Read text from a file."""
        ...

    def write_text(self, path: str | Path, content: str) -> None:
        """Write text to a file."""
        ...


class DefaultFileSystem:
    """Default file system implementation."""

    def read_text(self, path: str | Path) -> str:
        return Path(path).read_text(encoding="utf-8")

    def write_text(self, path: str | Path, content: str) -> None:
        Path(path).write_text(content, encoding="utf-8")


def _get_fs(fs: FileSystem | None) -> FileSystem:
    """Return the provided filesystem or the default."""
    return fs if fs is not None else DefaultFileSystem()


def parse_document(text: str, path: str | Path) -> Any:
    """Parse JSON, or YAML when ``path`` has a YAML suffix."""
    if Path(path).suffix.lower() in _YAML_SUFFIXES:
        return yaml.safe_load(text)
    return json.loads(text)


def _points_list(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        points = data.get("points", [])
        if not isinstance(points, list):
            raise ValueError(f"'points' must be a list, got {type(points).__name__}")
        return points
    raise ValueError(f"Expected a mapping or a list of points, got {type(data).__name__}")


@dataclass(frozen=True)
class ControlPointRegistry:
    """Immutable registry of ground control points keyed by canonical id.

    Attributes:
        points: Mapping from canonical point ID to ControlPoint.
    """

    points: dict[str, ControlPoint] = field(default_factory=dict, hash=False)

    def __len__(self) -> int:
        return len(self.points)

    def __contains__(self, point_id: object) -> bool:
        return isinstance(point_id, str) and format_point_id(point_id) in self.points

    def get(self, point_id: str) -> ControlPoint | None:
        """Look up a point; the id is normalized first."""
        return self.points.get(format_point_id(point_id))

    def geo(self, point_id: str) -> GeoPoint | None:
        point = self.get(point_id)
        return point.geo if point is not None else None

    def ids(self) -> list[str]:
        return list(self.points)

    def to_dict(self) -> dict[str, Any]:
        return {"points": [point.to_dict() for point in self.points.values()]}

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: str | Path, fs: FileSystem | None = None) -> None:
        """Save registry to a JSON file, or YAML for .yaml/.yml paths."""
        if Path(path).suffix.lower() in _YAML_SUFFIXES:
            content = yaml.safe_dump(self.to_dict(), allow_unicode=True, sort_keys=False)
        else:
            content = self.to_json()
        _get_fs(fs).write_text(path, content)

    @classmethod
    def from_points(cls, points: list[ControlPoint]) -> ControlPointRegistry:
        """Build a registry, normalizing ids. Later duplicates replace earlier ones."""
        registry: dict[str, ControlPoint] = {}
        for point in points:
            point_id = format_point_id(point.id)
            registry[point_id] = ControlPoint(
                id=point_id,
                lat=point.lat,
                lng=point.lng,
                altitude=point.altitude,
                location=point.location,
            )
        return cls(points=registry)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | list[dict[str, Any]]) -> ControlPointRegistry:
        """Create registry from a ``{"points": [...]}`` mapping or a bare list.

        Raises:
            KeyError: If a point lacks an id or a coordinate.
            ValueError: If data format is invalid.
        """
        return cls.from_points([ControlPoint.from_dict(item) for item in _points_list(data)])

    @classmethod
    def from_json(cls, json_str: str) -> ControlPointRegistry:
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def load(cls, path: str | Path, fs: FileSystem | None = None) -> ControlPointRegistry:
        """Load registry from a JSON or YAML file.

        Raises:
            FileNotFoundError: If file doesn't exist.
            json.JSONDecodeError / yaml.YAMLError: If the file can't be parsed.
            KeyError: If required keys are missing.
            ValueError: If data format is invalid.
        """
        return cls.from_dict(parse_document(_get_fs(fs).read_text(path), path))


@dataclass(frozen=True)
class ImagePoint:
    """A point digitized on the overlay image.

    Attributes:
        id: Canonical identifier, or "" when the point was never labelled.
        pixel: Position in the natural pixel grid.
    """

    id: str
    pixel: PixelPoint


@dataclass(frozen=True)
class ImagePointSet:
    """Points digitized on one image, in file order.

    Attributes:
        points: Digitized points.
        image_reference: File name of the image the points were taken on.
    """

    points: tuple[ImagePoint, ...] = ()
    image_reference: str | None = None

    def __len__(self) -> int:
        return len(self.points)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "points": [
                {"id": point.id, "imageX": point.pixel.x, "imageY": point.pixel.y}
                for point in self.points
            ]
        }
        if self.image_reference is not None:
            data["imageReference"] = self.image_reference
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ImagePointSet:
        """Create from ``{"imageReference", "points": [{"id", "imageX", "imageY"}]}``.

        Points without both image coordinates are skipped.
        """
        points = []
        for item in _points_list(data):
            if item.get("imageX") is None or item.get("imageY") is None:
                continue
            raw_id = item.get("id")
            points.append(
                ImagePoint(
                    id=format_point_id(str(raw_id)) if raw_id is not None else "",
                    pixel=PixelPoint.from_dict(item),
                )
            )
        image_reference = data.get("imageReference") if isinstance(data, dict) else None
        return cls(points=tuple(points), image_reference=image_reference)

    @classmethod
    def load(cls, path: str | Path, fs: FileSystem | None = None) -> ImagePointSet:
        return cls.from_dict(parse_document(_get_fs(fs).read_text(path), path))
