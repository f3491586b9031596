"""Ground control points: identifiers, registries and matching."""

from overlay_georef.control_points.control_point import ControlPoint
from overlay_georef.control_points.matching import MatchResult, match_points
from overlay_georef.control_points.point_id import format_point_id, is_valid_point_id
from overlay_georef.control_points.registry import (
    ControlPointRegistry,
    ImagePoint,
    ImagePointSet,
)

__all__ = [
    "ControlPoint",
    "ControlPointRegistry",
    "ImagePoint",
    "ImagePointSet",
    "MatchResult",
    "format_point_id",
    "is_valid_point_id",
    "match_points",
]
