"""Joining digitized image points with ground control points."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from overlay_georef.control_points.registry import ControlPointRegistry, ImagePointSet
from overlay_georef.matched_pair import MatchedPair

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """Outcome of joining image points with control points on identifier.

    Attributes:
        pairs: Matched pairs in image point order.
        unmatched_ids: Labelled image points with no control point.
    """

    pairs: tuple[MatchedPair, ...]
    unmatched_ids: tuple[str, ...]

    @property
    def matched_count(self) -> int:
        return len(self.pairs)


def match_points(image_points: ImagePointSet, registry: ControlPointRegistry) -> MatchResult:
    """Join image points with control points sharing the same canonical id.

    Unlabelled image points are ignored.
    """
    pairs = []
    unmatched = []
    for point in image_points.points:
        if not point.id:
            continue
        control_point = registry.get(point.id)
        if control_point is None:
            unmatched.append(point.id)
            continue
        pairs.append(MatchedPair(id=control_point.id, pixel=point.pixel, geo=control_point.geo))

    logger.debug(
        "Matched %d of %d image points (%d unmatched)",
        len(pairs), len(image_points), len(unmatched),
    )
    return MatchResult(pairs=tuple(pairs), unmatched_ids=tuple(unmatched))
