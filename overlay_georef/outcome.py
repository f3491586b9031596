"""Typed failure values returned by the transform, optimizer and calibrator.

Core operations return ``Value | Failure`` rather than raising. Callers
discriminate with ``isinstance(result, Failure)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureCategory(Enum):
    """Broad class of a failure."""

    PRECONDITION = "precondition"
    DEGENERACY = "degeneracy"


class FailureReason(Enum):
    """Why an operation could not produce a value."""

    NO_IMAGE = "no_image"
    DEGENERATE_BOUNDS = "degenerate_bounds"
    INSUFFICIENT_PAIRS = "insufficient_pairs"
    MISSING_CONTROL_POINT = "missing_control_point"
    NON_FINITE = "non_finite"
    INVALID_SCALE = "invalid_scale"

    @property
    def category(self) -> FailureCategory:
        if self in (FailureReason.NON_FINITE, FailureReason.INVALID_SCALE):
            return FailureCategory.DEGENERACY
        return FailureCategory.PRECONDITION


@dataclass(frozen=True)
class Failure:
    """A typed, value-returned failure.

    Attributes:
        reason: Machine-readable failure reason.
        detail: Human-readable description for logs and CLI output.
    """

    reason: FailureReason
    detail: str = ""

    @property
    def category(self) -> FailureCategory:
        return self.reason.category

    def __str__(self) -> str:
        if self.detail:
            return f"{self.reason.value}: {self.detail}"
        return self.reason.value
