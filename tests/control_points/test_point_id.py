"""Unit tests for overlay_georef.control_points.point_id."""

import pytest

from overlay_georef.control_points.point_id import format_point_id, is_valid_point_id


class TestFormatPointId:
    """Tests for point identifier normalization."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("A-01", "A-01"),
            ("a-01", "A-01"),
            ("A1", "A-01"),
            ("a 1", "A-01"),
            ("A01", "A-01"),
            ("Ａ－０１", "A-01"),
            ("ａ１", "A-01"),
            ("Ｂ　１２", "B-12"),
            ("A-1", "A-01"),
            ("A-12", "A-12"),
            ("AB12", "AB12"),
            ("AB1", "AB01"),
            ("X‐05", "X-05"),
            ("  c3  ", "C-03"),
            ("7", "07"),
        ],
        ids=[
            "canonical",
            "lowercase",
            "no-dash-single-digit",
            "space-inside",
            "no-dash",
            "full-width",
            "full-width-lowercase",
            "ideographic-space",
            "dash-single-digit",
            "two-digits-untouched",
            "long-prefix-no-dash",
            "long-prefix-padded",
            "unicode-hyphen",
            "surrounding-spaces",
            "digit-only",
        ],
    )
    def test_format(self, raw: str, expected: str) -> None:
        assert format_point_id(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   "], ids=["empty", "blank"])
    def test_blank_unchanged(self, raw: str) -> None:
        assert format_point_id(raw) == raw

    def test_idempotent(self) -> None:
        for raw in ["a1", "Ｂ　１２", "AB1", "X-05"]:
            once = format_point_id(raw)
            assert format_point_id(once) == once


class TestIsValidPointId:
    """Tests for canonical identifier validation."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("A-01", True),
            ("Z-99", True),
            ("", True),
            ("A01", False),
            ("a-01", False),
            ("AB-01", False),
            ("A-1", False),
            ("A-001", False),
        ],
        ids=["canonical", "last-letter", "blank", "no-dash", "lowercase", "two-letters", "one-digit", "three-digits"],
    )
    def test_validation(self, value: str, expected: bool) -> None:
        assert is_valid_point_id(value) is expected
