"""Tests for overlay_georef.config."""

from pathlib import Path

import pytest
import yaml

from overlay_georef.config import OverlayConfig, get_default_config
from overlay_georef.geo_calibrator import CalibrationSettings
from overlay_georef.geo_point import GeoPoint
from overlay_georef.reference_frame import DEFAULT_CENTER, ReferenceFrame


def write_config(path: Path, content: str) -> str:
    path.write_text(content)
    return str(path)


class TestDefaults:
    """Default configuration values."""

    def test_default_config(self) -> None:
        config = get_default_config()

        assert config.default_center == DEFAULT_CENTER
        assert config.default_zoom_level == 15
        assert config.default_scale == 0.8
        assert config.calibration == CalibrationSettings()

    def test_initial_frame(self) -> None:
        assert get_default_config().initial_frame() == ReferenceFrame.default()


class TestFromYaml:
    """Loading from YAML files."""

    def test_full_file(self, tmp_path: Path) -> None:
        path = write_config(
            tmp_path / "overlay.yaml",
            """
overlay:
  default_center:
    lat: 35.0
    lng: 136.0
  default_zoom_level: 16
  default_scale: 1.25
  calibration:
    iterations: 20
    step_decay: 0.8
    refine_scale: false
""",
        )

        config = OverlayConfig.from_yaml(path)

        assert config.default_center == GeoPoint(35.0, 136.0)
        assert config.default_zoom_level == 16
        assert config.default_scale == 1.25
        assert config.calibration.iterations == 20
        assert config.calibration.step_decay == 0.8
        assert config.calibration.refine_scale is False
        assert config.calibration.initial_step_deg == CalibrationSettings().initial_step_deg

    def test_partial_section_keeps_defaults(self, tmp_path: Path) -> None:
        path = write_config(tmp_path / "overlay.yaml", "overlay:\n  default_scale: 2.0\n")

        config = OverlayConfig.from_yaml(path)

        assert config.default_scale == 2.0
        assert config.default_center == DEFAULT_CENTER
        assert config.calibration == CalibrationSettings()

    def test_empty_section_is_all_defaults(self, tmp_path: Path) -> None:
        path = write_config(tmp_path / "overlay.yaml", "overlay:\n")

        assert OverlayConfig.from_yaml(path) == get_default_config()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            OverlayConfig.from_yaml(str(tmp_path / "missing.yaml"))

    @pytest.mark.parametrize(
        "content,message",
        [
            ("", "empty"),
            ("other:\n  value: 1\n", "missing 'overlay' section"),
            ("overlay: [unclosed\n", "Failed to parse"),
        ],
        ids=["empty-file", "missing-section", "bad-yaml"],
    )
    def test_malformed_file(self, tmp_path: Path, content: str, message: str) -> None:
        path = write_config(tmp_path / "overlay.yaml", content)

        with pytest.raises(ValueError, match=message):
            OverlayConfig.from_yaml(path)


class TestFromDict:
    """Validation of configuration values."""

    @pytest.mark.parametrize(
        "config",
        [
            {"default_scale": 0},
            {"default_scale": -1.5},
            {"default_scale": "large"},
            {"default_zoom_level": "high"},
            {"default_zoom_level": 15.7},
            {"default_zoom_level": 15.0},
            {"default_zoom_level": True},
            {"default_center": {"lat": 35.0}},
            {"default_center": {"lat": float("nan"), "lng": 135.0}},
            {"calibration": {"iterations": -1}},
            {"calibration": {"step_decay": 1.5}},
            {"calibration": {"min_scale": 0}},
            {"calibration": {"max_iterations": 10}},
            {"calibration": [50]},
        ],
        ids=[
            "zero-scale",
            "negative-scale",
            "non-numeric-scale",
            "non-numeric-zoom",
            "fractional-zoom",
            "float-zoom",
            "boolean-zoom",
            "center-without-lng",
            "nan-center",
            "negative-iterations",
            "decay-above-one",
            "zero-min-scale",
            "unknown-calibration-key",
            "calibration-not-mapping",
        ],
    )
    def test_invalid(self, config: dict) -> None:
        with pytest.raises(ValueError):
            OverlayConfig.from_dict(config)

    def test_not_a_mapping(self) -> None:
        with pytest.raises(ValueError, match="must be a dictionary"):
            OverlayConfig.from_dict([1, 2])  # type: ignore[arg-type]

    def test_fractional_zoom_not_truncated(self) -> None:
        with pytest.raises(ValueError, match="default_zoom_level must be an integer"):
            OverlayConfig.from_dict({"default_zoom_level": 15.7})

    def test_center_aliases(self) -> None:
        config = OverlayConfig.from_dict({"default_center": {"latitude": 35.0, "longitude": 136.0}})

        assert config.default_center == GeoPoint(35.0, 136.0)


class TestSave:
    """Writing configuration back out."""

    def test_round_trip(self, tmp_path: Path) -> None:
        original = OverlayConfig(
            default_center=GeoPoint(35.1, 136.2),
            default_zoom_level=17,
            default_scale=0.5,
            calibration=CalibrationSettings(iterations=10, refine_scale=False),
        )
        path = tmp_path / "nested" / "overlay.yaml"

        original.save_to_yaml(str(path))

        assert OverlayConfig.from_yaml(str(path)) == original

    def test_written_under_overlay_section(self, tmp_path: Path) -> None:
        path = tmp_path / "overlay.yaml"

        get_default_config().save_to_yaml(str(path))

        data = yaml.safe_load(path.read_text())
        assert list(data) == ["overlay"]
        assert data["overlay"]["default_zoom_level"] == 15
