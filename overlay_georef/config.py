"""
Configuration for the overlay defaults and the calibration search.

Loaded from the ``overlay`` section of a YAML file:

    overlay:
      default_center:
        lat: 34.853667
        lng: 135.472041
      default_zoom_level: 15
      default_scale: 0.8
      calibration:
        iterations: 50
        initial_step_deg: 0.0001
        step_decay: 0.9
        min_scale: 0.001
        refine_scale: true
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict
import logging

import yaml

from overlay_georef.geo_calibrator import CalibrationSettings
from overlay_georef.geo_point import GeoPoint
from overlay_georef.reference_frame import (
    DEFAULT_CENTER,
    DEFAULT_SCALE,
    DEFAULT_ZOOM_LEVEL,
    ReferenceFrame,
)
from overlay_georef.types import Unitless, ZoomLevel

logger = logging.getLogger(__name__)

CONFIG_SECTION = 'overlay'


@dataclass
class OverlayConfig:
    """Defaults for a freshly loaded image and calibration tuning.

    Attributes:
        default_center: Where the image center is placed before calibration
        default_zoom_level: Web-Mercator zoom used for ground resolution
        default_scale: Overlay scale before calibration
        calibration: Local search settings for GeoCalibrator
    """
    default_center: GeoPoint = DEFAULT_CENTER
    default_zoom_level: ZoomLevel = DEFAULT_ZOOM_LEVEL
    default_scale: Unitless = DEFAULT_SCALE
    calibration: CalibrationSettings = field(default_factory=CalibrationSettings)

    @classmethod
    def from_yaml(cls, path: str) -> 'OverlayConfig':
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            OverlayConfig instance loaded from file

        Raises:
            FileNotFoundError: If configuration file does not exist
            ValueError: If configuration file is malformed or contains invalid values
        """
        config_path = Path(path)

        if not config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {path}\n"
                f"Please create a configuration file or use get_default_config()"
            )

        try:
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML configuration file: {e}") from e

        if not data:
            raise ValueError(
                f"Configuration file is empty: {path}\n"
                f"Expected an '{CONFIG_SECTION}' section"
            )

        if not isinstance(data, dict) or CONFIG_SECTION not in data:
            raise ValueError(
                f"Configuration file missing '{CONFIG_SECTION}' section: {path}\n"
                f"Expected structure: {CONFIG_SECTION}:\n  default_scale: ...\n  ..."
            )

        return cls.from_dict(data[CONFIG_SECTION] or {})

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'OverlayConfig':
        """Create configuration from dictionary.

        Missing keys keep their defaults.

        Raises:
            ValueError: If configuration is invalid
        """
        if not isinstance(config, dict):
            raise ValueError(f"Configuration must be a dictionary, got {type(config)}")

        defaults = get_default_config()

        center = defaults.default_center
        if 'default_center' in config:
            try:
                center = GeoPoint.from_dict(config['default_center'])
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid default_center: {e}") from e

        calibration = defaults.calibration
        if 'calibration' in config:
            calibration_config = config['calibration']
            if not isinstance(calibration_config, dict):
                raise ValueError(
                    f"'calibration' must be a dictionary, got {type(calibration_config)}"
                )
            unknown = set(calibration_config) - set(CalibrationSettings().to_dict())
            if unknown:
                raise ValueError(f"Unknown calibration settings: {', '.join(sorted(unknown))}")
            try:
                calibration = CalibrationSettings(**calibration_config)
            except TypeError as e:
                raise ValueError(f"Invalid calibration settings: {e}") from e

        zoom_level = config.get('default_zoom_level', defaults.default_zoom_level)
        if isinstance(zoom_level, bool) or not isinstance(zoom_level, int):
            raise ValueError(f"default_zoom_level must be an integer, got {zoom_level!r}")

        try:
            scale = float(config.get('default_scale', defaults.default_scale))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid overlay default: {e}") from e

        result = cls(
            default_center=center,
            default_zoom_level=ZoomLevel(zoom_level),
            default_scale=Unitless(scale),
            calibration=calibration,
        )
        # Validates the defaults together
        result.initial_frame()
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary (the content of the ``overlay`` section)."""
        return {
            'default_center': self.default_center.to_dict(),
            'default_zoom_level': self.default_zoom_level,
            'default_scale': self.default_scale,
            'calibration': self.calibration.to_dict(),
        }

    def save_to_yaml(self, path: str) -> None:
        """Save configuration to YAML file.

        Args:
            path: Path where YAML file should be saved
        """
        config_path = Path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w') as f:
            yaml.dump({CONFIG_SECTION: self.to_dict()}, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Configuration saved to {path}")

    def initial_frame(self) -> ReferenceFrame:
        """Reference frame for a freshly loaded image."""
        return ReferenceFrame(
            center=self.default_center,
            scale=self.default_scale,
            zoom_level=self.default_zoom_level,
        )


def get_default_config() -> OverlayConfig:
    """Get default overlay configuration."""
    return OverlayConfig()
