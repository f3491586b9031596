"""Reading and writing reference frame files for the CLI."""

import json
from pathlib import Path
from typing import Any

import yaml

from overlay_georef.reference_frame import ReferenceFrame


def read_document(path: Path) -> Any:
    """Parse a JSON file, or YAML for .yaml/.yml suffixes."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)


def load_frame(path: Path) -> ReferenceFrame:
    """
    Load a frame written by ``georef calibrate --output`` or a bare frame mapping.

    Raises:
        FileNotFoundError: If the file doesn't exist
        KeyError / ValueError: If the content is not a valid frame
    """
    data = read_document(path)
    if not isinstance(data, dict):
        raise ValueError(f"Frame file must contain a mapping: {path}")
    return ReferenceFrame.from_dict(data.get("frame", data))


def save_frame(path: Path, frame: ReferenceFrame, **extra: Any) -> None:
    """Write ``{"frame": ..., **extra}`` as YAML, or JSON for a .json suffix."""
    data = {"frame": frame.to_dict(), **extra}
    if path.suffix.lower() == ".json":
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    else:
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
