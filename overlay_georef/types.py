"""
Unit type annotations for numeric parameters.

NewType aliases for the units that flow between the overlay modules. They are
erased at runtime and only document (and let mypy check) which unit a value is
in, e.g. degrees of latitude versus meters on the ground.

Usage Example:
    >>> from overlay_georef.types import Degrees, Meters
    >>>
    >>> def offset_lat(lat: Degrees, north_m: Meters) -> Degrees:
    ...     pass
"""

from typing import NewType

# Angular units
Degrees = NewType('Degrees', float)
"""Angle in degrees (latitude, longitude, search step)"""

# Distance units
Meters = NewType('Meters', float)
"""Ground distance in meters (haversine results, meters-per-pixel)"""

SquareMeters = NewType('SquareMeters', float)
"""Sum of squared ground distances (calibration error)"""

# Image coordinate units
Pixels = NewType('Pixels', int)
"""Integer image dimensions or rounded pixel coordinates"""

PixelsFloat = NewType('PixelsFloat', float)
"""Sub-pixel image coordinates"""

# Dimensionless quantities
Unitless = NewType('Unitless', float)
"""Dimensionless scalar (overlay scale factor, ratios)"""

ZoomLevel = NewType('ZoomLevel', int)
"""Web-Mercator tile zoom level"""
