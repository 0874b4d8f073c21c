"""Unit conversion between physical bleed measurements and pixels."""

import math
import re
from enum import Enum

from bleedmill.constants import MM_PER_INCH, POINTS_PER_INCH
from bleedmill.exceptions import InvalidOptionsError


class BleedUnit(str, Enum):
    """Units a bleed magnitude can be expressed in."""

    PIXELS = "px"
    MILLIMETERS = "mm"
    INCHES = "in"


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Python's built-in round() uses banker's rounding (round(2.5) == 2),
    which would make 0.5 px steps alternate direction.
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def to_pixels(magnitude: float, unit: BleedUnit | str, dpi: int) -> int:
    """
    Convert a bleed magnitude to a whole number of pixels.

    Args:
        magnitude: Bleed size in the given unit
        unit: Unit of the magnitude
        dpi: Output resolution in dots per inch

    Returns:
        Non-negative pixel count (0 for magnitude <= 0)
    """
    if magnitude <= 0:
        return 0

    unit = BleedUnit(unit)
    if unit == BleedUnit.PIXELS:
        return int(magnitude)
    if unit == BleedUnit.MILLIMETERS:
        return round_half_away(magnitude * dpi / MM_PER_INCH)
    return round_half_away(magnitude * dpi)


def from_pixels(pixels: int, unit: BleedUnit | str, dpi: int) -> float:
    """Convert a pixel count back to the given unit at the given DPI."""
    unit = BleedUnit(unit)
    if unit == BleedUnit.PIXELS:
        return float(pixels)
    if unit == BleedUnit.MILLIMETERS:
        return pixels * MM_PER_INCH / dpi
    return pixels / dpi


def mm_to_points(mm: float) -> float:
    """Convert millimeters to PDF points (72 per inch)."""
    return mm * POINTS_PER_INCH / MM_PER_INCH


def pixels_to_points(pixels: int, dpi: int) -> float:
    """Convert a pixel extent printed at `dpi` to PDF points."""
    return pixels / dpi * POINTS_PER_INCH


def parse_dimension(
    value: str | int | float,
    default_unit: BleedUnit = BleedUnit.MILLIMETERS,
) -> tuple[float, BleedUnit]:
    """
    Parse a dimension value into a magnitude and unit.

    Supports: "3mm", "0.125in", "40px", or a bare number in `default_unit`.

    Args:
        value: Dimension string with unit, or a number
        default_unit: Unit applied to bare numbers

    Returns:
        (magnitude, unit) tuple

    Raises:
        InvalidOptionsError: If the string cannot be parsed
    """
    if isinstance(value, bool):
        raise InvalidOptionsError(f"Invalid dimension value: {value!r}")
    if isinstance(value, (int, float)):
        return float(value), default_unit

    if not value or not value.strip():
        raise InvalidOptionsError("Empty dimension value")

    text = value.strip().lower()
    match = re.match(r"^(\d+(?:\.\d+)?|\.\d+)\s*(mm|in|px)?$", text)
    if not match:
        raise InvalidOptionsError(
            f"Invalid dimension format: {value}. Use format like '3mm', '0.125in', '40px'"
        )

    magnitude = float(match.group(1))
    unit = BleedUnit(match.group(2)) if match.group(2) else default_unit
    return magnitude, unit
