"""Processing options: the full description of one pipeline run."""

import math
import numbers
from dataclasses import dataclass, replace
from enum import Enum

from bleedmill.constants import DEFAULT_DPI, DEFAULT_JPEG_QUALITY, JPEG_QUALITY_RANGE, ROTATION_EPSILON
from bleedmill.exceptions import InvalidOptionsError
from bleedmill.units import BleedUnit, to_pixels


class OutputFormat(str, Enum):
    """Output encodings."""

    PNG = "png"
    JPEG = "jpeg"
    PDF = "pdf"


def _parse_enum_field(enum_class: type[Enum], value, field_name: str) -> Enum:
    try:
        return enum_class(value)
    except ValueError:
        valid = ", ".join(e.value for e in enum_class)
        raise InvalidOptionsError(
            f"Invalid {field_name}: {value!r}. Valid values are: {valid}",
            context={"field": field_name},
        )


def _require_int(value, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidOptionsError(
            f"{field_name} must be an integer, got {value!r}",
            context={"field": field_name},
        )


def _require_real(value, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidOptionsError(
            f"{field_name} must be a number, got {value!r}",
            context={"field": field_name},
        )


@dataclass(frozen=True)
class ProcessingOptions:
    """Requested transforms and output encoding for one image.

    Instances are immutable and validated on construction, so a value can be
    shared between a preview run and an export run without copying. Use
    `with_changes()` to derive a modified copy.
    """

    # Resize
    target_width: int | None = None
    target_height: int | None = None
    maintain_aspect_ratio: bool = True

    # Bleed, per side: width applies to left and right, height to top and bottom
    bleed_width: float = 0.0
    bleed_height: float = 0.0
    bleed_unit: BleedUnit = BleedUnit.MILLIMETERS
    dpi: int = DEFAULT_DPI
    mirror_bleed: bool = True

    # Flip
    flip_horizontal: bool = False
    flip_vertical: bool = False

    # Rotation in degrees, clockwise-positive
    rotation_angle: float = 0.0

    # Output
    output_format: OutputFormat = OutputFormat.PNG
    jpeg_quality: int = DEFAULT_JPEG_QUALITY

    def __post_init__(self):
        object.__setattr__(self, "bleed_unit", _parse_enum_field(BleedUnit, self.bleed_unit, "bleed_unit"))
        object.__setattr__(
            self, "output_format", _parse_enum_field(OutputFormat, self.output_format, "output_format")
        )

        for name in ("target_width", "target_height"):
            value = getattr(self, name)
            if value is None:
                continue
            _require_int(value, name)
            if value <= 0:
                raise InvalidOptionsError(
                    f"{name} must be a positive integer, got {value}",
                    context={"field": name},
                )

        for name in ("bleed_width", "bleed_height"):
            value = getattr(self, name)
            _require_real(value, name)
            if value < 0 or not math.isfinite(value):
                raise InvalidOptionsError(
                    f"{name} must be a non-negative number, got {value}",
                    context={"field": name},
                )

        _require_int(self.dpi, "dpi")
        if self.dpi <= 0:
            raise InvalidOptionsError(f"dpi must be positive, got {self.dpi}", context={"field": "dpi"})

        _require_int(self.jpeg_quality, "jpeg_quality")
        low, high = JPEG_QUALITY_RANGE
        if not low <= self.jpeg_quality <= high:
            raise InvalidOptionsError(
                f"jpeg_quality must be between {low} and {high}, got {self.jpeg_quality}",
                context={"field": "jpeg_quality"},
            )

        _require_real(self.rotation_angle, "rotation_angle")
        if not math.isfinite(self.rotation_angle):
            raise InvalidOptionsError(
                f"rotation_angle must be finite, got {self.rotation_angle}",
                context={"field": "rotation_angle"},
            )

    @property
    def bleed_width_pixels(self) -> int:
        """Left/right bleed in pixels at the configured DPI."""
        return to_pixels(self.bleed_width, self.bleed_unit, self.dpi)

    @property
    def bleed_height_pixels(self) -> int:
        """Top/bottom bleed in pixels at the configured DPI."""
        return to_pixels(self.bleed_height, self.bleed_unit, self.dpi)

    @property
    def has_resize(self) -> bool:
        return self.target_width is not None or self.target_height is not None

    @property
    def has_flip(self) -> bool:
        return self.flip_horizontal or self.flip_vertical

    @property
    def has_bleed(self) -> bool:
        return self.bleed_width > 0 or self.bleed_height > 0

    @property
    def needs_rotation(self) -> bool:
        return abs(self.rotation_angle) > ROTATION_EPSILON

    @property
    def has_any_operation(self) -> bool:
        """True if any geometric field differs from its default."""
        return self.has_resize or self.has_flip or self.has_bleed or self.needs_rotation

    def with_changes(self, **changes) -> "ProcessingOptions":
        """Return a validated copy with the given fields replaced."""
        return replace(self, **changes)
