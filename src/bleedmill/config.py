"""Configuration loading and validation for bleedmill."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from bleedmill.constants import DEFAULT_DPI, DEFAULT_JPEG_QUALITY, DEFAULT_PDF_SCALE, MM_PER_INCH
from bleedmill.exceptions import ConfigError, InvalidOptionsError
from bleedmill.options import OutputFormat, ProcessingOptions
from bleedmill.units import BleedUnit, parse_dimension


class ErrorHandling(str, Enum):
    """Error handling modes."""

    CONTINUE = "continue"  # Skip failed items, continue processing
    STOP = "stop"  # Stop on first error


class FlipMode(str, Enum):
    """Shorthand flip values."""

    NONE = "none"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    BOTH = "both"


FORMAT_ALIASES = {"jpg": "jpeg"}


def _parse_enum(
    enum_class: type[Enum],
    value: str,
    profile: str | None = None,
    field: str | None = None,
) -> Enum:
    """Parse a string value into an enum with validation.

    Raises:
        ConfigError: If the value is not a valid enum member.
    """
    try:
        return enum_class(str(value).lower())
    except ValueError:
        valid = ", ".join(e.value for e in enum_class)
        raise ConfigError(
            f"Invalid value '{value}'",
            profile=profile,
            field=field,
            suggestion=f"Valid values are: {valid}",
        )


@dataclass
class PdfPageConfig:
    """Fixed physical page for PDF output. Without it, the page is sized from DPI."""
    page_width_mm: float = 210.0
    page_height_mm: float = 297.0
    fit: bool = True  # Letterbox to fit; False centers at native size


@dataclass
class OutputProfile:
    """Configuration for a single output profile."""
    options: ProcessingOptions = field(default_factory=ProcessingOptions)
    enabled: bool = True  # Set to False to skip this profile
    output_dir: Path = Path("./output")
    filename_prefix: str = ""
    filename_suffix: str = ""
    pdf_page: PdfPageConfig | None = None
    debug: bool = False  # Save intermediate images after each stage


@dataclass
class Settings:
    """Global settings for the pipeline."""
    on_error: ErrorHandling = ErrorHandling.CONTINUE


@dataclass
class InputConfig:
    """Input configuration."""
    path: Path = Path("./input")
    pattern: str = "*"
    pages: str | int | list[int] = "first"  # Pages to render from PDF sources
    pdf_scale: float = DEFAULT_PDF_SCALE


@dataclass
class Config:
    """Root configuration object."""
    version: int = 1
    settings: Settings = field(default_factory=Settings)
    input: InputConfig = field(default_factory=InputConfig)
    outputs: dict[str, OutputProfile] = field(default_factory=dict)


def _parse_whole_number(name: str, field_name: str, value: Any, suggestion: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(
            f"Invalid {field_name}: {value!r}",
            profile=name,
            field=field_name,
            suggestion=suggestion,
        )
    return value


def _parse_resize(name: str, value: Any) -> dict[str, Any]:
    if isinstance(value, int) and not isinstance(value, bool):
        # Simple resize: just the width
        return {"target_width": value}
    if not isinstance(value, dict):
        raise ConfigError(
            f"Invalid resize value: {value!r}",
            profile=name,
            field="resize",
            suggestion="Use a width in pixels or {width: ..., height: ..., keep_aspect: ...}",
        )
    for key in ("width", "height"):
        size = value.get(key)
        if size is not None and (isinstance(size, bool) or not isinstance(size, int)):
            raise ConfigError(
                f"Invalid resize {key}: {size!r}",
                profile=name,
                field=f"resize.{key}",
                suggestion="Use a whole number of pixels, or leave it empty to derive it",
            )
    return {
        "target_width": value.get("width"),
        "target_height": value.get("height"),
        "maintain_aspect_ratio": value.get("keep_aspect", True),
    }


def _parse_bleed(name: str, value: Any) -> dict[str, Any]:
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        # Simple bleed: same size on every side
        value = {"width": value, "height": value}
    if not isinstance(value, dict):
        raise ConfigError(f"Invalid bleed value: {value!r}", profile=name, field="bleed")

    default_unit = _parse_enum(BleedUnit, value.get("unit", "mm"), profile=name, field="bleed.unit")
    try:
        width, width_unit = parse_dimension(value.get("width", 0), default_unit)
        height, height_unit = parse_dimension(value.get("height", 0), default_unit)
    except InvalidOptionsError as e:
        raise ConfigError(str(e), profile=name, field="bleed") from e

    # A zero side carries no unit information worth checking
    if width and height and width_unit != height_unit:
        raise ConfigError(
            f"Bleed width and height use different units ({width_unit.value}, {height_unit.value})",
            profile=name,
            field="bleed",
            suggestion="Express both sides in the same unit",
        )

    return {
        "bleed_width": width,
        "bleed_height": height,
        "bleed_unit": width_unit if width else height_unit,
        "dpi": _parse_whole_number(
            name, "bleed.dpi", value.get("dpi", DEFAULT_DPI), "Use a whole number of dots per inch (e.g. 300)"
        ),
        "mirror_bleed": value.get("mirror", True),
    }


def _parse_flip(name: str, value: Any) -> dict[str, Any]:
    if isinstance(value, dict):
        return {
            "flip_horizontal": bool(value.get("horizontal", False)),
            "flip_vertical": bool(value.get("vertical", False)),
        }
    mode = _parse_enum(FlipMode, value, profile=name, field="flip")
    return {
        "flip_horizontal": mode in (FlipMode.HORIZONTAL, FlipMode.BOTH),
        "flip_vertical": mode in (FlipMode.VERTICAL, FlipMode.BOTH),
    }


def _parse_rotate(name: str, value: Any) -> dict[str, Any]:
    if isinstance(value, dict):
        value = value.get("angle", 0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(
            f"Invalid rotation angle: {value!r}",
            profile=name,
            field="rotate",
            suggestion="Use a number of degrees, clockwise (e.g. 90, -15.5)",
        )
    return {"rotation_angle": float(value)}


def _parse_page_length_mm(name: str, field_name: str, value: Any) -> float:
    try:
        magnitude, unit = parse_dimension(value, BleedUnit.MILLIMETERS)
    except InvalidOptionsError as e:
        raise ConfigError(str(e), profile=name, field=field_name) from e
    if unit == BleedUnit.PIXELS:
        raise ConfigError(
            "Page size cannot be given in pixels",
            profile=name,
            field=field_name,
            suggestion="Use millimeters or inches (e.g. '210mm', '8.5in')",
        )
    return magnitude * MM_PER_INCH if unit == BleedUnit.INCHES else magnitude


def _parse_pdf_page(name: str, value: Any) -> PdfPageConfig:
    if not isinstance(value, dict):
        raise ConfigError(f"Invalid pdf value: {value!r}", profile=name, field="pdf")
    return PdfPageConfig(
        page_width_mm=_parse_page_length_mm(name, "pdf.page_width", value.get("page_width", "210mm")),
        page_height_mm=_parse_page_length_mm(name, "pdf.page_height", value.get("page_height", "297mm")),
        fit=value.get("fit", True),
    )


def parse_options(name: str, data: dict[str, Any]) -> ProcessingOptions:
    """Build ProcessingOptions from one output profile's settings."""
    kwargs: dict[str, Any] = {}

    if data.get("resize") is not None:
        kwargs.update(_parse_resize(name, data["resize"]))
    if data.get("bleed") is not None:
        kwargs.update(_parse_bleed(name, data["bleed"]))
    if data.get("flip") is not None:
        kwargs.update(_parse_flip(name, data["flip"]))
    if data.get("rotate") is not None:
        kwargs.update(_parse_rotate(name, data["rotate"]))

    format_str = str(data.get("format", "png")).lower()
    kwargs["output_format"] = _parse_enum(
        OutputFormat, FORMAT_ALIASES.get(format_str, format_str), profile=name, field="format"
    )
    kwargs["jpeg_quality"] = _parse_whole_number(
        name, "jpeg_quality", data.get("jpeg_quality", DEFAULT_JPEG_QUALITY), "Use a whole number from 1 to 100"
    )

    try:
        return ProcessingOptions(**kwargs)
    except InvalidOptionsError as e:
        raise ConfigError(str(e), profile=name, field=e.context.get("field")) from e


def parse_output_profile(name: str, data: dict[str, Any] | None) -> OutputProfile:
    """Parse an output profile from config data."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Output profile '{name}' must be a dictionary")

    pdf_page = None
    if data.get("pdf") is not None:
        pdf_page = _parse_pdf_page(name, data["pdf"])

    return OutputProfile(
        options=parse_options(name, data),
        enabled=data.get("enabled", True),
        output_dir=Path(data.get("output_dir", "./output")),
        filename_prefix=data.get("filename_prefix", ""),
        filename_suffix=data.get("filename_suffix", ""),
        pdf_page=pdf_page,
        debug=data.get("debug", False),
    )


def load_config(config_path: Path) -> Config:
    """Load and validate a configuration file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return parse_config(data)


def parse_config(data: Any) -> Config:
    """Build a Config from already-parsed YAML data."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a YAML dictionary")

    settings = Settings()
    if "settings" in data:
        s = data["settings"] or {}
        settings = Settings(
            on_error=_parse_enum(ErrorHandling, s.get("on_error", "continue"), field="settings.on_error"),
        )

    input_config = InputConfig()
    if "input" in data:
        i = data["input"] or {}
        input_config = InputConfig(
            path=Path(i.get("path", "./input")),
            pattern=i.get("pattern", "*"),
            pages=i.get("pages", "first"),
            pdf_scale=i.get("pdf_scale", DEFAULT_PDF_SCALE),
        )

    if "outputs" not in data or not data["outputs"]:
        raise ConfigError("Configuration must contain 'outputs' section")

    outputs = {}
    for name, output_data in data["outputs"].items():
        outputs[name] = parse_output_profile(name, output_data)

    return Config(
        version=data.get("version", 1),
        settings=settings,
        input=input_config,
        outputs=outputs,
    )
