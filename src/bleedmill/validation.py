"""Configuration validation for bleedmill.

Catches mistakes before any image is loaded: options that have no effect,
page specs that cannot parse, inputs that do not exist.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from bleedmill.constants import DEFAULT_JPEG_QUALITY
from bleedmill.exceptions import ConfigError, PageSelectionError
from bleedmill.options import OutputFormat
from bleedmill.selector import validate_page_spec_syntax
from bleedmill.sources import is_pdf

if TYPE_CHECKING:
    from bleedmill.config import Config, OutputProfile


@dataclass
class ValidationResult:
    """Result of configuration validation.

    Attributes:
        valid: True if no errors were found
        errors: List of error messages (fatal issues)
        warnings: List of warning messages (non-fatal issues)
    """

    valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error and mark result as invalid."""
        self.errors.append(message)
        self.valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning (does not affect validity)."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> None:
        """Merge another validation result into this one."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        if not other.valid:
            self.valid = False


@dataclass
class ValidationContext:
    """Optional context for operational validation."""

    input_path: Path | None = None
    """Path to validate input files exist."""

    check_paths: bool = True
    """Whether to validate file/directory paths exist."""


class ConfigValidator:
    """Configuration validator.

    Performs three phases of validation:
    1. Structural: Required sections present
    2. Semantic: Settings that conflict or have no effect
    3. Operational: Input and output paths (optional)

    Example:
        result = ConfigValidator().validate(config)
        for error in result.errors:
            logger.error(error)
    """

    def validate(
        self,
        config: "Config",
        context: ValidationContext | None = None,
    ) -> ValidationResult:
        result = ValidationResult()
        result.merge(self._validate_structure(config))
        result.merge(self._validate_semantics(config))
        if context:
            result.merge(self._validate_operational(config, context))
        return result

    def validate_or_raise(
        self,
        config: "Config",
        context: ValidationContext | None = None,
    ) -> None:
        """Validate configuration and raise ConfigError if invalid."""
        result = self.validate(config, context)
        if not result.valid:
            error_text = "; ".join(result.errors)
            raise ConfigError(f"Configuration validation failed: {error_text}")

    def _validate_structure(self, config: "Config") -> ValidationResult:
        result = ValidationResult()

        if not config.outputs:
            result.add_error("At least one output profile is required")
        elif not any(profile.enabled for profile in config.outputs.values()):
            result.add_warning("All output profiles are disabled; nothing will be written")

        return result

    def _validate_semantics(self, config: "Config") -> ValidationResult:
        result = ValidationResult()

        try:
            validate_page_spec_syntax(config.input.pages)
        except PageSelectionError as e:
            result.add_error(f"Input pages: {e}")

        if config.input.pdf_scale <= 0:
            result.add_error(f"Input pdf_scale must be positive, got {config.input.pdf_scale}")

        for name, profile in config.outputs.items():
            result.merge(self._validate_profile(name, profile))

        return result

    def _validate_profile(self, name: str, profile: "OutputProfile") -> ValidationResult:
        result = ValidationResult()
        prefix = f"Profile '{name}'"
        options = profile.options

        if not options.has_any_operation:
            result.add_warning(f"{prefix}: no operations configured; output is a re-encoded copy")

        if options.output_format != OutputFormat.JPEG and options.jpeg_quality != DEFAULT_JPEG_QUALITY:
            result.add_warning(
                f"{prefix}: jpeg_quality is ignored for {options.output_format.value} output"
            )

        if profile.pdf_page and options.output_format != OutputFormat.PDF:
            result.add_warning(
                f"{prefix}: pdf page settings are ignored for {options.output_format.value} output"
            )

        if options.has_bleed and options.bleed_width_pixels == 0 and options.bleed_height_pixels == 0:
            result.add_warning(
                f"{prefix}: bleed of {options.bleed_width}x{options.bleed_height} "
                f"{options.bleed_unit.value} rounds to 0 pixels at {options.dpi} DPI"
            )

        single_target = (options.target_width is None) != (options.target_height is None)
        if not options.maintain_aspect_ratio and single_target:
            result.add_warning(
                f"{prefix}: resize without keep_aspect and only one target keeps "
                f"the other side at its source size"
            )

        return result

    def _validate_operational(
        self,
        config: "Config",
        context: ValidationContext,
    ) -> ValidationResult:
        """Validate that paths exist and are usable."""
        result = ValidationResult()

        if context.check_paths and context.input_path:
            if not context.input_path.exists():
                result.add_error(f"Input path does not exist: {context.input_path}")
            else:
                from bleedmill.processor import get_input_files

                input_files = get_input_files(context.input_path, config.input.pattern)
                if not input_files:
                    result.add_warning(
                        f"No supported files matching '{config.input.pattern}' "
                        f"in {context.input_path}"
                    )
                elif config.input.pages != "first" and not any(is_pdf(p) for p in input_files):
                    result.add_warning(
                        f"Input pages '{config.input.pages}' has no effect: no PDF inputs found"
                    )

        if context.check_paths:
            for name, profile in config.outputs.items():
                output_dir = profile.output_dir
                if output_dir.exists() and not output_dir.is_dir():
                    result.add_error(
                        f"Profile '{name}': output path exists but is not a directory: {output_dir}"
                    )

        return result


def validate_config(
    config: "Config",
    context: ValidationContext | None = None,
) -> ValidationResult:
    """Validate a configuration with a fresh ConfigValidator."""
    return ConfigValidator().validate(config, context)
