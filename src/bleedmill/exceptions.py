"""Unified exception hierarchy for bleedmill.

All bleedmill exceptions inherit from BleedMillError, enabling:
- Catching all bleedmill errors with `except BleedMillError`
- Error context preservation via the `context` attribute
- Causality chains via `raise ... from e` patterns

Collaborator failures (decode, fetch, render, export) have their own
classes so callers never confuse them with pipeline errors.
"""

from typing import Any


class BleedMillError(Exception):
    """Base exception for all bleedmill errors.

    Args:
        message: Human-readable error description
        context: Optional dict of contextual information (file, step, etc.)
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}

    def __str__(self) -> str:
        base = super().__str__()
        if self.context:
            details = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} [{details}]"
        return base


class ConfigError(BleedMillError):
    """Raised when configuration is invalid or cannot be loaded.

    Attributes:
        profile: Name of the output profile where the error occurred.
        field: Name of the field with the error.
        suggestion: Suggested fix for the error.
    """

    def __init__(
        self,
        message: str,
        profile: str | None = None,
        field: str | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.profile = profile
        self.field = field
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        parts = []

        if self.profile:
            location = f"In profile '{self.profile}'"
            if self.field:
                location += f", field '{self.field}'"
            parts.append(location)
        elif self.field:
            parts.append(f"In field '{self.field}'")

        parts.append(self.message)

        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")

        return "\n".join(parts)


class InvalidOptionsError(BleedMillError):
    """Raised when processing options fail boundary validation."""


class NoImageLoadedError(BleedMillError):
    """Raised when the pipeline runs before any source image exists."""


class UnsupportedOutputRouteError(BleedMillError):
    """Raised when PDF output is requested through the raster encoder."""


class TransformError(BleedMillError):
    """Raised when a pipeline stage cannot be built or applied."""


class DecodeError(BleedMillError):
    """Raised when source bytes cannot be decoded into an image."""


class RenderError(BleedMillError):
    """Raised when a PDF page cannot be rasterized."""


class FetchError(BleedMillError):
    """Raised when source bytes cannot be read from disk or downloaded."""


class ExportError(BleedMillError):
    """Raised when writing a PDF or image file fails."""


class ProcessingError(BleedMillError):
    """Raised when batch processing of an input fails."""


class PageSelectionError(BleedMillError):
    """Raised when a page selection specification is invalid."""
