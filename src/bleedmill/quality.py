"""Heuristic image quality checks: resolution, aspect ratio and file size.

Every table here is ordered and evaluated first-match-wins; some ranges
overlap, so the order is part of the rule.
"""

import math
from dataclasses import dataclass
from enum import Enum

from bleedmill.exceptions import InvalidOptionsError


class QualityLevel(str, Enum):
    POOR = "poor"
    ACCEPTABLE = "acceptable"
    GOOD = "good"


# (min short side, min megapixels, level, label)
RESOLUTION_RULES = (
    (1080, 2.0, QualityLevel.GOOD, "High"),
    (720, 0.9, QualityLevel.ACCEPTABLE, "Medium"),
    (480, 0.0, QualityLevel.POOR, "Low"),
)

STANDARD_RATIOS = (
    (1.0, "1:1 (Square)"),
    (4.0 / 3.0, "4:3 (Standard)"),
    (3.0 / 2.0, "3:2 (Classic)"),
    (16.0 / 9.0, "16:9 (Widescreen)"),
    (16.0 / 10.0, "16:10 (Display)"),
    (21.0 / 9.0, "21:9 (Ultra-wide)"),
    (9.0 / 16.0, "9:16 (Portrait)"),
    (3.0 / 4.0, "3:4 (Portrait)"),
    (2.0 / 3.0, "2:3 (Portrait)"),
)

# Inclusive ratio ranges for display names
RATIO_NAMES = (
    (0.98, 1.02, "Square (1:1)"),
    (1.31, 1.35, "Standard (4:3)"),
    (1.48, 1.52, "Classic (3:2)"),
    (1.76, 1.80, "Widescreen (16:9)"),
    (1.58, 1.62, "Display (16:10)"),
    (2.33, 2.40, "Ultra-wide (21:9)"),
    (0.55, 0.58, "Portrait (9:16)"),
    (0.74, 0.76, "Portrait (3:4)"),
    (0.65, 0.68, "Portrait (2:3)"),
)

EXACT_RATIO_TOLERANCE = 0.02
NEAR_RATIO_TOLERANCE = 0.1

# Expected compressed size per megapixel, in MB
MIN_MB_PER_MEGAPIXEL = 0.1
MAX_MB_PER_MEGAPIXEL = 2.0


@dataclass
class ImageValidationResult:
    """Quality report for one image."""

    width: int
    height: int
    file_size_bytes: int
    file_size_mb: float = 0.0
    megapixels: float = 0.0

    aspect_ratio_width: int = 0
    aspect_ratio_height: int = 0
    aspect_ratio_name: str = ""

    resolution_quality: QualityLevel = QualityLevel.POOR
    resolution_message: str = ""

    aspect_ratio_quality: QualityLevel = QualityLevel.POOR
    aspect_ratio_message: str = ""

    file_size_quality: QualityLevel = QualityLevel.POOR
    file_size_message: str = ""

    overall_quality: QualityLevel = QualityLevel.POOR
    overall_message: str = ""


def get_aspect_ratio_name(width: int, height: int) -> str:
    ratio = width / height
    for low, high, name in RATIO_NAMES:
        if low <= ratio <= high:
            return name
    return "Custom"


def _check_resolution(result: ImageValidationResult) -> None:
    min_dimension = min(result.width, result.height)
    size = f"{result.width}x{result.height}"

    for min_side, min_megapixels, level, label in RESOLUTION_RULES:
        if min_dimension >= min_side and result.megapixels >= min_megapixels:
            result.resolution_quality = level
            # Low resolutions get an extra decimal so small sizes stay distinguishable
            precision = 2 if level == QualityLevel.POOR else 1
            result.resolution_message = f"{label} resolution ({size}, {result.megapixels:.{precision}f}MP)"
            return

    result.resolution_quality = QualityLevel.POOR
    result.resolution_message = f"Very low resolution ({size})"


def _check_aspect_ratio(result: ImageValidationResult) -> None:
    ratio = result.width / result.height
    target, name = min(STANDARD_RATIOS, key=lambda r: abs(ratio - r[0]))
    diff = abs(ratio - target)
    reduced = f"{result.aspect_ratio_width}:{result.aspect_ratio_height}"

    if diff < EXACT_RATIO_TOLERANCE:
        result.aspect_ratio_quality = QualityLevel.GOOD
        result.aspect_ratio_message = f"Standard ratio: {name}"
    elif diff < NEAR_RATIO_TOLERANCE:
        result.aspect_ratio_quality = QualityLevel.ACCEPTABLE
        result.aspect_ratio_message = f"Near {name} ({reduced})"
    else:
        result.aspect_ratio_quality = QualityLevel.ACCEPTABLE
        result.aspect_ratio_message = f"Custom ratio: {reduced}"


def _check_file_size(result: ImageValidationResult) -> None:
    size_mb = result.file_size_bytes / (1024.0 * 1024.0)
    result.file_size_mb = size_mb

    expected_min = result.megapixels * MIN_MB_PER_MEGAPIXEL
    expected_max = result.megapixels * MAX_MB_PER_MEGAPIXEL

    if expected_min <= size_mb <= expected_max:
        result.file_size_quality = QualityLevel.GOOD
        result.file_size_message = f"Good file size ({size_mb:.2f} MB)"
    elif size_mb < expected_min:
        result.file_size_quality = QualityLevel.POOR
        result.file_size_message = f"Possibly over-compressed ({size_mb:.2f} MB)"
    else:
        result.file_size_quality = QualityLevel.ACCEPTABLE
        result.file_size_message = f"Large file size ({size_mb:.2f} MB)"


def _summarize(result: ImageValidationResult) -> None:
    levels = (result.resolution_quality, result.aspect_ratio_quality, result.file_size_quality)

    if all(level == QualityLevel.GOOD for level in levels):
        result.overall_quality = QualityLevel.GOOD
        result.overall_message = "Excellent image quality"
    elif any(level == QualityLevel.POOR for level in levels):
        result.overall_quality = QualityLevel.POOR
        result.overall_message = "Image quality needs improvement"
    else:
        result.overall_quality = QualityLevel.ACCEPTABLE
        result.overall_message = "Acceptable image quality"


def validate_image(width: int, height: int, file_size_bytes: int) -> ImageValidationResult:
    """
    Grade an image's resolution, aspect ratio and file size.

    Args:
        width: Width in pixels
        height: Height in pixels
        file_size_bytes: Size of the encoded file

    Returns:
        ImageValidationResult with per-check and overall levels

    Raises:
        InvalidOptionsError: If a dimension is not positive
    """
    if width <= 0 or height <= 0:
        raise InvalidOptionsError(f"Image dimensions must be positive, got {width}x{height}")

    result = ImageValidationResult(width=width, height=height, file_size_bytes=file_size_bytes)

    divisor = math.gcd(width, height)
    result.aspect_ratio_width = width // divisor
    result.aspect_ratio_height = height // divisor
    result.aspect_ratio_name = get_aspect_ratio_name(width, height)
    result.megapixels = (width * height) / 1_000_000.0

    _check_resolution(result)
    _check_aspect_ratio(result)
    _check_file_size(result)
    _summarize(result)

    return result
