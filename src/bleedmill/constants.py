"""Centralized constants for bleedmill."""

from typing import Literal

# Error handling behavior
ON_ERROR_OPTIONS = ("continue", "stop")
OnErrorOption = Literal["continue", "stop"]

# Pipeline stages, in the order they are applied
PIPELINE_ORDER = ("resize", "flip", "bleed", "rotate")

# Angles below this magnitude (degrees) do not trigger the rotate stage
ROTATION_EPSILON = 0.01

# Unit conversion
MM_PER_INCH = 25.4
POINTS_PER_INCH = 72.0

DEFAULT_DPI = 300
DEFAULT_JPEG_QUALITY = 90
JPEG_QUALITY_RANGE = (1, 100)

# pdf2image/PDF renderers treat scale 1.0 as 72 DPI
DEFAULT_PDF_SCALE = 2.0

# Decodable input extensions for directory scans
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".tif", ".tiff", ".webp")
PDF_EXTENSIONS = (".pdf",)

CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/bmp": ".bmp",
    "image/webp": ".webp",
    "application/pdf": ".pdf",
}

HTTP_USER_AGENT = "Mozilla/5.0 (compatible) bleedmill/1.0"
HTTP_TIMEOUT = 30.0

PDF_TITLE = "Image Export"
PDF_CREATOR = "bleedmill"
