"""Shared fixtures for bleedmill tests."""

import logging
import shutil
import tempfile
from pathlib import Path

import numpy as np
import pytest
import yaml
from PIL import Image


# === Logging ===

@pytest.fixture(autouse=True)
def reset_logging():
    """Detach handlers installed by setup_logging() so streams do not leak between tests."""
    yield
    logger = logging.getLogger("bleedmill")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)


# === Path/Directory Fixtures ===

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


# === Image Fixtures ===

def _numbered_image(width: int, height: int) -> Image.Image:
    """RGBA image whose pixel (x, y) is (x, y, 0, 255)."""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = np.arange(width, dtype=np.uint8)[np.newaxis, :]
    pixels[..., 1] = np.arange(height, dtype=np.uint8)[:, np.newaxis]
    pixels[..., 3] = 255
    return Image.fromarray(pixels)


@pytest.fixture
def numbered_image():
    """4x4 RGBA image with coordinates encoded in the red and green channels."""
    return _numbered_image(4, 4)


@pytest.fixture
def wide_image():
    """4x2 RGBA numbered image."""
    return _numbered_image(4, 2)


@pytest.fixture
def square_image():
    """100x100 opaque RGBA gradient."""
    ramp = np.linspace(0, 255, 100, dtype=np.uint8)
    pixels = np.zeros((100, 100, 4), dtype=np.uint8)
    pixels[..., 0] = ramp[np.newaxis, :]
    pixels[..., 2] = ramp[:, np.newaxis]
    pixels[..., 3] = 255
    return Image.fromarray(pixels)


@pytest.fixture
def temp_png(temp_dir):
    """Write a 200x100 PNG and return its path."""
    path = temp_dir / "photo.png"
    Image.new("RGBA", (200, 100), (200, 30, 30, 255)).save(path, format="PNG")
    return path


@pytest.fixture
def temp_jpeg(temp_dir):
    """Write a 120x80 JPEG and return its path."""
    path = temp_dir / "photo.jpg"
    Image.new("RGB", (120, 80), (30, 200, 30)).save(path, format="JPEG")
    return path


# === PDF Fixtures ===

@pytest.fixture
def pdf_bytes():
    """A 3-page blank PDF as bytes."""
    import io

    from pypdf import PdfWriter

    writer = PdfWriter()
    for _ in range(3):
        writer.add_blank_page(width=612, height=792)  # Letter size
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
def temp_pdf(temp_dir, pdf_bytes):
    """Write the 3-page PDF to disk."""
    path = temp_dir / "document.pdf"
    path.write_bytes(pdf_bytes)
    return path


@pytest.fixture
def mock_render():
    """Replace pdf2image rendering with a 60x80 white page per call."""
    from unittest.mock import patch

    def fake_convert(pdf_bytes, dpi, first_page, last_page):
        return [Image.new("RGB", (60, 80), (255, 255, 255))]

    with patch("pdf2image.convert_from_bytes", side_effect=fake_convert) as mock:
        yield mock


# === Config Fixtures ===

@pytest.fixture
def minimal_config_dict():
    """Minimal valid configuration dictionary."""
    return {
        "version": 1,
        "outputs": {
            "default": {
                "format": "png",
            }
        },
    }


@pytest.fixture
def full_config_dict():
    """Full configuration dictionary with all options."""
    return {
        "version": 1,
        "settings": {
            "on_error": "stop",
        },
        "input": {
            "path": "./input",
            "pattern": "*.png",
            "pages": "all",
            "pdf_scale": 3.0,
        },
        "outputs": {
            "print": {
                "output_dir": "./output",
                "filename_prefix": "pre_",
                "filename_suffix": "_suf",
                "resize": {"width": 1200, "keep_aspect": True},
                "bleed": {"width": "3mm", "height": "3mm", "dpi": 300, "mirror": False},
                "flip": "horizontal",
                "rotate": 90,
                "format": "pdf",
                "pdf": {"page_width": "210mm", "page_height": "297mm", "fit": False},
                "debug": True,
            }
        },
    }


@pytest.fixture
def temp_config_file(temp_dir, minimal_config_dict):
    """Create a temporary config file."""
    config_path = temp_dir / "config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(minimal_config_dict, f)
    return config_path


@pytest.fixture
def full_config_file(temp_dir, full_config_dict):
    """Create a temporary full config file."""
    config_path = temp_dir / "full_config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(full_config_dict, f)
    return config_path
