"""Tests for bleedmill.pdf_export module."""

import pytest
from PIL import Image
from pypdf import PdfReader

from bleedmill.exceptions import ExportError
from bleedmill.pdf_export import compute_placement, export_to_pdf, export_to_pdf_page


def _page_size(path):
    page = PdfReader(str(path)).pages[0]
    return float(page.mediabox.width), float(page.mediabox.height)


class TestComputePlacement:
    """Test image placement geometry."""

    def test_fit_wider_image_letterboxes_vertically(self):
        x, y, w, h = compute_placement((200, 100), (100.0, 100.0))
        assert (w, h) == (100.0, 50.0)
        assert (x, y) == (0.0, 25.0)

    def test_fit_taller_image_pillarboxes(self):
        x, y, w, h = compute_placement((100, 200), (100.0, 100.0))
        assert (w, h) == (50.0, 100.0)
        assert (x, y) == (25.0, 0.0)

    def test_fit_upscales_small_image(self):
        _, _, w, h = compute_placement((10, 10), (200.0, 200.0))
        assert (w, h) == (200.0, 200.0)

    def test_native_size_centered(self):
        x, y, w, h = compute_placement((100, 50), (300.0, 150.0), fit_to_page=False)
        assert (w, h) == (100.0, 50.0)
        assert (x, y) == (100.0, 50.0)

    def test_native_size_can_overflow(self):
        x, y, w, h = compute_placement((400, 100), (200.0, 200.0), fit_to_page=False)
        assert w == 400.0
        assert x == -100.0

    def test_native_dpi(self):
        _, _, w, h = compute_placement((300, 150), (500.0, 500.0), fit_to_page=False, native_dpi=300)
        assert w == pytest.approx(72.0)
        assert h == pytest.approx(36.0)


class TestExportToPdf:
    """Test DPI-sized PDF export."""

    def test_page_size_from_dpi(self, temp_dir):
        path = temp_dir / "out.pdf"
        export_to_pdf(Image.new("RGBA", (600, 300), (255, 0, 0, 255)), path, dpi=300)

        width, height = _page_size(path)
        # 2in x 1in
        assert width == pytest.approx(144.0, abs=0.5)
        assert height == pytest.approx(72.0, abs=0.5)

    def test_metadata(self, temp_dir):
        path = temp_dir / "out.pdf"
        export_to_pdf(Image.new("RGB", (10, 10)), path)
        metadata = PdfReader(str(path)).metadata
        assert metadata.title == "Image Export"
        assert metadata.creator == "bleedmill"

    def test_creates_parent_directories(self, temp_dir):
        path = temp_dir / "a" / "b" / "out.pdf"
        export_to_pdf(Image.new("RGBA", (10, 10)), path)
        assert path.exists()

    def test_invalid_dpi_raises(self, temp_dir):
        with pytest.raises(ExportError, match="DPI"):
            export_to_pdf(Image.new("RGB", (10, 10)), temp_dir / "out.pdf", dpi=0)

    def test_unwritable_path_raises(self, temp_dir):
        blocker = temp_dir / "file"
        blocker.write_text("x")
        with pytest.raises(ExportError):
            export_to_pdf(Image.new("RGB", (10, 10)), blocker / "out.pdf")


class TestExportToPdfPage:
    """Test fixed-page PDF export."""

    def test_a4_page(self, temp_dir):
        path = temp_dir / "a4.pdf"
        export_to_pdf_page(Image.new("RGBA", (300, 200), (0, 0, 255, 255)), path, 210, 297)

        width, height = _page_size(path)
        assert width == pytest.approx(595.28, abs=0.05)
        assert height == pytest.approx(841.89, abs=0.05)

    def test_native_size_page(self, temp_dir):
        path = temp_dir / "native.pdf"
        export_to_pdf_page(Image.new("RGB", (50, 50)), path, 100, 100, fit_to_page=False)
        assert len(PdfReader(str(path)).pages) == 1

    def test_metadata(self, temp_dir):
        path = temp_dir / "a4.pdf"
        export_to_pdf_page(Image.new("RGB", (20, 20)), path, 210, 297)
        metadata = PdfReader(str(path)).metadata
        assert metadata.title == "Image Export"
        assert metadata.creator == "bleedmill"

    def test_invalid_page_size_raises(self, temp_dir):
        with pytest.raises(ExportError, match="Page size"):
            export_to_pdf_page(Image.new("RGB", (20, 20)), temp_dir / "x.pdf", 0, 297)
