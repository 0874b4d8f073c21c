"""Integration tests for bleedmill: config file to written outputs."""

import numpy as np
import pytest
import yaml
from PIL import Image
from pypdf import PdfReader

from bleedmill.cli import main
from bleedmill.config import load_config
from bleedmill.processor import process
from bleedmill.units import mm_to_points


def _write_config(path, data):
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def artwork(temp_dir):
    """A 100x100 card whose left half is red and right half is blue."""
    pixels = np.zeros((100, 100, 4), dtype=np.uint8)
    pixels[:, :50] = (255, 0, 0, 255)
    pixels[:, 50:] = (0, 0, 255, 255)
    path = temp_dir / "input" / "card.png"
    path.parent.mkdir()
    Image.fromarray(pixels).save(path)
    return path


@pytest.mark.integration
class TestPipelineIntegration:
    """End-to-end runs with real image encoding."""

    def test_resize_and_mirror_bleed(self, artwork, temp_dir):
        config_path = _write_config(
            temp_dir / "config.yaml",
            {
                "outputs": {
                    "print": {
                        "resize": 200,
                        "bleed": {"width": "5mm", "height": "5mm", "dpi": 300, "mirror": True},
                    }
                }
            },
        )
        output_dir = temp_dir / "output"

        summary = process(load_config(config_path), artwork.parent, output_dir)

        assert summary.succeeded == 1
        with Image.open(output_dir / "card_print.png") as img:
            assert img.size == (318, 318)
            # Left bleed mirrors the red half, right bleed mirrors the blue half
            assert img.getpixel((0, 159))[:3] == (255, 0, 0)
            assert img.getpixel((317, 159))[:3] == (0, 0, 255)

    def test_flip_moves_colors_into_bleed(self, artwork, temp_dir):
        config_path = _write_config(
            temp_dir / "config.yaml",
            {
                "outputs": {
                    "flipped": {
                        "flip": "horizontal",
                        "bleed": {"width": "10px", "height": "0px", "mirror": False},
                    }
                }
            },
        )
        output_dir = temp_dir / "output"

        process(load_config(config_path), artwork, output_dir)

        with Image.open(output_dir / "card_flipped.png") as img:
            assert img.size == (120, 100)
            assert img.getpixel((0, 50))[:3] == (0, 0, 255)
            assert img.getpixel((119, 50))[:3] == (255, 0, 0)

    def test_rotation_and_jpeg(self, artwork, temp_dir):
        config_path = _write_config(
            temp_dir / "config.yaml",
            {"outputs": {"web": {"rotate": 90, "format": "jpg", "jpeg_quality": 70, "filename_prefix": "web_"}}},
        )
        output_dir = temp_dir / "output"

        process(load_config(config_path), artwork, output_dir)

        with Image.open(output_dir / "web_card_web.jpg") as img:
            assert img.format == "JPEG"
            assert img.size == (100, 100)
            # Red left half is on top after a clockwise quarter turn
            red, _, blue = img.getpixel((50, 10))
            assert red > 200 and blue < 60

    def test_pdf_on_fixed_page(self, artwork, temp_dir):
        config_path = _write_config(
            temp_dir / "config.yaml",
            {
                "outputs": {
                    "sheet": {
                        "bleed": "3mm",
                        "format": "pdf",
                        "pdf": {"page_width": "100mm", "page_height": "150mm"},
                    }
                }
            },
        )
        output_dir = temp_dir / "output"

        process(load_config(config_path), artwork, output_dir)

        reader = PdfReader(str(output_dir / "card_sheet.pdf"))
        assert len(reader.pages) == 1
        page = reader.pages[0]
        assert float(page.mediabox.width) == pytest.approx(mm_to_points(100), abs=0.05)
        assert float(page.mediabox.height) == pytest.approx(mm_to_points(150), abs=0.05)
        assert reader.metadata.creator == "bleedmill"

    def test_pdf_sized_from_dpi(self, artwork, temp_dir):
        config_path = _write_config(
            temp_dir / "config.yaml",
            {"outputs": {"print": {"bleed": {"width": 50, "height": 50, "unit": "px", "dpi": 150}, "format": "pdf"}}},
        )
        output_dir = temp_dir / "output"

        process(load_config(config_path), artwork, output_dir)

        page = PdfReader(str(output_dir / "card_print.pdf")).pages[0]
        # 200 px at 150 DPI is 96 pt
        assert float(page.mediabox.width) == pytest.approx(96.0, abs=0.5)

    def test_debug_images(self, artwork, temp_dir):
        config_path = _write_config(
            temp_dir / "config.yaml",
            {"outputs": {"dbg": {"resize": 50, "rotate": 45, "debug": True}}},
        )
        output_dir = temp_dir / "output"

        process(load_config(config_path), artwork, output_dir)

        names = sorted(p.name for p in output_dir.glob("*_step*.png"))
        assert names == [
            "card_dbg_step0_source.png",
            "card_dbg_step1_resize_50xauto.png",
            "card_dbg_step2_rotate45.png",
        ]

    def test_cli_round_trip(self, artwork, temp_dir):
        config_path = _write_config(
            temp_dir / "config.yaml",
            {"settings": {"on_error": "stop"}, "outputs": {"a": {"flip": "both"}, "b": {"resize": {"height": 10}}}},
        )
        output_dir = temp_dir / "output"

        assert main(["-c", str(config_path), "--validate", "--strict", "-i", str(artwork.parent)]) == 0
        assert main(["-c", str(config_path), "-i", str(artwork.parent), "-o", str(output_dir)]) == 0
        assert sorted(p.name for p in output_dir.iterdir()) == ["card_a.png", "card_b.png"]
