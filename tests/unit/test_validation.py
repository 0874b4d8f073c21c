"""Tests for bleedmill.validation module."""

from pathlib import Path

import pytest
from PIL import Image

from bleedmill.config import Config, InputConfig, OutputProfile, PdfPageConfig
from bleedmill.exceptions import ConfigError
from bleedmill.options import ProcessingOptions
from bleedmill.validation import ConfigValidator, ValidationContext, ValidationResult, validate_config


def _config(**profiles):
    if not profiles:
        profiles = {"print": OutputProfile(options=ProcessingOptions(target_width=100))}
    return Config(outputs=profiles)


class TestValidationResult:
    """Test result accumulation."""

    def test_add_error_invalidates(self):
        result = ValidationResult()
        result.add_error("bad")
        assert not result.valid
        assert result.errors == ["bad"]

    def test_warning_keeps_valid(self):
        result = ValidationResult()
        result.add_warning("hmm")
        assert result.valid

    def test_merge(self):
        result = ValidationResult()
        other = ValidationResult()
        other.add_error("bad")
        other.add_warning("hmm")
        result.merge(other)
        assert not result.valid
        assert result.errors == ["bad"]
        assert result.warnings == ["hmm"]


class TestStructure:
    """Test structural checks."""

    def test_valid_config(self):
        result = validate_config(_config())
        assert result.valid
        assert result.warnings == []

    def test_no_outputs(self):
        result = validate_config(Config())
        assert not result.valid
        assert "At least one output profile" in result.errors[0]

    def test_all_disabled_warns(self):
        config = _config(a=OutputProfile(options=ProcessingOptions(target_width=10), enabled=False))
        result = validate_config(config)
        assert result.valid
        assert any("disabled" in w for w in result.warnings)


class TestSemantics:
    """Test checks for settings with no effect or invalid values."""

    def test_invalid_pages(self):
        config = _config()
        config.input = InputConfig(pages="middle")
        result = validate_config(config)
        assert not result.valid
        assert result.errors[0].startswith("Input pages:")

    def test_non_positive_pdf_scale(self):
        config = _config()
        config.input = InputConfig(pdf_scale=0)
        assert not validate_config(config).valid

    def test_no_operations_warns(self):
        result = validate_config(_config(copy=OutputProfile()))
        assert any("no operations" in w for w in result.warnings)

    def test_jpeg_quality_ignored_for_png(self):
        profile = OutputProfile(options=ProcessingOptions(target_width=10, jpeg_quality=50))
        result = validate_config(_config(p=profile))
        assert any("jpeg_quality is ignored for png" in w for w in result.warnings)

    def test_jpeg_quality_used_for_jpeg(self):
        profile = OutputProfile(options=ProcessingOptions(target_width=10, jpeg_quality=50, output_format="jpeg"))
        assert validate_config(_config(p=profile)).warnings == []

    def test_pdf_page_ignored_for_png(self):
        profile = OutputProfile(options=ProcessingOptions(target_width=10), pdf_page=PdfPageConfig())
        result = validate_config(_config(p=profile))
        assert any("pdf page settings are ignored" in w for w in result.warnings)

    def test_bleed_rounds_to_zero(self):
        profile = OutputProfile(options=ProcessingOptions(bleed_width=0.01, bleed_height=0.01, dpi=72))
        result = validate_config(_config(p=profile))
        assert any("rounds to 0 pixels" in w for w in result.warnings)

    def test_stretch_single_target(self):
        profile = OutputProfile(options=ProcessingOptions(target_width=10, maintain_aspect_ratio=False))
        result = validate_config(_config(p=profile))
        assert any("keep_aspect" in w for w in result.warnings)


class TestOperational:
    """Test path checks."""

    def test_missing_input(self, temp_dir):
        context = ValidationContext(input_path=temp_dir / "missing")
        result = validate_config(_config(), context)
        assert not result.valid
        assert "Input path does not exist" in result.errors[0]

    def test_empty_input_dir_warns(self, temp_dir):
        result = validate_config(_config(), ValidationContext(input_path=temp_dir))
        assert result.valid
        assert any("No supported files" in w for w in result.warnings)

    def test_input_with_images(self, temp_png):
        result = validate_config(_config(), ValidationContext(input_path=temp_png.parent))
        assert result.valid
        assert result.warnings == []

    def test_pages_without_pdf_inputs_warns(self, temp_png):
        config = _config()
        config.input = InputConfig(pages="all")
        result = validate_config(config, ValidationContext(input_path=temp_png))
        assert any("no PDF inputs" in w for w in result.warnings)

    def test_pages_with_pdf_input(self, temp_pdf):
        config = _config()
        config.input = InputConfig(pages="all")
        result = validate_config(config, ValidationContext(input_path=temp_pdf))
        assert result.warnings == []

    def test_output_path_is_file(self, temp_dir):
        blocker = temp_dir / "out"
        blocker.write_text("x")
        profile = OutputProfile(options=ProcessingOptions(target_width=10), output_dir=blocker)
        result = validate_config(_config(p=profile), ValidationContext())
        assert any("not a directory" in e for e in result.errors)

    def test_check_paths_disabled(self, temp_dir):
        context = ValidationContext(input_path=temp_dir / "missing", check_paths=False)
        assert validate_config(_config(), context).valid

    def test_operational_skipped_without_context(self):
        config = _config()
        config.input = InputConfig(path=Path("/does/not/exist"))
        assert validate_config(config).valid


class TestValidateOrRaise:
    """Test the raising entry point."""

    def test_raises(self):
        with pytest.raises(ConfigError, match="At least one output profile"):
            ConfigValidator().validate_or_raise(Config())

    def test_passes(self):
        ConfigValidator().validate_or_raise(_config())

    def test_unsupported_files_not_counted(self, temp_dir):
        (temp_dir / "notes.txt").write_text("x")
        Image.new("RGB", (5, 5)).save(temp_dir / "a.bmp")
        result = validate_config(_config(), ValidationContext(input_path=temp_dir))
        assert result.warnings == []
