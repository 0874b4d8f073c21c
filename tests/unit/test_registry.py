"""Tests for bleedmill.transforms.registry module."""

import pytest

from bleedmill.exceptions import TransformError
from bleedmill.options import ProcessingOptions
from bleedmill.transforms import (
    BaseTransform,
    BleedTransform,
    FlipTransform,
    ResizeTransform,
    RotateTransform,
    TransformRegistry,
    build_transforms,
    get_transform,
    list_transforms,
    register_transform,
)


class TestRegistry:
    """Test stage registration and lookup."""

    def test_builtin_stages_registered(self):
        assert list_transforms() == ["bleed", "flip", "resize", "rotate"]

    def test_get_transform(self):
        assert get_transform("resize") is ResizeTransform
        assert get_transform("rotate") is RotateTransform

    def test_registered_classes_carry_name(self):
        assert BleedTransform.name == "bleed"
        assert FlipTransform.name == "flip"

    def test_unknown_transform_raises(self):
        with pytest.raises(TransformError, match="Unknown transform type: 'crop'") as exc_info:
            get_transform("crop")
        assert exc_info.value.context["transform_type"] == "crop"

    def test_is_registered(self):
        assert TransformRegistry.is_registered("bleed")
        assert not TransformRegistry.is_registered("crop")

    def test_register_custom_stage(self, monkeypatch):
        monkeypatch.setattr(TransformRegistry, "_handlers", dict(TransformRegistry._handlers))

        @register_transform("grayscale")
        class GrayscaleTransform(BaseTransform):
            @classmethod
            def is_triggered(cls, options):
                return True

            @classmethod
            def from_options(cls, options):
                return cls()

            def apply(self, image):
                return image.convert("L")

            def describe(self):
                return "grayscale"

        assert get_transform("grayscale") is GrayscaleTransform
        assert GrayscaleTransform.name == "grayscale"
        # Only the fixed pipeline stages are ever built
        assert build_transforms(ProcessingOptions()) == []


class TestBuildTransforms:
    """Test stage selection and ordering."""

    def test_no_options_builds_nothing(self):
        assert build_transforms(ProcessingOptions()) == []

    def test_fixed_order(self):
        options = ProcessingOptions(
            rotation_angle=90,
            bleed_width=3,
            bleed_height=3,
            flip_horizontal=True,
            target_width=200,
        )
        stages = build_transforms(options)
        assert [type(stage) for stage in stages] == [
            ResizeTransform,
            FlipTransform,
            BleedTransform,
            RotateTransform,
        ]

    def test_only_triggered_stages(self):
        stages = build_transforms(ProcessingOptions(flip_vertical=True, rotation_angle=0.005))
        assert [stage.name for stage in stages] == ["flip"]
