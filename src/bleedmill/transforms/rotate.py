"""Rotate stage for bleedmill."""

from PIL import Image

from bleedmill.options import ProcessingOptions
from bleedmill.transforms.base import BaseTransform
from bleedmill.transforms.registry import register_transform

# Fill for canvas corners uncovered by a non-right-angle rotation
TRANSPARENT = (0, 0, 0, 0)

# Clockwise quarter turns map to these lossless transpositions
_QUARTER_TURNS = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


def rotate_image(image: Image.Image, angle: float) -> Image.Image:
    """
    Rotate an image clockwise about its center.

    The output canvas grows to bound the rotated content, so nothing is
    clipped; uncovered corners are transparent. Multiples of 90 degrees are
    exact transpositions and never resample.

    Args:
        image: Source image (left untouched)
        angle: Clockwise rotation in degrees, any real value

    Returns:
        A new image
    """
    normalized = angle % 360.0

    if normalized == 0:
        return image.copy()
    if normalized in _QUARTER_TURNS:
        return image.transpose(_QUARTER_TURNS[int(normalized)])

    if image.mode != "RGBA":
        image = image.convert("RGBA")

    # Pillow rotates counter-clockwise
    return image.rotate(
        -normalized,
        resample=Image.Resampling.BICUBIC,
        expand=True,
        fillcolor=TRANSPARENT,
    )


@register_transform("rotate")
class RotateTransform(BaseTransform):
    """Stage rotating by an arbitrary angle."""

    def __init__(self, angle: float):
        self.angle = angle

    @classmethod
    def is_triggered(cls, options: ProcessingOptions) -> bool:
        return options.needs_rotation

    @classmethod
    def from_options(cls, options: ProcessingOptions) -> "RotateTransform":
        return cls(options.rotation_angle)

    def apply(self, image: Image.Image) -> Image.Image:
        return rotate_image(image, self.angle)

    def describe(self) -> str:
        return f"rotate{self.angle:g}"
