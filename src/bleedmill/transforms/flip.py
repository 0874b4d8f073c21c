"""Flip stage for bleedmill."""

from PIL import Image

from bleedmill.options import ProcessingOptions
from bleedmill.transforms.base import BaseTransform
from bleedmill.transforms.registry import register_transform


def flip_image(image: Image.Image, horizontal: bool = False, vertical: bool = False) -> Image.Image:
    """
    Mirror an image along one or both axes.

    Flipping both axes is a 180 degree point reflection. This is a pure
    reindex; no pixel values are resampled.

    Returns:
        A new image
    """
    result = image.transpose(Image.Transpose.FLIP_LEFT_RIGHT) if horizontal else image.copy()
    if vertical:
        result = result.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
    return result


@register_transform("flip")
class FlipTransform(BaseTransform):
    """Stage mirroring the image horizontally and/or vertically."""

    def __init__(self, horizontal: bool, vertical: bool):
        self.horizontal = horizontal
        self.vertical = vertical

    @classmethod
    def is_triggered(cls, options: ProcessingOptions) -> bool:
        return options.has_flip

    @classmethod
    def from_options(cls, options: ProcessingOptions) -> "FlipTransform":
        return cls(options.flip_horizontal, options.flip_vertical)

    def apply(self, image: Image.Image) -> Image.Image:
        return flip_image(image, self.horizontal, self.vertical)

    def describe(self) -> str:
        axes = []
        if self.horizontal:
            axes.append("h")
        if self.vertical:
            axes.append("v")
        return f"flip_{''.join(axes) or 'none'}"
