"""Bleed stage for bleedmill.

Grows the canvas on all four sides and fills the new border from the
source's boundary pixels, either by mirroring them outward or by
replicating the outermost row/column.

The border is computed with one index map per axis: output column x reads
source column cols[x] and output row y reads source row rows[y]. Edges and
corners then fall out of a single gather, and corners always apply the
edge rule on both axes independently.
"""

import numpy as np
from PIL import Image

from bleedmill.exceptions import InvalidOptionsError, TransformError
from bleedmill.options import ProcessingOptions
from bleedmill.transforms.base import BaseTransform
from bleedmill.transforms.registry import register_transform

# Modes numpy round-trips through Image.fromarray unchanged
_ARRAY_MODES = ("RGBA", "RGB", "L")


def bleed_index_map(src_extent: int, bleed: int, mirror: bool) -> np.ndarray:
    """
    Map every output index along one axis to a source index.

    Args:
        src_extent: Source width or height
        bleed: Border size added on each side of this axis
        mirror: Reflect boundary pixels instead of replicating the edge

    Returns:
        Integer array of length src_extent + 2 * bleed with values
        clamped to [0, src_extent - 1]
    """
    k = np.arange(bleed, dtype=np.intp)
    if mirror:
        # Near border reflects inward from the edge; a bleed wider than the
        # source clamps to the far boundary instead of running off the end.
        near = np.minimum(bleed - 1 - k, src_extent - 1)
        far = np.maximum(src_extent - 1 - k, 0)
    else:
        near = np.zeros(bleed, dtype=np.intp)
        far = np.full(bleed, src_extent - 1, dtype=np.intp)
    return np.concatenate([near, np.arange(src_extent, dtype=np.intp), far])


def add_bleed(image: Image.Image, bleed_width: int, bleed_height: int, mirror: bool = True) -> Image.Image:
    """
    Add a synthesized border around an image.

    Args:
        image: Source image (left untouched)
        bleed_width: Pixels added on the left and on the right
        bleed_height: Pixels added on the top and on the bottom
        mirror: If True, mirror edge pixels; otherwise extend edge pixels

    Returns:
        A new image of size (width + 2 * bleed_width, height + 2 * bleed_height)
        with the source copied unchanged at offset (bleed_width, bleed_height)

    Raises:
        InvalidOptionsError: If a bleed is negative
        TransformError: If the source image is empty
    """
    if bleed_width < 0 or bleed_height < 0:
        raise InvalidOptionsError(
            f"Bleed must be non-negative, got {bleed_width}x{bleed_height}",
            context={"bleed_width": bleed_width, "bleed_height": bleed_height},
        )

    if bleed_width == 0 and bleed_height == 0:
        return image.copy()

    width, height = image.size
    if width == 0 or height == 0:
        raise TransformError("Cannot add bleed to an empty image", context={"size": f"{width}x{height}"})

    if image.mode not in _ARRAY_MODES:
        image = image.convert("RGBA")

    pixels = np.asarray(image)
    rows = bleed_index_map(height, bleed_height, mirror)
    cols = bleed_index_map(width, bleed_width, mirror)

    return Image.fromarray(np.ascontiguousarray(pixels[np.ix_(rows, cols)]))


@register_transform("bleed")
class BleedTransform(BaseTransform):
    """Stage adding mirrored or edge-extended bleed."""

    def __init__(self, bleed_width: int, bleed_height: int, mirror: bool = True):
        self.bleed_width = bleed_width
        self.bleed_height = bleed_height
        self.mirror = mirror

    @classmethod
    def is_triggered(cls, options: ProcessingOptions) -> bool:
        return options.has_bleed

    @classmethod
    def from_options(cls, options: ProcessingOptions) -> "BleedTransform":
        return cls(options.bleed_width_pixels, options.bleed_height_pixels, options.mirror_bleed)

    def apply(self, image: Image.Image) -> Image.Image:
        return add_bleed(image, self.bleed_width, self.bleed_height, self.mirror)

    def describe(self) -> str:
        mode = "mirror" if self.mirror else "extend"
        return f"bleed_{self.bleed_width}x{self.bleed_height}_{mode}"
