"""Resize stage for bleedmill."""

from PIL import Image

from bleedmill.exceptions import InvalidOptionsError
from bleedmill.options import ProcessingOptions
from bleedmill.transforms.base import BaseTransform
from bleedmill.transforms.registry import register_transform
from bleedmill.units import round_half_away


def compute_resize_dimensions(
    source_size: tuple[int, int],
    target_width: int | None,
    target_height: int | None,
    maintain_aspect_ratio: bool = True,
) -> tuple[int, int]:
    """
    Reconcile a resize request with the source aspect ratio.

    With the ratio locked, a single target derives the other side from the
    source aspect. With both targets set, the side that constrains the fit
    keeps its requested value and the other side is derived, so the result
    never exceeds the request on either axis. Without the ratio lock, the
    requested sides are used verbatim and a missing side keeps its source
    value.

    Args:
        source_size: (width, height) of the source image
        target_width: Requested width in pixels, or None
        target_height: Requested height in pixels, or None
        maintain_aspect_ratio: Keep the source proportions

    Returns:
        (width, height) of the resized image

    Raises:
        InvalidOptionsError: If the reconciled size has a side below 1 pixel
    """
    src_width, src_height = source_size
    new_width = target_width if target_width is not None else src_width
    new_height = target_height if target_height is not None else src_height

    if maintain_aspect_ratio:
        aspect = src_width / src_height

        if target_width is not None and target_height is None:
            new_height = round_half_away(target_width / aspect)
        elif target_height is not None and target_width is None:
            new_width = round_half_away(target_height * aspect)
        elif target_width is not None and target_height is not None:
            if aspect > target_width / target_height:
                # Source is relatively wider: width constrains
                new_height = round_half_away(target_width / aspect)
            else:
                new_width = round_half_away(target_height * aspect)

    if new_width < 1 or new_height < 1:
        raise InvalidOptionsError(
            f"Resize of {src_width}x{src_height} to "
            f"{target_width}x{target_height} yields an empty image ({new_width}x{new_height})",
            context={"source": f"{src_width}x{src_height}"},
        )

    return new_width, new_height


def resize_image(
    image: Image.Image,
    target_width: int | None,
    target_height: int | None,
    maintain_aspect_ratio: bool = True,
) -> Image.Image:
    """
    Resize an image with Lanczos resampling.

    Returns:
        A new image of the reconciled size (a copy if nothing is requested)
    """
    if target_width is None and target_height is None:
        return image.copy()

    size = compute_resize_dimensions(image.size, target_width, target_height, maintain_aspect_ratio)
    return image.resize(size, Image.Resampling.LANCZOS)


@register_transform("resize")
class ResizeTransform(BaseTransform):
    """Stage resizing to the requested target dimensions."""

    def __init__(
        self,
        target_width: int | None,
        target_height: int | None,
        maintain_aspect_ratio: bool = True,
    ):
        self.target_width = target_width
        self.target_height = target_height
        self.maintain_aspect_ratio = maintain_aspect_ratio

    @classmethod
    def is_triggered(cls, options: ProcessingOptions) -> bool:
        return options.has_resize

    @classmethod
    def from_options(cls, options: ProcessingOptions) -> "ResizeTransform":
        return cls(options.target_width, options.target_height, options.maintain_aspect_ratio)

    def apply(self, image: Image.Image) -> Image.Image:
        return resize_image(image, self.target_width, self.target_height, self.maintain_aspect_ratio)

    def describe(self) -> str:
        width = self.target_width if self.target_width is not None else "auto"
        height = self.target_height if self.target_height is not None else "auto"
        mode = "" if self.maintain_aspect_ratio else "_stretch"
        return f"resize_{width}x{height}{mode}"
