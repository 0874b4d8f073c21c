"""Base class for pipeline stages."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from PIL import Image

if TYPE_CHECKING:
    from bleedmill.options import ProcessingOptions


class BaseTransform(ABC):
    """Abstract base class for all pipeline stages.

    A stage is built from a ProcessingOptions value, consumes one image and
    returns a newly allocated one. It never mutates its input.
    """

    # The stage name (e.g., "resize", "bleed")
    # Set by @register_transform decorator
    name: str = ""

    @classmethod
    @abstractmethod
    def is_triggered(cls, options: "ProcessingOptions") -> bool:
        """Return True if the options request this stage."""

    @classmethod
    @abstractmethod
    def from_options(cls, options: "ProcessingOptions") -> "BaseTransform":
        """Create a stage instance from processing options."""

    @abstractmethod
    def apply(self, image: Image.Image) -> Image.Image:
        """
        Apply this stage to an image.

        Args:
            image: Input image, owned by the caller and left untouched

        Returns:
            A new image
        """

    @abstractmethod
    def describe(self) -> str:
        """Return a short description for logs and debug filenames.

        Returns:
            Short description string (e.g., "resize_200x150", "bleed_59x59_mirror")
        """
