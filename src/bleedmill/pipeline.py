"""Pipeline orchestration for bleedmill.

Runs the stages requested by a ProcessingOptions value in the fixed order
resize, flip, bleed, rotate. Every stage takes the previous stage's image
and returns a new one, so the caller's source is never modified and no two
stages share an image.
"""

from pathlib import Path

from PIL import Image

from bleedmill.exceptions import NoImageLoadedError
from bleedmill.logging_config import get_logger
from bleedmill.options import ProcessingOptions
from bleedmill.transforms import build_transforms

logger = get_logger(__name__)


class TransformExecutor:
    """Manages stage execution with debug support."""

    def apply(
        self,
        image: Image.Image,
        options: ProcessingOptions,
        debug_output_dir: Path | None = None,
        debug_name: str = "image",
    ) -> Image.Image:
        """
        Run every triggered stage over an image.

        Args:
            image: Source image; not modified
            options: Requested transforms
            debug_output_dir: If set, save a PNG after each stage
            debug_name: Stem for debug output filenames

        Returns:
            A new RGBA image
        """
        stages = build_transforms(options)

        # The copy is owned by this run from here on
        current = image.convert("RGBA") if image.mode != "RGBA" else image.copy()

        if debug_output_dir:
            self._save_debug_image(current, debug_output_dir, debug_name, 0, "source")

        for step_num, stage in enumerate(stages, start=1):
            step_desc = stage.describe()
            before = current.size
            current = stage.apply(current)
            logger.debug(
                "Step %d %s: %dx%d -> %dx%d",
                step_num, step_desc, before[0], before[1], current.width, current.height,
            )

            if debug_output_dir:
                self._save_debug_image(current, debug_output_dir, debug_name, step_num, step_desc)

        return current

    def _save_debug_image(
        self,
        image: Image.Image,
        output_dir: Path,
        name: str,
        step_num: int,
        step_desc: str,
    ) -> None:
        """Save intermediate image for debugging."""
        debug_path = output_dir / f"{Path(name).stem}_step{step_num}_{step_desc}.png"
        output_dir.mkdir(parents=True, exist_ok=True)
        image.save(debug_path, format="PNG")
        logger.debug("Saved: %s", debug_path)


def describe_pipeline(options: ProcessingOptions) -> list[str]:
    """Describe the stages `options` would run, in order."""
    return [stage.describe() for stage in build_transforms(options)]


def process_image(
    source: Image.Image | None,
    options: ProcessingOptions,
    debug_output_dir: Path | None = None,
    debug_name: str = "image",
) -> Image.Image:
    """
    Apply all processing options and return a new processed image.

    Raises:
        NoImageLoadedError: If `source` is None
    """
    if source is None:
        raise NoImageLoadedError("No image loaded.")
    return TransformExecutor().apply(source, options, debug_output_dir, debug_name)


class ImageProcessor:
    """Holds the currently loaded image and processes copies of it.

    Example:
        processor = ImageProcessor()
        processor.load_source("photo.jpg")
        preview = processor.process(ProcessingOptions(target_width=800))
        final = processor.process(ProcessingOptions(bleed_width=3, bleed_height=3))
    """

    def __init__(self):
        self._image: Image.Image | None = None
        self.source_name: str | None = None

    @property
    def has_image(self) -> bool:
        return self._image is not None

    @property
    def width(self) -> int:
        return self._image.width if self._image is not None else 0

    @property
    def height(self) -> int:
        return self._image.height if self._image is not None else 0

    def load_image(self, image: Image.Image, name: str | None = None) -> None:
        """Take ownership of an already decoded image."""
        self._image = image.convert("RGBA") if image.mode != "RGBA" else image
        self.source_name = name

    def load_bytes(self, data: bytes, hint: str | None = None) -> None:
        """Decode raw bytes and load the result."""
        from bleedmill.codec import decode_image

        self.load_image(decode_image(data, hint=hint), name=hint)

    def load_source(self, location: str | Path, page_index: int = 0, scale: float | None = None) -> None:
        """Load from a path or URL, rasterizing PDFs."""
        from bleedmill.sources import load_image

        kwargs = {} if scale is None else {"scale": scale}
        self.load_image(load_image(location, page_index=page_index, **kwargs), name=str(location))

    def clone_current(self) -> Image.Image | None:
        """Return a copy of the loaded image, or None."""
        return self._image.copy() if self._image is not None else None

    def process(self, options: ProcessingOptions, debug_output_dir: Path | None = None) -> Image.Image:
        """
        Process a copy of the loaded image.

        Raises:
            NoImageLoadedError: If nothing has been loaded
        """
        if self._image is None:
            raise NoImageLoadedError("No image loaded.")
        return process_image(
            self._image, options, debug_output_dir, debug_name=self.source_name or "image"
        )

    def clear(self) -> None:
        """Drop the loaded image."""
        self._image = None
        self.source_name = None
