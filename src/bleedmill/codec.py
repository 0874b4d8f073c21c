"""Raster decode and encode via Pillow."""

import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from bleedmill.constants import DEFAULT_JPEG_QUALITY
from bleedmill.exceptions import DecodeError, ExportError, UnsupportedOutputRouteError
from bleedmill.options import OutputFormat, ProcessingOptions

# OutputFormat -> Pillow format name
_PIL_FORMATS = {
    OutputFormat.PNG: "PNG",
    OutputFormat.JPEG: "JPEG",
}

OUTPUT_EXTENSIONS = {
    OutputFormat.PNG: ".png",
    OutputFormat.JPEG: ".jpg",
    OutputFormat.PDF: ".pdf",
}


def decode_image(data: bytes, hint: str | None = None) -> Image.Image:
    """
    Decode image bytes into an RGBA image.

    Args:
        data: Encoded image (PNG, JPEG, GIF, BMP, WebP, TIFF, ...)
        hint: Optional file name or content type, reported on failure

    Returns:
        A fully loaded RGBA image

    Raises:
        DecodeError: If the bytes are empty or not a decodable image
    """
    context = {"size": len(data), "hint": hint or "unknown"}
    if not data:
        raise DecodeError("Image data is empty", context=context)

    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            return image.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeError(f"Cannot decode image: {e}", context=context) from e


def encode_image(
    image: Image.Image,
    output_format: OutputFormat | str,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> bytes:
    """
    Encode an image as PNG or JPEG.

    JPEG has no alpha channel; transparency is dropped.

    Args:
        image: Image to encode
        output_format: "png" or "jpeg"
        quality: JPEG quality 1-100 (ignored for PNG)

    Returns:
        Encoded bytes

    Raises:
        UnsupportedOutputRouteError: For "pdf", which goes through the PDF writer
    """
    output_format = OutputFormat(output_format)
    if output_format == OutputFormat.PDF:
        raise UnsupportedOutputRouteError(
            "PDF output must go through the PDF writer (bleedmill.pdf_export)",
            context={"format": output_format.value},
        )

    buffer = io.BytesIO()
    if output_format == OutputFormat.JPEG:
        image.convert("RGB").save(buffer, format=_PIL_FORMATS[output_format], quality=quality)
    else:
        image.save(buffer, format=_PIL_FORMATS[output_format])
    return buffer.getvalue()


def save_image(image: Image.Image, output_path: Path, options: ProcessingOptions) -> Path:
    """
    Encode `image` per `options` and write it to `output_path`.

    Raises:
        UnsupportedOutputRouteError: If options request PDF output
        ExportError: If the file cannot be written
    """
    data = encode_image(image, options.output_format, options.jpeg_quality)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise ExportError(f"Failed to write {output_path}: {e}", context={"path": str(output_path)}) from e
    return output_path
