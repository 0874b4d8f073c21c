"""PDF page rasterization.

Pages are counted with pypdf and rendered with pdf2image (poppler), which
delivers Pillow RGB images that are promoted to RGBA here. A scale
of 1.0 renders at 72 DPI, so scale 2.0 gives 144 DPI.
"""

import io

from PIL import Image
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from bleedmill.constants import DEFAULT_PDF_SCALE, POINTS_PER_INCH
from bleedmill.exceptions import RenderError
from bleedmill.logging_config import get_logger
from bleedmill.units import round_half_away

logger = get_logger(__name__)


def get_page_count(pdf_bytes: bytes) -> int:
    """
    Count the pages of a PDF.

    Raises:
        RenderError: If the bytes are not a readable PDF
    """
    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
        return len(reader.pages)
    except (PdfReadError, ValueError) as e:
        raise RenderError(f"Cannot read PDF: {e}", context={"size": len(pdf_bytes)}) from e


def render_page(pdf_bytes: bytes, page_index: int = 0, scale: float = DEFAULT_PDF_SCALE) -> Image.Image:
    """
    Rasterize one page of a PDF.

    Args:
        pdf_bytes: The PDF document
        page_index: 0-indexed page to render
        scale: Render scale, 1.0 = 72 DPI

    Returns:
        The rendered page as an RGBA image

    Raises:
        RenderError: If pdf2image/poppler are missing, the page index is out
            of range, or rendering fails
    """
    if scale <= 0:
        raise RenderError(f"Render scale must be positive, got {scale}")

    total_pages = get_page_count(pdf_bytes)
    if page_index < 0 or page_index >= total_pages:
        raise RenderError(
            f"Page index must be between 0 and {total_pages - 1}, got {page_index}",
            context={"page_index": page_index, "total_pages": total_pages},
        )

    try:
        from pdf2image import convert_from_bytes
        from pdf2image.exceptions import PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError
    except ImportError:
        raise RenderError("pdf2image is required for PDF input. Install with: pip install pdf2image")

    dpi = round_half_away(POINTS_PER_INCH * scale)
    logger.debug("Rendering page %d of %d at %d DPI", page_index + 1, total_pages, dpi)

    try:
        images = convert_from_bytes(
            pdf_bytes,
            dpi=dpi,
            first_page=page_index + 1,  # pdf2image uses 1-indexed pages
            last_page=page_index + 1,
        )
    except PDFInfoNotInstalledError as e:
        raise RenderError(
            "Poppler is not installed. Install it to render PDF input "
            "(e.g. apt install poppler-utils, brew install poppler)"
        ) from e
    except (PDFPageCountError, PDFSyntaxError) as e:
        raise RenderError(f"Failed to render page {page_index + 1}: {e}") from e

    if not images:
        raise RenderError(f"Failed to render page {page_index + 1}", context={"page_index": page_index})

    return images[0].convert("RGBA")
