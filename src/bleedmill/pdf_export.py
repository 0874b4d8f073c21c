"""PDF export for processed images.

Two page layouts are supported:
- Sized from DPI: the page is exactly the image's physical size.
- Fixed page in millimeters: the image is letterboxed to fit, or centered
  at native size (1 pixel = 1 point).
"""

import io
from pathlib import Path

from PIL import Image
from pypdf import PageObject, PdfReader, PdfWriter, Transformation

from bleedmill.constants import DEFAULT_DPI, PDF_CREATOR, PDF_TITLE, POINTS_PER_INCH
from bleedmill.exceptions import ExportError
from bleedmill.logging_config import get_logger
from bleedmill.units import mm_to_points

logger = get_logger(__name__)


def _flatten(image: Image.Image) -> Image.Image:
    """Composite onto white; PDF images carry no alpha here."""
    if image.mode == "RGB":
        return image
    rgba = image.convert("RGBA")
    background = Image.new("RGB", rgba.size, (255, 255, 255))
    background.paste(rgba, mask=rgba.getchannel("A"))
    return background


def _write_pdf(writer: PdfWriter, output_path: Path) -> None:
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "wb") as f:
            writer.write(f)
    except OSError as e:
        raise ExportError(f"Failed to write {output_path}: {e}", context={"path": str(output_path)}) from e


def export_to_pdf(image: Image.Image, output_path: Path, dpi: int = DEFAULT_DPI) -> Path:
    """
    Export an image to a single-page PDF sized from its DPI.

    The page measures width/dpi by height/dpi inches and the image fills it.

    Args:
        image: The image to export
        output_path: Destination PDF path
        dpi: Print resolution used for the physical page size

    Returns:
        output_path
    """
    if dpi <= 0:
        raise ExportError(f"DPI must be positive, got {dpi}")

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        _flatten(image).save(
            output_path,
            format="PDF",
            resolution=float(dpi),
            title=PDF_TITLE,
            creator=PDF_CREATOR,
        )
    except OSError as e:
        raise ExportError(f"Failed to write {output_path}: {e}", context={"path": str(output_path)}) from e

    logger.debug(
        "Exported %dx%d px at %d DPI (%.2fx%.2f in)",
        image.width, image.height, dpi, image.width / dpi, image.height / dpi,
    )
    return output_path


def compute_placement(
    image_size: tuple[int, int],
    page_size: tuple[float, float],
    fit_to_page: bool = True,
    native_dpi: float = POINTS_PER_INCH,
) -> tuple[float, float, float, float]:
    """
    Compute where an image lands on a page.

    Args:
        image_size: (width, height) in pixels
        page_size: (width, height) in points
        fit_to_page: Scale to fit preserving aspect ratio; otherwise keep
            native size and center (content may overflow the page)
        native_dpi: Pixels per inch for native size (72 = 1 pixel per point)

    Returns:
        (x, y, width, height) in points, origin at the lower-left corner
    """
    image_width, image_height = image_size
    page_width, page_height = page_size

    if fit_to_page:
        image_aspect = image_width / image_height
        page_aspect = page_width / page_height

        if image_aspect > page_aspect:
            # Image is wider: fit to width
            draw_width = page_width
            draw_height = page_width / image_aspect
        else:
            draw_height = page_height
            draw_width = page_height * image_aspect
    else:
        draw_width = image_width * POINTS_PER_INCH / native_dpi
        draw_height = image_height * POINTS_PER_INCH / native_dpi

    x = (page_width - draw_width) / 2
    y = (page_height - draw_height) / 2
    return x, y, draw_width, draw_height


def export_to_pdf_page(
    image: Image.Image,
    output_path: Path,
    page_width_mm: float,
    page_height_mm: float,
    fit_to_page: bool = True,
) -> Path:
    """
    Export an image onto a PDF page of fixed physical size.

    Args:
        image: The image to export
        output_path: Destination PDF path
        page_width_mm: Page width in millimeters
        page_height_mm: Page height in millimeters
        fit_to_page: Letterbox the image to fit; otherwise center at native size

    Returns:
        output_path
    """
    if page_width_mm <= 0 or page_height_mm <= 0:
        raise ExportError(f"Page size must be positive, got {page_width_mm}x{page_height_mm} mm")

    page_width = mm_to_points(page_width_mm)
    page_height = mm_to_points(page_height_mm)

    # Embed at 72 DPI so one pixel is one point in the source page
    image_pdf = io.BytesIO()
    _flatten(image).save(image_pdf, format="PDF", resolution=POINTS_PER_INCH)
    image_pdf.seek(0)
    image_page = PdfReader(image_pdf).pages[0]

    x, y, draw_width, draw_height = compute_placement(image.size, (page_width, page_height), fit_to_page)

    output_page = PageObject.create_blank_page(width=page_width, height=page_height)
    transform = (
        Transformation()
        .scale(sx=draw_width / image.width, sy=draw_height / image.height)
        .translate(tx=x, ty=y)
    )
    output_page.merge_transformed_page(image_page, transform)

    writer = PdfWriter()
    writer.add_page(output_page)
    writer.add_metadata({"/Title": PDF_TITLE, "/Creator": PDF_CREATOR})
    _write_pdf(writer, output_path)

    logger.debug(
        "Placed %dx%d px at (%.1f, %.1f) size %.1fx%.1f pt on %.1fx%.1f mm page",
        image.width, image.height, x, y, draw_width, draw_height, page_width_mm, page_height_mm,
    )
    return output_path
