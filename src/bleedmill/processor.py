"""Batch processing: run every output profile over a file or directory."""

from contextlib import nullcontext
from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image

from bleedmill.codec import OUTPUT_EXTENSIONS, save_image
from bleedmill.config import Config, ErrorHandling, InputConfig, OutputProfile
from bleedmill.constants import IMAGE_EXTENSIONS, PDF_EXTENSIONS
from bleedmill.exceptions import BleedMillError, ProcessingError
from bleedmill.logging_config import get_logger, processing_context
from bleedmill.options import OutputFormat
from bleedmill.pdf_export import export_to_pdf, export_to_pdf_page
from bleedmill.pdf_render import get_page_count, render_page
from bleedmill.pipeline import describe_pipeline, process_image
from bleedmill.quality import ImageValidationResult, validate_image
from bleedmill.selector import select_pages
from bleedmill.sources import SourceData, read_source, source_to_image

logger = get_logger(__name__)

SUPPORTED_EXTENSIONS = IMAGE_EXTENSIONS + PDF_EXTENSIONS


@dataclass
class ProcessingSummary:
    """Outcome of a batch run."""

    succeeded: int = 0
    failed: int = 0
    outputs: list[Path] = field(default_factory=list)


def get_input_files(input_path: Path, pattern: str = "*") -> list[Path]:
    """
    Get list of files to process.

    Args:
        input_path: File or directory path
        pattern: Glob pattern for finding files in a directory; matches are
            further limited to supported image and PDF extensions

    Returns:
        Sorted list of file paths
    """
    if input_path.is_file():
        return [input_path]
    elif input_path.is_dir():
        return sorted(
            p for p in input_path.glob(pattern)
            if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS
        )
    else:
        raise ProcessingError(f"Input path does not exist: {input_path}")


def generate_output_filename(
    source_name: str,
    profile_name: str,
    output_format: OutputFormat,
    prefix: str = "",
    suffix: str = "",
    page_number: int | None = None,
) -> str:
    """Generate output filename based on source and profile settings."""
    stem = Path(source_name).stem
    page = f"_p{page_number}" if page_number is not None else ""
    return f"{prefix}{stem}{suffix}_{profile_name}{page}{OUTPUT_EXTENSIONS[output_format]}"


def list_source_pages(source: SourceData, input_config: InputConfig) -> list[int | None]:
    """
    List the 1-indexed page numbers to take from a source.

    Images have a single entry of None. PDFs list the pages selected by
    `input_config.pages`; nothing is rendered yet.
    """
    if not source.is_pdf:
        return [None]
    total_pages = get_page_count(source.data)
    return [idx + 1 for idx in select_pages(input_config.pages, total_pages)]


def load_source_page(source: SourceData, page_number: int | None, input_config: InputConfig) -> Image.Image:
    """Decode an image source, or render one page of a PDF source."""
    if page_number is None:
        return source_to_image(source)
    return render_page(source.data, page_index=page_number - 1, scale=input_config.pdf_scale)


def write_output(image: Image.Image, output_path: Path, profile: OutputProfile) -> Path:
    """Encode an image per the profile, routing PDF output to the PDF writer."""
    options = profile.options
    if options.output_format != OutputFormat.PDF:
        return save_image(image, output_path, options)

    if profile.pdf_page:
        return export_to_pdf_page(
            image,
            output_path,
            profile.pdf_page.page_width_mm,
            profile.pdf_page.page_height_mm,
            fit_to_page=profile.pdf_page.fit,
        )
    return export_to_pdf(image, output_path, dpi=options.dpi)


def process_single_image(
    image: Image.Image,
    source_name: str,
    profile_name: str,
    profile: OutputProfile,
    output_dir: Path,
    page_number: int | None = None,
) -> Path:
    """
    Run one profile over one decoded image and write the result.

    Returns:
        Path to the output file
    """
    output_path = output_dir / generate_output_filename(
        source_name,
        profile_name,
        profile.options.output_format,
        profile.filename_prefix,
        profile.filename_suffix,
        page_number,
    )

    debug_dir = output_dir if profile.debug else None
    result = process_image(image, profile.options, debug_output_dir=debug_dir, debug_name=output_path.name)
    write_output(result, output_path, profile)

    logger.info("  Created: %s (%dx%d)", output_path, result.width, result.height)
    return output_path


def _describe_dry_run(source: SourceData, config: Config, output_dir: Path | None) -> None:
    pages: list[int | None] = [None]
    if source.is_pdf:
        total_pages = get_page_count(source.data)
        pages = [i + 1 for i in select_pages(config.input.pages, total_pages)]
        logger.info("    [dry-run] Render pages %s of %d at scale %g", pages, total_pages, config.input.pdf_scale)

    for profile_name, profile in config.outputs.items():
        if not profile.enabled:
            continue
        steps = describe_pipeline(profile.options) or ["copy"]
        target_dir = output_dir if output_dir else profile.output_dir
        for page_number in pages:
            filename = generate_output_filename(
                source.name, profile_name, profile.options.output_format,
                profile.filename_prefix, profile.filename_suffix, page_number,
            )
            logger.info("    [dry-run] %s: %s -> %s", profile_name, " > ".join(steps), target_dir / filename)


def _run_profiles(
    image: Image.Image,
    source_name: str,
    page_number: int | None,
    config: Config,
    output_dir: Path | None,
    summary: ProcessingSummary,
) -> None:
    stop_on_error = config.settings.on_error == ErrorHandling.STOP
    for profile_name, profile in config.outputs.items():
        if not profile.enabled:
            continue
        with processing_context(profile_name):
            try:
                output_path = process_single_image(
                    image,
                    source_name,
                    profile_name,
                    profile,
                    output_dir if output_dir else profile.output_dir,
                    page_number,
                )
                summary.outputs.append(output_path)
                summary.succeeded += 1
            except BleedMillError as e:
                logger.error("  Error in profile '%s': %s", profile_name, e)
                summary.failed += 1
                if stop_on_error:
                    raise


def process(
    config: Config,
    input_path: Path,
    output_dir: Path | None = None,
    dry_run: bool = False,
) -> ProcessingSummary:
    """
    Process images according to configuration.

    Args:
        config: Pipeline configuration
        input_path: Path to input file or directory
        output_dir: Override output directory (uses profile dirs if None)
        dry_run: If True, only describe what would be done

    Returns:
        ProcessingSummary with success/failure counts and written files
    """
    summary = ProcessingSummary()

    input_files = get_input_files(input_path, config.input.pattern)
    if not input_files:
        logger.info("No supported files found in: %s", input_path)
        return summary

    logger.info("Found %d file(s) to process", len(input_files))
    stop_on_error = config.settings.on_error == ErrorHandling.STOP

    for path in input_files:
        logger.info("\nProcessing: %s", path.name)

        with processing_context(path.name):
            try:
                source = read_source(path)
                if dry_run:
                    _describe_dry_run(source, config, output_dir)
                    continue
                page_numbers = list_source_pages(source, config.input)
            except BleedMillError as e:
                logger.error("  Cannot load %s: %s", path.name, e)
                summary.failed += 1
                if stop_on_error:
                    raise
                continue

            # Pages are rendered one at a time; a bad page only fails itself
            for page_number in page_numbers:
                page_tag = processing_context(f"p{page_number}") if page_number is not None else nullcontext()
                with page_tag:
                    try:
                        image = load_source_page(source, page_number, config.input)
                    except BleedMillError as e:
                        if page_number is None:
                            logger.error("  Cannot load %s: %s", path.name, e)
                        else:
                            logger.error("  Cannot render page %d of %s: %s", page_number, path.name, e)
                        summary.failed += 1
                        if stop_on_error:
                            raise
                        continue

                    with image:
                        _run_profiles(image, path.name, page_number, config, output_dir, summary)

    logger.info("\nProcessing complete: %d succeeded, %d failed", summary.succeeded, summary.failed)
    return summary


def inspect_inputs(input_path: Path, pattern: str = "*") -> list[tuple[Path, ImageValidationResult]]:
    """
    Grade the quality of every input.

    PDFs are graded on their first page at the default render scale.
    """
    reports = []
    for path in get_input_files(input_path, pattern):
        source = read_source(path)
        image = source_to_image(source)
        reports.append((path, validate_image(image.width, image.height, len(source.data))))
    return reports
