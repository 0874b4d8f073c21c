"""Command-line interface for bleedmill."""

import argparse
import sys
from pathlib import Path

from bleedmill import __version__
from bleedmill.logging_config import get_logger

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="bleedm",
        description="Print-ready image pipeline: resize, flip, add bleed, rotate, export.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bleedm -c config.yaml -i ./input -o ./output    Process images with config
  bleedm -c config.yaml -i poster.pdf             Process a PDF (pages per config)
  bleedm -c config.yaml --validate                Validate config only
  bleedm -c config.yaml -i ./input --validate --strict
                                                  Also check input/output paths
  bleedm -c config.yaml -i ./input --dry-run      Show what would happen
  bleedm -i ./input --info                        Grade image quality
""",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="store_true",
        help="Show version information and exit",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )

    parser.add_argument(
        "-i",
        "--input",
        type=Path,
        help="Input image/PDF file or directory",
    )

    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output directory (overrides config)",
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration file and exit",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="With --validate, also check that input and output paths are usable",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without actually doing it",
    )

    parser.add_argument(
        "--info",
        action="store_true",
        help="Print a resolution/aspect ratio/file size quality report for the input",
    )

    # Logging options
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for verbose, -vv for debug)",
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress all output except errors",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        help="Write logs to file (includes all levels)",
    )

    return parser


def cmd_info(input_path: Path, pattern: str = "*") -> int:
    """Log a quality report for each input file."""
    from bleedmill.exceptions import BleedMillError
    from bleedmill.processor import inspect_inputs

    try:
        reports = inspect_inputs(input_path, pattern)
    except BleedMillError as e:
        logger.error("%s", e)
        return 1

    if not reports:
        logger.info("No supported files found in: %s", input_path)
        return 1

    for path, report in reports:
        logger.info("%s: %s", path.name, report.overall_message)
        logger.info("  Resolution:   [%s] %s", report.resolution_quality.value, report.resolution_message)
        logger.info(
            "  Aspect ratio: [%s] %s, %s",
            report.aspect_ratio_quality.value, report.aspect_ratio_message, report.aspect_ratio_name,
        )
        logger.info("  File size:    [%s] %s", report.file_size_quality.value, report.file_size_message)
    return 0


def cmd_validate(config_path: Path, input_path: Path | None, strict: bool) -> int:
    """Load and validate a configuration file."""
    from bleedmill.config import load_config
    from bleedmill.exceptions import ConfigError
    from bleedmill.validation import ValidationContext, validate_config

    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except FileNotFoundError:
        logger.error("Configuration file not found: %s", config_path)
        return 1

    logger.info("Configuration syntax is valid: %s", config_path)
    logger.info("  Outputs defined: %s", ", ".join(config.outputs.keys()))

    context = None
    if strict:
        context = ValidationContext(input_path=input_path or config.input.path)
    result = validate_config(config, context)

    for error in result.errors:
        logger.error("  %s", error)
    for warning in result.warnings:
        logger.warning("  %s", warning)

    if not result.valid:
        logger.error("Validation failed with %d error(s)", len(result.errors))
        return 1
    if result.warnings:
        logger.info("Validation passed with %d warning(s)", len(result.warnings))
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    from bleedmill.logging_config import setup_logging

    setup_logging(
        verbosity=parsed.verbose,
        quiet=parsed.quiet,
        log_file=parsed.log_file,
    )

    if parsed.version:
        logger.info("bleedmill %s", __version__)
        return 0

    if parsed.info:
        if not parsed.input:
            logger.error("--input is required for --info")
            return 1
        return cmd_info(parsed.input)

    # Require config for other operations
    if not parsed.config:
        parser.print_help()
        return 1

    if parsed.validate:
        return cmd_validate(parsed.config, parsed.input, parsed.strict)

    if not parsed.input:
        logger.error("--input is required for processing")
        return 1

    from bleedmill.config import load_config
    from bleedmill.exceptions import BleedMillError, ConfigError
    from bleedmill.processor import process

    try:
        config = load_config(parsed.config)
        summary = process(
            config=config,
            input_path=parsed.input,
            output_dir=parsed.output,
            dry_run=parsed.dry_run,
        )
        return 1 if summary.failed else 0
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except FileNotFoundError as e:
        logger.error("File not found: %s", e)
        return 1
    except BleedMillError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
