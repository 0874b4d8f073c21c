"""Logging configuration for bleedmill.

Records emitted while a batch run works on an image carry the image, page
and profile being processed (see `processing_context`). The console shows
that tag on debug lines only; the optional log file carries it on every
line, so a run over a whole directory can be traced stage by stage.
"""

from __future__ import annotations

import contextvars
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

LOGGER_NAME = "bleedmill"

# Shown in the log file when no image is being processed
NO_CONTEXT = "-"

FILE_FORMAT = "%(asctime)s %(levelname)-7s [%(image_context)s] %(name)s: %(message)s"

_context: contextvars.ContextVar[tuple[str, ...]] = contextvars.ContextVar("bleedmill_context", default=())


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the bleedmill namespace.

    Both 'bleedmill.pipeline' and 'pipeline' resolve to the same logger.
    """
    if name is None or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


@contextmanager
def processing_context(label: str) -> Iterator[None]:
    """Tag records logged inside the block with `label`.

    Nested blocks join their labels with ':', e.g. 'card.pdf:p2:print'.
    """
    token = _context.set(_context.get() + (label,))
    try:
        yield
    finally:
        _context.reset(token)


def current_context() -> str:
    """The active processing tag, or '' outside any processing_context."""
    return ":".join(_context.get())


class ImageContextFilter(logging.Filter):
    """Stamp each record with the active processing tag as `image_context`."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.image_context = current_context() or NO_CONTEXT
        return True


class ConsoleFormatter(logging.Formatter):
    """Formatter for user-facing console output.

    INFO is the bare message; WARNING and ERROR get a prefix; DEBUG lines
    name the image/profile they belong to, since stage traces from several
    profiles interleave.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno == logging.INFO:
            return message
        if record.levelno == logging.WARNING:
            return f"Warning: {message}"
        if record.levelno >= logging.ERROR:
            return f"Error: {message}"
        if record.levelno == logging.DEBUG:
            tag = getattr(record, "image_context", NO_CONTEXT)
            if tag and tag != NO_CONTEXT:
                return f"[debug] [{tag}] {message}"
            return f"[debug] {message}"
        return super().format(record)


class InfoFilter(logging.Filter):
    """Pass only records below WARNING (stdout gets INFO/DEBUG)."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


def setup_logging(
    verbosity: int = 0,
    quiet: bool = False,
    log_file: Path | None = None,
) -> None:
    """Configure logging for the bleedm CLI.

    Args:
        verbosity: 0 or 1 = progress messages, 2+ = per-stage debug traces (-vv)
        quiet: If True, only errors reach the console
        log_file: Optional file that receives every record, tagged
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if quiet:
        console_level = logging.ERROR
    elif verbosity >= 2:
        console_level = logging.DEBUG
    else:
        console_level = logging.INFO

    logger.setLevel(logging.DEBUG)
    context_filter = ImageContextFilter()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(console_level)
    stdout_handler.setFormatter(ConsoleFormatter())
    stdout_handler.addFilter(InfoFilter())
    stdout_handler.addFilter(context_filter)
    logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(ConsoleFormatter())
    stderr_handler.addFilter(context_filter)
    logger.addHandler(stderr_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        file_handler.addFilter(context_filter)
        logger.addHandler(file_handler)


def is_quiet_mode() -> bool:
    """Check if only ERROR records reach the console."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and handler.stream is sys.stdout:
            return handler.level >= logging.ERROR
    return False
