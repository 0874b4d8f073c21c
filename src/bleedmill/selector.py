"""Page selection for multi-page PDF sources."""

import re

from bleedmill.exceptions import PageSelectionError

PAGE_KEYWORDS = ("first", "last", "all", "odd", "even")

# "3", "2-5", "3-", "-2" (last two pages)
_RANGE_RE = re.compile(r"^(\d*)-(\d*)$")


def select_pages(spec: str | int | list[int], total_pages: int) -> list[int]:
    """
    Convert a page specification to a list of 0-indexed page numbers.

    Supports:
    - Keywords: "first", "last", "all", "odd", "even"
    - Single page: 3 or "3" (1-indexed)
    - Range: "2-5", open range "3-", last N pages "-2"
    - List: [1, 3, -1] (1-indexed, negative counts from the end)

    Raises:
        PageSelectionError: If the specification is invalid or pages don't exist
    """
    if total_pages <= 0:
        raise PageSelectionError("Document has no pages")

    if isinstance(spec, bool):
        raise PageSelectionError(f"Invalid page specification: {spec!r}")
    if isinstance(spec, int):
        spec = [spec]
    if isinstance(spec, list):
        return [_page_index(page, total_pages) for page in spec]

    text = str(spec).strip().lower()

    if text == "first":
        return [0]
    if text == "last":
        return [total_pages - 1]
    if text == "all":
        return list(range(total_pages))
    if text == "odd":
        return list(range(0, total_pages, 2))
    if text == "even":
        return list(range(1, total_pages, 2))

    if text.isdigit():
        return [_page_index(int(text), total_pages)]

    match = _RANGE_RE.match(text)
    if not match or text == "-":
        raise PageSelectionError(f"Unknown page specification: '{spec}'")

    start_str, end_str = match.groups()
    if not start_str:
        count = int(end_str)
        if count == 0 or count > total_pages:
            raise PageSelectionError(f"Cannot select last {count} pages from {total_pages} page document")
        return list(range(total_pages - count, total_pages))

    start = int(start_str)
    end = min(int(end_str), total_pages) if end_str else total_pages
    if start < 1 or start > total_pages:
        raise PageSelectionError(f"Invalid range: {spec} for {total_pages} page document")
    if start > end:
        raise PageSelectionError(f"Start page {start} is after end page {end}")
    return list(range(start - 1, end))


def _page_index(page: int, total_pages: int) -> int:
    """Convert a 1-indexed (or negative, from the end) page number to 0-indexed."""
    idx = total_pages + page if page < 0 else page - 1
    if idx < 0 or idx >= total_pages:
        raise PageSelectionError(f"Page {page} is out of range for {total_pages} page document")
    return idx


def validate_page_spec_syntax(spec: str | int | list[int]) -> None:
    """
    Validate page specification syntax without knowing the page count.

    Raises:
        PageSelectionError: If the specification syntax is invalid
    """
    if isinstance(spec, bool):
        raise PageSelectionError(f"Invalid page specification: {spec!r}")
    if isinstance(spec, int):
        return
    if isinstance(spec, list):
        for i, item in enumerate(spec):
            if isinstance(item, bool) or not isinstance(item, int):
                raise PageSelectionError(
                    f"Page list must contain only integers, got {type(item).__name__} at index {i}"
                )
        return
    if not isinstance(spec, str):
        raise PageSelectionError(
            f"Page specification must be a string, int, or list of ints, got {type(spec).__name__}"
        )

    text = spec.strip().lower()
    if not text:
        raise PageSelectionError("Page specification cannot be empty")
    if text in PAGE_KEYWORDS or text.isdigit():
        return
    if _RANGE_RE.match(text) and text != "-":
        return

    raise PageSelectionError(
        f"Unknown page specification: '{spec}'. "
        f"Valid formats: keywords ({', '.join(PAGE_KEYWORDS)}), "
        f"ranges (2-5, 3-, -2), page numbers (5), or lists ([1, 3, -1])"
    )
