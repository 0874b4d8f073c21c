"""Source acquisition: read image or PDF bytes from disk or HTTP(S)."""

import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from bleedmill.codec import decode_image
from bleedmill.constants import CONTENT_TYPE_EXTENSIONS, DEFAULT_PDF_SCALE, HTTP_TIMEOUT, HTTP_USER_AGENT
from bleedmill.exceptions import FetchError
from bleedmill.logging_config import get_logger
from bleedmill.pdf_render import render_page

logger = get_logger(__name__)


@dataclass
class SourceData:
    """Raw bytes of a source plus what is known about their type."""

    data: bytes
    name: str
    content_type: str | None = None

    @property
    def is_pdf(self) -> bool:
        return is_pdf(self.name) or is_pdf(self.content_type) or self.data[:5] == b"%PDF-"


def is_pdf(path_or_content_type: str | Path | None) -> bool:
    """Check for a PDF by file extension or MIME type."""
    if not path_or_content_type:
        return False
    lower = str(path_or_content_type).lower()
    return lower.endswith(".pdf") or lower == "application/pdf"


def is_url(location: str | Path) -> bool:
    return isinstance(location, str) and "://" in location


def extension_from_content_type(content_type: str | None) -> str | None:
    """Map a MIME type to a file extension, or None if unknown."""
    if not content_type:
        return None
    media_type = content_type.split(";")[0].strip().lower()
    return CONTENT_TYPE_EXTENSIONS.get(media_type)


def fetch_url(url: str, timeout: float = HTTP_TIMEOUT) -> SourceData:
    """
    Download a source over HTTP(S).

    Raises:
        FetchError: On invalid URLs, non-2xx responses, timeouts or empty bodies
    """
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise FetchError(
            "URL must start with http:// or https://",
            context={"url": url},
        )

    request = urllib.request.Request(url, headers={"User-Agent": HTTP_USER_AGENT})
    logger.debug("Downloading %s", url)

    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            data = response.read()
            content_type = response.headers.get("Content-Type")
    except urllib.error.HTTPError as e:
        raise FetchError(f"Server returned: {e.code} {e.reason}", context={"url": url}) from e
    except urllib.error.URLError as e:
        raise FetchError(f"Failed to download: {e.reason}", context={"url": url}) from e
    except TimeoutError as e:
        raise FetchError("Download timed out", context={"url": url}) from e

    if not data:
        raise FetchError("Downloaded file is empty", context={"url": url})

    name = Path(urllib.parse.unquote(parsed.path)).name
    if not name:
        extension = extension_from_content_type(content_type) or ".png"
        name = f"download{extension}"

    return SourceData(data=data, name=name, content_type=content_type)


def read_source(location: str | Path) -> SourceData:
    """
    Read source bytes from a local path or an http(s) URL.

    Raises:
        FetchError: If the file cannot be read or the download fails
    """
    if is_url(location):
        return fetch_url(str(location))

    path = Path(location)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise FetchError(f"Cannot read {path}: {e.strerror or e}", context={"path": str(path)}) from e

    if not data:
        raise FetchError("File is empty", context={"path": str(path)})

    return SourceData(data=data, name=path.name)


def load_image(
    location: str | Path,
    page_index: int = 0,
    scale: float = DEFAULT_PDF_SCALE,
) -> Image.Image:
    """
    Read a source and turn it into an RGBA image.

    PDFs are rasterized (one page, at `scale`); everything else is decoded.
    """
    source = read_source(location)
    return source_to_image(source, page_index=page_index, scale=scale)


def source_to_image(source: SourceData, page_index: int = 0, scale: float = DEFAULT_PDF_SCALE) -> Image.Image:
    """Decode or rasterize already-read source bytes."""
    if source.is_pdf:
        return render_page(source.data, page_index=page_index, scale=scale)
    return decode_image(source.data, hint=source.content_type or source.name)
