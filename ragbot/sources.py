"""Content sources: visible text of a web page, or a local text file."""
import html as html_lib
import re
from pathlib import Path
from typing import Optional

import httpx
import structlog

from ragbot.exceptions import ContentUnavailable

logger = structlog.get_logger()

# Elements whose contents are never part of the page's readable text
_STRIPPED_ELEMENTS = ("script", "style", "header", "footer", "nav", "aside")

_BODY_RE = re.compile(r"<body[^>]*>(.*)</body>", re.DOTALL | re.IGNORECASE)
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")


def extract_visible_text(html: str) -> str:
    """Strip boilerplate elements and markup, collapse whitespace.

    Args:
        html: Raw HTML document

    Returns:
        Plain text of the body (or the whole document when there is no body)
    """
    text = _COMMENT_RE.sub(" ", html)

    for element in _STRIPPED_ELEMENTS:
        text = re.sub(
            rf"<{element}\b[^>]*>.*?</{element}\s*>",
            " ",
            text,
            flags=re.DOTALL | re.IGNORECASE,
        )

    body = _BODY_RE.search(text)
    if body:
        text = body.group(1)

    text = _TAG_RE.sub(" ", text)
    text = html_lib.unescape(text)

    return " ".join(text.split())


async def fetch_website_text(
    url: str,
    timeout: float = 10.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Download a page and return its visible text.

    Raises:
        ContentUnavailable: On HTTP errors or when the page has no text
    """
    logger.info("website_fetch_started", url=url)

    try:
        async with httpx.AsyncClient(
            follow_redirects=True, timeout=timeout, transport=transport
        ) as client:
            response = await client.get(
                url,
                headers={"User-Agent": "Mozilla/5.0 (compatible; ragbot/0.1)"},
            )
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error("website_fetch_failed", url=url, error=str(e))
        raise ContentUnavailable(f"Failed to fetch content from {url}: {e}") from e

    text = extract_visible_text(response.text)
    if not text:
        raise ContentUnavailable(f"No readable text found at {url}")

    logger.info("website_fetch_completed", url=url, text_length=len(text))
    return text


def read_text_file(path: Path) -> str:
    """Read a local (markdown) file as UTF-8 text.

    Raises:
        ContentUnavailable: If the file is missing, unreadable or empty
    """
    path = Path(path)
    logger.info("file_read_started", path=str(path))

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("file_read_failed", path=str(path), error=str(e))
        raise ContentUnavailable(f"Failed to read {path}: {e}") from e

    if not text.strip():
        raise ContentUnavailable(f"File {path} is empty")

    return text
