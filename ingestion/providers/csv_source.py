"""
CSV source adapter - retrieve raw CSV text from a URL or a local file.
Network IO allowed here, but minimal business logic.
"""

import logging
import os
import re
from pathlib import Path
from typing import Optional
from urllib.parse import urljoin, urlparse

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30
MARKUP_SNIFF_CHARS = 200
USER_AGENT = 'fund-returns-analytics/0.1'

_DOCTYPE_PATTERN = re.compile(r'^<!DOCTYPE html', re.IGNORECASE)
_HTML_TAG_PATTERN = re.compile(r'<html', re.IGNORECASE)


class CsvSourceError(Exception):
    """Raised when a candidate source cannot provide CSV text."""
    pass


def fetch_source_text(
    source: str,
    *,
    timeout: Optional[float] = None,
    base_url: Optional[str] = None,
    base_dir: Optional[Path] = None
) -> str:
    """
    Retrieve raw CSV text for one candidate source.
    Returns the body unparsed - no normalization.

    Args:
        source: URL, absolute path, or path relative to base_url / base_dir
        timeout: Request timeout in seconds (defaults to REQUESTS_TIMEOUT_S)
        base_url: Prefix for relative sources served over HTTP
        base_dir: Directory for relative local sources

    Returns:
        CSV text

    Raises:
        CsvSourceError: On transport failure, non-success status, missing
            file, or when the body is a markup page instead of CSV
    """
    _validate_source(source)

    location = resolve_source(source, base_url=base_url, base_dir=base_dir)

    if _is_http(location):
        text = _fetch_http(location, timeout)
    else:
        text = _read_local(location)

    if looks_like_markup(text):
        raise CsvSourceError(f"HTML received at {location}")

    return text


def resolve_source(
    source: str,
    *,
    base_url: Optional[str] = None,
    base_dir: Optional[Path] = None
) -> str:
    """
    Resolve a candidate identifier to a URL or a filesystem path.

    Args:
        source: Candidate identifier from configuration
        base_url: Prefix for relative sources served over HTTP
        base_dir: Directory for relative local sources

    Returns:
        Absolute URL or filesystem path as string
    """
    if _is_http(source):
        return source

    if source.startswith('file://'):
        return urlparse(source).path

    if base_url:
        # urljoin drops the last path segment without a trailing slash
        prefix = base_url if base_url.endswith('/') else base_url + '/'
        return urljoin(prefix, source.lstrip('/'))

    path = Path(source)
    if not path.is_absolute() and base_dir is not None:
        path = Path(base_dir) / path
    return str(path)


def looks_like_markup(text: str) -> bool:
    """
    Detect an HTML error page served in place of CSV.

    Only the first ~200 characters after leading whitespace are inspected.
    """
    if not text:
        return False

    head = text.lstrip()[:MARKUP_SNIFF_CHARS]
    return bool(_DOCTYPE_PATTERN.search(head) or _HTML_TAG_PATTERN.search(head))


def _fetch_http(url: str, timeout: Optional[float]) -> str:
    """Fetch a URL, mapping every transport problem to CsvSourceError."""
    if timeout is None:
        timeout = float(os.getenv('REQUESTS_TIMEOUT_S', str(DEFAULT_TIMEOUT_S)))

    headers = {
        'User-Agent': USER_AGENT,
        'Accept': 'text/csv, text/plain, */*',
        'Cache-Control': 'no-store',
    }

    logger.debug(f"Attempting fetch: {url}")
    try:
        response = requests.get(url, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        raise CsvSourceError(f"Fetch failed for {url}: {e}") from e

    logger.debug(f"Response status for {url}: {response.status_code}")
    if not response.ok:
        raise CsvSourceError(f"HTTP {response.status_code} for {url}")

    return response.text


def _read_local(path_str: str) -> str:
    """Read a local CSV file."""
    path = Path(path_str)
    if not path.is_file():
        raise CsvSourceError(f"File not found: {path}")

    try:
        return path.read_text(encoding='utf-8-sig')
    except (OSError, UnicodeDecodeError) as e:
        raise CsvSourceError(f"Failed to read {path}: {e}") from e


def _is_http(source: str) -> bool:
    return source.lower().startswith(('http://', 'https://'))


def _validate_source(source: str) -> None:
    """
    Basic candidate validation.

    Raises:
        CsvSourceError: If the identifier is empty or not a string
    """
    if not source or not isinstance(source, str):
        raise CsvSourceError("Source must be non-empty string")
