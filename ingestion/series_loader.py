"""
Series loader - resolve a named return series from an ordered list of sources.
Composes: Source → Parse → Normalize → Series, with an inline fallback.
"""

import io
import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import pandas as pd

from ingestion.providers.csv_source import fetch_source_text, CsvSourceError
from ingestion.providers.inline_fallback import parse_inline_fallback, FALLBACK_SOURCE_NAME
from ingestion.schema import ReturnSeries
from ingestion.transforms.normalizers import normalize_return_rows, UnitPolicy

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], str]


class CsvParseError(Exception):
    """Raised when CSV text cannot be split into rows."""
    pass


class SeriesUnavailableError(Exception):
    """Raised when every source fails and the inline fallback is disabled."""
    pass


def load_series(
    candidates: Sequence[str],
    unit_policy: UnitPolicy = UnitPolicy.IDENTITY,
    *,
    name: str = 'series',
    fetcher: Optional[Fetcher] = None,
    timeout: Optional[float] = None,
    base_url: Optional[str] = None,
    base_dir: Optional[Path] = None,
    use_fallback: bool = True
) -> ReturnSeries:
    """
    Load a return series from the first candidate that yields valid rows.

    Candidates are tried strictly in order. A candidate is a miss when it
    cannot be fetched, returns a markup page, cannot be parsed, or has no
    valid rows. When every candidate misses, the inline sample series is
    returned so downstream computation always has data.

    Args:
        candidates: Ordered source identifiers (URLs or paths)
        unit_policy: Scaling for the value column
        name: Logical series name, for log messages
        fetcher: Callable returning raw text for one source (defaults to
            fetch_source_text with the given timeout/base_url/base_dir)
        timeout: Per-request timeout in seconds
        base_url: Prefix for relative HTTP sources
        base_dir: Directory for relative local sources
        use_fallback: Return the inline sample on exhaustion (otherwise raise)

    Returns:
        ReturnSeries in source row order

    Raises:
        SeriesUnavailableError: Only when use_fallback is False and no
            candidate produced data
    """
    if fetcher is None:
        def fetcher(source: str) -> str:
            return fetch_source_text(
                source, timeout=timeout, base_url=base_url, base_dir=base_dir
            )

    if isinstance(candidates, str):
        candidates = [candidates]

    for source in candidates:
        logger.info(f"[{name}] Attempting source: {source}")

        try:
            csv_text = fetcher(source)
        except CsvSourceError as e:
            logger.warning(f"[{name}] {e}. Trying next source.")
            continue

        try:
            raw_rows = parse_csv_rows(csv_text)
        except CsvParseError as e:
            logger.warning(f"[{name}] Parse error for {source}: {e}. Trying next source.")
            continue

        normalized = normalize_return_rows(raw_rows, unit_policy=unit_policy)

        if normalized.eu_dates_converted:
            logger.info(f"[{name}] Converted {normalized.eu_dates_converted} EU date formats.")
        if normalized.dropped:
            logger.info(f"[{name}] Dropped {normalized.dropped} malformed rows from {source}.")

        if not normalized.observations:
            logger.warning(f"[{name}] No valid rows at {source}. Trying next source.")
            continue

        logger.info(f"[{name}] Parsed {len(normalized.observations)} observations from {source}")
        return ReturnSeries(observations=normalized.observations, source=source)

    if not use_fallback:
        raise SeriesUnavailableError(f"All sources failed for {name}")

    logger.warning(f"[{name}] All sources failed. Falling back to inline sample data.")
    return load_inline_fallback()


def load_inline_fallback() -> ReturnSeries:
    """Build the inline sample series."""
    return ReturnSeries(
        observations=parse_inline_fallback(),
        source=FALLBACK_SOURCE_NAME,
        is_fallback=True
    )


def parse_csv_rows(csv_text: str) -> List[List[str]]:
    """
    Split CSV text into rows of cell strings.

    Quoted fields are honoured, blank rows are skipped and short rows are
    padded with empty cells.

    Args:
        csv_text: Raw CSV body

    Returns:
        List of rows, each a list of strings

    Raises:
        CsvParseError: If the text is not parseable as CSV
    """
    if not isinstance(csv_text, str):
        raise CsvParseError(f"CSV text must be string, got {type(csv_text)}")

    text = csv_text.lstrip('\ufeff')
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return []

    # Upper bound on field count; quoted commas only add empty padding columns
    width = max(line.count(',') for line in lines) + 1

    try:
        frame = pd.read_csv(
            io.StringIO(text),
            header=None,
            names=list(range(width)),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as e:
        raise CsvParseError(str(e)) from e

    frame = frame.fillna('')

    rows = []
    for values in frame.itertuples(index=False, name=None):
        cells = [str(v) for v in values]
        if any(cell.strip() for cell in cells):
            rows.append(cells)

    return rows
