"""
Normalizers for transforming raw CSV rows to canonical observations.
Pure functions - no IO, network, or side effects.
Minimal normalization - only when necessary.
"""

import math
import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ingestion.schema import DailyObservation
from ingestion.transforms.sanitizers import sanitize_number, is_not_a_number

_ISO_DATE = re.compile(r'^[0-9]{4}-[0-9]{2}-[0-9]{2}$')
_EU_DATE = re.compile(r'^[0-9]{2}\.[0-9]{2}\.[0-9]{4}$')

HEADER_DATE_TOKENS = ('date',)
HEADER_VALUE_TOKENS = ('return', 'value')


class UnitPolicy(str, Enum):
    """How the value column is scaled on ingestion."""
    IDENTITY = 'identity'
    PERCENT = 'percent'

    def apply(self, value: float) -> float:
        """Scale a sanitized value to the canonical decimal fraction."""
        if self is UnitPolicy.PERCENT:
            return value / 100
        return value


@dataclass
class NormalizedRows:
    """Result of normalizing one source's rows."""
    observations: List[DailyObservation] = field(default_factory=list)
    dropped: int = 0
    eu_dates_converted: int = 0
    header_skipped: bool = False


def normalize_date(raw: Optional[str]) -> Tuple[Optional[date], bool]:
    """
    Parse a date cell in ISO (YYYY-MM-DD) or European (DD.MM.YYYY) layout.

    Args:
        raw: Raw date text from column 0

    Returns:
        Tuple of (parsed date or None, True if the European layout was used)

    Example:
        "16.01.2024" -> (date(2024, 1, 16), True)
        "2024-01-16" -> (date(2024, 1, 16), False)
    """
    if not isinstance(raw, str):
        return None, False

    text = raw.strip()

    try:
        if _ISO_DATE.match(text):
            return date.fromisoformat(text), False

        if _EU_DATE.match(text):
            day, month, year = text.split('.')
            return date.fromisoformat(f"{year}-{month}-{day}"), True
    except ValueError:
        # Right shape, impossible calendar date (e.g. 2024-02-30)
        return None, False

    return None, False


def is_header_row(row: Sequence[str]) -> bool:
    """
    Detect a header row by its first two cells.

    Column 0 containing "date", or column 1 containing "return" or "value"
    (case-insensitive), marks the row as a header.
    """
    if not row:
        return False

    first = str(row[0]).lower()
    second = str(row[1]).lower() if len(row) > 1 else ''

    if any(token in first for token in HEADER_DATE_TOKENS):
        return True
    return any(token in second for token in HEADER_VALUE_TOKENS)


def normalize_return_rows(
    raw_rows: List[Sequence[str]],
    *,
    unit_policy: UnitPolicy = UnitPolicy.IDENTITY
) -> NormalizedRows:
    """
    Transform raw (date-text, value-text) rows to canonical observations.

    Minimal normalization:
    - Optional header row removed
    - European dates reordered to ISO
    - Value sanitized and scaled by the unit policy
    - Malformed rows dropped (counted, never raised)

    Args:
        raw_rows: Rows as lists of cell strings, in source order
        unit_policy: Scaling applied to the value column

    Returns:
        NormalizedRows with observations in source order
    """
    result = NormalizedRows()
    if not raw_rows:
        return result

    rows = list(raw_rows)
    if is_header_row(rows[0]):
        rows = rows[1:]
        result.header_skipped = True

    for row in rows:
        if row is None or len(row) < 2:
            result.dropped += 1
            continue

        obs_date, was_eu = normalize_date(row[0])
        if obs_date is None:
            result.dropped += 1
            continue

        value = sanitize_number(row[1])
        if is_not_a_number(value):
            result.dropped += 1
            continue

        value = unit_policy.apply(float(value))

        # Sanitized text never yields inf, but numeric cells can
        if not math.isfinite(value):
            result.dropped += 1
            continue

        if was_eu:
            result.eu_dates_converted += 1

        result.observations.append(DailyObservation(date=obs_date, value=value))

    return result
