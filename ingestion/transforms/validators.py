"""
Core validators for canonical return observations.
Pure functions - no IO, network, or side effects.
"""

import math
from datetime import date, datetime
from typing import Any


class ValidationError(ValueError):
    """Raised when data validation fails."""
    pass


def validate_observation(obs_date: Any, value: Any) -> None:
    """
    Validate one daily observation before it is admitted into a series.

    Args:
        obs_date: Calendar date of the observation
        value: Daily return as decimal fraction

    Raises:
        ValidationError: If validation fails
    """
    # datetime is a date subclass, but observations are calendar days
    if isinstance(obs_date, datetime) or not isinstance(obs_date, date):
        raise ValidationError(f"date must be date, got {type(obs_date)}")

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"value must be numeric, got {type(value)}")

    if not math.isfinite(value):
        raise ValidationError(f"value must be finite, got {value}")


def validate_period(period: Any) -> None:
    """
    Validate a YYYY-MM month key.

    Args:
        period: Month key string

    Raises:
        ValidationError: If the key is not a valid calendar month
    """
    if not isinstance(period, str):
        raise ValidationError(f"period must be string, got {type(period)}")

    parts = period.split('-')
    if len(parts) != 2 or len(parts[0]) != 4 or len(parts[1]) != 2:
        raise ValidationError(f"period must be YYYY-MM, got {period!r}")

    if not (parts[0].isdigit() and parts[1].isdigit()):
        raise ValidationError(f"period must be YYYY-MM, got {period!r}")

    month = int(parts[1])
    if month < 1 or month > 12:
        raise ValidationError(f"period month must be 01-12, got {period!r}")
