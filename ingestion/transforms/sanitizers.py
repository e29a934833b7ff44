"""
Numeric sanitizers for loosely formatted CSV values.
Pure functions - lexical cleanup only, no rounding or unit conversion.
"""

import math
import re
from typing import Any

NOT_A_NUMBER = float('nan')

# Everything except digits, sign characters and the decimal point
_STRIP_PATTERN = re.compile(r'[^0-9+\-.]')

# Longest leading numeric token, the way a lenient float parser reads it
_LEADING_NUMBER = re.compile(r'^[+-]?(?:\d+(?:\.\d*)?|\.\d+)')


def sanitize_number(value: Any) -> float:
    """
    Turn loosely formatted numeric text into a float.

    Thousands separators, currency symbols, percent signs and quote-style
    grouping marks are removed before parsing.

    Args:
        value: Raw cell value (string, number or None)

    Returns:
        Parsed float, or NaN when nothing numeric can be read

    Example:
        "3'000'000.00" -> 3000000.0
        "-0.00%"       -> -0.0
        "+"            -> nan
    """
    if value is None:
        return NOT_A_NUMBER

    # bool is an int subclass but never a meaningful return value
    if isinstance(value, bool):
        return NOT_A_NUMBER

    if isinstance(value, (int, float)):
        return value

    if not isinstance(value, str):
        return NOT_A_NUMBER

    cleaned = _STRIP_PATTERN.sub('', value)
    if not cleaned or cleaned in ('-', '+'):
        return NOT_A_NUMBER

    match = _LEADING_NUMBER.match(cleaned)
    if match is None:
        return NOT_A_NUMBER

    return float(match.group(0))


def is_not_a_number(value: Any) -> bool:
    """True when value is the NaN sentinel (or not a real number at all)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return True
    return math.isnan(value)
