"""
Value-at-Risk utilities.
Empirical (historical) VaR from an order statistic of the sample.
"""

import math
from typing import Sequence


class VaRError(Exception):
    """Raised when VaR inputs are invalid."""
    pass


def value_at_risk(samples: Sequence[float], confidence: float = 0.95) -> float:
    """
    Historical Value-at-Risk at the given confidence level.

    Formula: sort ascending, k = floor((1 - confidence) * n), VaR = S[k]

    Args:
        samples: Return observations (any unit; result is in the same unit)
        confidence: Confidence level in (0, 1]

    Returns:
        The k-th smallest observation; 0.0 when the sample is empty

    Raises:
        VaRError: If confidence is outside (0, 1]

    Example:
        [-5, -3, -1, 0, 2, 4, 6, 8] at 0.95: k = floor(0.4) = 0 → -5
    """
    if not 0 < confidence <= 1:
        raise VaRError(f"Confidence must be in (0, 1], got {confidence}")

    if samples is None or len(samples) == 0:
        return 0.0

    ordered = sorted(samples)
    index = math.floor((1 - confidence) * len(ordered))

    if index < 0 or index >= len(ordered):
        return 0.0

    return float(ordered[index])
