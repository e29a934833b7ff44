"""
Monthly aggregation utilities.
Pure functions for compounding daily returns into calendar-month returns.
"""

from dataclasses import dataclass
from typing import Dict, List

import numpy as np

from ingestion.schema import ReturnSeries
from ingestion.transforms.validators import validate_period


class MonthlyAggregationError(Exception):
    """Raised when monthly aggregation fails."""
    pass


@dataclass(frozen=True)
class MonthlyReturn:
    """Compounded return for one calendar month, in percent."""
    period: str
    return_pct: float

    def __post_init__(self):
        validate_period(self.period)

    @property
    def year(self) -> str:
        return self.period[:4]

    @property
    def month(self) -> int:
        return int(self.period[5:7])


def compound(returns: List[float]) -> float:
    """
    Compound a sequence of decimal returns.

    Formula: R = Π(1 + r_i) - 1

    Args:
        returns: Periodic returns as decimals (0.01 = 1%)

    Returns:
        Compounded return as decimal; 0.0 for an empty sequence
    """
    if len(returns) == 0:
        return 0.0
    return float(np.prod(1.0 + np.asarray(returns, dtype=float)) - 1.0)


def aggregate_monthly(series: ReturnSeries) -> List[MonthlyReturn]:
    """
    Compound a daily return series into one return per calendar month.

    Daily values are decimal fractions; output returns are percent.
    Months are emitted in first-seen order, not calendar order.

    Args:
        series: Daily return series

    Returns:
        List of MonthlyReturn, one per distinct YYYY-MM

    Raises:
        MonthlyAggregationError: If series is None

    Example:
        Daily returns [0.01, -0.005, 0.002] in 2024-01:
        ((1.01)(0.995)(1.002) - 1) * 100 ≈ 0.6945%
    """
    if series is None:
        raise MonthlyAggregationError("Series must not be None")

    groups: Dict[str, List[float]] = {}
    for obs in series:
        groups.setdefault(obs.period, []).append(obs.value)

    return [
        MonthlyReturn(period=period, return_pct=compound(values) * 100)
        for period, values in groups.items()
    ]
