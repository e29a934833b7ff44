"""
Correlation utilities.
Pearson correlation between two monthly return series on their common periods.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from analysis.calculations.monthly import MonthlyReturn


def common_periods(
    fund: Sequence[MonthlyReturn],
    benchmark: Sequence[MonthlyReturn]
) -> Tuple[List[float], List[float]]:
    """
    Align two monthly series on the periods present in both.

    Periods are taken in fund order. If a period repeats within a series,
    the last value wins.

    Returns:
        Tuple of (fund returns, benchmark returns) for common periods
    """
    fund_map = {m.period: m.return_pct for m in fund}
    bench_map = {m.period: m.return_pct for m in benchmark}

    periods = [p for p in fund_map if p in bench_map]
    return [fund_map[p] for p in periods], [bench_map[p] for p in periods]


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation with population moments.

    Formula: cov(x, y) / (σ_x × σ_y), all with ddof=0

    Returns:
        Correlation in [-1, 1]; 0.0 when either series has zero variance
    """
    if len(x) != len(y):
        raise ValueError("Series must have same length")
    if len(x) == 0:
        return 0.0

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)

    dx = xs - xs.mean()
    dy = ys - ys.mean()

    cov = float(np.mean(dx * dy))
    std_x = float(np.sqrt(np.mean(dx ** 2)))
    std_y = float(np.sqrt(np.mean(dy ** 2)))

    if std_x == 0 or std_y == 0:
        return 0.0

    return cov / (std_x * std_y)


def monthly_correlation(
    fund: Sequence[MonthlyReturn],
    benchmark: Sequence[MonthlyReturn]
) -> Optional[float]:
    """
    Correlation between fund and benchmark monthly returns.

    Returns:
        Correlation at full precision, or None when the two series share
        no period
    """
    x, y = common_periods(fund, benchmark)
    if not x:
        return None
    return pearson_correlation(x, y)
