"""
Performance summary utilities.
Best/worst month, since-inception and annualized performance from monthly returns.
"""

from typing import Optional, Sequence

from analysis.calculations.monthly import MonthlyReturn, compound

MONTHS_PER_YEAR = 12


def best_month(monthly: Sequence[MonthlyReturn]) -> Optional[MonthlyReturn]:
    """Month with the highest return (earliest wins ties); None when empty."""
    if not monthly:
        return None

    best = monthly[0]
    for current in monthly[1:]:
        if current.return_pct > best.return_pct:
            best = current
    return best


def worst_month(monthly: Sequence[MonthlyReturn]) -> Optional[MonthlyReturn]:
    """Month with the lowest return (earliest wins ties); None when empty."""
    if not monthly:
        return None

    worst = monthly[0]
    for current in monthly[1:]:
        if current.return_pct < worst.return_pct:
            worst = current
    return worst


def total_return(monthly: Sequence[MonthlyReturn]) -> float:
    """
    Compounded total return over all months, as decimal.

    Formula: Π(1 + r/100) - 1
    """
    return compound([m.return_pct / 100 for m in monthly])


def performance_since_inception(monthly: Sequence[MonthlyReturn]) -> Optional[float]:
    """
    Compounded performance since inception, in percent.

    Returns:
        (Π(1 + r/100) - 1) × 100, or None when there are no months
    """
    if not monthly:
        return None
    return total_return(monthly) * 100


def annualized_performance(monthly: Sequence[MonthlyReturn]) -> Optional[float]:
    """
    Annualized compounded performance, in percent.

    Formula: ((1 + R_total) ^ (12 / months) - 1) × 100

    Returns:
        Annualized return in percent, None when there are no months, and
        -100.0 when the total return wiped out the capital
    """
    if not monthly:
        return None

    growth = 1 + total_return(monthly)
    if growth <= 0:
        # A fractional power of a non-positive base is not a real number
        return -100.0

    return (growth ** (MONTHS_PER_YEAR / len(monthly)) - 1) * 100
