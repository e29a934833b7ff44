"""
Risk-adjusted return utilities.
Pure functions for Sharpe, Sortino and annualized volatility on monthly returns.
"""

import math
from typing import Sequence

import numpy as np

MONTHS_PER_YEAR = 12


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=float)))


def population_std(values: Sequence[float]) -> float:
    """Population standard deviation (ddof=0); 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float), ddof=0))


def annualized_volatility(monthly: Sequence[float]) -> float:
    """
    Annualize monthly volatility.

    Formula: σ_annual = σ_monthly × √12

    Args:
        monthly: Monthly returns

    Returns:
        Annualized volatility in the unit of the input
    """
    return population_std(monthly) * math.sqrt(MONTHS_PER_YEAR)


def sharpe_ratio(monthly: Sequence[float], risk_free: Sequence[float]) -> float:
    """
    Annualized Sharpe ratio from monthly returns.

    Formula: (mean(monthly) - mean(rf)) × 12 / (σ_monthly × √12)

    Args:
        monthly: Monthly fund returns
        risk_free: Risk-free observations (mean 0.0 when empty)

    Returns:
        Sharpe ratio at full precision; 0.0 when there are no monthly returns
        or volatility is zero
    """
    if len(monthly) == 0:
        return 0.0

    excess = (mean(monthly) - mean(risk_free)) * MONTHS_PER_YEAR
    denominator = annualized_volatility(monthly)

    if denominator == 0:
        return 0.0

    return excess / denominator


def downside_deviation(monthly: Sequence[float], target: float) -> float:
    """
    Downside deviation below a target, annualized.

    Only observations strictly below the target contribute; deviations are
    measured from the target. With no such observations the divisor is 1,
    so the result is 0.0.

    Formula: sqrt(Σ (r - target)² / max(count, 1)) × √12
    """
    below = [r - target for r in monthly if r < target]
    divisor = len(below) or 1
    squared = float(np.sum(np.square(np.asarray(below, dtype=float)))) if below else 0.0
    return math.sqrt(squared / divisor) * math.sqrt(MONTHS_PER_YEAR)


def sortino_ratio(monthly: Sequence[float], risk_free: Sequence[float]) -> float:
    """
    Annualized Sortino ratio from monthly returns.

    Same numerator as the Sharpe ratio; the denominator is the downside
    deviation below the risk-free mean.

    Args:
        monthly: Monthly fund returns
        risk_free: Risk-free observations (mean 0.0 when empty)

    Returns:
        Sortino ratio at full precision; 0.0 when there are no monthly
        returns or no downside deviation
    """
    if len(monthly) == 0:
        return 0.0

    rf_mean = mean(risk_free)
    excess = (mean(monthly) - rf_mean) * MONTHS_PER_YEAR
    denominator = downside_deviation(monthly, rf_mean)

    if denominator == 0:
        return 0.0

    return excess / denominator
