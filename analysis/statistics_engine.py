"""
Statistics engine - composes all fund calculations into one FundStatistics record.
Pure function: same inputs, same record.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional, Sequence

from ingestion.schema import ReturnSeries
from analysis.calculations.monthly import MonthlyReturn
from analysis.calculations.var import value_at_risk
from analysis.calculations.ratios import sharpe_ratio, sortino_ratio, annualized_volatility
from analysis.calculations.correlation import monthly_correlation
from analysis.calculations.performance import (
    best_month,
    worst_month,
    performance_since_inception,
    annualized_performance
)
from analysis.metric_value import MetricValue

DEFAULT_CONFIDENCE = 0.95
RATIO_DECIMALS = 2

NO_COMMON_PERIODS = 'No common periods'
NO_BENCHMARK = 'No benchmark'


class StatisticsEngineError(Exception):
    """Raised when the engine is called with invalid inputs."""
    pass


@dataclass(frozen=True)
class FundStatistics:
    """Flat record of fund statistics, recomputed wholesale on every input change."""
    daily_var: float
    monthly_var: float
    best_month: Optional[MonthlyReturn]
    worst_month: Optional[MonthlyReturn]
    sharpe_ratio: float
    sortino_ratio: float
    correlation: MetricValue
    perf_since_inception: Optional[float]
    perf_annualized: Optional[float]
    volatility_annualized: float
    inception_date: Optional[date]
    month_count: int
    observation_count: int

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable view of the record."""
        return {
            'daily_var': self.daily_var,
            'monthly_var': self.monthly_var,
            'best_month': _month_dict(self.best_month),
            'worst_month': _month_dict(self.worst_month),
            'sharpe_ratio': self.sharpe_ratio,
            'sortino_ratio': self.sortino_ratio,
            'correlation': self.correlation.to_dict(),
            'perf_since_inception': self.perf_since_inception,
            'perf_annualized': self.perf_annualized,
            'volatility_annualized': self.volatility_annualized,
            'inception_date': self.inception_date.isoformat() if self.inception_date else None,
            'month_count': self.month_count,
            'observation_count': self.observation_count,
        }


def compute_statistics(
    daily: ReturnSeries,
    monthly: Sequence[MonthlyReturn],
    risk_free: ReturnSeries,
    benchmark_monthly: Optional[Sequence[MonthlyReturn]] = None,
    *,
    confidence: float = DEFAULT_CONFIDENCE,
    inception_date: Optional[date] = None
) -> FundStatistics:
    """
    Compute fund performance and risk statistics.

    Args:
        daily: Daily fund returns (decimal fractions)
        monthly: Monthly fund returns (percent), as produced by aggregate_monthly
        risk_free: Risk-free series (already unit-scaled on ingestion)
        benchmark_monthly: Monthly benchmark returns for correlation (optional)
        confidence: VaR confidence level
        inception_date: Fund inception date; defaults to the earliest daily date

    Returns:
        FundStatistics

    Raises:
        StatisticsEngineError: If a required series is None
    """
    if daily is None:
        raise StatisticsEngineError("daily series is required")
    if monthly is None:
        raise StatisticsEngineError("monthly returns are required")
    if risk_free is None:
        raise StatisticsEngineError("risk-free series is required")

    monthly = list(monthly)
    monthly_values = [m.return_pct for m in monthly]
    rf_values = risk_free.values

    if inception_date is None and not daily.is_empty:
        inception_date = min(daily.dates)

    return FundStatistics(
        daily_var=value_at_risk(daily.values, confidence),
        monthly_var=value_at_risk(monthly_values, confidence),
        best_month=best_month(monthly),
        worst_month=worst_month(monthly),
        sharpe_ratio=round(sharpe_ratio(monthly_values, rf_values), RATIO_DECIMALS),
        sortino_ratio=round(sortino_ratio(monthly_values, rf_values), RATIO_DECIMALS),
        correlation=_correlation_metric(monthly, benchmark_monthly),
        perf_since_inception=performance_since_inception(monthly),
        perf_annualized=annualized_performance(monthly),
        volatility_annualized=annualized_volatility(monthly_values),
        inception_date=inception_date,
        month_count=len(monthly),
        observation_count=len(daily),
    )


def _correlation_metric(
    monthly: Sequence[MonthlyReturn],
    benchmark_monthly: Optional[Sequence[MonthlyReturn]]
) -> MetricValue:
    """Correlation as a tagged metric value."""
    if benchmark_monthly is None:
        return MetricValue.unavailable(NO_BENCHMARK)

    correlation = monthly_correlation(monthly, benchmark_monthly)
    if correlation is None:
        return MetricValue.unavailable(NO_COMMON_PERIODS)

    return MetricValue.of(round(correlation, RATIO_DECIMALS))


def _month_dict(month: Optional[MonthlyReturn]) -> Optional[Dict[str, Any]]:
    if month is None:
        return None
    return {'period': month.period, 'return_pct': month.return_pct}
