"""
Display formatters for fund statistics.
Deterministic string formatting for percentages, ratios, months and dates.
"""

from datetime import datetime, date
from typing import Dict, Optional, Union

from analysis.calculations.monthly import MonthlyReturn
from analysis.metric_value import MetricValue, MetricStatus
from analysis.statistics_engine import FundStatistics

NOT_AVAILABLE = "N/A"
LOADING = "Loading..."


class FormatterError(Exception):
    """Raised when formatter input validation fails."""
    pass


def format_percent(value: Optional[float], decimal_places: int = 2) -> str:
    """
    Format a value that is already in percent.

    Args:
        value: Percent value (8.45 = 8.45%)
        decimal_places: Number of decimal places (default: 2)

    Returns:
        Formatted percentage string (e.g., "8.45%"), or "N/A" for None
    """
    if value is None:
        return NOT_AVAILABLE

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FormatterError(f"Percentage value must be numeric, got {type(value)}")

    return f"{value:.{decimal_places}f}%"


def format_fraction_as_percent(value: Optional[float], decimal_places: int = 2) -> str:
    """
    Format a decimal fraction as percent.

    Args:
        value: Decimal value (0.0845 = 8.45%)

    Returns:
        Formatted percentage string, or "N/A" for None
    """
    if value is None:
        return NOT_AVAILABLE

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FormatterError(f"Percentage value must be numeric, got {type(value)}")

    return format_percent(value * 100, decimal_places)


def format_ratio(value: Optional[float]) -> str:
    """Format a ratio to two decimals (e.g., "1.23")."""
    if value is None:
        return NOT_AVAILABLE

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FormatterError(f"Ratio value must be numeric, got {type(value)}")

    return f"{value:.2f}"


def format_metric(metric: MetricValue) -> str:
    """
    Format a tagged metric value.

    Loading and unavailable states render as text and never as a number.
    """
    if not isinstance(metric, MetricValue):
        raise FormatterError(f"Metric must be MetricValue, got {type(metric)}")

    if metric.status is MetricStatus.LOADING:
        return LOADING
    if metric.status is MetricStatus.UNAVAILABLE:
        return metric.reason or NOT_AVAILABLE
    return format_ratio(metric.value)


def format_month_entry(month: Optional[MonthlyReturn]) -> str:
    """Format a best/worst month as "YYYY-MM: x.xx%"."""
    if month is None:
        return NOT_AVAILABLE
    return f"{month.period}: {format_percent(month.return_pct)}"


def format_date_display(date_input: Union[str, date, datetime, None]) -> str:
    """
    Format date as "Month D, YYYY".

    Args:
        date_input: Date as string, date object, or datetime object

    Returns:
        Formatted date string (e.g., "January 16, 2024")
    """
    if date_input is None:
        return NOT_AVAILABLE

    # Convert to date object
    if isinstance(date_input, str):
        try:
            date_obj = date.fromisoformat(date_input[:10])
        except ValueError:
            raise FormatterError(f"Invalid date string: {date_input}")
    elif isinstance(date_input, datetime):
        date_obj = date_input.date()
    elif isinstance(date_input, date):
        date_obj = date_input
    else:
        raise FormatterError(f"Date must be string, date, or datetime, got {type(date_input)}")

    return f"{date_obj.strftime('%B')} {date_obj.day}, {date_obj.year}"


def format_statistics(stats: FundStatistics) -> Dict[str, str]:
    """
    Display strings for every FundStatistics field shown on a report.

    Daily VaR is stored as a decimal fraction and shown in percent; monthly
    figures are already percent.
    """
    if not isinstance(stats, FundStatistics):
        raise FormatterError(f"Statistics must be FundStatistics, got {type(stats)}")

    return {
        'inception_date': format_date_display(stats.inception_date),
        'daily_var': format_fraction_as_percent(stats.daily_var),
        'monthly_var': format_percent(stats.monthly_var),
        'best_month': format_month_entry(stats.best_month),
        'worst_month': format_month_entry(stats.worst_month),
        'sharpe_ratio': format_ratio(stats.sharpe_ratio),
        'sortino_ratio': format_ratio(stats.sortino_ratio),
        'correlation': format_metric(stats.correlation),
        'perf_since_inception': format_percent(stats.perf_since_inception),
        'perf_annualized': format_percent(stats.perf_annualized),
        'volatility_annualized': format_percent(stats.volatility_annualized),
    }
