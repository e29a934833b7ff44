"""
Tests for display formatters.
"""

import pytest
from datetime import date, datetime

from analysis.calculations.monthly import MonthlyReturn
from analysis.metric_value import MetricValue
from analysis.statistics_engine import FundStatistics
from reports.formatters import (
    format_percent,
    format_fraction_as_percent,
    format_ratio,
    format_metric,
    format_month_entry,
    format_date_display,
    format_statistics,
    FormatterError,
    NOT_AVAILABLE,
    LOADING
)


def _stats(**overrides):
    values = dict(
        daily_var=-0.0123,
        monthly_var=-2.5,
        best_month=MonthlyReturn(period='2024-03', return_pct=4.321),
        worst_month=MonthlyReturn(period='2024-02', return_pct=-2.5),
        sharpe_ratio=1.2,
        sortino_ratio=2.35,
        correlation=MetricValue.of(0.87),
        perf_since_inception=6.1,
        perf_annualized=12.75,
        volatility_annualized=8.0,
        inception_date=date(2024, 1, 16),
        month_count=3,
        observation_count=40,
    )
    values.update(overrides)
    return FundStatistics(**values)


class TestFormatPercent:
    """Tests for percent formatters."""

    def test_percent(self):
        assert format_percent(8.456) == '8.46%'
        assert format_percent(-2.0) == '-2.00%'
        assert format_percent(1.5, decimal_places=1) == '1.5%'

    def test_percent_none(self):
        assert format_percent(None) == NOT_AVAILABLE

    def test_percent_rejects_text(self):
        with pytest.raises(FormatterError):
            format_percent('8.45')

    def test_fraction(self):
        assert format_fraction_as_percent(0.0845) == '8.45%'
        assert format_fraction_as_percent(None) == NOT_AVAILABLE


class TestFormatRatio:
    """Tests for format_ratio function."""

    def test_ratio(self):
        assert format_ratio(1.2) == '1.20'
        assert format_ratio(-0.456) == '-0.46'
        assert format_ratio(None) == NOT_AVAILABLE

    def test_ratio_rejects_bool(self):
        with pytest.raises(FormatterError):
            format_ratio(True)


class TestFormatMetric:
    """Tests for format_metric function."""

    def test_value(self):
        assert format_metric(MetricValue.of(0.87)) == '0.87'

    def test_loading_never_numeric(self):
        assert format_metric(MetricValue.loading()) == LOADING

    def test_unavailable_reason(self):
        assert format_metric(MetricValue.unavailable('No common periods')) == 'No common periods'

    def test_wrong_type(self):
        with pytest.raises(FormatterError):
            format_metric(0.87)


class TestFormatMonthEntry:
    """Tests for format_month_entry function."""

    def test_entry(self):
        assert format_month_entry(MonthlyReturn(period='2024-03', return_pct=4.321)) == '2024-03: 4.32%'

    def test_none(self):
        assert format_month_entry(None) == NOT_AVAILABLE


class TestFormatDateDisplay:
    """Tests for format_date_display function."""

    def test_date(self):
        assert format_date_display(date(2024, 1, 16)) == 'January 16, 2024'

    def test_datetime(self):
        assert format_date_display(datetime(2024, 12, 5, 9, 30)) == 'December 5, 2024'

    def test_iso_string(self):
        assert format_date_display('2024-01-16T10:00:00') == 'January 16, 2024'

    def test_none(self):
        assert format_date_display(None) == NOT_AVAILABLE

    def test_invalid_string(self):
        with pytest.raises(FormatterError):
            format_date_display('16/01/2024')


class TestFormatStatistics:
    """Tests for format_statistics function."""

    def test_all_fields(self):
        display = format_statistics(_stats())

        assert display == {
            'inception_date': 'January 16, 2024',
            'daily_var': '-1.23%',
            'monthly_var': '-2.50%',
            'best_month': '2024-03: 4.32%',
            'worst_month': '2024-02: -2.50%',
            'sharpe_ratio': '1.20',
            'sortino_ratio': '2.35',
            'correlation': '0.87',
            'perf_since_inception': '6.10%',
            'perf_annualized': '12.75%',
            'volatility_annualized': '8.00%',
        }

    def test_empty_statistics(self):
        display = format_statistics(_stats(
            best_month=None,
            worst_month=None,
            perf_since_inception=None,
            perf_annualized=None,
            inception_date=None,
            correlation=MetricValue.unavailable('No benchmark'),
        ))

        assert display['best_month'] == NOT_AVAILABLE
        assert display['perf_annualized'] == NOT_AVAILABLE
        assert display['inception_date'] == NOT_AVAILABLE
        assert display['correlation'] == 'No benchmark'

    def test_wrong_type(self):
        with pytest.raises(FormatterError):
            format_statistics({'sharpe_ratio': 1.0})
