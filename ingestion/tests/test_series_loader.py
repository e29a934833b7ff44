"""
Tests for the series loader - candidate cascade, parsing and inline fallback.
Fetchers are injected or requests.get is mocked; no live network calls.
"""

import pytest
from datetime import date
from pathlib import Path
from unittest.mock import Mock, patch

from ingestion.providers.csv_source import CsvSourceError
from ingestion.providers.inline_fallback import parse_inline_fallback, FALLBACK_SOURCE_NAME
from ingestion.series_loader import (
    load_series,
    load_inline_fallback,
    parse_csv_rows,
    CsvParseError,
    SeriesUnavailableError
)
from ingestion.transforms.normalizers import UnitPolicy

FIXTURES = Path(__file__).parent.parent.parent / 'tests' / 'fixtures'

HTML_PAGE = "<!DOCTYPE html>\n<html><head><title>App</title></head><body></body></html>"


def _fetcher_from(mapping):
    """Fetcher returning canned text, raising CsvSourceError for unknown sources."""
    def fetch(source):
        if source not in mapping:
            raise CsvSourceError(f"Fetch failed for {source}")
        value = mapping[source]
        if isinstance(value, Exception):
            raise value
        return value
    return fetch


class TestParseCsvRows:
    """Tests for parse_csv_rows function."""

    def test_basic_rows(self):
        rows = parse_csv_rows("Date,Return\n2024-01-10,0.01\n")

        assert rows == [['Date', 'Return'], ['2024-01-10', '0.01']]

    def test_blank_lines_skipped(self):
        rows = parse_csv_rows("2024-01-10,0.01\n\n   \n2024-01-11,0.02\n")

        assert [r[0] for r in rows] == ['2024-01-10', '2024-01-11']

    def test_quoted_fields(self):
        rows = parse_csv_rows('2024-01-10,"1,250.5"\n')

        assert rows[0][0] == '2024-01-10'
        assert rows[0][1] == '1,250.5'

    def test_ragged_rows_padded(self):
        rows = parse_csv_rows("Date,Value\n2024-01-10,4.2,ignored\n2024-01-11\n")

        assert rows[1] == ['2024-01-10', '4.2', 'ignored']
        assert rows[2][0] == '2024-01-11'
        assert all(cell == '' for cell in rows[2][1:])

    def test_byte_order_mark(self):
        rows = parse_csv_rows('\ufeffDate,Return\n2024-01-10,0.01')

        assert rows[0][0] == 'Date'

    def test_empty_text(self):
        assert parse_csv_rows("") == []
        assert parse_csv_rows("\n\n") == []

    def test_unterminated_quote(self):
        with pytest.raises(CsvParseError):
            parse_csv_rows('2024-01-10,"0.01\n2024-01-11,0.02\n')

    def test_non_string(self):
        with pytest.raises(CsvParseError):
            parse_csv_rows(None)


class TestLoadSeries:
    """Tests for load_series function."""

    def test_first_candidate_used(self):
        fetcher = _fetcher_from({
            '/Returns.csv': "Date,Return\n2024-01-10,0.01\n2024-01-11,-0.02\n",
            '/assets/Returns.csv': "2024-02-01,0.5\n",
        })

        series = load_series(['/Returns.csv', '/assets/Returns.csv'], fetcher=fetcher)

        assert series.source == '/Returns.csv'
        assert series.is_fallback is False
        assert series.values == [0.01, -0.02]

    def test_cascade_skips_failures_and_markup(self, tmp_path):
        (tmp_path / 'b.csv').write_text(HTML_PAGE)
        (tmp_path / 'c.csv').write_text("2024-01-10,0.03\n")

        series = load_series(['a.csv', 'b.csv', 'c.csv'], base_dir=tmp_path)

        assert series.source == 'c.csv'
        assert series.values == [0.03]

    def test_candidate_without_valid_rows_is_a_miss(self):
        fetcher = _fetcher_from({
            'a.csv': "Date,Return\nnot-a-date,x\n",
            'b.csv': "2024-01-10,0.03\n",
        })

        series = load_series(['a.csv', 'b.csv'], fetcher=fetcher)

        assert series.source == 'b.csv'

    def test_parse_error_is_a_miss(self):
        fetcher = _fetcher_from({
            'a.csv': '2024-01-10,"0.01\n',
            'b.csv': "2024-01-10,0.03\n",
        })

        series = load_series(['a.csv', 'b.csv'], fetcher=fetcher)

        assert series.source == 'b.csv'

    def test_all_markup_falls_back_to_inline_sample(self, tmp_path):
        """Every candidate serving HTML yields exactly the inline sample."""
        (tmp_path / 'a.csv').write_text(HTML_PAGE)
        (tmp_path / 'b.csv').write_text(HTML_PAGE)

        series = load_series(['a.csv', 'b.csv'], base_dir=tmp_path)

        assert series.is_fallback is True
        assert series.source == FALLBACK_SOURCE_NAME
        assert list(series.observations) == parse_inline_fallback()
        assert len(series) == 5

    def test_no_candidates_falls_back(self):
        series = load_series([], fetcher=_fetcher_from({}))

        assert series.is_fallback is True

    def test_fallback_disabled_raises(self):
        with pytest.raises(SeriesUnavailableError, match="All sources failed for rf"):
            load_series(['a.csv'], name='rf', fetcher=_fetcher_from({}), use_fallback=False)

    def test_percent_unit_policy(self):
        fetcher = _fetcher_from({'RF.csv': "Date,Value\n2024-01-10,4.25\n"})

        series = load_series(['RF.csv'], UnitPolicy.PERCENT, fetcher=fetcher)

        assert series.values == [pytest.approx(0.0425)]

    def test_single_string_candidate(self):
        fetcher = _fetcher_from({'a.csv': "2024-01-10,0.01\n"})

        series = load_series('a.csv', fetcher=fetcher)

        assert series.source == 'a.csv'

    def test_mixed_fixture_file(self):
        """Header, EU dates, quotes, blank and malformed rows in one file."""
        series = load_series(['returns_mixed.csv'], base_dir=FIXTURES)

        assert series.source == 'returns_mixed.csv'
        assert series.dates == [
            date(2024, 1, 10),
            date(2024, 1, 16),
            date(2024, 1, 31),
            date(2024, 2, 5),
            date(2024, 2, 5),
        ]
        assert series.values == [0.01, -0.005, 0.002, 1000.0, -0.003]

    def test_row_order_preserved(self):
        fetcher = _fetcher_from({'a.csv': "2024-03-01,0.1\n2024-01-01,0.2\n2024-02-01,0.3\n"})

        series = load_series(['a.csv'], fetcher=fetcher)

        assert [d.month for d in series.dates] == [3, 1, 2]

    @patch('ingestion.providers.csv_source.requests.get')
    def test_default_fetcher_uses_http(self, mock_get):
        response = Mock(status_code=200, ok=True, text="2024-01-10,0.01\n")
        mock_get.return_value = response

        series = load_series(['https://example.com/Returns.csv'], timeout=3)

        assert series.values == [0.01]
        assert mock_get.call_args.kwargs['timeout'] == 3


class TestInlineFallback:
    """Tests for the inline sample series."""

    def test_sample_dates(self):
        series = load_inline_fallback()

        assert series.dates == [
            date(2024, 1, 10),
            date(2024, 1, 11),
            date(2024, 1, 12),
            date(2024, 1, 16),
            date(2024, 1, 17),
        ]

    def test_basis_points_converted_to_decimal(self):
        """16 basis points is a 0.16% day, i.e. 0.0016."""
        values = load_inline_fallback().values

        assert values[3] == pytest.approx(0.0016)
        assert values[0] == 0
        assert values[1] == 0

    def test_percent_column_used_when_basis_points_unparseable(self):
        csv_text = (
            "Date,Start Balance,Gain / Loss,End Balance ,Basis Points ,Daily Gain / Loss\n"
            "2024-01-16,1,1,1,n/a,0.25%\n"
            "2024-01-17,1,1,1,,\n"
        )

        observations = parse_inline_fallback(csv_text)

        assert len(observations) == 1
        assert observations[0].value == pytest.approx(0.0025)
