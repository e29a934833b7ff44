"""
Returns table - year × month performance grid with compounded yearly totals.
Pure functions - monthly returns in, display rows out.
"""

from dataclasses import dataclass, fields
from typing import Dict, List, Optional, Sequence

from analysis.calculations.monthly import MonthlyReturn, compound

MONTH_KEYS = ['jan', 'feb', 'mar', 'apr', 'may', 'jun',
              'jul', 'aug', 'sep', 'oct', 'nov', 'dec']


@dataclass(frozen=True)
class TableRow:
    """
    One year of the returns grid.

    Month cells hold "x.xx%" or "" when the month has no data; an empty cell
    is missing data, never a 0% month.
    """
    year: str
    jan: str = ''
    feb: str = ''
    mar: str = ''
    apr: str = ''
    may: str = ''
    jun: str = ''
    jul: str = ''
    aug: str = ''
    sep: str = ''
    oct: str = ''
    nov: str = ''
    dec: str = ''
    total: str = ''

    def month_cells(self) -> List[str]:
        return [getattr(self, key) for key in MONTH_KEYS]

    def to_dict(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def format_cell(return_pct: float) -> str:
    """Format a percent return as a table cell (e.g., "5.00%")."""
    return f"{return_pct:.2f}%"


def parse_cell(cell: str) -> Optional[float]:
    """Percent value of a populated cell; None for an empty cell."""
    if not cell:
        return None
    return float(cell.rstrip('%'))


def cell_sign(cell: str) -> str:
    """
    Styling class for a cell: "positive", "negative" or "".

    Empty cells are unstyled; a populated zero cell is unstyled too.
    """
    value = parse_cell(cell)
    if value is None:
        return ''
    if value > 0:
        return 'positive'
    if value < 0:
        return 'negative'
    return ''


def format_table(monthly: Sequence[MonthlyReturn]) -> List[TableRow]:
    """
    Project monthly returns into year rows sorted ascending by year.

    Each year's total compounds the parsed month cells of that year:
    Π(1 + v/100) - 1, shown in percent. Totals are built from the displayed
    two-decimal cells so the row is internally consistent.

    Args:
        monthly: Monthly returns in any order

    Returns:
        List of TableRow, one per distinct year

    Example:
        2024-01: 5%, 2024-02: -2% → total ((1.05)(0.98) - 1) × 100 = 2.90%
    """
    years: Dict[str, Dict[str, str]] = {}

    for month in monthly:
        cells = years.setdefault(month.year, {})
        cells[MONTH_KEYS[month.month - 1]] = format_cell(month.return_pct)

    rows = []
    for year in sorted(years):
        cells = years[year]
        values = [parse_cell(cells[key]) for key in MONTH_KEYS if cells.get(key)]

        total = ''
        if values:
            total = format_cell(compound([v / 100 for v in values]) * 100)

        rows.append(TableRow(year=year, total=total, **cells))

    return rows
