"""
Report renderer - turns an analysis result into a Markdown performance report.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from reports.returns_table import MONTH_KEYS


class ReportRenderError(Exception):
    """Raised when report rendering fails."""
    pass


STAT_LABELS = [
    ('inception_date', 'Inception Date'),
    ('daily_var', 'Daily VaR (95%)'),
    ('monthly_var', 'Monthly VaR (95%)'),
    ('best_month', 'Best Month'),
    ('worst_month', 'Worst Month'),
    ('sharpe_ratio', 'Sharpe Ratio'),
    ('sortino_ratio', 'Sortino Ratio'),
    ('correlation', 'Correlation to Benchmark'),
    ('volatility_annualized', 'Volatility (annualized)'),
    ('perf_since_inception', 'Performance Since Inception'),
    ('perf_annualized', 'Performance Annualized'),
]


def render_markdown_report(result: Dict[str, Any], title: str = 'Fund Performance Report') -> str:
    """
    Build the Markdown report for a completed analysis result.

    Args:
        result: Dictionary returned by run_analysis
        title: Report heading

    Returns:
        Markdown text

    Raises:
        ReportRenderError: If the result is not a completed analysis
    """
    if not isinstance(result, dict) or result.get('status') != 'completed':
        raise ReportRenderError("Can only render a completed analysis result")

    for key in ('display', 'table', 'sources'):
        if key not in result:
            raise ReportRenderError(f"Missing required section: {key}")

    sections = [
        f"# {title}",
        _build_statistics_section(result['display']),
        _build_returns_table(result['table']),
        _build_appendix(result),
    ]
    return '\n\n'.join(sections) + '\n'


def render_report(result: Dict[str, Any], output_path: Path, title: str = 'Fund Performance Report') -> Dict[str, Any]:
    """
    Render the Markdown report and write it to disk.

    Returns:
        Dictionary with render status, output path and size
    """
    start_time = datetime.now()

    try:
        markdown_content = render_markdown_report(result, title=title)
    except ReportRenderError as e:
        return {
            'status': 'failed',
            'error_message': str(e),
            'output_path': None,
            'duration_seconds': (datetime.now() - start_time).total_seconds()
        }

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        f.write(markdown_content)

    return {
        'status': 'completed',
        'output_path': str(output_path),
        'report_size_bytes': len(markdown_content),
        'duration_seconds': (datetime.now() - start_time).total_seconds()
    }


def _build_statistics_section(display: Dict[str, str]) -> str:
    lines = [
        "## Important Statistics",
        "",
        "| Statistic | Value |",
        "|-----------|-------|",
    ]
    for key, label in STAT_LABELS:
        lines.append(f"| {label} | {display.get(key, 'N/A')} |")
    return '\n'.join(lines)


def _build_returns_table(rows: List[Dict[str, str]]) -> str:
    header = ['Year'] + [m.capitalize() for m in MONTH_KEYS] + ['Total']
    lines = [
        "## Monthly Returns",
        "",
        '| ' + ' | '.join(header) + ' |',
        '|' + '|'.join(['------'] * len(header)) + '|',
    ]

    if not rows:
        lines.append('| ' + ' | '.join(['-'] + [''] * (len(header) - 1)) + ' |')

    for row in rows:
        cells = [row['year']] + [row.get(m, '') for m in MONTH_KEYS] + [row.get('total', '')]
        lines.append('| ' + ' | '.join(cells) + ' |')

    return '\n'.join(lines)


def _build_appendix(result: Dict[str, Any]) -> str:
    sources = result['sources']
    lines = [
        "## Appendix",
        "",
        "### Data Sources",
    ]
    for name, source in sources.items():
        lines.append(f"- **{name}:** {source or 'Not configured'}")

    if result.get('used_fallback'):
        lines.append("")
        lines.append("*No return source was reachable; figures use the inline sample series.*")

    calculated_at = result.get('metadata', {}).get('calculated_at')
    if calculated_at:
        lines.append("")
        lines.append(f"*Generated: {calculated_at}*")

    lines.append("")
    lines.append("*Past performance does not guarantee future results.*")
    return '\n'.join(lines)
