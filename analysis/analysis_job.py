"""
Orchestrated analysis job - sources to statistics, table and metrics JSON.
Loads series through the cache, calls pure functions, optionally persists JSON.
"""

import json
import logging
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import Any, Dict, Optional

from ingestion.config import (
    SourcesConfig,
    SeriesConfig,
    RETURNS_SERIES,
    RISK_FREE_SERIES,
    BENCHMARK_SERIES
)
from ingestion.series_cache import SeriesCache, LoadState
from ingestion.series_loader import load_series
from analysis.calculations.monthly import aggregate_monthly
from analysis.statistics_engine import compute_statistics
from reports.formatters import format_statistics
from reports.returns_table import format_table

logger = logging.getLogger(__name__)


class AnalysisJobError(Exception):
    """Raised when a required series cannot be obtained."""
    pass


def build_series_cache(config: SourcesConfig) -> SeriesCache:
    """
    Register one loader per configured series.

    Args:
        config: Sources configuration

    Returns:
        SeriesCache with a factory per series name
    """
    cache = SeriesCache()
    for name, series_config in config.series.items():
        cache.register(name, partial(_load_configured_series, series_config, config))
    return cache


def _load_configured_series(series_config: SeriesConfig, config: SourcesConfig):
    return load_series(
        series_config.candidates,
        series_config.unit,
        name=series_config.name,
        timeout=config.timeout_s,
        base_url=config.base_url,
        base_dir=config.base_dir,
        use_fallback=series_config.fallback,
    )


def run_analysis(
    config: SourcesConfig,
    output_path: Optional[Path] = None,
    cache: Optional[SeriesCache] = None
) -> Dict[str, Any]:
    """
    Run the complete analysis and optionally save results to JSON.

    Args:
        config: Sources configuration
        output_path: Path to save the metrics JSON (optional)
        cache: Pre-built series cache (built from config when None)

    Returns:
        Dictionary with job status, statistics, table and monthly returns
    """
    start_time = datetime.now()

    if cache is None:
        cache = build_series_cache(config)

    try:
        daily = _require_series(cache, RETURNS_SERIES)
        risk_free = _require_series(cache, RISK_FREE_SERIES)

        monthly = aggregate_monthly(daily)

        benchmark_monthly = None
        benchmark_source = None
        if config.has_benchmark:
            benchmark_state = cache.get(BENCHMARK_SERIES)
            if benchmark_state.is_ready:
                benchmark_monthly = aggregate_monthly(benchmark_state.series)
                benchmark_source = benchmark_state.series.source
            else:
                logger.warning(f"Benchmark unavailable: {benchmark_state.reason}")

        stats = compute_statistics(
            daily,
            monthly,
            risk_free,
            benchmark_monthly,
            inception_date=config.inception_date,
        )
        table = format_table(monthly)

        result = {
            'status': 'completed',
            'statistics': stats.to_dict(),
            'display': format_statistics(stats),
            'monthly_returns': [
                {'period': m.period, 'return_pct': m.return_pct} for m in monthly
            ],
            'table': [row.to_dict() for row in table],
            'sources': {
                RETURNS_SERIES: daily.source,
                RISK_FREE_SERIES: risk_free.source,
                BENCHMARK_SERIES: benchmark_source,
            },
            'used_fallback': daily.is_fallback,
            'metadata': {
                'calculated_at': datetime.now().isoformat(),
                'calculation_version': '0.1.0',
            },
        }

        if output_path is not None:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'w') as f:
                json.dump(result, f, indent=2, default=str)
            result['output_path'] = str(output_path)
        else:
            result['output_path'] = None

        result['duration_seconds'] = (datetime.now() - start_time).total_seconds()
        return result

    except Exception as e:
        logger.error(f"Analysis failed: {e}")
        return {
            'status': 'failed',
            'error_message': str(e),
            'output_path': None,
            'duration_seconds': (datetime.now() - start_time).total_seconds()
        }


def _require_series(cache: SeriesCache, name: str):
    """Return a READY series or raise with the unavailable reason."""
    state: LoadState = cache.get(name)
    if not state.is_ready:
        raise AnalysisJobError(f"Series {name} not available: {state.reason or state.status.value}")
    return state.series
