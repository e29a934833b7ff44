"""
Source configuration - which candidates feed each named return series.
YAML file plus environment overrides (.env supported).
"""

import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from ingestion.transforms.normalizers import UnitPolicy

# Load environment variables
load_dotenv()

RETURNS_SERIES = 'returns'
RISK_FREE_SERIES = 'risk_free'
BENCHMARK_SERIES = 'benchmark'

REQUIRED_SERIES = (RETURNS_SERIES, RISK_FREE_SERIES)
DEFAULT_CONFIG_PATH = './config/sources.yml'


class SourcesConfigError(Exception):
    """Raised when the sources configuration cannot be loaded."""
    pass


@dataclass
class SeriesConfig:
    """Candidate list and unit policy for one logical series."""
    name: str
    candidates: List[str]
    unit: UnitPolicy = UnitPolicy.IDENTITY
    fallback: bool = True

    def __post_init__(self):
        """Validate fields."""
        if not self.candidates:
            raise ValueError(f"series {self.name!r} needs at least one candidate")

        if not all(isinstance(c, str) and c for c in self.candidates):
            raise ValueError(f"series {self.name!r} candidates must be non-empty strings")


@dataclass
class SourcesConfig:
    """Configuration for every series the engine loads."""
    series: Dict[str, SeriesConfig]
    base_url: Optional[str] = None
    base_dir: Optional[Path] = None
    timeout_s: float = 30.0
    inception_date: Optional[date] = None
    path: Optional[Path] = field(default=None, compare=False)

    def __post_init__(self):
        """Validate required series."""
        missing = [name for name in REQUIRED_SERIES if name not in self.series]
        if missing:
            raise ValueError(f"missing required series: {missing}")

    @property
    def has_benchmark(self) -> bool:
        return BENCHMARK_SERIES in self.series


def load_sources_config(config_path: Optional[str] = None) -> SourcesConfig:
    """
    Load series source configuration from a YAML file.

    Environment variables:
        RETURNS_SOURCES_CONFIG: config path when config_path is None
        RETURNS_BASE_URL: overrides base_url from the file
        REQUESTS_TIMEOUT_S: per-request timeout in seconds
        FUND_INCEPTION_DATE: overrides inception_date from the file

    Args:
        config_path: Path to the sources config file

    Returns:
        SourcesConfig

    Raises:
        SourcesConfigError: If the file is missing or malformed
    """
    if config_path is None:
        config_path = os.getenv('RETURNS_SOURCES_CONFIG', DEFAULT_CONFIG_PATH)

    config_file = Path(config_path)
    if not config_file.exists():
        raise SourcesConfigError(f"Sources config file not found: {config_path}")

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise SourcesConfigError(f"Failed to load sources config: {e}") from e

    if not isinstance(raw, dict) or 'series' not in raw:
        raise SourcesConfigError("Sources config missing 'series' section")

    try:
        return build_sources_config(raw, config_dir=config_file.parent, path=config_file)
    except (TypeError, ValueError) as e:
        raise SourcesConfigError(f"Invalid sources config: {e}") from e


def build_sources_config(
    raw: Dict[str, Any],
    *,
    config_dir: Optional[Path] = None,
    path: Optional[Path] = None
) -> SourcesConfig:
    """
    Build SourcesConfig from an already-parsed mapping.

    Raises:
        ValueError: If a field has the wrong shape
    """
    series_section = raw.get('series')
    if not isinstance(series_section, dict):
        raise ValueError("'series' must be a mapping")

    series = {}
    for name, entry in series_section.items():
        if not isinstance(entry, dict):
            raise ValueError(f"series {name!r} must be a mapping")

        candidates = entry.get('candidates', [])
        if isinstance(candidates, str):
            candidates = [candidates]

        series[name] = SeriesConfig(
            name=name,
            candidates=list(candidates),
            unit=UnitPolicy(entry.get('unit', UnitPolicy.IDENTITY.value)),
            fallback=bool(entry.get('fallback', True)),
        )

    base_url = os.getenv('RETURNS_BASE_URL') or raw.get('base_url')

    timeout_s = float(os.getenv('REQUESTS_TIMEOUT_S', raw.get('timeout_s', 30)))

    inception_raw = os.getenv('FUND_INCEPTION_DATE') or raw.get('inception_date')
    inception_date = _parse_inception_date(inception_raw)

    return SourcesConfig(
        series=series,
        base_url=base_url,
        base_dir=config_dir,
        timeout_s=timeout_s,
        inception_date=inception_date,
        path=path,
    )


def _parse_inception_date(value: Any) -> Optional[date]:
    """Accept ISO strings or YAML-native dates."""
    if value is None or value == '':
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))
