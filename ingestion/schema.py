"""
Canonical series types produced by ingestion and consumed by analysis.
Immutable values - no back-references, no shared mutable state.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterator, List, Tuple

from ingestion.transforms.validators import validate_observation


@dataclass(frozen=True)
class DailyObservation:
    """One admitted daily return: a calendar date and a finite decimal fraction."""
    date: date
    value: float

    def __post_init__(self):
        validate_observation(self.date, self.value)

    @property
    def period(self) -> str:
        """Calendar month key in YYYY-MM form."""
        return f"{self.date.year:04d}-{self.date.month:02d}"


@dataclass(frozen=True)
class ReturnSeries:
    """
    Ordered daily return series for one source.

    Order follows the source rows and is not guaranteed to be sorted by date.
    """
    observations: Tuple[DailyObservation, ...] = field(default_factory=tuple)
    source: str = ''
    is_fallback: bool = False

    def __post_init__(self):
        # Accept any iterable but always store a tuple
        if not isinstance(self.observations, tuple):
            object.__setattr__(self, 'observations', tuple(self.observations))

    def __len__(self) -> int:
        return len(self.observations)

    def __iter__(self) -> Iterator[DailyObservation]:
        return iter(self.observations)

    @property
    def dates(self) -> List[date]:
        return [obs.date for obs in self.observations]

    @property
    def values(self) -> List[float]:
        return [obs.value for obs in self.observations]

    @property
    def is_empty(self) -> bool:
        return not self.observations
