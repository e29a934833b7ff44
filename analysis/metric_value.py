"""
Tagged metric values.
A metric is either still loading, a number, or unavailable with a reason,
so a loading or missing state can never be formatted as a number.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class MetricStatus(str, Enum):
    """Enumeration of metric states."""
    LOADING = 'loading'
    VALUE = 'value'
    UNAVAILABLE = 'unavailable'


@dataclass(frozen=True)
class MetricValue:
    """LOADING, VALUE(number) or UNAVAILABLE(reason)."""
    status: MetricStatus
    value: Optional[float] = None
    reason: Optional[str] = None

    def __post_init__(self):
        if self.status is MetricStatus.VALUE and self.value is None:
            raise ValueError("VALUE metrics need a value")
        if self.status is not MetricStatus.VALUE and self.value is not None:
            raise ValueError(f"{self.status.value} metrics carry no value")

    @classmethod
    def loading(cls) -> 'MetricValue':
        return cls(status=MetricStatus.LOADING)

    @classmethod
    def of(cls, value: float) -> 'MetricValue':
        return cls(status=MetricStatus.VALUE, value=float(value))

    @classmethod
    def unavailable(cls, reason: str) -> 'MetricValue':
        return cls(status=MetricStatus.UNAVAILABLE, reason=reason)

    @property
    def has_value(self) -> bool:
        return self.status is MetricStatus.VALUE

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status.value,
            'value': self.value,
            'reason': self.reason,
        }
