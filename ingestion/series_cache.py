"""
Series cache - explicit, keyed holder for loaded return series.
Each entry is populated at most once and read thereafter.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from ingestion.schema import ReturnSeries
from ingestion.series_loader import SeriesUnavailableError

logger = logging.getLogger(__name__)

SeriesFactory = Callable[[], ReturnSeries]


class LoadStatus(str, Enum):
    """Enumeration of series load states."""
    PENDING = 'pending'
    READY = 'ready'
    UNAVAILABLE = 'unavailable'


@dataclass(frozen=True)
class LoadState:
    """Tagged load result: PENDING, READY(series) or UNAVAILABLE(reason)."""
    status: LoadStatus
    series: Optional[ReturnSeries] = None
    reason: Optional[str] = None

    @classmethod
    def pending(cls) -> 'LoadState':
        return cls(status=LoadStatus.PENDING)

    @classmethod
    def ready(cls, series: ReturnSeries) -> 'LoadState':
        return cls(status=LoadStatus.READY, series=series)

    @classmethod
    def unavailable(cls, reason: str) -> 'LoadState':
        return cls(status=LoadStatus.UNAVAILABLE, reason=reason)

    @property
    def is_ready(self) -> bool:
        return self.status is LoadStatus.READY


class SeriesCache:
    """
    Cache of return series keyed by logical series name.

    Factories are registered per name; `get` runs the factory on first use
    and returns the stored state afterwards. A caller arriving while another
    caller is loading the same name receives PENDING instead of triggering a
    second load.
    """

    def __init__(self):
        self._factories: Dict[str, SeriesFactory] = {}
        self._states: Dict[str, LoadState] = {}
        self._lock = threading.Lock()

    def register(self, name: str, factory: SeriesFactory) -> None:
        """Register (or replace) the loader for a series name."""
        with self._lock:
            self._factories[name] = factory
            self._states.pop(name, None)

    def peek(self, name: str) -> LoadState:
        """Current state without triggering a load."""
        with self._lock:
            return self._states.get(name, LoadState.pending())

    def get(self, name: str) -> LoadState:
        """
        Return the state for a series, loading it on first access.

        Args:
            name: Registered series name

        Returns:
            LoadState (READY with the series, UNAVAILABLE with a reason, or
            PENDING while another caller is loading it)

        Raises:
            KeyError: If no factory is registered under name
        """
        with self._lock:
            if name not in self._factories:
                raise KeyError(f"No series registered under {name!r}")

            state = self._states.get(name)
            if state is not None:
                return state

            self._states[name] = LoadState.pending()
            factory = self._factories[name]

        try:
            series = factory()
        except SeriesUnavailableError as e:
            logger.warning(f"Series {name} unavailable: {e}")
            final = LoadState.unavailable(str(e))
        except Exception:
            # Leave no stale PENDING entry behind a contract violation
            with self._lock:
                self._states.pop(name, None)
            raise
        else:
            logger.info(f"Series {name} loaded ({len(series)} observations from {series.source})")
            final = LoadState.ready(series)

        with self._lock:
            self._states[name] = final

        return final

    def invalidate(self, name: Optional[str] = None) -> None:
        """Drop one cached entry, or all entries when name is None."""
        with self._lock:
            if name is None:
                self._states.clear()
            else:
                self._states.pop(name, None)
