"""
Search session state

One SearchSession per searchable surface. It owns at most one live MatchSet,
remembers the generation of the most recently requested query, and decides
whether an arriving result is still current enough to commit.
"""

import logging
import threading
from enum import Enum
from typing import Optional, Sequence, Any

from termfind.match_set import MatchSet, MatchSpan, Query, release_result

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    HAS_RESULTS = "has_results"
    NO_RESULTS = "no_results"


class SearchSession:
    """Generation arbiter and sole owner of the current MatchSet"""

    def __init__(self):
        self._lock = threading.RLock()
        self._current: Optional[MatchSet] = None
        self._latest_generation = 0
        self._pending = False

    @property
    def lock(self):
        """Held by every session change; callers extend it over their side effects."""
        return self._lock

    @property
    def current(self) -> Optional[MatchSet]:
        return self._current

    @property
    def latest_requested_generation(self) -> int:
        return self._latest_generation

    @property
    def pending(self) -> bool:
        return self._pending

    @property
    def state(self) -> SessionState:
        with self._lock:
            if self._pending:
                return SessionState.SEARCHING
            if self._current is None:
                return SessionState.IDLE
            if self._current.spans:
                return SessionState.HAS_RESULTS
            return SessionState.NO_RESULTS

    def begin_query(self) -> int:
        """Allocate the next generation and mark it as the one to wait for."""
        with self._lock:
            self._latest_generation += 1
            self._pending = True
            return self._latest_generation

    def is_current(self, generation: int) -> bool:
        return generation == self._latest_generation

    def commit(self, query: Query, spans: Sequence[MatchSpan], resource: Any = None) -> Optional[MatchSet]:
        """
        Install the result of query if it is still the latest request.

        Returns the new MatchSet, or None if the result was stale. A stale
        result's resource is released here since nobody else will own it.
        """
        with self._lock:
            if not self.is_current(query.generation):
                logger.debug("Dropping stale result for %r (gen %d, latest %d)",
                             query.text, query.generation, self._latest_generation)
                release_result(resource)
                return None

            match_set = MatchSet(query, spans, resource)
            previous, self._current = self._current, match_set
            self._pending = False
            if previous is not None:
                previous.release()
            logger.debug("Committed %r", match_set)
            return match_set

    def clear(self) -> None:
        """Release the current MatchSet and invalidate any pending result."""
        with self._lock:
            if self._pending:
                # A result still in flight must never commit after a clear
                self._latest_generation += 1
                self._pending = False
            previous, self._current = self._current, None
            if previous is not None:
                previous.release()

    def step(self, delta: int) -> Optional[MatchSpan]:
        with self._lock:
            if self._current is None:
                return None
            return self._current.step(delta)

    def select(self, index: int) -> Optional[MatchSpan]:
        with self._lock:
            if self._current is None:
                return None
            return self._current.select(index)
