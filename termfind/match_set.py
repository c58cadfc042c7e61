"""
Match data model

A Query is what the user asked for, a MatchSpan is one hit in the buffer, and
a MatchSet is the committed result of one search: the spans in engine order
plus a cursor that navigation moves around.
"""

import logging
from typing import NamedTuple, Optional, Sequence, Tuple, Any

logger = logging.getLogger(__name__)


class Query(NamedTuple):
    text: str
    case_sensitive: bool
    generation: int


class MatchSpan(NamedTuple):
    """One occurrence of the query, in (line, col) buffer coordinates"""
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    @property
    def start(self) -> Tuple[int, int]:
        return (self.start_line, self.start_col)

    @property
    def end(self) -> Tuple[int, int]:
        return (self.end_line, self.end_col)


def owned_resource(result: Any) -> Any:
    """Return result if it carries a resource (a close() method), else None."""
    return result if callable(getattr(result, "close", None)) else None


def release_result(result: Any) -> None:
    """Close an engine result that nobody is going to keep."""
    resource = owned_resource(result)
    if resource is not None:
        resource.close()


# ============================================================
#   MATCH SET
# ============================================================

class MatchSet:
    """
    Ordered, immutable collection of spans from one search, with a mutable cursor.

    If the engine handed over a resource (anything with close()), the MatchSet
    owns it and release() closes it exactly once. Spans are never mutated
    after construction; a new search produces a new MatchSet.
    """

    def __init__(self, query: Query, spans: Sequence[MatchSpan], resource: Any = None):
        self.query = query
        self.spans: Tuple[MatchSpan, ...] = tuple(spans)
        self.current_index: Optional[int] = 0 if self.spans else None
        self._resource = resource
        self._released = False

    def __len__(self):
        return len(self.spans)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False

    @property
    def released(self) -> bool:
        return self._released

    @property
    def current(self) -> Optional[MatchSpan]:
        if self.current_index is None:
            return None
        return self.spans[self.current_index]

    def step(self, delta: int) -> Optional[MatchSpan]:
        """Move the cursor by delta, wrapping around. Returns the new current span."""
        if not self.spans:
            return None
        self.current_index = (self.current_index + delta) % len(self.spans)
        return self.spans[self.current_index]

    def select(self, index: int) -> Optional[MatchSpan]:
        """Move the cursor to index; out of range leaves it untouched and returns None."""
        if not 0 <= index < len(self.spans):
            return None
        self.current_index = index
        return self.spans[index]

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        resource, self._resource = self._resource, None
        if resource is not None:
            logger.debug("Releasing match resource for %r (gen %d)", self.query.text, self.query.generation)
            release_result(resource)

    def __repr__(self):
        return f"MatchSet(query={self.query.text!r}, matches={len(self.spans)}, current={self.current_index})"
