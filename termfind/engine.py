#!/usr/bin/env python3
"""
Buffer search engine interface and the line-buffer reference engine

The coordinator treats "find all matches of Q in buffer B" as a black box
behind BufferSearchEngine. LineSearchEngine implements it for any buffer that
speaks the editor's line protocol (total() / get_line()), which is what the
terminal history view and the text editor buffer both provide.
"""

import logging
import threading
from typing import Protocol, List, Optional, Sequence, Any, Callable

from termfind.exceptions import SurfaceGone
from termfind.match_set import MatchSpan, release_result  # noqa: F401 (re-exported)

logger = logging.getLogger(__name__)


# ============================================================
#   PROTOCOL DEFINITIONS
# ============================================================

class SearchableBuffer(Protocol):
    """Protocol defining the interface required for search operations"""

    def total(self) -> int:
        """Return total number of lines in buffer"""
        ...

    def get_line(self, line_num: int) -> str:
        """Get text content of a specific line"""
        ...


class BufferSearchEngine(Protocol):
    """
    Finds every occurrence of text in a surface.

    Must be safe to call from a worker thread. May raise EngineFailure (or
    anything else) to signal that the search could not run. If the returned
    sequence has a close() method, ownership of it passes to the caller.
    """

    def search(self, surface: Any, text: str, case_sensitive: bool) -> Sequence[MatchSpan]:
        ...


# ============================================================
#   OWNED RESULTS
# ============================================================

class OwnedMatches(list):
    """A list of spans carrying a resource that must be closed exactly once"""

    def __init__(self, spans=(), on_close: Optional[Callable[[], None]] = None):
        super().__init__(spans)
        self._on_close = on_close
        self.closed = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._on_close is not None:
            self._on_close()


# ============================================================
#   LINE SEARCH ENGINE
# ============================================================

class LineSearchEngine:
    """Literal, line-by-line search over a SearchableBuffer"""

    def __init__(self, max_matches: int = 0):
        self.max_matches = max_matches
        # Results handed out and not yet closed
        self.live_results = 0
        self._count_lock = threading.Lock()

    def search(self, surface: Optional[SearchableBuffer], text: str, case_sensitive: bool) -> OwnedMatches:
        """
        Search surface for text.

        Args:
            surface: Buffer to search in, None if it has been destroyed
            text: Literal text to look for
            case_sensitive: Whether search is case-sensitive

        Returns:
            OwnedMatches of MatchSpan in buffer order, non-overlapping
        """
        if surface is None:
            raise SurfaceGone("search surface is no longer available")

        matches = OwnedMatches(self._scan(surface, text, case_sensitive), on_close=self._on_release)
        with self._count_lock:
            self.live_results += 1
        logger.debug("Found %d matches for %r", len(matches), text)
        return matches

    def _scan(self, buffer: SearchableBuffer, text: str, case_sensitive: bool) -> List[MatchSpan]:
        if not text:
            return []

        query_text = text if case_sensitive else text.lower()
        matches = []

        for i in range(buffer.total()):
            line_text = buffer.get_line(i)
            if not line_text:
                continue

            search_text = line_text if case_sensitive else line_text.lower()
            start = 0
            while True:
                idx = search_text.find(query_text, start)
                if idx == -1:
                    break
                end_idx = idx + len(query_text)
                matches.append(MatchSpan(i, idx, i, end_idx))
                start = end_idx

                if self.max_matches > 0 and len(matches) >= self.max_matches:
                    return matches

        return matches

    def _on_release(self):
        with self._count_lock:
            self.live_results -= 1
