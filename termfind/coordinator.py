"""
Search coordinator

Public face of the find feature. Accepts queries from the find panel, runs
them through the engine off the UI thread, drops results that were overtaken
by a newer query, and keeps the highlight in step with the match cursor.

    coordinator = SearchCoordinator(buffer, LineSearchEngine(), sink,
                                    dispatcher=GLibDispatcher(),
                                    on_result=lambda n: update_label())
    coordinator.submit("needle")
    coordinator.next()
"""

import logging
import weakref
from typing import NamedTuple, Optional, Callable, Any

from termfind.config import FindSettings
from termfind.dispatch import Dispatcher, ImmediateDispatcher, Outcome
from termfind.engine import BufferSearchEngine
from termfind.match_set import MatchSpan, Query, owned_resource
from termfind.session import SearchSession, SessionState

logger = logging.getLogger(__name__)


class MatchStatus(NamedTuple):
    """Snapshot for the match counter next to the search field"""
    match_count: int
    current_index: Optional[int]
    query_text: str = ""
    pending: bool = False

    @property
    def label(self) -> str:
        if self.match_count > 0 and self.current_index is not None:
            return f"{self.current_index + 1} of {self.match_count}"
        if self.query_text and not self.pending:
            return "No results"
        return ""


class SearchCoordinator:
    """
    Runs searches for one surface and drives its highlight.

    Public calls are expected on the interactive thread. The session lock is
    held across every state change together with its sink calls, so a host
    without a main loop may also call clear() from another thread.

    Without a dispatcher, ImmediateDispatcher is used: the engine then runs
    inline on the caller's thread. Pass a GLibDispatcher to search off it.
    """

    def __init__(self, surface: Any, engine: BufferSearchEngine, sink,
                 dispatcher: Optional[Dispatcher] = None,
                 on_result: Optional[Callable[[int], None]] = None,
                 settings: Optional[FindSettings] = None):
        self.engine = engine
        self.sink = sink
        self.dispatcher = dispatcher or ImmediateDispatcher()
        self.on_result = on_result
        self.settings = settings or FindSettings()
        self.session = SearchSession()
        self._query_text = ""
        try:
            self._surface_ref = weakref.ref(surface)
        except TypeError:
            # Not weak-referenceable (None, builtins); hold it directly
            self._surface_ref = lambda: surface

    # ------------------------------------------------------------
    #   Read surface
    # ------------------------------------------------------------

    @property
    def match_count(self) -> int:
        current = self.session.current
        return len(current) if current is not None else 0

    @property
    def current_index(self) -> Optional[int]:
        current = self.session.current
        return current.current_index if current is not None else None

    @property
    def current_match(self) -> Optional[MatchSpan]:
        current = self.session.current
        return current.current if current is not None else None

    @property
    def query(self) -> Optional[Query]:
        current = self.session.current
        return current.query if current is not None else None

    @property
    def state(self) -> SessionState:
        return self.session.state

    def status(self) -> MatchStatus:
        return MatchStatus(self.match_count, self.current_index,
                           self._query_text, self.session.pending)

    # ------------------------------------------------------------
    #   Queries
    # ------------------------------------------------------------

    def submit(self, text: str, case_sensitive: Optional[bool] = None) -> None:
        """
        Start a search for text, superseding any search still in flight.

        Empty text clears everything synchronously. Otherwise the result
        arrives later through on_result(count), unless another submit or
        clear overtakes it first, in which case it is dropped silently.
        """
        if case_sensitive is None:
            case_sensitive = self.settings.case_sensitive

        if not text:
            with self.session.lock:
                self.clear()
                self._notify(0)
            return

        self._query_text = text
        query = Query(text, case_sensitive, self.session.begin_query())
        logger.debug("Dispatching search %r (gen %d, case_sensitive=%s)",
                     text, query.generation, case_sensitive)

        surface = self._surface_ref()

        def job():
            return self.engine.search(surface, query.text, query.case_sensitive)

        self.dispatcher.dispatch(job, lambda outcome: self._apply(query, outcome))

    def _apply(self, query: Query, outcome: Outcome) -> None:
        # Commit, sink calls and notification happen as one step so a clear()
        # from another thread lands either before or after all of them
        with self.session.lock:
            if not self.session.is_current(query.generation):
                self.session.commit(query, (), self._resource_of(outcome))
                return

            if outcome.ok:
                spans = list(outcome.value or ())
                resource = self._resource_of(outcome)
            else:
                logger.warning("Search for %r failed, showing no matches: %s", query.text, outcome.error)
                spans, resource = [], None

            match_set = self.session.commit(query, spans, resource)
            if match_set is None:
                return

            self.sink.clear_all()
            if match_set.current is not None:
                self.sink.highlight(match_set.current)
            self._notify(len(match_set))

    @staticmethod
    def _resource_of(outcome: Outcome):
        return owned_resource(outcome.value) if outcome.ok else None

    def _notify(self, count: int) -> None:
        if self.on_result is not None:
            self.on_result(count)

    # ------------------------------------------------------------
    #   Navigation
    # ------------------------------------------------------------

    def next(self) -> None:
        with self.session.lock:
            self._show(self.session.step(1))

    def previous(self) -> None:
        with self.session.lock:
            self._show(self.session.step(-1))

    def highlight_match(self, index: int) -> None:
        """Jump straight to match number index (0-based); out of range is ignored."""
        with self.session.lock:
            self._show(self.session.select(index))

    def _show(self, span: Optional[MatchSpan]) -> None:
        if span is not None:
            self.sink.highlight(span)

    def clear(self) -> None:
        with self.session.lock:
            self._query_text = ""
            self.session.clear()
            self.sink.clear_all()

    def close(self):
        """Find panel dismissed."""
        self.clear()
