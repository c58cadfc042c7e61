"""
GLib dispatcher: one worker thread per search, result handed back to the main loop

Same hand-off the editor uses for background file indexing: the thread does
the slow work and GLib.idle_add brings the outcome back to the UI thread.
"""

import logging
from threading import Thread, Lock
from typing import Optional

import gi
gi.require_version("GLib", "2.0")
from gi.repository import GLib

from termfind.dispatch import Outcome, run_job
from termfind.match_set import release_result
from termfind.exceptions import EngineTimeout

logger = logging.getLogger(__name__)



class _Delivery:
    """First of result/timeout wins; whatever arrives later is discarded."""

    def __init__(self, on_done):
        self.on_done = on_done
        self.timeout_id = None
        self._done = False
        self._lock = Lock()

    def claim(self) -> bool:
        with self._lock:
            if self._done:
                return False
            self._done = True
            return True


class GLibDispatcher:
    """
    One worker thread per job, results handed back through GLib.idle_add.

    The callback runs on whichever thread iterates the default main context,
    which for a GTK application is the UI thread.
    """

    def __init__(self, timeout_ms: Optional[int] = None):
        self.timeout_ms = timeout_ms

    def dispatch(self, job, on_done):
        delivery = _Delivery(on_done)

        if self.timeout_ms:
            delivery.timeout_id = GLib.timeout_add(self.timeout_ms, self._expire, delivery)

        def work():
            outcome = run_job(job)
            GLib.idle_add(self._deliver, delivery, outcome)

        thread = Thread(target=work, name="termfind-search")
        thread.daemon = True
        thread.start()

    def _deliver(self, delivery, outcome):
        if not delivery.claim():
            # Timed out already; nobody will take ownership of this result
            logger.debug("Discarding search result that arrived after timeout")
            if outcome.ok:
                release_result(outcome.value)
            return False
        if delivery.timeout_id is not None:
            GLib.source_remove(delivery.timeout_id)
            delivery.timeout_id = None
        delivery.on_done(outcome)
        return False

    def _expire(self, delivery):
        delivery.timeout_id = None
        if delivery.claim():
            logger.debug("Search timed out after %d ms", self.timeout_ms)
            delivery.on_done(Outcome(error=EngineTimeout(f"search exceeded {self.timeout_ms} ms")))
        return False  # Don't repeat
