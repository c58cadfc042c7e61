import threading
import time
import unittest

from termfind.coordinator import SearchCoordinator
from termfind.engine import OwnedMatches
from termfind.exceptions import EngineTimeout
from termfind.match_set import MatchSpan

# Check for GLib availability
try:
    import gi
    gi.require_version("GLib", "2.0")
    from gi.repository import GLib
    from termfind.glib_dispatch import GLibDispatcher
    GLIB_AVAILABLE = True
except (ImportError, ValueError):
    GLIB_AVAILABLE = False


def pump(condition, timeout=5.0):
    """Iterate the default main context until condition() or timeout"""
    ctx = GLib.MainContext.default()
    deadline = time.monotonic() + timeout
    while not condition() and time.monotonic() < deadline:
        ctx.iteration(False)
        time.sleep(0.005)
    return condition()


class GatedEngine:
    """Engine whose calls block until the test opens the gate for that query"""

    def __init__(self):
        self.gates = {}
        self.results = []
        self.threads = []

    def gate(self, text):
        return self.gates.setdefault(text, threading.Event())

    def search(self, surface, text, case_sensitive):
        self.threads.append(threading.current_thread())
        self.gate(text).wait(5)
        matches = OwnedMatches([MatchSpan(0, 0, 0, len(text))] * (len(text)))
        self.results.append(matches)
        return matches


class RecordingSink:
    def __init__(self):
        self.events = []

    def highlight(self, span):
        self.events.append(("highlight", span))

    def clear_all(self):
        self.events.append(("clear",))


@unittest.skipUnless(GLIB_AVAILABLE, "GLib not available")
class TestGLibDispatcher(unittest.TestCase):
    def test_result_delivered_on_main_thread(self):
        seen = []
        GLibDispatcher().dispatch(
            lambda: threading.current_thread(),
            lambda outcome: seen.append((outcome, threading.current_thread())))
        self.assertTrue(pump(lambda: seen))
        outcome, thread = seen[0]
        self.assertTrue(outcome.ok)
        self.assertIsNot(outcome.value, threading.main_thread())
        self.assertIs(thread, threading.main_thread())

    def test_errors_are_delivered_not_raised(self):
        seen = []

        def job():
            raise RuntimeError("boom")

        GLibDispatcher().dispatch(job, seen.append)
        self.assertTrue(pump(lambda: seen))
        self.assertIsInstance(seen[0].error, RuntimeError)

    def test_timeout_then_late_result_released(self):
        seen = []
        gate = threading.Event()
        late = OwnedMatches([MatchSpan(0, 0, 0, 1)])

        def job():
            gate.wait(5)
            return late

        GLibDispatcher(timeout_ms=20).dispatch(job, seen.append)
        self.assertTrue(pump(lambda: seen))
        self.assertIsInstance(seen[0].error, EngineTimeout)

        gate.set()
        self.assertTrue(pump(lambda: late.closed))
        self.assertEqual(len(seen), 1)


@unittest.skipUnless(GLIB_AVAILABLE, "GLib not available")
class TestCoordinatorOnMainLoop(unittest.TestCase):
    def test_latest_query_wins(self):
        engine = GatedEngine()
        sink = RecordingSink()
        results = []
        coord = SearchCoordinator(object(), engine, sink,
                                  dispatcher=GLibDispatcher(), on_result=results.append)

        coord.submit("slow")
        coord.submit("fast")
        engine.gate("fast").set()
        self.assertTrue(pump(lambda: results))
        self.assertEqual(coord.query.text, "fast")
        self.assertEqual(results, [4])

        engine.gate("slow").set()
        self.assertTrue(pump(lambda: len(engine.results) == 2 and engine.results[-1].closed))
        self.assertEqual(coord.query.text, "fast")
        self.assertEqual(results, [4])
        self.assertNotIn(threading.main_thread(), engine.threads)


if __name__ == '__main__':
    unittest.main()
