import threading
import unittest

from termfind.match_set import MatchSpan, Query
from termfind.session import SearchSession, SessionState


class MockResource:
    def __init__(self):
        self.close_calls = 0

    def close(self):
        self.close_calls += 1


SPANS = [MatchSpan(0, 0, 0, 3), MatchSpan(2, 1, 2, 4)]


class TestSearchSession(unittest.TestCase):
    def test_starts_idle(self):
        s = SearchSession()
        self.assertEqual(s.state, SessionState.IDLE)
        self.assertEqual(s.latest_requested_generation, 0)
        self.assertIsNone(s.current)

    def test_generations_increase(self):
        s = SearchSession()
        g1 = s.begin_query()
        g2 = s.begin_query()
        self.assertLess(g1, g2)
        self.assertEqual(s.latest_requested_generation, g2)
        self.assertEqual(s.state, SessionState.SEARCHING)

    def test_commit_current_generation(self):
        s = SearchSession()
        g = s.begin_query()
        ms = s.commit(Query("foo", False, g), SPANS)
        self.assertIs(s.current, ms)
        self.assertEqual(s.state, SessionState.HAS_RESULTS)

    def test_commit_empty_is_no_results(self):
        s = SearchSession()
        g = s.begin_query()
        s.commit(Query("foo", False, g), [])
        self.assertEqual(s.state, SessionState.NO_RESULTS)

    def test_stale_commit_is_dropped_and_released(self):
        s = SearchSession()
        old = s.begin_query()
        s.begin_query()
        res = MockResource()
        self.assertIsNone(s.commit(Query("old", False, old), SPANS, res))
        self.assertIsNone(s.current)
        self.assertEqual(res.close_calls, 1)
        self.assertEqual(s.state, SessionState.SEARCHING)

    def test_replacement_releases_previous(self):
        s = SearchSession()
        first = MockResource()
        s.commit(Query("a", False, s.begin_query()), SPANS, first)
        second = MockResource()
        s.commit(Query("b", False, s.begin_query()), SPANS, second)
        self.assertEqual(first.close_calls, 1)
        self.assertEqual(second.close_calls, 0)

    def test_clear_releases_and_is_idempotent(self):
        s = SearchSession()
        res = MockResource()
        s.commit(Query("a", False, s.begin_query()), SPANS, res)
        s.clear()
        s.clear()
        self.assertEqual(res.close_calls, 1)
        self.assertEqual(s.state, SessionState.IDLE)

    def test_clear_invalidates_pending(self):
        s = SearchSession()
        g = s.begin_query()
        s.clear()
        res = MockResource()
        self.assertIsNone(s.commit(Query("a", False, g), SPANS, res))
        self.assertEqual(res.close_calls, 1)
        self.assertEqual(s.state, SessionState.IDLE)

    def test_navigation_without_results(self):
        s = SearchSession()
        self.assertIsNone(s.step(1))
        self.assertIsNone(s.select(0))

    def test_concurrent_clear_releases_once(self):
        s = SearchSession()
        res = MockResource()
        s.commit(Query("a", False, s.begin_query()), SPANS, res)
        threads = [threading.Thread(target=s.clear) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(res.close_calls, 1)

    def test_stale_result_without_close_is_dropped(self):
        s = SearchSession()
        old = s.begin_query()
        s.begin_query()
        self.assertIsNone(s.commit(Query("old", False, old), SPANS, list(SPANS)))
        self.assertIsNone(s.current)

    def test_lock_is_reentrant(self):
        s = SearchSession()
        with s.lock:
            g = s.begin_query()
            s.commit(Query("a", False, g), SPANS)
            s.clear()
        self.assertEqual(s.state, SessionState.IDLE)


if __name__ == '__main__':
    unittest.main()
