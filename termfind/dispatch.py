"""
Dispatchers: run a blocking job off the interactive path, deliver back onto it

A dispatcher takes a job (a zero-argument callable) and a completion callback.
The job runs wherever the dispatcher decides; the callback always receives an
Outcome on the interactive context. The job never touches shared state, it
only produces a value.

The GLib-backed dispatcher lives in termfind.glib_dispatch.
"""

from typing import Protocol, NamedTuple, Callable, Optional, Any


class Outcome(NamedTuple):
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_job(job: Callable[[], Any]) -> Outcome:
    try:
        return Outcome(value=job())
    except Exception as e:
        return Outcome(error=e)


class Dispatcher(Protocol):
    def dispatch(self, job: Callable[[], Any], on_done: Callable[[Outcome], None]) -> None:
        ...


class ImmediateDispatcher:
    """Runs the job inline on the caller's thread. For hosts without a main loop."""

    def dispatch(self, job, on_done):
        on_done(run_job(job))
