"""Cooperative cancellation shared by every stage of a run."""

import threading

from .errors import ContextCancelled


class Context:
    """A cancellation flag that blocking waits can race against.

    Once a context is done it stays done. ``err()`` tells callers why:
    ``ContextCancelled`` for an ordinary stop request, anything else for a
    failure that should end the run.
    """

    def __init__(self):
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._err: Exception | None = None

    def cancel(self) -> None:
        """Request a clean stop."""
        self._finish(ContextCancelled("context canceled"))

    def abort(self, exc: Exception) -> None:
        """Stop the run with a fatal error."""
        self._finish(exc)

    def _finish(self, exc: Exception) -> None:
        with self._lock:
            if self._err is None:
                self._err = exc
        self._done.set()

    def done(self) -> bool:
        return self._done.is_set()

    def err(self) -> Exception | None:
        with self._lock:
            return self._err

    def cancelled(self) -> bool:
        """True only when the context was stopped by ``cancel()``."""
        return isinstance(self.err(), ContextCancelled)

    def sleep(self, seconds: float) -> bool:
        """Sleep for ``seconds`` unless the context finishes first.

        Returns True if the full duration elapsed, False if interrupted.
        """
        if seconds <= 0:
            return not self.done()
        return not self._done.wait(seconds)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the context is done. Returns ``done()``."""
        return self._done.wait(timeout)
