"""Runs the pipeline in a worker thread and turns OS signals into cancellation."""

import signal
import threading
from typing import Callable

from rich.console import Console

from .context import Context

console = Console()

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)

# How often the main thread wakes up while waiting on the worker.
JOIN_INTERVAL = 0.2


def get_signal_name(signal_num: int) -> str:
    try:
        return signal.Signals(signal_num).name
    except ValueError:
        return f"SIG{signal_num}"


class Supervisor:
    """Owns the lifecycle of a single run.

    The pipeline runs in a non-daemon thread. A shutdown signal cancels the
    shared context and the supervisor keeps waiting until the pipeline has
    noticed and returned, so whatever it learned gets persisted.
    """

    def __init__(self, context: Context | None = None):
        self.context = context or Context()
        self.signal_received: int | None = None
        self._previous_handlers: dict[int, object] = {}
        self._thread: threading.Thread | None = None
        self._error: BaseException | None = None

    def install(self) -> None:
        """Bind the shutdown signals to context cancellation."""
        if threading.current_thread() is not threading.main_thread():
            return
        for signum in SHUTDOWN_SIGNALS:
            self._previous_handlers[signum] = signal.signal(signum, self._handle_signal)

    def restore(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()

    def _handle_signal(self, signum, frame) -> None:
        if self.signal_received is None:
            self.signal_received = signum
            console.print(
                f"\n[yellow]Received shutdown signal ({get_signal_name(signum)}), "
                f"stopping search...[/yellow]"
            )
        self.context.cancel()

    def _target(self, pipeline: Callable[[Context], None]) -> None:
        try:
            pipeline(self.context)
        except BaseException as exc:
            self._error = exc

    def run(self, pipeline: Callable[[Context], None]) -> None:
        """Run ``pipeline(context)`` to completion or cancellation.

        Exceptions raised by the pipeline are re-raised here once the worker
        thread has finished.
        """
        self.install()
        try:
            self._thread = threading.Thread(
                target=self._target,
                args=(pipeline,),
                name="pkgstats-search",
            )
            self._thread.start()
            while self._thread.is_alive():
                self._thread.join(JOIN_INTERVAL)
        finally:
            self.restore()

        if self.signal_received is not None:
            console.print("[green]✓[/green] Graceful shutdown complete.")

        if self._error is not None:
            raise self._error
