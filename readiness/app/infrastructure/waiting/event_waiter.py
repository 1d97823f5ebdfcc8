"""Interruptible backoff wait built on threading.Event."""
from __future__ import annotations

import threading

from readiness.app.domain.errors import CancellationError


class EventBackoffWaiter:
    """BackoffWaiter implementation: sleeps until the timeout or until cancel() is called.

    Cancellation is sticky; once cancelled every later wait fails immediately.
    A KeyboardInterrupt raised while waiting is reported as a cancellation.
    """

    def __init__(self, cancel_event: threading.Event | None = None) -> None:
        self._cancel_event = cancel_event or threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> None:
        self._cancel_event.set()

    def wait(self, seconds: float) -> None:
        if self._cancel_event.is_set():
            raise CancellationError("backoff wait cancelled before it started")
        try:
            interrupted = self._cancel_event.wait(timeout=max(seconds, 0.0))
        except KeyboardInterrupt as exc:
            self._cancel_event.set()
            raise CancellationError("Thread was interrupted during backoff") from exc
        if interrupted:
            raise CancellationError(f"backoff wait of {seconds}s was cancelled")
