"""Wire SIGINT/SIGTERM to the backoff waiter while the startup check blocks."""
from __future__ import annotations

import signal
from contextlib import contextmanager
from typing import Any, Iterator

from loguru import logger

from readiness.app.core import SERVICE_NAME
from readiness.app.infrastructure.waiting.event_waiter import EventBackoffWaiter

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


@contextmanager
def cancel_on_shutdown_signals(waiter: EventBackoffWaiter) -> Iterator[None]:
    """Cancel the waiter on SIGINT/SIGTERM; previous handlers are restored on exit.

    Only the main thread may install handlers; elsewhere this is a no-op.
    """

    def request_shutdown(signum: int, frame: Any) -> None:
        if not waiter.cancelled:
            logger.bind(service_name=SERVICE_NAME, event="shutdown_signal", signal=signum).info("")
            waiter.cancel()

    previous: dict[int, Any] = {}
    for sig in SHUTDOWN_SIGNALS:
        try:
            previous[sig] = signal.getsignal(sig)
            signal.signal(sig, request_shutdown)
        except (ValueError, OSError):
            # Not on the main thread, or the platform does not allow it.
            previous.pop(sig, None)
    try:
        yield
    finally:
        for sig, handler in previous.items():
            try:
                signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
            except (ValueError, OSError):
                pass
