"""Port: the suspension point between verification attempts."""
from __future__ import annotations

from typing import Protocol


class BackoffWaiter(Protocol):
    def wait(self, seconds: float) -> None:
        """Block for seconds; raise CancellationError if the wait is interrupted."""
        ...
