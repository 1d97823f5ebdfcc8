"""Port: ends the process once the lifecycle gate has refused startup."""
from __future__ import annotations

from typing import Protocol


class ProcessTerminator(Protocol):
    def terminate(self, exit_code: int) -> None: ...
