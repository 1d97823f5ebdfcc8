"""Process terminators used once the lifecycle gate refuses startup."""
from __future__ import annotations

import os
import sys


class SystemExitTerminator:
    """Raise SystemExit; for entrypoints that own the interpreter (CLI)."""

    def terminate(self, exit_code: int) -> None:
        raise SystemExit(exit_code)


class HardExitTerminator:
    """Flush stdio and leave via os._exit.

    Used inside a host server (uvicorn) that would otherwise catch SystemExit
    raised from a lifespan handler and report its own exit status.
    """

    def terminate(self, exit_code: int) -> None:
        for stream in (sys.stdout, sys.stderr):
            try:
                stream.flush()
            except (OSError, ValueError):
                pass
        os._exit(exit_code)
