"""Connection source port: contract for handing out pooled database connections.

The verifier depends on this port; infrastructure (e.g. SQLAlchemy) implements
it. acquire() is a scoped acquisition: leaving the with-block returns the
connection to the pool on every exit path.
"""
from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol, runtime_checkable


@runtime_checkable
class Connection(Protocol):
    """A single pooled database session."""

    def is_valid(self, timeout_seconds: int) -> bool:
        """Return True if the session answers within timeout_seconds (0 means no timeout)."""
        ...


@runtime_checkable
class ConnectionSource(Protocol):
    """Port: yields pooled connections. Implementations live in infrastructure."""

    @property
    def pooled(self) -> bool:
        """True when connections come from a pool of reusable sessions."""
        ...

    def acquire(self) -> AbstractContextManager[Connection]:
        """Check out a connection; raise ConnectionAcquisitionError on failure."""
        ...

    def close(self) -> None:
        """Release resources (e.g. dispose the pool). No-op allowed if nothing to close."""
        ...
