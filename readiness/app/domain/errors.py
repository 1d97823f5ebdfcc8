"""Readiness error taxonomy.

TransientConnectivityError and its subclasses are recovered by retrying.
ConfigurationError, ExhaustionError and CancellationError are terminal.
"""
from __future__ import annotations


class ReadinessError(Exception):
    """Base error for startup readiness failures."""


class ConfigurationError(ReadinessError):
    """Raised when the data layer is wired with something the gate cannot verify."""


class TransientConnectivityError(ReadinessError):
    """A single attempt could not obtain a usable connection."""


class ConnectionAcquisitionError(TransientConnectivityError):
    """Raised when the connection source cannot hand out a connection."""


class ConnectionValidationError(TransientConnectivityError):
    """Raised when an acquired connection fails validation."""


class ExhaustionError(ReadinessError):
    """All verification attempts failed."""

    def __init__(self, attempts: int, last_error: TransientConnectivityError) -> None:
        super().__init__(f"database not ready after {attempts} attempt(s): {last_error}")
        self.attempts = attempts
        self.last_error = last_error


class CancellationError(ReadinessError):
    """The backoff wait between attempts was interrupted."""
