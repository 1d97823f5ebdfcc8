from __future__ import annotations

from typing import Any

from loguru import logger

from readiness.app.core import SERVICE_NAME
from readiness.app.core.backoff import BackoffPolicy
from readiness.app.domain.errors import (
    CancellationError,
    ConnectionValidationError,
    ExhaustionError,
    TransientConnectivityError,
)
from readiness.app.domain.models import AttemptState, Failure, Success, VerificationOutcome
from readiness.app.ports.backoff_waiter import BackoffWaiter
from readiness.app.ports.connection_source import ConnectionSource


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class ReadinessVerifier:
    """
    Proves that a connection source can hand out a valid connection.

    Runs up to max_attempts attempts on the calling thread. Acquisition and
    validation failures share one counter: after the n-th failed attempt the
    verifier waits backoff(n) seconds, unless it was the last one. A cancelled
    wait ends verification immediately. Never raises for connectivity problems;
    the result is returned as Success or Failure.
    """

    def __init__(self, waiter: BackoffWaiter) -> None:
        self._waiter = waiter

    def verify(
        self,
        source: ConnectionSource,
        validation_timeout_seconds: int,
        max_attempts: int,
        backoff: BackoffPolicy,
    ) -> VerificationOutcome:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if validation_timeout_seconds < 0:
            raise ValueError("validation_timeout_seconds must be >= 0")

        attempt = 0
        while attempt < max_attempts:
            _log("db_connect_attempt", attempt=attempt + 1, max_attempts=max_attempts)
            try:
                with source.acquire() as connection:
                    if not connection.is_valid(validation_timeout_seconds):
                        raise ConnectionValidationError("Database connection validation failed")
                _log("db_connected", attempt=attempt + 1)
                return Success(attempts=attempt + 1)
            except TransientConnectivityError as exc:
                attempt += 1
                state = AttemptState(attempt_number=attempt, max_attempts=max_attempts)
                logger.bind(
                    service_name=SERVICE_NAME,
                    event="db_connect_attempt_failed",
                    attempt=state.attempt_number,
                    max_attempts=state.max_attempts,
                ).warning("Failed to get a connection on attempt {}: {}", attempt, exc)

                if state.exhausted:
                    exhausted = ExhaustionError(attempt, exc)
                    exhausted.__cause__ = exc
                    return Failure(error=exhausted, attempts=attempt)

                delay = backoff(attempt)
                try:
                    self._waiter.wait(delay)
                except CancellationError as cancel:
                    _log("readiness_cancelled", attempt=attempt, delay=delay)
                    return Failure(error=cancel, attempts=attempt)

        raise RuntimeError("db readiness check ended without an outcome")
