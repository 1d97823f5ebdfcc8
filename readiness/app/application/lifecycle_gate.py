"""Lifecycle gate: runs the readiness check once at startup and decides whether the process may continue."""
from __future__ import annotations

import time
from typing import Any, Callable

from loguru import logger

from readiness.app.application.readiness_verifier import ReadinessVerifier
from readiness.app.constants import ExitCode, ReadinessState
from readiness.app.core import SERVICE_NAME
from readiness.app.core.backoff import BackoffPolicy
from readiness.app.domain.errors import ConfigurationError
from readiness.app.domain.models import Failure, GateResult
from readiness.app.ports.connection_source import ConnectionSource
from readiness.app.ports.process_terminator import ProcessTerminator


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class LifecycleGate:
    """
    Startup gate in front of the application.

    check() never exits: it returns a GateResult. enforce() turns a refused
    result into process termination. Readiness is binary; there is no
    degraded mode without a database.
    """

    def __init__(
        self,
        verifier: ReadinessVerifier,
        terminator: ProcessTerminator,
        *,
        validation_timeout_seconds: int,
        max_attempts: int,
        backoff: BackoffPolicy,
        failure_exit_code: int = ExitCode.FAILURE,
        flush_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._verifier = verifier
        self._terminator = terminator
        self._validation_timeout_seconds = validation_timeout_seconds
        self._max_attempts = max_attempts
        self._backoff = backoff
        self._failure_exit_code = failure_exit_code
        self._flush_seconds = flush_seconds
        self._sleep = sleep

    def check(self, source: object) -> GateResult:
        if not isinstance(source, ConnectionSource) or not source.pooled:
            error = ConfigurationError(
                f"connection source is not pool-backed: {type(source).__name__}"
            )
            logger.bind(service_name=SERVICE_NAME, event="readiness_rejected").error(str(error))
            return GateResult.rejected(error, exit_code=self._failure_exit_code)

        _log("readiness_check_started", max_attempts=self._max_attempts)
        outcome = self._verifier.verify(
            source,
            self._validation_timeout_seconds,
            self._max_attempts,
            self._backoff,
        )
        if isinstance(outcome, Failure):
            logger.bind(
                service_name=SERVICE_NAME,
                event="db_connect_failed",
                attempts=outcome.attempts,
            ).opt(exception=outcome.error).error("Failed to establish database connection after retries")
            return GateResult.failed(outcome, exit_code=self._failure_exit_code)

        logger.bind(service_name=SERVICE_NAME, event="readiness_passed", attempts=outcome.attempts).info(
            "Successfully established database connection"
        )
        return GateResult.passed(outcome.attempts)

    def enforce(self, result: GateResult) -> None:
        if result.ready:
            return
        if result.state == ReadinessState.FAILED:
            # Let queued log records reach their sinks before the process goes away.
            logger.complete()
            self._sleep(self._flush_seconds)
        exit_code = result.exit_code if result.exit_code is not None else self._failure_exit_code
        _log("process_terminating", state=result.state.value, exit_code=exit_code)
        logger.complete()
        self._terminator.terminate(exit_code)

    def run(self, source: object) -> GateResult:
        result = self.check(source)
        self.enforce(result)
        return result
