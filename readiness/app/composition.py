"""
Composition root: single place where concrete implementations are wired.

Builds settings, the connection source, the backoff policy and waiter, the
verifier and the lifecycle gate. No DI container library, explicit wiring
only. Caller owns lifecycle (close).
"""
from __future__ import annotations

from typing import Any

from loguru import logger

from readiness.app.application.lifecycle_gate import LifecycleGate
from readiness.app.application.readiness_verifier import ReadinessVerifier
from readiness.app.config.settings import Settings
from readiness.app.core import SERVICE_NAME
from readiness.app.core.backoff import BackoffPolicy, ExponentialBackoff, LinearBackoff
from readiness.app.domain.errors import ConfigurationError
from readiness.app.domain.models import GateResult
from readiness.app.infrastructure.persistence.factory import create_connection_source
from readiness.app.infrastructure.process.terminator import HardExitTerminator
from readiness.app.infrastructure.waiting.event_waiter import EventBackoffWaiter
from readiness.app.ports.connection_source import ConnectionSource
from readiness.app.ports.process_terminator import ProcessTerminator


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def create_backoff_policy(settings: Settings) -> BackoffPolicy:
    strategy = settings.backoff_strategy.strip().lower()

    if strategy == "linear":
        return LinearBackoff(base_seconds=settings.backoff_base_seconds)

    if strategy == "exponential":
        return ExponentialBackoff(
            initial_seconds=settings.backoff_base_seconds,
            max_seconds=settings.max_backoff_seconds,
            multiplier=settings.backoff_multiplier,
        )

    raise ConfigurationError(f"Unsupported backoff strategy: {strategy}")


class AppDependencies:
    """Holds wired dependencies and their lifecycle. Built only in composition root."""

    def __init__(
        self,
        *,
        settings: Settings,
        connection_source: ConnectionSource,
        waiter: EventBackoffWaiter,
        gate: LifecycleGate,
    ) -> None:
        self._settings = settings
        self._connection_source = connection_source
        self._waiter = waiter
        self._gate = gate
        self._closed = False

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def connection_source(self) -> ConnectionSource:
        return self._connection_source

    @property
    def waiter(self) -> EventBackoffWaiter:
        return self._waiter

    @property
    def gate(self) -> LifecycleGate:
        return self._gate

    def check_readiness(self) -> GateResult:
        """Run the startup gate once; terminates the process when readiness is refused."""
        result = self._gate.check(self._connection_source)
        if not result.ready:
            # Dispose the pool before the terminator ends the process.
            self.close()
        self._gate.enforce(result)
        return result

    def close(self) -> None:
        if self._closed:
            return
        try:
            self._connection_source.close()
        except Exception as exc:
            logger.warning("connection source close failed: {}", exc)
        self._closed = True
        _log("dependencies_closed")


def create_app_dependencies(
    settings: Settings | None = None,
    *,
    connection_source: ConnectionSource | None = None,
    terminator: ProcessTerminator | None = None,
    waiter: EventBackoffWaiter | None = None,
) -> AppDependencies:
    """
    Composition root: build all dependencies in one place.
    The connection source backend is selected from settings unless one is
    passed in (tests, or an application that already owns its pool).
    """
    _settings = settings or Settings()
    _waiter = waiter or EventBackoffWaiter()
    source = connection_source or create_connection_source(_settings)
    gate = LifecycleGate(
        ReadinessVerifier(_waiter),
        terminator or HardExitTerminator(),
        validation_timeout_seconds=_settings.connection_validation_timeout_seconds,
        max_attempts=_settings.max_connection_attempts,
        backoff=create_backoff_policy(_settings),
        failure_exit_code=_settings.failure_exit_code,
        flush_seconds=_settings.shutdown_flush_seconds,
    )
    return AppDependencies(
        settings=_settings,
        connection_source=source,
        waiter=_waiter,
        gate=gate,
    )
