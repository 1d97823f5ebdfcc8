"""Unit tests for settings, backoff selection and the composition root wiring."""
from __future__ import annotations

import pytest

from readiness.app.composition import create_app_dependencies, create_backoff_policy
from readiness.app.config.settings import Settings
from readiness.app.core.backoff import ExponentialBackoff, LinearBackoff
from readiness.app.domain.errors import ConfigurationError
from tests.fakes import FakeConnectionSource, RecordingTerminator, RecordingWaiter


def _settings(**overrides) -> Settings:
    values = {"DATABASE_URL": "sqlite://", "SHUTDOWN_FLUSH_SECONDS": 0}
    values.update(overrides)
    return Settings(**values)


def test_settings_defaults(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg2://db/app")

    settings = Settings()

    assert settings.connection_validation_timeout_seconds == 2
    assert settings.max_connection_attempts == 3
    assert settings.backoff_strategy == "linear"
    assert settings.backoff_base_seconds == 2.0
    assert settings.failure_exit_code == 1
    assert settings.database_pool_class == "queue"


def test_settings_read_validation_timeout_from_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("DATABASE_CONNECTION_VALIDATION_TIMEOUT", "5")

    assert Settings().connection_validation_timeout_seconds == 5


def test_settings_reject_zero_attempts():
    with pytest.raises(ValueError):
        _settings(MAX_CONNECTION_ATTEMPTS=0)


def test_backoff_policy_selection():
    assert create_backoff_policy(_settings()) == LinearBackoff(2.0)
    assert create_backoff_policy(
        _settings(BACKOFF_STRATEGY="Exponential", BACKOFF_BASE_SECONDS=1, MAX_BACKOFF_SECONDS=8)
    ) == ExponentialBackoff(initial_seconds=1, max_seconds=8, multiplier=2.0)


def test_unknown_backoff_strategy_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        create_backoff_policy(_settings(BACKOFF_STRATEGY="fibonacci"))


def test_check_readiness_uses_settings_and_keeps_source_open_on_success():
    source = FakeConnectionSource([False, True])
    waiter = RecordingWaiter()
    terminator = RecordingTerminator()
    deps = create_app_dependencies(
        _settings(BACKOFF_BASE_SECONDS=3),
        connection_source=source,
        terminator=terminator,
        waiter=waiter,
    )

    result = deps.check_readiness()

    assert result.ready is True
    assert waiter.waits == [3]
    assert terminator.exit_codes == []
    assert source.closed is False


def test_check_readiness_failure_disposes_source_before_terminating():
    source = FakeConnectionSource([False])
    terminator = RecordingTerminator()
    deps = create_app_dependencies(
        _settings(MAX_CONNECTION_ATTEMPTS=2),
        connection_source=source,
        terminator=terminator,
        waiter=RecordingWaiter(),
    )

    result = deps.check_readiness()

    assert result.ready is False
    assert source.acquire_calls == 2
    assert source.closed is True
    assert terminator.exit_codes == [1]


def test_close_is_idempotent():
    source = FakeConnectionSource([True])
    deps = create_app_dependencies(_settings(), connection_source=source, terminator=RecordingTerminator())

    deps.close()
    deps.close()

    assert source.closed is True
