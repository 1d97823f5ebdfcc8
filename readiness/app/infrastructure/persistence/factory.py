"""Connection source factory: selects implementation from config. Only place that imports concrete sources."""
from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError
from sqlalchemy.pool import NullPool

from readiness.app.config.settings import Settings
from readiness.app.domain.errors import ConfigurationError
from readiness.app.infrastructure.persistence.sqlalchemy.connection_source import SqlAlchemyConnectionSource
from readiness.app.ports.connection_source import ConnectionSource


def create_engine_from_settings(settings: Settings) -> Engine:
    pool_class = settings.database_pool_class.strip().lower()

    if pool_class == "null":
        return create_engine(settings.database_url, poolclass=NullPool)

    if pool_class == "queue":
        if settings.database_url.startswith("sqlite"):
            # sqlite picks its own pool; the size/overflow knobs only apply to QueuePool.
            return create_engine(settings.database_url)
        return create_engine(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_timeout=settings.database_pool_timeout_seconds,
        )

    raise ConfigurationError(f"Unsupported database pool class: {pool_class}")


def create_connection_source(settings: Settings) -> ConnectionSource:
    backend = settings.database_backend.strip().lower()

    if backend in ("sqlalchemy",):
        try:
            engine = create_engine_from_settings(settings)
        except (ArgumentError, ImportError) as exc:
            raise ConfigurationError(f"Invalid database configuration: {exc}") from exc
        return SqlAlchemyConnectionSource(engine)

    raise ConfigurationError(f"Unsupported database backend: {backend}")
