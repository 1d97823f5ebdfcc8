"""SQLAlchemy-backed connection source (provider-specific infrastructure)."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import Connection as SaConnection
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from readiness.app.core import SERVICE_NAME
from readiness.app.domain.errors import ConnectionAcquisitionError

_PROBE_SQL = "SELECT 1"


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).debug("")


class SqlAlchemyConnection:
    """Connection implementation wrapping a checked-out SQLAlchemy connection."""

    def __init__(self, connection: SaConnection) -> None:
        self._connection = connection

    def is_valid(self, timeout_seconds: int) -> bool:
        if self._connection.closed or self._connection.invalidated:
            return False
        try:
            self._connection.execute(text(self._probe_sql(timeout_seconds))).scalar()
            return True
        except SQLAlchemyError as exc:
            logger.debug("connection validation failed: {}", exc)
            return False

    def _probe_sql(self, timeout_seconds: int) -> str:
        # The timeout must not outlive the probe: the connection goes back to a shared pool.
        if timeout_seconds <= 0:
            return _PROBE_SQL
        dialect = self._connection.dialect.name
        millis = int(timeout_seconds * 1000)
        if dialect == "postgresql":
            # SET LOCAL ends with the transaction, which is rolled back on return to the pool.
            self._connection.execute(text(f"SET LOCAL statement_timeout = {millis}"))
        elif dialect == "mysql":
            return f"SELECT /*+ MAX_EXECUTION_TIME({millis}) */ 1"
        elif dialect == "mariadb":
            return f"SET STATEMENT max_statement_time = {timeout_seconds} FOR SELECT 1"
        return _PROBE_SQL


class SqlAlchemyConnectionSource:
    """ConnectionSource implementation over a SQLAlchemy Engine and its pool."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def pooled(self) -> bool:
        return not isinstance(self._engine.pool, NullPool)

    @contextmanager
    def acquire(self) -> Iterator[SqlAlchemyConnection]:
        try:
            connection = self._engine.connect()
        except SQLAlchemyError as exc:
            raise ConnectionAcquisitionError(str(exc)) from exc
        except OSError as exc:
            raise ConnectionAcquisitionError(str(exc)) from exc
        _log("db_connection_checked_out", pool=self._engine.pool.status())
        with connection:
            yield SqlAlchemyConnection(connection)

    def close(self) -> None:
        self._engine.dispose()
