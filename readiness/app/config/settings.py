"""Settings for the readiness gate."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = Field(..., validation_alias="DATABASE_URL")
    database_backend: str = Field("sqlalchemy", validation_alias="DATABASE_BACKEND")
    # "queue" keeps a connection pool; "null" opens a fresh connection per checkout and is rejected at startup.
    database_pool_class: str = Field("queue", validation_alias="DATABASE_POOL_CLASS")
    database_pool_size: int = Field(5, ge=1, validation_alias="DATABASE_POOL_SIZE")
    database_max_overflow: int = Field(10, ge=0, validation_alias="DATABASE_MAX_OVERFLOW")
    database_pool_timeout_seconds: float = Field(30.0, gt=0, validation_alias="DATABASE_POOL_TIMEOUT_SECONDS")

    connection_validation_timeout_seconds: int = Field(
        2,
        ge=0,
        validation_alias="DATABASE_CONNECTION_VALIDATION_TIMEOUT",
    )
    max_connection_attempts: int = Field(3, ge=1, validation_alias="MAX_CONNECTION_ATTEMPTS")

    backoff_strategy: str = Field("linear", validation_alias="BACKOFF_STRATEGY")
    backoff_base_seconds: float = Field(2.0, ge=0, validation_alias="BACKOFF_BASE_SECONDS")
    backoff_multiplier: float = Field(2.0, ge=1, validation_alias="BACKOFF_MULTIPLIER")
    max_backoff_seconds: float = Field(30.0, ge=0, validation_alias="MAX_BACKOFF_SECONDS")

    shutdown_flush_seconds: float = Field(1.0, ge=0, validation_alias="SHUTDOWN_FLUSH_SECONDS")
    failure_exit_code: int = Field(1, ge=1, le=255, validation_alias="FAILURE_EXIT_CODE")

    api_host: str = Field("0.0.0.0", validation_alias="API_HOST")
    api_port: int = Field(8000, validation_alias="API_PORT")
