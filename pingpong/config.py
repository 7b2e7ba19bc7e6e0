"""Application configuration via Pydantic Settings.

NOTE: Variable names follow the container deployment (POSTGRES_*, DB_*, PORT)
rather than the field names, so every field carries an explicit alias.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL, make_url

from pingpong.domain.policies.retry import (
    DEFAULT_DELAY_SECONDS,
    DEFAULT_MAX_ATTEMPTS,
    RetryPolicy,
)
from pingpong.domain.value_objects.enums import ResponseFormat, StorageBackend


class Settings(BaseSettings):
    # Storage
    storage_backend: StorageBackend = Field(
        default=StorageBackend.POSTGRES, validation_alias="STORAGE_BACKEND"
    )

    # PostgreSQL
    postgres_host: str = Field(default="localhost", validation_alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, validation_alias="POSTGRES_PORT")
    postgres_user: str = Field(default="pingponguser", validation_alias="POSTGRES_USER")
    postgres_password: str = Field(default="pingpongpass", validation_alias="POSTGRES_PASSWORD")
    postgres_db: str = Field(default="pingpongdb", validation_alias="POSTGRES_DB")
    postgres_sslmode: str = Field(default="disable", validation_alias="POSTGRES_SSLMODE")
    database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

    # Connection establishment
    db_max_retries: int = Field(
        default=DEFAULT_MAX_ATTEMPTS, ge=1, validation_alias="DB_MAX_RETRIES"
    )
    db_retry_delay: float = Field(
        default=DEFAULT_DELAY_SECONDS, ge=0, validation_alias="DB_RETRY_DELAY"
    )
    db_timeout: float = Field(default=5.0, gt=0, validation_alias="DB_TIMEOUT")

    # File backend
    counter_file: Path = Field(
        default=Path("data/pingpong-count.txt"), validation_alias="COUNTER_FILE"
    )
    counter_file_atomic: bool = Field(default=True, validation_alias="COUNTER_FILE_ATOMIC")

    # HTTP
    response_format: ResponseFormat = Field(
        default=ResponseFormat.JSON, validation_alias="RESPONSE_FORMAT"
    )
    health_check_backend: bool = Field(default=True, validation_alias="HEALTH_CHECK_BACKEND")
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8080, validation_alias="PORT")

    # App
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
        "extra": "ignore",
    }

    @property
    def sqlalchemy_url(self) -> URL:
        """Async SQLAlchemy URL; DATABASE_URL wins over the POSTGRES_* parts."""
        if self.database_url:
            return make_url(self.database_url)
        return URL.create(
            "postgresql+asyncpg",
            username=self.postgres_user,
            password=self.postgres_password,
            host=self.postgres_host,
            port=self.postgres_port,
            database=self.postgres_db,
        )

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.db_max_retries, delay_seconds=self.db_retry_delay)


settings = Settings()
