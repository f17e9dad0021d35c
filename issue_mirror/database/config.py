"""Database configuration module.

Provides type-safe database configuration with environment variable support.
SQLite (through aiosqlite) is the default store; any SQLAlchemy async URL
such as ``postgresql+asyncpg://...`` can be configured instead.
"""

from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./issue_mirror.db"


class DatabasePoolConfig(BaseModel):
    """Database connection pool configuration (ignored for SQLite)."""

    pool_size: int = Field(
        default=5, description="Number of connections to maintain in the pool"
    )
    max_overflow: int = Field(
        default=10,
        description="Number of additional connections to create when pool is exhausted",
    )
    pool_pre_ping: bool = Field(
        default=True, description="Enable connection health checks before use"
    )
    pool_recycle: int = Field(
        default=3600,
        description="Number of seconds after which a connection is recreated",
    )
    pool_timeout: int = Field(
        default=30, description="Timeout in seconds to get a connection from the pool"
    )


class DatabaseConfig(BaseSettings):
    """Database configuration with environment variable support.

    Environment variables:
    - DATABASE_DATABASE_URL: Full database connection URL
    - DATABASE_ECHO_SQL: Log every SQL statement (default: false)
    - DATABASE_POOL__POOL_SIZE: Connection pool size (default: 5)
    - DATABASE_POOL__MAX_OVERFLOW: Pool max overflow (default: 10)
    """

    database_url: str = Field(
        default=DEFAULT_DATABASE_URL,
        description="SQLAlchemy async database URL",
    )
    pool: DatabasePoolConfig = Field(default_factory=DatabasePoolConfig)
    echo_sql: bool = Field(default=False, description="Enable SQL query logging")

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def validate_database_url(cls, v: Any) -> Any:
        """Validate database URL format."""
        if not v:
            raise ValueError("Database URL cannot be empty")
        parsed = urlparse(v)
        if not parsed.scheme:
            raise ValueError("Invalid database URL format")
        return v

    @field_validator("pool", mode="before")
    @classmethod
    def validate_pool_config(cls, v: Any) -> Any:
        """Accept pool configuration given as a plain mapping."""
        if isinstance(v, dict):
            return DatabasePoolConfig(**v)
        return v

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured store is SQLite."""
        return self.database_url.startswith("sqlite")

    def get_sqlalchemy_url(self) -> str:
        """Get SQLAlchemy-compatible database URL."""
        return self.database_url


# Global configuration instance
_config_instance: DatabaseConfig | None = None


def get_database_config() -> DatabaseConfig:
    """Get database configuration instance.

    Returns cached instance on subsequent calls.
    """
    global _config_instance

    if _config_instance is None:
        _config_instance = DatabaseConfig()

    return _config_instance


def reset_database_config() -> None:
    """Reset configuration instance (useful for testing)."""
    global _config_instance
    _config_instance = None
