"""Database connection management.

Owns the async SQLAlchemy engine for the mirror store and hands out
sessions scoped to a sync pass.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from issue_mirror.models.base import Base

from .config import DatabaseConfig, get_database_config

logger = logging.getLogger(__name__)


class DatabaseConnectionManager:
    """Manages the store engine and provides session handling.

    Each sync pass acquires one session through ``get_session`` and
    releases it on exit, so tests can point the manager at an in-memory
    or temporary SQLite database.
    """

    def __init__(self, config: DatabaseConfig | None = None):
        self.config = config or get_database_config()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Get or create async database engine."""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create async session factory."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_factory

    def _create_engine(self) -> AsyncEngine:
        """Create async SQLAlchemy engine."""
        engine_kwargs: dict[str, Any] = {"echo": self.config.echo_sql}

        if not self.config.is_sqlite:
            engine_kwargs.update(
                pool_size=self.config.pool.pool_size,
                max_overflow=self.config.pool.max_overflow,
                pool_pre_ping=self.config.pool.pool_pre_ping,
                pool_recycle=self.config.pool.pool_recycle,
                pool_timeout=self.config.pool.pool_timeout,
            )

        engine = create_async_engine(self.config.get_sqlalchemy_url(), **engine_kwargs)

        logger.info(
            "Created database engine",
            extra={"sqlite": self.config.is_sqlite, "echo": self.config.echo_sql},
        )
        return engine

    async def create_schema(self) -> None:
        """Create the mirror tables if they do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.debug("Mirror schema ensured")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get database session with automatic cleanup.

        Usage:
            async with connection_manager.get_session() as session:
                result = await session.execute(query)
        """
        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check that the store answers a trivial query."""
        try:
            async with self.get_session() as session:
                result = await session.execute(text("SELECT 1"))
                return result.scalar() == 1
        except SQLAlchemyError as e:
            logger.error("Database health check failed", extra={"error": str(e)})
            return False

    async def close(self) -> None:
        """Close database engine and clean up connections."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")
