"""
Shared fixtures for the mirror test suite.

Why: Sync stages are defined by what ends up in the store, so most tests
     run against a real SQLite database rather than a mocked session.
What: Provides a connection manager bound to a temporary SQLite file, a
      session on it, and a mocked GitHub source.
How: Each test gets its own database file under pytest's tmp_path, and the
     schema is created with the same call the worker uses.
"""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from issue_mirror.database.config import DatabaseConfig, reset_database_config
from issue_mirror.database.connection import DatabaseConnectionManager


@pytest.fixture(autouse=True)
def clean_database_config() -> None:
    """Drop any cached database configuration between tests."""
    reset_database_config()


@pytest.fixture
def database_config(tmp_path: Path) -> DatabaseConfig:
    """Configuration pointing at a throwaway SQLite file."""
    return DatabaseConfig(database_url=f"sqlite+aiosqlite:///{tmp_path}/mirror.db")


@pytest.fixture
async def connection_manager(
    database_config: DatabaseConfig,
) -> AsyncGenerator[DatabaseConnectionManager, None]:
    """
    Why: Give tests a real store with the mirror schema in place
    What: Connection manager over a temporary SQLite database
    How: Creates the schema up front and disposes the engine afterwards
    """
    manager = DatabaseConnectionManager(database_config)
    await manager.create_schema()
    yield manager
    await manager.close()


@pytest.fixture
async def session(
    connection_manager: DatabaseConnectionManager,
) -> AsyncGenerator[AsyncSession, None]:
    """Session the code under test writes through."""
    async with connection_manager.get_session() as session:
        yield session


@pytest.fixture
def source() -> AsyncMock:
    """
    Why: Reconciliation and sync passes talk to GitHub through a source
    What: AsyncMock standing in for GitHubClient with empty default answers
    How: Each endpoint returns an empty listing unless a test overrides it
    """
    source = AsyncMock()
    source.list_issues.return_value = []
    source.list_org_issues.return_value = []
    source.list_issue_comments.return_value = []
    source.list_pull_files.return_value = []
    return source
