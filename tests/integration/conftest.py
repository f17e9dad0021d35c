"""Helpers for reading back what sync stages stored."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from issue_mirror.database.connection import DatabaseConnectionManager


@pytest.fixture
def fresh_session(
    connection_manager: DatabaseConnectionManager,
) -> Callable[[], AbstractAsyncContextManager[AsyncSession]]:
    """
    Why: Assertions must see committed rows, not objects cached in the
         session that did the writing
    What: Factory for independent sessions on the same store
    How: Returns the connection manager's session context manager
    """
    return connection_manager.get_session
