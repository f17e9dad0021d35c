"""Transaction scoping for sync batches.

A batch of writes either lands completely or not at all. SQLAlchemy
autobegins a transaction on the first statement of a session, so a batch
joins whatever transaction the session already has instead of nesting,
and ends it when the batch is done.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

COMMITTED = "committed"
ROLLED_BACK = "rolled back"


class TransactionError(Exception):
    """Raised when a batch transaction cannot be opened or ended."""

    pass


class DatabaseTransaction:
    """Unit of work for one batch on a session.

    Args:
        session: Session the batch writes through
        auto_commit: Commit when the block exits without an exception
    """

    def __init__(self, session: AsyncSession, auto_commit: bool = True):
        self.session = session
        self.auto_commit = auto_commit
        self.outcome: str | None = None

    async def __aenter__(self) -> AsyncSession:
        if self.session.in_transaction():
            return self.session
        try:
            await self.session.begin()
        except SQLAlchemyError as e:
            raise TransactionError(f"Could not open transaction: {e}") from e
        return self.session

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is not None:
            logger.warning(f"Rolling back batch after {exc_type.__name__}: {exc_val}")
            await self.rollback()
        elif self.auto_commit and self.outcome is None:
            await self.commit()

    async def commit(self) -> None:
        """Commit the batch; a failed commit is rolled back.

        Raises:
            TransactionError: If the batch was rolled back or the commit fails
        """
        if self.outcome == ROLLED_BACK:
            raise TransactionError("Transaction was already rolled back")
        if self.outcome == COMMITTED:
            return

        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Commit failed: {e}")
            await self.rollback()
            raise TransactionError(f"Commit failed: {e}") from e
        self.outcome = COMMITTED
        logger.debug("Batch committed")

    async def rollback(self) -> None:
        """Discard the batch. Does nothing once the batch has ended.

        Raises:
            TransactionError: If the rollback itself fails
        """
        if self.outcome is not None:
            return

        try:
            await self.session.rollback()
        except SQLAlchemyError as e:
            raise TransactionError(f"Rollback failed: {e}") from e
        self.outcome = ROLLED_BACK
        logger.debug("Batch rolled back")


@asynccontextmanager
async def database_transaction(
    session: AsyncSession, auto_commit: bool = True
) -> AsyncGenerator[AsyncSession, None]:
    """Run a block as one batch transaction.

    Example:
        async with database_transaction(session):
            for row in rows:
                await items.replace(row)
    """
    async with DatabaseTransaction(session, auto_commit) as tx_session:
        yield tx_session
