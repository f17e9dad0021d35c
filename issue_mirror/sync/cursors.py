"""Incremental fetch cursors derived from stored rows."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from issue_mirror.repositories.comment import CommentRepository
from issue_mirror.repositories.item import ItemRepository

from .timestamps import to_cursor_timestamp

logger = logging.getLogger(__name__)


class CursorReader:
    """Reads the latest known update time of a scope.

    Cursors are never persisted; they are recomputed from the mirrored rows
    on every call and come back in the format GitHub expects for ``since``
    ('2015-04-18T14:17:02Z'). An empty scope yields ``None``, meaning the
    caller should fetch everything.
    """

    def __init__(self, session: AsyncSession):
        self.items = ItemRepository(session)
        self.comments = CommentRepository(session)

    async def max_comment_timestamp_for_repo(self, org: str, repo: str) -> str | None:
        """Cursor for comments of one repository."""
        cursor = to_cursor_timestamp(await self.comments.max_updated_at(org, repo))
        logger.debug(f"Comment cursor for {org}/{repo}: {cursor}")
        return cursor

    async def max_item_timestamp_for_repo(self, org: str, repo: str) -> str | None:
        """Cursor for issues and pull requests of one repository."""
        cursor = to_cursor_timestamp(await self.items.max_updated_at(org, repo))
        logger.debug(f"Item cursor for {org}/{repo}: {cursor}")
        return cursor

    async def max_item_timestamp_for_org(self, org: str) -> str | None:
        """Cursor for issues and pull requests across an organization."""
        cursor = to_cursor_timestamp(await self.items.max_updated_at(org))
        logger.debug(f"Item cursor for {org}: {cursor}")
        return cursor
