"""Full-replace persistence of fetched issues and comments."""

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from issue_mirror.database.transactions import database_transaction
from issue_mirror.repositories.comment import CommentRepository
from issue_mirror.repositories.item import ItemRepository

from .records import RemoteComment, RemoteIssue
from .timestamps import to_store_timestamp

logger = logging.getLogger(__name__)


def item_row(issue: RemoteIssue, org: str, repo: str) -> dict[str, Any]:
    """Map a fetched issue onto every column of ``items``."""
    return {
        "id": issue.id,
        "org": org,
        "repo": repo,
        "item_number": issue.number,
        "assignee_login": issue.assignee_login,
        "user_login": issue.user_login,
        "state": issue.state,
        "title": issue.title,
        "body": issue.body,
        "comment_count": issue.comments,
        "created_at": to_store_timestamp(issue.created_at),
        "updated_at": to_store_timestamp(issue.updated_at),
        "closed_at": to_store_timestamp(issue.closed_at),
        "pull_request_url": issue.pull_request_url,
        "merged_at": to_store_timestamp(issue.merged_at),
    }


def comment_row(comment: RemoteComment, org: str, repo: str) -> dict[str, Any]:
    """Map a fetched comment onto every column of ``item_comments``.

    Raises:
        CommentUrlError: If the parent item number cannot be derived
    """
    return {
        "id": comment.id,
        "org": org,
        "repo": repo,
        "item_number": comment.item_number,
        "user_login": comment.user_login,
        "body": comment.body,
        "created_at": to_store_timestamp(comment.created_at),
        "updated_at": to_store_timestamp(comment.updated_at),
    }


class RecordUpserter:
    """Stores fetched records, replacing any row with the same id.

    A record's previous row is deleted and the new one inserted, so a
    replayed batch leaves exactly one row per id carrying the latest
    values, and fields absent from the new payload do not survive. Each
    batch runs in one transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.items = ItemRepository(session)
        self.comments = CommentRepository(session)

    async def upsert_items(
        self, items: Sequence[RemoteIssue], org: str, repo: str
    ) -> int:
        """Store a batch of issues and pull requests.

        Returns:
            Number of items written
        """
        rows = [item_row(issue, org, repo) for issue in items]

        async with database_transaction(self.session):
            for row in rows:
                await self.items.replace(row)

        logger.info(f"Upserted {len(rows)} items for {org}/{repo}")
        return len(rows)

    async def upsert_comments(
        self, comments: Sequence[RemoteComment], org: str, repo: str
    ) -> int:
        """Store a batch of comments.

        Every comment URL is parsed before anything is written, so a bad URL
        leaves the store untouched.

        Returns:
            Number of comments written

        Raises:
            CommentUrlError: If a comment URL does not identify its item
        """
        rows = [comment_row(comment, org, repo) for comment in comments]

        async with database_transaction(self.session):
            for row in rows:
                await self.comments.replace(row)

        logger.info(f"Upserted {len(rows)} comments for {org}/{repo}")
        return len(rows)
