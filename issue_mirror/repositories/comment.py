"""ItemComment repository."""

from typing import Any

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from issue_mirror.models import ItemComment

from .base import BaseRepository


class CommentRepository(BaseRepository[ItemComment]):
    """Repository for ItemComment operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, ItemComment)

    async def replace(self, values: dict[str, Any]) -> None:
        """Replace the stored row for ``values["id"]`` with ``values``."""
        await self._delete_where(ItemComment.id == values["id"])
        await self._insert(values)

    async def list_for_item(
        self, org: str, repo: str, item_number: int
    ) -> list[ItemComment]:
        """List comments on one issue or pull request, oldest first."""
        query = (
            select(ItemComment)
            .where(
                and_(
                    ItemComment.org == org,
                    ItemComment.repo == repo,
                    ItemComment.item_number == item_number,
                )
            )
            .order_by(ItemComment.created_at, ItemComment.id)
        )
        return await self._execute_query(query)

    async def max_updated_at(self, org: str, repo: str) -> str | None:
        """Latest stored comment ``updated_at`` for a repository."""
        query = select(func.max(ItemComment.updated_at)).where(
            and_(ItemComment.org == org, ItemComment.repo == repo)
        )
        return await self._execute_scalar(query)
