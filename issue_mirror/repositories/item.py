"""Item repository with mirror-specific operations."""

from typing import Any

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from issue_mirror.models import Item

from .base import BaseRepository


class ItemRepository(BaseRepository[Item]):
    """Repository for Item operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, Item)

    async def replace(self, values: dict[str, Any]) -> None:
        """Replace the stored row for ``values["id"]`` with ``values``.

        The old row is removed outright, so columns missing from ``values``
        end up NULL rather than keeping their previous contents.
        """
        await self._delete_where(Item.id == values["id"])
        await self._insert(values)

    async def get_by_repo_and_number(
        self, org: str, repo: str, item_number: int
    ) -> Item | None:
        """Get item by organization, repository and number."""
        query = select(Item).where(
            and_(Item.org == org, Item.repo == repo, Item.item_number == item_number)
        )
        result = await self.session.execute(query)
        return result.scalars().first()

    async def list_for_repo(
        self, org: str, repo: str, updated_since: str | None = None
    ) -> list[Item]:
        """List items of a repository, optionally only those updated since."""
        conditions = [Item.org == org, Item.repo == repo]
        if updated_since is not None:
            conditions.append(Item.updated_at >= updated_since)

        query = select(Item).where(and_(*conditions)).order_by(Item.item_number)
        return await self._execute_query(query)

    async def max_updated_at(self, org: str, repo: str | None = None) -> str | None:
        """Latest stored ``updated_at`` for an organization or one repository."""
        conditions = [Item.org == org]
        if repo is not None:
            conditions.append(Item.repo == repo)

        query = select(func.max(Item.updated_at)).where(and_(*conditions))
        return await self._execute_scalar(query)

    async def has_merged_at(self, org: str, repo: str, item_number: int) -> bool:
        """Check if a merge timestamp is already recorded for a pull request."""
        query = select(func.count(Item.id)).where(
            and_(
                Item.org == org,
                Item.repo == repo,
                Item.item_number == item_number,
                Item.merged_at.is_not(None),
            )
        )
        count = await self._execute_scalar(query)
        return bool(count)

    async def set_merged_at(
        self, org: str, repo: str, item_number: int, merged_at: str
    ) -> int:
        """Record the merge timestamp of a pull request in place."""
        result = await self.session.execute(
            update(Item)
            .where(
                and_(
                    Item.org == org,
                    Item.repo == repo,
                    Item.item_number == item_number,
                )
            )
            .values(merged_at=merged_at)
        )
        return result.rowcount or 0
