"""ItemLabel association repository."""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from issue_mirror.models import ItemLabel

from .base import BaseRepository


class ItemLabelRepository(BaseRepository[ItemLabel]):
    """Repository for item to label links."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, ItemLabel)

    async def replace_for_item(self, item_id: int, label_urls: Iterable[str]) -> int:
        """Make ``label_urls`` the complete label set of an item.

        Returns:
            Number of links stored
        """
        await self._delete_where(ItemLabel.item_id == item_id)

        stored = 0
        for url in dict.fromkeys(label_urls):
            await self._insert({"item_id": item_id, "url": url})
            stored += 1
        return stored

    async def list_urls_for_item(self, item_id: int) -> list[str]:
        """List label urls linked to an item."""
        query = (
            select(ItemLabel.url)
            .where(ItemLabel.item_id == item_id)
            .order_by(ItemLabel.url)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())
