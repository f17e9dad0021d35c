"""Base repository with the statements shared by mirrored tables."""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from issue_mirror.models.base import MirrorModel

ModelType = TypeVar("ModelType", bound=MirrorModel)


class BaseRepository(Generic[ModelType]):
    """Base repository over one mirrored table."""

    def __init__(self, session: AsyncSession, model_class: type[ModelType]):
        """Initialize repository with database session and model class."""
        self.session = session
        self.model_class = model_class

    async def get(self, *key: Any) -> ModelType | None:
        """Get a row by primary key."""
        identity = key[0] if len(key) == 1 else tuple(key)
        return await self.session.get(self.model_class, identity)

    async def count_all(self) -> int:
        """Count total number of rows."""
        query = select(func.count()).select_from(self.model_class)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def _insert(self, values: dict[str, Any]) -> None:
        """Insert one row from a column mapping."""
        await self.session.execute(insert(self.model_class).values(**values))

    async def _delete_where(self, *criteria: Any) -> int:
        """Delete rows matching criteria and return the number removed."""
        result = await self.session.execute(
            delete(self.model_class).where(*criteria)
        )
        return result.rowcount or 0

    async def _execute_query(self, query: Select[tuple[ModelType]]) -> list[ModelType]:
        """Execute query and return results."""
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def _execute_scalar(self, query: Select[Any]) -> Any:
        """Execute query and return its single scalar value."""
        result = await self.session.execute(query)
        return result.scalar_one_or_none()
