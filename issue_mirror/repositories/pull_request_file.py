"""PullRequestFile repository."""

from typing import Any

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from issue_mirror.models import PullRequestFile

from .base import BaseRepository


class PullRequestFileRepository(BaseRepository[PullRequestFile]):
    """Repository for PullRequestFile operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, PullRequestFile)

    def _key(self, pull_request_id: int, filename: str) -> Any:
        return and_(
            PullRequestFile.pull_request_id == pull_request_id,
            PullRequestFile.filename == filename,
        )

    async def exists(self, pull_request_id: int, filename: str) -> bool:
        """Check if stats for a file of a pull request are stored."""
        query = select(PullRequestFile.pull_request_id).where(
            self._key(pull_request_id, filename)
        )
        return await self._execute_scalar(query) is not None

    async def replace(self, values: dict[str, Any]) -> None:
        """Store stats for one file, replacing any previous row for it."""
        pull_request_id = values["pull_request_id"]
        filename = values["filename"]

        if await self.exists(pull_request_id, filename):
            await self._delete_where(self._key(pull_request_id, filename))
        await self._insert(values)

    async def list_for_pull_request(self, pull_request_id: int) -> list[PullRequestFile]:
        """List stored files of a pull request ordered by filename."""
        query = (
            select(PullRequestFile)
            .where(PullRequestFile.pull_request_id == pull_request_id)
            .order_by(PullRequestFile.filename)
        )
        return await self._execute_query(query)
