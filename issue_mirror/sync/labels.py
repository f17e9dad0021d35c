"""Rebuilds item to label links."""

import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from issue_mirror.database.transactions import database_transaction
from issue_mirror.repositories.item_label import ItemLabelRepository

from .records import RemoteIssue

logger = logging.getLogger(__name__)


class LabelLinker:
    """Makes stored label links match the labels of the latest fetch.

    Links of every issue in the batch are dropped and re-created, so a
    label removed upstream disappears locally too.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.labels = ItemLabelRepository(session)

    async def relink_labels(
        self, issues: Sequence[RemoteIssue], org: str, repo: str
    ) -> int:
        """Replace label links for each issue in the batch.

        Returns:
            Number of links stored
        """
        linked = 0
        async with database_transaction(self.session):
            for issue in issues:
                linked += await self.labels.replace_for_item(
                    issue.id, (label.url for label in issue.labels)
                )

        logger.info(
            f"Linked {linked} labels across {len(issues)} items for {org}/{repo}"
        )
        return linked
