"""Runs a complete sync pass for a repository or an organization."""

import logging
from collections import defaultdict
from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from issue_mirror.database.transactions import TransactionError
from issue_mirror.github.exceptions import GitHubError

from .cursors import CursorReader
from .exceptions import SyncError
from .interfaces import IssueTrackerSource, OrganizationIssueSource
from .labels import LabelLinker
from .reconciler import CrossReferenceReconciler
from .records import RemoteComment, RemoteIssue
from .results import SyncResult
from .upserter import RecordUpserter

logger = logging.getLogger(__name__)

# Failures that end one repository's pass without stopping the others
PASS_ERRORS = (GitHubError, SyncError, SQLAlchemyError, TransactionError)


class RepositorySynchronizer:
    """Mirrors new activity of repositories into the store.

    A pass reads the cursors, fetches what changed since then, stores it,
    then enriches pull requests and refreshes label links. Every stage is
    idempotent, so an interrupted pass is repaired by running it again.
    """

    def __init__(self, session: AsyncSession, source: IssueTrackerSource):
        self.session = session
        self.source = source
        self.cursors = CursorReader(session)
        self.upserter = RecordUpserter(session)
        self.reconciler = CrossReferenceReconciler(session, source)
        self.labels = LabelLinker(session)

    async def sync_repository(self, org: str, repo: str) -> SyncResult:
        """Run one pass over a repository.

        Raises:
            GitHubError: If fetching issues or comments fails
            CommentUrlError: If a fetched comment URL cannot be parsed
        """
        result = SyncResult(org=org, repo=repo)

        result.item_cursor = await self.cursors.max_item_timestamp_for_repo(org, repo)
        issues = [
            RemoteIssue.from_api(payload)
            for payload in await self.source.list_issues(
                org, repo, since=result.item_cursor
            )
        ]
        logger.info(
            f"Fetched {len(issues)} items for {org}/{repo} "
            f"since {result.item_cursor or 'the beginning'}"
        )

        result.items_upserted = await self.upserter.upsert_items(issues, org, repo)

        result.comment_cursor = await self.cursors.max_comment_timestamp_for_repo(
            org, repo
        )
        comments = [
            RemoteComment.from_api(payload)
            for payload in await self.source.list_issue_comments(
                org, repo, since=result.comment_cursor
            )
        ]
        result.comments_upserted = await self.upserter.upsert_comments(
            comments, org, repo
        )

        result.merged_at = await self.reconciler.reconcile_merged_at(issues, org, repo)
        result.files = await self.reconciler.reconcile_files(issues, org, repo)
        result.labels_linked = await self.labels.relink_labels(issues, org, repo)

        result.finished_at = datetime.now(UTC)
        logger.info(
            f"Synced {org}/{repo}: {result.items_upserted} items, "
            f"{result.comments_upserted} comments, "
            f"{len(result.soft_failures)} skipped lookups "
            f"in {result.duration_seconds:.1f}s"
        )
        return result

    async def sync_organization(
        self, org: str, repos: Sequence[str]
    ) -> list[SyncResult]:
        """Run a pass for each repository of an organization, in order.

        A failing repository is logged and reported in its result; the
        remaining repositories are still synced.
        """
        results = []
        for repo in repos:
            try:
                results.append(await self.sync_repository(org, repo))
            except PASS_ERRORS as e:
                results.append(await self.fail_pass(org, repo, e))
        return results

    async def fail_pass(self, org: str, repo: str, error: Exception) -> SyncResult:
        """Discard the failed pass's open transaction and report the failure.

        The session is left clean so the next pass starts a fresh
        transaction instead of failing on the aborted one.
        """
        await self.session.rollback()
        logger.error(f"Sync of {org}/{repo} failed: {type(error).__name__}: {error}")
        return SyncResult(
            org=org,
            repo=repo,
            finished_at=datetime.now(UTC),
            error=f"{type(error).__name__}: {error}",
        )

    async def sync_organization_items(
        self, org: str, source: OrganizationIssueSource
    ) -> list[SyncResult]:
        """Mirror issues of a whole organization from its org-wide listing.

        Uses the organization cursor and the organization issues endpoint,
        then stores each repository's share of the batch. Comments are
        repository scoped and are left to ``sync_repository``.
        """
        cursor = await self.cursors.max_item_timestamp_for_org(org)
        by_repo: dict[str, list[RemoteIssue]] = defaultdict(list)
        for payload in await source.list_org_issues(org, since=cursor):
            issue = RemoteIssue.from_api(payload)
            if issue.repository is None:
                logger.warning(f"Skipping {org} item {issue.id} without repository")
                continue
            by_repo[issue.repository].append(issue)

        results = []
        for repo, issues in sorted(by_repo.items()):
            result = SyncResult(org=org, repo=repo, item_cursor=cursor)
            result.items_upserted = await self.upserter.upsert_items(issues, org, repo)
            result.merged_at = await self.reconciler.reconcile_merged_at(
                issues, org, repo
            )
            result.files = await self.reconciler.reconcile_files(issues, org, repo)
            result.labels_linked = await self.labels.relink_labels(issues, org, repo)
            result.finished_at = datetime.now(UTC)
            results.append(result)

        logger.info(
            f"Synced {sum(r.items_upserted for r in results)} items "
            f"across {len(results)} repositories of {org}"
        )
        return results
