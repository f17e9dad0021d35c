"""Enrichment of pull requests with data from the pull request endpoints.

The issue listing does not carry a pull request's merge time or changed
files, and fetching them costs one extra request per pull request. Merge
times never change once set, so a stored non-null ``merged_at`` is used as
a cache that skips the request entirely.
"""

import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from issue_mirror.database.transactions import database_transaction
from issue_mirror.github.exceptions import (
    GitHubDiffUnavailableError,
    GitHubServerError,
)
from issue_mirror.repositories.item import ItemRepository
from issue_mirror.repositories.pull_request_file import PullRequestFileRepository

from .interfaces import PullRequestSource
from .records import RemoteIssue, RemotePullRequest, RemotePullRequestFile
from .results import ReconcileResult, SoftFailure
from .timestamps import to_store_timestamp

logger = logging.getLogger(__name__)

MERGED_AT_STAGE = "merged_at"
FILES_STAGE = "files"


class CrossReferenceReconciler:
    """Records merge timestamps and file stats of pull requests.

    Pull requests are handled one at a time and each one's writes commit on
    their own, so a skipped or failing pull request never discards the work
    done for earlier ones.
    """

    def __init__(self, session: AsyncSession, source: PullRequestSource):
        self.session = session
        self.source = source
        self.items = ItemRepository(session)
        self.files = PullRequestFileRepository(session)

    def _soft_failure(
        self,
        stage: str,
        org: str,
        repo: str,
        issue: RemoteIssue,
        error: Exception,
        level: int = logging.WARNING,
    ) -> SoftFailure:
        logger.log(
            level,
            f"Skipping {stage} for {org}/{repo}#{issue.number}: "
            f"{type(error).__name__}: {error}",
        )
        return SoftFailure(
            stage=stage,
            org=org,
            repo=repo,
            item_number=issue.number,
            error_type=type(error).__name__,
            message=str(error),
        )

    async def reconcile_merged_at(
        self, items: Sequence[RemoteIssue], org: str, repo: str
    ) -> ReconcileResult:
        """Fill in ``merged_at`` for pull requests that do not have it yet.

        Server errors from the pull request lookup skip that pull request;
        any other error propagates.
        """
        result = ReconcileResult(stage=MERGED_AT_STAGE)

        for issue in items:
            if not issue.is_pull_request:
                continue
            result.pull_requests += 1

            if await self.items.has_merged_at(org, repo, issue.number):
                result.cache_hits += 1
                continue

            result.remote_calls += 1
            try:
                payload = await self.source.get_pull(org, repo, issue.number)
            except GitHubServerError as e:
                result.failures.append(
                    self._soft_failure(MERGED_AT_STAGE, org, repo, issue, e)
                )
                continue

            pull = RemotePullRequest.from_api(payload)
            merged_at = to_store_timestamp(pull.merged_at)
            if merged_at is None:
                continue

            async with database_transaction(self.session):
                await self.items.set_merged_at(org, repo, pull.number, merged_at)
            result.rows_written += 1
            logger.debug(f"Recorded merged_at {merged_at} for {org}/{repo}#{pull.number}")

        logger.info(
            f"Merged-at reconciliation for {org}/{repo}: "
            f"{result.pull_requests} pull requests, {result.cache_hits} cached, "
            f"{result.rows_written} updated, {len(result.failures)} skipped"
        )
        return result

    async def reconcile_files(
        self, items: Sequence[RemoteIssue], org: str, repo: str
    ) -> ReconcileResult:
        """Store changed-file stats of every pull request in the batch.

        A pull request whose diff GitHub cannot produce, or whose lookup
        hits a server error, is skipped and keeps any files stored earlier.
        """
        result = ReconcileResult(stage=FILES_STAGE)

        for issue in items:
            if not issue.is_pull_request:
                continue
            result.pull_requests += 1
            result.remote_calls += 1

            try:
                payloads = await self.source.list_pull_files(org, repo, issue.number)
            except GitHubDiffUnavailableError as e:
                # Permanent for this pull request, nothing to alert on
                result.failures.append(
                    self._soft_failure(
                        FILES_STAGE, org, repo, issue, e, level=logging.INFO
                    )
                )
                continue
            except GitHubServerError as e:
                result.failures.append(
                    self._soft_failure(FILES_STAGE, org, repo, issue, e)
                )
                continue

            files = [RemotePullRequestFile.from_api(payload) for payload in payloads]

            async with database_transaction(self.session):
                for changed in files:
                    await self.files.replace(
                        {
                            "pull_request_id": issue.id,
                            "filename": changed.filename,
                            "additions": changed.additions,
                            "deletions": changed.deletions,
                            "changes": changed.changes,
                            "status": changed.status,
                        }
                    )
            result.rows_written += len(files)

        logger.info(
            f"File reconciliation for {org}/{repo}: "
            f"{result.pull_requests} pull requests, {result.rows_written} files, "
            f"{len(result.failures)} skipped"
        )
        return result
