"""Contracts of the remote collaborators used by the sync engine.

``GitHubClient`` satisfies all of them; tests substitute ``AsyncMock``
objects.
"""

from typing import Any, Protocol


class PullRequestSource(Protocol):
    """Source of pull request details and changed files."""

    async def get_pull(
        self, owner: str, repo: str, pull_number: int
    ) -> dict[str, Any]:
        """Return the pull request payload, at least ``number`` and ``merged_at``.

        Raises:
            GitHubServerError: On a transient server-side failure
        """
        ...

    async def list_pull_files(
        self, owner: str, repo: str, pull_number: int
    ) -> list[dict[str, Any]]:
        """Return the changed files of a pull request.

        Raises:
            GitHubDiffUnavailableError: If the diff cannot be generated
            GitHubServerError: On a transient server-side failure
        """
        ...


class IssueSource(Protocol):
    """Source of issues and comments of a repository."""

    async def list_issues(
        self, owner: str, repo: str, since: str | None = None
    ) -> list[dict[str, Any]]:
        """Return issue payloads updated since the cursor."""
        ...

    async def list_issue_comments(
        self, owner: str, repo: str, since: str | None = None
    ) -> list[dict[str, Any]]:
        """Return comment payloads updated since the cursor."""
        ...


class OrganizationIssueSource(Protocol):
    """Source of issues across every repository of an organization."""

    async def list_org_issues(
        self, org: str, since: str | None = None
    ) -> list[dict[str, Any]]:
        """Return issue payloads, each carrying its ``repository``."""
        ...


class IssueTrackerSource(IssueSource, PullRequestSource, Protocol):
    """Everything a repository sync pass needs from the remote side."""

    pass
