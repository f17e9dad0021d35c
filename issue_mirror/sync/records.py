"""Records fetched from GitHub, as consumed by the sync engine.

GitHub payloads are plain JSON mappings; these dataclasses pick out the
fields the mirror stores and normalize absent nested objects (no
assignee, no pull request) to ``None``.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from .exceptions import CommentUrlError

# e.g. https://github.com/org/repo/issues/13#issuecomment-155591520
# Comments on pull requests use /pull/<number> in the same position.
COMMENT_URL_PATTERN = re.compile(
    r"/(?:issues|pull)/(?P<item_number>\d+)#issuecomment-(?P<comment_id>\d+)$"
)


def parse_comment_item_number(html_url: str | None) -> int:
    """Derive the parent item number from a comment's html_url.

    Raises:
        CommentUrlError: If the URL does not end in
            ``/issues/<number>#issuecomment-<id>``
    """
    match = COMMENT_URL_PATTERN.search(html_url or "")
    if match is None:
        raise CommentUrlError(html_url)
    return int(match.group("item_number"))


def _login(user: dict[str, Any] | None) -> str | None:
    return user.get("login") if user else None


@dataclass
class RemoteLabel:
    """Label attached to an issue."""

    url: str
    name: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RemoteLabel":
        """Build from a GitHub label payload."""
        return cls(url=data["url"], name=data.get("name"))


@dataclass
class RemoteIssue:
    """Issue or pull request as listed by the issues endpoints."""

    id: int
    number: int
    state: str
    title: str
    body: str | None = None
    user_login: str | None = None
    assignee_login: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    closed_at: str | None = None
    merged_at: str | None = None
    comments: int = 0
    pull_request_url: str | None = None
    repository: str | None = None
    labels: list[RemoteLabel] = field(default_factory=list)

    @property
    def is_pull_request(self) -> bool:
        """Check if the issue is a pull request."""
        return self.pull_request_url is not None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RemoteIssue":
        """Build from a GitHub issue payload."""
        pull_request = data.get("pull_request") or {}
        repository = data.get("repository") or {}

        return cls(
            id=data["id"],
            number=data["number"],
            state=data["state"],
            title=data.get("title") or "",
            body=data.get("body"),
            user_login=_login(data.get("user")),
            assignee_login=_login(data.get("assignee")),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            closed_at=data.get("closed_at"),
            merged_at=data.get("merged_at") or pull_request.get("merged_at"),
            comments=data.get("comments") or 0,
            pull_request_url=pull_request.get("html_url") if pull_request else None,
            repository=repository.get("name"),
            labels=[RemoteLabel.from_api(label) for label in data.get("labels") or []],
        )


@dataclass
class RemoteComment:
    """Issue or pull request comment."""

    id: int
    html_url: str
    body: str | None = None
    user_login: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def item_number(self) -> int:
        """Number of the issue or pull request the comment belongs to."""
        return parse_comment_item_number(self.html_url)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RemoteComment":
        """Build from a GitHub issue comment payload."""
        return cls(
            id=data["id"],
            html_url=data["html_url"],
            body=data.get("body"),
            user_login=_login(data.get("user")),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


@dataclass
class RemotePullRequest:
    """Pull request detail, reduced to what reconciliation needs."""

    number: int
    merged_at: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RemotePullRequest":
        """Build from a GitHub pull request payload."""
        return cls(number=data["number"], merged_at=data.get("merged_at"))


@dataclass
class RemotePullRequestFile:
    """Per-file change statistics of a pull request."""

    filename: str
    status: str
    additions: int = 0
    deletions: int = 0
    changes: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RemotePullRequestFile":
        """Build from a GitHub pull request file payload."""
        return cls(
            filename=data["filename"],
            status=data["status"],
            additions=data.get("additions", 0),
            deletions=data.get("deletions", 0),
            changes=data.get("changes", 0),
        )
