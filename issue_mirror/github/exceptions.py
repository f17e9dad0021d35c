"""Failures of GitHub API requests.

Each class records whether repeating the request can help. The client
retries only ``retryable`` errors; the sync engine treats server errors
on pull request lookups as per-item skips and lets the rest propagate.
"""


class GitHubError(Exception):
    """A GitHub API request failed.

    Attributes:
        status_code: HTTP status of the failed response, None when no
            response arrived
    """

    retryable = False

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GitHubAuthenticationError(GitHubError):
    """Token missing, invalid or lacking access (401, 403)."""


class GitHubRateLimitError(GitHubError):
    """Request budget exhausted, or about to be within the local buffer.

    Attributes:
        reset_time: Unix time at which GitHub refills the budget
        remaining: Requests left in the current window
        limit: Size of the window's budget
    """

    def __init__(
        self,
        message: str,
        reset_time: int | None = None,
        remaining: int = 0,
        limit: int = 0,
    ):
        super().__init__(message, status_code=403)
        self.reset_time = reset_time
        self.remaining = remaining
        self.limit = limit


class GitHubNotFoundError(GitHubError):
    """Repository, organization or pull request does not exist (404)."""


class GitHubValidationError(GitHubError):
    """GitHub rejected the request parameters (422)."""


class GitHubServerError(GitHubError):
    """Transient 5xx answer from GitHub."""

    retryable = True


class GitHubDiffUnavailableError(GitHubServerError):
    """GitHub cannot generate the diff of a pull request.

    Reported as a 5xx ("Sorry, there was a problem generating this diff")
    or a 406 ("diff too large"). It is permanent for that pull request.
    """

    retryable = False


class GitHubConnectionError(GitHubError):
    """No response: DNS, TLS or socket failure."""

    retryable = True


class GitHubTimeoutError(GitHubError):
    """No response within the configured timeout."""

    retryable = True
