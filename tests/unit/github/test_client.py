"""
Unit tests for GitHub API client.

Why: The client is the only remote source of a sync pass; its error
     mapping decides which failures are retried, skipped or fatal.
What: Tests request headers, the mirror's endpoints, pagination, retries
      on server errors and the diff-unavailable special case.
How: Uses aioresponses to mock aiohttp responses, with asyncio.sleep
     patched out so retries run instantly.
"""

import re
from collections.abc import AsyncGenerator, Iterator
from unittest.mock import AsyncMock, patch

import pytest
from aioresponses import aioresponses

from issue_mirror.github.client import GitHubClient, GitHubClientConfig
from issue_mirror.github.exceptions import (
    GitHubAuthenticationError,
    GitHubDiffUnavailableError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubServerError,
    GitHubValidationError,
)

API = "https://api.github.com"
PULL_URL = f"{API}/repos/org/repo/pulls/7"
ISSUES_URL = re.compile(r"^https://api\.github\.com/repos/org/repo/issues\?.*$")
FILES_URL = re.compile(r"^https://api\.github\.com/repos/org/repo/pulls/7/files.*$")


class TestGitHubClientConfig:
    """Test GitHubClientConfig data class."""

    def test_defaults(self) -> None:
        """Test GitHubClientConfig with default values."""
        config = GitHubClientConfig()

        assert config.base_url == "https://api.github.com"
        assert config.timeout == 30
        assert config.max_retries == 3
        assert config.retry_backoff_factor == 2.0
        assert config.per_page == 100


class TestGitHubClient:
    """Test GitHubClient class."""

    @pytest.fixture
    async def client(self) -> AsyncGenerator[GitHubClient, None]:
        """Create a client with a token."""
        client = GitHubClient(token="test_token", config=GitHubClientConfig())
        yield client
        await client.close()

    @pytest.fixture(autouse=True)
    def no_backoff(self) -> Iterator[AsyncMock]:
        """Skip retry backoff sleeps."""
        with patch("issue_mirror.github.client.asyncio.sleep", new=AsyncMock()) as m:
            yield m

    async def test_get_pull(self, client: GitHubClient) -> None:
        """Test fetching a pull request."""
        with aioresponses() as m:
            m.get(PULL_URL, payload={"number": 7, "merged_at": None})

            pull = await client.get_pull("org", "repo", 7)

        assert pull == {"number": 7, "merged_at": None}

    async def test_token_sent_as_bearer(self, client: GitHubClient) -> None:
        """Test that the configured token authorizes every request."""
        with aioresponses() as m:
            m.get(PULL_URL, payload={"number": 7})

            await client.get_pull("org", "repo", 7)

            session = await client._ensure_session()

        assert session.headers["Authorization"] == "Bearer test_token"

    async def test_context_manager_closes_session(self) -> None:
        """Test that leaving the async context closes the HTTP session."""
        async with GitHubClient(token="t") as client:
            session = await client._ensure_session()
            assert not session.closed

        assert session.closed
        assert client._session is None

    async def test_anonymous_client_has_no_authorization(self) -> None:
        """Test that a client without token sends no Authorization header."""
        client = GitHubClient()
        try:
            session = await client._ensure_session()
            assert "Authorization" not in session.headers
        finally:
            await client.close()

    async def test_list_issues_follows_pages(self, client: GitHubClient) -> None:
        """Test that every page of the issue listing is collected."""
        next_url = f"{API}/repositories/1/issues?page=2"
        with aioresponses() as m:
            m.get(
                ISSUES_URL,
                payload=[{"number": 1}, {"number": 2}],
                headers={"Link": f'<{next_url}>; rel="next"'},
            )
            m.get(next_url, payload=[{"number": 3}])

            issues = await client.list_issues(
                "org", "repo", since="2015-04-18T14:17:02Z"
            )

        assert [issue["number"] for issue in issues] == [1, 2, 3]

    async def test_lowercase_link_header_followed(self, client: GitHubClient) -> None:
        """Test that a lower-case link header still yields every page."""
        next_url = f"{API}/repositories/1/issues?page=2"
        with aioresponses() as m:
            m.get(
                ISSUES_URL,
                payload=[{"number": 1}],
                headers={"link": f'<{next_url}>; rel="next"'},
            )
            m.get(next_url, payload=[{"number": 2}])

            issues = await client.list_issues("org", "repo")

        assert [issue["number"] for issue in issues] == [1, 2]

    async def test_list_issues_sends_cursor(self, client: GitHubClient) -> None:
        """Test that the since cursor and ordering reach the query string."""
        with aioresponses() as m:
            m.get(ISSUES_URL, payload=[])

            await client.list_issues("org", "repo", since="2015-04-18T14:17:02Z")

            (method, url), _calls = next(iter(m.requests.items()))

        assert method == "GET"
        assert url.query["since"] == "2015-04-18T14:17:02Z"
        assert url.query["state"] == "all"
        assert url.query["sort"] == "updated"
        assert url.query["per_page"] == "100"

    async def test_list_issues_without_cursor(self, client: GitHubClient) -> None:
        """Test that an empty scope fetches without a since parameter."""
        with aioresponses() as m:
            m.get(ISSUES_URL, payload=[])

            await client.list_issues("org", "repo")

            (_method, url), _calls = next(iter(m.requests.items()))

        assert "since" not in url.query

    async def test_list_pull_files(self, client: GitHubClient) -> None:
        """Test listing files of a pull request."""
        with aioresponses() as m:
            m.get(FILES_URL, payload=[{"filename": "README.md", "status": "added"}])

            files = await client.list_pull_files("org", "repo", 7)

        assert files == [{"filename": "README.md", "status": "added"}]

    async def test_server_error_retried(
        self, client: GitHubClient, no_backoff: AsyncMock
    ) -> None:
        """Test that a transient 502 is retried until it succeeds."""
        with aioresponses() as m:
            m.get(PULL_URL, status=502, payload={"message": "Bad Gateway"})
            m.get(PULL_URL, payload={"number": 7})

            pull = await client.get_pull("org", "repo", 7)

        assert pull == {"number": 7}
        no_backoff.assert_awaited_once()

    async def test_server_error_after_retries(self, client: GitHubClient) -> None:
        """Test that persistent server errors surface as GitHubServerError."""
        with aioresponses() as m:
            m.get(PULL_URL, status=500, payload={"message": "Oops"}, repeat=True)

            with pytest.raises(GitHubServerError) as exc_info:
                await client.get_pull("org", "repo", 7)

        assert exc_info.value.status_code == 500

    async def test_diff_unavailable_not_retried(
        self, client: GitHubClient, no_backoff: AsyncMock
    ) -> None:
        """Test that a diff GitHub cannot produce fails on the first attempt."""
        with aioresponses() as m:
            m.get(
                FILES_URL,
                status=500,
                payload={"message": "Sorry, this diff is taking too long to generate."},
                repeat=True,
            )

            with pytest.raises(GitHubDiffUnavailableError) as exc_info:
                await client.list_pull_files("org", "repo", 7)

        assert isinstance(exc_info.value, GitHubServerError)
        no_backoff.assert_not_awaited()

    async def test_diff_too_large_406(self, client: GitHubClient) -> None:
        """Test that a 406 about the diff maps to diff unavailable."""
        with aioresponses() as m:
            m.get(
                PULL_URL,
                status=406,
                payload={"message": "Sorry, the diff exceeded the maximum size"},
            )

            with pytest.raises(GitHubDiffUnavailableError):
                await client.get_pull("org", "repo", 7)

    @pytest.mark.parametrize(
        ("status", "message", "error_class"),
        [
            (401, "Bad credentials", GitHubAuthenticationError),
            (403, "Resource not accessible", GitHubAuthenticationError),
            (404, "Not Found", GitHubNotFoundError),
            (422, "Validation Failed", GitHubValidationError),
        ],
    )
    async def test_client_errors_not_retried(
        self,
        client: GitHubClient,
        no_backoff: AsyncMock,
        status: int,
        message: str,
        error_class: type[Exception],
    ) -> None:
        """Test that 4xx responses raise their specific error immediately."""
        with aioresponses() as m:
            m.get(PULL_URL, status=status, payload={"message": message})

            with pytest.raises(error_class):
                await client.get_pull("org", "repo", 7)

        no_backoff.assert_not_awaited()

    async def test_rate_limit_error(self, client: GitHubClient) -> None:
        """Test that an exhausted rate limit raises with reset information."""
        with aioresponses() as m:
            m.get(
                PULL_URL,
                status=403,
                payload={"message": "API rate limit exceeded"},
                headers={
                    "X-RateLimit-Reset": "1700000000",
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Limit": "5000",
                },
            )

            with pytest.raises(GitHubRateLimitError) as exc_info:
                await client.get_pull("org", "repo", 7)

        assert exc_info.value.reset_time == 1700000000
        assert exc_info.value.remaining == 0

    async def test_rate_limit_headers_tracked(self, client: GitHubClient) -> None:
        """Test that rate limit headers update the limiter."""
        with aioresponses() as m:
            m.get(
                PULL_URL,
                payload={"number": 7},
                headers={
                    "X-RateLimit-Limit": "5000",
                    "X-RateLimit-Remaining": "4999",
                    "X-RateLimit-Reset": "1700000000",
                },
            )

            await client.get_pull("org", "repo", 7)

        rate_limit = client.rate_limiter.get_rate_limit()
        assert rate_limit is not None
        assert rate_limit.remaining == 4999

    async def test_lowercase_rate_limit_headers_tracked(
        self, client: GitHubClient
    ) -> None:
        """Test that lower-case rate limit headers update the limiter."""
        with aioresponses() as m:
            m.get(
                PULL_URL,
                payload={"number": 7},
                headers={
                    "x-ratelimit-limit": "5000",
                    "x-ratelimit-remaining": "4321",
                    "x-ratelimit-reset": "1700000000",
                },
            )

            await client.get_pull("org", "repo", 7)

        rate_limit = client.rate_limiter.get_rate_limit()
        assert rate_limit is not None
        assert rate_limit.remaining == 4321
