"""GitHub API client with token auth, retries, rate limiting and pagination."""

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any
from urllib.parse import urljoin

import aiohttp
from multidict import CIMultiDict

from .exceptions import (
    GitHubAuthenticationError,
    GitHubConnectionError,
    GitHubDiffUnavailableError,
    GitHubError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubServerError,
    GitHubTimeoutError,
    GitHubValidationError,
)
from .pagination import AsyncPaginator, PaginatedResponse
from .rate_limiting import RateLimitManager

logger = logging.getLogger(__name__)


@dataclass
class GitHubClientConfig:
    """Configuration for GitHub client."""

    base_url: str = "https://api.github.com"
    timeout: int = 30
    max_retries: int = 3
    retry_backoff_factor: float = 2.0
    rate_limit_buffer: int = 50
    per_page: int = 100
    user_agent: str = "issue-mirror/0.1"


class GitHubClient:
    """Async GitHub API client used as the remote source of a sync pass."""

    def __init__(
        self,
        token: str | None = None,
        config: GitHubClientConfig | None = None,
    ) -> None:
        """Initialize GitHub client.

        Args:
            token: Personal access or installation token; anonymous if None
            config: Client configuration
        """
        self.token = token
        self.config = config or GitHubClientConfig()
        self.rate_limiter = RateLimitManager(buffer=self.config.rate_limit_buffer)

        # HTTP session will be initialized on first use
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "GitHubClient":
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure HTTP session is initialized."""
        if self._session is None or self._session.closed:
            headers = {
                "User-Agent": self.config.user_agent,
                "Accept": "application/vnd.github+json",
            }
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"

            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
                headers=headers,
            )
        return self._session

    async def close(self) -> None:
        """Close HTTP session and cleanup resources."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    def _url(self, path: str) -> str:
        return urljoin(self.config.base_url.rstrip("/") + "/", path.lstrip("/"))

    async def _make_request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> tuple[Any, CIMultiDict[str]]:
        """Make HTTP request with retry logic and error handling.

        Errors marked retryable (server errors, timeouts and connection
        failures) are retried with exponential backoff. Every other error
        is raised immediately.

        Returns:
            Decoded JSON body and response headers

        Raises:
            GitHubError: Various GitHub API errors
        """
        correlation_id = str(uuid.uuid4())[:8]
        self.rate_limiter.check_rate_limit()
        session = await self._ensure_session()

        last_exception: GitHubError | None = None
        for attempt in range(self.config.max_retries + 1):
            try:
                start_time = time.time()
                logger.debug(
                    f"GitHub API request [{correlation_id}] {method} {url} "
                    f"(attempt {attempt + 1})"
                )

                async with session.request(method, url, params=params) as response:
                    headers = CIMultiDict(response.headers)
                    self.rate_limiter.update_rate_limit(headers)

                    logger.debug(
                        f"GitHub API response [{correlation_id}] "
                        f"{response.status} in {time.time() - start_time:.2f}s"
                    )

                    if response.status == 204:
                        return None, headers
                    if response.status in (200, 201):
                        return await response.json(), headers

                    await self._handle_error_response(response, correlation_id)

            except GitHubError as e:
                if not e.retryable:
                    raise
                last_exception = e
            except TimeoutError:
                last_exception = GitHubTimeoutError(
                    f"Request timeout for {method} {url}"
                )
            except aiohttp.ClientError as e:
                last_exception = GitHubConnectionError(
                    f"Connection error for {method} {url}: {e}"
                )

            if attempt < self.config.max_retries:
                backoff_time = self.config.retry_backoff_factor**attempt
                logger.warning(
                    f"Request [{correlation_id}] failed (attempt {attempt + 1}), "
                    f"retrying in {backoff_time:.1f}s: {last_exception}"
                )
                await asyncio.sleep(backoff_time)

        if last_exception:
            raise last_exception
        raise GitHubError(f"Request failed after {self.config.max_retries} retries")

    async def _handle_error_response(
        self, response: aiohttp.ClientResponse, correlation_id: str
    ) -> None:
        """Raise the exception matching an error response.

        Raises:
            GitHubError: Appropriate error based on status code
        """
        try:
            error_data = await response.json()
        except (json.JSONDecodeError, aiohttp.ContentTypeError):
            error_data = {"message": await response.text()}

        if not isinstance(error_data, dict):
            error_data = {"message": str(error_data)}
        error_message = error_data.get("message") or f"HTTP {response.status}"

        logger.warning(
            f"GitHub API error [{correlation_id}] {response.status}: {error_message}"
        )

        status = response.status
        if status == 406 or status >= 500:
            if "diff" in error_message.lower():
                raise GitHubDiffUnavailableError(error_message, status)

        if status == 401:
            raise GitHubAuthenticationError(error_message, status)
        elif status == 403:
            if "rate limit" in error_message.lower():
                reset_time = response.headers.get("X-RateLimit-Reset")
                raise GitHubRateLimitError(
                    error_message,
                    reset_time=int(reset_time) if reset_time else None,
                    remaining=int(response.headers.get("X-RateLimit-Remaining", "0")),
                    limit=int(response.headers.get("X-RateLimit-Limit", "0")),
                )
            raise GitHubAuthenticationError(error_message, status)
        elif status == 404:
            raise GitHubNotFoundError(error_message, status)
        elif status == 422:
            raise GitHubValidationError(error_message, status)
        elif 500 <= status < 600:
            raise GitHubServerError(error_message, status)
        else:
            raise GitHubError(error_message, status)

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make GET request to GitHub API.

        Args:
            path: API path (e.g., '/repos/owner/repo/pulls/1')
            params: Query parameters

        Returns:
            JSON response data
        """
        data, _headers = await self._make_request("GET", self._url(path), params)
        return data

    async def _fetch_paginated(
        self, url: str, params: dict[str, Any] | None = None
    ) -> PaginatedResponse:
        """Fetch one page for AsyncPaginator."""
        data, headers = await self._make_request("GET", url, params)
        return PaginatedResponse(data or [], headers, url)

    def paginate(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
    ) -> AsyncPaginator:
        """Create async paginator for GitHub API endpoint."""
        return AsyncPaginator(
            client=self,
            initial_url=self._url(path),
            params=params,
            per_page=self.config.per_page,
            max_pages=max_pages,
        )

    # Endpoints used by the mirror

    async def list_issues(
        self, owner: str, repo: str, since: str | None = None
    ) -> list[dict[str, Any]]:
        """List issues and pull requests of a repository updated since a cursor.

        Args:
            owner: Repository owner
            repo: Repository name
            since: ISO 8601 cursor ('2015-04-18T14:17:02Z'); all items if None

        Returns:
            Issue payloads, oldest update first
        """
        params: dict[str, Any] = {"state": "all", "sort": "updated", "direction": "asc"}
        if since:
            params["since"] = since
        return await self.paginate(f"/repos/{owner}/{repo}/issues", params).collect_all()

    async def list_org_issues(
        self, org: str, since: str | None = None
    ) -> list[dict[str, Any]]:
        """List issues across an organization updated since a cursor."""
        params: dict[str, Any] = {
            "filter": "all",
            "state": "all",
            "sort": "updated",
            "direction": "asc",
        }
        if since:
            params["since"] = since
        return await self.paginate(f"/orgs/{org}/issues", params).collect_all()

    async def list_issue_comments(
        self, owner: str, repo: str, since: str | None = None
    ) -> list[dict[str, Any]]:
        """List issue and pull request comments of a repository since a cursor."""
        params: dict[str, Any] = {"sort": "updated", "direction": "asc"}
        if since:
            params["since"] = since
        return await self.paginate(
            f"/repos/{owner}/{repo}/issues/comments", params
        ).collect_all()

    async def get_pull(self, owner: str, repo: str, pull_number: int) -> dict[str, Any]:
        """Get specific pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            pull_number: Pull request number

        Returns:
            Pull request data
        """
        data: dict[str, Any] = await self.get(
            f"/repos/{owner}/{repo}/pulls/{pull_number}"
        )
        return data

    async def list_pull_files(
        self, owner: str, repo: str, pull_number: int
    ) -> list[dict[str, Any]]:
        """List files changed by a pull request with their line stats.

        Raises:
            GitHubDiffUnavailableError: If GitHub cannot produce the diff
        """
        return await self.paginate(
            f"/repos/{owner}/{repo}/pulls/{pull_number}/files"
        ).collect_all()
