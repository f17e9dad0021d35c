"""GitHub API pagination utilities."""

import re
from collections.abc import AsyncIterator, Mapping
from typing import Any

from multidict import CIMultiDict


class LinkHeader:
    """Parser for GitHub Link headers."""

    # Link header format: <url>; rel="next", <url>; rel="last"
    LINK_PATTERN = re.compile(r'<([^>]+)>;\s*rel="([^"]+)"')

    def __init__(self, link_header: str | None = None):
        """Initialize Link header parser.

        Args:
            link_header: Raw Link header value from response
        """
        self.links: dict[str, str] = {}
        if link_header:
            for match in self.LINK_PATTERN.finditer(link_header):
                url, rel = match.groups()
                self.links[rel] = url

    @property
    def next_url(self) -> str | None:
        """Get URL for next page."""
        return self.links.get("next")

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return "next" in self.links


class PaginatedResponse:
    """One page of a GitHub list endpoint."""

    def __init__(
        self, data: list[dict[str, Any]], headers: Mapping[str, str], url: str
    ):
        self.data = data
        self.headers = CIMultiDict(headers)
        self.url = url
        self.link_header = LinkHeader(self.headers.get("Link"))

    @property
    def has_next_page(self) -> bool:
        """Check if there's a next page."""
        return self.link_header.has_next

    @property
    def next_page_url(self) -> str | None:
        """Get URL for next page."""
        return self.link_header.next_url


class AsyncPaginator:
    """Async iterator over every item of a paginated GitHub endpoint."""

    def __init__(
        self,
        client: Any,  # Avoid circular import
        initial_url: str,
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
        per_page: int = 100,
    ):
        """Initialize async paginator.

        Args:
            client: GitHub client instance
            initial_url: Initial URL to fetch
            params: Query parameters for the first page
            max_pages: Maximum number of pages to fetch
            per_page: Items per page (max 100 for GitHub)
        """
        self.client = client
        self.initial_url = initial_url
        self.params = dict(params or {})
        self.max_pages = max_pages
        self.per_page = min(per_page, 100)  # GitHub max is 100
        self.params["per_page"] = self.per_page

    async def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        """Yield items page by page, following Link headers."""
        next_url: str | None = self.initial_url
        # The next-page URL already carries the query string
        params: dict[str, Any] | None = self.params
        pages = 0

        while next_url:
            if self.max_pages and pages >= self.max_pages:
                break

            response: PaginatedResponse = await self.client._fetch_paginated(
                next_url, params
            )
            pages += 1
            params = None
            next_url = response.next_page_url if response.has_next_page else None

            for item in response.data:
                yield item

    async def collect_all(self) -> list[dict[str, Any]]:
        """Collect all items from all pages."""
        return [item async for item in self]
