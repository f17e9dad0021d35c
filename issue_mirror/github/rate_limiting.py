"""Request budget tracking from GitHub rate limit headers."""

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass

from multidict import CIMultiDict

from .exceptions import GitHubRateLimitError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitInfo:
    """Budget of one rate limit resource as of the last response."""

    resource: str
    limit: int
    remaining: int
    reset: int

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "RateLimitInfo | None":
        """Read the budget from response headers, matched case-insensitively.

        Returns:
            None when the response carries no usable rate limit headers
        """
        headers = CIMultiDict(headers)
        if "X-RateLimit-Remaining" not in headers:
            return None
        try:
            return cls(
                resource=headers.get("X-RateLimit-Resource", "core"),
                limit=int(headers.get("X-RateLimit-Limit", "0")),
                remaining=int(headers["X-RateLimit-Remaining"]),
                reset=int(headers.get("X-RateLimit-Reset", "0")),
            )
        except ValueError:
            logger.debug(f"Ignoring malformed rate limit headers: {dict(headers)}")
            return None

    @property
    def seconds_until_reset(self) -> float:
        return max(0.0, self.reset - time.time())

    def exhausted(self, buffer: int) -> bool:
        """True while no more than ``buffer`` calls remain before the reset."""
        return self.remaining <= buffer and self.seconds_until_reset > 0


class RateLimitManager:
    """Refuses requests locally once a resource's budget reaches the buffer.

    A pass that would run the budget dry fails fast with
    ``GitHubRateLimitError`` and is rerun after the reset.
    """

    def __init__(self, buffer: int = 50):
        self.buffer = buffer
        self._budgets: dict[str, RateLimitInfo] = {}

    def get_rate_limit(self, resource: str = "core") -> RateLimitInfo | None:
        return self._budgets.get(resource)

    def update_rate_limit(self, headers: Mapping[str, str]) -> None:
        """Record the budget reported by a response, if it reports one."""
        info = RateLimitInfo.from_headers(headers)
        if info is None:
            return
        self._budgets[info.resource] = info
        if info.exhausted(self.buffer):
            logger.warning(
                f"GitHub {info.resource} budget low: {info.remaining}/{info.limit} "
                f"left, resets in {info.seconds_until_reset:.0f}s"
            )

    def check_rate_limit(self, resource: str = "core") -> None:
        """Raise before a request that would eat into the buffer.

        Raises:
            GitHubRateLimitError: If the resource's budget is exhausted
        """
        info = self._budgets.get(resource)
        if info is None or not info.exhausted(self.buffer):
            return
        raise GitHubRateLimitError(
            f"{resource} budget exhausted ({info.remaining} left), "
            f"resets in {info.seconds_until_reset:.0f}s",
            reset_time=info.reset,
            remaining=info.remaining,
            limit=info.limit,
        )
