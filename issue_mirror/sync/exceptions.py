"""Exceptions raised by the sync engine."""


class SyncError(Exception):
    """Base exception for sync engine errors."""

    pass


class CommentUrlError(SyncError):
    """Raised when a comment URL does not identify its parent item.

    The item number of a comment is only available through its html_url,
    so a URL in an unexpected shape cannot be stored without breaking the
    comment to item link.
    """

    def __init__(self, html_url: str | None):
        super().__init__(f"Cannot derive item number from comment URL: {html_url!r}")
        self.html_url = html_url
