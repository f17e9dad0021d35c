"""Item SQLAlchemy model (issues and pull requests)."""

from sqlalchemy import BigInteger, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import MirrorModel

# Canonical timestamps are stored as text, e.g. '2014-10-31T23:21:44+00:00'
TIMESTAMP_LENGTH = 32


class Item(MirrorModel):
    """Mirrored issue or pull request, keyed by GitHub's global id."""

    __tablename__ = "items"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)

    # Scope
    org: Mapped[str] = mapped_column(String(200), nullable=False)
    repo: Mapped[str] = mapped_column(String(200), nullable=False)
    item_number: Mapped[int] = mapped_column(Integer, nullable=False)

    # People
    assignee_login: Mapped[str | None] = mapped_column(String(100), nullable=True)
    user_login: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Content
    state: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    comment_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Timestamps
    created_at: Mapped[str | None] = mapped_column(
        String(TIMESTAMP_LENGTH), nullable=True
    )
    updated_at: Mapped[str | None] = mapped_column(
        String(TIMESTAMP_LENGTH), nullable=True
    )
    closed_at: Mapped[str | None] = mapped_column(
        String(TIMESTAMP_LENGTH), nullable=True
    )

    # Pull request data
    pull_request_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    merged_at: Mapped[str | None] = mapped_column(
        String(TIMESTAMP_LENGTH), nullable=True
    )

    __table_args__ = (
        Index("ix_items_org_repo_updated_at", "org", "repo", "updated_at"),
        Index("ix_items_org_repo_item_number", "org", "repo", "item_number"),
    )
