"""ItemComment SQLAlchemy model."""

from sqlalchemy import BigInteger, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import MirrorModel
from .item import TIMESTAMP_LENGTH


class ItemComment(MirrorModel):
    """Mirrored comment on an issue or pull request."""

    __tablename__ = "item_comments"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)

    org: Mapped[str] = mapped_column(String(200), nullable=False)
    repo: Mapped[str] = mapped_column(String(200), nullable=False)
    # Parsed from the comment's html_url, GitHub does not return it directly
    item_number: Mapped[int] = mapped_column(Integer, nullable=False)

    user_login: Mapped[str | None] = mapped_column(String(100), nullable=True)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[str | None] = mapped_column(
        String(TIMESTAMP_LENGTH), nullable=True
    )
    updated_at: Mapped[str | None] = mapped_column(
        String(TIMESTAMP_LENGTH), nullable=True
    )

    __table_args__ = (
        Index("ix_item_comments_org_repo_updated_at", "org", "repo", "updated_at"),
    )
