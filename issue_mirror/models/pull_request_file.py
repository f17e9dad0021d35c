"""PullRequestFile SQLAlchemy model."""

from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import MirrorModel


class PullRequestFile(MirrorModel):
    """Change statistics for one file of a pull request."""

    __tablename__ = "pull_request_files"

    # Item id of the pull request
    pull_request_id: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False
    )
    filename: Mapped[str] = mapped_column(String(1000), primary_key=True)

    additions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    deletions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    changes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
