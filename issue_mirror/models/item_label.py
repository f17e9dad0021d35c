"""ItemLabel association model."""

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import MirrorModel


class ItemLabel(MirrorModel):
    """Link between an item and one of its current labels."""

    __tablename__ = "item_to_label"

    item_id: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False
    )
    # Label API url, e.g. https://api.github.com/repos/org/repo/labels/bug
    url: Mapped[str] = mapped_column(String(500), primary_key=True)
