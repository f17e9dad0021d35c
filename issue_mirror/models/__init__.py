"""SQLAlchemy models for the mirrored issue store."""

from .base import Base, MirrorModel
from .comment import ItemComment
from .item import Item
from .item_label import ItemLabel
from .pull_request_file import PullRequestFile

__all__ = [
    # Base classes
    "Base",
    "MirrorModel",
    # Mirrored tables
    "Item",
    "ItemComment",
    "ItemLabel",
    "PullRequestFile",
]
