"""Repository implementations for the mirror store."""

from .base import BaseRepository
from .comment import CommentRepository
from .item import ItemRepository
from .item_label import ItemLabelRepository
from .pull_request_file import PullRequestFileRepository

__all__ = [
    "BaseRepository",
    "CommentRepository",
    "ItemLabelRepository",
    "ItemRepository",
    "PullRequestFileRepository",
]
