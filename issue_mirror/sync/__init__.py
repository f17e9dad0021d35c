"""Synchronization engine: cursors, upserts, reconciliation and label links."""

from .cursors import CursorReader
from .exceptions import CommentUrlError, SyncError
from .interfaces import (
    IssueSource,
    IssueTrackerSource,
    OrganizationIssueSource,
    PullRequestSource,
)
from .labels import LabelLinker
from .reconciler import CrossReferenceReconciler
from .records import (
    RemoteComment,
    RemoteIssue,
    RemoteLabel,
    RemotePullRequest,
    RemotePullRequestFile,
    parse_comment_item_number,
)
from .results import ReconcileResult, SoftFailure, SyncResult
from .synchronizer import RepositorySynchronizer
from .timestamps import to_cursor_timestamp, to_store_timestamp
from .upserter import RecordUpserter

__all__ = [
    "CommentUrlError",
    "CrossReferenceReconciler",
    "CursorReader",
    "IssueSource",
    "IssueTrackerSource",
    "LabelLinker",
    "OrganizationIssueSource",
    "PullRequestSource",
    "ReconcileResult",
    "RecordUpserter",
    "RemoteComment",
    "RemoteIssue",
    "RemoteLabel",
    "RemotePullRequest",
    "RemotePullRequestFile",
    "RepositorySynchronizer",
    "SoftFailure",
    "SyncError",
    "SyncResult",
    "parse_comment_item_number",
    "to_cursor_timestamp",
    "to_store_timestamp",
]
