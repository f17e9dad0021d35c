"""Result objects reported by sync stages."""

from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass
class SoftFailure:
    """Per-item failure that was skipped without aborting the batch."""

    stage: str
    org: str
    repo: str
    item_number: int
    error_type: str
    message: str


@dataclass
class ReconcileResult:
    """Outcome of one reconciliation stage over a batch."""

    stage: str
    pull_requests: int = 0
    cache_hits: int = 0
    remote_calls: int = 0
    rows_written: int = 0
    failures: list[SoftFailure] = field(default_factory=list)


@dataclass
class SyncResult:
    """Outcome of one sync pass over a repository."""

    org: str
    repo: str
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None
    item_cursor: str | None = None
    comment_cursor: str | None = None
    items_upserted: int = 0
    comments_upserted: int = 0
    labels_linked: int = 0
    merged_at: ReconcileResult | None = None
    files: ReconcileResult | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        """Check if the pass ran to completion."""
        return self.error is None

    @property
    def soft_failures(self) -> list[SoftFailure]:
        """Per-item failures skipped during reconciliation."""
        failures: list[SoftFailure] = []
        for stage in (self.merged_at, self.files):
            if stage is not None:
                failures.extend(stage.failures)
        return failures

    @property
    def duration_seconds(self) -> float | None:
        """Wall-clock duration of the pass."""
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()
