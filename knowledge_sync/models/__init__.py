"""Models package for knowledge sync."""

from knowledge_sync.models.state import (
    ChangeKind,
    ChangeRecord,
    ChangeSummary,
    RepositorySnapshot,
    StatusEntry,
    SyncOptions,
    SyncPlan,
    SyncResult,
    SyncState,
    TerminationReason,
)

__all__ = [
    "ChangeKind",
    "ChangeRecord",
    "ChangeSummary",
    "RepositorySnapshot",
    "StatusEntry",
    "SyncOptions",
    "SyncPlan",
    "SyncResult",
    "SyncState",
    "TerminationReason",
]
