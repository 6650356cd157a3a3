"""
Change Classifier Agent.

Turns porcelain status entries into one ChangeRecord per path and counts
them per kind.

Each path gets exactly one kind. Composite codes are resolved by the first
matching rule:

    ??          untracked
    !!          ignored, not counted
    unmerged    modified ("DD", "AU", "UD", "UA", "DU", "AA", "UU")
    D anywhere  deleted (e.g. "AD", " D", "MD")
    index A/C   added (copies count as new paths)
    otherwise   modified (includes "MM", "T", renames, intent-to-add " A")

Renames are recorded under their destination path.
"""

from typing import Dict, List, Optional, Tuple
import structlog

from knowledge_sync.models.state import (
    ChangeKind,
    ChangeRecord,
    ChangeSummary,
    StatusEntry,
    SyncState,
)
from knowledge_sync.reporter import Reporter

logger = structlog.get_logger()

UNMERGED_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})


def classify_entry(entry: StatusEntry) -> Optional[ChangeKind]:
    """Return the single kind for a status entry, or None if it is ignored."""
    code = entry.code
    if code == "??":
        return "untracked"
    if code == "!!":
        return None
    if code in UNMERGED_CODES:
        return "modified"
    if "D" in code:
        return "deleted"
    if entry.index_status in ("A", "C"):
        return "added"
    return "modified"


def classify_entries(entries: List[StatusEntry]) -> Tuple[List[ChangeRecord], ChangeSummary]:
    """
    Classify status entries.

    A path listed more than once keeps its first classification.

    Returns:
        Tuple of (records in listing order, summary)
    """
    by_path: Dict[str, ChangeRecord] = {}
    for entry in entries:
        kind = classify_entry(entry)
        if kind is None or entry.path in by_path:
            continue
        by_path[entry.path] = ChangeRecord(path=entry.path, kind=kind)

    records = list(by_path.values())
    return records, ChangeSummary.from_records(records)


class ChangeClassifierAgent:
    """Classifies pending changes and shows them to the operator."""

    def __init__(self, reporter: Reporter):
        self.reporter = reporter

    def classify(self, state: SyncState) -> SyncState:
        """
        Classify the status entries captured by the inspector.

        Args:
            state: State with status_entries

        Returns:
            Updated state with changes and summary
        """
        records, summary = classify_entries(state.status_entries)
        state.changes = records
        state.summary = summary

        self.reporter.section("Changed files:", [str(entry) for entry in state.status_entries])
        self.reporter.section(
            "Change statistics:",
            [
                f"Added: {summary.added}",
                f"Modified: {summary.modified}",
                f"Deleted: {summary.deleted}",
                f"Untracked: {summary.untracked}",
            ],
        )
        for record in records:
            self.reporter.detail(f"{record.kind}: {record.path}")

        logger.info(
            "changes_classified",
            added=summary.added,
            modified=summary.modified,
            deleted=summary.deleted,
            untracked=summary.untracked,
        )

        state.next_action = "synthesize"
        return state
