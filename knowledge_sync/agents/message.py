"""
Commit Message Agent.

Uses the operator's message verbatim, or synthesizes one from the change
summary, then fixes the SyncPlan.
"""

from datetime import datetime
from typing import Callable, List, Optional
import structlog

from knowledge_sync.models.state import ChangeSummary, SyncPlan, SyncState

logger = structlog.get_logger()

HEADER_LABEL = "Knowledge base sync"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
TRAILER = "Generated by knowledge-sync"

# (summary field, label) in body order
CATEGORIES = [
    ("added", "Added"),
    ("modified", "Modified"),
    ("deleted", "Deleted"),
    ("untracked", "Untracked"),
]


def _files(count: int) -> str:
    return "1 file" if count == 1 else f"{count} files"


def synthesize_message(summary: ChangeSummary, now: datetime) -> str:
    """Build the automatic message: header, per-category lines, trailer."""
    header = f"{HEADER_LABEL} - {now.strftime(TIMESTAMP_FORMAT)}"
    body: List[str] = [
        f"{label}: {_files(getattr(summary, field))}"
        for field, label in CATEGORIES
        if getattr(summary, field) > 0
    ]

    lines = [header, ""]
    if body:
        lines.extend(body)
        lines.append("")
    lines.append(TRAILER)
    return "\n".join(lines)


def resolve_message(custom_message: Optional[str], summary: ChangeSummary, now: datetime) -> str:
    """Return the custom message unchanged if given, else a synthesized one."""
    if custom_message:
        return custom_message
    return synthesize_message(summary, now)


class CommitMessageAgent:
    """Produces the commit message and the SyncPlan."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock

    def synthesize(self, state: SyncState) -> SyncState:
        summary = state.summary or ChangeSummary()
        custom = state.options.message
        message = resolve_message(custom, summary, self.clock())

        state.plan = SyncPlan(
            commit_message=message,
            is_dry_run=state.options.dry_run,
            is_forced=state.options.force,
            branch=state.snapshot.current_branch,
            remote=state.config.remote_name,
        )

        logger.info(
            "commit_message_ready",
            custom=bool(custom),
            summary_line=state.plan.summary_line,
        )

        state.next_action = "confirm"
        return state
