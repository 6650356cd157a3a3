"""
State management for the knowledge sync pipeline.

Defines the entities produced by each stage and the state envelope passed
between LangGraph nodes.
"""

from typing import Any, Dict, List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from knowledge_sync.config import SyncConfig


ChangeKind = Literal["added", "modified", "deleted", "untracked"]

TerminationReason = Literal[
    "completed",
    "no_changes",
    "cancelled",
    "configuration_error",
    "operation_error",
]


class SyncOptions(BaseModel):
    """Operator choices taken from the command line."""
    model_config = ConfigDict(frozen=True)

    message: Optional[str] = None
    force: bool = False
    dry_run: bool = False
    verbose: bool = False


class RepositorySnapshot(BaseModel):
    """Repository state captured once per run by the inspector."""
    model_config = ConfigDict(frozen=True)

    path: str
    current_branch: str
    required_branch: str
    has_origin_remote: bool
    is_clean: bool

    @property
    def on_required_branch(self) -> bool:
        return self.current_branch == self.required_branch


class StatusEntry(BaseModel):
    """One porcelain status line: two-letter code plus path."""
    model_config = ConfigDict(frozen=True)

    code: str = Field(min_length=2, max_length=2)
    path: str
    original_path: Optional[str] = None  # rename/copy source

    @property
    def index_status(self) -> str:
        return self.code[0]

    def __str__(self) -> str:
        if self.original_path:
            return f"{self.code} {self.original_path} -> {self.path}"
        return f"{self.code} {self.path}"


class ChangeRecord(BaseModel):
    """A single path and the one kind of change it carries."""
    model_config = ConfigDict(frozen=True)

    path: str
    kind: ChangeKind


class ChangeSummary(BaseModel):
    """Per-kind counts over the change records."""
    model_config = ConfigDict(frozen=True)

    added: int = Field(ge=0, default=0)
    modified: int = Field(ge=0, default=0)
    deleted: int = Field(ge=0, default=0)
    untracked: int = Field(ge=0, default=0)

    @property
    def total(self) -> int:
        return self.added + self.modified + self.deleted + self.untracked

    @classmethod
    def from_records(cls, records: List[ChangeRecord]) -> "ChangeSummary":
        counts: Dict[str, int] = {"added": 0, "modified": 0, "deleted": 0, "untracked": 0}
        for record in records:
            counts[record.kind] += 1
        return cls(**counts)


class SyncPlan(BaseModel):
    """What the executor will do; fixed before the confirmation gate."""
    model_config = ConfigDict(frozen=True)

    commit_message: str = Field(min_length=1)
    is_dry_run: bool = False
    is_forced: bool = False
    branch: str
    remote: str = "origin"

    @property
    def summary_line(self) -> str:
        return self.commit_message.splitlines()[0]


class SyncResult(BaseModel):
    """Terminal outcome of a run."""
    model_config = ConfigDict(frozen=True)

    succeeded: bool
    exit_code: int
    termination_reason: TerminationReason
    completed_steps: List[str] = Field(default_factory=list)
    error: Optional[str] = None


class SyncState(BaseModel):
    """
    Complete state passed between LangGraph nodes.

    Each stage fills in its own entity and sets ``next_action``; entities are
    frozen so later stages cannot alter what an earlier stage produced.
    """

    # Input
    config: SyncConfig
    options: SyncOptions = Field(default_factory=SyncOptions)

    # Inspection
    snapshot: Optional[RepositorySnapshot] = None
    status_entries: List[StatusEntry] = Field(default_factory=list)

    # Classification
    changes: List[ChangeRecord] = Field(default_factory=list)
    summary: Optional[ChangeSummary] = None

    # Planning
    plan: Optional[SyncPlan] = None
    confirmed: Optional[bool] = None

    # Execution
    completed_steps: List[str] = Field(default_factory=list)
    preview: List[List[str]] = Field(default_factory=list)

    # Outcome
    termination_reason: Optional[TerminationReason] = None
    error_kind: Optional[Literal["configuration_error", "operation_error"]] = None
    failed_step: Optional[str] = None
    errors: List[str] = Field(default_factory=list)

    # Audit trail
    agent_history: List[Dict[str, Any]] = Field(default_factory=list)

    # Control flow
    next_action: Literal[
        "check",
        "inspect",
        "classify",
        "synthesize",
        "confirm",
        "execute",
        "complete",
        "fail",
    ] = "check"

    run_id: str = Field(default_factory=lambda: f"sync-{datetime.now().strftime('%Y%m%d-%H%M%S')}")
    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    def add_agent_record(self, agent_name: str, action: str, result: Any, duration: float):
        """Add an agent action to the history."""
        self.agent_history.append({
            "agent": agent_name,
            "action": action,
            "result": str(result)[:500],
            "duration_seconds": duration,
            "timestamp": datetime.now().isoformat(),
        })

    def add_error(self, error: str):
        """Add an error to the error list."""
        self.errors.append(error)

    def finish(self, reason: TerminationReason):
        """Mark the run terminal with the given reason."""
        self.termination_reason = reason
        self.next_action = "complete"
        self.completed_at = datetime.now()

    def fail(self, error: Exception):
        """Record a fatal stage error; ``error.kind`` selects the exit code."""
        self.add_error(str(error))
        self.error_kind = getattr(error, "kind", "operation_error")
        self.failed_step = getattr(error, "step", None)
        self.next_action = "fail"
        self.completed_at = datetime.now()

    def to_result(self) -> SyncResult:
        """Map the terminal state to a SyncResult."""
        if self.next_action == "fail" or self.error_kind:
            reason = self.error_kind or "operation_error"
            return SyncResult(
                succeeded=False,
                exit_code=2 if reason == "configuration_error" else 1,
                termination_reason=reason,
                completed_steps=list(self.completed_steps),
                error=self.errors[-1] if self.errors else None,
            )
        return SyncResult(
            succeeded=True,
            exit_code=0,
            termination_reason=self.termination_reason or "completed",
            completed_steps=list(self.completed_steps),
        )
