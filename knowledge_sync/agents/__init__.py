"""Pipeline stages for knowledge sync."""

from knowledge_sync.agents.prerequisites import PrerequisiteCheckerAgent
from knowledge_sync.agents.inspector import RepositoryInspectorAgent
from knowledge_sync.agents.classifier import ChangeClassifierAgent
from knowledge_sync.agents.message import CommitMessageAgent
from knowledge_sync.agents.confirmation import ConfirmationGateAgent
from knowledge_sync.agents.executor import SyncExecutorAgent

__all__ = [
    "PrerequisiteCheckerAgent",
    "RepositoryInspectorAgent",
    "ChangeClassifierAgent",
    "CommitMessageAgent",
    "ConfirmationGateAgent",
    "SyncExecutorAgent",
]
