"""Integrations with the git command line and the operator's terminal."""

from knowledge_sync.integrations.git_client import GitClient, GitCommand
from knowledge_sync.integrations.prompt import PromptProvider, terminal_prompt

__all__ = [
    "GitClient",
    "GitCommand",
    "PromptProvider",
    "terminal_prompt",
]
