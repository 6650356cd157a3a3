"""
Repository State Inspector Agent.

Captures branch, remote and working-tree status into a RepositorySnapshot.
"""

import structlog

from knowledge_sync.errors import ConfigurationError, GitCommandError, SyncError
from knowledge_sync.integrations.git_client import GitClient
from knowledge_sync.models.state import RepositorySnapshot, SyncState
from knowledge_sync.reporter import Reporter

logger = structlog.get_logger()


class RepositoryInspectorAgent:
    """Queries the repository once and decides whether there is anything to sync."""

    def __init__(self, git_client: GitClient, reporter: Reporter):
        self.git_client = git_client
        self.reporter = reporter

    def inspect(self, state: SyncState) -> SyncState:
        """
        Inspect repository state.

        Order is branch, remote, status: a missing remote is reported even
        when the tree is clean.

        Args:
            state: State after prerequisite checks

        Returns:
            Updated state with snapshot and status entries. next_action is
            "classify", "complete" (clean tree) or "fail".
        """
        config = state.config
        self.reporter.info("Inspecting repository state...")
        logger.info("inspecting_repository", path=str(config.repo_path))

        try:
            branch = self._query(self.git_client.current_branch)
            if not branch:
                raise ConfigurationError("HEAD is detached; check out a branch to publish")

            if branch != config.required_branch:
                self.reporter.warning(
                    f"Current branch is {branch} (expected {config.required_branch})"
                )
                logger.info("branch_mismatch", current=branch, required=config.required_branch)

            remotes = self._query(self.git_client.remotes)
            if config.remote_name not in remotes:
                raise ConfigurationError(f"No '{config.remote_name}' remote configured")

            entries = self._query(self.git_client.status)
        except SyncError as e:
            logger.info("inspection_failed", error=str(e))
            state.fail(e)
            return state

        state.snapshot = RepositorySnapshot(
            path=str(config.repo_path),
            current_branch=branch,
            required_branch=config.required_branch,
            has_origin_remote=True,
            is_clean=not entries,
        )
        state.status_entries = entries

        logger.info(
            "repository_inspected",
            branch=branch,
            entries=len(entries),
            clean=state.snapshot.is_clean,
        )

        if state.snapshot.is_clean:
            self.reporter.warning("No changes to commit")
            state.finish("no_changes")
            return state

        self.reporter.success(f"Detected changes in {len(entries)} path(s)")
        state.next_action = "classify"
        return state

    def _query(self, query):
        """Run a read-only git query; failures are configuration errors."""
        try:
            return query()
        except GitCommandError as e:
            raise ConfigurationError(f"Repository query failed: {e}") from e
        except ValueError as e:
            raise ConfigurationError(f"Could not parse git output: {e}") from e
