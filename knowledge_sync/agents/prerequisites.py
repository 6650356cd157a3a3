"""
Prerequisite Checker Agent.

Validates that the target path is a git working tree and git is callable.
"""

from pathlib import Path
import structlog

from knowledge_sync.errors import ConfigurationError, SyncError
from knowledge_sync.integrations.git_client import GitClient
from knowledge_sync.models.state import SyncState
from knowledge_sync.reporter import Reporter

logger = structlog.get_logger()


class PrerequisiteCheckerAgent:
    """Checks directory, repository metadata and git executable, in that order."""

    def __init__(self, git_client: GitClient, reporter: Reporter):
        self.git_client = git_client
        self.reporter = reporter

    def check(self, state: SyncState) -> SyncState:
        """
        Validate prerequisites.

        Args:
            state: Initial state carrying the run configuration

        Returns:
            Updated state with next_action "inspect", or "fail" with a
            configuration error recorded
        """
        self.reporter.info("Checking prerequisites...")
        repo_path = Path(state.config.repo_path)
        logger.info("checking_prerequisites", path=str(repo_path))

        try:
            self._check_directory(repo_path)
            self._check_repository(repo_path)
            self._check_executable()
        except SyncError as e:
            logger.info("prerequisites_failed", error=str(e))
            state.fail(e)
            return state

        self.reporter.success("Prerequisites OK")
        state.next_action = "inspect"
        return state

    def _check_directory(self, repo_path: Path):
        if not repo_path.is_dir():
            raise ConfigurationError(f"Directory not found: {repo_path}")

    def _check_repository(self, repo_path: Path):
        # .git is a file for linked worktrees and submodules
        if not (repo_path / ".git").exists():
            raise ConfigurationError(f"Not a git repository: {repo_path}")

    def _check_executable(self):
        resolved = self.git_client.resolve_executable()
        if not resolved:
            raise ConfigurationError(f"git executable not found: {self.git_client.executable}")
        logger.debug("git_resolved", executable=resolved)
