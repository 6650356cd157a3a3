"""
Sync Executor Agent.

Runs stage, commit and publish in order, or previews them in dry-run mode.
"""

import time
from typing import List
import structlog

from knowledge_sync.errors import GitCommandError, OperationError
from knowledge_sync.integrations.git_client import (
    GitClient,
    GitCommand,
    commit_command,
    push_command,
    stage_all_command,
)
from knowledge_sync.models.state import SyncPlan, SyncState
from knowledge_sync.reporter import Reporter

logger = structlog.get_logger()

STEP_MESSAGES = {
    "stage": "Staging changes...",
    "commit": "Creating commit...",
    "publish": "Pushing to remote...",
}


def build_operations(plan: SyncPlan) -> List[GitCommand]:
    """Ordered commands for a plan. Preview and live mode share this list."""
    return [
        stage_all_command(),
        commit_command(plan.commit_message),
        push_command(plan.remote, plan.branch),
    ]


class SyncExecutorAgent:
    """Executes (or previews) the stage, commit, publish sequence."""

    def __init__(self, git_client: GitClient, reporter: Reporter):
        self.git_client = git_client
        self.reporter = reporter

    def execute(self, state: SyncState) -> SyncState:
        """
        Run the plan.

        Args:
            state: State with a confirmed plan

        Returns:
            Updated state with completed_steps (live) or preview (dry-run)
        """
        operations = build_operations(state.plan)

        if state.plan.is_dry_run:
            return self._preview(state, operations)
        return self._run(state, operations)

    def _preview(self, state: SyncState, operations: List[GitCommand]) -> SyncState:
        state.preview = [list(op.argv(self.git_client.executable)) for op in operations]

        lines = []
        for op in operations:
            if op.step == "commit":
                op = commit_command(state.plan.summary_line)
            lines.append(op.display(self.git_client.executable))

        self.reporter.info("Dry run: the following commands would be executed:")
        self.reporter.section("Commands:", lines)
        logger.info("dry_run_previewed", operations=len(operations))

        state.finish("completed")
        return state

    def _run(self, state: SyncState, operations: List[GitCommand]) -> SyncState:
        logger.info("executing_sync", branch=state.plan.branch, remote=state.plan.remote)

        for op in operations:
            self.reporter.info(STEP_MESSAGES[op.step])
            start_time = time.time()
            try:
                self.git_client.run(op)
            except GitCommandError as e:
                error = OperationError(f"{op.step} failed: {e.stderr or e}", step=op.step)
                logger.info("sync_step_failed", step=op.step, completed=state.completed_steps)
                if "commit" in state.completed_steps:
                    self.reporter.warning(
                        "The commit was created locally and is kept; push again once the remote is reachable"
                    )
                state.fail(error)
                return state

            state.completed_steps.append(op.step)
            logger.info("sync_step_complete", step=op.step, duration=time.time() - start_time)

        self.reporter.success("Knowledge base sync complete")
        self.reporter.info(f"Repository: {state.config.repo_path}")
        self.reporter.info(f"Branch: {state.plan.branch}")

        state.finish("completed")
        return state
