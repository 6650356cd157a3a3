"""
Confirmation Gate Agent.

Asks the operator to approve the plan before anything is mutated.
"""

import structlog

from knowledge_sync.integrations.prompt import PromptProvider, terminal_prompt
from knowledge_sync.models.state import SyncState
from knowledge_sync.reporter import Reporter

logger = structlog.get_logger()

PLANNED_ACTIONS = [
    "1. Stage all changes",
    "2. Create commit",
    "3. Push to remote",
]

AFFIRMATIVE = {"y", "yes"}

PROMPT_TEXT = "\nProceed? [y/N]: "


def is_affirmative(answer: str) -> bool:
    return answer.strip().lower() in AFFIRMATIVE


class ConfirmationGateAgent:
    """Single blocking yes/no gate, skipped when forced or in dry-run."""

    def __init__(self, reporter: Reporter, prompt: PromptProvider = terminal_prompt):
        self.reporter = reporter
        self.prompt = prompt

    def confirm(self, state: SyncState) -> SyncState:
        """
        Gate execution on operator approval.

        Args:
            state: State with plan

        Returns:
            Updated state: next_action "execute" when approved or skipped,
            "complete" with termination reason "cancelled" when declined
        """
        plan = state.plan
        if plan.is_forced or plan.is_dry_run:
            logger.info("confirmation_skipped", forced=plan.is_forced, dry_run=plan.is_dry_run)
            state.confirmed = True
            state.next_action = "execute"
            return state

        self.reporter.section("Planned actions:", PLANNED_ACTIONS)
        self.reporter.section("Commit message:", plan.commit_message.splitlines()[:3])

        answer = self.prompt(PROMPT_TEXT)
        state.confirmed = is_affirmative(answer)
        logger.info("confirmation_answered", confirmed=state.confirmed)

        if not state.confirmed:
            self.reporter.info("Operation cancelled")
            state.finish("cancelled")
            return state

        state.next_action = "execute"
        return state
