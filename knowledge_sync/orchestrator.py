"""
LangGraph-based orchestrator for the sync pipeline.

Stages run as StateGraph nodes; conditional edges stop the graph as soon as
a stage marks the run complete (clean tree, cancelled, done) or failed.
"""

import time
from datetime import datetime
from typing import Callable, Literal, Optional

from langgraph.graph import StateGraph, END, START

from knowledge_sync.agents import (
    ChangeClassifierAgent,
    CommitMessageAgent,
    ConfirmationGateAgent,
    PrerequisiteCheckerAgent,
    RepositoryInspectorAgent,
    SyncExecutorAgent,
)
from knowledge_sync.config import SyncConfig
from knowledge_sync.integrations.git_client import GitClient
from knowledge_sync.integrations.prompt import PromptProvider, terminal_prompt
from knowledge_sync.logging_config import get_logger
from knowledge_sync.models.state import SyncOptions, SyncState
from knowledge_sync.reporter import Reporter

logger = get_logger(__name__)


# Routing

def should_continue_after_check(state: dict) -> Literal["inspect", "fail"]:
    """Route after prerequisite checks."""
    if state.get("next_action") == "fail":
        return "fail"
    return "inspect"


def should_continue_after_inspect(state: dict) -> Literal["classify", "complete", "fail"]:
    """Route after inspection; a clean tree completes the run."""
    if state.get("next_action") == "fail":
        return "fail"
    elif state.get("next_action") == "complete":
        return "complete"
    return "classify"


def should_continue_after_classify(state: dict) -> Literal["synthesize", "fail"]:
    """Route after classification."""
    if state.get("next_action") == "fail":
        return "fail"
    return "synthesize"


def should_continue_after_synthesize(state: dict) -> Literal["confirm", "fail"]:
    """Route after message synthesis."""
    if state.get("next_action") == "fail":
        return "fail"
    return "confirm"


def should_continue_after_confirm(state: dict) -> Literal["execute", "complete", "fail"]:
    """Route after the confirmation gate; a decline completes the run."""
    if state.get("next_action") == "fail":
        return "fail"
    elif state.get("next_action") == "complete":
        return "complete"
    return "execute"


class SyncOrchestrator:
    """LangGraph-based orchestrator for one sync run."""

    def __init__(
        self,
        config: SyncConfig,
        reporter: Optional[Reporter] = None,
        git_client: Optional[GitClient] = None,
        prompt: PromptProvider = terminal_prompt,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config
        self.reporter = reporter or Reporter()
        self.git_client = git_client or GitClient(
            config.repo_path,
            executable=config.git_executable,
            timeout=config.command_timeout,
        )

        self.checker = PrerequisiteCheckerAgent(self.git_client, self.reporter)
        self.inspector = RepositoryInspectorAgent(self.git_client, self.reporter)
        self.classifier = ChangeClassifierAgent(self.reporter)
        self.message_agent = CommitMessageAgent(clock=clock)
        self.gate = ConfirmationGateAgent(self.reporter, prompt=prompt)
        self.executor = SyncExecutorAgent(self.git_client, self.reporter)

        self.workflow = self._build_workflow()

    # Nodes

    def _run_node(self, node: str, agent_name: str, action: Callable[[SyncState], SyncState], state: dict) -> dict:
        logger.info("langgraph_node_start", node=node)
        start_time = time.time()

        agent_state = SyncState(**state)
        try:
            result = action(agent_state)
        except Exception as e:
            logger.error("langgraph_node_failed", node=node, error=str(e))
            agent_state.fail(e)
            result = agent_state

        duration = time.time() - start_time
        result.add_agent_record(agent_name, node, result.next_action, duration)
        logger.info("langgraph_node_complete", node=node, duration=duration, next_action=result.next_action)

        return result.model_dump()

    def check_node(self, state: dict) -> dict:
        """Prerequisite check node."""
        return self._run_node("check", "PrerequisiteCheckerAgent", self.checker.check, state)

    def inspect_node(self, state: dict) -> dict:
        """Repository inspection node."""
        return self._run_node("inspect", "RepositoryInspectorAgent", self.inspector.inspect, state)

    def classify_node(self, state: dict) -> dict:
        """Change classification node."""
        return self._run_node("classify", "ChangeClassifierAgent", self.classifier.classify, state)

    def synthesize_node(self, state: dict) -> dict:
        """Commit message node."""
        return self._run_node("synthesize", "CommitMessageAgent", self.message_agent.synthesize, state)

    def confirm_node(self, state: dict) -> dict:
        """Confirmation gate node."""
        return self._run_node("confirm", "ConfirmationGateAgent", self.gate.confirm, state)

    def execute_node(self, state: dict) -> dict:
        """Stage/commit/publish node."""
        return self._run_node("execute", "SyncExecutorAgent", self.executor.execute, state)

    def _build_workflow(self):
        """Build the LangGraph workflow."""
        logger.debug("building_langgraph_workflow")

        workflow = StateGraph(dict)

        workflow.add_node("check", self.check_node)
        workflow.add_node("inspect", self.inspect_node)
        workflow.add_node("classify", self.classify_node)
        workflow.add_node("synthesize", self.synthesize_node)
        workflow.add_node("confirm", self.confirm_node)
        workflow.add_node("execute", self.execute_node)

        workflow.add_edge(START, "check")

        workflow.add_conditional_edges(
            "check",
            should_continue_after_check,
            {"inspect": "inspect", "fail": END}
        )

        workflow.add_conditional_edges(
            "inspect",
            should_continue_after_inspect,
            {"classify": "classify", "complete": END, "fail": END}
        )

        workflow.add_conditional_edges(
            "classify",
            should_continue_after_classify,
            {"synthesize": "synthesize", "fail": END}
        )

        workflow.add_conditional_edges(
            "synthesize",
            should_continue_after_synthesize,
            {"confirm": "confirm", "fail": END}
        )

        workflow.add_conditional_edges(
            "confirm",
            should_continue_after_confirm,
            {"execute": "execute", "complete": END, "fail": END}
        )

        workflow.add_edge("execute", END)

        compiled_workflow = workflow.compile()

        logger.debug("langgraph_workflow_built", nodes=len(workflow.nodes))
        return compiled_workflow

    def run(self, options: Optional[SyncOptions] = None) -> SyncState:
        """Run the pipeline once and return the terminal state."""
        initial_state = SyncState(config=self.config, options=options or SyncOptions())
        logger.info("sync_run_start", run_id=initial_state.run_id, path=str(self.config.repo_path))

        result_dict = self.workflow.invoke(initial_state.model_dump())
        result_state = SyncState(**result_dict)

        logger.info(
            "sync_run_complete",
            run_id=result_state.run_id,
            final_action=result_state.next_action,
            termination_reason=result_state.termination_reason,
            error_kind=result_state.error_kind,
        )
        return result_state
