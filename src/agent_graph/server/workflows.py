"""Workflow executors shared by the API routes.

All executors handed out by one registry share a single
``CheckpointManager``, so a thread started through ``/api/graph`` can be
listed, resumed and deleted through the thread and checkpoint routes.
"""

from __future__ import annotations

import logging
import threading

from agent_graph.agents.workflows import create_code_review_workflow, create_research_workflow
from agent_graph.graph.executor import GraphExecutor
from agent_graph.graph.results import AgentFunction, AgentResult
from agent_graph.llm.factory import LLMFactory
from agent_graph.llm.provider import LLMProvider
from agent_graph.server.config import ServerSettings
from agent_graph.state.agent_state import AgentState, Message
from agent_graph.state.checkpoints import CheckpointManager

logger = logging.getLogger(__name__)

WORKFLOWS = ("research", "code-review")
DEFAULT_LANGUAGE = "python"


class UnknownWorkflowError(LookupError):
    pass


class ProviderNotConfiguredError(RuntimeError):
    pass


def echo_agent() -> AgentFunction:
    """Stand-in agent for requests that name no workflow."""

    async def echo(state: AgentState) -> AgentResult:
        state.add_message(Message(role="assistant", content="Custom agent executed"))
        return state.set_next_agent(None)

    return echo


class WorkflowRegistry:
    def __init__(
        self,
        settings: ServerSettings,
        checkpoint_manager: CheckpointManager | None = None,
        provider: LLMProvider | None = None,
    ) -> None:
        self.settings = settings
        self.checkpoint_manager = checkpoint_manager or CheckpointManager()
        self._provider = provider
        self._executors: dict[str, GraphExecutor] = {}
        self._lock = threading.Lock()

    def provider(self) -> LLMProvider:
        with self._lock:
            if self._provider is None:
                if not self.settings.openai_api_key.strip():
                    raise ProviderNotConfiguredError(
                        "OPENAI_API_KEY is required for LLM-backed workflows"
                    )
                self._provider = LLMFactory.create(self.settings.llm_config())
            return self._provider

    def executor(
        self, workflow: str | None, start_agent: str, language: str | None = None
    ) -> GraphExecutor:
        if workflow is None:
            return GraphExecutor(
                {start_agent: echo_agent()},
                self.settings.executor_config(),
                self.checkpoint_manager,
            )

        if workflow not in WORKFLOWS:
            raise UnknownWorkflowError(f"Unknown workflow: {workflow}")

        key = f"{workflow}:{language or DEFAULT_LANGUAGE}" if workflow == "code-review" else workflow
        cached = self._executors.get(key)
        if cached is not None:
            return cached

        provider = self.provider()
        if workflow == "research":
            agents = create_research_workflow(provider)
        else:
            agents = create_code_review_workflow(provider, language or DEFAULT_LANGUAGE)

        executor = GraphExecutor(
            agents, self.settings.executor_config(), self.checkpoint_manager
        )
        logger.info("Workflow executor created", extra={"workflow": key})
        with self._lock:
            return self._executors.setdefault(key, executor)
