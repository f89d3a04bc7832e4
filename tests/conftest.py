"""Test configuration and fixtures."""

from collections.abc import Callable
from unittest.mock import Mock

import pytest

from agent_graph.core.config import ExecutorConfig, LLMConfig
from agent_graph.graph.executor import GraphExecutor
from agent_graph.graph.results import AgentFunction, AgentResult
from agent_graph.llm.provider import LLMProvider
from agent_graph.state.agent_state import AgentState, Message
from agent_graph.state.checkpoints import CheckpointManager

AgentFactory = Callable[[str, str | None], AgentFunction]


@pytest.fixture
def executor_config() -> ExecutorConfig:
    """Provide a test executor configuration."""
    return ExecutorConfig(max_iterations=10, human_in_the_loop=False, default_timeout_seconds=5.0)


@pytest.fixture
def llm_config() -> LLMConfig:
    """Provide a test LLM configuration."""
    return LLMConfig(provider="openai", openai_api_key="test-key", openai_model="gpt-4o-mini")


@pytest.fixture
def checkpoint_manager() -> CheckpointManager:
    """Provide an empty in-memory checkpoint manager."""
    return CheckpointManager()


@pytest.fixture
def user_state() -> AgentState:
    """Provide a state holding a single user message."""
    return AgentState().add_message(Message(role="user", content="Write about tide pools"))


@pytest.fixture
def mock_provider() -> Mock:
    """Provide an LLM provider double."""
    return Mock(spec=LLMProvider)


@pytest.fixture
def say() -> AgentFactory:
    """Build agents that append one assistant message and route on."""

    def factory(content: str, next_agent: str | None) -> AgentFunction:
        async def agent(state: AgentState) -> AgentResult:
            state.add_message(Message(role="assistant", content=content))
            return state.set_next_agent(next_agent)

        return agent

    return factory


@pytest.fixture
def pipeline_executor(
    say: AgentFactory,
    executor_config: ExecutorConfig,
    checkpoint_manager: CheckpointManager,
) -> GraphExecutor:
    """researcher -> writer -> critic, where the critic approves."""
    return GraphExecutor(
        {
            "researcher": say("Research notes on tide pools", "writer"),
            "writer": say("Draft article", "critic"),
            "critic": say("Looks good, approved", None),
        },
        executor_config,
        checkpoint_manager,
    )
