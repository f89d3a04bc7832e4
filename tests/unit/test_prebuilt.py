"""Unit tests for the ready-made graphs."""

from __future__ import annotations

import pytest

from agent_graph.core.config import ExecutorConfig
from agent_graph.graph.prebuilt import (
    ITERATIONS_KEY,
    create_agent_graph,
    create_cyclic_workflow_graph,
    create_human_in_the_loop_graph,
    invoke_with_feedback,
)
from agent_graph.state.agent_state import HUMAN_AGENT, AgentState, Message
from agent_graph.state.checkpoints import CheckpointManager


@pytest.mark.asyncio
async def test_cyclic_workflow_loops_then_completes(user_state: AgentState) -> None:
    executor = create_cyclic_workflow_graph("looper", max_iterations=3)

    result = await executor.invoke(user_state, "looper")

    assert [m.content for m in result.messages][1:] == [
        "Iteration 1",
        "Iteration 2",
        "Iteration 3",
        "Workflow complete",
    ]
    assert result.get_metadata(ITERATIONS_KEY) == 3
    assert result.get_next_agent() is None


@pytest.mark.asyncio
async def test_human_in_the_loop_graph_pauses(user_state: AgentState) -> None:
    manager = CheckpointManager()
    executor = create_human_in_the_loop_graph("worker", ExecutorConfig(), manager)

    assert executor.config.human_in_the_loop is True

    result = await executor.invoke(
        user_state, "worker", thread_id="t1", checkpoint=True, wait_for_human=True
    )

    assert result.is_waiting_for_approval()
    assert result.get_next_agent() == HUMAN_AGENT
    assert result.messages[-1].content == "Action completed, awaiting approval"

    checkpoint_id = manager.latest_checkpoint_id("t1")
    released = await executor.submit_human_feedback("t1", checkpoint_id, True)
    assert not released.is_waiting_for_approval()


@pytest.mark.asyncio
async def test_invoke_with_feedback_resolves_in_one_call(user_state: AgentState) -> None:
    executor = create_human_in_the_loop_graph("worker")

    result = await invoke_with_feedback(executor, user_state, "worker", False, "Needs sources")

    assert not result.is_waiting_for_approval()
    assert result.approval_count == 1
    assert result.messages[-1].content == "Feedback: Needs sources"


@pytest.mark.asyncio
async def test_create_agent_graph_uses_given_agents(executor_config: ExecutorConfig) -> None:
    async def only(state: AgentState) -> AgentState:
        return state.add_message(Message(role="assistant", content="only"))

    executor = create_agent_graph({"only": only}, executor_config)
    result = await executor.invoke(AgentState(), "only")

    assert [m.content for m in result.messages] == ["only"]
