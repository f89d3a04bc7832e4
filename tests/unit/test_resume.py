"""Unit tests for resuming threads and human feedback."""

from __future__ import annotations

import pytest

from agent_graph.core.config import ExecutorConfig
from agent_graph.graph.errors import CheckpointNotFoundError, NoResumableAgentError
from agent_graph.graph.executor import GraphExecutor
from agent_graph.graph.results import AgentResult
from agent_graph.state.agent_state import HUMAN_AGENT, AgentState, Message
from agent_graph.state.checkpoints import CheckpointManager


async def approval_step(state: AgentState) -> AgentResult:
    state.add_message(Message(role="assistant", content="Ready for review"))
    return state.request_approval()


@pytest.fixture
def approval_executor(say, checkpoint_manager: CheckpointManager) -> GraphExecutor:
    return GraphExecutor(
        {"drafter": approval_step, "writer": say("Revised draft", HUMAN_AGENT)},
        ExecutorConfig(human_in_the_loop=True),
        checkpoint_manager,
    )


async def _pause(executor: GraphExecutor, state: AgentState) -> str:
    await executor.invoke(state, "drafter", thread_id="t1", checkpoint=True, wait_for_human=True)
    checkpoint_id = executor.checkpoint_manager.latest_checkpoint_id("t1")
    assert checkpoint_id is not None
    return checkpoint_id


@pytest.mark.asyncio
async def test_approval_pauses_and_feedback_releases(
    approval_executor: GraphExecutor, user_state: AgentState
) -> None:
    result = await approval_executor.invoke(
        user_state, "drafter", thread_id="t1", checkpoint=True, wait_for_human=True
    )
    assert result.is_waiting_for_approval()

    checkpoint_id = approval_executor.checkpoint_manager.latest_checkpoint_id("t1")
    released = await approval_executor.submit_human_feedback("t1", checkpoint_id, approved=True)

    assert not released.is_waiting_for_approval()
    assert released.approval_count == 1
    assert released.get_next_agent() is None


@pytest.mark.asyncio
async def test_feedback_is_saved_as_new_checkpoint(
    approval_executor: GraphExecutor,
    checkpoint_manager: CheckpointManager,
    user_state: AgentState,
) -> None:
    checkpoint_id = await _pause(approval_executor, user_state)

    await approval_executor.submit_human_feedback("t1", checkpoint_id, True, "Ship it")

    history = checkpoint_manager.get_checkpoints("t1")
    assert len(history) == 2
    assert AgentState.deserialize(history[0].state).is_waiting_for_approval()
    latest = checkpoint_manager.load_latest_checkpoint("t1")
    assert latest.messages[-1].content == "Feedback: Ship it"


@pytest.mark.asyncio
async def test_rejection_continues_with_routed_agent(
    checkpoint_manager: CheckpointManager, say, user_state: AgentState
) -> None:
    async def drafter(state: AgentState) -> AgentResult:
        state.add_message(Message(role="assistant", content="First draft"))
        state.request_approval()
        # The workflow decides where a rejection goes.
        state.set_next_agent("writer")
        return state

    executor = GraphExecutor(
        {"drafter": drafter, "writer": say("Revised draft", HUMAN_AGENT)},
        ExecutorConfig(human_in_the_loop=True),
        checkpoint_manager,
    )
    await executor.invoke(user_state, "drafter", thread_id="t1", checkpoint=True, wait_for_human=True)
    checkpoint_id = checkpoint_manager.latest_checkpoint_id("t1")

    result = await executor.submit_human_feedback("t1", checkpoint_id, False, "Too short")

    assert [m.content for m in result.messages][-2:] == ["Feedback: Too short", "Revised draft"]
    assert result.get_next_agent() == HUMAN_AGENT


@pytest.mark.asyncio
async def test_feedback_unknown_checkpoint(approval_executor: GraphExecutor) -> None:
    with pytest.raises(CheckpointNotFoundError):
        await approval_executor.submit_human_feedback("t1", "ckpt-missing", True)


@pytest.mark.asyncio
async def test_resume_from_checkpoint_continues_route(
    pipeline_executor: GraphExecutor,
    checkpoint_manager: CheckpointManager,
    user_state: AgentState,
) -> None:
    await pipeline_executor.invoke(user_state, "researcher", thread_id="t1", checkpoint=True)
    first = checkpoint_manager.get_checkpoints("t1")[0]

    result = await pipeline_executor.resume_from_checkpoint("t1", first.id)

    assert [m.content for m in result.messages][1:] == [
        "Research notes on tide pools",
        "Draft article",
        "Looks good, approved",
    ]
    assert checkpoint_manager.get_checkpoint_count("t1") == 5


@pytest.mark.asyncio
async def test_resume_with_forced_agent(
    pipeline_executor: GraphExecutor,
    checkpoint_manager: CheckpointManager,
    user_state: AgentState,
) -> None:
    checkpoint_id = pipeline_executor.create_thread("t1", user_state)

    result = await pipeline_executor.resume_from_checkpoint("t1", checkpoint_id, "critic")

    assert [m.content for m in result.messages][-1] == "Looks good, approved"
    assert len(result.messages) == 2


@pytest.mark.asyncio
async def test_resume_without_next_agent(
    pipeline_executor: GraphExecutor, user_state: AgentState
) -> None:
    checkpoint_id = pipeline_executor.create_thread("t1", user_state)

    with pytest.raises(NoResumableAgentError):
        await pipeline_executor.resume_from_checkpoint("t1", checkpoint_id)


@pytest.mark.asyncio
async def test_resume_unknown_checkpoint(pipeline_executor: GraphExecutor) -> None:
    with pytest.raises(CheckpointNotFoundError):
        await pipeline_executor.resume_from_checkpoint("t1", "ckpt-missing")
