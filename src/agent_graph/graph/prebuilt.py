"""Small ready-made graphs.

These show the two executor features that need no LLM: a self-looping agent
bounded by a metadata counter, and an agent that stops for human approval.
"""

from __future__ import annotations

from collections.abc import Mapping

from agent_graph.core.config import ExecutorConfig
from agent_graph.graph.executor import GraphExecutor
from agent_graph.graph.results import AgentFunction, AgentResult
from agent_graph.state.agent_state import AgentState, Message
from agent_graph.state.checkpoints import CheckpointManager

ITERATIONS_KEY = "iterations"


def create_agent_graph(
    agents: Mapping[str, AgentFunction],
    config: ExecutorConfig | None = None,
    checkpoint_manager: CheckpointManager | None = None,
) -> GraphExecutor:
    return GraphExecutor(agents, config, checkpoint_manager)


def looping_agent(name: str, max_iterations: int) -> AgentFunction:
    """An agent that routes back to itself ``max_iterations`` times, then stops."""

    async def loop(state: AgentState) -> AgentResult:
        iterations = state.get_metadata(ITERATIONS_KEY, 0)
        if iterations >= max_iterations:
            state.add_message(Message(role="assistant", content="Workflow complete"))
            state.set_next_agent(None)
        else:
            state.set_metadata(ITERATIONS_KEY, iterations + 1)
            state.add_message(Message(role="assistant", content=f"Iteration {iterations + 1}"))
            state.set_next_agent(name)
        return state

    return loop


async def approval_agent(state: AgentState) -> AgentResult:
    state.add_message(Message(role="assistant", content="Action completed, awaiting approval"))
    return state.request_approval()


def create_cyclic_workflow_graph(
    start_agent: str,
    max_iterations: int = 3,
    checkpoint_manager: CheckpointManager | None = None,
) -> GraphExecutor:
    """A single agent that loops ``max_iterations`` times.

    The executor limit leaves room for the closing "Workflow complete" step.
    """
    config = ExecutorConfig(max_iterations=max_iterations + 1)
    return GraphExecutor(
        {start_agent: looping_agent(start_agent, max_iterations)}, config, checkpoint_manager
    )


def create_human_in_the_loop_graph(
    start_agent: str,
    config: ExecutorConfig | None = None,
    checkpoint_manager: CheckpointManager | None = None,
) -> GraphExecutor:
    """A single agent that does its work and then asks for approval."""
    base = config or ExecutorConfig()
    config = base.model_copy(update={"human_in_the_loop": True})
    return GraphExecutor({start_agent: approval_agent}, config, checkpoint_manager)


async def invoke_with_feedback(
    executor: GraphExecutor,
    input_state: AgentState,
    start_agent: str,
    approved: bool,
    feedback: str | None = None,
) -> AgentState:
    """Run until the approval request and resolve it in the same call."""
    result = await executor.invoke(input_state, start_agent, wait_for_human=True)
    return result.approve(approved, feedback)
