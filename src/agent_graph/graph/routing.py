"""Routing strategies layered over a set of agents.

Each strategy wraps agent callables and returns a new mapping for a
``GraphExecutor``; the executor itself stays unaware of how routing is
decided.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from agent_graph.core.config import ExecutorConfig
from agent_graph.graph.errors import AgentNotFoundError
from agent_graph.graph.executor import GraphExecutor
from agent_graph.graph.results import (
    AgentFunction,
    AgentResult,
    RoutingFunction,
    Updated,
    resolve_result,
)
from agent_graph.state.agent_state import AgentState, Message
from agent_graph.state.checkpoints import CheckpointManager

logger = logging.getLogger(__name__)

EXECUTION_PATH_KEY = "executionPath"
PARALLEL_AGENT = "__parallel__"
PARALLEL_TARGETS_KEY = "parallelTargets"
PARALLEL_NEXT_KEY = "parallelNext"


def with_conditional_routing(
    agents: Mapping[str, AgentFunction], routing_fn: RoutingFunction
) -> dict[str, AgentFunction]:
    """Wrap agents so ``routing_fn`` decides every transition.

    Whatever ``next_agent`` an agent sets is overwritten by
    ``routing_fn(state)`` once the agent returns.
    """

    def _wrap(agent: AgentFunction) -> AgentFunction:
        async def routed(state: AgentState) -> AgentResult:
            updated = resolve_result(await agent(state), state)
            updated.set_next_agent(routing_fn(updated))
            return Updated(updated)

        return routed

    return {name: _wrap(agent) for name, agent in agents.items()}


class CycleBreakingRouter:
    """Stops runs that repeat a path through the graph.

    The visited sequence of agent names is kept in the state's
    ``executionPath`` metadata. Before an agent runs, the router builds a
    path signature from it: the whole sequence joined with ``->``, or, when
    the agent already occurs in the sequence, the closed loop from its
    previous occurrence. A signature seen before ends the run with a system
    message instead of calling the agent.

    Signatures live on the router instance, not on the state, so reusing one
    router for unrelated runs carries them over. Build one router per run
    when runs must not affect each other.
    """

    def __init__(self, agents: Mapping[str, AgentFunction]) -> None:
        self._agents = dict(agents)
        self._visited: set[str] = set()

    @property
    def visited(self) -> frozenset[str]:
        return frozenset(self._visited)

    def reset(self) -> None:
        self._visited.clear()

    def wrap(self) -> dict[str, AgentFunction]:
        return {name: self._guard(name, agent) for name, agent in self._agents.items()}

    def _guard(self, name: str, agent: AgentFunction) -> AgentFunction:
        async def guarded(state: AgentState) -> AgentResult:
            path = list(state.get_metadata(EXECUTION_PATH_KEY) or [])
            signature = path_signature(path, name)

            if signature in self._visited:
                logger.warning("Cycle detected", extra={"agent": name, "path": signature})
                state.add_message(
                    Message(role="system", content=f"Cycle detected at {name}. Breaking cycle.")
                )
                state.set_next_agent(None)
                return Updated(state)

            self._visited.add(signature)
            state.set_metadata(EXECUTION_PATH_KEY, [*path, name])
            return await agent(state)

        return guarded


def path_signature(path: list[str], name: str) -> str:
    """Signature of visiting ``name`` after ``path``."""
    visited = [*path, name]
    if name in path:
        start = len(path) - 1 - path[::-1].index(name)
        visited = visited[start:]
    return "->".join(visited)


def make_parallel_agent(agents: Mapping[str, AgentFunction]) -> AgentFunction:
    """Build the fan-out/fan-in agent.

    Targets are read from ``parallelTargets`` metadata and run concurrently,
    each on its own clone of the state. The first failing branch cancels the
    others and its exception is raised as is. Branch messages are merged back by
    content: a message is appended only if no message with the same content
    is already in the merged list, so two different messages that happen to
    share content collapse into one. The target list is cleared and the
    merged state routes to ``parallelNext`` (or ends).
    """

    async def parallel(state: AgentState) -> AgentResult:
        targets = list(state.get_metadata(PARALLEL_TARGETS_KEY) or [])
        for name in targets:
            if name not in agents:
                raise AgentNotFoundError(name)

        logger.debug("Fanning out", extra={"targets": targets})
        branches = [state.clone() for _ in targets]
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(agents[name](branch))
                    for name, branch in zip(targets, branches, strict=True)
                ]
        except ExceptionGroup as failed:
            # Siblings are cancelled by now; surface the branch's own exception.
            logger.error(
                "Parallel branch failed",
                extra={"targets": targets, "errors": len(failed.exceptions)},
            )
            raise failed.exceptions[0] from None
        results = [task.result() for task in tasks]

        merged = state.clone()
        seen = {message.content for message in merged.messages}
        for result, branch in zip(results, branches, strict=True):
            for message in resolve_result(result, branch).messages:
                if message.content not in seen:
                    merged.add_message(message)
                    seen.add(message.content)

        merged.set_metadata(PARALLEL_TARGETS_KEY, [])
        merged.set_next_agent(merged.get_metadata(PARALLEL_NEXT_KEY))
        return Updated(merged)

    return parallel


def create_routing_graph(
    agents: Mapping[str, AgentFunction],
    routing_fn: RoutingFunction,
    config: ExecutorConfig | None = None,
    checkpoint_manager: CheckpointManager | None = None,
) -> GraphExecutor:
    """Create an executor whose transitions are all decided by ``routing_fn``."""
    return GraphExecutor(with_conditional_routing(agents, routing_fn), config, checkpoint_manager)


def create_cyclic_graph(
    agents: Mapping[str, AgentFunction],
    config: ExecutorConfig | None = None,
    checkpoint_manager: CheckpointManager | None = None,
) -> GraphExecutor:
    """Create an executor guarded by a fresh ``CycleBreakingRouter``."""
    return GraphExecutor(CycleBreakingRouter(agents).wrap(), config, checkpoint_manager)


def create_parallel_graph(
    agents: Mapping[str, AgentFunction],
    config: ExecutorConfig | None = None,
    checkpoint_manager: CheckpointManager | None = None,
) -> GraphExecutor:
    """Create an executor with ``agents`` plus the ``__parallel__`` fan-out agent."""
    return GraphExecutor(
        {**agents, PARALLEL_AGENT: make_parallel_agent(agents)}, config, checkpoint_manager
    )
