"""Graph executor for multi-agent workflows.

The executor repeatedly invokes the agent named by ``AgentState.next_agent``
until the route ends (``None``), the iteration limit is reached, or the run
suspends at a human pause point. ``invoke`` runs to that point and returns
the final state; ``stream`` yields lifecycle and message events as it goes.

Both share one step loop. It is sequential: a single agent call is in flight
at a time (the parallel router is the only place agents run concurrently),
and a stream only advances when its consumer pulls the next event.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import aclosing
from dataclasses import dataclass

from agent_graph.core.config import ExecutorConfig
from agent_graph.graph.errors import (
    AgentNotFoundError,
    AgentTimeoutError,
    CheckpointNotFoundError,
    NoResumableAgentError,
)
from agent_graph.graph.events import StreamEvent
from agent_graph.graph.results import AgentFunction, AgentResult, resolve_result
from agent_graph.state.agent_state import HUMAN_AGENT, AgentState
from agent_graph.state.checkpoints import Checkpoint, CheckpointManager

logger = logging.getLogger(__name__)


@dataclass
class _Run:
    state: AgentState
    current_agent: str | None
    iterations: int = 0


class GraphExecutor:
    """Executes a fixed set of named agents over shared state.

    Agents are supplied at construction; the executor never discovers or
    registers agents on its own.
    """

    def __init__(
        self,
        agents: Mapping[str, AgentFunction],
        config: ExecutorConfig | None = None,
        checkpoint_manager: CheckpointManager | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            agents: Agent callables keyed by name.
            config: Executor limits. If None, loads from environment.
            checkpoint_manager: Checkpoint store shared with other executors,
                if any. A private in-memory store is created otherwise.
        """
        self.agents: dict[str, AgentFunction] = dict(agents)
        self.config = config or ExecutorConfig()
        self.checkpoint_manager = checkpoint_manager or CheckpointManager()

    async def invoke(
        self,
        input_state: AgentState,
        start_agent: str,
        *,
        thread_id: str | None = None,
        checkpoint: bool = False,
        wait_for_human: bool = False,
        timeout: float | None = None,
    ) -> AgentState:
        """Run until completion, the iteration limit, or a human pause.

        The caller's ``input_state`` is cloned and never mutated. Hitting the
        iteration limit is not an error; the returned state then still has a
        ``next_agent``.

        Args:
            input_state: Initial state.
            start_agent: Name of the first agent to run.
            thread_id: Thread to checkpoint into.
            checkpoint: Save a checkpoint after every agent step (requires
                ``thread_id``).
            wait_for_human: Suspend at human pause points instead of
                stepping over them.
            timeout: Per-agent timeout in seconds. None or 0 means
                ``config.default_timeout_seconds``.

        Returns:
            The final state.

        Raises:
            AgentNotFoundError: A routed-to agent is not registered.
            AgentTimeoutError: An agent exceeded the timeout.
            ValueError: ``timeout`` is negative.
        """
        run = _Run(state=input_state.clone(), current_agent=start_agent)
        steps = self._steps(
            run,
            thread_id=thread_id,
            checkpoint=checkpoint,
            wait_for_human=wait_for_human,
            timeout=self._resolve_timeout(timeout),
        )
        async with aclosing(steps):
            async for _event in steps:
                pass
        return run.state

    async def stream(
        self,
        input_state: AgentState,
        start_agent: str,
        *,
        thread_id: str | None = None,
        checkpoint: bool = False,
        wait_for_human: bool = False,
        timeout: float | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """Run like ``invoke`` and yield events along the way.

        Per agent step this yields ``agent_start``, one ``message`` per newly
        appended message, then ``agent_complete`` carrying the next agent. A
        failure yields an ``error`` event and is then re-raised. A normal exit
        ends with a ``complete`` event whose ``state`` is the final state.
        """
        run = _Run(state=input_state.clone(), current_agent=start_agent)
        steps = self._steps(
            run,
            thread_id=thread_id,
            checkpoint=checkpoint,
            wait_for_human=wait_for_human,
            timeout=self._resolve_timeout(timeout),
        )
        async with aclosing(steps):
            try:
                async for event in steps:
                    yield event
            except Exception as exc:
                yield StreamEvent(type="error", agent_name=run.current_agent, error=str(exc))
                raise

        yield StreamEvent(type="complete", state=run.state)

    async def _steps(
        self,
        run: _Run,
        *,
        thread_id: str | None,
        checkpoint: bool,
        wait_for_human: bool,
        timeout: float,
    ) -> AsyncIterator[StreamEvent]:
        while run.current_agent is not None and run.iterations < self.config.max_iterations:
            if (
                run.state.is_waiting_for_approval()
                and self.config.human_in_the_loop
                and wait_for_human
            ):
                logger.info(
                    "Execution suspended for approval",
                    extra={"thread_id": thread_id, "iterations": run.iterations},
                )
                return

            if run.current_agent == HUMAN_AGENT:
                if wait_for_human:
                    logger.info(
                        "Execution suspended at human pause point",
                        extra={"thread_id": thread_id, "iterations": run.iterations},
                    )
                    return
                # Step over the pause point without counting an iteration.
                next_agent = run.state.get_next_agent()
                if next_agent == HUMAN_AGENT:
                    return
                run.current_agent = next_agent
                continue

            agent_name = run.current_agent
            yield StreamEvent(type="agent_start", agent_name=agent_name)

            agent = self.agents.get(agent_name)
            if agent is None:
                raise AgentNotFoundError(agent_name)
            logger.debug("Agent started", extra={"agent": agent_name, "thread_id": thread_id})

            message_count = len(run.state.messages)
            result = await self._call_agent(agent_name, agent, run.state, timeout)
            run.state = resolve_result(result, run.state)

            for message in run.state.messages[message_count:]:
                yield StreamEvent(type="message", agent_name=agent_name, message=message)

            run.current_agent = run.state.get_next_agent()

            if checkpoint and thread_id:
                self.checkpoint_manager.save_checkpoint(thread_id, run.state)

            run.iterations += 1
            logger.debug(
                "Agent finished",
                extra={
                    "agent": agent_name,
                    "next_agent": run.current_agent,
                    "iterations": run.iterations,
                },
            )
            yield StreamEvent(type="agent_complete", agent_name=run.current_agent)

        if run.current_agent is not None and run.iterations >= self.config.max_iterations:
            logger.warning(
                "Iteration limit reached",
                extra={
                    "thread_id": thread_id,
                    "next_agent": run.current_agent,
                    "iterations": run.iterations,
                },
            )

    def _resolve_timeout(self, timeout: float | None) -> float:
        if timeout is not None and timeout < 0:
            raise ValueError(f"timeout must not be negative, got {timeout}")
        return timeout or self.config.default_timeout_seconds

    async def _call_agent(
        self,
        agent_name: str,
        agent: AgentFunction,
        state: AgentState,
        timeout: float,
    ) -> AgentResult:
        deadline = asyncio.timeout(timeout)
        try:
            async with deadline:
                return await agent(state)
        except TimeoutError:
            if deadline.expired():
                logger.error("Agent timed out", extra={"agent": agent_name, "timeout": timeout})
                raise AgentTimeoutError(agent_name, timeout) from None
            raise
        except Exception as exc:
            logger.error("Agent failed", extra={"agent": agent_name, "error": str(exc)})
            raise

    async def resume_from_checkpoint(
        self,
        thread_id: str,
        checkpoint_id: str,
        force_agent: str | None = None,
        *,
        timeout: float | None = None,
    ) -> AgentState:
        """Continue a thread from one of its checkpoints.

        Execution starts at ``force_agent`` if given, else at the
        checkpointed state's ``next_agent``; new checkpoints are appended to
        the same thread.

        Raises:
            CheckpointNotFoundError: No such checkpoint on the thread.
            NoResumableAgentError: Nothing to resume with.
        """
        state = self.checkpoint_manager.load_checkpoint(thread_id, checkpoint_id)
        if state is None:
            raise CheckpointNotFoundError(thread_id, checkpoint_id)

        next_agent = force_agent or state.get_next_agent()
        if not next_agent:
            raise NoResumableAgentError(thread_id, checkpoint_id)

        logger.info(
            "Resuming from checkpoint",
            extra={"thread_id": thread_id, "checkpoint_id": checkpoint_id, "agent": next_agent},
        )
        return await self.invoke(
            state, next_agent, thread_id=thread_id, checkpoint=True, timeout=timeout
        )

    async def submit_human_feedback(
        self,
        thread_id: str,
        checkpoint_id: str,
        approved: bool,
        message: str | None = None,
        *,
        timeout: float | None = None,
    ) -> AgentState:
        """Apply a human decision to a checkpointed state.

        The decision is saved as a new checkpoint; the original one is left
        as it was. If the updated state routes to a real agent, execution
        continues from there, otherwise the updated state is returned.

        Raises:
            CheckpointNotFoundError: No such checkpoint on the thread.
        """
        state = self.checkpoint_manager.load_checkpoint(thread_id, checkpoint_id)
        if state is None:
            raise CheckpointNotFoundError(thread_id, checkpoint_id)

        state.approve(approved, message)
        self.checkpoint_manager.save_checkpoint(thread_id, state)
        logger.info(
            "Human feedback applied",
            extra={
                "thread_id": thread_id,
                "checkpoint_id": checkpoint_id,
                "approved": approved,
                "approval_count": state.approval_count,
            },
        )

        next_agent = state.get_next_agent()
        if not next_agent or next_agent == HUMAN_AGENT:
            return state

        return await self.invoke(
            state,
            next_agent,
            thread_id=thread_id,
            checkpoint=True,
            wait_for_human=True,
            timeout=timeout,
        )

    def create_thread(self, thread_id: str, initial_state: AgentState) -> str:
        """Start a thread with ``initial_state`` as its first checkpoint."""
        return self.checkpoint_manager.save_checkpoint(thread_id, initial_state)

    def get_thread_history(self, thread_id: str) -> list[Checkpoint]:
        return self.checkpoint_manager.get_checkpoints(thread_id)

    def list_threads(self) -> list[str]:
        return self.checkpoint_manager.list_threads()

    def delete_thread(self, thread_id: str) -> bool:
        return self.checkpoint_manager.delete_thread(thread_id)
