"""Errors raised by the graph executor.

None of these are retried by the executor. An exception raised by an agent
itself is not wrapped: it propagates to the caller unchanged.
"""

from __future__ import annotations


class GraphError(Exception):
    pass


class AgentNotFoundError(GraphError, LookupError):
    def __init__(self, agent_name: str) -> None:
        super().__init__(f"Agent '{agent_name}' not found")
        self.agent_name = agent_name


class AgentTimeoutError(GraphError, TimeoutError):
    def __init__(self, agent_name: str, timeout: float) -> None:
        super().__init__(f"Agent '{agent_name}' timed out after {timeout:g}s")
        self.agent_name = agent_name
        self.timeout = timeout


class CheckpointNotFoundError(GraphError, LookupError):
    def __init__(self, thread_id: str, checkpoint_id: str) -> None:
        super().__init__(f"Checkpoint {checkpoint_id} not found for thread {thread_id}")
        self.thread_id = thread_id
        self.checkpoint_id = checkpoint_id


class NoResumableAgentError(GraphError, ValueError):
    def __init__(self, thread_id: str, checkpoint_id: str) -> None:
        super().__init__(
            f"Checkpoint {checkpoint_id} for thread {thread_id} has no next agent to resume"
        )
        self.thread_id = thread_id
        self.checkpoint_id = checkpoint_id
