"""Workflow state and checkpoint persistence."""

from agent_graph.state.agent_state import (
    HUMAN_AGENT,
    STATE_VERSION,
    AgentState,
    Message,
    UnsupportedStateVersionError,
)
from agent_graph.state.checkpoints import (
    Checkpoint,
    CheckpointBackend,
    CheckpointManager,
    InMemoryCheckpointBackend,
)

__all__ = [
    "HUMAN_AGENT",
    "STATE_VERSION",
    "AgentState",
    "Checkpoint",
    "CheckpointBackend",
    "CheckpointManager",
    "InMemoryCheckpointBackend",
    "Message",
    "UnsupportedStateVersionError",
]
