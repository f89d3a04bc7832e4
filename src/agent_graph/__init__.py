"""Agent Graph.

Stateful multi-agent workflows over a shared ``AgentState``:
- a graph executor with cycles, timeouts and human-in-the-loop pauses
- per-thread checkpoints for resumable, auditable runs
- routing strategies (conditional, cycle-breaking, parallel fan-out)
"""

__version__ = "0.1.0"

from agent_graph.graph.executor import GraphExecutor
from agent_graph.state.agent_state import HUMAN_AGENT, AgentState, Message
from agent_graph.state.checkpoints import CheckpointManager

__all__ = [
    "__version__",
    "HUMAN_AGENT",
    "AgentState",
    "CheckpointManager",
    "GraphExecutor",
    "Message",
]
