"""Graph execution: the executor, routing strategies and their contracts."""

from agent_graph.graph.errors import (
    AgentNotFoundError,
    AgentTimeoutError,
    CheckpointNotFoundError,
    GraphError,
    NoResumableAgentError,
)
from agent_graph.graph.events import StreamEvent
from agent_graph.graph.executor import GraphExecutor
from agent_graph.graph.results import (
    UNCHANGED,
    AgentFunction,
    AgentResult,
    RoutingFunction,
    Updated,
)
from agent_graph.graph.routing import (
    PARALLEL_AGENT,
    CycleBreakingRouter,
    create_cyclic_graph,
    create_parallel_graph,
    create_routing_graph,
    make_parallel_agent,
    with_conditional_routing,
)

__all__ = [
    "PARALLEL_AGENT",
    "UNCHANGED",
    "AgentFunction",
    "AgentNotFoundError",
    "AgentResult",
    "AgentTimeoutError",
    "CheckpointNotFoundError",
    "CycleBreakingRouter",
    "GraphError",
    "GraphExecutor",
    "NoResumableAgentError",
    "RoutingFunction",
    "StreamEvent",
    "Updated",
    "create_cyclic_graph",
    "create_parallel_graph",
    "create_routing_graph",
    "make_parallel_agent",
    "with_conditional_routing",
]
