"""Core package initialization."""

from agent_graph.core.config import AgentGraphConfig, ExecutorConfig, LLMConfig
from agent_graph.core.logging import configure_logging

__all__ = [
    "AgentGraphConfig",
    "ExecutorConfig",
    "LLMConfig",
    "configure_logging",
]
