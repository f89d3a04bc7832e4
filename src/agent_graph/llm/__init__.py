"""LLM package initialization."""

from agent_graph.llm.factory import LLMFactory
from agent_graph.llm.provider import LLMProvider

__all__ = [
    "LLMFactory",
    "LLMProvider",
]
