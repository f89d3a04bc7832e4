"""Pre-built LLM agents and workflows."""

from agent_graph.agents.llm_agent import AgentConfig, create_llm_agent
from agent_graph.agents.roles import (
    code_reviewer_agent,
    critic_agent,
    custom_agent,
    documentation_agent,
    generate_tests_agent,
    researcher_agent,
    summarizer_agent,
    writer_agent,
)
from agent_graph.agents.workflows import (
    create_code_review_workflow,
    create_research_workflow,
    research_routing_fn,
)

__all__ = [
    "AgentConfig",
    "code_reviewer_agent",
    "create_code_review_workflow",
    "create_llm_agent",
    "create_research_workflow",
    "critic_agent",
    "custom_agent",
    "documentation_agent",
    "generate_tests_agent",
    "research_routing_fn",
    "researcher_agent",
    "summarizer_agent",
    "writer_agent",
]
