"""Multi-agent workflows built from the role agents."""

from __future__ import annotations

from agent_graph.agents.roles import (
    code_reviewer_agent,
    critic_agent,
    documentation_agent,
    generate_tests_agent,
    researcher_agent,
    writer_agent,
)
from agent_graph.graph.results import AgentFunction, AgentResult, resolve_result
from agent_graph.llm.provider import LLMProvider
from agent_graph.state.agent_state import AgentState

LAST_AGENT_KEY = "lastAgent"

_APPROVAL_WORDS = ("approved", "satisfactory", "ready")
_REVISION_WORDS = ("improve", "revise", "needs work")


def research_routing_fn(state: AgentState) -> str | None:
    """Route the research -> write -> critique loop.

    An approving last assistant message ends the run, a revision request
    sends it back to the writer, and otherwise the fixed order
    researcher -> writer -> critic is followed via ``lastAgent``.
    """
    if state.messages and state.messages[-1].role == "assistant":
        content = state.messages[-1].content.lower()
        if any(word in content for word in _APPROVAL_WORDS):
            return None
        if any(word in content for word in _REVISION_WORDS):
            return "writer"

    last_agent = state.get_metadata(LAST_AGENT_KEY)
    if last_agent == "researcher":
        return "writer"
    if last_agent == "writer":
        return "critic"
    return None


def _step(agent: AgentFunction, name: str, next_agent: str | None) -> AgentFunction:
    async def step(state: AgentState) -> AgentResult:
        result = resolve_result(await agent(state), state)
        result.set_next_agent(next_agent)
        result.set_metadata(LAST_AGENT_KEY, name)
        return result

    return step


def _routed_step(agent: AgentFunction, name: str) -> AgentFunction:
    async def step(state: AgentState) -> AgentResult:
        result = resolve_result(await agent(state), state)
        result.set_next_agent(research_routing_fn(result))
        result.set_metadata(LAST_AGENT_KEY, name)
        return result

    return step


def create_research_workflow(provider: LLMProvider) -> dict[str, AgentFunction]:
    """researcher -> writer -> critic, with the critic routed by ``research_routing_fn``."""
    return {
        "researcher": _step(researcher_agent(provider), "researcher", "writer"),
        "writer": _step(writer_agent(provider), "writer", "critic"),
        "critic": _routed_step(critic_agent(provider), "critic"),
    }


def create_code_review_workflow(provider: LLMProvider, language: str) -> dict[str, AgentFunction]:
    """reviewer -> test-generator -> documentation."""
    return {
        "reviewer": _step(code_reviewer_agent(provider, language), "reviewer", "test-generator"),
        "test-generator": _step(
            generate_tests_agent(provider, language), "test-generator", "documentation"
        ),
        "documentation": _step(documentation_agent(provider), "documentation", None),
    }
