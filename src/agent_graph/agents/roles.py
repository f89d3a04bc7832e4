"""Pre-built role agents.

Each builder pairs a role prompt with ``create_llm_agent``. The prompts
describe the hand-off the workflow expects, but routing itself is set by the
workflow wrappers in ``agent_graph.agents.workflows``.
"""

from __future__ import annotations

from typing import Literal

from agent_graph.agents.llm_agent import AgentConfig, create_llm_agent
from agent_graph.graph.results import AgentFunction
from agent_graph.llm.provider import LLMProvider

DocFormat = Literal["markdown", "html", "javadoc"]

RESEARCHER = AgentConfig(
    name="researcher",
    system_prompt=(
        "You are a research agent. Identify the key topics in the user's request, "
        "gather the relevant facts for each, note sources where you can, and present "
        "the findings in a clear structure for a writer to build on."
    ),
    temperature=0.5,
)

WRITER = AgentConfig(
    name="writer",
    system_prompt=(
        "You are a content writer. Turn the research in this conversation into "
        "well-structured, readable content for the intended audience. If a critic "
        "has asked for changes, revise the latest draft accordingly."
    ),
    temperature=0.7,
)

CRITIC = AgentConfig(
    name="critic",
    system_prompt=(
        "You are a critic. Review the latest draft for accuracy, clarity and quality "
        "and give specific, actionable feedback. End with a verdict: say 'approved' "
        "if it is ready to publish, or 'revise' if it needs another pass."
    ),
    temperature=0.3,
)

SUMMARIZER = AgentConfig(
    name="summarizer",
    system_prompt=(
        "You are a summarizer. Read the whole conversation and produce a concise "
        "summary of the key points, decisions and open action items."
    ),
    temperature=0.4,
)

_DOC_FORMAT_INSTRUCTIONS: dict[str, str] = {
    "markdown": "Use Markdown with headers, code blocks and bullet points.",
    "html": "Use semantic HTML5 with a clear structure.",
    "javadoc": "Use Javadoc comments with @param, @return and @throws tags.",
}


def researcher_agent(provider: LLMProvider) -> AgentFunction:
    return create_llm_agent(RESEARCHER, provider)


def writer_agent(provider: LLMProvider) -> AgentFunction:
    return create_llm_agent(WRITER, provider)


def critic_agent(provider: LLMProvider) -> AgentFunction:
    return create_llm_agent(CRITIC, provider)


def summarizer_agent(provider: LLMProvider) -> AgentFunction:
    return create_llm_agent(SUMMARIZER, provider)


def code_reviewer_agent(provider: LLMProvider, language: str) -> AgentFunction:
    config = AgentConfig(
        name="code-reviewer",
        system_prompt=(
            f"You are a code reviewer specializing in {language}. Look for bugs, "
            "security issues and performance problems, check the code against common "
            "conventions, suggest concrete improvements, and finish with an overall "
            "score from 1 to 10."
        ),
        temperature=0.3,
    )
    return create_llm_agent(config, provider)


def generate_tests_agent(provider: LLMProvider, language: str) -> AgentFunction:
    config = AgentConfig(
        name="test-generator",
        system_prompt=(
            f"You generate unit tests for {language} code. Cover normal behaviour, "
            f"edge cases and error paths using the usual {language} test framework. "
            "Reply with test code only."
        ),
        temperature=0.4,
    )
    return create_llm_agent(config, provider)


def documentation_agent(provider: LLMProvider, doc_format: DocFormat = "markdown") -> AgentFunction:
    config = AgentConfig(
        name="documentation",
        system_prompt=(
            "You write documentation for the code or design in this conversation, "
            "including usage examples. " + _DOC_FORMAT_INSTRUCTIONS[doc_format]
        ),
        temperature=0.5,
    )
    return create_llm_agent(config, provider)


def custom_agent(
    provider: LLMProvider,
    name: str,
    role: str,
    task: str,
    next_agent: str | None = None,
    temperature: float = 0.7,
) -> AgentFunction:
    """An agent for an ad-hoc role.

    ``next_agent`` only shapes the prompt; pair it with a routing wrapper to
    actually route there.
    """
    hand_off = (
        f"When you are done, hand over to '{next_agent}'."
        if next_agent
        else "When you are done, the workflow is complete."
    )
    config = AgentConfig(
        name=name,
        system_prompt=f"You are a {role}. Your task: {task}\n\n{hand_off}",
        temperature=temperature,
    )
    return create_llm_agent(config, provider)
