"""LLM-backed agents.

An LLM agent sends its system prompt plus the full conversation to an
``LLMProvider`` and appends the reply as one assistant message. Provider
calls are blocking, so they run in a worker thread to keep the executor's
timeout effective.
"""

from __future__ import annotations

import asyncio
import logging

from pydantic import BaseModel, Field

from agent_graph.graph.results import AgentFunction, AgentResult
from agent_graph.llm.provider import LLMProvider
from agent_graph.state.agent_state import AgentState, Message

logger = logging.getLogger(__name__)


class AgentConfig(BaseModel):
    name: str
    system_prompt: str
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    model: str | None = None


def create_llm_agent(config: AgentConfig, provider: LLMProvider) -> AgentFunction:
    """Create an agent that answers with one completion from ``provider``.

    A provider failure does not abort the run: it is recorded in the state as
    a system message and the agent returns normally.
    """

    async def agent(state: AgentState) -> AgentResult:
        messages = [{"role": "system", "content": config.system_prompt}]
        messages.extend({"role": m.role, "content": m.content} for m in state.messages)

        try:
            content = await asyncio.to_thread(
                provider.chat,
                messages,
                model=config.model,
                temperature=config.temperature,
            )
        except Exception as exc:
            logger.warning("LLM call failed", extra={"agent": config.name, "error": str(exc)})
            state.add_message(Message(role="system", content=f"Error in {config.name}: {exc}"))
            return state

        state.add_message(Message(role="assistant", content=content))
        return state

    return agent
