"""The agent contract.

An agent is an async callable taking the current ``AgentState``. It reports
back with one of:

- ``Updated(state)``: continue with ``state``.
- ``UNCHANGED``: keep the state the executor already holds and follow its
  ``next_agent``.

A bare ``AgentState`` is accepted as ``Updated`` and ``None`` as
``UNCHANGED``, so plain ``return state`` agents keep working.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

from agent_graph.state.agent_state import AgentState


class Unchanged(Enum):
    UNCHANGED = "unchanged"


UNCHANGED = Unchanged.UNCHANGED


@dataclass(frozen=True, slots=True)
class Updated:
    state: AgentState


AgentResult: TypeAlias = Updated | Unchanged | AgentState | None
AgentFunction: TypeAlias = Callable[[AgentState], Awaitable[AgentResult]]
RoutingFunction: TypeAlias = Callable[[AgentState], str | None]


def resolve_result(result: AgentResult, current: AgentState) -> AgentState:
    """Return the state the executor should continue with."""
    if isinstance(result, Updated):
        return result.state
    if isinstance(result, AgentState):
        return result
    if result is None or result is UNCHANGED:
        return current
    raise TypeError(f"Agent returned unsupported result type: {type(result).__name__}")
