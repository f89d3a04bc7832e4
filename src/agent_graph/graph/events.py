from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from agent_graph.state.agent_state import AgentState, Message, now_ms

StreamEventType = Literal["agent_start", "agent_complete", "message", "error", "complete"]


@dataclass(frozen=True, slots=True)
class StreamEvent:
    """A lifecycle or message event emitted by ``GraphExecutor.stream``.

    ``state`` is only set on the final ``complete`` event and is not part of
    the wire format.
    """

    type: StreamEventType
    agent_name: str | None = None
    message: Message | None = None
    error: str | None = None
    timestamp: int = field(default_factory=now_ms)
    state: AgentState | None = field(default=None, compare=False, repr=False)

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {"type": self.type}
        if self.agent_name is not None:
            out["agentName"] = self.agent_name
        if self.message is not None:
            out["message"] = self.message.model_dump(mode="json")
        if self.error is not None:
            out["error"] = self.error
        out["timestamp"] = self.timestamp
        return out
