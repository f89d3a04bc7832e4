"""Workflow state that flows between agents.

``AgentState`` is the unit handed from the executor to each agent and the
unit that gets checkpointed. It is a mutable pydantic model: agents append
messages and set routing in place, the executor clones it before a run so a
caller's handle is never touched.

Serialized form (JSON, camelCase keys)::

    {"version": 1, "messages": [{"role", "content", "timestamp"}],
     "nextAgent": str | null, "metadata": {...}, "pendingApproval": bool,
     "approvalCount": int, "maxApprovals": int}
"""

from __future__ import annotations

import json
import time
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

STATE_VERSION = 1

# Reserved `next_agent` value: suspend until a human decision is submitted.
HUMAN_AGENT = "__human__"

DEFAULT_MAX_APPROVALS = 3

Role = Literal["user", "assistant", "system"]


class UnsupportedStateVersionError(ValueError):
    pass


def now_ms() -> int:
    return time.time_ns() // 1_000_000


class Message(BaseModel):
    role: Role
    content: str
    timestamp: int = Field(default_factory=now_ms)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _default_timestamp(cls, value: object) -> object:
        return value or now_ms()


class AgentState(BaseModel):
    """State passed between agents.

    Invariants:
      - ``messages`` only grows; nothing in the core truncates it.
      - ``next_agent`` is authoritative for routing.
      - ``pending_approval`` implies ``next_agent == HUMAN_AGENT``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    version: int = STATE_VERSION
    messages: list[Message] = Field(default_factory=list)
    next_agent: str | None = Field(default=None, alias="nextAgent")
    metadata: dict[str, Any] = Field(default_factory=dict)

    pending_approval: bool = Field(default=False, alias="pendingApproval")
    approval_count: int = Field(default=0, alias="approvalCount")
    max_approvals: int = Field(default=DEFAULT_MAX_APPROVALS, alias="maxApprovals")

    def add_message(self, message: Message | Mapping[str, Any]) -> AgentState:
        """Append a message, stamping it with the current time if it has none."""
        if isinstance(message, Message):
            appended = message.model_copy()
            if not appended.timestamp:
                appended.timestamp = now_ms()
        else:
            appended = Message.model_validate(dict(message))
        self.messages.append(appended)
        return self

    def get_messages(self) -> tuple[Message, ...]:
        return tuple(self.messages)

    def set_next_agent(self, agent: str | None) -> AgentState:
        self.next_agent = agent
        return self

    def get_next_agent(self) -> str | None:
        return self.next_agent

    def set_metadata(self, key: str, value: Any) -> AgentState:
        self.metadata[key] = value
        return self

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    def request_approval(self) -> AgentState:
        self.pending_approval = True
        self.next_agent = HUMAN_AGENT
        return self

    def is_waiting_for_approval(self) -> bool:
        return self.pending_approval

    def approve(self, approved: bool, feedback: str | None = None) -> AgentState:
        """Resolve a pending approval.

        Approval ends the current route (``next_agent = None``). A rejection
        leaves ``next_agent`` for the workflow to set, unless the approval
        budget is spent, in which case the run proceeds as if approved.
        """
        self.pending_approval = False
        self.approval_count += 1

        if feedback:
            self.add_message(Message(role="user", content=f"Feedback: {feedback}"))

        if approved or self.approval_count >= self.max_approvals:
            self.next_agent = None

        return self

    def serialize(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def deserialize(cls, blob: str | bytes) -> AgentState:
        """Parse a serialized state.

        Missing or null fields fall back to their defaults and unknown keys
        are ignored. A version newer than ``STATE_VERSION`` is rejected.
        """
        payload = json.loads(blob)
        if not isinstance(payload, dict):
            raise ValueError("serialized state must be an object")

        version = payload.get("version") or STATE_VERSION
        if not isinstance(version, int):
            raise ValueError("serialized state version must be int")
        if version > STATE_VERSION:
            raise UnsupportedStateVersionError(
                f"State version {version} is newer than supported version {STATE_VERSION}"
            )

        fields = {key: value for key, value in payload.items() if value is not None}
        fields["version"] = STATE_VERSION
        return cls.model_validate(fields)

    def clone(self) -> AgentState:
        """Independent copy; messages and metadata share nothing with the original."""
        return self.model_copy(deep=True)
