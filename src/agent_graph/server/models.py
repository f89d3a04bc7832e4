"""Pydantic models for the REST server.

Request and response bodies use camelCase keys on the wire.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from agent_graph.state.agent_state import Message, Role


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class MessageIn(ApiModel):
    role: Role
    content: str


class RunOptions(ApiModel):
    checkpoint: bool = True
    wait_for_human: bool = Field(default=False, alias="waitForHuman")
    timeout: int | None = Field(default=None, gt=0, description="Per-agent timeout in ms")

    def timeout_seconds(self) -> float | None:
        return self.timeout / 1000 if self.timeout is not None else None


class GraphRequest(ApiModel):
    thread_id: str = Field(alias="threadId", min_length=1)
    start_agent: str = Field(alias="startAgent", min_length=1)
    messages: list[MessageIn] = Field(default_factory=list)
    workflow: str | None = None
    language: str | None = None
    options: RunOptions = Field(default_factory=RunOptions)


class GraphResponse(ApiModel):
    messages: list[Message]
    next_agent: str | None = Field(alias="nextAgent")
    thread_id: str = Field(alias="threadId")
    checkpoint_id: str | None = Field(default=None, alias="checkpointId")
    paused_for_human: bool = Field(default=False, alias="pausedForHuman")


class ThreadCreateRequest(ApiModel):
    thread_id: str | None = Field(default=None, alias="threadId")


class ThreadInfo(ApiModel):
    id: str
    created_at: int = Field(alias="createdAt")
    updated_at: int = Field(alias="updatedAt")
    message_count: int = Field(alias="messageCount")


class ThreadList(ApiModel):
    threads: list[ThreadInfo]


class CheckpointInfo(ApiModel):
    id: str
    timestamp: int


class CheckpointList(ApiModel):
    thread_id: str = Field(alias="threadId")
    checkpoints: list[CheckpointInfo]
    count: int


class FeedbackIn(ApiModel):
    approved: bool
    message: str | None = None


class CheckpointActionRequest(ApiModel):
    thread_id: str = Field(alias="threadId", min_length=1)
    checkpoint_id: str = Field(alias="checkpointId", min_length=1)
    action: Literal["restore", "feedback"]
    force_agent: str | None = Field(default=None, alias="forceAgent")
    feedback: FeedbackIn | None = None
    workflow: str | None = "research"
    language: str | None = None


class CheckpointActionResponse(ApiModel):
    messages: list[Message]
    next_agent: str | None = Field(alias="nextAgent")
    approval_count: int = Field(alias="approvalCount")
    paused_for_human: bool = Field(alias="pausedForHuman")


class DeleteThreadRequest(ApiModel):
    thread_id: str = Field(alias="threadId", min_length=1)


class DeleteThreadResponse(ApiModel):
    success: bool
