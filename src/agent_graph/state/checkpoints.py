"""Checkpoint persistence for agent state.

Checkpoints form an append-only log per thread. The executor talks to a
``CheckpointManager``; the manager serializes state and hands opaque blobs to
a ``CheckpointBackend``. The in-memory backend is the reference store; a
durable store only has to implement the same protocol.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from agent_graph.state.agent_state import AgentState, now_ms

logger = logging.getLogger(__name__)


class Checkpoint(BaseModel):
    """An immutable snapshot of serialized state."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    thread_id: str = Field(alias="threadId")
    timestamp: int
    state: str


class CheckpointBackend(Protocol):
    """Storage boundary for checkpoint blobs.

    Appends and reads on one thread must be linearizable: a completed
    ``save`` is visible to the next ``load``/``latest``/``list`` for that
    thread.
    """

    def save(self, thread_id: str, blob: str) -> Checkpoint: ...

    def load(self, thread_id: str, checkpoint_id: str) -> Checkpoint | None: ...

    def latest(self, thread_id: str) -> Checkpoint | None: ...

    def list(self, thread_id: str) -> list[Checkpoint]: ...

    def threads(self) -> list[str]: ...

    def delete_thread(self, thread_id: str) -> bool: ...

    def clear(self) -> None: ...


def _new_checkpoint_id(thread_id: str, timestamp: int) -> str:
    # The random suffix keeps ids distinct for saves within the same millisecond.
    return f"ckpt-{thread_id}-{timestamp}-{uuid.uuid4().hex[:12]}"


class InMemoryCheckpointBackend:
    """Unbounded in-process checkpoint log.

    Nothing survives the process. A checkpoint is fully built before it is
    appended, so a failed save leaves the thread untouched.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._threads: dict[str, list[Checkpoint]] = {}

    def save(self, thread_id: str, blob: str) -> Checkpoint:
        timestamp = now_ms()
        checkpoint = Checkpoint(
            id=_new_checkpoint_id(thread_id, timestamp),
            thread_id=thread_id,
            timestamp=timestamp,
            state=blob,
        )
        with self._lock:
            self._threads.setdefault(thread_id, []).append(checkpoint)
        return checkpoint

    def load(self, thread_id: str, checkpoint_id: str) -> Checkpoint | None:
        with self._lock:
            for checkpoint in self._threads.get(thread_id, ()):
                if checkpoint.id == checkpoint_id:
                    return checkpoint
            return None

    def latest(self, thread_id: str) -> Checkpoint | None:
        with self._lock:
            checkpoints = self._threads.get(thread_id)
            return checkpoints[-1] if checkpoints else None

    def list(self, thread_id: str) -> list[Checkpoint]:
        with self._lock:
            return list(self._threads.get(thread_id, ()))

    def threads(self) -> list[str]:
        with self._lock:
            return list(self._threads)

    def delete_thread(self, thread_id: str) -> bool:
        with self._lock:
            return self._threads.pop(thread_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._threads.clear()


class CheckpointManager:
    """Save and restore ``AgentState`` snapshots per thread."""

    def __init__(self, backend: CheckpointBackend | None = None) -> None:
        self.backend: CheckpointBackend = backend or InMemoryCheckpointBackend()

    def save_checkpoint(self, thread_id: str, state: AgentState) -> str:
        """Serialize ``state`` and append it to the thread.

        Returns:
            The new checkpoint id.
        """
        checkpoint = self.backend.save(thread_id, state.serialize())
        logger.debug(
            "Checkpoint saved",
            extra={"thread_id": thread_id, "checkpoint_id": checkpoint.id},
        )
        return checkpoint.id

    def load_checkpoint(self, thread_id: str, checkpoint_id: str) -> AgentState | None:
        checkpoint = self.backend.load(thread_id, checkpoint_id)
        if checkpoint is None:
            return None
        return AgentState.deserialize(checkpoint.state)

    def load_latest_checkpoint(self, thread_id: str) -> AgentState | None:
        checkpoint = self.backend.latest(thread_id)
        if checkpoint is None:
            return None
        return AgentState.deserialize(checkpoint.state)

    def latest_checkpoint_id(self, thread_id: str) -> str | None:
        checkpoint = self.backend.latest(thread_id)
        return checkpoint.id if checkpoint is not None else None

    def get_checkpoints(self, thread_id: str) -> list[Checkpoint]:
        return self.backend.list(thread_id)

    def get_checkpoint_count(self, thread_id: str) -> int:
        return len(self.backend.list(thread_id))

    def list_threads(self) -> list[str]:
        return self.backend.threads()

    def delete_thread(self, thread_id: str) -> bool:
        deleted = self.backend.delete_thread(thread_id)
        if deleted:
            logger.info("Thread deleted", extra={"thread_id": thread_id})
        return deleted

    def clear(self) -> None:
        """Drop every thread."""
        self.backend.clear()
        logger.info("Checkpoints cleared")
