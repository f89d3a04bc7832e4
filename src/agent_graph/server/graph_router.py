"""Graph execution REST API.

Thin glue over ``GraphExecutor``: requests become executor calls, executor
errors become HTTP errors. All routes are mounted under `/api`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import StreamingResponse

from agent_graph.graph.errors import (
    AgentNotFoundError,
    AgentTimeoutError,
    CheckpointNotFoundError,
    GraphError,
    NoResumableAgentError,
)
from agent_graph.graph.events import StreamEvent
from agent_graph.graph.executor import GraphExecutor
from agent_graph.server.models import (
    CheckpointActionRequest,
    CheckpointActionResponse,
    CheckpointInfo,
    CheckpointList,
    DeleteThreadRequest,
    DeleteThreadResponse,
    GraphRequest,
    GraphResponse,
    ThreadCreateRequest,
    ThreadInfo,
    ThreadList,
)
from agent_graph.server.workflows import (
    ProviderNotConfiguredError,
    UnknownWorkflowError,
    WorkflowRegistry,
)
from agent_graph.state.agent_state import AgentState, now_ms
from agent_graph.state.checkpoints import CheckpointManager

logger = logging.getLogger(__name__)

router = APIRouter()


def _registry(request: Request) -> WorkflowRegistry:
    registry = getattr(request.app.state, "registry", None)
    if not isinstance(registry, WorkflowRegistry):
        raise HTTPException(status_code=500, detail="Workflow registry not configured")
    return registry


def _executor(
    registry: WorkflowRegistry, workflow: str | None, start_agent: str, language: str | None
) -> GraphExecutor:
    try:
        return registry.executor(workflow, start_agent, language)
    except UnknownWorkflowError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ProviderNotConfiguredError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


def _http_error(error: GraphError) -> HTTPException:
    if isinstance(error, (CheckpointNotFoundError, AgentNotFoundError)):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, NoResumableAgentError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, AgentTimeoutError):
        return HTTPException(status_code=504, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


def _initial_state(body: GraphRequest) -> AgentState:
    state = AgentState()
    for message in body.messages:
        state.add_message({"role": message.role, "content": message.content})
    return state


def _thread_info(manager: CheckpointManager, thread_id: str) -> ThreadInfo | None:
    checkpoints = manager.get_checkpoints(thread_id)
    if not checkpoints:
        return None
    latest = AgentState.deserialize(checkpoints[-1].state)
    return ThreadInfo(
        id=thread_id,
        created_at=checkpoints[0].timestamp,
        updated_at=checkpoints[-1].timestamp,
        message_count=len(latest.messages),
    )


@router.post("/graph", response_model=GraphResponse)
async def run_graph(body: GraphRequest, request: Request) -> GraphResponse:
    registry = _registry(request)
    executor = _executor(registry, body.workflow, body.start_agent, body.language)

    try:
        result = await executor.invoke(
            _initial_state(body),
            body.start_agent,
            thread_id=body.thread_id,
            checkpoint=body.options.checkpoint,
            wait_for_human=body.options.wait_for_human,
            timeout=body.options.timeout_seconds(),
        )
    except GraphError as e:
        raise _http_error(e) from e

    checkpoint_id = None
    if body.options.checkpoint:
        checkpoint_id = registry.checkpoint_manager.latest_checkpoint_id(body.thread_id)

    return GraphResponse(
        messages=result.messages,
        next_agent=result.get_next_agent(),
        thread_id=body.thread_id,
        checkpoint_id=checkpoint_id,
        paused_for_human=result.is_waiting_for_approval(),
    )


async def _sse(events: AsyncIterator[StreamEvent]) -> AsyncIterator[str]:
    try:
        async for event in events:
            yield f"data: {json.dumps(event.to_json(), ensure_ascii=False)}\n\n"
    except Exception:
        # The executor has already emitted the error event for this failure.
        logger.exception("Graph stream failed")
    yield "data: [DONE]\n\n"


@router.post("/graph/stream")
async def stream_graph(body: GraphRequest, request: Request) -> StreamingResponse:
    registry = _registry(request)
    executor = _executor(registry, body.workflow, body.start_agent, body.language)

    events = executor.stream(
        _initial_state(body),
        body.start_agent,
        thread_id=body.thread_id,
        checkpoint=body.options.checkpoint,
        wait_for_human=body.options.wait_for_human,
        timeout=body.options.timeout_seconds(),
    )
    return StreamingResponse(
        _sse(events),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


@router.get("/graph/threads", response_model=ThreadList)
def list_threads(request: Request) -> ThreadList:
    manager = _registry(request).checkpoint_manager
    threads = [
        info
        for info in (_thread_info(manager, thread_id) for thread_id in manager.list_threads())
        if info is not None
    ]
    threads.sort(key=lambda t: t.updated_at, reverse=True)
    return ThreadList(threads=threads)


@router.post("/graph/threads", response_model=ThreadInfo)
def create_thread(body: ThreadCreateRequest, request: Request) -> ThreadInfo:
    manager = _registry(request).checkpoint_manager
    thread_id = body.thread_id or f"thread-{now_ms()}"

    info = _thread_info(manager, thread_id)
    if info is not None:
        return info

    manager.save_checkpoint(thread_id, AgentState())
    info = _thread_info(manager, thread_id)
    if info is None:
        raise HTTPException(
            status_code=409, detail=f"Thread {thread_id} was deleted while being created"
        )
    return info


@router.get("/graph/checkpoint", response_model=CheckpointList)
def list_checkpoints(
    request: Request, thread_id: str = Query(alias="threadId", min_length=1)
) -> CheckpointList:
    checkpoints = _registry(request).checkpoint_manager.get_checkpoints(thread_id)
    return CheckpointList(
        thread_id=thread_id,
        checkpoints=[CheckpointInfo(id=c.id, timestamp=c.timestamp) for c in checkpoints],
        count=len(checkpoints),
    )


@router.post("/graph/checkpoint", response_model=CheckpointActionResponse)
async def checkpoint_action(
    body: CheckpointActionRequest, request: Request
) -> CheckpointActionResponse:
    registry = _registry(request)
    executor = _executor(registry, body.workflow, body.force_agent or "", body.language)

    try:
        if body.action == "restore":
            result = await executor.resume_from_checkpoint(
                body.thread_id, body.checkpoint_id, body.force_agent
            )
        else:
            if body.feedback is None:
                raise HTTPException(status_code=400, detail="feedback is required")
            result = await executor.submit_human_feedback(
                body.thread_id,
                body.checkpoint_id,
                body.feedback.approved,
                body.feedback.message,
            )
    except GraphError as e:
        raise _http_error(e) from e

    return CheckpointActionResponse(
        messages=result.messages,
        next_agent=result.get_next_agent(),
        approval_count=result.approval_count,
        paused_for_human=result.is_waiting_for_approval(),
    )


@router.delete("/graph/checkpoint", response_model=DeleteThreadResponse)
def delete_thread(body: DeleteThreadRequest, request: Request) -> DeleteThreadResponse:
    deleted = _registry(request).checkpoint_manager.delete_thread(body.thread_id)
    return DeleteThreadResponse(success=deleted)
