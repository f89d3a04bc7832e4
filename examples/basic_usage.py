#!/usr/bin/env python3
"""Human-in-the-loop example (no LLM required).

This demonstrates using the graph components directly:

* run a small graph until it asks for approval
* inspect the checkpoint the pause left behind
* submit a decision and let the run continue

Pass `--reject` to send the draft back for another revision.
"""

from __future__ import annotations

import argparse
import asyncio
from typing import Sequence

from agent_graph.core.config import AgentGraphConfig
from agent_graph.graph.executor import GraphExecutor
from agent_graph.graph.results import AgentResult
from agent_graph.state.agent_state import AgentState, Message


async def drafter(state: AgentState) -> AgentResult:
    revision = state.get_metadata("revision", 0) + 1
    state.set_metadata("revision", revision)
    state.add_message(Message(role="assistant", content=f"Draft v{revision}"))
    state.request_approval()
    # Where a rejection goes.
    return state.set_next_agent("drafter")


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pause a graph for approval (example).")
    parser.add_argument("--thread-id", default="example", help="Thread to checkpoint into")
    parser.add_argument("--reject", action="store_true", help="Reject the first draft")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace, config: AgentGraphConfig) -> None:
    executor_config = config.executor.model_copy(update={"human_in_the_loop": True})
    executor = GraphExecutor({"drafter": drafter}, executor_config)

    state = AgentState().add_message(Message(role="user", content="Announce the release"))
    paused = await executor.invoke(
        state, "drafter", thread_id=args.thread_id, checkpoint=True, wait_for_human=True
    )
    print(f"Paused for approval: {paused.is_waiting_for_approval()}")

    checkpoint_id = executor.checkpoint_manager.latest_checkpoint_id(args.thread_id)
    print(f"Checkpoint: {checkpoint_id}")

    result = await executor.submit_human_feedback(
        args.thread_id,
        checkpoint_id,
        approved=not args.reject,
        message="Make it shorter" if args.reject else None,
    )

    for message in result.messages:
        print(f"[{message.role}] {message.content}")
    print(f"Checkpoints on thread: {executor.checkpoint_manager.get_checkpoint_count(args.thread_id)}")


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    config = AgentGraphConfig()
    config.setup_logging()

    asyncio.run(_run(args, config))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
