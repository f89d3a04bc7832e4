"""CLI entrypoint for agent graphs.

Commands:
- ``run``: execute a pre-built workflow over a prompt and print the messages
- ``serve``: start the REST API with uvicorn
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

import uvicorn
from pydantic import ValidationError

from agent_graph import __version__
from agent_graph.agents.workflows import create_code_review_workflow, create_research_workflow
from agent_graph.core.config import AgentGraphConfig
from agent_graph.graph.errors import GraphError
from agent_graph.graph.executor import GraphExecutor
from agent_graph.llm.factory import LLMFactory
from agent_graph.state.agent_state import AgentState, Message

logger = logging.getLogger(__name__)

_START_AGENTS = {"research": "researcher", "code-review": "reviewer"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agent-graph",
        description="Run stateful multi-agent workflows",
    )
    parser.add_argument("--version", action="version", version=f"agent-graph {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Run a pre-built workflow over a prompt")
    run.add_argument("prompt", help="Initial user message")
    run.add_argument(
        "--workflow",
        choices=sorted(_START_AGENTS),
        default="research",
        help="Workflow to run (default: research)",
    )
    run.add_argument(
        "--language",
        default="python",
        help="Language for the code-review workflow (default: python)",
    )
    run.add_argument("--thread-id", default=None, help="Checkpoint every step into this thread")
    run.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-agent timeout in seconds (default: AGENT_GRAPH_EXECUTOR_DEFAULT_TIMEOUT_SECONDS)",
    )
    run.add_argument(
        "--stream",
        action="store_true",
        help="Print events as they happen instead of the final transcript",
    )

    serve = subparsers.add_parser("serve", help="Start the REST API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser


def _print_message(agent: str | None, message: Message) -> None:
    label = f"{message.role}:{agent}" if agent else message.role
    print(f"[{label}] {message.content}\n")


async def _run(args: argparse.Namespace, config: AgentGraphConfig) -> AgentState:
    provider = LLMFactory.create(config.llm)
    if args.workflow == "research":
        agents = create_research_workflow(provider)
    else:
        agents = create_code_review_workflow(provider, args.language)

    executor = GraphExecutor(agents, config.executor)
    state = AgentState().add_message(Message(role="user", content=args.prompt))
    start_agent = _START_AGENTS[args.workflow]
    options = {
        "thread_id": args.thread_id,
        "checkpoint": args.thread_id is not None,
        "timeout": args.timeout,
    }

    if not args.stream:
        result = await executor.invoke(state, start_agent, **options)
        for message in result.messages:
            _print_message(None, message)
        return result

    result = state
    async for event in executor.stream(state, start_agent, **options):
        if event.type == "agent_start":
            print(f"--> {event.agent_name}", file=sys.stderr)
        elif event.type == "message" and event.message is not None:
            _print_message(event.agent_name, event.message)
        elif event.type == "complete" and event.state is not None:
            result = event.state
    return result


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = AgentGraphConfig()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    config.setup_logging()

    if args.command == "serve":
        uvicorn.run("agent_graph.server.app:create_app", host=args.host, port=args.port, factory=True)
        return 0

    try:
        if args.command == "run":
            result = asyncio.run(_run(args, config))
            if result.get_next_agent() is not None:
                logger.warning(
                    "Run stopped before completion", extra={"next_agent": result.get_next_agent()}
                )
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except GraphError as e:
        logger.error(str(e))
        print(str(e), file=sys.stderr)
        return 3

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
