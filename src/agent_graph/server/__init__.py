"""FastAPI server adapter for agent-graph.

Design intent:
- Keep execution logic in `agent_graph.graph`
- Keep server-specific concerns (routing, request models, SSE framing) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from agent_graph.server.app import create_app
