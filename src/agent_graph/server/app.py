"""FastAPI app factory.

Endpoints are intentionally thin wrappers over the graph executor.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agent_graph import __version__
from agent_graph.server.config import ServerSettings
from agent_graph.server.graph_router import router as graph_router
from agent_graph.server.workflows import WorkflowRegistry

logger = logging.getLogger(__name__)


def create_app(registry: WorkflowRegistry | None = None) -> FastAPI:
    """Build the API app.

    Args:
        registry: Workflow registry to serve. Built from ``ServerSettings``
            when None.
    """
    settings = registry.settings if registry is not None else ServerSettings()
    registry = registry or WorkflowRegistry(settings)

    app = FastAPI(
        title="Agent Graph",
        version=__version__,
        description="REST API over the agent graph executor.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.settings = settings
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(graph_router, prefix="/api")

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    logger.info("API app created")
    return app
