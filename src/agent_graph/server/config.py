"""Configuration for the REST server.

The server starts without an OpenAI key. Only requests for LLM-backed
workflows need one, and they fail at request time when it is missing.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from agent_graph.core.config import ExecutorConfig, LLMConfig


class ServerSettings(BaseSettings):
    """Settings for the graph REST API."""

    openai_api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    openai_model: str = Field(
        default="gpt-4o-mini",
        validation_alias="AGENT_GRAPH_OPENAI_MODEL",
        description="Model used by the pre-built workflows.",
    )

    max_iterations: int = Field(
        default=10,
        gt=0,
        validation_alias="AGENT_GRAPH_MAX_ITERATIONS",
        description="Iteration limit for every workflow run through the API.",
    )
    human_in_the_loop: bool = Field(
        default=False,
        validation_alias="AGENT_GRAPH_HUMAN_IN_THE_LOOP",
        description="Suspend runs at states waiting for approval when the request asks to.",
    )

    # Dev-friendly CORS. Override via AGENT_GRAPH_CORS_ORIGINS=...
    cors_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        validation_alias="AGENT_GRAPH_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def llm_config(self) -> LLMConfig:
        return LLMConfig(openai_api_key=self.openai_api_key or None, openai_model=self.openai_model)

    def executor_config(self) -> ExecutorConfig:
        return ExecutorConfig(
            max_iterations=self.max_iterations, human_in_the_loop=self.human_in_the_loop
        )
