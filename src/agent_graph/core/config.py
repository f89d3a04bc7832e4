"""Core configuration for agent graphs."""

import logging
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from agent_graph.core.logging import configure_logging


class LLMConfig(BaseSettings):
    """Configuration for LLM providers."""

    provider: Literal["openai"] = Field(
        default="openai",
        description="LLM provider to use",
    )

    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="OpenAI model to use",
    )
    openai_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Temperature for OpenAI model",
    )
    openai_base_url: str | None = Field(
        default=None,
        description="Alternative OpenAI-compatible endpoint",
    )
    openai_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="HTTP timeout for a single completion request",
    )

    model_config = SettingsConfigDict(
        env_prefix="AGENT_GRAPH_LLM_",
        env_file=".env",
        extra="ignore",
    )


class ExecutorConfig(BaseSettings):
    """Configuration for the graph executor loop."""

    max_iterations: int = Field(
        default=10,
        gt=0,
        description="Maximum number of agent invocations per run",
    )
    human_in_the_loop: bool = Field(
        default=False,
        description="Stop at states that are waiting for approval",
    )
    default_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-agent timeout used when a call does not pass one",
    )

    model_config = SettingsConfigDict(
        env_prefix="AGENT_GRAPH_EXECUTOR_",
        env_file=".env",
        extra="ignore",
    )


class AgentGraphConfig(BaseSettings):
    """Main configuration for agent graph applications."""

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="LLM configuration",
    )
    executor: ExecutorConfig = Field(
        default_factory=ExecutorConfig,
        description="Executor configuration",
    )

    model_config = SettingsConfigDict(
        env_prefix="AGENT_GRAPH_",
        env_file=".env",
        extra="ignore",
    )

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        configure_logging(self.log_level)

        if self.debug:
            logging.getLogger("agent_graph").setLevel(logging.DEBUG)
