"""Factory for creating LLM providers."""

import logging
from collections.abc import Callable
from types import MappingProxyType

from agent_graph.core.config import LLMConfig
from agent_graph.llm.openai_provider import OpenAIProvider
from agent_graph.llm.provider import LLMProvider

logger = logging.getLogger(__name__)

_PROVIDERS: MappingProxyType[str, Callable[[LLMConfig], LLMProvider]] = MappingProxyType(
    {"openai": OpenAIProvider}
)


class LLMFactory:
    """Builds the provider named by ``LLMConfig.provider``."""

    @staticmethod
    def supported() -> tuple[str, ...]:
        return tuple(_PROVIDERS)

    @staticmethod
    def create(config: LLMConfig) -> LLMProvider:
        """Create an LLM provider based on configuration.

        Raises:
            ValueError: If the provider is unknown or its configuration is
                incomplete (e.g. a missing API key).
        """
        build = _PROVIDERS.get(config.provider)
        if build is None:
            raise ValueError(f"Unsupported LLM provider: {config.provider}")

        logger.info("Creating LLM provider", extra={"provider": config.provider})
        return build(config)
