"""OpenAI chat completions provider."""

import logging
from typing import Any

from openai import OpenAI

from agent_graph.core.config import LLMConfig
from agent_graph.llm.provider import LLMProvider

logger = logging.getLogger(__name__)

EMPTY_REPLY = "No response"


class OpenAIProvider(LLMProvider):
    """Sends the conversation to the OpenAI chat completions endpoint.

    The client is synchronous; agents call ``chat`` from a worker thread.
    """

    def __init__(self, config: LLMConfig, client: OpenAI | None = None) -> None:
        """Initialize the provider.

        Args:
            config: LLM configuration.
            client: Preconfigured client. Built from ``config`` when None.

        Raises:
            ValueError: If no API key is configured and no client is given.
        """
        if client is None:
            if not config.openai_api_key:
                raise ValueError("OpenAI API key is required")
            client = OpenAI(
                api_key=config.openai_api_key,
                base_url=config.openai_base_url,
                timeout=config.openai_timeout_seconds,
            )

        self.config = config
        self.client = client
        self.default_model = config.openai_model

    def chat(
        self,
        messages: list[dict[str, str]],
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> str:
        """Return the first choice of one chat completion.

        An empty completion comes back as ``"No response"`` so every agent
        step appends a visible message.
        """
        request: dict[str, Any] = {
            "model": model or self.default_model,
            "messages": messages,
            "temperature": self.config.openai_temperature if temperature is None else temperature,
            **kwargs,
        }
        if max_tokens is not None:
            request["max_tokens"] = max_tokens

        logger.debug(
            "Requesting chat completion",
            extra={"model": request["model"], "message_count": len(messages)},
        )
        response = self.client.chat.completions.create(**request)

        content = response.choices[0].message.content
        if not content:
            logger.warning("Empty chat completion", extra={"model": request["model"]})
            return EMPTY_REPLY
        return content
