"""Unit tests for LLM providers."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from agent_graph.core.config import LLMConfig
from agent_graph.llm.factory import LLMFactory
from agent_graph.llm.openai_provider import EMPTY_REPLY, OpenAIProvider


def _completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def test_openai_provider_requires_key() -> None:
    with pytest.raises(ValueError, match="API key"):
        OpenAIProvider(LLMConfig(openai_api_key=None))


@patch("agent_graph.llm.openai_provider.OpenAI")
def test_openai_provider_builds_client_from_config(mock_openai: MagicMock) -> None:
    config = LLMConfig(
        openai_api_key="test-key", openai_base_url="http://llm.test/v1", openai_timeout_seconds=5
    )

    OpenAIProvider(config)

    mock_openai.assert_called_once_with(
        api_key="test-key", base_url="http://llm.test/v1", timeout=5.0
    )


def test_openai_provider_chat(llm_config: LLMConfig) -> None:
    client = MagicMock()
    client.chat.completions.create.return_value = _completion("Hello")

    provider = OpenAIProvider(llm_config, client=client)
    reply = provider.chat([{"role": "user", "content": "hi"}], temperature=0.1)

    assert reply == "Hello"
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["temperature"] == 0.1
    assert "max_tokens" not in kwargs


def test_openai_provider_model_override_and_empty_reply(llm_config: LLMConfig) -> None:
    client = MagicMock()
    client.chat.completions.create.return_value = _completion(None)

    provider = OpenAIProvider(llm_config, client=client)
    reply = provider.chat([{"role": "user", "content": "hi"}], model="gpt-4o", max_tokens=50)

    assert reply == EMPTY_REPLY
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["max_tokens"] == 50
    assert kwargs["temperature"] == llm_config.openai_temperature


@patch("agent_graph.llm.openai_provider.OpenAI")
def test_factory_creates_openai(mock_openai: MagicMock, llm_config: LLMConfig) -> None:
    provider = LLMFactory.create(llm_config)
    assert isinstance(provider, OpenAIProvider)


def test_factory_rejects_unknown_provider(llm_config: LLMConfig) -> None:
    config = llm_config.model_copy(update={"provider": "llama"})
    with pytest.raises(ValueError, match="Unsupported"):
        LLMFactory.create(config)


def test_factory_lists_supported_providers() -> None:
    assert LLMFactory.supported() == ("openai",)
