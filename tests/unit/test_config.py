"""Unit tests for configuration."""

import pytest
from pydantic import ValidationError

from agent_graph.core.config import AgentGraphConfig, ExecutorConfig, LLMConfig
from agent_graph.server.config import ServerSettings


def test_llm_config_defaults() -> None:
    """Test LLM config default values."""
    config = LLMConfig(openai_api_key="test-key")

    assert config.provider == "openai"
    assert config.openai_model == "gpt-4o-mini"
    assert config.openai_temperature == 0.7


def test_executor_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test executor config default values."""
    monkeypatch.delenv("AGENT_GRAPH_EXECUTOR_MAX_ITERATIONS", raising=False)
    config = ExecutorConfig()

    assert config.max_iterations == 10
    assert config.human_in_the_loop is False
    assert config.default_timeout_seconds == 30.0


def test_executor_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test executor config reads its prefixed environment."""
    monkeypatch.setenv("AGENT_GRAPH_EXECUTOR_MAX_ITERATIONS", "4")
    monkeypatch.setenv("AGENT_GRAPH_EXECUTOR_HUMAN_IN_THE_LOOP", "true")

    config = ExecutorConfig()

    assert config.max_iterations == 4
    assert config.human_in_the_loop is True


def test_executor_config_rejects_non_positive_limits() -> None:
    with pytest.raises(ValidationError):
        ExecutorConfig(max_iterations=0)
    with pytest.raises(ValidationError):
        ExecutorConfig(default_timeout_seconds=0)


def test_agent_graph_config_composition() -> None:
    """Test top-level config with nested configs."""
    config = AgentGraphConfig(log_level="DEBUG", debug=True)

    assert config.log_level == "DEBUG"
    assert config.debug is True
    assert isinstance(config.llm, LLMConfig)
    assert isinstance(config.executor, ExecutorConfig)


def test_server_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("AGENT_GRAPH_MAX_ITERATIONS", "7")
    monkeypatch.setenv("AGENT_GRAPH_CORS_ORIGINS", "http://a.test, http://b.test")

    settings = ServerSettings()

    assert settings.llm_config().openai_api_key == "sk-test"
    assert settings.executor_config().max_iterations == 7
    assert settings.parsed_cors_origins() == ["http://a.test", "http://b.test"]
