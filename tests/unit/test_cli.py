"""Unit tests for the command line interface."""

from __future__ import annotations

from unittest.mock import Mock, patch

import pytest

from agent_graph import cli


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("AGENT_GRAPH_EXECUTOR_MAX_ITERATIONS", raising=False)


def test_run_prints_transcript(mock_provider: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    mock_provider.chat.side_effect = ["Notes", "Draft", "Approved"]

    with patch.object(cli.LLMFactory, "create", return_value=mock_provider):
        code = cli.main(["run", "Write about tide pools"])

    out = capsys.readouterr().out
    assert code == 0
    assert "[user] Write about tide pools" in out
    assert "[assistant] Approved" in out


def test_run_stream_labels_agents(
    mock_provider: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    mock_provider.chat.side_effect = ["Review", "Tests", "Docs"]

    with patch.object(cli.LLMFactory, "create", return_value=mock_provider):
        code = cli.main(["run", "def f(): pass", "--workflow", "code-review", "--stream"])

    captured = capsys.readouterr()
    assert code == 0
    assert "[assistant:reviewer] Review" in captured.out
    assert "--> documentation" in captured.err


def test_graph_error_exit_code(mock_provider: Mock) -> None:
    with (
        patch.object(cli.LLMFactory, "create", return_value=mock_provider),
        patch.object(cli, "create_research_workflow", return_value={}),
    ):
        assert cli.main(["run", "topic"]) == 3


def test_invalid_config_exit_code(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AGENT_GRAPH_EXECUTOR_MAX_ITERATIONS", "0")
    assert cli.main(["run", "topic"]) == 2


def test_serve_starts_uvicorn() -> None:
    with patch.object(cli.uvicorn, "run") as run:
        assert cli.main(["serve", "--port", "9000"]) == 0

    run.assert_called_once_with(
        "agent_graph.server.app:create_app", host="127.0.0.1", port=9000, factory=True
    )
