"""Tests for the bot CLI."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from src.cli import cli


@pytest.fixture(autouse=True)
def _no_logging_setup() -> Iterator[None]:
    with patch("src.cli._configure_logging"):
        yield


@pytest.fixture
def bot_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ACCESS_TOKEN", "tok")
    monkeypatch.setenv("BOT_ID", "bot123")
    monkeypatch.setenv("PORT", "5055")
    monkeypatch.delenv("AUDIT_LOG_PATH", raising=False)


@pytest.fixture
def no_bot_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ACCESS_TOKEN", raising=False)
    monkeypatch.delenv("BOT_ID", raising=False)


def test_serve_runs_uvicorn_on_configured_port(bot_env: None) -> None:
    with patch("src.cli.uvicorn.run") as mock_run:
        result = CliRunner().invoke(cli, ["serve"])
    assert result.exit_code == 0, result.output
    _, kwargs = mock_run.call_args
    assert kwargs["port"] == 5055
    assert kwargs["host"] == "0.0.0.0"


def test_serve_host_option_overrides_env(bot_env: None) -> None:
    with patch("src.cli.uvicorn.run") as mock_run:
        result = CliRunner().invoke(cli, ["serve", "--host", "127.0.0.1"])
    assert result.exit_code == 0, result.output
    assert mock_run.call_args.kwargs["host"] == "127.0.0.1"


def test_serve_fails_fast_without_secrets(no_bot_env: None) -> None:
    with patch("src.cli.uvicorn.run") as mock_run:
        result = CliRunner().invoke(cli, ["serve"])
    assert result.exit_code == 1
    assert "ACCESS_TOKEN" in result.output
    mock_run.assert_not_called()


def test_send_posts_message(bot_env: None) -> None:
    with patch("src.cli.GroupMeSender.send", new_callable=AsyncMock) as mock_send:
        mock_send.return_value = True
        result = CliRunner().invoke(cli, ["send", "hello group"])
    assert result.exit_code == 0, result.output
    assert "Message sent" in result.output
    mock_send.assert_awaited_once_with("hello group")


def test_send_reports_failure(bot_env: None) -> None:
    with patch("src.cli.GroupMeSender.send", new_callable=AsyncMock) as mock_send:
        mock_send.return_value = False
        result = CliRunner().invoke(cli, ["send", "hello group"])
    assert result.exit_code == 1
    assert "rejected" in result.output


def test_send_fails_fast_without_secrets(no_bot_env: None) -> None:
    result = CliRunner().invoke(cli, ["send", "hello"])
    assert result.exit_code == 1
    assert "BOT_ID" in result.output


def test_serve_rejects_unknown_log_level(
    bot_env: None, monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    with patch("src.cli.uvicorn.run") as mock_run:
        result = CliRunner().invoke(cli, ["serve"])
    assert result.exit_code == 1
    assert "log_level" in result.output
    assert not isinstance(result.exception, ValueError)
    mock_run.assert_not_called()
