"""Tests for CLI commands."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner

from gen_ai_example.cli import main
from gen_ai_example.core.config import clear_settings_cache
from gen_ai_example.observability import reset_logging, reset_tracing

if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


@pytest.fixture(autouse=True)
def quiet_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    """Run commands without span output, log noise or simulated delays."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("GEN_AI_EXAMPLE_TRACING_ENABLED", "false")
    monkeypatch.setenv("GEN_AI_EXAMPLE_LOG_LEVEL", "ERROR")
    monkeypatch.setenv("GEN_AI_EXAMPLE_AGENT_PLANNING_DELAY_MS", "0")
    monkeypatch.setenv("GEN_AI_EXAMPLE_AGENT_SUMMARIZE_DELAY_MS", "0")
    clear_settings_cache()
    reset_tracing()
    reset_logging()
    yield
    clear_settings_cache()
    reset_tracing()
    reset_logging()


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


class TestMainGroup:
    """Tests for the main CLI group."""

    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "traced generative-AI task orchestrator" in result.output
        for command in ("chat", "tool", "agent", "plan", "tools", "config"):
            assert command in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestPlanCommand:
    """Tests for the plan command."""

    def test_plan_json(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["plan", "weather in Paris, then calculate 10+25"])

        assert result.exit_code == 0
        tasks = json.loads(result.stdout)
        assert [t["kind"] for t in tasks] == ["tool_call", "tool_call", "summarize"]
        assert tasks[0]["parameters"] == {"tool": "get_weather", "city": "Paris"}
        assert all(t["status"] == "pending" for t in tasks)

    def test_plan_requires_objective(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["plan"])
        assert result.exit_code != 0


class TestAgentCommand:
    """Tests for the agent command."""

    def test_default_objective(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["agent"])

        assert result.exit_code == 0
        assert "1. Planned tasks:" in result.stdout
        assert "3. Results:" in result.stdout
        assert '"result": 35.0' in result.stdout

    def test_json_output(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["agent", "--json", "calculate 6*7"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["success"] is True
        assert data["total_tasks"] == 2
        assert data["tasks"][0]["result"]["result"] == 42

    def test_failure_exits_nonzero(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["agent", "--json", "calculate 1/0"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["success"] is False
        assert data["failed_task_id"] == data["tasks"][0]["id"]
        assert "division by zero" in result.output


class TestChatAndToolCommands:
    """Tests for the chat and tool commands."""

    def test_chat(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["chat", "hello", "--user", "u1"])

        assert result.exit_code == 0
        assert "User: hello" in result.stdout
        assert "Assistant: Hello!" in result.stdout
        assert "Timestamp:" in result.stdout

    def test_chat_default_message(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["chat"])
        assert result.exit_code == 0
        assert "Python is" in result.stdout

    def test_tool(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["tool"])

        assert result.exit_code == 0
        assert "Model: I need to call some tools" in result.stdout
        assert "get_weather" in result.stdout
        assert "calculator" in result.stdout

    def test_tool_failure_is_reported(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["tool", "calculate 3/0"])

        assert result.exit_code == 0
        assert "failed calculator: calculator: division by zero" in result.stdout


class TestInspectionCommands:
    """Tests for tools list and config show."""

    def test_tools_list(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["tools", "list"])

        assert result.exit_code == 0
        assert "calculator" in result.output
        assert "get_weather" in result.output

    def test_config_show(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["config", "show"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["tracing"]["enabled"] is False
        assert data["general"]["log_level"] == "ERROR"

    def test_config_file_option(self, runner: CliRunner, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text('[agent]\nname = "from-file"\n')

        result = runner.invoke(main, ["--config", str(config_file), "config", "show"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["agent"]["name"] == "from-file"
