"""
Unit tests for the CLI commands (translate, mock).
"""

import io
import json
import os
import time
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from agui_adapter.cli import app
from agui_adapter.cli.main import chunk_reader, configure_logging, run_translate
from agui_adapter.config import AdapterConfig

runner = CliRunner()


def parse_events(output):
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


class StallingSource:
    """Text source that pauses between scripted chunks, like a live agent."""

    def __init__(self, *steps):
        self.steps = list(steps)

    def read(self, size):
        while self.steps:
            step = self.steps.pop(0)
            if isinstance(step, float):
                time.sleep(step)
                continue
            return step
        return ""


class TestCLIRoot:
    def test_help_shows_all_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "translate" in result.output
        assert "mock" in result.output


class TestTranslate:
    def test_translate_file(self, tmp_path):
        capture = tmp_path / "agent.log"
        capture.write_text(
            "Running tool: Read file: src/index.ts\n"
            "> npm test\n"
            "rm -rf /tmp/x\n"
            "waiting for input",
            encoding="utf-8",
        )

        result = runner.invoke(
            app,
            ["translate", str(capture), "--session-id", "cli-1", "--exit-code", "0", "--chunk-size", "7"],
        )
        assert result.exit_code == 0, result.output

        events = parse_events(result.output)
        assert [e["type"] for e in events] == [
            "RUN_STARTED",
            "STEP_STARTED",
            "STEP_STARTED",
            "WAITING_FOR_HUMAN",
            "TEXT_MESSAGE_CONTENT",
            "RUN_FINISHED",
        ]
        assert all(e["session_id"] == "cli-1" for e in events)
        assert events[3]["data"]["approval_payload"]["props"]["command"] == "rm -rf /tmp/x"
        assert events[4]["data"]["delta"] == "waiting for input"
        assert events[5]["data"]["status"] == "success"

    def test_translate_stdin_without_exit(self):
        result = runner.invoke(app, ["translate", "-", "-s", "cli-2"], input="hello\nworld\n")
        assert result.exit_code == 0, result.output
        events = parse_events(result.output)
        assert [e["type"] for e in events] == [
            "RUN_STARTED",
            "TEXT_MESSAGE_CONTENT",
            "TEXT_MESSAGE_CONTENT",
        ]

    def test_translate_with_agent_override(self):
        result = runner.invoke(
            app, ["translate", "-", "--agent", "openclaw"], input="Calling: search\n"
        )
        assert result.exit_code == 0, result.output
        events = parse_events(result.output)
        assert events[0]["data"]["agent_name"] == "openclaw"
        assert events[1]["data"]["tool_name"] == "search"

    def test_translate_rejects_bad_agent(self):
        result = runner.invoke(app, ["translate", "-", "--agent", "gemini"], input="x\n")
        assert result.exit_code == 1


class TestMock:
    def test_mock_replays_lifecycle(self):
        result = runner.invoke(app, ["mock", "--base-delay-ms", "0", "-s", "mock-1"])
        assert result.exit_code == 0, result.output

        events = parse_events(result.output)
        assert len(events) == 13
        assert events[0]["type"] == "RUN_STARTED"
        assert events[-1]["type"] == "RUN_FINISHED"
        assert all(e["session_id"] == "mock-1" for e in events)


class TestLiveInput:
    @pytest.mark.asyncio
    async def test_prompt_flushed_while_source_stalls(self, capsys):
        source = StallingSource("Proceed with deploy? ", 0.3, "more\n")
        config = AdapterConfig(flush_timeout_ms=20)

        await run_translate(source, config, "live-1", None, 4096)

        events = parse_events(capsys.readouterr().out)
        assert [e["type"] for e in events] == [
            "RUN_STARTED",
            "TEXT_MESSAGE_CONTENT",
            "TEXT_MESSAGE_CONTENT",
        ]
        assert events[1]["data"]["delta"] == "Proceed with deploy? "
        assert events[2]["data"]["delta"] == "more"

    def test_chunk_reader_returns_available_data_from_open_pipe(self):
        read_fd, write_fd = os.pipe()
        source = open(read_fd, "r", encoding="utf-8")
        try:
            os.write(write_fd, b"Proceed? ")
            read = chunk_reader(source, 4096)
            assert read() == "Proceed? "

            os.close(write_fd)
            write_fd = None
            assert read() is None
        finally:
            source.close()
            if write_fd is not None:
                os.close(write_fd)

    def test_chunk_reader_decodes_characters_split_across_reads(self):
        source = io.TextIOWrapper(io.BytesIO("héllo\n".encode("utf-8")), encoding="utf-8")
        read = chunk_reader(source, 2)
        assert "".join(iter(read, None)) == "héllo\n"

    def test_chunk_reader_falls_back_to_plain_read(self):
        read = chunk_reader(io.StringIO("abcdef"), 4)
        assert list(iter(read, None)) == ["abcd", "ef"]


class TestLogLevel:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch, tmp_path):
        monkeypatch.delenv("AGUI_LOG_LEVEL", raising=False)
        monkeypatch.chdir(tmp_path)

    @patch("agui_adapter.cli.main.setup_logging")
    def test_default_level_is_warning(self, mock_setup):
        configure_logging(verbose=False)
        mock_setup.assert_called_once_with(level="WARNING")

    @patch("agui_adapter.cli.main.setup_logging")
    def test_env_log_level_is_applied(self, mock_setup, monkeypatch):
        monkeypatch.setenv("AGUI_LOG_LEVEL", "info")
        configure_logging(verbose=False)
        mock_setup.assert_called_once_with(level="INFO")

    @patch("agui_adapter.cli.main.setup_logging")
    def test_verbose_wins_over_env(self, mock_setup, monkeypatch):
        monkeypatch.setenv("AGUI_LOG_LEVEL", "error")
        configure_logging(verbose=True)
        mock_setup.assert_called_once_with(level="DEBUG")

    def test_invalid_env_log_level_exits(self, monkeypatch):
        monkeypatch.setenv("AGUI_LOG_LEVEL", "loud")
        result = runner.invoke(app, ["translate", "-"], input="x\n")
        assert result.exit_code == 1
