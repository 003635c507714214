"""
Unit tests for CLI using Typer.

These tests verify that the CLI correctly handles commands
using Typer's CliRunner.
"""

import json
import re
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from claude_tmux.cli import app
from claude_tmux.event_log import read_events
from claude_tmux.hook_handler import CLAUDE_TMUX_HOOKS

from tests.fixtures import event_line, numbered_lines, write_log


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    return re.sub(r'\x1b\[[0-9;]*m', '', text)


runner = CliRunner()


class TestMainCommand:

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        assert "list" in output
        assert "hooks" in output

    def test_no_args_launches_tui(self):
        with patch("claude_tmux.tui.run_tui") as mock_run:
            result = runner.invoke(app, [])
        assert result.exit_code == 0
        mock_run.assert_called_once_with(discovery="events")

    def test_scan_flag_launches_tui_in_scan_mode(self):
        with patch("claude_tmux.tui.run_tui") as mock_run:
            result = runner.invoke(app, ["--scan"])
        assert result.exit_code == 0
        mock_run.assert_called_once_with(discovery="scan")

    def test_tui_launch_rotates_log(self, event_log):
        write_log(event_log, numbered_lines(1001))
        with patch("claude_tmux.tui.run_tui"):
            runner.invoke(app, [])
        assert len(event_log.read_text().splitlines()) == 500


class TestListCommand:

    def test_no_sessions(self):
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "No Claude sessions found" in result.stdout

    def test_table(self, event_log):
        write_log(event_log, [
            event_line("abc", "session-start", pid=0, cwd="/src/widget", tmux="work:1.0"),
            event_line("abc", "pre-tool-use", pid=0, cwd="/src/widget", tool="Bash"),
        ])
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        assert "widget" in output
        assert "work:1" in output
        assert "busy" in output

    def test_json(self, event_log):
        write_log(event_log, [
            event_line("abc", "session-start", pid=0, cwd="/src/widget", tmux="work:1.0"),
            event_line("def", "notification-elicitation", pid=0, cwd="/src/gadget"),
        ])
        result = runner.invoke(app, ["list", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [d["session_id"] for d in data] == ["abc", "def"]
        assert data[0]["tmux_target"] == "work:1.0"
        assert data[1]["status"] == "waiting"
        assert data[1]["action"] == "Input"

    def test_read_error_exits_nonzero(self, event_log):
        event_log.mkdir()
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 1
        assert "Error" in result.stdout


class TestHookCommand:

    def test_records_event_from_stdin(self, event_log):
        result = runner.invoke(app, ["hook", "stop"], input='{"session_id": "abc", "cwd": "/src/app"}')
        assert result.exit_code == 0
        events = list(read_events(event_log))
        assert [(e.session_id, e.event, e.cwd) for e in events] == [("abc", "stop", "/src/app")]

    def test_bad_payload_still_exits_zero(self, event_log):
        result = runner.invoke(app, ["hook", "pre-tool-use"], input="garbage")
        assert result.exit_code == 0
        assert next(read_events(event_log)).event == "pre-tool-use"


class TestRotateCommand:

    def test_rotates(self, event_log):
        write_log(event_log, numbered_lines(1200))
        result = runner.invoke(app, ["rotate"])
        assert result.exit_code == 0
        assert "Rotated" in result.stdout
        assert len(event_log.read_text().splitlines()) == 500

    def test_nothing_to_rotate(self, event_log):
        write_log(event_log, numbered_lines(10))
        result = runner.invoke(app, ["rotate"])
        assert result.exit_code == 0
        assert "Nothing to rotate" in result.stdout

    def test_failure_exits_nonzero(self, event_log):
        event_log.mkdir()
        result = runner.invoke(app, ["rotate"])
        assert result.exit_code == 1


class TestHooksCommands:

    def test_install_all(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "home", staticmethod(lambda: tmp_path))
        result = runner.invoke(app, ["hooks", "install"])
        assert result.exit_code == 0
        assert "Installed" in result.stdout

        data = json.loads((tmp_path / ".claude" / "settings.json").read_text())
        for hook_name, command, matcher in CLAUDE_TMUX_HOOKS:
            groups = data["hooks"][hook_name]
            assert any(
                g["matcher"] == matcher and g["hooks"][0]["command"] == command
                for g in groups
            ), f"{command} not installed"

    def test_install_twice(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "home", staticmethod(lambda: tmp_path))
        runner.invoke(app, ["hooks", "install"])
        result = runner.invoke(app, ["hooks", "install"])
        assert result.exit_code == 0
        assert "already installed" in result.stdout

    def test_install_project_level(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["hooks", "install", "--project"])
        assert result.exit_code == 0
        assert (tmp_path / ".claude" / "settings.json").exists()

    def test_install_invalid_settings(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "home", staticmethod(lambda: tmp_path))
        (tmp_path / ".claude").mkdir()
        (tmp_path / ".claude" / "settings.json").write_text("{broken")
        result = runner.invoke(app, ["hooks", "install"])
        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_uninstall(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "home", staticmethod(lambda: tmp_path))
        runner.invoke(app, ["hooks", "install"])
        result = runner.invoke(app, ["hooks", "uninstall"])
        assert result.exit_code == 0
        assert "Removed" in result.stdout
        assert json.loads((tmp_path / ".claude" / "settings.json").read_text()) == {}

    def test_uninstall_nothing(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "home", staticmethod(lambda: tmp_path))
        result = runner.invoke(app, ["hooks", "uninstall"])
        assert result.exit_code == 0
        assert "No claude-tmux hooks" in result.stdout

    def test_status(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "home", staticmethod(lambda: tmp_path))
        monkeypatch.chdir(tmp_path / "..")
        runner.invoke(app, ["hooks", "install"])
        result = runner.invoke(app, ["hooks", "status"])
        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        assert "claude-tmux hook stop" in output
        assert "no settings file" in output


class TestConfigCommands:

    def test_path(self, isolated_state_dir):
        result = runner.invoke(app, ["config", "path"])
        assert result.exit_code == 0
        assert result.stdout.strip() == str(isolated_state_dir / "config.yaml")

    def test_init_creates_template(self, isolated_state_dir):
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 0
        assert "refresh_interval" in (isolated_state_dir / "config.yaml").read_text()

    def test_init_refuses_overwrite(self, isolated_state_dir):
        (isolated_state_dir / "config.yaml").write_text("refresh_interval: 2\n")
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 1
        assert (isolated_state_dir / "config.yaml").read_text() == "refresh_interval: 2\n"

    def test_init_force(self, isolated_state_dir):
        (isolated_state_dir / "config.yaml").write_text("refresh_interval: 2\n")
        result = runner.invoke(app, ["config", "init", "--force"])
        assert result.exit_code == 0
        assert "# claude-tmux configuration" in (isolated_state_dir / "config.yaml").read_text()

    def test_show_defaults(self):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        assert "using defaults" in output
        assert "refresh_interval: 0.75s" in output
        assert "Do you want to proceed?" in output

    def test_show_configured(self, isolated_state_dir):
        (isolated_state_dir / "config.yaml").write_text("refresh_interval: 2\ndiscovery: scan\n")
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        assert "refresh_interval: 2.0s" in output
        assert "discovery: scan" in output

    def test_show_invalid(self, isolated_state_dir):
        (isolated_state_dir / "config.yaml").write_text("- not\n- a mapping\n")
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 1
