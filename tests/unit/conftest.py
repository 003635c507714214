"""
Unit test configuration for claude-tmux.

Every test gets its own state directory so nothing reads or writes the
user's ~/.claude-tmux, and runs as if outside tmux unless it says otherwise.
"""

import pytest


@pytest.fixture(autouse=True)
def isolated_state_dir(tmp_path, monkeypatch):
    """Point CLAUDE_TMUX_STATE_DIR at a per-test temp directory."""
    state_dir = tmp_path / "state"
    state_dir.mkdir()
    monkeypatch.setenv("CLAUDE_TMUX_STATE_DIR", str(state_dir))
    monkeypatch.delenv("TMUX", raising=False)
    monkeypatch.delenv("TMUX_PANE", raising=False)
    monkeypatch.delenv("CLAUDE_TMUX_SOCKET", raising=False)
    return state_dir


@pytest.fixture
def event_log(isolated_state_dir):
    """Default event log path inside the isolated state directory."""
    return isolated_state_dir / "events.log"
