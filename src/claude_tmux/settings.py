"""
File locations for claude-tmux.

Everything lives under ~/.claude-tmux unless CLAUDE_TMUX_STATE_DIR
points elsewhere (used for test isolation).
"""

import os
from pathlib import Path

EVENT_LOG_NAME = "events.log"
CONFIG_NAME = "config.yaml"
APP_LOG_NAME = "claude-tmux.log"


def get_state_dir() -> Path:
    """Base directory for the event log, config and app log."""
    env_dir = os.environ.get("CLAUDE_TMUX_STATE_DIR")
    if env_dir:
        return Path(env_dir)
    return Path.home() / ".claude-tmux"


def get_default_event_log_path() -> Path:
    return get_state_dir() / EVENT_LOG_NAME


def get_config_path() -> Path:
    return get_state_dir() / CONFIG_NAME


def get_app_log_path() -> Path:
    return get_state_dir() / APP_LOG_NAME
