"""
User configuration for claude-tmux.

Config file format (~/.claude-tmux/config.yaml, all keys optional):

    refresh_interval: 0.75      # seconds between session polls
    spinner_interval: 0.15      # seconds between spinner frames
    event_log: ~/.claude-tmux/events.log
    discovery: events           # "events" (hook log) or "scan" (ps + pane capture)
    color_tabs: true            # hook colors tmux window tabs by session state
    rotation:
      max_lines: 1000           # rotate once the log grows past this
      keep_lines: 500           # lines kept after rotation
    classifier:
      question_phrases:         # permission questions for the garbled-menu fallback
        - "Do you want to proceed?"
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .event_log import DEFAULT_KEEP_LINES, DEFAULT_MAX_LINES
from .settings import get_config_path, get_default_event_log_path

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL = 0.75
DEFAULT_SPINNER_INTERVAL = 0.15
DISCOVERY_EVENTS = "events"
DISCOVERY_SCAN = "scan"


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load config.yaml.

    Returns an empty dict if the file doesn't exist.
    Raises ValueError on invalid YAML or non-mapping content.
    """
    path = Path(path) if path else get_config_path()
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping")
    return data


def _safe_load(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load config, falling back to defaults on a broken file."""
    try:
        return load_config(path)
    except (ValueError, OSError) as e:
        logger.warning(f"Ignoring config: {e}")
        return {}


def _positive_float(value: Any, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def get_refresh_interval(path: Optional[Path] = None) -> float:
    return _positive_float(_safe_load(path).get("refresh_interval"), DEFAULT_REFRESH_INTERVAL)


def get_spinner_interval(path: Optional[Path] = None) -> float:
    return _positive_float(_safe_load(path).get("spinner_interval"), DEFAULT_SPINNER_INTERVAL)


def get_event_log_path(path: Optional[Path] = None) -> Path:
    """Event log location, with ~ expanded."""
    value = _safe_load(path).get("event_log")
    if isinstance(value, str) and value.strip():
        return Path(value).expanduser()
    return get_default_event_log_path()


def get_rotation_config(path: Optional[Path] = None) -> Tuple[int, int]:
    """(max_lines, keep_lines) for log rotation.

    keep_lines is clamped to max_lines so rotation always shrinks the log.
    """
    section = _safe_load(path).get("rotation") or {}
    if not isinstance(section, dict):
        section = {}
    max_lines = _positive_int(section.get("max_lines"), DEFAULT_MAX_LINES)
    keep_lines = _positive_int(section.get("keep_lines"), DEFAULT_KEEP_LINES)
    return max_lines, min(keep_lines, max_lines)


def get_question_phrases(path: Optional[Path] = None) -> Optional[List[str]]:
    """Configured permission question phrases, or None for the defaults."""
    section = _safe_load(path).get("classifier") or {}
    if not isinstance(section, dict):
        return None
    phrases = section.get("question_phrases")
    if not isinstance(phrases, list):
        return None
    phrases = [p for p in phrases if isinstance(p, str) and p.strip()]
    return phrases or None


def get_discovery_mode(path: Optional[Path] = None) -> str:
    value = _safe_load(path).get("discovery", DISCOVERY_EVENTS)
    if value in (DISCOVERY_EVENTS, DISCOVERY_SCAN):
        return value
    return DISCOVERY_EVENTS


def get_color_tabs(path: Optional[Path] = None) -> bool:
    """Whether the hook colors tmux window tabs by session state."""
    value = _safe_load(path).get("color_tabs", True)
    return value if isinstance(value, bool) else True
