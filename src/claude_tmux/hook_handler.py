"""Hook handler for Claude Code hook events.

Every hook registration runs the same command with the event name as
its argument (`claude-tmux hook <event>`). It reads the hook payload
JSON from stdin, appends one line to the event log, tags the tmux
window with the session state and rotates the log once it grows past
the threshold.

Hook registrations:
    SessionStart       -> claude-tmux hook session-start
    UserPromptSubmit   -> claude-tmux hook user-prompt-submit
    PreToolUse         -> claude-tmux hook pre-tool-use
    ...
    Notification       -> claude-tmux hook notification-idle (matcher idle_prompt)

A hook must never break the agent that runs it: every failure is
logged and the handler still returns normally.
"""

import json
import logging
import os
import sys
import time
from pathlib import Path
from typing import IO, Any, Dict, List, Optional, Tuple

from .config import get_color_tabs, get_event_log_path, get_rotation_config
from .event_log import EventLogError, RawEvent, append_event, rotate_log
from .protocols import TmuxInterface
from .status_constants import HOOK_EVENTS
from .window_state import WindowStateTagger

logger = logging.getLogger(__name__)

HOOK_COMMAND_PREFIX = "claude-tmux hook"

# All hooks that claude-tmux installs: (Claude hook name, command, matcher)
CLAUDE_TMUX_HOOKS: List[Tuple[str, str, str]] = [
    (hook_name, f"{HOOK_COMMAND_PREFIX} {event}", matcher)
    for hook_name, event, matcher in HOOK_EVENTS
]


def read_payload(stream: IO[str]) -> Dict[str, Any]:
    """Read the hook JSON payload. Anything unreadable becomes {}."""
    try:
        text = stream.read()
    except (OSError, ValueError):
        return {}
    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def _payload_str(payload: Dict[str, Any], key: str) -> str:
    value = payload.get(key)
    return value if isinstance(value, str) else ""


def build_event(
    event_name: str,
    payload: Dict[str, Any],
    pid: int,
    tmux_target: str = "",
    timestamp: Optional[int] = None,
) -> RawEvent:
    """Build the log record for one hook invocation."""
    return RawEvent(
        timestamp=int(time.time()) if timestamp is None else timestamp,
        session_id=_payload_str(payload, "session_id"),
        event=event_name,
        pid=pid,
        cwd=_payload_str(payload, "cwd"),
        tmux=tmux_target,
        tool=_payload_str(payload, "tool_name"),
    )


def current_tmux_target(tmux: Optional[TmuxInterface] = None) -> Tuple[str, Optional[TmuxInterface]]:
    """Resolve the pane this hook runs in.

    Returns ("", None) outside tmux. The tmux interface is returned so
    the caller can reuse the connection.
    """
    pane_id = os.environ.get("TMUX_PANE")
    if not os.environ.get("TMUX") or not pane_id:
        return "", None
    if tmux is None:
        from .implementations import RealTmux
        tmux = RealTmux()
    return tmux.pane_target(pane_id), tmux


def handle_hook_event(
    event_name: str,
    stdin: Optional[IO[str]] = None,
    tmux: Optional[TmuxInterface] = None,
    log_path: Optional[Path] = None,
) -> Optional[RawEvent]:
    """Main entry point: record one hook event.

    The session's pid is our parent process (Claude Code spawns the hook).

    Returns the event written, or None if it could not be appended.
    """
    payload = read_payload(stdin if stdin is not None else sys.stdin)
    target, tmux = current_tmux_target(tmux)
    event = build_event(event_name, payload, pid=os.getppid(), tmux_target=target)

    log_path = Path(log_path) if log_path else get_event_log_path()
    written: Optional[RawEvent] = event
    try:
        append_event(log_path, event)
    except EventLogError as e:
        logger.warning(f"Could not record {event_name}: {e}")
        written = None

    if target and tmux is not None:
        WindowStateTagger(tmux, color_tabs=get_color_tabs()).apply(target, event_name)

    max_lines, keep_lines = get_rotation_config()
    try:
        rotate_log(log_path, max_lines, keep_lines)
    except EventLogError as e:
        logger.warning(f"Log rotation failed: {e}")

    return written
