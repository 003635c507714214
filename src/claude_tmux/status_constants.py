"""
Status constants and mappings for claude-tmux.

Centralizes status values, event names, and the display mappings
used by the list command and the TUI.
"""

from typing import Tuple


# =============================================================================
# Session Status Values
# =============================================================================

STATUS_UNKNOWN = "unknown"
STATUS_IDLE = "idle"
STATUS_BUSY = "busy"
STATUS_WAITING = "waiting"  # Permission dialog or elicitation on screen


# =============================================================================
# Hook Event Names (as written to the event log)
# =============================================================================

EVENT_SESSION_START = "session-start"
EVENT_SESSION_END = "session-end"
EVENT_USER_PROMPT_SUBMIT = "user-prompt-submit"
EVENT_PRE_TOOL_USE = "pre-tool-use"
EVENT_POST_TOOL_USE = "post-tool-use"
EVENT_POST_TOOL_USE_FAILURE = "post-tool-use-failure"
EVENT_STOP = "stop"
EVENT_PERMISSION_REQUEST = "permission-request"
EVENT_NOTIFICATION_IDLE = "notification-idle"
EVENT_NOTIFICATION_PERMISSION = "notification-permission"
EVENT_NOTIFICATION_ELICITATION = "notification-elicitation"

# Claude Code hook name -> (event name, notification matcher)
HOOK_EVENTS = [
    ("SessionStart", EVENT_SESSION_START, ""),
    ("SessionEnd", EVENT_SESSION_END, ""),
    ("UserPromptSubmit", EVENT_USER_PROMPT_SUBMIT, ""),
    ("Stop", EVENT_STOP, ""),
    ("PreToolUse", EVENT_PRE_TOOL_USE, ""),
    ("PostToolUse", EVENT_POST_TOOL_USE, ""),
    ("PostToolUseFailure", EVENT_POST_TOOL_USE_FAILURE, ""),
    ("PermissionRequest", EVENT_PERMISSION_REQUEST, ""),
    ("Notification", EVENT_NOTIFICATION_IDLE, "idle_prompt"),
    ("Notification", EVENT_NOTIFICATION_PERMISSION, "permission_prompt"),
    ("Notification", EVENT_NOTIFICATION_ELICITATION, "elicitation_dialog"),
]


# =============================================================================
# Action Labels
# =============================================================================

ACTION_THINKING = "Thinking…"
ACTION_PERMISSION = "Permission"
ACTION_INPUT = "Input"


# =============================================================================
# Spinner Frames (busy animation, same glyphs Claude Code uses)
# =============================================================================

SPINNER_FRAMES = ["✻", "✽", "✳", "·", "✶", "✢"]


# =============================================================================
# Status to Symbol+Color (combined for display)
# =============================================================================

STATUS_SYMBOLS = {
    STATUS_WAITING: ("?", "blue"),
    STATUS_IDLE: ("●", "green"),
    STATUS_UNKNOWN: ("●", "dim"),
}


def get_status_symbol(status: str, spinner_frame: int = 0) -> Tuple[str, str]:
    """Get (symbol, color) tuple for a session status.

    Busy sessions animate through SPINNER_FRAMES using spinner_frame.
    """
    if status == STATUS_BUSY:
        return SPINNER_FRAMES[spinner_frame % len(SPINNER_FRAMES)], "yellow"
    return STATUS_SYMBOLS.get(status, ("●", "dim"))
