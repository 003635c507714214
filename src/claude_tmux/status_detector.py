"""
Pane-content status classifier.

Used when there is no hook-derived status (process scan discovery):
capture the pane and decide from what is on screen whether Claude is
busy, waiting on a dialog, idle at its prompt, or unknown.

Precedence is fixed: busy > waiting > idle > unknown. A session mid-tool
call can still show an old prompt glyph in scrollback, and a permission
dialog is drawn while the prompt glyph is visible, so the stronger
signal must win.
"""

from dataclasses import replace
from typing import List, Optional

from .protocols import TmuxInterface
from .session import Session
from .status_constants import STATUS_BUSY, STATUS_IDLE, STATUS_UNKNOWN, STATUS_WAITING
from .status_patterns import (
    DEFAULT_PATTERNS,
    StatusPatterns,
    detect_numbered_menu,
    detect_permission_question,
    has_prompt_char,
    is_spinner_line,
    sanitize_lines,
)


def classify_pane(pane_content: str, patterns: Optional[StatusPatterns] = None) -> str:
    """Classify captured pane text into a single status.

    Args:
        pane_content: Raw capture (may contain ANSI codes and invisible characters)
        patterns: StatusPatterns to use (defaults to DEFAULT_PATTERNS)

    Returns:
        One of STATUS_BUSY, STATUS_WAITING, STATUS_IDLE, STATUS_UNKNOWN
    """
    if not pane_content:
        return STATUS_UNKNOWN
    patterns = patterns or DEFAULT_PATTERNS

    lines = sanitize_lines(pane_content)

    if any(is_spinner_line(line, patterns) for line in lines):
        return STATUS_BUSY
    if detect_numbered_menu(lines, patterns):
        return STATUS_WAITING
    if detect_permission_question(lines, patterns):
        return STATUS_WAITING
    if any(has_prompt_char(line, patterns) for line in lines):
        return STATUS_IDLE
    return STATUS_UNKNOWN


class PaneStatusDetector:
    """Sets session status from live pane captures."""

    def __init__(self, tmux: TmuxInterface, patterns: Optional[StatusPatterns] = None):
        self._tmux = tmux
        self._patterns = patterns or DEFAULT_PATTERNS

    def detect_status(self, session: Session) -> str:
        """Classify one session's pane. Detached sessions are unknown."""
        if not session.tmux_target:
            return STATUS_UNKNOWN
        content = self._tmux.capture_pane_text(session.tmux_target)
        return classify_pane(content, self._patterns)

    def capture_statuses(self, sessions: List[Session]) -> List[Session]:
        """Return copies of sessions with status filled in from their panes."""
        return [replace(s, status=self.detect_status(s)) for s in sessions]
