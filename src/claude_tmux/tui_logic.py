"""
Pure business logic functions for the session picker.

These functions are extracted from the TUI to enable unit testing
without requiring the full Textual framework.

All functions are pure - they take data as input and return new data.
No side effects, no mutations of input data.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from rich.text import Text

from .session import Session
from .status_constants import STATUS_BUSY, get_status_symbol

MSG_NO_SESSIONS = "No Claude sessions found"
MSG_NO_MATCHES = "No sessions match filter"
HELP_NORMAL = "j/k: navigate  enter: jump  /: filter  q: quit"
HELP_FILTER = "enter: jump  esc: clear filter  ctrl+c: quit"


def filter_sessions(sessions: List[Session], filter_text: str) -> List[Session]:
    """Case-insensitive substring match on project, tmux target and work dir.

    An empty filter returns every session.
    """
    if not filter_text:
        return list(sessions)
    needle = filter_text.lower()
    return [
        s for s in sessions
        if needle in f"{s.project_name} {s.tmux_target} {s.work_dir}".lower()
    ]


def clamp_cursor(cursor: int, count: int) -> int:
    """Keep cursor within [0, count - 1] (0 for an empty list)."""
    if count <= 0:
        return 0
    return max(0, min(cursor, count - 1))


def restore_cursor(sessions: List[Session], session_id: Optional[str], cursor: int) -> int:
    """Cursor position for session_id in a refreshed list.

    Falls back to the old position (clamped) when the session is gone.
    """
    if session_id:
        for index, session in enumerate(sessions):
            if session.session_id == session_id:
                return index
    return clamp_cursor(cursor, len(sessions))


def selected_session(sessions: List[Session], cursor: int) -> Optional[Session]:
    if 0 <= cursor < len(sessions):
        return sessions[cursor]
    return None


def jump_target_for(sessions: List[Session], cursor: int) -> Optional[str]:
    """tmux target to jump to for the selected row, None if not jumpable."""
    session = selected_session(sessions, cursor)
    if session is None or not session.jumpable:
        return None
    return session.tmux_target


def any_busy(sessions: List[Session]) -> bool:
    return any(s.status == STATUS_BUSY for s in sessions)


@dataclass(frozen=True)
class ColumnWidths:
    project: int = 0
    target: int = 0
    action: int = 0


def column_widths(sessions: List[Session]) -> ColumnWidths:
    """Widest project, target and action across sessions, for alignment."""
    return ColumnWidths(
        project=max((len(s.project_name) for s in sessions), default=0),
        target=max((len(s.display_target) for s in sessions), default=0),
        action=max((len(s.action) for s in sessions), default=0),
    )


def format_session_line(
    session: Session,
    widths: ColumnWidths,
    spinner_frame: int = 0,
    selected: bool = False,
) -> Text:
    """Render one row: cursor, status glyph, project, target, path, action."""
    symbol, color = get_status_symbol(session.status, spinner_frame)
    line = Text()
    line.append("> " if selected else "  ", style="bold magenta" if selected else "")
    line.append(f"{symbol} ", style=f"bold {color}" if selected else color)

    line.append(session.project_name.ljust(widths.project), style="bold white" if selected else "white")
    line.append("  ")
    target_style = "cyan" if session.jumpable else "dim italic"
    line.append(session.display_target.ljust(widths.target), style=target_style)
    line.append("  ")
    line.append(session.display_path, style="" if selected else "dim")
    if session.action:
        line.append("  ")
        line.append(session.action.ljust(widths.action), style="yellow")
    return line


def render_session_list(
    sessions: List[Session],
    filtered: List[Session],
    cursor: int,
    spinner_frame: int = 0,
) -> Text:
    """Render the list body, or the empty-state message."""
    if not filtered:
        return Text(MSG_NO_MATCHES if sessions else MSG_NO_SESSIONS, style="dim")
    widths = column_widths(filtered)
    lines = [
        format_session_line(s, widths, spinner_frame, selected=(i == cursor))
        for i, s in enumerate(filtered)
    ]
    return Text("\n").join(lines)


def session_to_dict(session: Session) -> Dict[str, Any]:
    """JSON-friendly view of a session for `claude-tmux list --json`."""
    return {
        "session_id": session.session_id,
        "pid": session.pid,
        "project": session.project_name,
        "work_dir": session.work_dir,
        "tmux_target": session.tmux_target,
        "status": session.status,
        "action": session.action,
        "last_update": session.last_update,
    }
