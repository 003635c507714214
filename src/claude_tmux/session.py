"""
Session model for claude-tmux.

A Session is one tracked Claude Code process, with where it lives in
tmux and what it is currently doing.
"""

import os
from dataclasses import dataclass
from typing import List, Tuple

from .status_constants import STATUS_UNKNOWN


@dataclass
class Session:
    """A running Claude Code session, optionally mapped to a tmux pane."""

    session_id: str = ""
    pid: int = 0
    ppid: int = 0
    work_dir: str = ""
    project_name: str = ""
    tmux_target: str = ""  # "session:window.pane", empty if detached
    tmux_session: str = ""
    window_index: int = 0
    pane_index: int = 0
    status: str = STATUS_UNKNOWN
    action: str = ""
    last_update: int = 0  # epoch seconds of the latest contributing event

    @property
    def jumpable(self) -> bool:
        """True if the session is mapped to a tmux pane."""
        return self.tmux_target != ""

    @property
    def display_target(self) -> str:
        """Short tmux location for display, or "detached"."""
        if not self.tmux_target:
            return "detached"
        return f"{self.tmux_session}:{self.window_index}"

    @property
    def display_path(self) -> str:
        return shorten_path(self.work_dir)

    def set_work_dir(self, work_dir: str) -> None:
        """Update the working directory and the project name derived from it."""
        self.work_dir = work_dir
        self.project_name = project_name_for(work_dir)

    def set_tmux_target(self, target: str) -> None:
        """Set the tmux target and its decomposed parts."""
        self.tmux_target = target
        self.tmux_session, self.window_index, self.pane_index = parse_tmux_target(target)


def project_name_for(work_dir: str) -> str:
    """Last path segment of a working directory."""
    if not work_dir:
        return ""
    trimmed = work_dir.rstrip(os.sep)
    if not trimmed:
        return os.sep
    return os.path.basename(trimmed)


def _parse_index(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        return 0


def parse_tmux_target(target: str) -> Tuple[str, int, int]:
    """Split a tmux target like "work:2.0" into (session, window, pane).

    Session names may contain colons, so the last colon separates the
    window part. Missing or unparseable indices become 0.

    Examples:
        "work:2.0"   -> ("work", 2, 0)
        "my:proj:1.3" -> ("my:proj", 1, 3)
        "work"       -> ("work", 0, 0)
        ""           -> ("", 0, 0)
    """
    if not target:
        return "", 0, 0

    session_name, sep, remainder = target.rpartition(":")
    if not sep:
        return target, 0, 0

    window, dot, pane = remainder.partition(".")
    if not dot:
        return session_name, _parse_index(window), 0
    return session_name, _parse_index(window), _parse_index(pane)


def shorten_path(path: str) -> str:
    """Replace the home directory with ~ and shorten deep paths.

    Paths with more than four components keep the first component and
    the last two: "~/code/a/b/c/d" -> "~/.../c/d".
    """
    home = os.path.expanduser("~")
    if home and home != "~" and (path == home or path.startswith(home + os.sep)):
        path = "~" + path[len(home):]

    sep = os.sep
    parts = [p for p in path.split(sep) if p]
    if len(parts) <= 4:
        return path

    prefix = sep if path.startswith(sep) else ""
    return prefix + parts[0] + sep + "..." + sep + sep.join(parts[-2:])


def session_sort_key(session: Session) -> tuple:
    """Attached sessions first, then by tmux session, window, pane, id."""
    return (
        not session.jumpable,
        session.tmux_session,
        session.window_index,
        session.pane_index,
        session.session_id,
    )


def sort_sessions(sessions: List[Session]) -> List[Session]:
    """Return a new list sorted for display (detached sessions last)."""
    return sorted(sessions, key=session_sort_key)
