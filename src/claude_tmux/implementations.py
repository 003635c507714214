"""
Real implementations of protocol interfaces.

These are production implementations that use libtmux for tmux
operations.
"""

import logging
import os
from typing import List, Optional

import libtmux
from libtmux.exc import LibTmuxException

from .protocols import PaneInfo

logger = logging.getLogger(__name__)

# Tab-separated so session names with spaces survive
LIST_PANES_FORMAT = "#{pane_pid}\t#{session_name}\t#{window_index}\t#{pane_index}"
PANE_TARGET_FORMAT = "#{session_name}:#{window_index}.#{pane_index}"


def parse_list_panes_output(lines: List[str]) -> List[PaneInfo]:
    """Parse `tmux list-panes -a -F LIST_PANES_FORMAT` output.

    Lines that don't have four fields or have non-numeric ids are skipped.
    """
    panes = []
    for line in lines:
        fields = line.split("\t")
        if len(fields) != 4:
            continue
        try:
            pane_pid = int(fields[0])
            window_index = int(fields[2])
            pane_index = int(fields[3])
        except ValueError:
            continue
        panes.append(PaneInfo(
            pane_pid=pane_pid,
            session_name=fields[1],
            window_index=window_index,
            pane_index=pane_index,
        ))
    return panes


def window_target(target: str) -> str:
    """Strip the pane part of "session:window.pane"."""
    session_part, sep, remainder = target.rpartition(":")
    if not sep:
        return target
    return f"{session_part}:{remainder.partition('.')[0]}"


class RealTmux:
    """Production implementation of TmuxInterface using libtmux."""

    def __init__(self, socket_name: Optional[str] = None):
        """Initialize with optional socket name for test isolation.

        If no socket_name is provided, checks CLAUDE_TMUX_SOCKET env var.
        """
        self._socket_name = socket_name or os.environ.get("CLAUDE_TMUX_SOCKET")
        self._server: Optional[libtmux.Server] = None

    @property
    def server(self) -> libtmux.Server:
        """Lazy-load the tmux server connection."""
        if self._server is None:
            if self._socket_name:
                self._server = libtmux.Server(socket_name=self._socket_name)
            else:
                self._server = libtmux.Server()
        return self._server

    def _cmd(self, *args: str) -> Optional[List[str]]:
        """Run a tmux command, returning stdout lines or None on failure."""
        try:
            result = self.server.cmd(*args)
        except LibTmuxException as e:
            logger.debug(f"tmux {args[0]} failed: {e}")
            return None
        if result.stderr:
            logger.debug(f"tmux {args[0]} failed: {' '.join(result.stderr)}")
            return None
        return result.stdout

    def capture_pane_text(self, target: str) -> str:
        lines = self._cmd("capture-pane", "-p", "-t", target)
        if lines is None:
            return ""
        return "\n".join(lines)

    def list_panes(self) -> List[PaneInfo]:
        lines = self._cmd("list-panes", "-a", "-F", LIST_PANES_FORMAT)
        if lines is None:
            return []
        return parse_list_panes_output(lines)

    def pane_target(self, pane_id: str) -> str:
        lines = self._cmd("display-message", "-t", pane_id, "-p", PANE_TARGET_FORMAT)
        if not lines:
            return ""
        return lines[0].strip()

    def show_window_option(self, target: str, option: str) -> str:
        lines = self._cmd("show-window-option", "-t", window_target(target), "-v", option)
        if not lines:
            return ""
        return lines[0]

    def show_global_option(self, option: str) -> str:
        lines = self._cmd("show-option", "-gv", option)
        if not lines:
            return ""
        return lines[0]

    def set_window_option(self, target: str, option: str, value: str) -> bool:
        return self._cmd("set-window-option", "-t", window_target(target), option, value) is not None

    def unset_window_option(self, target: str, option: str) -> bool:
        return self._cmd("set-window-option", "-u", "-t", window_target(target), option) is not None

    def activate_target(self, target: str) -> None:
        """Jump to target, replacing the current process.

        Inside tmux this switches the client so a popup closes cleanly;
        outside it attaches.
        """
        socket_args = ["-L", self._socket_name] if self._socket_name else []
        if os.environ.get("TMUX"):
            os.execlp("tmux", "tmux", *socket_args, "switch-client", "-t", target)
        else:
            os.execlp("tmux", "tmux", *socket_args, "attach-session", "-t", target)
