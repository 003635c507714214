"""
Protocol definitions for external dependencies.

These interfaces allow dependency injection for testing, enabling us to
swap real implementations (tmux, process probes) with mock
implementations in tests.
"""

from dataclasses import dataclass
from typing import List, Protocol, runtime_checkable


@dataclass(frozen=True)
class PaneInfo:
    """tmux metadata for a single pane."""

    pane_pid: int
    session_name: str
    window_index: int
    pane_index: int

    @property
    def target(self) -> str:
        return f"{self.session_name}:{self.window_index}.{self.pane_index}"


@runtime_checkable
class LivenessProbe(Protocol):
    """Interface for checking whether a process is still running."""

    def is_alive(self, pid: int) -> bool:
        """Return False only when the process is definitely gone.

        Probe failures must answer True so that a broken probe never
        prunes a live session.
        """
        ...


@runtime_checkable
class TmuxInterface(Protocol):
    """Interface for tmux operations"""

    def capture_pane_text(self, target: str) -> str:
        """Capture the visible content of a pane.

        Args:
            target: tmux target "session:window.pane"

        Returns:
            Pane content, or "" on any failure
        """
        ...

    def list_panes(self) -> List[PaneInfo]:
        """List every pane on the server. Empty list if tmux isn't running."""
        ...

    def pane_target(self, pane_id: str) -> str:
        """Resolve a pane id ($TMUX_PANE, e.g. "%3") to "session:window.pane".

        Returns "" on any failure.
        """
        ...

    def show_window_option(self, target: str, option: str) -> str:
        """Value of a window-local option, or "" if unset."""
        ...

    def show_global_option(self, option: str) -> str:
        """Value of a global window option, or "" if unset."""
        ...

    def set_window_option(self, target: str, option: str, value: str) -> bool:
        """Set a window option on the window containing target."""
        ...

    def unset_window_option(self, target: str, option: str) -> bool:
        """Remove a window option from the window containing target."""
        ...

    def activate_target(self, target: str) -> None:
        """Switch or attach to target (replaces current process)."""
        ...
