"""
tmux window tagging from hook events.

Each hook event tags the window hosting the session with a
``@claude-state`` user option (busy / waiting / idle) so status-line
formats can use ``#{@claude-state}``. The window tab is also colored by
prefixing a ``#[fg=..,bg=..]`` directive to the window's status formats.

The user's own formats are saved on the first color change in
``@claude-saved-fmt`` / ``@claude-saved-curr-fmt`` and restored when the
session ends. GLOBAL_SENTINEL marks a window that had no local override.
"""

import logging
from typing import Optional

from .protocols import TmuxInterface
from .session_state import status_for_event
from .status_constants import EVENT_SESSION_END, STATUS_BUSY, STATUS_IDLE, STATUS_WAITING

logger = logging.getLogger(__name__)

STATE_OPTION = "@claude-state"
SAVED_FORMAT_OPTION = "@claude-saved-fmt"
SAVED_CURRENT_FORMAT_OPTION = "@claude-saved-curr-fmt"
FORMAT_OPTION = "window-status-format"
CURRENT_FORMAT_OPTION = "window-status-current-format"
GLOBAL_SENTINEL = "__global__"

# status -> (background, foreground)
TAB_COLORS = {
    STATUS_BUSY: ("yellow", "black"),
    STATUS_WAITING: ("blue", "white"),
    STATUS_IDLE: ("green", "black"),
}


class WindowStateTagger:
    """Applies hook events to the tmux window that hosts a session."""

    def __init__(self, tmux: TmuxInterface, color_tabs: bool = True):
        self.tmux = tmux
        self.color_tabs = color_tabs

    def apply(self, target: str, event_name: str) -> Optional[str]:
        """Tag the window of target for one event.

        Returns the state written, or None when the event sets no state
        (unknown events, or session-end which clears the tags).
        """
        if not target:
            return None

        if event_name == EVENT_SESSION_END:
            self.clear(target)
            return None

        state = status_for_event(event_name)
        if state is None:
            return None

        self.tmux.set_window_option(target, STATE_OPTION, state)
        if self.color_tabs:
            self._save_formats(target)
            self._color_tab(target, *TAB_COLORS[state])
        return state

    def _save_formats(self, target: str) -> None:
        if self.tmux.show_window_option(target, SAVED_FORMAT_OPTION):
            return
        fmt = self.tmux.show_window_option(target, FORMAT_OPTION)
        current_fmt = self.tmux.show_window_option(target, CURRENT_FORMAT_OPTION)
        self.tmux.set_window_option(target, SAVED_FORMAT_OPTION, fmt or GLOBAL_SENTINEL)
        self.tmux.set_window_option(target, SAVED_CURRENT_FORMAT_OPTION, current_fmt or GLOBAL_SENTINEL)

    def _base_format(self, target: str, saved_option: str, format_option: str) -> str:
        saved = self.tmux.show_window_option(target, saved_option)
        if not saved or saved == GLOBAL_SENTINEL:
            return self.tmux.show_global_option(format_option)
        return saved

    def _color_tab(self, target: str, background: str, foreground: str) -> None:
        base = self._base_format(target, SAVED_FORMAT_OPTION, FORMAT_OPTION)
        base_current = self._base_format(target, SAVED_CURRENT_FORMAT_OPTION, CURRENT_FORMAT_OPTION)
        self.tmux.set_window_option(
            target, FORMAT_OPTION, f"#[fg={foreground},bg={background}]{base}"
        )
        self.tmux.set_window_option(
            target, CURRENT_FORMAT_OPTION, f"#[fg={foreground},bg={background},bold]{base_current}"
        )

    def _restore_format(self, target: str, saved_option: str, format_option: str) -> None:
        saved = self.tmux.show_window_option(target, saved_option)
        if not saved or saved == GLOBAL_SENTINEL:
            self.tmux.unset_window_option(target, format_option)
        else:
            self.tmux.set_window_option(target, format_option, saved)

    def clear(self, target: str) -> None:
        """Restore the window's own formats and drop every claude-tmux option."""
        if self.color_tabs:
            self._restore_format(target, SAVED_FORMAT_OPTION, FORMAT_OPTION)
            self._restore_format(target, SAVED_CURRENT_FORMAT_OPTION, CURRENT_FORMAT_OPTION)
        for option in (STATE_OPTION, SAVED_FORMAT_OPTION, SAVED_CURRENT_FORMAT_OPTION):
            self.tmux.unset_window_option(target, option)
        logger.debug(f"Cleared window state for {target}")
