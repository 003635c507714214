"""
Textual TUI for picking a Claude session.

Lists every live session with its status, refreshes in a background
worker, and on Enter exits with the selected pane's tmux target so the
caller can switch to it once the terminal is released.
"""

import sys
from pathlib import Path
from typing import List, Optional

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import ScrollableContainer
from textual.widgets import Input, Static

from . import __version__
from .config import (
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_SPINNER_INTERVAL,
    DISCOVERY_EVENTS,
    get_refresh_interval,
    get_spinner_interval,
)
from .session import Session
from .snapshot import SessionMonitor, build_monitor
from .status_constants import SPINNER_FRAMES
from .tui_logic import (
    HELP_FILTER,
    HELP_NORMAL,
    any_busy,
    clamp_cursor,
    filter_sessions,
    jump_target_for,
    render_session_list,
    restore_cursor,
    selected_session,
)


class SessionPickerTUI(App):
    """claude-tmux session picker"""

    # Keep the hidden filter input from grabbing focus on start
    AUTO_FOCUS = None

    CSS_PATH = "tui.tcss"

    BINDINGS = [
        ("q", "quit", "Quit"),
        Binding("escape", "cancel", "Quit / clear filter", priority=True),
        ("ctrl+c", "quit", "Quit"),
        ("j", "cursor_down", "Down"),
        ("down", "cursor_down", "Down"),
        ("k", "cursor_up", "Up"),
        ("up", "cursor_up", "Up"),
        ("g", "cursor_top", "Top"),
        ("G", "cursor_bottom", "Bottom"),
        ("enter", "jump", "Jump"),
        ("slash", "start_filter", "Filter"),
    ]

    def __init__(
        self,
        monitor: SessionMonitor,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        spinner_interval: float = DEFAULT_SPINNER_INTERVAL,
    ):
        super().__init__()
        self.monitor = monitor
        self.refresh_interval = refresh_interval
        self.spinner_interval = spinner_interval
        self.sessions: List[Session] = []
        self.filtered: List[Session] = []
        self.cursor = 0
        self.filter_text = ""
        self.filtering = False
        self.spinner_frame = 0
        self.error: Optional[str] = None

    def compose(self) -> ComposeResult:
        yield Static("", id="title")
        yield Input(placeholder="filter sessions...", max_length=64, id="filter-input")
        yield Static("", id="filter-label")
        yield Static("", id="error-line")
        with ScrollableContainer(id="sessions-container"):
            yield Static("", id="session-list")
        yield Static(HELP_NORMAL, id="help-text")

    def on_mount(self) -> None:
        self.title = f"claude-tmux v{__version__}"
        self.query_one("#filter-input", Input).disabled = True

        # First poll runs inline so the first frame already has data
        self._apply_sessions(self.monitor.poll(), self.monitor.last_error)

        self.set_interval(self.refresh_interval, self.refresh_sessions)
        self.set_interval(self.spinner_interval, self.advance_spinner)

    # -- refresh ------------------------------------------------------------

    def refresh_sessions(self) -> None:
        self._fetch_sessions_async()

    @work(thread=True, exclusive=True, group="refresh_sessions")
    def _fetch_sessions_async(self) -> None:
        """Poll off the main thread, then apply to UI."""
        sessions = self.monitor.poll()
        self.call_from_thread(self._apply_sessions, sessions, self.monitor.last_error)

    def _apply_sessions(self, sessions: List[Session], error: Optional[str] = None) -> None:
        """Apply a new snapshot on the main thread (no I/O)."""
        previous = selected_session(self.filtered, self.cursor)
        previous_id = previous.session_id if previous else None

        self.error = error
        self.sessions = sessions
        self.filtered = filter_sessions(sessions, self.filter_text)
        self.cursor = restore_cursor(self.filtered, previous_id, self.cursor)
        self._render()

    def advance_spinner(self) -> None:
        self.spinner_frame = (self.spinner_frame + 1) % len(SPINNER_FRAMES)
        if any_busy(self.filtered):
            self._render_list()

    # -- rendering ----------------------------------------------------------

    def _render(self) -> None:
        self.query_one("#title", Static).update(f"Claude Sessions ({len(self.filtered)})")

        label = self.query_one("#filter-label", Static)
        label.update(f"filter: {self.filter_text}")
        label.set_class(bool(self.filter_text) and not self.filtering, "visible")

        error_line = self.query_one("#error-line", Static)
        error_line.update(f"Error: {self.error}" if self.error else "")
        error_line.set_class(bool(self.error), "visible")

        self.query_one("#help-text", Static).update(HELP_FILTER if self.filtering else HELP_NORMAL)
        self._render_list()

    def _render_list(self) -> None:
        self.query_one("#session-list", Static).update(
            render_session_list(self.sessions, self.filtered, self.cursor, self.spinner_frame)
        )

    def _set_filter(self, text: str) -> None:
        self.filter_text = text
        self.filtered = filter_sessions(self.sessions, text)
        self.cursor = clamp_cursor(self.cursor, len(self.filtered))
        self._render()

    # -- actions ------------------------------------------------------------

    def action_cursor_down(self) -> None:
        if self.cursor < len(self.filtered) - 1:
            self.cursor += 1
            self._render_list()

    def action_cursor_up(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1
            self._render_list()

    def action_cursor_top(self) -> None:
        self.cursor = 0
        self._render_list()

    def action_cursor_bottom(self) -> None:
        self.cursor = clamp_cursor(len(self.filtered) - 1, len(self.filtered))
        self._render_list()

    def action_jump(self) -> None:
        target = jump_target_for(self.filtered, self.cursor)
        if target:
            self.exit(target)

    def action_start_filter(self) -> None:
        filter_input = self.query_one("#filter-input", Input)
        filter_input.disabled = False
        filter_input.value = self.filter_text
        filter_input.add_class("visible")
        self.filtering = True
        filter_input.focus()
        self._render()

    def _stop_filter(self) -> None:
        filter_input = self.query_one("#filter-input", Input)
        filter_input.remove_class("visible")
        filter_input.disabled = True
        self.filtering = False
        self.set_focus(None)

    def action_cancel(self) -> None:
        """Esc clears the filter while filtering, otherwise quits."""
        if not self.filtering:
            self.exit()
            return
        self._stop_filter()
        self.query_one("#filter-input", Input).value = ""
        self._set_filter("")

    def on_input_changed(self, event: Input.Changed) -> None:
        if self.filtering:
            self._set_filter(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter in the filter keeps the filter and jumps to the first match."""
        self._stop_filter()
        self._set_filter(event.value)
        self.action_jump()


def run_tui(discovery: str = DISCOVERY_EVENTS, log_path: Optional[Path] = None) -> None:
    """Run the picker, then jump to the chosen pane."""
    if not sys.stdout.isatty():
        print("Error: Must run in a TTY terminal", file=sys.stderr)
        sys.exit(1)

    app = SessionPickerTUI(
        build_monitor(discovery, log_path),
        refresh_interval=get_refresh_interval(),
        spinner_interval=get_spinner_interval(),
    )
    target = app.run()
    if target:
        from .implementations import RealTmux

        RealTmux().activate_target(target)
