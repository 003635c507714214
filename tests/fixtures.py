"""
Test fixtures and factories for claude-tmux unit tests.

Mock implementations of the tmux and liveness protocols, helpers for
writing event logs, and captured pane contents for the classifier.
"""

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple

from claude_tmux.protocols import PaneInfo


class MockTmux:
    """In-memory TmuxInterface.

    panes maps a target ("work:1.0") to its captured text. Window options
    are stored per window target ("work:1").
    """

    def __init__(self, panes: Optional[Dict[str, str]] = None, pane_infos: Optional[List[PaneInfo]] = None):
        self.panes: Dict[str, str] = dict(panes or {})
        self.pane_infos: List[PaneInfo] = list(pane_infos or [])
        self.pane_ids: Dict[str, str] = {}
        self.window_options: Dict[str, Dict[str, str]] = {}
        self.global_options: Dict[str, str] = {}
        self.captured: List[str] = []
        self.activated: List[str] = []

    @staticmethod
    def _window(target: str) -> str:
        session, _, rest = target.rpartition(":")
        return f"{session}:{rest.partition('.')[0]}"

    def capture_pane_text(self, target: str) -> str:
        self.captured.append(target)
        return self.panes.get(target, "")

    def list_panes(self) -> List[PaneInfo]:
        return list(self.pane_infos)

    def pane_target(self, pane_id: str) -> str:
        return self.pane_ids.get(pane_id, "")

    def show_window_option(self, target: str, option: str) -> str:
        return self.window_options.get(self._window(target), {}).get(option, "")

    def show_global_option(self, option: str) -> str:
        return self.global_options.get(option, "")

    def set_window_option(self, target: str, option: str, value: str) -> bool:
        self.window_options.setdefault(self._window(target), {})[option] = value
        return True

    def unset_window_option(self, target: str, option: str) -> bool:
        self.window_options.get(self._window(target), {}).pop(option, None)
        return True

    def activate_target(self, target: str) -> None:
        self.activated.append(target)


class MockLivenessProbe:
    """LivenessProbe where every pid is alive unless listed as dead."""

    def __init__(self, dead: Iterable[int] = ()):
        self.dead: Set[int] = set(dead)
        self.checked: List[int] = []

    def is_alive(self, pid: int) -> bool:
        self.checked.append(pid)
        return pid not in self.dead


def event_line(
    sid: str,
    event: str,
    ts: int = 1700000000,
    pid: int = 1000,
    cwd: str = "/home/dev/project",
    tmux: str = "",
    tool: str = "",
) -> str:
    """One event log line as the hook writes it."""
    return json.dumps({
        "ts": ts, "sid": sid, "event": event, "pid": pid,
        "cwd": cwd, "tmux": tmux, "tool": tool,
    }, separators=(",", ":"))


def write_log(path: Path, lines: Iterable[str]) -> Path:
    """Write raw lines to an event log, one per line."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{line}\n" for line in lines))
    return path


def numbered_lines(count: int) -> List[str]:
    return [event_line(f"s{i}", "stop", ts=i) for i in range(count)]


# =============================================================================
# Pane contents
# =============================================================================

PANE_CONTENT_BUSY = """
⏺ I'll look at the failing test first.

⏺ Bash(pytest tests/unit -x)
  ⎿  Running…

✻ Fiddle-faddling…
"""

PANE_CONTENT_DONE = """
⏺ All tests pass now.

✻ Worked for 2m 17s
"""

PANE_CONTENT_IDLE = """
⏺ All tests pass now.

✻ Worked for 2m 17s

────────────────────────────────────────────────────────────────
❯
────────────────────────────────────────────────────────────────
  ? for shortcuts
"""

PANE_CONTENT_PERMISSION = """
⏺ Bash(rm -rf build/)

 Bash command

   rm -rf build/
   Remove build artifacts

 Do you want to proceed?
 ❯ 1. Yes
   2. Yes, and don't ask again for rm commands in /home/dev/project
   3. No, and tell Claude what to do differently (esc)
"""

# Selector glyph lost to a rendering glitch; question and options survive
PANE_CONTENT_PERMISSION_GARBLED = """
 Do you want to proceed?
   1. Yes
   2. No, and tell Claude what to do differently (esc)
"""

PANE_CONTENT_MARKDOWN_LIST = """
⏺ Here is the plan:

  1. First, fix the parser
  2. Second, add tests

────────────────────────────────────────────────────────────────
❯
────────────────────────────────────────────────────────────────
"""

PANE_CONTENT_BUSY_WITH_MENU = """
 ❯ 1. Yes
   2. No

✳ Compiling…
"""

PANE_CONTENT_ANSI_IDLE = "\x1b[2m────\x1b[0m\n\x1b[1m❯\x1b[0m\u00a0\n"

PANE_CONTENT_ZERO_WIDTH_BUSY = "\u200b✢ Thinking…\u200d\n"


def pane(session: str, window: int, pane_index: int, pid: int) -> PaneInfo:
    return PaneInfo(pane_pid=pid, session_name=session, window_index=window, pane_index=pane_index)


def ps_output(rows: Iterable[Tuple[int, int, str]]) -> str:
    """Fake `ps -axo pid,ppid,comm` output."""
    lines = ["  PID  PPID COMM"]
    lines += [f"{pid:>5} {ppid:>5} {comm}" for pid, ppid, comm in rows]
    return "\n".join(lines) + "\n"
