"""
Process scan discovery.

Finds running Claude Code processes without relying on the hook log:
list processes with ps, drop sub-agents spawned by another Claude
process, resolve each working directory, then map each process to its
tmux pane by walking up the parent chain until a pane's shell PID is hit.
"""

import logging
import os
import subprocess
from typing import Dict, List, Optional, Tuple

from .protocols import PaneInfo, TmuxInterface
from .session import Session

logger = logging.getLogger(__name__)

CLAUDE_COMMAND = "claude"
MAX_PARENT_HOPS = 25


def _run(cmd: List[str]) -> Optional[str]:
    """Run a command and return stdout, or None on any failure."""
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=5)
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"{cmd[0]} failed: {e}")
        return None
    if result.returncode != 0:
        return None
    return result.stdout


def parse_processes(ps_output: str, command: str = CLAUDE_COMMAND) -> List[Session]:
    """Parse `ps -axo pid,ppid,comm` output into top-level Claude sessions.

    A Claude process whose parent is also a Claude process is a sub-agent
    and is skipped.
    """
    matches: List[Tuple[int, int]] = []
    for line in ps_output.splitlines():
        fields = line.split()
        if len(fields) < 3:
            continue
        try:
            pid = int(fields[0])
            ppid = int(fields[1])
        except ValueError:
            continue
        if os.path.basename(fields[2]) == command:
            matches.append((pid, ppid))

    claude_pids = {pid for pid, _ in matches}
    return [
        Session(pid=pid, ppid=ppid)
        for pid, ppid in matches
        if ppid not in claude_pids
    ]


def parse_process_tree(ps_output: str) -> Dict[int, int]:
    """Parse `ps -axo pid,ppid` output into a pid -> ppid map."""
    tree: Dict[int, int] = {}
    for line in ps_output.splitlines():
        fields = line.split()
        if len(fields) < 2:
            continue
        try:
            tree[int(fields[0])] = int(fields[1])
        except ValueError:
            continue
    return tree


def resolve_work_dir(pid: int) -> str:
    """Working directory of a process via lsof, falling back to /proc."""
    output = _run(["lsof", "-p", str(pid), "-Fn", "-a", "-d", "cwd"])
    if output:
        for line in output.splitlines():
            if line.startswith("n") and len(line) > 1:
                return line[1:]
    try:
        return os.path.realpath(os.readlink(f"/proc/{pid}/cwd"))
    except OSError:
        return ""


def find_pane_for_pid(
    pid: int,
    panes_by_pid: Dict[int, PaneInfo],
    process_tree: Dict[int, int],
) -> Optional[PaneInfo]:
    """Walk up the parent chain from pid until a tmux pane PID is found."""
    current = pid
    for _ in range(MAX_PARENT_HOPS):
        pane = panes_by_pid.get(current)
        if pane is not None:
            return pane
        parent = process_tree.get(current)
        if parent is None or parent <= 1:
            break
        current = parent
    return None


def map_panes(sessions: List[Session], tmux: TmuxInterface, process_tree: Dict[int, int]) -> None:
    """Fill in tmux targets for sessions running inside tmux panes."""
    panes_by_pid = {pane.pane_pid: pane for pane in tmux.list_panes()}
    if not panes_by_pid:
        return
    for session in sessions:
        pane = find_pane_for_pid(session.pid, panes_by_pid, process_tree)
        if pane is not None:
            session.set_tmux_target(pane.target)


def scan_sessions(tmux: TmuxInterface) -> List[Session]:
    """Discover Claude sessions from the process table.

    Sessions get a synthetic id ("pid-<pid>") since there is no hook
    session id to go by. Status is left unknown for the pane classifier.
    """
    ps_output = _run(["ps", "-axo", "pid,ppid,comm"])
    if ps_output is None:
        return []

    sessions = parse_processes(ps_output)
    for session in sessions:
        session.session_id = f"pid-{session.pid}"
        work_dir = resolve_work_dir(session.pid)
        if work_dir:
            session.set_work_dir(work_dir)

    tree_output = _run(["ps", "-axo", "pid,ppid"])
    if tree_output is not None:
        map_panes(sessions, tmux, parse_process_tree(tree_output))

    return sessions
