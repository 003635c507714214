"""
Session snapshot assembly.

One poll = read the whole event log, fold it, prune dead processes,
resolve pane conflicts, sort. Nothing survives between polls except the
last published list, which SessionMonitor keeps so a failed poll doesn't
blank the UI.
"""

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .config import DISCOVERY_SCAN
from .event_log import EventLogError, read_events
from .pid_utils import SignalLivenessProbe
from .protocols import LivenessProbe, TmuxInterface
from .scanner import scan_sessions
from .session import Session, sort_sessions
from .session_state import dedup_by_target, fold_events, prune_dead_sessions
from .status_constants import STATUS_UNKNOWN
from .status_detector import PaneStatusDetector
from .status_patterns import StatusPatterns

logger = logging.getLogger(__name__)


def read_sessions(log_path: Path, probe: Optional[LivenessProbe] = None) -> List[Session]:
    """Derive the current sessions from the event log.

    Returns an empty list if the log does not exist.

    Raises:
        EventLogError: the log exists but could not be read
    """
    probe = probe or SignalLivenessProbe()
    sessions = fold_events(read_events(log_path))
    sessions = prune_dead_sessions(sessions, probe)
    return sort_sessions(dedup_by_target(sessions.values()))


def scan_and_classify(tmux: TmuxInterface, patterns: Optional[StatusPatterns] = None) -> List[Session]:
    """Discover sessions from the process table and classify their panes."""
    sessions = scan_sessions(tmux)
    detector = PaneStatusDetector(tmux, patterns)
    return sort_sessions(detector.capture_statuses(sessions))


def fill_unknown_statuses(sessions: List[Session], detector: PaneStatusDetector) -> List[Session]:
    """Classify the panes of attached sessions the event log left unknown."""
    return [
        replace(s, status=detector.detect_status(s))
        if s.status == STATUS_UNKNOWN and s.jumpable else s
        for s in sessions
    ]


class SessionMonitor:
    """Produces one session snapshot per poll.

    Each poll recomputes from scratch. When a poll fails, the previous
    snapshot stays published and the error is kept in last_error.
    """

    def __init__(
        self,
        log_path: Path,
        probe: Optional[LivenessProbe] = None,
        tmux: Optional[TmuxInterface] = None,
        patterns: Optional[StatusPatterns] = None,
        discovery: str = "events",
    ):
        self.log_path = Path(log_path)
        self._probe = probe or SignalLivenessProbe()
        self._tmux = tmux
        self._patterns = patterns
        self.discovery = discovery
        self.sessions: List[Session] = []
        self.last_error: Optional[str] = None

    def _collect(self) -> List[Session]:
        if self.discovery == DISCOVERY_SCAN:
            if self._tmux is None:
                from .implementations import RealTmux
                self._tmux = RealTmux()
            return scan_and_classify(self._tmux, self._patterns)

        sessions = read_sessions(self.log_path, self._probe)
        if self._tmux is not None:
            sessions = fill_unknown_statuses(sessions, PaneStatusDetector(self._tmux, self._patterns))
        return sessions

    def poll(self) -> List[Session]:
        """Refresh the snapshot. Returns the published session list."""
        try:
            sessions = self._collect()
        except EventLogError as e:
            if str(e) != self.last_error:
                logger.error(f"Session poll failed: {e}")
            self.last_error = str(e)
            return self.sessions
        self.last_error = None
        self.sessions = sessions
        return sessions


def build_monitor(discovery: str = "events", log_path: Optional[Path] = None) -> SessionMonitor:
    """SessionMonitor wired from the user's config.

    Inside tmux the monitor also gets a tmux handle so sessions the event
    log left unknown are classified from their panes.
    """
    from .config import get_event_log_path, get_question_phrases
    from .status_patterns import get_patterns

    tmux = None
    if os.environ.get("TMUX"):
        from .implementations import RealTmux
        tmux = RealTmux()
    return SessionMonitor(
        log_path or get_event_log_path(),
        tmux=tmux,
        patterns=get_patterns(get_question_phrases()),
        discovery=discovery,
    )
