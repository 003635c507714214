"""
Event-log state machine for Claude sessions.

Folds the hook event stream into a map of session records, then prunes
sessions whose process has died and resolves duplicate claims on the
same tmux pane.

Design:
- The map is rebuilt from an empty dict on every call. Nothing is
  carried between polls, so a bad intermediate state heals itself as
  soon as the log is coherent again.
- Events are applied strictly in log order. Timestamps are recorded but
  never used to reorder.
- A session's tmux target comes only from the event that created it.
  Later events carry whatever pane was focused when the hook fired, which
  is not necessarily the session's own pane.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from .event_log import RawEvent
from .protocols import LivenessProbe
from .session import Session
from .status_constants import (
    ACTION_INPUT,
    ACTION_PERMISSION,
    ACTION_THINKING,
    EVENT_NOTIFICATION_ELICITATION,
    EVENT_NOTIFICATION_IDLE,
    EVENT_NOTIFICATION_PERMISSION,
    EVENT_PERMISSION_REQUEST,
    EVENT_POST_TOOL_USE,
    EVENT_POST_TOOL_USE_FAILURE,
    EVENT_PRE_TOOL_USE,
    EVENT_SESSION_END,
    EVENT_SESSION_START,
    EVENT_STOP,
    EVENT_USER_PROMPT_SUBMIT,
    STATUS_BUSY,
    STATUS_IDLE,
    STATUS_WAITING,
)


# Event -> (status, action). An action of None leaves the current action alone.
_EVENT_STATUS_MAP: Dict[str, Tuple[str, Optional[str]]] = {
    EVENT_USER_PROMPT_SUBMIT: (STATUS_BUSY, ACTION_THINKING),
    EVENT_PRE_TOOL_USE: (STATUS_BUSY, None),
    EVENT_POST_TOOL_USE: (STATUS_BUSY, ""),
    EVENT_POST_TOOL_USE_FAILURE: (STATUS_BUSY, ""),
    EVENT_STOP: (STATUS_IDLE, ""),
    EVENT_NOTIFICATION_IDLE: (STATUS_IDLE, ""),
    EVENT_PERMISSION_REQUEST: (STATUS_WAITING, ACTION_PERMISSION),
    EVENT_NOTIFICATION_PERMISSION: (STATUS_WAITING, ACTION_PERMISSION),
    EVENT_NOTIFICATION_ELICITATION: (STATUS_WAITING, ACTION_INPUT),
}


def _new_session(event: RawEvent) -> Session:
    """Create a record from the event that first mentions a session."""
    session = Session(session_id=event.session_id, pid=event.pid, last_update=event.timestamp)
    session.set_work_dir(event.cwd)
    session.set_tmux_target(event.tmux)
    return session


def apply_event_status(session: Session, event: RawEvent) -> None:
    """Update a session's status and action for one event.

    Unrecognized events leave both untouched.
    """
    mapping = _EVENT_STATUS_MAP.get(event.event)
    if mapping is None:
        return

    status, action = mapping
    session.status = status
    if event.event == EVENT_PRE_TOOL_USE:
        if event.tool:
            session.action = event.tool
    elif action is not None:
        session.action = action


def fold_events(events: Iterable[RawEvent]) -> Dict[str, Session]:
    """Build the session map from an ordered event stream.

    Returns:
        Dict of session_id -> Session, in order of first appearance
    """
    sessions: Dict[str, Session] = {}

    for event in events:
        if not event.session_id:
            continue

        if event.event == EVENT_SESSION_START:
            # A restarted session replaces any earlier record for the same id
            sessions.pop(event.session_id, None)
            session = _new_session(event)
            session.status = STATUS_IDLE
            sessions[event.session_id] = session
            continue

        if event.event == EVENT_SESSION_END:
            sessions.pop(event.session_id, None)
            continue

        session = sessions.get(event.session_id)
        if session is None:
            session = _new_session(event)
            sessions[event.session_id] = session

        session.last_update = event.timestamp
        if event.cwd:
            session.set_work_dir(event.cwd)
        if event.pid != 0:
            session.pid = event.pid
        # tmux_target stays as set at creation

        apply_event_status(session, event)

    return sessions


def prune_dead_sessions(sessions: Dict[str, Session], probe: LivenessProbe) -> Dict[str, Session]:
    """Drop sessions whose owning process is no longer running.

    Sessions without a positive pid can't be checked and are kept.
    """
    return {
        session_id: session
        for session_id, session in sessions.items()
        if session.pid <= 0 or probe.is_alive(session.pid)
    }


def dedup_by_target(sessions: Iterable[Session]) -> List[Session]:
    """Keep at most one session per non-empty tmux target.

    A pane hosts one Claude process at a time, so competing claims come
    from stale log entries. The claim with the latest last_update wins;
    on an exact tie the session seen first wins. Detached sessions are
    always kept.
    """
    candidates = list(sessions)
    owners: Dict[str, Session] = {}

    for session in candidates:
        if not session.tmux_target:
            continue
        current = owners.get(session.tmux_target)
        if current is None or session.last_update > current.last_update:
            owners[session.tmux_target] = session

    return [
        session for session in candidates
        if not session.tmux_target or owners[session.tmux_target] is session
    ]


def status_for_event(event_name: str) -> Optional[str]:
    """Status a single event puts its session in, or None if it sets none."""
    if event_name == EVENT_SESSION_START:
        return STATUS_IDLE
    mapping = _EVENT_STATUS_MAP.get(event_name)
    if mapping is None:
        return None
    return mapping[0]
