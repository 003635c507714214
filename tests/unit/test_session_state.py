"""
Tests for folding the event log into sessions, pruning and dedup.
"""

from claude_tmux.event_log import RawEvent
from claude_tmux.session import Session
from claude_tmux.session_state import (
    dedup_by_target,
    fold_events,
    prune_dead_sessions,
    status_for_event,
)
from claude_tmux.status_constants import (
    ACTION_INPUT,
    ACTION_PERMISSION,
    ACTION_THINKING,
    STATUS_BUSY,
    STATUS_IDLE,
    STATUS_UNKNOWN,
    STATUS_WAITING,
)

from tests.fixtures import MockLivenessProbe


def ev(sid, event, ts=100, pid=1000, cwd="/home/dev/project", tmux="", tool=""):
    return RawEvent(timestamp=ts, session_id=sid, event=event, pid=pid, cwd=cwd, tmux=tmux, tool=tool)


def fold_one(*events):
    sessions = fold_events(events)
    assert len(sessions) == 1
    return next(iter(sessions.values()))


class TestLifecycle:

    def test_session_start_creates_idle_session(self):
        session = fold_one(ev("a", "session-start", tmux="work:1.0"))
        assert session.status == STATUS_IDLE
        assert session.tmux_target == "work:1.0"
        assert session.tmux_session == "work"
        assert session.window_index == 1
        assert session.project_name == "project"

    def test_session_end_removes(self):
        sessions = fold_events([
            ev("a", "session-start"),
            ev("a", "user-prompt-submit"),
            ev("a", "session-end"),
        ])
        assert sessions == {}

    def test_ended_session_not_resurrected_by_other_ids(self):
        sessions = fold_events([
            ev("a", "session-start"),
            ev("a", "session-end"),
            ev("b", "session-start"),
            ev("b", "stop"),
        ])
        assert list(sessions) == ["b"]

    def test_session_end_for_unknown_id_is_noop(self):
        assert fold_events([ev("a", "session-end")]) == {}

    def test_unknown_id_is_bootstrapped(self):
        session = fold_one(ev("a", "pre-tool-use", tmux="work:2.1", tool="Bash"))
        assert session.status == STATUS_BUSY
        assert session.tmux_target == "work:2.1"
        assert session.action == "Bash"

    def test_restart_replaces_record(self):
        session = fold_one(
            ev("a", "session-start", tmux="old:1.0"),
            ev("a", "user-prompt-submit"),
            ev("a", "session-start", tmux="new:3.0", ts=200),
        )
        assert session.tmux_target == "new:3.0"
        assert session.status == STATUS_IDLE
        assert session.action == ""

    def test_empty_session_id_ignored(self):
        assert fold_events([ev("", "session-start")]) == {}

    def test_unrecognized_event_keeps_status(self):
        session = fold_one(ev("a", "stop"), ev("a", "something-new", ts=300))
        assert session.status == STATUS_IDLE
        assert session.last_update == 300

    def test_bootstrap_from_unrecognized_event_is_unknown(self):
        assert fold_one(ev("a", "something-new")).status == STATUS_UNKNOWN


class TestTargetFreeze:

    def test_target_set_at_creation_is_kept(self):
        session = fold_one(
            ev("a", "session-start", tmux="work:1.0"),
            ev("a", "user-prompt-submit", tmux="other:5.2"),
            ev("a", "stop", tmux=""),
        )
        assert session.tmux_target == "work:1.0"

    def test_detached_session_stays_detached(self):
        session = fold_one(
            ev("a", "session-start", tmux=""),
            ev("a", "user-prompt-submit", tmux="work:1.0"),
        )
        assert session.tmux_target == ""
        assert not session.jumpable


class TestFieldRefresh:

    def test_cwd_refreshed_when_present(self):
        session = fold_one(
            ev("a", "session-start", cwd="/src/one"),
            ev("a", "stop", cwd="/src/two"),
            ev("a", "stop", cwd=""),
        )
        assert session.work_dir == "/src/two"
        assert session.project_name == "two"

    def test_pid_refreshed_when_nonzero(self):
        session = fold_one(
            ev("a", "session-start", pid=10),
            ev("a", "stop", pid=20),
            ev("a", "stop", pid=0),
        )
        assert session.pid == 20

    def test_last_update_follows_log_order(self):
        session = fold_one(ev("a", "session-start", ts=500), ev("a", "stop", ts=100))
        assert session.last_update == 100


class TestStatusTransitions:

    def test_prompt_submit_thinks(self):
        session = fold_one(ev("a", "session-start"), ev("a", "user-prompt-submit"))
        assert (session.status, session.action) == (STATUS_BUSY, ACTION_THINKING)

    def test_pre_tool_use_without_tool_keeps_action(self):
        session = fold_one(ev("a", "user-prompt-submit"), ev("a", "pre-tool-use", tool=""))
        assert (session.status, session.action) == (STATUS_BUSY, ACTION_THINKING)

    def test_post_tool_use_clears_action(self):
        session = fold_one(ev("a", "pre-tool-use", tool="Read"), ev("a", "post-tool-use"))
        assert (session.status, session.action) == (STATUS_BUSY, "")

    def test_post_tool_use_failure_clears_action(self):
        session = fold_one(ev("a", "pre-tool-use", tool="Read"), ev("a", "post-tool-use-failure"))
        assert (session.status, session.action) == (STATUS_BUSY, "")

    def test_stop_is_idle(self):
        session = fold_one(ev("a", "pre-tool-use", tool="Read"), ev("a", "stop"))
        assert (session.status, session.action) == (STATUS_IDLE, "")

    def test_permission_request_waits(self):
        session = fold_one(ev("a", "pre-tool-use", tool="Bash"), ev("a", "permission-request"))
        assert (session.status, session.action) == (STATUS_WAITING, ACTION_PERMISSION)

    def test_notification_permission_waits(self):
        session = fold_one(ev("a", "notification-permission"))
        assert (session.status, session.action) == (STATUS_WAITING, ACTION_PERMISSION)

    def test_elicitation_waits_for_input(self):
        session = fold_one(ev("a", "notification-elicitation"))
        assert (session.status, session.action) == (STATUS_WAITING, ACTION_INPUT)

    def test_notification_idle(self):
        session = fold_one(ev("a", "notification-elicitation"), ev("a", "notification-idle"))
        assert (session.status, session.action) == (STATUS_IDLE, "")


class TestIdempotence:

    def test_folding_twice_gives_same_result(self):
        events = [
            ev("a", "session-start", tmux="work:1.0"),
            ev("b", "pre-tool-use", tool="Edit"),
            ev("a", "stop", ts=200),
        ]
        assert fold_events(events) == fold_events(events)

    def test_fold_accepts_generator(self):
        sessions = fold_events(ev(sid, "stop") for sid in ["a", "b"])
        assert list(sessions) == ["a", "b"]


class TestPruneDeadSessions:

    def test_drops_dead_pids(self):
        sessions = fold_events([ev("a", "stop", pid=10), ev("b", "stop", pid=20)])
        alive = prune_dead_sessions(sessions, MockLivenessProbe(dead=[10]))
        assert list(alive) == ["b"]

    def test_keeps_sessions_without_pid(self):
        sessions = fold_events([ev("a", "stop", pid=0)])
        probe = MockLivenessProbe(dead=[0])
        assert list(prune_dead_sessions(sessions, probe)) == ["a"]
        assert probe.checked == []

    def test_does_not_mutate_input(self):
        sessions = fold_events([ev("a", "stop", pid=10)])
        prune_dead_sessions(sessions, MockLivenessProbe(dead=[10]))
        assert list(sessions) == ["a"]


def make(sid, target="", last_update=0):
    session = Session(session_id=sid, last_update=last_update)
    session.set_tmux_target(target)
    return session


class TestDedupByTarget:

    def test_newest_claim_wins(self):
        old, new = make("old", "work:1.0", 100), make("new", "work:1.0", 200)
        assert dedup_by_target([old, new]) == [new]
        assert dedup_by_target([new, old]) == [new]

    def test_tie_keeps_first_seen(self):
        first, second = make("first", "work:1.0", 100), make("second", "work:1.0", 100)
        assert dedup_by_target([first, second]) == [first]

    def test_distinct_targets_all_kept(self):
        sessions = [make("a", "work:1.0"), make("b", "work:1.1"), make("c", "work:2.0")]
        assert dedup_by_target(sessions) == sessions

    def test_detached_sessions_all_kept(self):
        sessions = [make("a"), make("b"), make("c", "work:1.0")]
        assert dedup_by_target(sessions) == sessions

    def test_preserves_input_order(self):
        a, b, c = make("a", "x:1.0", 5), make("b", "y:1.0", 1), make("c", "x:1.0", 1)
        assert dedup_by_target(iter([a, b, c])) == [a, b]


class TestStatusForEvent:

    def test_mapped_events(self):
        assert status_for_event("session-start") == STATUS_IDLE
        assert status_for_event("pre-tool-use") == STATUS_BUSY
        assert status_for_event("permission-request") == STATUS_WAITING

    def test_unmapped_events(self):
        assert status_for_event("session-end") is None
        assert status_for_event("bogus") is None
