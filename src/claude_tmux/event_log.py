"""
Event log reading, writing and rotation.

The hook writes one JSON object per line to ~/.claude-tmux/events.log:

    {"ts":1700000000,"sid":"abc","event":"pre-tool-use","pid":4242,
     "cwd":"/home/me/proj","tmux":"work:2.0","tool":"Bash"}

The log is append-only and never locked. Readers tolerate anything:
a line that fails to parse (including one caught mid-append) is skipped
and picked up on the next poll once complete.
"""

import json
import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_LINES = 1000
DEFAULT_KEEP_LINES = 500


class EventLogError(Exception):
    """Reading or rewriting the event log failed (permissions, disk, ...)."""


class MalformedEventError(ValueError):
    """A log line is not a valid event object."""


@dataclass(frozen=True)
class RawEvent:
    """One parsed line of the event log."""

    timestamp: int = 0
    session_id: str = ""
    event: str = ""
    pid: int = 0
    cwd: str = ""
    tmux: str = ""
    tool: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the on-disk field names."""
        return {
            "ts": self.timestamp,
            "sid": self.session_id,
            "event": self.event,
            "pid": self.pid,
            "cwd": self.cwd,
            "tmux": self.tmux,
            "tool": self.tool,
        }


def _int_field(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedEventError(f"field {key!r} must be an integer")
    return value


def _str_field(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedEventError(f"field {key!r} must be a string")
    return value


def parse_event_line(line: str) -> RawEvent:
    """Parse one log line into a RawEvent.

    Unknown fields are ignored; missing fields take their zero value.

    Raises:
        MalformedEventError: line is not JSON, not an object, or a known
            field has the wrong type
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise MalformedEventError(str(e)) from e
    if not isinstance(data, dict):
        raise MalformedEventError("event line is not a JSON object")

    return RawEvent(
        timestamp=_int_field(data, "ts"),
        session_id=_str_field(data, "sid"),
        event=_str_field(data, "event"),
        pid=_int_field(data, "pid"),
        cwd=_str_field(data, "cwd"),
        tmux=_str_field(data, "tmux"),
        tool=_str_field(data, "tool"),
    )


def read_events(path: Path) -> Iterator[RawEvent]:
    """Lazily yield events from the log, in file order.

    Each call reopens the file, so the sequence can be re-read. Blank and
    malformed lines are skipped. A missing file yields nothing.

    Raises:
        EventLogError: the file exists but cannot be read
    """
    try:
        f = open(path, "r", encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return
    except OSError as e:
        raise EventLogError(f"failed to open event log {path}: {e}") from e

    with f:
        line_number = 0
        try:
            for line in f:
                line_number += 1
                if not line.strip():
                    continue
                try:
                    yield parse_event_line(line)
                except MalformedEventError as e:
                    logger.debug(f"Skipping malformed event log line {line_number}: {e}")
        except OSError as e:
            raise EventLogError(f"failed to read event log {path}: {e}") from e


def append_event(path: Path, event: RawEvent) -> None:
    """Append one event as a single JSON line.

    The line goes out in one write so concurrent appenders don't interleave.

    Raises:
        EventLogError: the log directory or file could not be written
    """
    line = json.dumps(event.to_dict(), ensure_ascii=False, separators=(",", ":")) + "\n"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(line)
    except OSError as e:
        raise EventLogError(f"failed to append to event log {path}: {e}") from e


def rotate_log(
    path: Path,
    max_lines: int = DEFAULT_MAX_LINES,
    keep_lines: int = DEFAULT_KEEP_LINES,
) -> bool:
    """Truncate the log to its last keep_lines lines once it exceeds max_lines.

    The new content is written to a temp file next to the log and renamed
    over it, so a concurrent reader sees either the old or the new file.

    Returns:
        True if the log was rewritten, False if it was absent or under threshold

    Raises:
        EventLogError: reading or rewriting failed
    """
    try:
        data = Path(path).read_bytes()
    except FileNotFoundError:
        return False
    except OSError as e:
        raise EventLogError(f"failed to read event log {path} for rotation: {e}") from e

    lines = data.split(b"\n")
    if lines and lines[-1] == b"":
        lines.pop()

    if len(lines) <= max_lines:
        return False

    kept = lines[-keep_lines:] if keep_lines > 0 else []
    content = b"".join(line + b"\n" for line in kept)

    temp_path: Optional[str] = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=str(Path(path).parent),
            prefix=f".{Path(path).name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            temp_path = f.name
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        # NamedTemporaryFile creates 0600; keep the log readable as before
        os.chmod(temp_path, stat.S_IMODE(os.stat(path).st_mode))
        os.replace(temp_path, path)
        temp_path = None
    except OSError as e:
        raise EventLogError(f"failed to write rotated event log {path}: {e}") from e
    finally:
        if temp_path:
            try:
                os.unlink(temp_path)
            except OSError:
                pass

    logger.info(f"Rotated event log {path}: {len(lines)} -> {len(kept)} lines")
    return True
