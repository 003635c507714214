"""
Process liveness checks.
"""

import logging
import os

logger = logging.getLogger(__name__)


def is_pid_alive(pid: int) -> bool:
    """Check whether pid refers to a running process using signal 0.

    Only a definitive "no such process" answers False. A permission error
    means the process exists under another user. Any other failure is a
    broken probe, not a dead process, so it answers True.
    """
    if pid <= 0:
        return True
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    except (OSError, OverflowError) as e:
        logger.debug(f"Liveness probe for pid {pid} failed: {e}")
        return True
    return True


class SignalLivenessProbe:
    """Production implementation of LivenessProbe using os.kill(pid, 0)."""

    def is_alive(self, pid: int) -> bool:
        return is_pid_alive(pid)
