"""
Logging setup for claude-tmux.

Records go to ~/.claude-tmux/claude-tmux.log. The TUI owns the terminal,
so nothing is logged to the console unless a command asks for it with
--verbose, in which case a Rich handler writes to stderr.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .settings import get_app_log_path

LOGGER_NAME = "claude_tmux"

_FILE_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"
_MAX_LOG_BYTES = 1_000_000
_BACKUP_COUNT = 2


def setup_logging(verbose: bool = False, log_path: Optional[Path] = None) -> logging.Logger:
    """Configure the package logger. Safe to call more than once."""
    root = logging.getLogger(LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.propagate = False

    log_path = Path(log_path) if log_path else get_app_log_path()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path, maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8"
        )
    except OSError:
        # Unwritable state dir: carry on without a log file
        file_handler = None
    if file_handler is not None:
        file_handler.setFormatter(logging.Formatter(_FILE_FMT, datefmt=_FILE_DATEFMT))
        root.addHandler(file_handler)

    if verbose:
        console = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
        console.setLevel(logging.DEBUG)
        root.addHandler(console)

    if not root.handlers:
        root.addHandler(logging.NullHandler())
    return root
