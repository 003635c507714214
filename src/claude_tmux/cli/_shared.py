"""
Shared CLI state: Typer apps, console, options, and utilities.
"""

from typing import Annotated, Optional

import typer
from rich import print as rprint
from rich.console import Console

# Main app
app = typer.Typer(
    name="claude-tmux",
    help="Find, watch and jump to Claude Code sessions running in tmux",
    no_args_is_help=False,
    invoke_without_command=True,
    rich_markup_mode="rich",
)

# Hooks subcommand group
hooks_app = typer.Typer(
    name="hooks",
    help="Manage Claude Code hook integration.",
    no_args_is_help=True,
)
app.add_typer(hooks_app, name="hooks")

# Config subcommand group
config_app = typer.Typer(
    name="config",
    help="Manage configuration",
    no_args_is_help=False,
    invoke_without_command=True,
)
app.add_typer(config_app, name="config")

# Console for rich output
console = Console()

ScanOption = Annotated[
    bool,
    typer.Option("--scan", help="Discover sessions from running processes instead of the hook log"),
]


def resolve_discovery(scan: bool) -> str:
    """--scan wins; otherwise the configured discovery mode."""
    from ..config import DISCOVERY_SCAN, get_discovery_mode

    return DISCOVERY_SCAN if scan else get_discovery_mode()


def rotate_event_log(log_path=None) -> Optional[bool]:
    """Rotate the event log with configured thresholds.

    Returns whether it was rotated, or None if rotation failed (the error
    is printed but is not fatal).
    """
    from ..config import get_event_log_path, get_rotation_config
    from ..event_log import EventLogError, rotate_log

    log_path = log_path or get_event_log_path()
    max_lines, keep_lines = get_rotation_config()
    try:
        return rotate_log(log_path, max_lines, keep_lines)
    except EventLogError as e:
        rprint(f"[yellow]Warning:[/yellow] {e}")
        return None


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context, scan: ScanOption = False):
    """Launch the session picker when no command is given."""
    if ctx.invoked_subcommand is None:
        from ..log_setup import setup_logging
        from ..tui import run_tui

        setup_logging()
        if not scan:
            rotate_event_log()
        run_tui(discovery=resolve_discovery(scan))
