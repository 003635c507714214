"""
Session commands: list, hook, rotate.
"""

import json
from typing import Annotated

import typer
from rich import print as rprint
from rich.markup import escape
from rich.table import Table

from ._shared import ScanOption, app, console, resolve_discovery, rotate_event_log


@app.command("list")
def list_sessions(
    scan: ScanOption = False,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print sessions as a JSON array")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log diagnostics to stderr")
    ] = False,
):
    """Print current Claude sessions and their status."""
    from ..config import DISCOVERY_SCAN, get_event_log_path
    from ..log_setup import setup_logging
    from ..snapshot import build_monitor
    from ..tui_logic import session_to_dict

    setup_logging(verbose=verbose)
    discovery = resolve_discovery(scan)
    log_path = get_event_log_path()
    if discovery != DISCOVERY_SCAN:
        rotate_event_log(log_path)

    monitor = build_monitor(discovery, log_path)
    sessions = monitor.poll()
    if monitor.last_error:
        rprint(f"[red]Error:[/red] {monitor.last_error}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps([session_to_dict(s) for s in sessions], indent=2))
        return

    if not sessions:
        rprint("[dim]No Claude sessions found[/dim]")
        return

    console.print(build_session_table(sessions))


def build_session_table(sessions) -> Table:
    from ..status_constants import get_status_symbol

    table = Table(title=f"Claude Sessions ({len(sessions)})", title_justify="left")
    table.add_column("", no_wrap=True)
    table.add_column("Project", style="bold")
    table.add_column("Target")
    table.add_column("Path", style="dim")
    table.add_column("Status")
    table.add_column("Action", style="italic")

    for s in sessions:
        symbol, color = get_status_symbol(s.status)
        target = escape(s.display_target)
        if not s.jumpable:
            target = f"[dim]{target}[/dim]"
        table.add_row(
            f"[{color}]{symbol}[/{color}]",
            escape(s.project_name),
            target,
            escape(s.display_path),
            f"[{color}]{s.status}[/{color}]",
            escape(s.action),
        )
    return table


@app.command("hook", hidden=True)
def hook(
    event: Annotated[str, typer.Argument(help="Event name, e.g. pre-tool-use")] = "unknown",
):
    """Record a hook event (run by Claude Code, reads the payload on stdin).

    Always exits 0 so a broken log never blocks the agent.
    """
    from ..hook_handler import handle_hook_event
    from ..log_setup import setup_logging

    setup_logging()
    handle_hook_event(event)


@app.command("rotate")
def rotate():
    """Trim the event log to its most recent lines."""
    from ..config import get_event_log_path, get_rotation_config

    log_path = get_event_log_path()
    rotated = rotate_event_log(log_path)
    if rotated is None:
        raise typer.Exit(1)
    if rotated:
        _, keep_lines = get_rotation_config()
        rprint(f"[green]✓[/green] Rotated {log_path} (kept last {keep_lines} lines)")
    else:
        rprint(f"[dim]Nothing to rotate: {log_path}[/dim]")
