"""
Config commands: init, show, path.
"""

from typing import Annotated

import typer
from rich import print as rprint

from ._shared import config_app


CONFIG_TEMPLATE = """\
# claude-tmux configuration
# Location: ~/.claude-tmux/config.yaml

# Seconds between session list refreshes
# refresh_interval: 0.75

# Seconds between busy spinner frames
# spinner_interval: 0.15

# Where the hook writes events
# event_log: ~/.claude-tmux/events.log

# How sessions are discovered: "events" (hook log) or "scan" (ps + pane capture)
# discovery: events

# Color tmux window tabs by session state from the hook
# color_tabs: true

# Event log retention
# rotation:
#   max_lines: 1000
#   keep_lines: 500

# Pane classifier: questions that mark a permission dialog even when the
# menu is garbled
# classifier:
#   question_phrases:
#     - "Do you want to proceed?"
"""


@config_app.callback(invoke_without_command=True)
def config_default(ctx: typer.Context):
    """Show current configuration (default when no subcommand given)."""
    if ctx.invoked_subcommand is None:
        _config_show()


@config_app.command("init")
def config_init(
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Overwrite existing config file")
    ] = False,
):
    """Create a config file with documented defaults, all commented out."""
    from ..settings import get_config_path

    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    if config_path.exists() and not force:
        rprint(f"[yellow]Config file already exists:[/yellow] {config_path}")
        rprint("[dim]Use --force to overwrite[/dim]")
        raise typer.Exit(1)

    config_path.write_text(CONFIG_TEMPLATE)
    rprint(f"[green]✓[/green] Created config file: [bold]{config_path}[/bold]")


@config_app.command("show")
def config_show():
    """Show current configuration."""
    _config_show()


@config_app.command("path")
def config_path():
    """Print the config file location."""
    from ..settings import get_config_path

    typer.echo(str(get_config_path()))


def _config_show():
    from ..config import (
        get_color_tabs,
        get_discovery_mode,
        get_event_log_path,
        get_question_phrases,
        get_refresh_interval,
        get_rotation_config,
        get_spinner_interval,
        load_config,
    )
    from ..settings import get_config_path
    from ..status_patterns import DEFAULT_PATTERNS

    config_path = get_config_path()
    if not config_path.exists():
        rprint("[dim]No config file, using defaults[/dim]")
        rprint(f"[dim]  {config_path}[/dim]")
        rprint("[dim]Run 'claude-tmux config init' to create one[/dim]\n")
    else:
        try:
            load_config(config_path)
        except ValueError as e:
            rprint(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
        rprint(f"[bold]Configuration[/bold] ({config_path}):\n")

    max_lines, keep_lines = get_rotation_config()
    phrases = get_question_phrases() or DEFAULT_PATTERNS.question_phrases
    rprint(f"  refresh_interval: {get_refresh_interval()}s")
    rprint(f"  spinner_interval: {get_spinner_interval()}s")
    rprint(f"  event_log: {get_event_log_path()}")
    rprint(f"  discovery: {get_discovery_mode()}")
    rprint(f"  color_tabs: {get_color_tabs()}")
    rprint(f"  rotation: max_lines={max_lines} keep_lines={keep_lines}")
    rprint("  classifier.question_phrases:")
    for phrase in phrases:
        rprint(f"    - {phrase}")
