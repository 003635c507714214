"""
Hooks commands: install, uninstall, status.
"""

from typing import Annotated

import typer
from rich import print as rprint

from ._shared import hooks_app

ProjectOption = Annotated[
    bool,
    typer.Option("--project", "-p", help="Use project-level .claude/settings.json instead of user-level"),
]


def _editor(project: bool):
    from ..claude_config import ClaudeConfigEditor

    if project:
        return ClaudeConfigEditor.project_level(), "project"
    return ClaudeConfigEditor.user_level(), "user"


def _load_or_exit(editor) -> None:
    try:
        editor.load()
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@hooks_app.command("install")
def hooks_install(project: ProjectOption = False):
    """Register the claude-tmux hook for every Claude Code event it tracks."""
    from ..hook_handler import CLAUDE_TMUX_HOOKS

    editor, level = _editor(project)
    _load_or_exit(editor)

    installed = editor.install_hooks(CLAUDE_TMUX_HOOKS)
    if installed:
        rprint(f"[green]✓[/green] Installed {installed} hook(s) in {level} settings")
        rprint(f"  [dim]{editor.path}[/dim]")
        hook_names = sorted({hook_name for hook_name, _, _ in CLAUDE_TMUX_HOOKS})
        rprint(f"\n  Events: {', '.join(hook_names)}")
    else:
        rprint(f"[green]✓[/green] All {len(CLAUDE_TMUX_HOOKS)} hooks already installed in {level} settings")


@hooks_app.command("uninstall")
def hooks_uninstall(project: ProjectOption = False):
    """Remove claude-tmux hooks from Claude Code settings."""
    from ..hook_handler import CLAUDE_TMUX_HOOKS

    editor, level = _editor(project)
    _load_or_exit(editor)

    removed = editor.uninstall_hooks(CLAUDE_TMUX_HOOKS)
    if removed:
        rprint(f"[green]✓[/green] Removed {removed} hook(s) from {level} settings")
    else:
        rprint(f"[dim]No claude-tmux hooks found in {level} settings[/dim]")


@hooks_app.command("status")
def hooks_status():
    """Show which claude-tmux hooks are installed."""
    from ..claude_config import ClaudeConfigEditor
    from ..hook_handler import CLAUDE_TMUX_HOOKS

    for level_name, editor in [
        ("User-level", ClaudeConfigEditor.user_level()),
        ("Project-level", ClaudeConfigEditor.project_level()),
    ]:
        rprint(f"\n{level_name} ({editor.path}):")
        if not editor.path.exists():
            rprint("  [dim](no settings file)[/dim]")
            continue
        try:
            editor.load()
        except ValueError:
            rprint("  [red](invalid JSON)[/red]")
            continue

        for hook_name, command, matcher in CLAUDE_TMUX_HOOKS:
            label = f"{hook_name}:{matcher}" if matcher else hook_name
            if editor.has_hook(hook_name, command):
                rprint(f"  {label:<32} {command}  [green]✓[/green]")
            else:
                rprint(f"  {label:<32} [dim]not installed[/dim]")
