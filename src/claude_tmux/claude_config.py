"""Read and write Claude Code settings.json files.

Hooks live under settings["hooks"][<HookName>] as a list of matcher
groups, each holding its own list of command hooks:

    {"hooks": {"Notification": [
        {"matcher": "idle_prompt",
         "hooks": [{"type": "command", "command": "claude-tmux hook notification-idle"}]}
    ]}}
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Iterable, Iterator


class ClaudeConfigEditor:
    """Read and write Claude Code settings.json files."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @classmethod
    def user_level(cls) -> ClaudeConfigEditor:
        """Editor for ~/.claude/settings.json."""
        return cls(Path.home() / ".claude" / "settings.json")

    @classmethod
    def project_level(cls, project_dir: Path | None = None) -> ClaudeConfigEditor:
        """Editor for <project>/.claude/settings.json (cwd by default)."""
        base = Path(project_dir) if project_dir else Path.cwd()
        return cls(base / ".claude" / "settings.json")

    def load(self) -> dict:
        """Load settings from file.

        Returns empty dict if file doesn't exist.
        Raises ValueError on invalid JSON or non-object content.
        """
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} contains non-object JSON")
        return data

    def save(self, settings: dict) -> None:
        """Write settings, creating .claude/ if needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(settings, indent=2) + "\n")

    @staticmethod
    def _commands(settings: dict, hook_name: str) -> Iterator[tuple[int, str]]:
        """Yield (group index, command) for every command hook under hook_name."""
        for index, group in enumerate(settings.get("hooks", {}).get(hook_name, [])):
            for hook in group.get("hooks", []):
                command = hook.get("command")
                if command:
                    yield index, command

    def has_hook(self, hook_name: str, command: str) -> bool:
        return any(cmd == command for _, cmd in self._commands(self.load(), hook_name))

    def install_hooks(self, hooks: Iterable[tuple[str, str, str]]) -> int:
        """Register (hook name, command, matcher) entries not already present.

        Returns the number added. The file is written once, and only if
        something changed.
        """
        settings = copy.deepcopy(self.load())
        added = 0
        for hook_name, command, matcher in hooks:
            if any(cmd == command for _, cmd in self._commands(settings, hook_name)):
                continue
            settings.setdefault("hooks", {}).setdefault(hook_name, []).append({
                "matcher": matcher,
                "hooks": [{"type": "command", "command": command}],
            })
            added += 1
        if added:
            self.save(settings)
        return added

    def uninstall_hooks(self, hooks: Iterable[tuple[str, str, str]]) -> int:
        """Remove the matcher groups holding the given commands.

        Returns the number of groups removed. Empty hook lists and an
        empty "hooks" object are dropped so the file is left as it was
        before installation.
        """
        settings = copy.deepcopy(self.load())
        removed = 0
        for hook_name, command, _matcher in hooks:
            doomed = {i for i, cmd in self._commands(settings, hook_name) if cmd == command}
            if not doomed:
                continue
            groups = settings["hooks"][hook_name]
            settings["hooks"][hook_name] = [g for i, g in enumerate(groups) if i not in doomed]
            removed += len(doomed)
            if not settings["hooks"][hook_name]:
                del settings["hooks"][hook_name]
        if not removed:
            return 0
        if not settings.get("hooks"):
            settings.pop("hooks", None)
        self.save(settings)
        return removed
