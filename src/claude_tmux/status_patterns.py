"""
Centralized status detection patterns.

This module contains the visual signatures the pane classifier looks for
in captured tmux output. Centralizing these makes them:
- Easier to maintain and extend
- Testable in isolation
- Configurable via config.yaml (question phrases)

Every function here is pure: text in, answer out.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

# Regex to match ANSI escape sequences (colors, cursor movement, etc.)
ANSI_ESCAPE_PATTERN = re.compile(r'\x1b\[[0-9;?]*[a-zA-Z]')

# Invisible characters TUI frameworks inject into captures
_INVISIBLE_CHARS = {
    "\u200b": None,  # zero-width space
    "\u200c": None,  # zero-width non-joiner
    "\u200d": None,  # zero-width joiner
    "\ufeff": None,  # byte-order mark
    "\u00a0": " ",   # non-breaking space
}
_INVISIBLE_TRANSLATION = str.maketrans(_INVISIBLE_CHARS)

# "N. text" after the optional selector has been removed
NUMBERED_OPTION_PATTERN = re.compile(r'^([0-9]+)\. ')


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from text.

    tmux capture-pane with escape sequences preserves color codes,
    but pattern matching needs plain text.

    Args:
        text: Text potentially containing ANSI escape sequences

    Returns:
        Text with all ANSI escape sequences removed
    """
    return ANSI_ESCAPE_PATTERN.sub('', text)


def sanitize_line(line: str) -> str:
    """Strip ANSI codes and invisible Unicode from one captured line.

    Zero-width characters and the BOM are dropped, non-breaking spaces
    become regular spaces, so exact glyph matching works.
    """
    return strip_ansi(line).translate(_INVISIBLE_TRANSLATION)


def sanitize_lines(text: str) -> List[str]:
    """Split pane text into sanitized lines."""
    return [sanitize_line(line) for line in text.split('\n')]


@dataclass
class StatusPatterns:
    """All glyphs and phrases used for pane status classification."""

    # Characters Claude Code cycles through for its activity spinner
    spinner_chars: List[str] = field(default_factory=lambda: [
        "✻", "✽", "✳", "·", "✶", "✢",
    ])

    # An active spinner line ends with this; "✻ Worked for 2m 17s" does not
    ellipsis: str = "…"

    # Claude Code's input prompt character (U+276F)
    prompt_char: str = "❯"

    # Marks the highlighted option of an interactive menu (same glyph as the prompt)
    selector_char: str = "❯"

    # Permission dialog questions. Used as a fallback when the selector
    # glyph is garbled but the question and option numbers survive.
    question_phrases: List[str] = field(default_factory=lambda: [
        "Do you want to proceed?",
    ])

    # How many lines after the question the numbered options may appear
    question_window: int = 5


# Default patterns instance
DEFAULT_PATTERNS = StatusPatterns()


def get_patterns(question_phrases: Optional[Iterable[str]] = None) -> StatusPatterns:
    """Get the status detection patterns.

    Args:
        question_phrases: Replacement list of permission question phrases
            (from config.yaml). None keeps the defaults.

    Returns:
        StatusPatterns instance
    """
    if not question_phrases:
        return DEFAULT_PATTERNS
    return StatusPatterns(question_phrases=list(question_phrases))


def is_spinner_line(line: str, patterns: StatusPatterns = None) -> bool:
    """Check if a line is an in-progress spinner like "✻ Fiddle-faddling…".

    The line must start with a spinner glyph followed by a space and end
    with an ellipsis. Completion messages ("✻ Worked for 2m 17s") start
    with the same glyph but have no trailing ellipsis.

    Args:
        line: Line to check (sanitized)
        patterns: StatusPatterns to use (defaults to DEFAULT_PATTERNS)

    Returns:
        True if the line shows active work
    """
    patterns = patterns or DEFAULT_PATTERNS
    stripped = line.strip()
    if len(stripped) < 3:
        return False
    return (
        stripped[0] in patterns.spinner_chars
        and stripped[1] == ' '
        and stripped[-1] == patterns.ellipsis
    )


def has_prompt_char(line: str, patterns: StatusPatterns = None) -> bool:
    """Check if a line shows the prompt character anywhere."""
    patterns = patterns or DEFAULT_PATTERNS
    return patterns.prompt_char in line.strip()


def parse_numbered_option(line: str, patterns: StatusPatterns = None) -> Optional[Tuple[int, bool]]:
    """Parse a numbered menu option such as "1. Yes" or "❯ 1. Yes".

    Leading whitespace and an optional selector glyph are skipped, then
    the line must read digits, a period, a space, then text.

    Args:
        line: Line to parse (sanitized)
        patterns: StatusPatterns to use (defaults to DEFAULT_PATTERNS)

    Returns:
        (option_number, has_selector), or None if the line is not an option
    """
    patterns = patterns or DEFAULT_PATTERNS
    rest = line.lstrip()
    if not rest:
        return None

    has_selector = False
    if rest.startswith(patterns.selector_char):
        has_selector = True
        rest = rest[len(patterns.selector_char):].lstrip()

    match = NUMBERED_OPTION_PATTERN.match(rest)
    if not match:
        return None
    return int(match.group(1)), has_selector


def _collect_options(lines: Iterable[str], patterns: StatusPatterns) -> Dict[int, bool]:
    """Map option number -> whether any line with that number had the selector."""
    options: Dict[int, bool] = {}
    for line in lines:
        parsed = parse_numbered_option(line, patterns)
        if parsed is None:
            continue
        number, has_selector = parsed
        options[number] = options.get(number, False) or has_selector
    return options


def detect_numbered_menu(lines: List[str], patterns: StatusPatterns = None) -> bool:
    """Check for an interactive numbered option menu.

    Requires options 1 and 2 AND a selector glyph on at least one option
    line. A plain markdown list ("1. First", "2. Second") has no selector
    and does not count.
    """
    patterns = patterns or DEFAULT_PATTERNS
    options = _collect_options(lines, patterns)
    return 1 in options and 2 in options and any(options.values())


def detect_permission_question(lines: List[str], patterns: StatusPatterns = None) -> bool:
    """Fallback menu detection for dialogs whose selector glyph got garbled.

    Looks for a known question phrase followed, within the next few
    lines, by options 1 and 2. The selector is not required here.
    """
    patterns = patterns or DEFAULT_PATTERNS
    for i, line in enumerate(lines):
        stripped = line.strip()
        if not any(phrase in stripped for phrase in patterns.question_phrases):
            continue
        nearby = lines[i + 1:i + 1 + patterns.question_window]
        options = _collect_options(nearby, patterns)
        if 1 in options and 2 in options:
            return True
    return False
