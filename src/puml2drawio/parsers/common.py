"""Helpers shared by the dialect parsers."""

from typing import Callable, Iterable, List, Optional, Tuple
import re

#: Line prefixes that never carry diagram content.
DIRECTIVES = ("@", "!", "skinparam", "title")
DIRECTIVES_WITH_HIDE = DIRECTIVES + ("hide",)

#: Ordered (pattern, handler) pairs, first match wins.
LineRule = Tuple[re.Pattern, Callable[[re.Match], None]]


def is_directive(line: str, prefixes: Iterable[str] = DIRECTIVES) -> bool:
    return line == "" or line.startswith(tuple(prefixes))


def first_match(line: str, patterns: Iterable[re.Pattern]) -> Optional[re.Match]:
    """Return match of first pattern that matches line (from its start)."""
    for pattern in patterns:
        match = pattern.match(line)
        if match:
            return match
    return None


def dispatch(line: str, rules: List[LineRule]) -> bool:
    """Run handler of the first rule matching the line.

    :return: True if some rule handled the line
    """
    for pattern, handler in rules:
        match = pattern.match(line)
        if match:
            handler(match)
            return True
    return False


class NoteCollector:
    """Collects multi-line "note ... end note" blocks."""

    def __init__(self):
        self.active = False
        self.lines: List[str] = []

    def start(self, first_line: Optional[str] = None) -> None:
        self.active = True
        self.lines = [first_line] if first_line else []

    def add(self, line: str) -> None:
        self.lines.append(line)

    def finish(self) -> str:
        text = "\n".join(self.lines)
        self.active = False
        self.lines = []
        return text
