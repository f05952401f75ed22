"""
Dialect detection for PlantUML sources.

Rules are heuristics applied in fixed order and the first match wins. Order
matters: "actor A", "actor B", "A -> B : msg" looks like a use case block, but
must be a sequence diagram, so sequence runs first.
"""

import re
from typing import Callable, List, Optional, Tuple
from puml2drawio.diagram_model import DiagramType
from puml2drawio.utils import normalize_lines

MESSAGE_RE = re.compile(r'^[\w"]+\s*-+>+\s*[\w"]+\s*:')
SIMPLE_MESSAGE_RE = re.compile(r"^\w+\s*-+>\s*\w+\s*:")
ACTION_RE = re.compile(r"^:.*;\s*$")
TRANSITION_RE = re.compile(r"--?>")


def _any_line(lines: List[str], pattern: re.Pattern) -> bool:
    return any(pattern.search(line) for line in lines)


def _is_sequence(text: str, raw: str, lines: List[str]) -> bool:
    return (
        _any_line(lines, MESSAGE_RE)
        or ("participant " in text and " -> " in text)
        or ("actor " in text and " -> " in text and _any_line(lines, SIMPLE_MESSAGE_RE))
    )


def _is_usecase(text: str, raw: str, lines: List[str]) -> bool:
    return (
        "actor " in text
        and ("usecase " in text or "rectangle " in text)
        and not _any_line(lines, SIMPLE_MESSAGE_RE)
    )


def _is_activity(text: str, raw: str, lines: List[str]) -> bool:
    # "@startuml" contains "start", so any ":" and ";" together flag activity
    return (
        ("start" in text and ("stop" in text or (":" in raw and ";" in raw)))
        or _any_line(lines, ACTION_RE)
        or ("if (" in text and "endif" in text)
    )


def _is_state(text: str, raw: str, lines: List[str]) -> bool:
    return "[*]" in text or ("state " in text and _any_line(lines, TRANSITION_RE))


def _is_mindmap(text: str, raw: str, lines: List[str]) -> bool:
    return "@startmindmap" in text


def _is_er(text: str, raw: str, lines: List[str]) -> bool:
    return "entity " in text or "}|" in text or "|{" in text


def _is_deployment(text: str, raw: str, lines: List[str]) -> bool:
    return "database " in text or "cloud " in text or "artifact " in text


RULES: List[Tuple[Callable[[str, str, List[str]], bool], DiagramType]] = [
    (_is_sequence, DiagramType.SEQUENCE),
    (_is_usecase, DiagramType.USECASE),
    (_is_activity, DiagramType.ACTIVITY),
    (_is_state, DiagramType.STATE),
    (_is_mindmap, DiagramType.MINDMAP),
    (_is_er, DiagramType.ER),
    (_is_deployment, DiagramType.DEPLOYMENT),
]


def classify(raw: str, lines: Optional[List[str]] = None) -> DiagramType:
    """
    Decide which dialect a PlantUML source is written in.

    :param raw: diagram source
    :param lines: already normalized lines, computed from raw if not given
    :return: dialect, DiagramType.CLASS if no rule matches
    """
    if lines is None:
        lines = normalize_lines(raw)
    text = raw.lower()
    for rule, diagram_type in RULES:
        if rule(text, raw, lines):
            return diagram_type
    return DiagramType.CLASS
