from typing import Dict, List, Optional
import re
import logging

from puml2drawio.diagram_model import State, StateDiagram, StateKind, Transition
from puml2drawio.parsers.common import DIRECTIVES_WITH_HIDE, NoteCollector, is_directive

log = logging.getLogger(__name__)

#: "[*]" appears as two distinct pseudo states depending on arrow direction.
START_KEY = "[*]_start"
END_KEY = "[*]_end"
PSEUDO_STATE = "[*]"

NOTE_RE = re.compile(r"^note\s+(left|right)\s+of\s+(\w+)")
LABELED_STATE_RE = re.compile(r'^state\s+"([^"]+)"\s+as\s+(\w+)')
SIMPLE_STATE_RE = re.compile(r"^state\s+(\w+)(?:\s*\{)?$")
TRANSITION_RE = re.compile(r"^(\[\*\]|[\u4e00-\u9fa5\w]+)\s*(-+>)\s*(\[\*\]|[\u4e00-\u9fa5\w]+)(?:\s*:\s*(.+))?$")


def state_key(name: str, is_source: bool) -> str:
    """Key of a state in transition, resolving "[*]" by direction."""
    if name == PSEUDO_STATE:
        return START_KEY if is_source else END_KEY
    return name


class StateParser:
    def __init__(self):
        self.diagram = StateDiagram()
        self.states: Dict[str, State] = {}
        self.note = NoteCollector()
        self.note_target: Optional[str] = None

    def add_state(self, key: str, name: str, label: str, kind: StateKind = StateKind.STATE) -> None:
        if key not in self.states:
            state = State(id=len(self.diagram.states), name=name, label=label, kind=kind)
            self.states[key] = state
            self.diagram.states.append(state)

    def feed(self, line: str) -> None:
        note_match = NOTE_RE.match(line)
        if note_match or line.startswith("note "):
            self.note.start()
            self.note_target = note_match.group(2) if note_match else None
            return
        if line == "end note":
            text = self.note.finish()
            if self.note_target in self.states:
                self.states[self.note_target].note = text
            self.note_target = None
            return
        if self.note.active:
            self.note.add(line)
            return

        match = LABELED_STATE_RE.match(line)
        if match:
            self.add_state(match.group(2), match.group(2), match.group(1))
            return

        match = SIMPLE_STATE_RE.match(line)
        if match:
            self.add_state(match.group(1), match.group(1), match.group(1))
            return

        match = TRANSITION_RE.match(line)
        if match:
            source, target = match.group(1), match.group(3)
            for name, is_source in ((source, True), (target, False)):
                if name == PSEUDO_STATE:
                    self.add_state(
                        state_key(name, is_source),
                        name,
                        "Start" if is_source else "End",
                        StateKind.START if is_source else StateKind.END,
                    )
                else:
                    self.add_state(name, name, name)
            self.diagram.transitions.append(Transition(source=source, target=target, label=match.group(4) or ""))

    def parse(self, lines: List[str]) -> StateDiagram:
        for line in lines:
            if is_directive(line, DIRECTIVES_WITH_HIDE):
                continue
            self.feed(line)
        return self.diagram


def parse_state_diagram(lines: List[str]) -> StateDiagram:
    return StateParser().parse(lines)
