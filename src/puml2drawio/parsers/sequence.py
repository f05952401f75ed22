from typing import Dict, List, Optional
import re
import logging

from puml2drawio.diagram_model import (
    Fragment,
    Message,
    MessageGroup,
    Participant,
    ParticipantKind,
    SequenceDiagram,
)
from puml2drawio.parsers.common import DIRECTIVES_WITH_HIDE, NoteCollector, first_match, is_directive

log = logging.getLogger(__name__)

GROUP_RE = re.compile(r"^==\s*(.+)\s*==$")
PARTICIPANT_RES = [
    re.compile(r'^(participant|actor)\s+"([^"]+)"\s+as\s+(\w+)', re.IGNORECASE),
    re.compile(r"^(participant|actor)\s+(\w+)(?:\s+as\s+(\w+))?", re.IGNORECASE),
]
MESSAGE_RE = re.compile(r'^("?[^"]+?"?)\s*([-<>\.]+)\s*("?[^"]+?"?)\s*:\s*(.*)$')


class SequenceParser:
    """Single pass parser, participants are registered on first sight."""

    def __init__(self):
        self.diagram = SequenceDiagram()
        self.participants: Dict[str, Participant] = {}
        self.alt_stack: List[Fragment] = []
        self.note = NoteCollector()

    def register(
        self, name: str, label: Optional[str] = None, kind: ParticipantKind = ParticipantKind.PARTICIPANT
    ) -> None:
        if name not in self.participants:
            participant = Participant(name=name, label=label or name, kind=kind)
            self.participants[name] = participant
            self.diagram.participants.append(participant)

    def feed(self, line: str) -> None:
        messages = self.diagram.messages

        if line.startswith("note "):
            self.note.start(line)
            return
        if line == "end note":
            text = self.note.finish()
            if messages:
                messages[-1].note = text
            return
        if self.note.active:
            self.note.add(line)
            return

        match = GROUP_RE.match(line)
        if match:
            self.diagram.groups.append(MessageGroup(label=match.group(1).strip(), start_index=len(messages)))
            return

        if line.startswith("alt "):
            fragment = Fragment(label=line[len("alt ") :].strip(), start_index=len(messages))
            self.diagram.fragments.append(fragment)
            self.alt_stack.append(fragment)
            return
        if line.startswith("else"):
            if self.alt_stack:
                self.alt_stack[-1].else_index = len(messages)
            return
        if line == "end":
            if self.alt_stack:
                self.alt_stack.pop().end_index = len(messages)
            return

        match = first_match(line, PARTICIPANT_RES)
        if match:
            label = match.group(2)
            self.register(match.group(3) or label, label, ParticipantKind(match.group(1).lower()))
            return

        match = MESSAGE_RE.match(line)
        if match:
            source = match.group(1).replace('"', "").strip()
            target = match.group(3).replace('"', "").strip()
            arrow = match.group(2)
            self.register(source)
            self.register(target)
            messages.append(
                Message(
                    id=len(messages),
                    source=source,
                    target=target,
                    text=match.group(4).strip(),
                    is_return="<" in arrow or "--" in arrow,
                    is_async=">>" in arrow,
                    is_dashed="--" in arrow or ".." in arrow,
                )
            )

    def parse(self, lines: List[str]) -> SequenceDiagram:
        for line in lines:
            if is_directive(line, DIRECTIVES_WITH_HIDE):
                continue
            self.feed(line)
        log.debug(
            f"Parsed {len(self.diagram.participants)} participants and {len(self.diagram.messages)} messages"
        )
        return self.diagram


def parse_sequence_diagram(lines: List[str]) -> SequenceDiagram:
    return SequenceParser().parse(lines)
