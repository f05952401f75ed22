from typing import Dict, List
import re
import logging

from puml2drawio.diagram_model import (
    Actor,
    Rectangle,
    Relation,
    RelationKind,
    UseCase,
    UseCaseDiagram,
)
from puml2drawio.parsers.common import DIRECTIVES_WITH_HIDE, first_match, is_directive

log = logging.getLogger(__name__)

RECTANGLE_RE = re.compile(r'^rectangle\s+"([^"]+)"\s*\{?$')
ACTOR_RES = [
    re.compile(r'^actor\s+"([^"]+)"\s+as\s+(\w+)', re.IGNORECASE),
    re.compile(r"^actor\s+(\w+)", re.IGNORECASE),
]
USECASE_RES = [
    re.compile(r'^usecase\s+"([^"]+)"\s+as\s+(\w+)', re.IGNORECASE),
    re.compile(r'^usecase\s+"?([^"]+)"?', re.IGNORECASE),
    re.compile(r"^\(([^)]+)\)\s*(?:as\s+(\w+))?"),
]
RELATION_RE = re.compile(r"^(\w+)\s*([-\.]+>?)\s*(\w+|\([^)]+\))(?:\s*:\s*(.+))?$")

#: Words hinting that an undeclared relation source is a person.
ACTOR_HINTS = ("用户", "员")


def looks_like_actor(name: str) -> bool:
    """Guess whether undeclared name is an actor. Approximation only."""
    return bool(re.match(r"^[A-Z]", name)) or any(hint in name for hint in ACTOR_HINTS)


class UseCaseParser:
    def __init__(self):
        self.diagram = UseCaseDiagram()
        self.actors: Dict[str, Actor] = {}
        self.usecases: Dict[str, UseCase] = {}
        self.rect_stack: List[Rectangle] = []

    def add_actor(self, name: str, label: str) -> None:
        if name not in self.actors:
            actor = Actor(name=name, label=label)
            self.actors[name] = actor
            self.diagram.actors.append(actor)

    def add_usecase(self, name: str, label: str, in_rectangle: bool = True) -> None:
        if name in self.usecases:
            return
        rectangle = self.rect_stack[-1] if in_rectangle and self.rect_stack else None
        usecase = UseCase(name=name, label=label, rectangle=rectangle.label if rectangle else None)
        self.usecases[name] = usecase
        self.diagram.usecases.append(usecase)
        if rectangle:
            rectangle.usecases.append(name)

    def feed(self, line: str) -> None:
        match = RECTANGLE_RE.match(line)
        if match:
            rectangle = Rectangle(label=match.group(1))
            self.diagram.rectangles.append(rectangle)
            self.rect_stack.append(rectangle)
            return
        if line == "}" and self.rect_stack:
            self.rect_stack.pop()
            return

        match = first_match(line, ACTOR_RES)
        if match:
            label = match.group(1)
            name = match.group(2) if match.re.groups > 1 and match.group(2) else label
            self.add_actor(name, label)
            return

        match = first_match(line, USECASE_RES)
        if match:
            label = match.group(1)
            alias = match.group(2) if match.re.groups > 1 else None
            self.add_usecase(alias or re.sub(r"\s+", "_", label), label)
            return

        match = RELATION_RE.match(line)
        if match:
            source = match.group(1)
            target = re.sub(r"[()]", "", match.group(3))
            arrow = match.group(2)
            if source not in self.actors and source not in self.usecases and looks_like_actor(source):
                self.add_actor(source, source)
            if target not in self.usecases and target not in self.actors:
                self.add_usecase(target, target, in_rectangle=False)
            self.diagram.relations.append(
                Relation(
                    source=source,
                    target=target,
                    kind=RelationKind.ASSOCIATION if ">" in arrow else RelationKind.LINK,
                    label=match.group(4) or "",
                )
            )

    def parse(self, lines: List[str]) -> UseCaseDiagram:
        for line in lines:
            if is_directive(line, DIRECTIVES_WITH_HIDE):
                continue
            self.feed(line)
        return self.diagram


def parse_usecase_diagram(lines: List[str]) -> UseCaseDiagram:
    return UseCaseParser().parse(lines)
