from typing import List, Optional, Tuple
import re
import logging

from puml2drawio.diagram_model import (
    Actor,
    ClassDef,
    ClassDiagram,
    ClassKind,
    ClassMember,
    Relation,
    RelationKind,
)

log = logging.getLogger(__name__)

CLASS_START = ("class ", "interface ", "abstract ", "enum ")
SKIP = ("@", "skinparam", "hide", "show")

KIND_RE = re.compile(r"^(class|interface|abstract|enum)\s+")
NAME_RE = re.compile(r'^(?:abstract\s+)?(?:class|interface|abstract|enum)\s+"?([^"{\s]+)"?')
ACTOR_RE = re.compile(r'actor\s+"?([^"]+)"?\s*(?:as\s+(\w+))?')
VISIBILITY_RE = re.compile(r"^([+\-#~])\s*")

#: (pattern, kind, source group, target group, label group), tried in order.
#: Dotted realization arrows are tried before the generic inheritance arrows.
RELATION_PATTERNS: List[Tuple[re.Pattern, RelationKind, int, int, Optional[int]]] = [
    (re.compile(r"(\w+)\s*<\|\.\.+(.*?)(\w+)"), RelationKind.IMPLEMENTS, 3, 1, None),
    (re.compile(r"(\w+)\s*\.\.+(.*?)\|>\s*(\w+)"), RelationKind.IMPLEMENTS, 1, 3, None),
    (re.compile(r"(\w+)\s*<\|[-.]+(.*?)(\w+)"), RelationKind.EXTENDS, 3, 1, None),
    (re.compile(r"(\w+)\s*[-.]+(.*?)\|>\s*(\w+)"), RelationKind.EXTENDS, 1, 3, None),
    (re.compile(r"(\w+)\s*\*[-.]+(.*?)(\w+)"), RelationKind.COMPOSITION, 1, 3, None),
    (re.compile(r"(\w+)\s*o[-.]+(.*?)(\w+)"), RelationKind.AGGREGATION, 1, 3, None),
    (re.compile(r"(\w+)\s*[-]+>\s*(\w+)(?:\s*:\s*(.+))?"), RelationKind.ASSOCIATION, 1, 2, 3),
    (re.compile(r"(\w+)\s*\.+>\s*(\w+)(?:\s*:\s*(.+))?"), RelationKind.DEPENDENCY, 1, 2, 3),
    (re.compile(r"(\w+)\s*--\s*(\w+)(?:\s*:\s*(.+))?"), RelationKind.ASSOCIATION, 1, 2, 3),
]


def parse_member(line: str) -> ClassMember:
    """
    Parse a class body line like "- name : String" or "+ run(): void".

    :param line: member line
    :return: parsed member, visibility defaults to "+"
    """
    match = VISIBILITY_RE.match(line)
    visibility = match.group(1) if match else "+"
    content = VISIBILITY_RE.sub("", line, count=1).strip()
    is_method = "(" in content
    if ":" in content:
        parts = content.split(":")
        name, type_ = parts[0].strip(), parts[1].strip()
    else:
        name, type_ = content, ""
    return ClassMember(name=name, type=type_, visibility=visibility, is_method=is_method)


def parse_relation(line: str) -> Optional[Relation]:
    for pattern, kind, source, target, label in RELATION_PATTERNS:
        match = pattern.search(line)
        if match:
            return Relation(
                source=match.group(source),
                target=match.group(target),
                kind=kind,
                label=(match.group(label) or "").strip() if label else "",
            )
    return None


def parse_class(lines: List[str], start: int) -> Optional[Tuple[ClassDef, int]]:
    """
    Parse class declaration starting at given line, including its body.

    :param lines: all lines
    :param start: index of declaration line
    :return: class and index of last consumed line, None if no name was found
    """
    line = lines[start]
    kind_match = KIND_RE.match(line)
    name_match = NAME_RE.search(line)
    if not name_match:
        return None
    cls = ClassDef(name=name_match.group(1), kind=ClassKind(kind_match.group(1)) if kind_match else ClassKind.CLASS)
    if "{" not in line:
        return cls, start
    i = start + 1
    while i < len(lines) and not lines[i].startswith("}"):
        member_line = lines[i].strip()
        if member_line and member_line != "{":
            member = parse_member(member_line)
            if member.is_method:
                cls.methods.append(member)
            else:
                cls.attributes.append(member)
        i += 1
    return cls, i


def parse_class_diagram(lines: List[str]) -> ClassDiagram:
    diagram = ClassDiagram()
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith(SKIP):
            i += 1
            continue
        if line.startswith(CLASS_START):
            parsed = parse_class(lines, i)
            if parsed:
                cls, i = parsed
                diagram.classes.append(cls)
            i += 1
            continue
        if line.startswith("actor "):
            match = ACTOR_RE.search(line)
            if match:
                diagram.actors.append(Actor(name=match.group(2) or match.group(1), label=match.group(1)))
            i += 1
            continue
        relation = parse_relation(line)
        if relation:
            diagram.relations.append(relation)
        i += 1
    log.debug(f"Parsed {len(diagram.classes)} classes and {len(diagram.relations)} relations")
    return diagram
