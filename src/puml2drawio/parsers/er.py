from typing import Dict, List, Optional
import re

from puml2drawio.diagram_model import Entity, EntityAttribute, ERDiagram, Relationship
from puml2drawio.parsers.common import DIRECTIVES_WITH_HIDE

ENTITY_RE = re.compile(r'^entity\s+"?([^"{\s]+)"?\s*(?:as\s+(\w+))?\s*\{?$')
ATTRIBUTE_RE = re.compile(r"^\*?\s*([^:]+)(?:\s*:\s*(.+))?$")
RELATION_RE = re.compile(r"^(\w+)\s*([|o{}\[\]]+[-\.]+[|o{}\[\]]+)\s*(\w+)(?:\s*:\s*(.+))?$")


def parse_er_diagram(lines: List[str]) -> ERDiagram:
    diagram = ERDiagram()
    entities: Dict[str, Entity] = {}
    current: Optional[Entity] = None

    def ensure(name: str) -> None:
        if name not in entities:
            entity = Entity(id=len(diagram.entities), name=name, label=name)
            entities[name] = entity
            diagram.entities.append(entity)

    for line in lines:
        if line.startswith(DIRECTIVES_WITH_HIDE):
            continue

        match = ENTITY_RE.match(line)
        if match:
            name = match.group(2) or match.group(1)
            current = Entity(id=len(diagram.entities), name=name, label=match.group(1))
            entities[name] = current
            diagram.entities.append(current)
            continue

        if line == "}":
            current = None
            continue

        # Inside entity body everything except "--" / ".." separators is an attribute
        if current is not None and line and "--" not in line and ".." not in line:
            match = ATTRIBUTE_RE.match(line)
            if match:
                current.attributes.append(
                    EntityAttribute(
                        name=match.group(1).replace("*", "", 1).strip(),
                        type=match.group(2) or "",
                        is_primary_key=line.startswith("*"),
                    )
                )
            continue

        match = RELATION_RE.match(line)
        if match:
            ensure(match.group(1))
            ensure(match.group(3))
            diagram.relationships.append(
                Relationship(source=match.group(1), target=match.group(3), label=match.group(4) or "")
            )
    return diagram
