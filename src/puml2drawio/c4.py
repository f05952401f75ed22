"""
C4 architecture diagrams (C4-PlantUML macros).

Independent of the dialect parsers: entities form a tree through brace nesting,
and are laid out one row per tree depth.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import logging
import re

from puml2drawio import styles
from puml2drawio.drawio import GeneratorContext, wrap_document

log = logging.getLogger(__name__)

C4_TYPES = frozenset(
    [
        "Person",
        "Person_Ext",
        "System",
        "SystemDb",
        "SystemQueue",
        "System_Ext",
        "SystemDb_Ext",
        "SystemQueue_Ext",
        "Container",
        "ContainerDb",
        "ContainerQueue",
        "Container_Ext",
        "ContainerDb_Ext",
        "ContainerQueue_Ext",
        "Component",
        "ComponentDb",
        "ComponentQueue",
        "Component_Ext",
        "ComponentDb_Ext",
        "ComponentQueue_Ext",
    ]
)

#: Box sizes by exact kind, anything else gets DEFAULT_SIZE.
SIZES: Dict[str, Tuple[int, int]] = {
    "System": (220, 140),
    "Container": (200, 120),
    "Component": (180, 100),
}
DEFAULT_SIZE = (160, 90)
SPACING_X = 260
SPACING_Y = 200
START_X = 40
START_Y = 40

SKIP_PREFIXES = (
    "!include",
    "@start",
    "@end",
    "'",
    "LAYOUT_",
    "SHOW_LEGEND",
    "title",
    "scale",
    "Update",
    "AddRelTag",
    "AddElementTag",
)

DETECT_PATTERNS = [
    re.compile(r"!include.*C4", re.IGNORECASE),
    re.compile(r"System\s*\("),
    re.compile(r"Container\s*\("),
    re.compile(r"Component\s*\("),
    re.compile(r"System_Ext\s*\("),
    re.compile(r"Container_Ext\s*\("),
    re.compile(r"Rel\s*\("),
]
RELATION_LINE_RE = re.compile(r"^(?:Bi)?Rel(?:_\w+)?\s*\(")
RELATION_RE = re.compile(
    r'\b(?:Bi)?Rel(?:_\w+)?\s*\(\s*([^,()"]+?)\s*,\s*([^,()"]+?)\s*,\s*"([^"]*)"(?:\s*,\s*"([^"]*)")?'
)
ENTITY_RE = re.compile(r"^(.*)\((.*)\)")


@dataclass
class C4Entity:
    alias: str
    label: str
    kind: str
    technology: Optional[str] = None
    description: Optional[str] = None
    children: List["C4Entity"] = field(default_factory=list)
    parent: Optional[str] = field(default=None, repr=False)

    @property
    def value(self) -> str:
        """Cell text, present parts joined."""
        return " | ".join(part for part in (self.label, self.technology, self.description) if part)


@dataclass
class C4Relation:
    source: str
    target: str
    label: str
    description: str = ""

    @property
    def value(self) -> str:
        return " - ".join(part for part in (self.label, self.description) if part)


@dataclass
class PositionedEntity:
    entity: C4Entity
    depth: int
    x: int
    y: int
    width: int
    height: int


def detect_c4(code: str) -> bool:
    """True if code uses C4-PlantUML macros."""
    return any(pattern.search(code) for pattern in DETECT_PATTERNS)


def _skippable(line: str) -> bool:
    return not line or line.startswith(SKIP_PREFIXES) or RELATION_LINE_RE.match(line) is not None


def _parse_entity(line: str, parent: Optional[str]) -> Optional[C4Entity]:
    match = ENTITY_RE.match(line)
    if not match:
        return None
    kind = match.group(1).strip()
    if kind not in C4_TYPES:
        return None
    props = [prop.strip() for prop in match.group(2).split(",")]
    if not props[0]:
        return None
    # Keyword arguments ($tags=..., $link=...) are not positional text
    text_props = [prop for prop in props if not prop.startswith("$")]
    return C4Entity(
        alias=props[0],
        label=props[1] if len(props) > 1 and props[1] else props[0],
        kind=kind,
        technology=text_props[2] if len(text_props) >= 3 else None,
        description=text_props[3] if len(text_props) >= 4 else None,
        parent=parent,
    )


def _create_hierarchy(flat: List[C4Entity]) -> List[C4Entity]:
    roots = []
    for entity in flat:
        if entity.parent is None:
            roots.append(entity)
            continue
        parent = next((candidate for candidate in flat if candidate.alias == entity.parent), None)
        if parent is None:
            log.debug(f"Dropping C4 entity {entity.alias}, unknown parent {entity.parent}")
            continue
        parent.children.append(entity)
    for entity in flat:
        entity.parent = None
    return roots


def parse_c4_entities(code: str) -> List[C4Entity]:
    """
    Parse C4 entities into tree.

    A line ending with "{" opens a block whose entities become children of the
    line's entity. Boundaries and other unknown macros keep the enclosing parent.

    :param code: C4-PlantUML source
    :return: root entities in source order
    """
    flat: List[C4Entity] = []
    stack: List[Optional[str]] = []
    for raw in code.split("\n"):
        line = raw.strip().replace('"', "")
        if _skippable(line):
            continue
        parent = stack[-1] if stack else None
        if line.startswith("}"):
            if stack:
                stack.pop()
            continue
        entity = _parse_entity(line, parent)
        if entity is not None:
            flat.append(entity)
        if line.endswith("{"):
            stack.append(entity.alias if entity is not None else parent)
    return _create_hierarchy(flat)


def parse_c4_relations(code: str) -> List[C4Relation]:
    """
    Find all Rel/Rel_*/BiRel declarations.

    :param code: C4-PlantUML source
    :return: relations in source order
    """
    return [
        C4Relation(
            source=match.group(1).strip(),
            target=match.group(2).strip(),
            label=match.group(3).strip(),
            description=(match.group(4) or "").strip(),
        )
        for match in RELATION_RE.finditer(code)
    ]


def flatten_entities(entities: List[C4Entity], depth: int = 0) -> List[Tuple[C4Entity, int]]:
    """Depth first list of (entity, depth)."""
    result = []
    for entity in entities:
        result.append((entity, depth))
        result.extend(flatten_entities(entity.children, depth + 1))
    return result


def layout_c4_entities(entities: List[C4Entity]) -> List[PositionedEntity]:
    """Place entities, one row per tree depth, columns in depth first order."""
    buckets: Dict[int, List[C4Entity]] = {}
    for entity, depth in flatten_entities(entities):
        buckets.setdefault(depth, []).append(entity)
    nodes = []
    for depth in sorted(buckets):
        for index, entity in enumerate(buckets[depth]):
            width, height = SIZES.get(entity.kind, DEFAULT_SIZE)
            nodes.append(
                PositionedEntity(
                    entity=entity,
                    depth=depth,
                    x=START_X + index * SPACING_X,
                    y=START_Y + depth * SPACING_Y,
                    width=width,
                    height=height,
                )
            )
    return nodes


def entity_colors(kind: str) -> Tuple[str, str]:
    for prefix, colors in styles.C4_COLORS:
        if kind.startswith(prefix):
            return colors
    return styles.C4_DEFAULT_COLOR


def build_c4_cells(layout: List[PositionedEntity], relations: List[C4Relation], ctx: GeneratorContext) -> str:
    """
    Emit vertices for placed entities and edges for relations.

    Relations referencing unknown aliases are dropped. With duplicated aliases
    the last placed entity wins.
    """
    for node in layout:
        fill, stroke = entity_colors(node.entity.kind)
        ctx.vertex(
            node.entity.value,
            styles.C4_ENTITY.format(fill=fill, stroke=stroke),
            node.x,
            node.y,
            node.width,
            node.height,
            key=node.entity.alias,
        )
    for relation in relations:
        ctx.edge(relation.value, styles.C4_RELATION, relation.source, relation.target)
    return ctx.markup()


def convert_c4_to_drawio(code: str, compressed: bool = False) -> str:
    """
    Convert C4-PlantUML source to draw.io document.

    :param code: C4-PlantUML source
    :param compressed: embed diagram compressed
    :return: <mxfile> document
    """
    entities = parse_c4_entities(code)
    relations = parse_c4_relations(code)
    layout = layout_c4_entities(entities)
    log.debug(f"C4 diagram with {len(layout)} entities and {len(relations)} relations")
    return wrap_document(build_c4_cells(layout, relations, GeneratorContext()), compressed)
