"""
Diagram model - Parsed PlantUML diagrams, one variant per dialect.

Parsers produce one of the variants below, the draw.io generator consumes them.
Each variant holds only the collections meaningful for its dialect and carries
a ``type`` tag, so the generator can dispatch on it. Instances live for one
parse/generate call and are never mutated by the generator.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class DiagramType(str, Enum):
    """PlantUML dialect."""

    CLASS = "class"
    SEQUENCE = "sequence"
    ACTIVITY = "activity"
    STATE = "state"
    USECASE = "usecase"
    MINDMAP = "mindmap"
    ER = "er"
    DEPLOYMENT = "deployment"


class ClassKind(str, Enum):
    CLASS = "class"
    INTERFACE = "interface"
    ABSTRACT = "abstract"
    ENUM = "enum"


class RelationKind(str, Enum):
    """Type of relationship between classes (or actors and use cases)."""

    EXTENDS = "extends"
    IMPLEMENTS = "implements"
    COMPOSITION = "composition"
    AGGREGATION = "aggregation"
    ASSOCIATION = "association"
    DEPENDENCY = "dependency"
    LINK = "link"  # Use case line without arrow head


class ActivityKind(str, Enum):
    START = "start"
    END = "end"
    ACTION = "action"
    DECISION = "decision"
    MERGE = "merge"
    FORK = "fork"
    ELSEIF_MARKER = "elseif_marker"
    ELSE_MARKER = "else_marker"

    @property
    def is_marker(self) -> bool:
        return self in (ActivityKind.ELSEIF_MARKER, ActivityKind.ELSE_MARKER)


class ParticipantKind(str, Enum):
    PARTICIPANT = "participant"
    ACTOR = "actor"


class StateKind(str, Enum):
    STATE = "state"
    START = "start"
    END = "end"


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


# Class diagram


@dataclass
class ClassMember:
    """Attribute or method line of a class body."""

    name: str
    type: str = ""
    visibility: str = "+"  # +, -, #, ~
    is_method: bool = False

    @property
    def display(self) -> str:
        return f"{self.visibility} {self.name}" + (f": {self.type}" if self.type else "")


@dataclass
class ClassDef:
    name: str
    kind: ClassKind = ClassKind.CLASS
    attributes: List[ClassMember] = field(default_factory=list)
    methods: List[ClassMember] = field(default_factory=list)


@dataclass
class Relation:
    """Edge between two named nodes. Unresolved endpoints are dropped at generation."""

    source: str
    target: str
    kind: RelationKind = RelationKind.ASSOCIATION
    label: str = ""


@dataclass
class Actor:
    name: str
    label: str


@dataclass
class ClassDiagram:
    classes: List[ClassDef] = field(default_factory=list)
    relations: List[Relation] = field(default_factory=list)
    actors: List[Actor] = field(default_factory=list)
    type: DiagramType = field(default=DiagramType.CLASS, init=False)


# Activity diagram


@dataclass
class Activity:
    id: int  # Increasing, scoped to one parse
    kind: ActivityKind
    label: str = ""
    swimlane: Optional[int] = None
    partition: Optional[int] = None
    related_decision: Optional[int] = None  # For markers and merges
    yes_branch: Optional[str] = None  # For decisions
    condition: Optional[str] = None  # For elseif markers
    note: Optional[str] = None


@dataclass
class ActivityEdge:
    source: int
    target: int
    label: str = ""


@dataclass
class Swimlane:
    id: int
    label: str
    color: Optional[str] = None
    start_index: int = 0


@dataclass
class Partition:
    id: int
    label: str
    start_index: int = 0
    end_index: int = -1  # -1 while open, stays -1 if never closed


@dataclass
class ActivityDiagram:
    activities: List[Activity] = field(default_factory=list)
    edges: List[ActivityEdge] = field(default_factory=list)
    swimlanes: List[Swimlane] = field(default_factory=list)
    partitions: List[Partition] = field(default_factory=list)
    type: DiagramType = field(default=DiagramType.ACTIVITY, init=False)


# Sequence diagram


@dataclass
class Participant:
    name: str
    label: str
    kind: ParticipantKind = ParticipantKind.PARTICIPANT


@dataclass
class Message:
    id: int
    source: str
    target: str
    text: str = ""
    is_return: bool = False
    is_async: bool = False
    is_dashed: bool = False
    note: Optional[str] = None


@dataclass
class MessageGroup:
    """Separator (== Title ==) placed before message at start_index."""

    label: str
    start_index: int


@dataclass
class Fragment:
    """Combined fragment (alt/else/end) spanning message indexes."""

    label: str
    start_index: int
    kind: str = "alt"
    else_index: Optional[int] = None
    end_index: Optional[int] = None  # None if never closed


@dataclass
class SequenceDiagram:
    participants: List[Participant] = field(default_factory=list)
    messages: List[Message] = field(default_factory=list)
    groups: List[MessageGroup] = field(default_factory=list)
    fragments: List[Fragment] = field(default_factory=list)
    type: DiagramType = field(default=DiagramType.SEQUENCE, init=False)


# State diagram


@dataclass
class State:
    id: int
    name: str
    label: str
    kind: StateKind = StateKind.STATE
    note: Optional[str] = None


@dataclass
class Transition:
    source: str
    target: str
    label: str = ""


@dataclass
class StateDiagram:
    states: List[State] = field(default_factory=list)
    transitions: List[Transition] = field(default_factory=list)
    type: DiagramType = field(default=DiagramType.STATE, init=False)


# Use case diagram


@dataclass
class UseCase:
    name: str
    label: str
    rectangle: Optional[str] = None  # Label of containing rectangle


@dataclass
class Rectangle:
    label: str
    usecases: List[str] = field(default_factory=list)


@dataclass
class UseCaseDiagram:
    actors: List[Actor] = field(default_factory=list)
    usecases: List[UseCase] = field(default_factory=list)
    relations: List[Relation] = field(default_factory=list)
    rectangles: List[Rectangle] = field(default_factory=list)
    type: DiagramType = field(default=DiagramType.USECASE, init=False)


# Mind map


@dataclass
class MindmapNode:
    id: int
    text: str
    level: int
    side: Side = Side.RIGHT
    parent: Optional[int] = None


@dataclass
class MindmapDiagram:
    nodes: List[MindmapNode] = field(default_factory=list)
    type: DiagramType = field(default=DiagramType.MINDMAP, init=False)


# Entity relationship diagram


@dataclass
class EntityAttribute:
    name: str
    type: str = ""
    is_primary_key: bool = False


@dataclass
class Entity:
    id: int
    name: str
    label: str
    attributes: List[EntityAttribute] = field(default_factory=list)


@dataclass
class Relationship:
    source: str
    target: str
    label: str = ""
    source_cardinality: str = "1"
    target_cardinality: str = "n"


@dataclass
class ERDiagram:
    entities: List[Entity] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)
    type: DiagramType = field(default=DiagramType.ER, init=False)


# Deployment diagram


@dataclass
class DeploymentNode:
    id: int
    name: str
    label: str
    kind: str = "node"  # node, database, cloud, artifact, folder, frame, ...


@dataclass
class Connection:
    source: str
    target: str
    label: str = ""
    is_dashed: bool = False


@dataclass
class DeploymentDiagram:
    nodes: List[DeploymentNode] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)
    type: DiagramType = field(default=DiagramType.DEPLOYMENT, init=False)


ParsedDiagram = Union[
    ClassDiagram,
    ActivityDiagram,
    SequenceDiagram,
    StateDiagram,
    UseCaseDiagram,
    MindmapDiagram,
    ERDiagram,
    DeploymentDiagram,
]
