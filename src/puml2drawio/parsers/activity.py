"""
Activity diagram parser.

Nested if/elseif/else/endif blocks are tracked with an explicit stack of
frames, partitions with a second stack. Frames left open at the end of input
are abandoned. Edges are built in a second pass by build_activity_edges.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import re
import logging

from puml2drawio.diagram_model import (
    Activity,
    ActivityDiagram,
    ActivityEdge,
    ActivityKind,
    Partition,
    Swimlane,
)
from puml2drawio.parsers.common import DIRECTIVES, LineRule, NoteCollector, dispatch, is_directive

log = logging.getLogger(__name__)

SWIMLANE_RE = re.compile(r"^\|(?:#(\w+)\|)?([^|]+)\|$")
PARTITION_RE = re.compile(r'^partition\s+"?([^"{]+)"?\s*\{?$')
ACTION_RE = re.compile(r"^:(.+);$")
IF_RE = re.compile(r"^if\s*\((.+)\)\s*then\s*\((.+)\)$")
ELSEIF_RE = re.compile(r"^elseif\s*\((.+)\)\s*then\s*\((.+)\)$")
ELSE_RE = re.compile(r"^else\s*\((.+)\)$")
WHILE_RE = re.compile(r"^while\s*\((.+?)\)\s*(?:is\s*\((.+)\))?$")
NOTE_POSITION_RE = re.compile(r"note\s+(left|right|top|bottom)")


@dataclass
class Branch:
    label: str
    start_index: int


@dataclass
class IfFrame:
    """Open if block: owning decision and branches seen so far."""

    decision_id: int
    branches: List[Branch] = field(default_factory=list)


class ActivityParser:
    def __init__(self):
        self.diagram = ActivityDiagram()
        self.next_id = 0
        self.if_stack: List[IfFrame] = []
        self.partition_stack: List[Partition] = []
        self.swimlane_by_label: Dict[str, Swimlane] = {}
        self.current_swimlane: Optional[Swimlane] = None
        self.note = NoteCollector()
        self.rules: List[LineRule] = [
            (SWIMLANE_RE, self._swimlane),
            (PARTITION_RE, self._partition),
            (re.compile(r"^\}$"), self._close_partition),
            (re.compile(r"^start$"), lambda m: self._add(ActivityKind.START, "Start")),
            (re.compile(r"^(?:stop|end)$"), lambda m: self._add(ActivityKind.END, "End")),
            (re.compile(r"^(?:fork|fork again|end fork)$"), lambda m: self._add(ActivityKind.FORK)),
            (ACTION_RE, lambda m: self._add(ActivityKind.ACTION, m.group(1).strip())),
            (IF_RE, self._if),
            (ELSEIF_RE, self._elseif),
            (ELSE_RE, self._else),
            (re.compile(r"^endif$"), self._endif),
            (WHILE_RE, self._while),
            (re.compile(r"^endwhile"), lambda m: self._add(ActivityKind.MERGE)),
        ]

    @property
    def activities(self) -> List[Activity]:
        return self.diagram.activities

    def _add(self, kind: ActivityKind, label: str = "", **kwargs) -> Activity:
        partition = self.partition_stack[-1] if self.partition_stack else None
        activity = Activity(
            id=self.next_id,
            kind=kind,
            label=label,
            swimlane=self.current_swimlane.id if self.current_swimlane else None,
            partition=partition.id if partition else None,
            **kwargs,
        )
        self.next_id += 1
        self.activities.append(activity)
        return activity

    def _swimlane(self, match: re.Match) -> None:
        label = match.group(2).strip()
        if label not in self.swimlane_by_label:
            lane = Swimlane(
                id=len(self.diagram.swimlanes),
                label=label,
                color=match.group(1),
                start_index=len(self.activities),
            )
            self.diagram.swimlanes.append(lane)
            self.swimlane_by_label[label] = lane
        self.current_swimlane = self.swimlane_by_label[label]

    def _partition(self, match: re.Match) -> None:
        partition = Partition(
            id=len(self.diagram.partitions),
            label=match.group(1).strip(),
            start_index=len(self.activities),
        )
        self.diagram.partitions.append(partition)
        self.partition_stack.append(partition)

    def _close_partition(self, match: re.Match) -> None:
        if self.partition_stack:
            self.partition_stack.pop().end_index = len(self.activities)

    def _if(self, match: re.Match) -> None:
        branch = match.group(2).strip()
        decision = self._add(ActivityKind.DECISION, match.group(1).strip(), yes_branch=branch)
        self.if_stack.append(IfFrame(decision.id, [Branch(branch, len(self.activities))]))

    def _elseif(self, match: re.Match) -> None:
        if not self.if_stack:
            return
        frame = self.if_stack[-1]
        label = match.group(2).strip()
        self._add(
            ActivityKind.ELSEIF_MARKER,
            label,
            condition=match.group(1).strip(),
            related_decision=frame.decision_id,
        )
        frame.branches.append(Branch(label, len(self.activities)))

    def _else(self, match: re.Match) -> None:
        if not self.if_stack:
            return
        frame = self.if_stack[-1]
        label = match.group(1).strip()
        self._add(ActivityKind.ELSE_MARKER, label, related_decision=frame.decision_id)
        frame.branches.append(Branch(label, len(self.activities)))

    def _endif(self, match: re.Match) -> None:
        if self.if_stack:
            frame = self.if_stack.pop()
            self._add(ActivityKind.MERGE, related_decision=frame.decision_id)

    def _while(self, match: re.Match) -> None:
        self._add(ActivityKind.DECISION, match.group(1).strip(), yes_branch=match.group(2) or "yes")

    def feed(self, line: str) -> None:
        if line.startswith("note "):
            self.note.start(NOTE_POSITION_RE.sub("", line).strip())
            return
        if line == "end note":
            text = self.note.finish()
            if self.activities:
                self.activities[-1].note = re.sub(r"^\s+", "", text, flags=re.MULTILINE)
            return
        if self.note.active:
            self.note.add(line)
            return
        dispatch(line, self.rules)

    def parse(self, lines: List[str]) -> ActivityDiagram:
        for line in lines:
            if is_directive(line, DIRECTIVES):
                continue
            self.feed(line)
        if self.if_stack or self.partition_stack:
            log.debug(f"Abandoning {len(self.if_stack)} open if block(s), {len(self.partition_stack)} partition(s)")
        self.diagram.edges = build_activity_edges(self.activities)
        return self.diagram


def build_activity_edges(activities: List[Activity]) -> List[ActivityEdge]:
    """
    Connect activities in reading order.

    * else/elseif markers never start or end an edge,
    * a decision connects to the next activity (its first branch) and to the
      activity following each of its markers,
    * an edge that would end in a marker closes a branch, so it ends in the
      merge of the marker's decision instead,
    * everything else connects to the next activity.

    :param activities: activities in parse order
    :return: list of edges
    """
    merge_of: Dict[int, int] = {}
    for activity in activities:
        if activity.kind == ActivityKind.MERGE and activity.related_decision is not None:
            merge_of[activity.related_decision] = activity.id

    def entry(activity: Activity) -> Optional[int]:
        if activity.kind.is_marker:
            return merge_of.get(activity.related_decision)
        return activity.id

    edges: List[ActivityEdge] = []

    def connect(source: Activity, target: Activity, label: str = "") -> None:
        target_id = entry(target)
        if target_id is not None:
            edges.append(ActivityEdge(source.id, target_id, label))

    for i in range(len(activities) - 1):
        current = activities[i]
        if current.kind.is_marker:
            continue
        connect(current, activities[i + 1], current.yes_branch or "")
        if current.kind == ActivityKind.DECISION:
            for j in range(i + 1, len(activities) - 1):
                marker = activities[j]
                if marker.kind.is_marker and marker.related_decision == current.id:
                    connect(current, activities[j + 1], marker.label)
    return edges


def parse_activity_diagram(lines: List[str]) -> ActivityDiagram:
    return ActivityParser().parse(lines)
