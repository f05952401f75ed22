"""
Draw.io generator - Lays out a parsed diagram and renders it as mxCell markup.

Layout is deterministic and derived from parse order only. The only random
input is the id prefix, which never influences placement.
"""

from typing import Callable, Dict, Optional
import logging

from puml2drawio import styles
from puml2drawio.config import Configuration
from puml2drawio.drawio import GeneratorContext, wrap_document
from puml2drawio.utils import text_width
from puml2drawio.diagram_model import (
    ActivityDiagram,
    ActivityKind,
    ClassDiagram,
    DeploymentDiagram,
    DiagramType,
    ERDiagram,
    MindmapDiagram,
    ParsedDiagram,
    ParticipantKind,
    RelationKind,
    SequenceDiagram,
    Side,
    StateDiagram,
    StateKind,
    UseCaseDiagram,
)
from puml2drawio.parsers.state import END_KEY, START_KEY, state_key

log = logging.getLogger(__name__)


class DrawioGenerator:
    """Renders one parsed diagram into a draw.io document."""

    def __init__(self, diagram: ParsedDiagram, config: Optional[Configuration] = None):
        """
        :param diagram: parsed diagram, not modified
        :param config: configuration, defaults are used if None
        """
        self.diagram = diagram
        self.config = config or Configuration()
        self._renderers: Dict[DiagramType, Callable[[GeneratorContext], None]] = {
            DiagramType.CLASS: self._class_diagram,
            DiagramType.ACTIVITY: self._activity_diagram,
            DiagramType.SEQUENCE: self._sequence_diagram,
            DiagramType.STATE: self._state_diagram,
            DiagramType.USECASE: self._usecase_diagram,
            DiagramType.MINDMAP: self._mindmap,
            DiagramType.ER: self._er_diagram,
            DiagramType.DEPLOYMENT: self._deployment_diagram,
        }

    def render_cells(self, prefix: Optional[str] = None) -> str:
        """
        Render cells only, without document envelope.

        :param prefix: id prefix, random if None
        :return: concatenated mxCell markup
        """
        ctx = GeneratorContext(prefix)
        self._renderers[self.diagram.type](ctx)
        log.debug(f"Rendered {len(ctx.cells)} cells for {self.diagram.type.value} diagram")
        return ctx.markup()

    def generate(self, compressed: Optional[bool] = None) -> str:
        """
        Render complete draw.io document.

        :param compressed: embed diagram compressed, configuration default if None
        :return: <mxfile> document
        """
        if compressed is None:
            compressed = self.config.compressed
        return wrap_document(self.render_cells(), compressed)

    # Class diagram: grid with 4 columns

    def _class_diagram(self, ctx: GeneratorContext) -> None:
        diagram: ClassDiagram = self.diagram
        x, y = 40, 40
        spacing = 200
        width = 160
        count = 0

        for cls in diagram.classes:
            height = 60 + (len(cls.attributes) + len(cls.methods)) * 20
            fill, stroke = styles.CLASS_COLORS[cls.kind]
            class_id = ctx.vertex(cls.name, styles.swimlane_box(fill, stroke), x, y, width, height, key=cls.name)
            member_y = 26
            for attribute in cls.attributes:
                ctx.vertex(attribute.display, styles.ROW, 0, member_y, width, 20, parent=class_id)
                member_y += 20
            if cls.attributes and cls.methods:
                ctx.vertex("", styles.DIVIDER, 0, member_y, width, 8, parent=class_id)
                member_y += 8
            for method in cls.methods:
                ctx.vertex(method.display, styles.ROW, 0, member_y, width, 20, parent=class_id)
                member_y += 20
            count += 1
            if count % 4 == 0:
                x = 40
                y += height + 60
            else:
                x += spacing

        for actor in diagram.actors:
            ctx.vertex(actor.label, styles.UML_ACTOR, x, y, 30, 60, key=actor.name)
            count += 1
            if count % 4 == 0:
                x = 40
                y += 120
            else:
                x += spacing

        for relation in diagram.relations:
            style = styles.RELATION_STYLES.get(relation.kind, styles.RELATION_STYLES[RelationKind.ASSOCIATION])
            ctx.edge(relation.label, style, relation.source, relation.target)

    # Activity diagram: vertical flow, optionally split into swimlanes

    def _activity_diagram(self, ctx: GeneratorContext) -> None:
        diagram: ActivityDiagram = self.diagram
        activities = diagram.activities
        lane_width = 250
        node_width = 140
        node_height = 40
        spacing = 70
        start_y = 40

        lane_x: Dict[int, float] = {}
        if diagram.swimlanes:
            x = 20
            lane_height = 100 + len(activities) * spacing
            for lane in diagram.swimlanes:
                style = styles.SWIMLANE.format(fill=lane.color or styles.GREY[0])
                ctx.vertex(lane.label, style, x, start_y, lane_width, lane_height)
                lane_x[lane.id] = x
                x += lane_width
            start_y += 50

        y_of: Dict[int, float] = {}
        current_y = start_y
        for activity in activities:
            if activity.kind.is_marker:
                continue
            y_of[activity.id] = current_y
            if activity.kind in (ActivityKind.START, ActivityKind.END):
                current_y += 50
            elif activity.kind == ActivityKind.DECISION:
                current_y += 80
            elif activity.kind in (ActivityKind.MERGE, ActivityKind.FORK):
                current_y += 40
            else:
                current_y += spacing

        for partition in diagram.partitions:
            members = [y_of[a.id] for a in activities if a.partition == partition.id and a.id in y_of]
            if members:
                top = min(members) - 20
                ctx.vertex(partition.label, styles.PARTITION, 110, top, 280, max(members) - top + 70)

        for activity in activities:
            if activity.kind.is_marker:
                continue
            y = y_of[activity.id]
            x = 150
            if activity.swimlane in lane_x:
                x = lane_x[activity.swimlane] + lane_width / 2 - node_width / 2 + 30
            center_x = x + node_width / 2
            anchor = (center_x, y + node_height / 2)
            key = activity.id

            if activity.kind == ActivityKind.START:
                ctx.vertex("", styles.ACTIVITY_START, center_x - 15, y, 30, 30, key=key, anchor=anchor)
            elif activity.kind == ActivityKind.END:
                ctx.vertex("", styles.ACTIVITY_END, center_x - 15, y, 30, 30, key=key, anchor=anchor)
                ctx.vertex("", styles.ACTIVITY_END_RING, center_x - 20, y - 5, 40, 40)
            elif activity.kind == ActivityKind.ACTION:
                width = text_width(activity.label, node_width)
                ctx.vertex(activity.label, styles.ACTIVITY_ACTION, x, y, width, node_height, key=key, anchor=anchor)
                if activity.note:
                    ctx.vertex(activity.note, styles.ACTIVITY_NOTE, x + width + 20, y - 10, 140, 60)
            elif activity.kind == ActivityKind.DECISION:
                ctx.vertex(activity.label, styles.ACTIVITY_DECISION, x, y, 100, 60, key=key, anchor=anchor)
            elif activity.kind == ActivityKind.MERGE:
                ctx.vertex("", styles.ACTIVITY_MERGE, center_x - 15, y, 30, 30, key=key, anchor=anchor)
            elif activity.kind == ActivityKind.FORK:
                ctx.vertex("", styles.ACTIVITY_FORK, x, y, 100, 10, key=key, anchor=anchor)

        for edge in diagram.edges:
            ctx.edge(edge.label, styles.ACTIVITY_EDGE, edge.source, edge.target)

    # Sequence diagram: participants in a row, messages top to bottom

    def _sequence_diagram(self, ctx: GeneratorContext) -> None:
        diagram: SequenceDiagram = self.diagram
        participant_width = 100
        participant_spacing = 150
        message_spacing = 50
        total_width = 50 + len(diagram.participants) * participant_spacing
        top = 40
        lifeline_height = 100 + len(diagram.messages) * message_spacing

        for index, participant in enumerate(diagram.participants):
            x = 50 + index * participant_spacing
            is_actor = participant.kind == ParticipantKind.ACTOR
            width = 30 if is_actor else participant_width
            height = 60 if is_actor else 40
            style = styles.PARTICIPANT_ACTOR if is_actor else styles.PARTICIPANT
            lifeline_x = x + participant_width / 2
            ctx.vertex(
                participant.label,
                style,
                x + (participant_width - width) / 2,
                top,
                width,
                height,
                key=participant.name,
                anchor=(lifeline_x, top),
            )
            ctx.floating_edge(
                "", styles.LIFELINE, lifeline_x, top + height, lifeline_x, top + height + lifeline_height
            )

        for group in diagram.groups:
            group_y = 100 + group.start_index * message_spacing
            ctx.vertex("", styles.GROUP_LINE, 30, group_y, total_width, 1)
            ctx.vertex(group.label, styles.GROUP_LABEL, total_width / 2 - 60, group_y - 12, 120, 24)

        for fragment in diagram.fragments:
            end_index = fragment.end_index if fragment.end_index is not None else len(diagram.messages)
            fragment_top = 120 + fragment.start_index * message_spacing - 30
            fragment_height = max(1, end_index - fragment.start_index) * message_spacing + 10
            label = f"{fragment.kind} [{fragment.label}]"
            ctx.vertex(label, styles.FRAGMENT, 30, fragment_top, total_width, fragment_height)

        for message in diagram.messages:
            source = ctx.positions.get(message.source)
            target = ctx.positions.get(message.target)
            if source is None or target is None:
                continue
            message_y = 120 + message.id * message_spacing
            style = styles.MESSAGE_DASHED if message.is_dashed else styles.MESSAGE
            ctx.floating_edge(message.text, style, source.x, message_y, target.x, message_y)
            if message.note:
                ctx.vertex(message.note, styles.ACTIVITY_NOTE, max(source.x, target.x) + 20, message_y - 30, 140, 40)

    # State diagram: grid with 4 columns

    def _state_diagram(self, ctx: GeneratorContext) -> None:
        diagram: StateDiagram = self.diagram
        x, y = 100, 50
        spacing = 180
        count = 0

        for state in diagram.states:
            if state.kind == StateKind.START:
                key, style, width, height = START_KEY, styles.STATE_START, 30, 30
            elif state.kind == StateKind.END:
                key, style, width, height = END_KEY, styles.STATE_END, 30, 30
            else:
                key, style, height = state.name, styles.STATE, 50
                width = text_width(state.label, 120)
            ctx.vertex(state.label, style, x, y, width, height, key=key)
            if state.note:
                ctx.vertex(state.note, styles.STATE_NOTE, x + width + 10, y, 120, 60)
            count += 1
            if count % 4 == 0:
                x = 100
                y += 100
            else:
                x += spacing

        for transition in diagram.transitions:
            source = state_key(transition.source, is_source=True)
            target = state_key(transition.target, is_source=False)
            ctx.edge(transition.label, styles.TRANSITION, source, target)

    # Use case diagram: actors left, use cases right

    def _usecase_diagram(self, ctx: GeneratorContext) -> None:
        diagram: UseCaseDiagram = self.diagram
        actor_x, actor_y = 50, 100
        usecase_x, usecase_y = 300, 50
        actor_spacing = 100
        usecase_spacing = 80

        for rectangle in diagram.rectangles:
            height = max(200, len(rectangle.usecases) * usecase_spacing + 50)
            ctx.vertex(rectangle.label, styles.USECASE_RECTANGLE, 250, 30, 300, height)

        for actor in diagram.actors:
            ctx.vertex(actor.label, styles.UML_ACTOR, actor_x, actor_y, 30, 60, key=actor.name)
            actor_y += actor_spacing

        for usecase in diagram.usecases:
            ctx.vertex(usecase.label, styles.USECASE, usecase_x, usecase_y, 120, 50, key=usecase.name)
            usecase_y += usecase_spacing

        for relation in diagram.relations:
            ctx.edge(relation.label, styles.USECASE_LINK, relation.source, relation.target)

    # Mind map: root centered, levels fanning out left and right

    def _mindmap(self, ctx: GeneratorContext) -> None:
        diagram: MindmapDiagram = self.diagram
        center_x, center_y = 400, 300
        level_spacing = 180
        node_height = 40
        right_y = left_y = center_y - 100

        for node in diagram.nodes:
            width = text_width(node.text, 100)
            if node.level == 1:
                x = center_x - width / 2
                y = center_y - node_height / 2
            else:
                offset = (node.level - 1) * level_spacing
                if node.side == Side.RIGHT:
                    x, y = center_x + offset, right_y
                    right_y += 60
                else:
                    x, y = center_x - offset - width, left_y
                    left_y += 60
            fill, stroke = styles.MINDMAP_LEVEL_COLORS.get(node.level, styles.MINDMAP_DEEP_COLOR)
            ctx.vertex(
                node.text,
                styles.MINDMAP_NODE.format(fill=fill, stroke=stroke),
                x,
                y,
                width,
                node_height,
                key=node.id,
                anchor=(x + width / 2, y + node_height / 2),
            )
            if node.parent is not None:
                ctx.edge("", styles.MINDMAP_EDGE, node.parent, node.id)

    # ER diagram: grid with 3 columns

    def _er_diagram(self, ctx: GeneratorContext) -> None:
        diagram: ERDiagram = self.diagram
        x, y = 50, 50
        spacing = 250
        width = 180
        count = 0

        for entity in diagram.entities:
            height = 30 + len(entity.attributes) * 20
            fill, stroke = styles.BLUE
            entity_id = ctx.vertex(
                entity.label, styles.swimlane_box(fill, stroke, collapsible=0), x, y, width, height, key=entity.name
            )
            row_y = 26
            for attribute in entity.attributes:
                value = ("PK " if attribute.is_primary_key else "") + attribute.name
                if attribute.type:
                    value += f": {attribute.type}"
                style = styles.ROW_UNDERLINED if attribute.is_primary_key else styles.ROW
                ctx.vertex(value, style, 0, row_y, width, 20, parent=entity_id)
                row_y += 20
            count += 1
            if count % 3 == 0:
                x = 50
                y += height + 80
            else:
                x += spacing

        for relationship in diagram.relationships:
            ctx.edge(relationship.label, styles.ER_RELATIONSHIP, relationship.source, relationship.target)

    # Deployment diagram: grid with 4 columns

    def _deployment_diagram(self, ctx: GeneratorContext) -> None:
        diagram: DeploymentDiagram = self.diagram
        x, y = 50, 50
        spacing = 200
        count = 0

        for node in diagram.nodes:
            style, width, height = styles.DEPLOYMENT_SHAPES.get(node.kind, styles.DEPLOYMENT_DEFAULT)
            ctx.vertex(node.label, style, x, y, width, height, key=node.name)
            count += 1
            if count % 4 == 0:
                x = 50
                y += 120
            else:
                x += spacing

        for connection in diagram.connections:
            style = styles.DEPLOYMENT_CONNECTION_DASHED if connection.is_dashed else styles.DEPLOYMENT_CONNECTION
            ctx.edge(connection.label, style, connection.source, connection.target)
