"""PlantUML dialect parsers.

Every parser does a single tolerant pass over normalized lines: unknown lines
are ignored, unbalanced blocks are abandoned at the end of input.
"""

from typing import Callable, Dict, List
import logging

from puml2drawio.classify import classify
from puml2drawio.diagram_model import DiagramType, ParsedDiagram
from puml2drawio.parsers.activity import build_activity_edges, parse_activity_diagram
from puml2drawio.parsers.class_diagram import parse_class_diagram
from puml2drawio.parsers.deployment import parse_deployment_diagram
from puml2drawio.parsers.er import parse_er_diagram
from puml2drawio.parsers.mindmap import parse_mindmap
from puml2drawio.parsers.sequence import parse_sequence_diagram
from puml2drawio.parsers.state import parse_state_diagram
from puml2drawio.parsers.usecase import parse_usecase_diagram
from puml2drawio.utils import normalize_lines

log = logging.getLogger(__name__)

PARSERS: Dict[DiagramType, Callable[[List[str]], ParsedDiagram]] = {
    DiagramType.CLASS: parse_class_diagram,
    DiagramType.SEQUENCE: parse_sequence_diagram,
    DiagramType.ACTIVITY: parse_activity_diagram,
    DiagramType.STATE: parse_state_diagram,
    DiagramType.USECASE: parse_usecase_diagram,
    DiagramType.MINDMAP: parse_mindmap,
    DiagramType.ER: parse_er_diagram,
    DiagramType.DEPLOYMENT: parse_deployment_diagram,
}


def parse(text: str) -> ParsedDiagram:
    """
    Parse PlantUML source into dialect specific diagram.

    :param text: PlantUML source
    :return: parsed diagram, never raises for bad syntax
    """
    lines = normalize_lines(text)
    diagram_type = classify(text, lines)
    log.debug(f"Detected {diagram_type.value} diagram ({len(lines)} lines)")
    return PARSERS[diagram_type](lines)


__all__ = [
    "parse",
    "PARSERS",
    "build_activity_edges",
    "parse_activity_diagram",
    "parse_class_diagram",
    "parse_deployment_diagram",
    "parse_er_diagram",
    "parse_mindmap",
    "parse_sequence_diagram",
    "parse_state_diagram",
    "parse_usecase_diagram",
]
