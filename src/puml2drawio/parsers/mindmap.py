from typing import Dict, List
import re

from puml2drawio.diagram_model import MindmapDiagram, MindmapNode, Side
from puml2drawio.parsers.common import DIRECTIVES, is_directive

LEVEL_RE = re.compile(r"^([+\-*]+)\s*(.+)$")


def parse_mindmap(lines: List[str]) -> MindmapDiagram:
    """
    Parse mind map outline.

    Depth is the length of the leading run of "+", "-" or "*". A "+" in the run
    puts the node on the right side. Parent is the last node seen one level up.
    """
    diagram = MindmapDiagram()
    last_by_level: Dict[int, int] = {}
    for line in lines:
        if is_directive(line, DIRECTIVES):
            continue
        match = LEVEL_RE.match(line)
        if not match:
            continue
        level = len(match.group(1))
        node = MindmapNode(
            id=len(diagram.nodes),
            text=match.group(2).strip(),
            level=level,
            side=Side.RIGHT if "+" in match.group(1) else Side.LEFT,
            parent=last_by_level.get(level - 1) if level > 1 else None,
        )
        diagram.nodes.append(node)
        last_by_level[level] = node.id
    return diagram
