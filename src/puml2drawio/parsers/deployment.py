from typing import Dict, List
import re

from puml2drawio.diagram_model import Connection, DeploymentDiagram, DeploymentNode
from puml2drawio.parsers.common import DIRECTIVES_WITH_HIDE, LineRule, dispatch

_KINDS = "node|database|cloud|artifact|folder|frame|package|rectangle|storage"

LABELED_NODE_RE = re.compile(rf'^({_KINDS})\s+"([^"]+)"\s+as\s+(\w+)', re.IGNORECASE)
NODE_RE = re.compile(rf'^({_KINDS})\s+"?([^"{{\s]+)"?\s*\{{?$', re.IGNORECASE)
CONNECTION_RE = re.compile(r"^(\w+)\s*([-\.]+>?)\s*(\w+)(?:\s*:\s*(.+))?$")


def parse_deployment_diagram(lines: List[str]) -> DeploymentDiagram:
    diagram = DeploymentDiagram()
    nodes: Dict[str, DeploymentNode] = {}

    def add_node(name: str, label: str, kind: str) -> None:
        if name not in nodes:
            node = DeploymentNode(id=len(diagram.nodes), name=name, label=label, kind=kind)
            nodes[name] = node
            diagram.nodes.append(node)

    def on_node(match: re.Match) -> None:
        label = match.group(2)
        alias = match.group(3) if match.re.groups > 2 else None
        add_node(alias or label, label, match.group(1).lower())

    def on_connection(match: re.Match) -> None:
        add_node(match.group(1), match.group(1), "node")
        add_node(match.group(3), match.group(3), "node")
        diagram.connections.append(
            Connection(
                source=match.group(1),
                target=match.group(3),
                label=match.group(4) or "",
                is_dashed="." in match.group(2),
            )
        )

    rules: List[LineRule] = [
        (LABELED_NODE_RE, on_node),
        (NODE_RE, on_node),
        (CONNECTION_RE, on_connection),
    ]
    for line in lines:
        if line.startswith(DIRECTIVES_WITH_HIDE):
            continue
        dispatch(line, rules)
    return diagram
