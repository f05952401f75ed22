"""
Draw.io document building blocks.

Cell markup, per-document id issuing and the <mxfile> envelope. The envelope
is rendered from a jinja2 template; the graph model can be embedded as plain
XML or as base64(deflate-raw(xml)), the form draw.io itself writes.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import base64
import logging
import secrets
import string
import zlib

from jinja2 import Environment, PackageLoader, select_autoescape

from puml2drawio.utils import escape_xml

log = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_letters + string.digits
ID_PREFIX_LENGTH = 20
#: Ids 0 and 1 are the root cell and the default layer.
FIRST_CELL_ID = 2
ROOT_ID = "0"
LAYER_ID = "1"

GRAPH_MODEL_ATTRIBUTES = (
    'dx="1200" dy="800" grid="1" gridSize="10" guides="1" tooltips="1" connect="1" arrows="1" fold="1" '
    'page="1" pageScale="1" pageWidth="1169" pageHeight="826" background="none" math="0" shadow="0"'
)


def create_env() -> Environment:
    """Create jinja2 environment for package templates."""
    return Environment(
        loader=PackageLoader("puml2drawio"),
        autoescape=select_autoescape(),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
    )


def fmt(value: float) -> str:
    """Format coordinate, integral values without decimal point."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def random_prefix(length: int = ID_PREFIX_LENGTH) -> str:
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


class IdIssuer:
    """Issues "<prefix>-<n>" cell ids, unique within one document."""

    def __init__(self, prefix: Optional[str] = None):
        self.prefix = prefix or random_prefix()
        self.counter = FIRST_CELL_ID

    def __call__(self) -> str:
        cell_id = f"{self.prefix}-{self.counter}"
        self.counter += 1
        return cell_id


@dataclass
class NodePosition:
    """Cell id and anchor point of a placed node."""

    id: str
    x: float
    y: float


def vertex_cell(
    cell_id: str,
    value: str,
    style: str,
    x: float,
    y: float,
    width: float,
    height: float,
    parent: str = LAYER_ID,
) -> str:
    return (
        f'<mxCell id="{escape_xml(cell_id)}" value="{escape_xml(value)}" style="{escape_xml(style)}" '
        f'vertex="1" parent="{escape_xml(parent)}">'
        f'<mxGeometry x="{fmt(x)}" y="{fmt(y)}" width="{fmt(width)}" height="{fmt(height)}" as="geometry"/>'
        "</mxCell>"
    )


def edge_cell(cell_id: str, value: str, style: str, source: str, target: str, parent: str = LAYER_ID) -> str:
    return (
        f'<mxCell id="{escape_xml(cell_id)}" value="{escape_xml(value)}" style="{escape_xml(style)}" '
        f'edge="1" parent="{escape_xml(parent)}" source="{escape_xml(source)}" target="{escape_xml(target)}">'
        '<mxGeometry relative="1" as="geometry"/>'
        "</mxCell>"
    )


def edge_cell_with_points(
    cell_id: str,
    value: str,
    style: str,
    source_x: float,
    source_y: float,
    target_x: float,
    target_y: float,
    parent: str = LAYER_ID,
) -> str:
    """Free floating edge, not attached to any vertex."""
    return (
        f'<mxCell id="{escape_xml(cell_id)}" value="{escape_xml(value)}" style="{escape_xml(style)}" '
        f'edge="1" parent="{escape_xml(parent)}">'
        '<mxGeometry relative="1" as="geometry">'
        f'<mxPoint x="{fmt(source_x)}" y="{fmt(source_y)}" as="sourcePoint"/>'
        f'<mxPoint x="{fmt(target_x)}" y="{fmt(target_y)}" as="targetPoint"/>'
        "</mxGeometry>"
        "</mxCell>"
    )


class GeneratorContext:
    """
    Mutable state of a single generate call: id issuer, placed node positions
    and emitted cells. Never shared between calls.
    """

    def __init__(self, prefix: Optional[str] = None):
        self.next_id = IdIssuer(prefix)
        self.positions: Dict[Any, NodePosition] = {}
        self.cells: List[str] = []

    def vertex(
        self,
        value: str,
        style: str,
        x: float,
        y: float,
        width: float,
        height: float,
        parent: str = LAYER_ID,
        key: Any = None,
        anchor: Optional[tuple] = None,
    ) -> str:
        """
        Emit vertex cell.

        :param key: if given, remember the cell under this key for edges
        :param anchor: position remembered for the key, defaults to top left corner
        :return: cell id
        """
        cell_id = self.next_id()
        self.cells.append(vertex_cell(cell_id, value, style, x, y, width, height, parent))
        if key is not None:
            ax, ay = anchor if anchor is not None else (x, y)
            self.positions[key] = NodePosition(cell_id, ax, ay)
        return cell_id

    def edge(self, value: str, style: str, source_key: Any, target_key: Any) -> Optional[str]:
        """
        Emit edge between two remembered nodes.

        :return: cell id, None if an endpoint was never placed (edge is dropped)
        """
        source = self.positions.get(source_key)
        target = self.positions.get(target_key)
        if source is None or target is None:
            log.debug(f"Dropping edge {source_key!r} -> {target_key!r}, endpoint not found")
            return None
        cell_id = self.next_id()
        self.cells.append(edge_cell(cell_id, value, style, source.id, target.id))
        return cell_id

    def floating_edge(self, value: str, style: str, sx: float, sy: float, tx: float, ty: float) -> str:
        cell_id = self.next_id()
        self.cells.append(edge_cell_with_points(cell_id, value, style, sx, sy, tx, ty))
        return cell_id

    def markup(self) -> str:
        return "".join(self.cells)


def graph_model(cells: str) -> str:
    """Wrap cells in <mxGraphModel> with the two reserved root cells."""
    return (
        f"<mxGraphModel {GRAPH_MODEL_ATTRIBUTES}><root>"
        f'<mxCell id="{ROOT_ID}"/><mxCell id="{LAYER_ID}" parent="{ROOT_ID}"/>'
        f"{cells}</root></mxGraphModel>"
    )


def compress_diagram(xml: str) -> str:
    """base64(deflate-raw(xml)), as draw.io stores compressed diagrams."""
    compressor = zlib.compressobj(zlib.Z_DEFAULT_COMPRESSION, zlib.DEFLATED, -15)
    data = compressor.compress(xml.encode("utf-8")) + compressor.flush()
    return base64.b64encode(data).decode("ascii")


def decompress_diagram(data: str) -> str:
    """Inverse of compress_diagram."""
    return zlib.decompress(base64.b64decode(data), -15).decode("utf-8")


def wrap_document(cells: str, compressed: bool = False, name: str = "Page-1") -> str:
    """
    Build complete draw.io document around cell markup.

    :param cells: concatenated mxCell markup
    :param compressed: embed graph model compressed
    :param name: page name
    :return: <mxfile> document
    """
    model = graph_model(cells)
    body = model
    if compressed:
        try:
            body = compress_diagram(model)
        except zlib.error as error:
            log.warning(f"Compression failed, embedding diagram uncompressed: {error}")
            compressed = False
    template = create_env().get_template("mxfile.jinja2")
    modified = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return template.render(
        body=body,
        compressed=compressed,
        name=escape_xml(name),
        modified=modified.replace("+00:00", "Z"),
    )
