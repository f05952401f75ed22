"""Shared pytest fixtures for puml2drawio tests."""

import xml.etree.ElementTree as ET
import pytest
from puml2drawio.drawio import decompress_diagram


CLASS_SOURCE = """@startuml
class A
class B
A --> B
@enduml"""

ACTIVITY_SOURCE = """@startuml
start
:Do X;
stop
@enduml"""

MINDMAP_SOURCE = """@startmindmap
* Root
** Child1
** Child2
@endmindmap"""

C4_SOURCE = """@startuml
!include <C4/C4_Container>
System(s1, "Sys") {
  Container(c1, "App")
}
Rel(s1, c1, "contains", "")
@enduml"""


@pytest.fixture
def class_source():
    return CLASS_SOURCE


@pytest.fixture
def activity_source():
    return ACTIVITY_SOURCE


@pytest.fixture
def mindmap_source():
    return MINDMAP_SOURCE


@pytest.fixture
def c4_source():
    return C4_SOURCE


def graph_root(document: str) -> ET.Element:
    """Return <root> element of the (possibly compressed) graph model in document."""
    mxfile = ET.fromstring(document.encode("utf-8"))
    diagram = mxfile.find("diagram")
    model = diagram.find("mxGraphModel")
    if model is None:
        model = ET.fromstring(decompress_diagram(diagram.text.strip()).encode("utf-8"))
    return model.find("root")


def cells(document: str):
    """All mxCell elements of document, reserved cells included."""
    return graph_root(document).findall("mxCell")


def vertices(document: str):
    return [cell for cell in cells(document) if cell.get("vertex") == "1"]


def edges(document: str):
    return [cell for cell in cells(document) if cell.get("edge") == "1"]


@pytest.fixture
def parse_document():
    """Helpers to inspect generated documents."""

    class Inspector:
        root = staticmethod(graph_root)
        cells = staticmethod(cells)
        vertices = staticmethod(vertices)
        edges = staticmethod(edges)

    return Inspector
