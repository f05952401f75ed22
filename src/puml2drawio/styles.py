"""
Style policy of generated draw.io cells.

Static data only: draw.io style strings and colors keyed by semantic role.
"""

from typing import Dict, Tuple

from puml2drawio.diagram_model import ClassKind, RelationKind

#: (fill, stroke) pairs
BLUE = ("#dae8fc", "#6c8ebf")
GREEN = ("#d5e8d4", "#82b366")
YELLOW = ("#fff2cc", "#d6b656")
PURPLE = ("#e1d5e7", "#9673a6")
GREY = ("#f5f5f5", "#666666")

ROW = (
    "text;strokeColor=none;fillColor=none;align=left;verticalAlign=top;spacingLeft=4;spacingRight=4;"
    "overflow=hidden;rotatable=0;points=[[0,0.5],[1,0.5]];portConstraint=eastwest;"
)
ROW_UNDERLINED = ROW + "fontStyle=4;"
DIVIDER = (
    "line;strokeWidth=1;fillColor=none;align=left;verticalAlign=middle;spacingTop=-1;spacingLeft=3;"
    "spacingRight=3;rotatable=0;labelPosition=right;points=[];portConstraint=eastwest;"
)


def swimlane_box(fill: str, stroke: str, collapsible: int = 1) -> str:
    """Header + stacked rows container used for classes and entities."""
    return (
        "swimlane;fontStyle=1;align=center;verticalAlign=top;childLayout=stackLayout;horizontal=1;startSize=26;"
        "horizontalStack=0;resizeParent=1;resizeParentMax=0;resizeLast=0;"
        f"collapsible={collapsible};marginBottom=0;fillColor={fill};strokeColor={stroke};"
    )


# Class diagram

CLASS_COLORS: Dict[ClassKind, Tuple[str, str]] = {
    ClassKind.CLASS: BLUE,
    ClassKind.INTERFACE: GREEN,
    ClassKind.ABSTRACT: YELLOW,
    ClassKind.ENUM: PURPLE,
}

RELATION_STYLES: Dict[RelationKind, str] = {
    RelationKind.EXTENDS: "endArrow=block;endSize=16;endFill=0;html=1;rounded=0;",
    RelationKind.IMPLEMENTS: "endArrow=block;endSize=16;endFill=0;html=1;rounded=0;dashed=1;",
    RelationKind.COMPOSITION: "endArrow=diamondThin;endFill=1;endSize=24;html=1;rounded=0;",
    RelationKind.AGGREGATION: "endArrow=diamondThin;endFill=0;endSize=24;html=1;rounded=0;",
    RelationKind.ASSOCIATION: "endArrow=open;endSize=12;html=1;rounded=0;",
    RelationKind.DEPENDENCY: "endArrow=open;endSize=12;html=1;rounded=0;dashed=1;",
}

UML_ACTOR = "shape=umlActor;verticalLabelPosition=bottom;verticalAlign=top;html=1;outlineConnect=0;"

# Activity diagram

SWIMLANE = "swimlane;horizontal=0;whiteSpace=wrap;html=1;fillColor={fill};strokeColor=#666666;startSize=30;"
ACTIVITY_START = "ellipse;whiteSpace=wrap;html=1;aspect=fixed;fillColor=#000000;strokeColor=#000000;"
ACTIVITY_END = ACTIVITY_START + "strokeWidth=3;"
ACTIVITY_END_RING = "ellipse;whiteSpace=wrap;html=1;aspect=fixed;fillColor=none;strokeColor=#000000;strokeWidth=2;"
ACTIVITY_ACTION = "rounded=1;whiteSpace=wrap;html=1;fillColor=#dae8fc;strokeColor=#6c8ebf;"
ACTIVITY_NOTE = (
    "shape=note;whiteSpace=wrap;html=1;backgroundOutline=1;fillColor=#fff2cc;strokeColor=#d6b656;size=14;"
    "align=left;spacingLeft=5;fontSize=10;"
)
ACTIVITY_DECISION = "rhombus;whiteSpace=wrap;html=1;fillColor=#fff2cc;strokeColor=#d6b656;"
ACTIVITY_MERGE = "rhombus;whiteSpace=wrap;html=1;fillColor=#f5f5f5;strokeColor=#666666;"
ACTIVITY_FORK = (
    "line;html=1;strokeWidth=4;fillColor=none;align=left;verticalAlign=middle;spacingTop=-1;spacingLeft=3;"
    "spacingRight=3;rotatable=0;labelPosition=right;points=[];portConstraint=eastwest;strokeColor=#000000;"
)
PARTITION = (
    "rounded=0;whiteSpace=wrap;html=1;fillColor=none;strokeColor=#666666;dashed=1;verticalAlign=top;fontStyle=1;"
)
ACTIVITY_EDGE = "endArrow=classic;html=1;rounded=0;"

# Sequence diagram

PARTICIPANT = "fillColor=#dae8fc;strokeColor=#6c8ebf;"
PARTICIPANT_ACTOR = (
    "shape=umlActor;verticalLabelPosition=bottom;verticalAlign=top;html=1;fillColor=#dae8fc;strokeColor=#6c8ebf;"
)
LIFELINE = "strokeColor=#999999;dashed=1;strokeWidth=1;endArrow=none;"
GROUP_LINE = "strokeWidth=1;fillColor=none;strokeColor=#999999;"
GROUP_LABEL = "text;strokeColor=none;fillColor=#e1d5e7;align=center;verticalAlign=middle;fontStyle=1;fontSize=11;"
FRAGMENT = "rounded=0;whiteSpace=wrap;html=1;fillColor=none;strokeColor=#666666;dashed=1;align=left;verticalAlign=top;"
MESSAGE = "endArrow=block;strokeColor=#333333;endFill=1;rounded=0;"
MESSAGE_DASHED = "endArrow=open;strokeColor=#666666;endFill=0;rounded=0;dashed=1;"

# State diagram

STATE_START = "ellipse;fillColor=#000000;strokeColor=#000000;"
STATE_END = STATE_START + "strokeWidth=3;"
STATE = "rounded=1;whiteSpace=wrap;fillColor=#dae8fc;strokeColor=#6c8ebf;"
STATE_NOTE = "shape=note;whiteSpace=wrap;size=17;fillColor=#fff2cc;strokeColor=#d6b656;"
TRANSITION = "endArrow=classic;strokeColor=#333333;rounded=0;"

# Use case diagram

USECASE_RECTANGLE = (
    "rounded=0;whiteSpace=wrap;html=1;fillColor=#f5f5f5;strokeColor=#666666;verticalAlign=top;fontStyle=1;"
    "spacingTop=5;"
)
USECASE = "ellipse;whiteSpace=wrap;html=1;fillColor=#dae8fc;strokeColor=#6c8ebf;"
USECASE_LINK = "endArrow=none;html=1;rounded=0;"

# Mind map

MINDMAP_LEVEL_COLORS = {1: PURPLE, 2: BLUE}
MINDMAP_DEEP_COLOR = GREEN
MINDMAP_NODE = "rounded=1;whiteSpace=wrap;html=1;fillColor={fill};strokeColor={stroke};"
MINDMAP_EDGE = "endArrow=none;html=1;rounded=1;curved=1;strokeColor=#666666;"

# ER diagram

ER_RELATIONSHIP = "endArrow=ERone;startArrow=ERmany;html=1;rounded=0;"

# Deployment diagram

DEPLOYMENT_SHAPES: Dict[str, Tuple[str, int, int]] = {
    "database": (
        "shape=cylinder3;whiteSpace=wrap;html=1;boundedLbl=1;backgroundOutline=1;size=15;"
        "fillColor=#dae8fc;strokeColor=#6c8ebf;",
        120,
        80,
    ),
    "cloud": ("ellipse;shape=cloud;whiteSpace=wrap;html=1;fillColor=#dae8fc;strokeColor=#6c8ebf;", 140, 80),
    "artifact": ("shape=document;whiteSpace=wrap;html=1;boundedLbl=1;fillColor=#fff2cc;strokeColor=#d6b656;", 120, 80),
}
DEPLOYMENT_DEFAULT = ("rounded=0;whiteSpace=wrap;html=1;fillColor=#dae8fc;strokeColor=#6c8ebf;", 120, 80)
DEPLOYMENT_CONNECTION = "endArrow=classic;html=1;rounded=0;"
DEPLOYMENT_CONNECTION_DASHED = DEPLOYMENT_CONNECTION + "dashed=1;"

# C4 diagram

C4_COLORS = (("System", GREEN), ("Container", BLUE))
C4_DEFAULT_COLOR = YELLOW
C4_ENTITY = "rounded=1;whiteSpace=wrap;html=1;fillColor={fill};strokeColor={stroke};"
C4_RELATION = "endArrow=block;endSize=12;html=1;rounded=0;"
