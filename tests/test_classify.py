"""Tests for classify.py - dialect detection heuristics."""

import pytest
from puml2drawio.classify import classify
from puml2drawio.diagram_model import DiagramType


@pytest.mark.parametrize(
    "source,expected",
    [
        ("@startuml\nclass A\nclass B\nA --> B\n@enduml", DiagramType.CLASS),
        ("@startuml\nstart\n:Do X;\nstop\n@enduml", DiagramType.ACTIVITY),
        ("@startuml\nAlice -> Bob : hello\n@enduml", DiagramType.SEQUENCE),
        ("@startuml\nparticipant A\nparticipant B\nA -> B\n@enduml", DiagramType.SEQUENCE),
        ("@startuml\n[*] --> Idle\nIdle --> [*]\n@enduml", DiagramType.STATE),
        ("@startuml\nstate Idle\nIdle --> Busy\n@enduml", DiagramType.STATE),
        ("@startuml\nactor User\nusecase Login\nUser --> Login\n@enduml", DiagramType.USECASE),
        ("@startmindmap\n* Root\n** Child\n@endmindmap", DiagramType.MINDMAP),
        ("@startuml\nentity User {\n* id : int\n}\n@enduml", DiagramType.ER),
        ("@startuml\nA ||--|{ B\n@enduml", DiagramType.ER),
        ("@startuml\nnode web\ndatabase db\nweb --> db\n@enduml", DiagramType.DEPLOYMENT),
        ("", DiagramType.CLASS),
    ],
)
def test_classify(source, expected) -> None:
    assert classify(source) == expected


def test_sequence_wins_over_usecase() -> None:
    """Actors with labeled messages are a sequence diagram, even with rectangle keyword."""
    source = "@startuml\nactor A\nactor B\nrectangle \"R\"\nA -> B : msg\n@enduml"
    assert classify(source) == DiagramType.SEQUENCE


def test_start_marker_with_colon_and_semicolon_is_activity() -> None:
    """"@startuml" contains "start", so ":" and ";" anywhere select activity."""
    source = "@startuml\nclass A {\n+ x : int;\n}\n@enduml"
    assert classify(source) == DiagramType.ACTIVITY


def test_if_endif_is_activity() -> None:
    assert classify("if (ok?) then (yes)\nendif") == DiagramType.ACTIVITY


def test_classify_uses_given_lines() -> None:
    """Line based rules only look at provided lines."""
    assert classify("nothing here", ["Alice -> Bob : hi"]) == DiagramType.SEQUENCE
