"""Tests for build_activity_edges - second pass edge construction."""

from puml2drawio.diagram_model import Activity, ActivityKind
from puml2drawio.parsers import build_activity_edges


def edges_of(activities):
    return [(e.source, e.target, e.label) for e in build_activity_edges(activities)]


def test_sequential_chain():
    activities = [
        Activity(0, ActivityKind.START, "Start"),
        Activity(1, ActivityKind.ACTION, "A"),
        Activity(2, ActivityKind.ACTION, "B"),
        Activity(3, ActivityKind.END, "End"),
    ]
    assert edges_of(activities) == [(0, 1, ""), (1, 2, ""), (2, 3, "")]


def test_markers_never_start_edges():
    activities = [
        Activity(0, ActivityKind.DECISION, "x?", yes_branch="yes"),
        Activity(1, ActivityKind.ACTION, "A"),
        Activity(2, ActivityKind.ELSE_MARKER, "no", related_decision=0),
        Activity(3, ActivityKind.ACTION, "B"),
        Activity(4, ActivityKind.MERGE, related_decision=0),
    ]
    assert all(source != 2 for source, _, _ in edges_of(activities))


def test_branch_end_redirected_to_merge():
    activities = [
        Activity(0, ActivityKind.DECISION, "x?", yes_branch="yes"),
        Activity(1, ActivityKind.ACTION, "A"),
        Activity(2, ActivityKind.ELSEIF_MARKER, "maybe", related_decision=0, condition="y?"),
        Activity(3, ActivityKind.ACTION, "B"),
        Activity(4, ActivityKind.ELSE_MARKER, "no", related_decision=0),
        Activity(5, ActivityKind.ACTION, "C"),
        Activity(6, ActivityKind.MERGE, related_decision=0),
        Activity(7, ActivityKind.END, "End"),
    ]
    assert edges_of(activities) == [
        (0, 1, "yes"),
        (0, 3, "maybe"),
        (0, 5, "no"),
        (1, 6, ""),
        (3, 6, ""),
        (5, 6, ""),
        (6, 7, ""),
    ]


def test_marker_without_merge_is_dead_end():
    """Unclosed if block: branch end has no merge to go to."""
    activities = [
        Activity(0, ActivityKind.DECISION, "x?", yes_branch="yes"),
        Activity(1, ActivityKind.ACTION, "A"),
        Activity(2, ActivityKind.ELSE_MARKER, "no", related_decision=0),
        Activity(3, ActivityKind.ACTION, "B"),
    ]
    assert edges_of(activities) == [(0, 1, "yes"), (0, 3, "no")]


def test_empty_and_single():
    assert edges_of([]) == []
    assert edges_of([Activity(0, ActivityKind.START, "Start")]) == []


def test_merge_before_outer_marker_goes_to_outer_merge():
    activities = [
        Activity(0, ActivityKind.DECISION, "a", yes_branch="y"),
        Activity(1, ActivityKind.DECISION, "b", yes_branch="y2"),
        Activity(2, ActivityKind.ACTION, "X"),
        Activity(3, ActivityKind.ELSE_MARKER, "n2", related_decision=1),
        Activity(4, ActivityKind.ACTION, "Y"),
        Activity(5, ActivityKind.MERGE, related_decision=1),
        Activity(6, ActivityKind.ELSE_MARKER, "n", related_decision=0),
        Activity(7, ActivityKind.ACTION, "Z"),
        Activity(8, ActivityKind.MERGE, related_decision=0),
    ]
    edges = edges_of(activities)
    assert (5, 8, "") in edges
    assert all(target not in (3, 6) for _, target, _ in edges)


def test_empty_first_branch_goes_to_merge():
    activities = [
        Activity(0, ActivityKind.DECISION, "a", yes_branch="y"),
        Activity(1, ActivityKind.ELSE_MARKER, "n", related_decision=0),
        Activity(2, ActivityKind.ACTION, "Z"),
        Activity(3, ActivityKind.MERGE, related_decision=0),
    ]
    assert edges_of(activities) == [(0, 3, "y"), (0, 2, "n"), (2, 3, "")]


def test_empty_else_branch_goes_to_merge():
    activities = [
        Activity(0, ActivityKind.DECISION, "a", yes_branch="y"),
        Activity(1, ActivityKind.ACTION, "A"),
        Activity(2, ActivityKind.ELSEIF_MARKER, "m", related_decision=0, condition="b"),
        Activity(3, ActivityKind.ELSE_MARKER, "n", related_decision=0),
        Activity(4, ActivityKind.MERGE, related_decision=0),
    ]
    assert edges_of(activities) == [(0, 1, "y"), (0, 4, "m"), (0, 4, "n"), (1, 4, "")]
