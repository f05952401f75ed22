"""Tests for c4.py - C4-PlantUML architecture diagrams."""

from puml2drawio.c4 import (
    C4Entity,
    convert_c4_to_drawio,
    detect_c4,
    flatten_entities,
    layout_c4_entities,
    parse_c4_entities,
    parse_c4_relations,
)
from puml2drawio.convert import convert_plantuml_to_drawio


class TestDetect:
    def test_c4_source(self, c4_source):
        assert detect_c4(c4_source)

    def test_include_only(self):
        assert detect_c4("!include https://example.com/C4_Context.puml")

    def test_plain_plantuml(self, class_source, activity_source):
        assert not detect_c4(class_source)
        assert not detect_c4(activity_source)


class TestEntities:
    def test_nesting(self, c4_source):
        roots = parse_c4_entities(c4_source)
        assert [(e.alias, e.label, e.kind) for e in roots] == [("s1", "Sys", "System")]
        assert [(c.alias, c.label, c.kind) for c in roots[0].children] == [("c1", "App", "Container")]

    def test_technology_description_and_keyword_arguments(self):
        roots = parse_c4_entities('Container(api, "API", "Python", "Handles requests", $tags="v1")')
        entity = roots[0]
        assert entity.technology == "Python"
        assert entity.description == "Handles requests"
        assert entity.value == "API | Python | Handles requests"

    def test_boundary_keeps_enclosing_parent(self):
        source = """System(s, "S") {
System_Boundary(b, "Boundary") {
Container(c, "C")
}
}
Person(p, "User")"""
        roots = parse_c4_entities(source)
        assert [e.alias for e in roots] == ["s", "p"]
        assert [c.alias for c in roots[0].children] == ["c"]

    def test_unknown_macros_and_directives_ignored(self):
        source = "@startuml\nLAYOUT_WITH_LEGEND()\ntitle Demo\nFoo(x, y)\nSystem(a, A)\n@enduml"
        assert [e.alias for e in parse_c4_entities(source)] == ["a"]

    def test_duplicate_aliases_not_merged(self):
        roots = parse_c4_entities('System(a, "One")\nSystem(a, "Two")')
        assert [e.label for e in roots] == ["One", "Two"]


class TestRelations:
    def test_scenario(self, c4_source):
        relations = parse_c4_relations(c4_source)
        assert [(r.source, r.target, r.label, r.description) for r in relations] == [("s1", "c1", "contains", "")]

    def test_variants(self):
        source = 'Rel(a, b, "uses", "HTTPS")\nRel_D(b, c, "reads")\nBiRel(c, d, "sync", "")\nRel_Up(d, a, "x")'
        relations = parse_c4_relations(source)
        assert [(r.source, r.target, r.label, r.description) for r in relations] == [
            ("a", "b", "uses", "HTTPS"),
            ("b", "c", "reads", ""),
            ("c", "d", "sync", ""),
            ("d", "a", "x", ""),
        ]
        assert relations[0].value == "uses - HTTPS"
        assert relations[1].value == "reads"


class TestLayout:
    def test_depth_rows(self, c4_source):
        layout = layout_c4_entities(parse_c4_entities(c4_source))
        assert [(n.entity.alias, n.x, n.y, n.width, n.height) for n in layout] == [
            ("s1", 40, 40, 220, 140),
            ("c1", 40, 240, 200, 120),
        ]

    def test_columns_and_fallback_size(self):
        roots = [C4Entity("a", "A", "Person"), C4Entity("b", "B", "Component"), C4Entity("c", "C", "SystemDb")]
        layout = layout_c4_entities(roots)
        assert [(n.x, n.y, n.width, n.height) for n in layout] == [
            (40, 40, 160, 90),
            (300, 40, 180, 100),
            (560, 40, 160, 90),
        ]

    def test_flatten_depth_first(self):
        child = C4Entity("c", "C", "Container")
        root = C4Entity("r", "R", "System", children=[child])
        assert [(e.alias, depth) for e, depth in flatten_entities([root])] == [("r", 0), ("c", 1)]


class TestConvert:
    def test_scenario_document(self, c4_source, parse_document):
        document = convert_c4_to_drawio(c4_source)
        vertices = parse_document.vertices(document)
        assert [v.get("value") for v in vertices] == ["Sys", "App"]
        assert "#d5e8d4" in vertices[0].get("style")
        assert "#dae8fc" in vertices[1].get("style")
        edges = parse_document.edges(document)
        assert len(edges) == 1
        assert edges[0].get("value") == "contains"
        assert (edges[0].get("source"), edges[0].get("target")) == (vertices[0].get("id"), vertices[1].get("id"))

    def test_entry_point_routes_c4(self, c4_source, parse_document):
        document = convert_plantuml_to_drawio(c4_source, compressed=True)
        assert len(parse_document.vertices(document)) == 2

    def test_unknown_relation_endpoint_dropped(self, parse_document):
        document = convert_c4_to_drawio('System(a, "A")\nRel(a, ghost, "uses")')
        assert len(parse_document.vertices(document)) == 1
        assert parse_document.edges(document) == []

    def test_values_escaped(self, parse_document):
        document = convert_c4_to_drawio("System(a, A & B <x>)")
        assert parse_document.vertices(document)[0].get("value") == "A & B <x>"
