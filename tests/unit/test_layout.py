"""Tests for the normal-form layout engine."""

import pytest

from conceptdiagram.classifier import ClassifiedEdges, classify
from conceptdiagram.layout import NormalFormLayout, fit_canvas, presize
from conceptdiagram.models import ISA_TYPE_ID, Concept, Term, UngroupedAttributeIndex
from conceptdiagram.renderer import (
    ATTRIBUTE_CLASS,
    ATTRIBUTE_GROUP_NODE_CLASS,
    CONJUNCTION_NODE_CLASS,
    DEFINED_CLASS,
    EQUIVALENT_TO,
    PRIMITIVE_CLASS,
    SUBSUMED_BY,
    Box,
    BoxRenderer,
    Circle,
    Drawing,
)
from conceptdiagram.router import Marker
from conceptdiagram.tracer import RenderTrace

LATERALITY = "272741003"


@pytest.fixture
def layout(measurer):
    return NormalFormLayout(BoxRenderer(measurer))


def boxes(drawing):
    return [n for n in drawing.nodes if isinstance(n, Box)]


def circles(drawing, css_class):
    return [n for n in drawing.nodes if isinstance(n, Circle) and n.css_class == css_class]


def render(layout, concept, options, ungrouped=None, trace=None):
    edges = classify(concept, options.selected_view)
    return layout.layout(concept, edges, options, ungrouped, trace)


class TestPresize:
    """Tests for the pre-layout canvas estimate."""

    def test_base_size(self):
        assert presize(ClassifiedEdges()) == (700, 350)

    def test_grows_per_edge(self, make_rel):
        edges = ClassifiedEdges(
            isa_edges=[make_rel(ISA_TYPE_ID, "1"), make_rel(ISA_TYPE_ID, "2")],
            attribute_edges=[make_rel(LATERALITY, "3")],
        )
        assert presize(edges) == (700 + 160 + 110, 350 + 100 + 65)


class TestFitCanvas:
    def test_margins(self):
        drawing = Drawing(700, 350)
        fit_canvas(drawing, 175, 487)
        assert drawing.height == 225
        assert drawing.width == 887

    def test_never_smaller_than_content(self):
        drawing = Drawing(700, 350)
        drawing.add_node(Box("box-1", 10, 10, 900, 300, "A", "1", PRIMITIVE_CLASS))
        fit_canvas(drawing, 100, 100)
        assert drawing.width == 910 + 400
        assert drawing.height == 310 + 50


class TestRootAndConnective:
    """Tests for the root box and the is-a connective cluster."""

    def test_root_box(self, layout, disease_concept, inferred):
        drawing = render(layout, disease_concept, inferred)
        root = drawing.nodes[0]

        assert isinstance(root, Box)
        assert (root.x, root.y) == (10, 10)
        assert root.label == "Disease (disorder)"
        assert root.concept_id == "64572001"
        assert root.css_class == PRIMITIVE_CLASS

    def test_root_uses_cached_term(self, layout, disease_concept, inferred):
        disease_concept.default_term = "Enfermedad"
        drawing = render(layout, disease_concept, inferred)
        assert drawing.nodes[0].label == "Enfermedad"

    def test_primitive_concept_subsumed_by(self, layout, disease_concept, inferred):
        drawing = render(layout, disease_concept, inferred)
        connective = drawing.nodes[1]

        assert connective.glyph == SUBSUMED_BY
        assert (connective.x, connective.y) == (100, 95)

    def test_defined_concept_equivalent_to(self, layout, infarction_concept, inferred):
        drawing = render(layout, infarction_concept, inferred)

        assert drawing.nodes[0].css_class == DEFINED_CLASS
        assert drawing.nodes[1].glyph == EQUIVALENT_TO

    def test_conjunction_placement(self, layout, disease_concept, inferred):
        drawing = render(layout, disease_concept, inferred)
        conjunction = drawing.nodes[2]

        assert conjunction.css_class == CONJUNCTION_NODE_CLASS
        assert (conjunction.x, conjunction.y) == (170, 95)

    def test_definition_connector(self, layout, disease_concept, inferred):
        """Test root bottom-shifted to connective left with a filled arrow."""
        drawing = render(layout, disease_concept, inferred)
        root, connective = drawing.nodes[0], drawing.nodes[1]
        connector = next(c for c in drawing.connectors if c.source == root.node_id)

        assert connector.target == connective.node_id
        assert connector.points == [(45, 55), (45, 120), (100, 120)]
        assert connector.marker == Marker.BLACK_TRIANGLE

    def test_stated_without_isa_skips_connective(self, layout, make_rel, stated):
        concept = Concept(
            "1", stated_relationships=[make_rel(LATERALITY, "7771000")]
        )
        drawing = render(layout, concept, stated)

        assert circles(drawing, CONJUNCTION_NODE_CLASS) == []
        self_group = circles(drawing, ATTRIBUTE_GROUP_NODE_CLASS)[0]
        # No-parent nudge from (100, 95)
        assert (self_group.x, self_group.y) == (120, 98)

    def test_inferred_without_isa_keeps_connective(self, layout, make_rel, inferred):
        concept = Concept("1", relationships=[make_rel(LATERALITY, "7771000")])
        drawing = render(layout, concept, inferred)

        assert len(circles(drawing, CONJUNCTION_NODE_CLASS)) == 1

    def test_no_edges_draws_root_only(self, layout, lonely_concept, inferred, stated):
        for options in (inferred, stated):
            drawing = render(layout, lonely_concept, options)
            assert len(drawing.nodes) == 1
            assert drawing.connectors == []


class TestParents:
    """Tests for is-a parent boxes."""

    def test_parent_position(self, layout, disease_concept, inferred):
        drawing = render(layout, disease_concept, inferred)
        parent = drawing.nodes[3]

        assert (parent.x, parent.y) == (230, 95)
        assert parent.label == "Clinical finding (finding)"
        assert parent.css_class == PRIMITIVE_CLASS

    def test_parents_stack(self, layout, infarction_concept, inferred):
        drawing = render(layout, infarction_concept, inferred)
        parents = [b for b in boxes(drawing)[1:] if b.x == 230]

        assert [p.y for p in parents] == [95, 175]
        assert [p.css_class for p in parents] == [DEFINED_CLASS, PRIMITIVE_CLASS]

    def test_isa_connectors_clear(self, layout, infarction_concept, inferred):
        drawing = render(layout, infarction_concept, inferred)
        conjunction = drawing.nodes[2]
        outgoing = [c for c in drawing.connectors if c.source == conjunction.node_id]
        to_parents = [c for c in outgoing if c.target.startswith("box-")]

        assert len(to_parents) == 2
        assert all(c.marker == Marker.CLEAR_TRIANGLE for c in to_parents)


class TestUngroupedAttributes:
    """Tests for group 0 attributes."""

    def concept(self, make_rel):
        return Concept(
            "1",
            fsn=Term("Thing (finding)", "en"),
            relationships=[
                make_rel(ISA_TYPE_ID, "404684003"),
                make_rel(LATERALITY, "7771000"),
            ],
        )

    def test_self_group_chain(self, layout, make_rel, inferred):
        drawing = render(layout, self.concept(make_rel), inferred)
        self_group = circles(drawing, ATTRIBUTE_GROUP_NODE_CLASS)[0]
        role = next(b for b in boxes(drawing) if b.css_class == ATTRIBUTE_CLASS)

        assert (self_group.x, self_group.y) == (230, 175)
        assert (role.x, role.y) == (305, 175)
        target = boxes(drawing)[-1]
        assert target.x == pytest.approx(role.x + role.width + 35)
        assert target.label == "7771000"

    def test_index_hit_skips_self_group(self, layout, make_rel, inferred):
        ungrouped = UngroupedAttributeIndex.of([LATERALITY])
        drawing = render(layout, self.concept(make_rel), inferred, ungrouped)
        role = next(b for b in boxes(drawing) if b.css_class == ATTRIBUTE_CLASS)
        conjunction = drawing.nodes[2]

        assert circles(drawing, ATTRIBUTE_GROUP_NODE_CLASS) == []
        assert (role.x, role.y) == (230, 175)
        wire = next(c for c in drawing.connectors if c.target == role.node_id)
        assert wire.source == conjunction.node_id
        assert wire.marker is None


class TestRoleGroups:
    """Tests for role group placement."""

    def test_group_geometry(self, layout, infarction_concept, inferred):
        drawing = render(layout, infarction_concept, inferred)
        group = circles(drawing, ATTRIBUTE_GROUP_NODE_CLASS)[0]
        group_conjunction = circles(drawing, CONJUNCTION_NODE_CLASS)[1]
        roles = [b for b in boxes(drawing) if b.css_class == ATTRIBUTE_CLASS]

        # Two parents end at y=255, then the gap before the first group
        assert (group.x, group.y) == (230, 285)
        assert (group_conjunction.x, group_conjunction.y) == (305, 285)
        assert [(r.x, r.y) for r in roles] == [(360, 285), (360, 355)]

    def test_canvas_fitted(self, layout, infarction_concept, inferred):
        drawing = render(layout, infarction_concept, inferred)

        assert drawing.height == 425 + 50
        right, bottom = drawing.content_bounds()
        assert drawing.width >= right + 400
        assert drawing.preallocated_width == 700 + 160 + 220
        assert drawing.preallocated_height == 350 + 100 + 130

    def test_gap_reserved_without_groups(self, layout, disease_concept, inferred):
        """Test the group gap is kept when a concept has no role groups."""
        drawing = render(layout, disease_concept, inferred)

        # Parent ends at y=175, plus the 30px gap and the 50px margin
        assert drawing.height == 175 + 30 + 50

    def test_gap_reserved_without_edges(self, layout, lonely_concept, inferred):
        drawing = render(layout, lonely_concept, inferred)

        assert drawing.height == 95 + 3 + 30 + 50


class TestLayoutTrace:
    """Tests for trace recording during layout."""

    def test_stages_and_placements(self, layout, disease_concept, inferred):
        trace = RenderTrace()
        drawing = render(layout, disease_concept, inferred, trace=trace)

        assert [s.name for s in trace.stages] == ["presized", "laid_out", "fitted"]
        assert trace.get_stage("presized").data == {"width": 780, "height": 400}
        assert len(trace.get_placements_by_kind("connector")) == len(drawing.connectors)
        assert len(trace.get_placements_by_reason("parent_box")) == 1
        assert len(trace.get_placements_by_reason("root_box")) == 1

    def test_group_reasons(self, layout, infarction_concept, inferred):
        trace = RenderTrace()
        render(layout, infarction_concept, inferred, trace=trace)

        assert len(trace.get_placements_by_reason("group_1_conjunction")) == 1
        assert len(trace.get_placements_by_reason("role_box")) == 2
