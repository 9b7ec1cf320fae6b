"""
Normal-form layout for concept diagrams.

Places the root box, the is-a connective and conjunction nodes, the parent
boxes, the ungrouped attributes and the role groups in a single top-to-bottom
pass. A running cursor (x, y) advances as primitives are placed and the
right-most extent reached is tracked for the final canvas width.

Canvas sizing is two-pass: an upper-bound estimate from the edge counts is
made before layout, then the canvas is fitted to the cursor and extent once
every primitive is placed.
"""

from typing import Optional, Tuple

from .classifier import ClassifiedEdges
from .models import Concept, DiagramOptions, Relationship, UngroupedAttributeIndex
from .renderer import (
    ATTRIBUTE_CLASS,
    DEFINED_CLASS,
    PRIMITIVE_CLASS,
    Box,
    BoxRenderer,
    Circle,
    Drawing,
    Node,
    box_class_for,
)
from .router import Anchor, ConnectorRouter, Marker
from .terms import display_term, object_label, related_term
from .tracer import RenderTrace

# Pre-layout canvas estimate
BASE_WIDTH = 700
BASE_HEIGHT = 350
ISA_WIDTH_STEP = 80
ISA_HEIGHT_STEP = 50
ATTRIBUTE_WIDTH_STEP = 110
ATTRIBUTE_HEIGHT_STEP = 65

# Cursor movement
ORIGIN = 10
ROOT_INDENT = 90
ROOT_GAP = 40
CONNECTIVE_STEP = 70
CONJUNCTION_STEP = 60
NO_PARENT_NUDGE_X = 20
NO_PARENT_NUDGE_Y = 3
ROW_GAP = 35
CHAIN_GAP = 35
EXTENT_PADDING = 50
GROUPS_GAP = 30
GROUP_CONJUNCTION_OFFSET = 75
GROUP_ROLE_OFFSET = 130
GROUP_ROW_GAP = 25

# Post-layout fit
HEIGHT_MARGIN = 50
WIDTH_MARGIN = 400


def presize(edges: ClassifiedEdges) -> Tuple[int, int]:
    """Upper-bound canvas size from the number of edges."""
    width = (
        BASE_WIDTH
        + ISA_WIDTH_STEP * len(edges.isa_edges)
        + ATTRIBUTE_WIDTH_STEP * len(edges.attribute_edges)
    )
    height = (
        BASE_HEIGHT
        + ISA_HEIGHT_STEP * len(edges.isa_edges)
        + ATTRIBUTE_HEIGHT_STEP * len(edges.attribute_edges)
    )
    return width, height


def fit_canvas(drawing: Drawing, cursor_y: float, max_x: float) -> None:
    """
    Resize the canvas to the laid out content.

    Height is the final cursor plus a margin and width the right-most extent
    plus a wide margin. Neither goes below the content bounds.
    """
    right, bottom = drawing.content_bounds()
    drawing.height = max(cursor_y, bottom) + HEIGHT_MARGIN
    drawing.width = max(max_x, right) + WIDTH_MARGIN


class NormalFormLayout:
    """
    Lays out a classified concept as a normal-form diagram.
    """

    def __init__(
        self,
        box_renderer: Optional[BoxRenderer] = None,
        router: Optional[ConnectorRouter] = None,
    ):
        self.box_renderer = box_renderer if box_renderer is not None else BoxRenderer()
        self.router = router if router is not None else ConnectorRouter()
        self._trace: Optional[RenderTrace] = None

    def layout(
        self,
        concept: Concept,
        edges: ClassifiedEdges,
        options: DiagramOptions,
        ungrouped: Optional[UngroupedAttributeIndex] = None,
        trace: Optional[RenderTrace] = None,
    ) -> Drawing:
        """
        Lay out a concept and its classified edges.

        Args:
            concept: The diagrammed concept.
            edges: Its classified edges for the selected view.
            options: Render options (language and view).
            ungrouped: Attribute types drawn without a self-group circle.
            trace: Optional trace to record placements to.

        Returns:
            A Drawing with every primitive placed and the canvas fitted.
        """
        if ungrouped is None:
            ungrouped = UngroupedAttributeIndex()
        self._trace = trace
        language = options.default_language

        width, height = presize(edges)
        drawing = Drawing(width, height, concept.concept_id)
        if trace is not None:
            trace.add_stage("presized", {"width": width, "height": height})

        x = y = ORIGIN
        max_x = ORIGIN

        root_term = concept.default_term
        if root_term is None:
            root_term = display_term(concept, language)
        root_class = PRIMITIVE_CLASS if concept.is_primitive else DEFINED_CLASS
        root = self._box(
            drawing, x, y, root_term, concept.concept_id, root_class, "root_box"
        )

        x += ROOT_INDENT
        y += root.height + ROOT_GAP

        conjunction = None
        if self._draws_connective(edges, options):
            if concept.is_primitive:
                connective = self.box_renderer.draw_subsumed_by_node(drawing, x, y)
            else:
                connective = self.box_renderer.draw_equivalent_node(drawing, x, y)
            self._record_node(connective, "connective")
            self._connect(
                drawing,
                root,
                connective,
                Anchor.BOTTOM_SHIFTED,
                Anchor.LEFT,
                Marker.BLACK_TRIANGLE,
                "definition_connector",
            )

            x += CONNECTIVE_STEP
            conjunction = self.box_renderer.draw_conjunction_node(drawing, x, y)
            self._record_node(conjunction, "conjunction")
            # Anchors overlap so the two glyphs read as one
            self._connect(
                drawing,
                connective,
                conjunction,
                Anchor.RIGHT,
                Anchor.CENTER,
                None,
                "conjunction_connector",
            )
            x += CONJUNCTION_STEP

        if not edges.isa_edges:
            x += NO_PARENT_NUDGE_X
            y += NO_PARENT_NUDGE_Y

        max_x = max(max_x, x)

        for relationship in edges.isa_edges:
            parent = self._box(
                drawing,
                x,
                y,
                object_label(relationship, language),
                relationship.object_id,
                box_class_for(relationship),
                "parent_box",
            )
            if conjunction is not None:
                self._connect(
                    drawing,
                    conjunction,
                    parent,
                    Anchor.CENTER,
                    Anchor.LEFT,
                    Marker.CLEAR_TRIANGLE,
                    "isa_connector",
                )
            y += parent.height + ROW_GAP
            max_x = max(max_x, x + parent.width + EXTENT_PADDING)

        for relationship in edges.ungrouped_edges():
            y, max_x = self._layout_ungrouped(
                drawing, relationship, conjunction, x, y, max_x, language, ungrouped
            )

        # Reserved even when the concept has no role groups
        y += GROUPS_GAP
        for group_id, members in edges.role_groups():
            y, max_x = self._layout_group(
                drawing, group_id, members, conjunction, x, y, max_x, language
            )

        if trace is not None:
            trace.add_stage(
                "laid_out",
                {
                    "nodes": len(drawing.nodes),
                    "connectors": len(drawing.connectors),
                    "cursor_y": y,
                    "max_x": max_x,
                },
            )

        fit_canvas(drawing, y, max_x)
        if trace is not None:
            trace.add_stage(
                "fitted", {"width": drawing.width, "height": drawing.height}
            )
        self._trace = None
        return drawing

    def _draws_connective(self, edges: ClassifiedEdges, options: DiagramOptions):
        """
        Whether the is-a connective and conjunction are drawn.

        The inferred view always draws them, the stated view only with at
        least one is-a edge. A concept without any edge is drawn as the root
        box alone.
        """
        if edges.is_empty:
            return False
        return not options.is_stated or bool(edges.isa_edges)

    def _layout_ungrouped(
        self,
        drawing: Drawing,
        relationship: Relationship,
        conjunction: Optional[Circle],
        x: float,
        y: float,
        max_x: float,
        language: str,
        ungrouped: UngroupedAttributeIndex,
    ) -> Tuple[float, float]:
        """Place one group-0 attribute; returns the new cursor y and extent."""
        type_id = relationship.type.concept_id if relationship.type else ""

        if type_id not in ungrouped:
            self_group = self.box_renderer.draw_attribute_group_node(drawing, x, y)
            self._record_node(self_group, "self_group")
            if conjunction is not None:
                self._connect(
                    drawing,
                    conjunction,
                    self_group,
                    Anchor.CENTER,
                    Anchor.LEFT,
                    Marker.BLACK_TRIANGLE,
                    "self_group_connector",
                )
            role_x = x + self_group.width + CHAIN_GAP
            role = self._role_box(drawing, relationship, role_x, y, language)
            self._connect(
                drawing,
                self_group,
                role,
                Anchor.RIGHT,
                Anchor.LEFT,
                Marker.BLACK_TRIANGLE,
                "role_connector",
            )
        else:
            role = self._role_box(drawing, relationship, x, y, language)
            if conjunction is not None:
                self._connect(
                    drawing,
                    conjunction,
                    role,
                    Anchor.CENTER,
                    Anchor.LEFT,
                    None,
                    "role_connector",
                )

        target = self._target_box(
            drawing, relationship, role.x + role.width + CHAIN_GAP, y, language
        )
        self._connect(
            drawing,
            role,
            target,
            Anchor.RIGHT,
            Anchor.LEFT,
            Marker.BLACK_TRIANGLE,
            "target_connector",
        )

        max_x = max(max_x, target.x + target.width + EXTENT_PADDING)
        return y + target.height + ROW_GAP, max_x

    def _layout_group(
        self,
        drawing: Drawing,
        group_id: int,
        members,
        conjunction: Optional[Circle],
        x: float,
        y: float,
        max_x: float,
        language: str,
    ) -> Tuple[float, float]:
        """Place one role group; returns the new cursor y and extent."""
        group_node = self.box_renderer.draw_attribute_group_node(drawing, x, y)
        self._record_node(group_node, f"group_{group_id}")
        if conjunction is not None:
            self._connect(
                drawing,
                conjunction,
                group_node,
                Anchor.CENTER,
                Anchor.LEFT,
                Marker.BLACK_TRIANGLE,
                "group_connector",
            )

        group_conjunction = self.box_renderer.draw_conjunction_node(
            drawing, x + GROUP_CONJUNCTION_OFFSET, y
        )
        self._record_node(group_conjunction, f"group_{group_id}_conjunction")
        self._connect(
            drawing,
            group_node,
            group_conjunction,
            Anchor.RIGHT,
            Anchor.LEFT,
            Marker.BLACK_TRIANGLE,
            "group_conjunction_connector",
        )

        for relationship in members:
            role = self._role_box(
                drawing, relationship, x + GROUP_ROLE_OFFSET, y, language
            )
            self._connect(
                drawing,
                group_conjunction,
                role,
                Anchor.CENTER,
                Anchor.LEFT,
                Marker.BLACK_TRIANGLE,
                "role_connector",
            )
            target = self._target_box(
                drawing, relationship, role.x + role.width + CHAIN_GAP, y, language
            )
            self._connect(
                drawing,
                role,
                target,
                Anchor.RIGHT,
                Anchor.LEFT,
                Marker.BLACK_TRIANGLE,
                "target_connector",
            )
            y += target.height + GROUP_ROW_GAP
            max_x = max(max_x, target.x + target.width + EXTENT_PADDING)

        return y, max_x

    def _role_box(
        self,
        drawing: Drawing,
        relationship: Relationship,
        x: float,
        y: float,
        language: str,
    ) -> Box:
        rel_type = relationship.type
        return self._box(
            drawing,
            x,
            y,
            related_term(rel_type, language),
            rel_type.concept_id if rel_type is not None else "",
            ATTRIBUTE_CLASS,
            "role_box",
        )

    def _target_box(
        self,
        drawing: Drawing,
        relationship: Relationship,
        x: float,
        y: float,
        language: str,
    ) -> Box:
        return self._box(
            drawing,
            x,
            y,
            object_label(relationship, language),
            relationship.object_id,
            box_class_for(relationship),
            "target_box",
        )

    def _box(
        self,
        drawing: Drawing,
        x: float,
        y: float,
        label: str,
        concept_id: str,
        css_class: str,
        reason: str,
    ) -> Box:
        box = self.box_renderer.draw_box(drawing, x, y, label, concept_id, css_class)
        self._record_node(box, reason)
        return box

    def _connect(
        self,
        drawing: Drawing,
        source: Node,
        target: Node,
        source_anchor: Anchor,
        target_anchor: Anchor,
        marker: Optional[Marker],
        reason: str,
    ) -> None:
        connector = self.router.connect(
            drawing, source, target, source_anchor, target_anchor, marker
        )
        if self._trace is not None:
            start_x, start_y = connector.points[0]
            self._trace.add_placement(
                "connector",
                f"{connector.source}->{connector.target}",
                start_x,
                start_y,
                0,
                0,
                reason,
            )

    def _record_node(self, node: Node, reason: str) -> None:
        if self._trace is None:
            return
        kind = "box" if isinstance(node, Box) else "circle"
        self._trace.add_placement(
            kind, node.node_id, node.x, node.y, node.width, node.height, reason
        )
