"""
Main concept diagram generator module.

Combines classification, layout and SVG building to produce a rendered
Drawing for a concept's stated or inferred normal form.
"""

from typing import Any, Optional

from .classifier import RelationshipClassifier
from .layout import BASE_HEIGHT, BASE_WIDTH, NormalFormLayout
from .models import Concept, DiagramOptions, UngroupedAttributeIndex
from .renderer import BoxRenderer, Drawing, TextMeasurer
from .router import ConnectorRouter
from .svg_renderer import SVGRenderer
from .terms import display_term
from .tracer import RenderTrace


class DiagramGenerator:
    """
    Generate concept diagrams from concepts or browser API payloads.

    Example:
        >>> generator = DiagramGenerator()
        >>> drawing = generator.render(concept, DiagramOptions(selected_view="stated"))
        >>> svg = DiagramExporter().export_vector(drawing)
    """

    def __init__(
        self,
        measurer: Optional[TextMeasurer] = None,
        trace_enabled: bool = False,
    ):
        """
        Initialize the diagram generator.

        Args:
            measurer: Text measurer used to size boxes. Defaults to Pillow
                font metrics; pass a FixedWidthTextMeasurer for headless use.
            trace_enabled: Record a RenderTrace on every render, not only on
                renders called with ``debug=True``.
        """
        self.trace_enabled = trace_enabled
        self.classifier = RelationshipClassifier()
        self.box_renderer = BoxRenderer(measurer)
        self.layout_engine = NormalFormLayout(self.box_renderer, ConnectorRouter())
        self.svg_renderer = SVGRenderer()
        self._trace: Optional[RenderTrace] = None

    def render(
        self,
        concept: Optional[Concept],
        options: Optional[DiagramOptions] = None,
        ungrouped: Optional[UngroupedAttributeIndex] = None,
        debug: bool = False,
    ) -> Drawing:
        """
        Render a concept diagram.

        Args:
            concept: The concept to diagram. None produces an empty drawing.
            options: Language and view; defaults to the inferred English view.
            ungrouped: Attribute types that are never drawn inside a role
                group.
            debug: Record a RenderTrace retrievable with get_trace().

        Returns:
            The laid out Drawing with its live SVG document attached.
        """
        if options is None:
            options = DiagramOptions()

        trace = None
        if debug or self.trace_enabled:
            trace = RenderTrace(
                concept_id=concept.concept_id if concept is not None else "",
                view=options.selected_view,
            )
        self._trace = trace

        if concept is None:
            drawing = Drawing(BASE_WIDTH, BASE_HEIGHT)
            drawing.document = self.svg_renderer.render(drawing)
            return drawing

        # Recomputed every render so a language change is picked up
        concept.default_term = display_term(concept, options.default_language)

        edges = self.classifier.classify(concept, options.selected_view)
        if trace is not None:
            trace.add_stage(
                "classified",
                {
                    "isa_edges": len(edges.isa_edges),
                    "attribute_edges": len(edges.attribute_edges),
                    "role_groups": [gid for gid, _ in edges.role_groups()],
                },
            )

        drawing = self.layout_engine.layout(concept, edges, options, ungrouped, trace)
        drawing.document = self.svg_renderer.render(drawing)
        return drawing

    def render_payload(
        self,
        payload: Any,
        options: Optional[DiagramOptions] = None,
        members: Any = None,
        debug: bool = False,
    ) -> Drawing:
        """
        Decode browser API payloads and render them.

        Args:
            payload: Concept JSON as returned by the terminology browser API.
            options: Language and view.
            members: Optional reference-set member page listing the
                attribute types that are never grouped.
            debug: Record a RenderTrace retrievable with get_trace().

        Raises:
            ConceptFormatError: If the concept payload is malformed.
        """
        concept = Concept.from_dict(payload)
        ungrouped = None
        if members is not None:
            ungrouped = UngroupedAttributeIndex.from_members(members)
        return self.render(concept, options, ungrouped, debug=debug)

    def get_trace(self) -> Optional[RenderTrace]:
        """
        Get the trace from the last render call with tracing enabled.

        Returns:
            RenderTrace if the last render was traced, None otherwise.
        """
        return self._trace


def render_diagram(
    concept: Optional[Concept],
    options: Optional[DiagramOptions] = None,
    ungrouped: Optional[UngroupedAttributeIndex] = None,
    measurer: Optional[TextMeasurer] = None,
) -> Drawing:
    """
    Convenience function to render a concept diagram.

    Args:
        concept: The concept to diagram.
        options: Language and view.
        ungrouped: Attribute types that are never drawn inside a role group.
        measurer: Optional text measurer.

    Returns:
        The rendered Drawing.
    """
    return DiagramGenerator(measurer=measurer).render(concept, options, ungrouped)
