"""
conceptdiagram - SNOMED CT concept definition diagrams

A Python library for drawing the stated or inferred normal form of a
terminology concept and exporting it as SVG or PNG.

Example:
    >>> from conceptdiagram import DiagramGenerator, DiagramExporter
    >>> generator = DiagramGenerator()
    >>> drawing = generator.render_payload(concept_json)
    >>> svg = DiagramExporter().export_vector(drawing)

Debug Mode Example:
    >>> generator = DiagramGenerator()
    >>> drawing = generator.render(concept, debug=True)
    >>> trace = generator.get_trace()
    >>> print(trace.summary())
"""

from .classifier import ClassifiedEdges, RelationshipClassifier, classify
from .debug import DrawingInspector
from .export import DiagramExporter
from .generator import DiagramGenerator, render_diagram
from .layout import NormalFormLayout
from .models import (
    Axiom,
    Concept,
    ConceptFormatError,
    ConcreteValue,
    Description,
    DiagramOptions,
    Relationship,
    Term,
    UngroupedAttributeIndex,
)
from .png_renderer import PNGRenderer
from .renderer import (
    Box,
    BoxRenderer,
    Circle,
    Drawing,
    FixedWidthTextMeasurer,
    PillowTextMeasurer,
)
from .router import Anchor, Connector, ConnectorRouter, Marker
from .svg_renderer import SVGRenderer
from .terms import display_term, related_term
from .tracer import PipelineStage, PrimitivePlacement, RenderTrace

__version__ = "0.1.0"

__all__ = [
    # Main API
    "DiagramGenerator",
    "DiagramExporter",
    "render_diagram",
    # Models
    "Concept",
    "ConceptFormatError",
    "ConcreteValue",
    "Description",
    "DiagramOptions",
    "Relationship",
    "Axiom",
    "Term",
    "UngroupedAttributeIndex",
    "display_term",
    "related_term",
    # Classifier
    "RelationshipClassifier",
    "ClassifiedEdges",
    "classify",
    # Layout
    "NormalFormLayout",
    # Renderer
    "Drawing",
    "Box",
    "Circle",
    "BoxRenderer",
    "PillowTextMeasurer",
    "FixedWidthTextMeasurer",
    "SVGRenderer",
    "PNGRenderer",
    # Router
    "ConnectorRouter",
    "Connector",
    "Anchor",
    "Marker",
    # Debug/Tracing (for development and debugging)
    "RenderTrace",
    "PrimitivePlacement",
    "PipelineStage",
    "DrawingInspector",
]
