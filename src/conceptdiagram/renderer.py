"""
Primitive renderer module for concept diagrams.

Handles text measurement and creation of the box and circle primitives that
make up a diagram, plus the Drawing surface that collects them.

Measurement happens before placement: a box's width is computed from the
measured extents of its id and label text, so the layout never depends on a
live rendering backend.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Tuple, Union

from PIL import ImageFont

# Visual classes for concept boxes
PRIMITIVE_CLASS = "sct-primitive-concept"
DEFINED_CLASS = "sct-defined-concept"
ATTRIBUTE_CLASS = "sct-attribute"
CONCRETE_CLASS = "concrete-domain"

# Visual classes for circle nodes
ISA_NODE_CLASS = "isa-node"
CONJUNCTION_NODE_CLASS = "conjunction-node"
ATTRIBUTE_GROUP_NODE_CLASS = "attribute-group-node"

# Glyphs drawn inside the is-a connective
SUBSUMED_BY = "subsumed-by"
EQUIVALENT_TO = "equivalent-to"

# Fill/stroke per visual class, turned into the exported stylesheet
BOX_STYLES: Dict[str, Dict[str, Union[str, int]]] = {
    PRIMITIVE_CLASS: {"fill": "#a6d8f0", "stroke": "#000000", "stroke_width": 2},
    DEFINED_CLASS: {"fill": "#dba6f0", "stroke": "#000000", "stroke_width": 1},
    ATTRIBUTE_CLASS: {"fill": "#fdfdad", "stroke": "#000000", "stroke_width": 1},
    CONCRETE_CLASS: {"fill": "#dddddd", "stroke": "#000000", "stroke_width": 1},
}

NODE_STYLES: Dict[str, Dict[str, Union[str, int, None]]] = {
    ISA_NODE_CLASS: {"fill": "#ffffff", "stroke": "#000000", "stroke_width": 2},
    CONJUNCTION_NODE_CLASS: {"fill": "#000000", "stroke": None, "stroke_width": 0},
    ATTRIBUTE_GROUP_NODE_CLASS: {
        "fill": "#ffffff",
        "stroke": "#000000",
        "stroke_width": 2,
    },
}

LINK_STYLE = {"stroke": "#000000", "stroke_width": 2}
TEXT_COLOR = "#333333"
GLYPH_STROKE_WIDTH = 2

# Sans fonts tried in order for text measurement
FONT_CANDIDATES = [
    # Linux
    "DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    # macOS
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "/Library/Fonts/Arial.ttf",
    # Windows
    "arial.ttf",
    "C:/Windows/Fonts/arial.ttf",
]


def load_font(size: int, font_path: Optional[str] = None) -> ImageFont.ImageFont:
    """
    Load a sans-serif font at a pixel size.

    Tries the user-specified font first, then common system fonts, then
    Pillow's bundled default font.
    """
    fonts_to_try = []
    if font_path and os.path.exists(font_path):
        fonts_to_try.append(font_path)
    fonts_to_try.extend(FONT_CANDIDATES)

    for font in fonts_to_try:
        try:
            return ImageFont.truetype(font, size)
        except OSError:
            continue

    try:
        return ImageFont.load_default(size=size)
    except TypeError:
        # Older Pillow versions don't support size parameter
        return ImageFont.load_default()


class TextMeasurer(Protocol):
    """Protocol for objects that measure rendered text width."""

    def text_width(self, text: str, font_size: int) -> float:
        """Width of ``text`` rendered at ``font_size`` pixels."""
        ...


class PillowTextMeasurer:
    """Measures text with a TrueType font close to the one the SVG names."""

    def __init__(self, font_path: Optional[str] = None):
        self.font_path = font_path
        self._fonts: Dict[int, ImageFont.ImageFont] = {}

    def get_font(self, font_size: int) -> ImageFont.ImageFont:
        if font_size not in self._fonts:
            self._fonts[font_size] = load_font(font_size, self.font_path)
        return self._fonts[font_size]

    def text_width(self, text: str, font_size: int) -> float:
        if not text:
            return 0.0
        return float(self.get_font(font_size).getlength(text))


class FixedWidthTextMeasurer:
    """
    Approximates text width as a fixed fraction of the font size per char.

    Useful where no font backend should be consulted; results only depend on
    the text length.
    """

    def __init__(self, char_width: float = 0.6):
        self.char_width = char_width

    def text_width(self, text: str, font_size: int) -> float:
        return len(text) * font_size * self.char_width


@dataclass
class BoxDimensions:
    """Measured dimensions of a concept box."""

    width: float
    height: float
    id_width: float
    label_width: float


@dataclass
class Box:
    """
    A concept box (or attribute pill) placed at (x, y).

    Attributes:
        node_id: Identifier unique within the drawing.
        label: Display term (or formatted concrete value).
        concept_id: Id shown above the label; may be empty.
        css_class: Visual class driving fill and border.
        radius: Corner radius; attribute pills are rounded.
        double_border: Whether an inner border is drawn.
    """

    node_id: str
    x: float
    y: float
    width: float
    height: float
    label: str
    concept_id: str
    css_class: str
    radius: float = 0
    double_border: bool = False

    def bounds(self) -> Tuple[float, float, float, float]:
        """Absolute (left, top, width, height)."""
        return self.x, self.y, self.width, self.height


@dataclass
class Circle:
    """
    A circular node placed at (x, y) with its centre at (x + cx, y + cy).

    Attributes:
        glyph: SUBSUMED_BY, EQUIVALENT_TO or empty.
    """

    node_id: str
    x: float
    y: float
    cx: float
    cy: float
    r: float
    css_class: str
    glyph: str = ""

    @property
    def width(self) -> float:
        return self.r * 2

    @property
    def height(self) -> float:
        return self.r * 2

    def bounds(self) -> Tuple[float, float, float, float]:
        """Absolute (left, top, width, height)."""
        left = self.x + self.cx - self.r
        top = self.y + self.cy - self.r
        return left, top, self.width, self.height

    def glyph_lines(self) -> List[Tuple[float, float, float, float]]:
        """Glyph strokes as (x1, y1, x2, y2), relative to the node origin."""
        cx, cy, s = self.cx, self.cy, 12
        if self.glyph == SUBSUMED_BY:
            return [
                (cx - s, cy - 7, cx + s, cy - 7),
                (cx - s, cy + 5, cx + s, cy + 5),
                (cx - s, cy - 7, cx - s, cy + 5),
                (cx - s, cy + 10, cx + s, cy + 10),
            ]
        if self.glyph == EQUIVALENT_TO:
            return [
                (cx - s, cy - 7, cx + s, cy - 7),
                (cx - s, cy, cx + s, cy),
                (cx - s, cy + 7, cx + s, cy + 7),
            ]
        return []


Node = Union[Box, Circle]


class Drawing:
    """
    The drawing surface for one rendered concept.

    Nodes are kept in placement order. Connectors are inserted behind every
    node, each new connector going to the very back, so boxes occlude line
    origins.

    Attributes:
        width: Canvas width.
        height: Canvas height.
        preallocated_width: Width estimate made before layout.
        preallocated_height: Height estimate made before layout.
        concept_id: Id of the diagrammed concept, used to name exports.
        display_width: Width at which the host shows the drawing, if known.
        display_height: Height at which the host shows the drawing, if known.
        document: The live SVG document built from this drawing.
    """

    def __init__(self, width: float, height: float, concept_id: str = ""):
        self.width = width
        self.height = height
        self.preallocated_width = width
        self.preallocated_height = height
        self.concept_id = concept_id
        self.display_width: Optional[float] = None
        self.display_height: Optional[float] = None
        self.document = None
        self.nodes: List[Node] = []
        self.connectors: list = []
        self._counter = 0

    def next_id(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}-{self._counter}"

    def add_node(self, node: Node) -> Node:
        self.nodes.append(node)
        return node

    def add_connector(self, connector) -> None:
        self.connectors.insert(0, connector)

    def get_node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None

    def draw_order(self) -> list:
        """All primitives back to front: connectors, then nodes."""
        return list(self.connectors) + list(self.nodes)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def content_bounds(self) -> Tuple[float, float]:
        """Right-most and bottom-most extent of all nodes."""
        right = bottom = 0.0
        for node in self.nodes:
            left, top, w, h = node.bounds()
            right = max(right, left + w)
            bottom = max(bottom, top + h)
        return right, bottom

    def bounding_rect(self) -> Tuple[int, int]:
        """Size at which the drawing is displayed, in whole pixels."""
        width = self.display_width if self.display_width is not None else self.width
        height = (
            self.display_height if self.display_height is not None else self.height
        )
        return int(round(width)), int(round(height))


class BoxRenderer:
    """
    Creates measured box and circle primitives on a Drawing.
    """

    ID_FONT_SIZE = 10
    LABEL_FONT_SIZE = 12
    PADDING = 10
    CONTENT_HEIGHT = 35
    ID_BASELINE = 16
    LABEL_BASELINE = 33
    ATTRIBUTE_RADIUS = 18
    INNER_OFFSET = 3

    def __init__(self, measurer: Optional[TextMeasurer] = None):
        self.measurer = measurer if measurer is not None else PillowTextMeasurer()

    def calculate_box_dimensions(self, label: str, concept_id: str) -> BoxDimensions:
        """
        Calculate box dimensions from its two text lines.

        Width is the wider of the id and label text plus padding on both
        sides; height is fixed for the two lines.
        """
        id_width = self.measurer.text_width(concept_id or "", self.ID_FONT_SIZE)
        label_width = self.measurer.text_width(label or "", self.LABEL_FONT_SIZE)
        return BoxDimensions(
            width=max(id_width, label_width) + self.PADDING * 2,
            height=self.CONTENT_HEIGHT + self.PADDING,
            id_width=id_width,
            label_width=label_width,
        )

    def draw_box(
        self,
        drawing: Drawing,
        x: float,
        y: float,
        label: str,
        concept_id: str,
        css_class: str,
    ) -> Box:
        """Create a concept box at (x, y) and add it to the drawing."""
        dims = self.calculate_box_dimensions(label, concept_id)
        is_attribute = css_class == ATTRIBUTE_CLASS
        box = Box(
            node_id=drawing.next_id("box"),
            x=x,
            y=y,
            width=dims.width,
            height=dims.height,
            label=label,
            concept_id=concept_id or "",
            css_class=css_class,
            radius=self.ATTRIBUTE_RADIUS if is_attribute else 0,
            double_border=css_class in (DEFINED_CLASS, ATTRIBUTE_CLASS),
        )
        return drawing.add_node(box)

    def draw_subsumed_by_node(self, drawing: Drawing, x: float, y: float) -> Circle:
        return self._draw_circle(drawing, x, y, 25, 25, 25, ISA_NODE_CLASS, SUBSUMED_BY)

    def draw_equivalent_node(self, drawing: Drawing, x: float, y: float) -> Circle:
        return self._draw_circle(
            drawing, x, y, 25, 25, 25, ISA_NODE_CLASS, EQUIVALENT_TO
        )

    def draw_conjunction_node(self, drawing: Drawing, x: float, y: float) -> Circle:
        # cy=25 lines the disc up with the is-a node centre
        return self._draw_circle(drawing, x, y, 10, 25, 10, CONJUNCTION_NODE_CLASS)

    def draw_attribute_group_node(
        self, drawing: Drawing, x: float, y: float
    ) -> Circle:
        return self._draw_circle(drawing, x, y, 20, 25, 20, ATTRIBUTE_GROUP_NODE_CLASS)

    def _draw_circle(
        self,
        drawing: Drawing,
        x: float,
        y: float,
        cx: float,
        cy: float,
        r: float,
        css_class: str,
        glyph: str = "",
    ) -> Circle:
        circle = Circle(
            node_id=drawing.next_id("node"),
            x=x,
            y=y,
            cx=cx,
            cy=cy,
            r=r,
            css_class=css_class,
            glyph=glyph,
        )
        return drawing.add_node(circle)


def box_class_for(relationship) -> str:
    """
    Visual class for the object box of a relationship.

    Concrete values get the concrete-domain style; otherwise the target's
    definition status decides. Unresolvable targets draw as defined.
    """
    if relationship.concrete_value is not None:
        return CONCRETE_CLASS
    target = relationship.object_concept
    if target is not None and target.is_primitive:
        return PRIMITIVE_CLASS
    return DEFINED_CLASS


