"""
SVG renderer module for concept diagrams.

Builds the live SVG document for a laid out Drawing using drawsvg. The live
document carries no stylesheet; class names drive its appearance and the
exporter embeds the stylesheet from ``build_stylesheet`` into a copy.
"""

from typing import Dict

import drawsvg as draw

from .renderer import (
    ATTRIBUTE_GROUP_NODE_CLASS,
    BOX_STYLES,
    CONJUNCTION_NODE_CLASS,
    GLYPH_STROKE_WIDTH,
    LINK_STYLE,
    NODE_STYLES,
    TEXT_COLOR,
    Box,
    BoxRenderer,
    Circle,
    Drawing,
)
from .router import Connector, Marker

LINK_CLASS = "link-line"
INNER_RECT_CLASS = "inner-rect"


def build_stylesheet() -> str:
    """CSS for every visual class used in a diagram."""
    rules = [
        ".sct-box rect { stroke: #333; stroke-width: 1px; fill: #fff; }",
        ".sct-box text { font-family: Arial, sans-serif; font-size: 12px; "
        f"fill: {TEXT_COLOR}; }}",
    ]
    for css_class, style in BOX_STYLES.items():
        rules.append(
            f".{css_class} rect {{ fill: {style['fill']}; "
            f"stroke: {style['stroke']}; stroke-width: {style['stroke_width']}px; }}"
        )
    for css_class, style in NODE_STYLES.items():
        if style["stroke"] is None:
            rules.append(f".{css_class} circle {{ fill: {style['fill']}; }}")
        else:
            rules.append(
                f".{css_class} circle {{ fill: {style['fill']}; "
                f"stroke: {style['stroke']}; "
                f"stroke-width: {style['stroke_width']}px; }}"
            )
    rules.append(
        f".{LINK_CLASS} {{ fill: none; stroke: {LINK_STYLE['stroke']}; "
        f"stroke-width: {LINK_STYLE['stroke_width']}px; }}"
    )
    rules.append(f".{INNER_RECT_CLASS} {{ fill: none; }}")
    return "\n".join(rules)


class SVGRenderer:
    """Renders a Drawing to a drawsvg document."""

    def render(self, drawing: Drawing) -> draw.Drawing:
        """
        Build the SVG document for a drawing.

        Connectors come first so every node is painted over them.

        Args:
            drawing: A laid out Drawing.

        Returns:
            A drawsvg Drawing sized to the drawing's canvas.
        """
        d = draw.Drawing(drawing.width, drawing.height)
        markers = self._markers()

        for connector in drawing.connectors:
            d.append(self._connector(connector, markers))

        for node in drawing.nodes:
            if isinstance(node, Box):
                d.append(self._box(node))
            else:
                d.append(self._circle(node))

        return d

    def _markers(self) -> Dict[Marker, draw.Marker]:
        black = draw.Marker(
            0, 0, 10, 10, orient="auto", refX=10, refY=5, id=Marker.BLACK_TRIANGLE.value
        )
        black.append(draw.Path(d="M 0 0 L 10 5 L 0 10 z", style="fill: black"))

        clear = draw.Marker(
            0, 0, 10, 10, orient="auto", refX=10, refY=5, id=Marker.CLEAR_TRIANGLE.value
        )
        clear.append(
            draw.Path(d="M 0 0 L 10 5 L 0 10 z", style="fill: white; stroke: black")
        )
        return {Marker.BLACK_TRIANGLE: black, Marker.CLEAR_TRIANGLE: clear}

    def _connector(
        self, connector: Connector, markers: Dict[Marker, draw.Marker]
    ) -> draw.Path:
        if connector.marker is not None:
            return draw.Path(
                d=connector.path_data,
                class_=LINK_CLASS,
                marker_end=markers[connector.marker],
            )
        return draw.Path(d=connector.path_data, class_=LINK_CLASS)

    def _box(self, box: Box) -> draw.Group:
        g = draw.Group(
            class_=f"sct-box {box.css_class}",
            transform=f"translate({box.x}, {box.y})",
        )

        # A white outer rect leaves a gap inside the double border
        outer_style = {"style": "fill: white"} if box.double_border else {}
        g.append(
            draw.Rectangle(
                0, 0, box.width, box.height, rx=box.radius, ry=box.radius, **outer_style
            )
        )

        if box.double_border:
            offset = BoxRenderer.INNER_OFFSET
            inner_radius = max(0, box.radius - offset)
            g.append(
                draw.Rectangle(
                    offset,
                    offset,
                    box.width - offset * 2,
                    box.height - offset * 2,
                    rx=inner_radius,
                    ry=inner_radius,
                    class_=INNER_RECT_CLASS,
                    style="stroke-width: 1px",
                )
            )

        texts = (
            (
                box.concept_id,
                BoxRenderer.ID_FONT_SIZE,
                BoxRenderer.ID_BASELINE,
                "sct-id",
            ),
            (
                box.label,
                BoxRenderer.LABEL_FONT_SIZE,
                BoxRenderer.LABEL_BASELINE,
                "sct-label",
            ),
        )
        for text, font_size, baseline, css_class in texts:
            if not text:
                continue
            g.append(
                draw.Text(
                    text,
                    font_size,
                    BoxRenderer.PADDING,
                    baseline,
                    class_=css_class,
                    style=f"font-size: {font_size}px",
                )
            )
        return g

    def _circle(self, circle: Circle) -> draw.Group:
        g = draw.Group(
            class_=circle.css_class, transform=f"translate({circle.x}, {circle.y})"
        )

        if circle.css_class == CONJUNCTION_NODE_CLASS:
            g.append(
                draw.Circle(
                    circle.cx, circle.cy, circle.r, style="fill: black; stroke: none"
                )
            )
        elif circle.css_class == ATTRIBUTE_GROUP_NODE_CLASS:
            g.append(
                draw.Circle(
                    circle.cx, circle.cy, circle.r, style="fill: white; stroke: black"
                )
            )
        else:
            g.append(draw.Circle(circle.cx, circle.cy, circle.r))

        for x1, y1, x2, y2 in circle.glyph_lines():
            g.append(
                draw.Line(
                    x1, y1, x2, y2, stroke="black", stroke_width=GLYPH_STROKE_WIDTH
                )
            )
        return g
