"""
Connector routing module for concept diagrams.

Handles orthogonal routing of connectors between placed primitives:
- Anchor resolution (where a connector meets a primitive)
- Straight, L-shaped or diagonal paths
- Arrowhead markers
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .renderer import Drawing, Node

# Endpoints whose y differs by at most this much are treated as aligned
ALIGNMENT_TOLERANCE = 5

# Horizontal offset of the bottom-shifted anchor from a primitive's left edge
BOTTOM_SHIFT = 35

# How far right the destination must be before an L path is used
BUS_MARGIN = 5


class Marker(Enum):
    """Arrowhead drawn at the end of a connector."""

    BLACK_TRIANGLE = "BlackTriangle"
    CLEAR_TRIANGLE = "ClearTriangle"


class Anchor(Enum):
    """Where a connector attaches to a primitive."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    BOTTOM = "bottom"
    BOTTOM_SHIFTED = "bottom-shifted"

    @property
    def is_bottom(self) -> bool:
        return self in (Anchor.BOTTOM, Anchor.BOTTOM_SHIFTED)


@dataclass
class Connector:
    """A routed connector between two primitives."""

    source: str
    target: str
    source_anchor: Anchor
    target_anchor: Anchor
    points: List[Tuple[float, float]] = field(default_factory=list)
    marker: Optional[Marker] = None

    @property
    def path_data(self) -> str:
        """SVG path data for the connector."""
        commands = []
        for i, (x, y) in enumerate(self.points):
            commands.append(f"{'M' if i == 0 else 'L'} {_num(x)} {_num(y)}")
        return " ".join(commands)


def _num(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def resolve_anchor(node: Node, anchor: Anchor) -> Tuple[float, float]:
    """
    Resolve an anchor on a placed primitive to absolute coordinates.

    By default a connector attaches to the left edge at the vertical
    centre; ``right`` and ``center`` move x, bottom variants move y.
    """
    left, top, width, height = node.bounds()

    x = left
    y = top + height / 2

    if anchor == Anchor.RIGHT:
        x = left + width
    elif anchor == Anchor.CENTER:
        x = left + width / 2
    elif anchor == Anchor.BOTTOM_SHIFTED:
        x = left + BOTTOM_SHIFT

    if anchor.is_bottom:
        y = top + height

    return x, y


class ConnectorRouter:
    """
    Routes connectors between placed primitives and adds them to a drawing.
    """

    def route(
        self,
        source: Node,
        target: Node,
        source_anchor: Anchor,
        target_anchor: Anchor,
    ) -> List[Tuple[float, float]]:
        """
        Calculate the waypoints of a connector.

        Returns:
            Waypoints from the source anchor to the target anchor.
        """
        x1, y1 = resolve_anchor(source, source_anchor)
        x2, y2 = resolve_anchor(target, target_anchor)

        if abs(y1 - y2) <= ALIGNMENT_TOLERANCE:
            # Aligned: one horizontal segment
            y_avg = (y1 + y2) / 2
            return [(x1, y_avg), (x2, y_avg)]

        if source_anchor.is_bottom and target_anchor == Anchor.LEFT:
            return [(x1, y1), (x1, y2), (x2, y2)]

        if x2 > x1 + BUS_MARGIN:
            # Vertical then horizontal
            return [(x1, y1), (x1, y2), (x2, y2)]

        return [(x1, y1), (x2, y2)]

    def connect(
        self,
        drawing: Drawing,
        source: Node,
        target: Node,
        source_anchor: Anchor,
        target_anchor: Anchor,
        marker: Optional[Marker] = None,
    ) -> Connector:
        """Route a connector and insert it behind every node of the drawing."""
        connector = Connector(
            source=source.node_id,
            target=target.node_id,
            source_anchor=source_anchor,
            target_anchor=target_anchor,
            points=self.route(source, target, source_anchor, target_anchor),
            marker=marker,
        )
        drawing.add_connector(connector)
        return connector
