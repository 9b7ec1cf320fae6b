"""
Debug utilities for concept diagrams.

This module provides tools for inspecting a rendered Drawing. The main
component is DrawingInspector, which views the drawing as a directed graph
(nodes are primitives, edges are connectors) so structural questions can be
answered without reasoning about coordinates.

Usage:
    >>> generator = DiagramGenerator()
    >>> drawing = generator.render(concept, options)
    >>> inspector = DrawingInspector(drawing)
    >>> inspector.connectors_with_marker(Marker.CLEAR_TRIANGLE)
    >>> print(inspector.summary())
"""

from typing import Dict, List, Optional

import networkx as nx

from .renderer import Box, Drawing, Node
from .router import Connector, Marker


class DrawingInspector:
    """
    Utilities for inspecting the structure of a rendered drawing.

    Attributes:
        drawing: The inspected Drawing.
        graph: networkx DiGraph with one node per primitive (attributes
            ``primitive``, ``css_class``, ``label``) and one edge per
            connector (attributes ``connector``, ``marker``).
    """

    def __init__(self, drawing: Drawing):
        self.drawing = drawing
        self.graph = self._build_graph(drawing)

    @staticmethod
    def _build_graph(drawing: Drawing) -> nx.DiGraph:
        graph = nx.DiGraph()
        for node in drawing.nodes:
            graph.add_node(
                node.node_id,
                primitive=node,
                css_class=node.css_class,
                label=node.label if isinstance(node, Box) else "",
            )
        for connector in reversed(drawing.connectors):
            graph.add_edge(
                connector.source,
                connector.target,
                connector=connector,
                marker=connector.marker,
            )
        return graph

    @property
    def root(self) -> Optional[Node]:
        """The first placed node (the diagrammed concept's box)."""
        return self.drawing.nodes[0] if self.drawing.nodes else None

    def nodes_with_class(self, css_class: str) -> List[Node]:
        """Primitives with a visual class, in placement order."""
        return [
            data["primitive"]
            for _, data in self.graph.nodes(data=True)
            if data["css_class"] == css_class
        ]

    def successors(self, node: Node) -> List[Node]:
        """Primitives that ``node`` has a connector to."""
        return [
            self.graph.nodes[n]["primitive"]
            for n in self.graph.successors(node.node_id)
        ]

    def predecessors(self, node: Node) -> List[Node]:
        """Primitives with a connector into ``node``."""
        return [
            self.graph.nodes[n]["primitive"]
            for n in self.graph.predecessors(node.node_id)
        ]

    def connector_between(self, source: Node, target: Node) -> Optional[Connector]:
        data = self.graph.get_edge_data(source.node_id, target.node_id)
        return data["connector"] if data else None

    def connectors_with_marker(self, marker: Optional[Marker]) -> List[Connector]:
        """Connectors ending in ``marker`` (None for unmarked connectors)."""
        return [
            data["connector"]
            for _, _, data in self.graph.edges(data=True)
            if data["marker"] == marker
        ]

    def descendants(self, node: Node) -> List[Node]:
        """Every primitive reachable from ``node`` through connectors."""
        reachable = nx.descendants(self.graph, node.node_id)
        return [n for n in self.drawing.nodes if n.node_id in reachable]

    def is_connected(self) -> bool:
        """True when every primitive hangs off one connected structure."""
        if self.graph.number_of_nodes() == 0:
            return True
        return nx.is_weakly_connected(self.graph)

    def summary(self) -> str:
        """
        Generate a human-readable description of the drawing structure.
        """
        class_counts: Dict[str, int] = {}
        for node in self.drawing.nodes:
            class_counts[node.css_class] = class_counts.get(node.css_class, 0) + 1

        marker_counts: Dict[str, int] = {}
        for connector in self.drawing.connectors:
            name = connector.marker.value if connector.marker else "none"
            marker_counts[name] = marker_counts.get(name, 0) + 1

        lines = [
            f"Concept: {self.drawing.concept_id}",
            f"Canvas: {self.drawing.width:g}x{self.drawing.height:g}",
            f"Primitives: {len(self.drawing.nodes)}",
        ]
        for css_class, count in sorted(class_counts.items()):
            lines.append(f"  {css_class}: {count}")
        lines.append(f"Connectors: {len(self.drawing.connectors)}")
        for name, count in sorted(marker_counts.items()):
            lines.append(f"  {name}: {count}")
        return "\n".join(lines)
