"""
Relationship classification for concept diagrams.

Splits the active relationships of a concept into subsumption (is-a) edges
and attribute edges for the selected view, and partitions attribute edges
into ungrouped edges and role groups.

In the stated view, relationships from class axioms and general concept
inclusion axioms are merged into the same edge lists as the stated
relationships; the diagram does not distinguish their origin.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from .models import INFERRED_VIEW, STATED_VIEW, Concept, Relationship


@dataclass
class ClassifiedEdges:
    """Result of classifying a concept's relationships."""

    isa_edges: List[Relationship] = field(default_factory=list)
    attribute_edges: List[Relationship] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.isa_edges and not self.attribute_edges

    def ungrouped_edges(self) -> List[Relationship]:
        """Attribute edges with group id 0, in encounter order."""
        return [r for r in self.attribute_edges if r.group_id == 0]

    def role_groups(self) -> List[Tuple[int, List[Relationship]]]:
        """
        Attribute edges with a non-zero group id, clustered by group.

        Returns:
            (group_id, members) pairs in ascending group id order. Members
            keep their encounter order.
        """
        groups: Dict[int, List[Relationship]] = {}
        for relationship in self.attribute_edges:
            if relationship.group_id != 0:
                groups.setdefault(relationship.group_id, []).append(relationship)
        return sorted(groups.items())


class RelationshipClassifier:
    """Classifies relationships into is-a and attribute edges."""

    def classify(self, concept: Concept, view: str) -> ClassifiedEdges:
        """
        Classify a concept's relationships for a view.

        Args:
            concept: The concept being diagrammed.
            view: "stated" or "inferred".

        Returns:
            ClassifiedEdges drawn only from active relationships.
        """
        edges = ClassifiedEdges()
        if concept is None:
            return edges

        if view == STATED_VIEW:
            self._add(edges, concept.stated_relationships)
            for axiom in concept.class_axioms:
                if axiom.active:
                    self._add(edges, axiom.relationships)
            for axiom in concept.gci_axioms:
                if axiom.active:
                    self._add(edges, axiom.relationships)
        elif view == INFERRED_VIEW:
            self._add(edges, concept.relationships)
        else:
            raise ValueError(f"Unknown view {view!r}")

        return edges

    def _add(self, edges: ClassifiedEdges, relationships: Iterable[Relationship]):
        for relationship in relationships:
            if not relationship.active:
                continue
            if relationship.is_isa:
                edges.isa_edges.append(relationship)
            else:
                edges.attribute_edges.append(relationship)


def classify(concept: Concept, view: str) -> ClassifiedEdges:
    """Convenience function to classify a concept's relationships."""
    return RelationshipClassifier().classify(concept, view)
