"""
Render tracing for concept diagrams.

A RenderTrace records what the generator did during one render: a snapshot
per pipeline stage and one entry per primitive placed on the drawing, with
the layout rule that placed it. Tracing is off unless a render is called
with ``debug=True`` (or the generator is built with ``trace_enabled=True``).

Typical uses are explaining why a box ended up at a position and writing
tests that pin a single layout decision.

Usage:
    >>> generator = DiagramGenerator()
    >>> drawing = generator.render(concept, options, debug=True)
    >>> trace = generator.get_trace()
    >>> print(trace.summary())
    >>> trace.dump_to_file("render_trace.txt")

Stages, in order: classified, presized, laid_out, fitted.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Stage values longer than this are cut in text output
MAX_VALUE_LENGTH = 100

RULE = "=" * 60


@dataclass
class PrimitivePlacement:
    """
    Record of a single primitive placed on the drawing.

    Attributes:
        kind: "box", "circle" or "connector".
        node_id: Id of the primitive (for connectors, "source->target").
        x: X coordinate of the primitive origin (first waypoint for
           connectors).
        y: Y coordinate of the primitive origin.
        width: Measured width (0 for connectors).
        height: Measured height (0 for connectors).
        reason: Layout rule that placed it (e.g. "root_box",
                "parent_box", "role_box", "isa_connector").
    """

    kind: str
    node_id: str
    x: float
    y: float
    width: float
    height: float
    reason: str

    def __str__(self) -> str:
        if self.kind == "connector":
            return f"{self.node_id} at ({self.x:g},{self.y:g}) [{self.reason}]"
        return (
            f"{self.kind} {self.node_id} at ({self.x:g},{self.y:g}) "
            f"size {self.width:g}x{self.height:g} [{self.reason}]"
        )


@dataclass
class PipelineStage:
    """
    Values captured when a pipeline stage finished.

    Attributes:
        name: "classified", "presized", "laid_out" or "fitted".
        data: Stage values, e.g. edge counts or canvas size.
    """

    name: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        body = []
        for key, value in self.data.items():
            text = str(value)
            if len(text) > MAX_VALUE_LENGTH:
                text = text[:MAX_VALUE_LENGTH] + "..."
            body.append(f"  {key}: {text}")
        return "\n".join([f"=== Stage: {self.name} ==="] + body)


@dataclass
class RenderTrace:
    """
    Everything recorded during one traced render.

    Usage:
        >>> trace = generator.get_trace()
        >>> parents = trace.get_placements_by_reason("parent_box")
        >>> trace.get_stage("presized").data["height"]

    Attributes:
        stages: Stage snapshots in pipeline order.
        placements: Placed primitives in placement order.
        concept_id: Id of the rendered concept.
        view: "stated" or "inferred".
    """

    stages: List[PipelineStage] = field(default_factory=list)
    placements: List[PrimitivePlacement] = field(default_factory=list)
    concept_id: str = ""
    view: str = ""

    def add_stage(self, name: str, data: Dict[str, Any]) -> None:
        """Record a stage; ``data`` is copied so later edits do not leak in."""
        self.stages.append(PipelineStage(name, dict(data)))

    def add_placement(
        self,
        kind: str,
        node_id: str,
        x: float,
        y: float,
        width: float,
        height: float,
        reason: str,
    ) -> None:
        self.placements.append(
            PrimitivePlacement(kind, node_id, x, y, width, height, reason)
        )

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        return next((s for s in self.stages if s.name == name), None)

    def get_placements_by_reason(self, reason: str) -> List[PrimitivePlacement]:
        """Placements whose reason contains ``reason``."""
        return [p for p in self.placements if reason in p.reason]

    def get_placements_by_kind(self, kind: str) -> List[PrimitivePlacement]:
        return [p for p in self.placements if p.kind == kind]

    def summary(self) -> str:
        """
        Short report: concept and view, stage names, canvas size and
        placement counts per kind and per reason.
        """
        lines = [
            RULE,
            f"Concept: {self.concept_id}",
            f"View: {self.view}",
            RULE,
            "Stages: " + " -> ".join(s.name for s in self.stages),
        ]

        fitted = self.get_stage("fitted")
        if fitted is not None:
            lines.append(
                f"Canvas: {fitted.data['width']:g}x{fitted.data['height']:g}"
            )

        kinds = Counter(p.kind for p in self.placements)
        lines.append(
            f"Total placements: {len(self.placements)} "
            f"({', '.join(f'{k}: {n}' for k, n in sorted(kinds.items()))})"
        )
        for reason, count in Counter(p.reason for p in self.placements).most_common():
            lines.append(f"  {reason}: {count}")
        return "\n".join(lines)

    def dump(self) -> str:
        """Summary followed by every stage snapshot and every placement."""
        sections = [self.summary(), "", "DETAILED TRACE", ""]
        sections.extend(str(stage) for stage in self.stages)
        sections.append("")
        sections.append("=== Placements ===")
        sections.extend(f"  {placement}" for placement in self.placements)
        return "\n".join(sections)

    def dump_to_file(self, filename: str) -> None:
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())
