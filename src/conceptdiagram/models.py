"""
Data models for concept diagram generation.

This module contains the dataclasses describing a terminology concept as it
arrives from a terminology server (descriptions, relationships, axioms and
concrete values), the immutable per-render options, and the index of
administratively ungrouped attributes.

Payloads from the browser API use camelCase keys; ``Concept.from_dict`` and
``UngroupedAttributeIndex.from_members`` convert them into these models.

Classes:
    Term: A term/language pair (fully specified name or preferred term).
    Description: A single description of a concept.
    ConcreteValue: A literal value used in place of a target concept.
    Relationship: A typed edge from the concept to a target or value.
    Axiom: A class axiom or general concept inclusion axiom.
    Concept: The concept being diagrammed (and nested type/target concepts).
    DiagramOptions: Immutable per-render configuration.
    UngroupedAttributeIndex: Attribute types that never take a self group.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

ISA_TYPE_ID = "116680003"

PRIMITIVE = "PRIMITIVE"
FULLY_DEFINED = "FULLY_DEFINED"

STATED_VIEW = "stated"
INFERRED_VIEW = "inferred"
VIEWS = (STATED_VIEW, INFERRED_VIEW)


class ConceptFormatError(ValueError):
    """Raised when a concept payload cannot be decoded."""

    pass


@dataclass
class Term:
    """A term together with its language code."""

    term: str
    lang: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Term"]:
        if not isinstance(data, dict) or "term" not in data:
            return None
        return cls(term=str(data["term"]), lang=data.get("lang") or "")


@dataclass
class Description:
    """
    A description of a concept.

    Attributes:
        term: The description text.
        lang: Language code (e.g. "en", "es").
        type: Description type, e.g. "FSN" or "SYNONYM".
        active: Whether the description is active.
        acceptability_map: Language reference set id -> "PREFERRED" or
            "ACCEPTABLE".
    """

    term: str
    lang: str = ""
    type: str = "SYNONYM"
    active: bool = True
    acceptability_map: Dict[str, str] = field(default_factory=dict)

    @property
    def is_preferred(self) -> bool:
        """True if the description is preferred in any dialect."""
        return any(value == "PREFERRED" for value in self.acceptability_map.values())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Description":
        return cls(
            term=str(data.get("term", "")),
            lang=data.get("lang") or "",
            type=data.get("type") or "SYNONYM",
            active=bool(data.get("active", True)),
            acceptability_map=dict(data.get("acceptabilityMap") or {}),
        )


@dataclass
class ConcreteValue:
    """A literal value attached to a relationship instead of a target."""

    data_type: str
    value: str

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["ConcreteValue"]:
        if not isinstance(data, dict):
            return None
        value = data.get("value")
        if value is None:
            value = data.get("valueWithPrefix", "").lstrip("#")
        return cls(data_type=data.get("dataType") or "", value=str(value))


@dataclass
class Relationship:
    """
    A relationship from the diagrammed concept.

    The browser API is inconsistent about where the object concept lives:
    some endpoints fill ``target``, others ``destination``. Use
    ``object_concept`` to read it; ``target`` wins when both are present.

    Attributes:
        type: The attribute type concept (or the is-a type).
        target: Object concept, as named by most endpoints.
        destination: Object concept, as named by some endpoints.
        group_id: Role group number; 0 means ungrouped.
        concrete_value: Literal value used instead of a target.
        characteristic_type: Stated or inferred origin tag.
    """

    type: "Concept"
    active: bool = True
    target: Optional["Concept"] = None
    destination: Optional["Concept"] = None
    group_id: int = 0
    concrete_value: Optional[ConcreteValue] = None
    characteristic_type: str = ""

    @property
    def object_concept(self) -> Optional["Concept"]:
        """The relationship's object concept, whichever field carries it."""
        if self.target is not None:
            return self.target
        return self.destination

    @property
    def object_id(self) -> str:
        """Object concept id, or an empty string if there is none."""
        obj = self.object_concept
        return obj.concept_id if obj is not None else ""

    @property
    def is_isa(self) -> bool:
        return self.type is not None and self.type.concept_id == ISA_TYPE_ID

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Relationship":
        if not isinstance(data, dict):
            raise ConceptFormatError(
                f"Relationship must be an object, got {type(data).__name__}"
            )

        type_data = data.get("type")
        if isinstance(type_data, dict):
            rel_type = Concept.from_dict(type_data)
        else:
            rel_type = Concept(concept_id=str(data.get("typeId", "")))

        try:
            group_id = int(data.get("groupId") or 0)
        except (TypeError, ValueError) as e:
            raise ConceptFormatError(
                f"Invalid groupId {data.get('groupId')!r}"
            ) from e

        return cls(
            type=rel_type,
            active=bool(data.get("active", True)),
            target=_optional_concept(data.get("target")),
            destination=_optional_concept(data.get("destination")),
            group_id=group_id,
            concrete_value=ConcreteValue.from_dict(data.get("concreteValue")),
            characteristic_type=data.get("characteristicType") or "",
        )


@dataclass
class Axiom:
    """A class axiom or general concept inclusion axiom."""

    active: bool = True
    relationships: List[Relationship] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Axiom":
        return cls(
            active=bool(data.get("active", True)),
            relationships=[
                Relationship.from_dict(r) for r in data.get("relationships") or []
            ],
        )


@dataclass
class Concept:
    """
    A terminology concept.

    The same class is used for the diagrammed concept and for the nested
    type/target concepts of its relationships; nested concepts usually only
    carry an id, terms and a definition status.

    ``default_term`` is filled in by the generator at the start of each
    render with the resolved display label.
    """

    concept_id: str
    fsn: Optional[Term] = None
    pt: Optional[Term] = None
    definition_status: str = PRIMITIVE
    active: bool = True
    descriptions: List[Description] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)
    stated_relationships: List[Relationship] = field(default_factory=list)
    class_axioms: List[Axiom] = field(default_factory=list)
    gci_axioms: List[Axiom] = field(default_factory=list)
    default_term: Optional[str] = field(default=None, compare=False)

    @property
    def is_primitive(self) -> bool:
        return self.definition_status == PRIMITIVE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Concept":
        """
        Build a Concept from a browser API payload.

        Args:
            data: Decoded JSON object for a concept.

        Returns:
            The decoded Concept, including nested relationships and axioms.

        Raises:
            ConceptFormatError: If the payload is not an object or has no
                conceptId.
        """
        if not isinstance(data, dict):
            raise ConceptFormatError(
                f"Concept must be an object, got {type(data).__name__}"
            )
        concept_id = data.get("conceptId", data.get("id"))
        if concept_id is None:
            raise ConceptFormatError("Concept payload has no conceptId")

        return cls(
            concept_id=str(concept_id),
            fsn=Term.from_dict(data.get("fsn")),
            pt=Term.from_dict(data.get("pt")),
            definition_status=data.get("definitionStatus") or PRIMITIVE,
            active=bool(data.get("active", True)),
            descriptions=[
                Description.from_dict(d) for d in data.get("descriptions") or []
            ],
            relationships=[
                Relationship.from_dict(r) for r in data.get("relationships") or []
            ],
            stated_relationships=[
                Relationship.from_dict(r)
                for r in data.get("statedRelationships") or []
            ],
            class_axioms=[Axiom.from_dict(a) for a in data.get("classAxioms") or []],
            gci_axioms=[Axiom.from_dict(a) for a in data.get("gciAxioms") or []],
        )


def _optional_concept(data: Any) -> Optional[Concept]:
    if not isinstance(data, dict):
        return None
    if data.get("conceptId", data.get("id")) is None:
        return None
    return Concept.from_dict(data)


@dataclass(frozen=True)
class DiagramOptions:
    """
    Immutable configuration for a single render.

    Attributes:
        default_language: Language used to resolve display labels.
        selected_view: "stated" or "inferred".
        edition: Upstream branch context; not used by the layout.
        release: Upstream release context; not used by the layout.
    """

    default_language: str = "en"
    selected_view: str = INFERRED_VIEW
    edition: str = ""
    release: str = ""

    def __post_init__(self):
        if self.selected_view not in VIEWS:
            raise ValueError(
                f"selected_view must be 'stated' or 'inferred', "
                f"got {self.selected_view!r}"
            )

    @property
    def is_stated(self) -> bool:
        return self.selected_view == STATED_VIEW

    def with_view(self, view: str) -> "DiagramOptions":
        """Return a copy of these options with a different view selected."""
        return replace(self, selected_view=view)


@dataclass(frozen=True)
class UngroupedAttributeIndex:
    """
    Attribute type ids that are administratively ungrouped.

    An ungrouped (group 0) attribute whose type id is in this index is drawn
    without its own self-group circle.
    """

    type_ids: FrozenSet[str] = frozenset()

    def __contains__(self, type_id: object) -> bool:
        return type_id in self.type_ids

    def __len__(self) -> int:
        return len(self.type_ids)

    @classmethod
    def of(cls, type_ids: Iterable[str]) -> "UngroupedAttributeIndex":
        return cls(frozenset(str(t) for t in type_ids))

    @classmethod
    def from_members(cls, payload: Any) -> "UngroupedAttributeIndex":
        """
        Build the index from a reference set member page.

        Only members whose additional fields carry a ``grouped`` flag that is
        not "1" are kept. Inactive members are ignored.

        Args:
            payload: Either ``{"items": [...]}`` or a bare list of members.
        """
        if payload is None:
            return cls()
        items = payload.get("items", []) if isinstance(payload, dict) else payload

        type_ids = []
        for member in items or []:
            if not isinstance(member, dict) or not member.get("active", True):
                continue
            fields = member.get("additionalFields") or {}
            if "grouped" not in fields or str(fields["grouped"]) == "1":
                continue
            component_id = member.get("referencedComponentId")
            if component_id:
                type_ids.append(component_id)
        return cls.of(type_ids)
