"""
Label resolution for diagram boxes.

A label prefers a localized term over the English fully specified name, but
only when a non-English language is requested and the FSN is not already in
that language. Otherwise the FSN, then the preferred term, then the raw
concept id is used.

The localized term comes from different places for the two kinds of
concept. The diagrammed concept carries its descriptions, so only a
PREFERRED synonym among them counts (``display_term``). Type and target
concepts nested in relationships carry no descriptions; their ``pt`` is
already resolved for the requested language (``related_term``).
"""

from typing import Optional

from .models import Concept, ConcreteValue, Relationship, Term

UNKNOWN_TERM = "Unknown"


def preferred_synonym(concept: Concept, language: str) -> Optional[Term]:
    """
    Find the first active SYNONYM description in ``language`` that is
    PREFERRED in some dialect.
    """
    for description in concept.descriptions:
        if (
            description.type == "SYNONYM"
            and description.lang == language
            and description.active
            and description.is_preferred
        ):
            return Term(description.term, description.lang)
    return None


def _localized(concept: Concept, term: Optional[Term], language: str) -> bool:
    fsn_lang = concept.fsn.lang if concept.fsn is not None else None
    return (
        term is not None
        and term.lang == language
        and language != "en"
        and fsn_lang != language
    )


def _fallback(concept: Concept) -> str:
    if concept.fsn is not None:
        return concept.fsn.term
    if concept.pt is not None:
        return concept.pt.term
    return concept.concept_id


def display_term(concept: Optional[Concept], language: str) -> str:
    """Resolve the root box label of the diagrammed concept."""
    if concept is None:
        return UNKNOWN_TERM

    synonym = preferred_synonym(concept, language)
    if _localized(concept, synonym, language):
        return synonym.term
    return _fallback(concept)


def related_term(concept: Optional[Concept], language: str) -> str:
    """Resolve the label of a type or target concept inside a relationship."""
    if concept is None:
        return UNKNOWN_TERM

    if _localized(concept, concept.pt, language):
        return concept.pt.term
    return _fallback(concept)


def format_concrete_value(value: ConcreteValue) -> str:
    """Format a concrete value: strings are quoted, numbers get a '#'."""
    if value.data_type == "STRING":
        return f'"{value.value}"'
    return f"#{value.value}"


def object_label(relationship: Relationship, language: str) -> str:
    """Label for the object end of a relationship (target or value)."""
    if relationship.concrete_value is not None:
        return format_concrete_value(relationship.concrete_value)
    return related_term(relationship.object_concept, language)
