"""Pytest configuration and shared fixtures for conceptdiagram tests."""

import pytest

from conceptdiagram import (
    Axiom,
    Concept,
    ConcreteValue,
    DiagramGenerator,
    DiagramOptions,
    FixedWidthTextMeasurer,
    Relationship,
    Term,
)
from conceptdiagram.models import FULLY_DEFINED, ISA_TYPE_ID, PRIMITIVE

FINDING_SITE = "363698007"
ASSOCIATED_MORPHOLOGY = "116676008"
HAS_NUMERATOR_VALUE = "1142135004"
COUNT_OF_BASE = "1142139005"

TERMS = {
    ISA_TYPE_ID: "Is a (attribute)",
    FINDING_SITE: "Finding site (attribute)",
    ASSOCIATED_MORPHOLOGY: "Associated morphology (attribute)",
    HAS_NUMERATOR_VALUE: "Has presentation strength numerator value (attribute)",
    COUNT_OF_BASE: "Count of base of active ingredient (attribute)",
    "404684003": "Clinical finding (finding)",
    "64572001": "Disease (disorder)",
    "414545008": "Ischemic heart disease (disorder)",
    "251061000": "Myocardial necrosis (finding)",
    "55641003": "Infarct (morphologic abnormality)",
    "74281007": "Myocardium structure (body structure)",
    "22298006": "Myocardial infarction (disorder)",
}


def ref(concept_id, status=PRIMITIVE):
    """A nested concept as the browser API returns it inside relationships."""
    term = TERMS.get(concept_id, concept_id)
    return Concept(
        concept_id=concept_id,
        fsn=Term(term, "en"),
        pt=Term(term.rsplit(" (", 1)[0], "en"),
        definition_status=status,
    )


def rel(type_id, target_id=None, group_id=0, active=True, status=PRIMITIVE, value=None):
    """A relationship; ``value`` is a (data_type, value) concrete value pair."""
    return Relationship(
        type=ref(type_id),
        active=active,
        target=ref(target_id, status) if target_id else None,
        group_id=group_id,
        concrete_value=ConcreteValue(*value) if value else None,
    )


@pytest.fixture
def measurer():
    """Deterministic text measurer."""
    return FixedWidthTextMeasurer()


@pytest.fixture
def generator(measurer):
    """DiagramGenerator with deterministic box sizes."""
    return DiagramGenerator(measurer=measurer)


@pytest.fixture
def inferred():
    return DiagramOptions()


@pytest.fixture
def stated():
    return DiagramOptions(selected_view="stated")


@pytest.fixture
def lonely_concept():
    """A concept without any relationships."""
    return Concept(
        concept_id="138875005",
        fsn=Term("SNOMED CT Concept (SNOMED RT+CTV3)", "en"),
        pt=Term("SNOMED CT Concept", "en"),
    )


@pytest.fixture
def disease_concept():
    """Primitive concept with a single inferred parent."""
    return Concept(
        concept_id="64572001",
        fsn=Term(TERMS["64572001"], "en"),
        pt=Term("Disease", "en"),
        definition_status=PRIMITIVE,
        relationships=[rel(ISA_TYPE_ID, "404684003")],
        stated_relationships=[rel(ISA_TYPE_ID, "404684003")],
    )


@pytest.fixture
def infarction_concept():
    """Fully defined concept with two parents and one role group."""
    return Concept(
        concept_id="22298006",
        fsn=Term(TERMS["22298006"], "en"),
        pt=Term("Myocardial infarction", "en"),
        definition_status=FULLY_DEFINED,
        relationships=[
            rel(ISA_TYPE_ID, "414545008", status=FULLY_DEFINED),
            rel(ISA_TYPE_ID, "251061000"),
            rel(ASSOCIATED_MORPHOLOGY, "55641003", group_id=1),
            rel(FINDING_SITE, "74281007", group_id=1),
        ],
        class_axioms=[
            Axiom(
                relationships=[
                    rel(ISA_TYPE_ID, "414545008", status=FULLY_DEFINED),
                    rel(ASSOCIATED_MORPHOLOGY, "55641003", group_id=1),
                    rel(FINDING_SITE, "74281007", group_id=1),
                ]
            )
        ],
    )


@pytest.fixture
def concept_payload():
    """Browser API JSON for a fully defined concept."""
    return {
        "conceptId": "22298006",
        "active": True,
        "definitionStatus": "FULLY_DEFINED",
        "fsn": {"term": "Myocardial infarction (disorder)", "lang": "en"},
        "pt": {"term": "Myocardial infarction", "lang": "en"},
        "descriptions": [
            {
                "term": "Infarto de miocardio",
                "lang": "es",
                "type": "SYNONYM",
                "active": True,
                "acceptabilityMap": {"450828004": "PREFERRED"},
            }
        ],
        "relationships": [
            {
                "active": True,
                "groupId": 0,
                "type": {"conceptId": ISA_TYPE_ID, "fsn": {"term": "Is a", "lang": "en"}},
                "target": {
                    "conceptId": "414545008",
                    "fsn": {"term": "Ischemic heart disease (disorder)", "lang": "en"},
                    "definitionStatus": "FULLY_DEFINED",
                },
            },
            {
                "active": True,
                "groupId": 1,
                "type": {
                    "conceptId": FINDING_SITE,
                    "fsn": {"term": "Finding site (attribute)", "lang": "en"},
                },
                "target": {
                    "conceptId": "74281007",
                    "fsn": {
                        "term": "Myocardium structure (body structure)",
                        "lang": "en",
                    },
                    "definitionStatus": "PRIMITIVE",
                },
            },
            {
                "active": False,
                "groupId": 0,
                "type": {"conceptId": ISA_TYPE_ID},
                "target": {"conceptId": "404684003"},
            },
        ],
        "classAxioms": [
            {
                "active": True,
                "relationships": [
                    {
                        "active": True,
                        "groupId": 0,
                        "type": {"conceptId": ISA_TYPE_ID},
                        "destination": {"conceptId": "414545008"},
                    }
                ],
            }
        ],
    }


@pytest.fixture
def make_ref():
    """Factory for nested concepts."""
    return ref


@pytest.fixture
def make_rel():
    """Factory for relationships."""
    return rel
