"""Relationship vocabulary: inverses, display labels and generation offsets."""

from __future__ import annotations

from typing import Dict

RELATIONSHIP_TYPES = (
    "parent",
    "child",
    "spouse",
    "sibling",
    "grandparent",
    "grandchild",
    "aunt",
    "uncle",
    "cousin",
    "other",
)

# Only produced by inverting aunt/uncle edges, never stored.
DERIVED_TYPES = ("nephew/niece", "aunt/uncle")

INVERSE_RELATIONSHIPS: Dict[str, str] = {
    "parent": "child",
    "child": "parent",
    "spouse": "spouse",
    "sibling": "sibling",
    "grandparent": "grandchild",
    "grandchild": "grandparent",
    "aunt": "nephew/niece",
    "uncle": "nephew/niece",
    "nephew/niece": "aunt/uncle",
    "aunt/uncle": "nephew/niece",
    "cousin": "cousin",
    "other": "other",
}

RELATIONSHIP_LABELS: Dict[str, str] = {
    "parent": "Parent",
    "child": "Child",
    "spouse": "Spouse",
    "sibling": "Sibling",
    "grandparent": "Grandparent",
    "grandchild": "Grandchild",
    "aunt": "Aunt",
    "uncle": "Uncle",
    "aunt/uncle": "Aunt/Uncle",
    "cousin": "Cousin",
    "nephew/niece": "Nephew/Niece",
    "other": "Relative",
}

# Generation of the relative minus the generation of the member.
GENERATION_OFFSETS: Dict[str, int] = {
    "parent": -1,
    "child": 1,
    "grandparent": -2,
    "grandchild": 2,
    "aunt": -1,
    "uncle": -1,
    "aunt/uncle": -1,
    "nephew/niece": 1,
}

PARENT_RELATIONS = {"parent"}
CHILD_RELATIONS = {"child"}
SPOUSE_RELATIONS = {"spouse"}
SIBLING_RELATIONS = {"sibling"}


def normalize_relationship_type(relationship_type: str | None) -> str:
    value = (relationship_type or "").strip().lower()
    return value or "other"


def inverse_relationship(relationship_type: str) -> str:
    """Return the type seen from the other end of an edge.

    Types outside the vocabulary are treated as their own inverse.
    """

    return INVERSE_RELATIONSHIPS.get(relationship_type, relationship_type)


def format_relationship_type(relationship_type: str) -> str:
    return RELATIONSHIP_LABELS.get(relationship_type, relationship_type)


def generation_offset(relationship_type: str) -> int:
    return GENERATION_OFFSETS.get(relationship_type, 0)


def is_known_type(relationship_type: str) -> bool:
    return relationship_type in RELATIONSHIP_TYPES or relationship_type in DERIVED_TYPES


__all__ = [
    "CHILD_RELATIONS",
    "DERIVED_TYPES",
    "GENERATION_OFFSETS",
    "INVERSE_RELATIONSHIPS",
    "PARENT_RELATIONS",
    "RELATIONSHIP_LABELS",
    "RELATIONSHIP_TYPES",
    "SIBLING_RELATIONS",
    "SPOUSE_RELATIONS",
    "format_relationship_type",
    "generation_offset",
    "inverse_relationship",
    "is_known_type",
    "normalize_relationship_type",
]
