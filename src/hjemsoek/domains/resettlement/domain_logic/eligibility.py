"""Eligibility rules keyed on person type.

Static lookup tables deciding which relations, education needs and work
participation each life stage may have. Every scorer filters persons
through these before scoring.
"""

from __future__ import annotations

from hjemsoek.domains.resettlement.domain_logic.models import (
    CONNECTION_RELATIONS,
    EDUCATION_FACILITIES,
)

WORK_ELIGIBLE: frozenset[str] = frozenset({
    "high_school_pupil",
    "student",
    "adult_working",
    "adult_not_working",
})

# high_school_pupil may register a study track or early profession interest
PROFESSION_ELIGIBLE: frozenset[str] = frozenset({
    "high_school_pupil",
    "student",
    "adult_working",
    "adult_not_working",
})

_ALL_RELATIONS = frozenset(CONNECTION_RELATIONS)
_FAMILY_RELATIONS = frozenset({"friend", "close_family", "relative"})

RELATIONS_BY_TYPE: dict[str, frozenset[str]] = {
    "baby": frozenset(),
    "child": _FAMILY_RELATIONS,
    "high_school_pupil": _ALL_RELATIONS,
    "student": _ALL_RELATIONS,
    "adult_working": _ALL_RELATIONS,
    "adult_not_working": _ALL_RELATIONS,
    "senior": _FAMILY_RELATIONS,
}

EDUCATION_NEEDS_BY_TYPE: dict[str, frozenset[str]] = {
    "baby": frozenset(),
    "child": frozenset({"primary_school", "high_school"}),
    "high_school_pupil": frozenset({"high_school", "university"}),
    "student": frozenset({"university", "adult_language"}),
    "adult_working": frozenset({"university", "adult_language"}),
    "adult_not_working": frozenset({"high_school", "university", "adult_language"}),
    "senior": frozenset({"university", "adult_language"}),
}


def allowed_relations(person_type: str) -> frozenset[str]:
    return RELATIONS_BY_TYPE.get(person_type, frozenset())


def can_have_relation(person_type: str, relation: str | None) -> bool:
    return relation is not None and relation in allowed_relations(person_type)


def allowed_education_needs(person_type: str) -> frozenset[str]:
    return EDUCATION_NEEDS_BY_TYPE.get(person_type, frozenset())


def education_needs_list(person_type: str) -> list[str]:
    """Allowed education facilities in the fixed reporting order."""
    allowed = allowed_education_needs(person_type)
    return [f for f in EDUCATION_FACILITIES if f in allowed]


def is_work_eligible(person_type: str) -> bool:
    return person_type in WORK_ELIGIBLE


def can_have_profession(person_type: str) -> bool:
    return person_type in PROFESSION_ELIGIBLE


def confidence_from_eligible(eligible_count: int) -> int:
    """Binary module confidence: 1 when anyone contributed, else 0."""
    return 1 if eligible_count > 0 else 0
