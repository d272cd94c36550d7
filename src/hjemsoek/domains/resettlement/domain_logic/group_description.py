"""Plain-language Norwegian description of a group and its needs.

Each person gets one line: an opening sentence carrying up to two
attributes, then one sentence per remaining attribute introduced by a
rotating connector word.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from hjemsoek.domains.resettlement.connectors.records import MunicipalityRecord, Region
from hjemsoek.domains.resettlement.domain_logic.labels import (
    CONNECTION_RELATION_LABEL_NB,
    EDUCATION_FACILITY_LABEL_NB,
    PROFESSION_LABEL_NB,
    SPECIALIST_TREATMENT_LABEL_NB,
    label_nb,
)
from hjemsoek.domains.resettlement.domain_logic.models import Group, Person

_INTRO_BY_TYPE = {
    "child": "Et barn",
    "baby": "En baby",
    "high_school_pupil": "En videregående elev",
    "student": "En student",
    "adult_working": "En voksen person i arbeid",
    "adult_not_working": "En voksen person uten arbeid",
    "senior": "En senior",
}

_ORDINALS = (
    "første", "andre", "tredje", "fjerde", "femte",
    "sjette", "sjuende", "åttende", "niende", "tiende",
)

_CONNECTORS = ("Videre", "I tillegg", "Samtidig")


@dataclass(frozen=True)
class GroupDescription:
    group_paragraph: str
    persons_paragraph: str
    full_text: str


def _ordinal(idx: int) -> str:
    return _ORDINALS[idx] if idx < len(_ORDINALS) else f"{idx + 1}."


def _attributes(
    person: Person,
    municipalities_by_id: Mapping[str, MunicipalityRecord],
    regions_by_id: Mapping[str, Region],
) -> list[str]:
    attrs: list[str] = []
    if person.profession:
        attrs.append(f"er {label_nb(PROFESSION_LABEL_NB, person.profession)}")

    specialist = person.specialist_need
    if person.needs_hospital and specialist:
        attrs.append(
            "trenger sykehus og spesialist for "
            + label_nb(SPECIALIST_TREATMENT_LABEL_NB, specialist)
        )
    elif person.needs_hospital:
        attrs.append("trenger sykehus")
    elif specialist:
        attrs.append(f"trenger spesialist for {label_nb(SPECIALIST_TREATMENT_LABEL_NB, specialist)}")

    if person.education_need:
        if person.education_need == "adult_language":
            edu = "voksenopplæring i språk"
        else:
            edu = label_nb(EDUCATION_FACILITY_LABEL_NB, person.education_need)
        attrs.append(f"har behov for {edu}")

    conn = person.connection
    if conn and conn.relation and conn.has_location:
        rel = label_nb(CONNECTION_RELATION_LABEL_NB, conn.relation)
        if conn.municipality_id:
            record = municipalities_by_id.get(conn.municipality_id)
            name = record.name if record else conn.municipality_id
            region = regions_by_id.get(record.region_id) if record else None
            if region:
                attrs.append(f"har tilknytning til {name} ({region.name}) med {rel} der")
            else:
                attrs.append(f"har tilknytning til {name} med {rel} der")
        else:
            region = regions_by_id.get(conn.region_id)
            name = region.name if region else conn.region_id
            attrs.append(f"har tilknytning i regionen {name} med {rel}")
    return attrs


def _continuation(connector: str, attr: str) -> str:
    verb, _, rest = attr.partition(" ")
    if verb in ("er", "trenger", "har"):
        return f"{connector} {verb} personen {rest}."
    return f"{connector} har personen {attr}."


def describe_person(
    person: Person,
    idx: int,
    municipalities_by_id: Mapping[str, MunicipalityRecord],
    regions_by_id: Mapping[str, Region],
    *,
    multi: bool,
) -> str:
    intro = _INTRO_BY_TYPE[person.person_type]
    predicate = intro.split(" ", 1)[1]
    opening = f"Den {_ordinal(idx)} personen er {predicate}" if multi else intro

    attrs = _attributes(person, municipalities_by_id, regions_by_id)
    first, remaining = attrs[:2], attrs[2:]
    if first:
        opening += " som " + " og ".join(first)
    sentences = [opening + "."]

    for k, attr in enumerate(remaining):
        sentences.append(_continuation(_CONNECTORS[(idx + k) % len(_CONNECTORS)], attr))
    return " ".join(sentences)


def generate_group_description(
    group: Group,
    municipalities_by_id: Mapping[str, MunicipalityRecord] | None = None,
    regions_by_id: Mapping[str, Region] | None = None,
) -> GroupDescription:
    municipalities_by_id = municipalities_by_id or {}
    regions_by_id = regions_by_id or {}
    size = len(group.persons)

    if size == 0:
        group_paragraph = "Ingen personer i gruppen."
    elif size == 1:
        group_paragraph = ""
    else:
        group_paragraph = f"Gruppen består av {size} personer som skal bosettes."

    persons_paragraph = "\n".join(
        describe_person(p, i, municipalities_by_id, regions_by_id, multi=size > 1)
        for i, p in enumerate(group.persons)
    )

    if group_paragraph and persons_paragraph:
        full_text = f"{group_paragraph}\n\n{persons_paragraph}"
    else:
        full_text = group_paragraph or persons_paragraph

    return GroupDescription(group_paragraph, persons_paragraph, full_text)
