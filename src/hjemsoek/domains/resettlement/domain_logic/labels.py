"""Norwegian (bokmål) display labels for the closed enumerations.

Lookups fall back to the raw key, so new values degrade to their id
instead of failing.
"""

from __future__ import annotations

from collections.abc import Mapping

PERSON_TYPE_LABEL_NB: dict[str, str] = {
    "baby": "baby",
    "child": "barn",
    "high_school_pupil": "videregående elev",
    "student": "student",
    "adult_working": "voksen i arbeid",
    "adult_not_working": "voksen uten arbeid",
    "senior": "senior",
}

CONNECTION_RELATION_LABEL_NB: dict[str, str] = {
    "friend": "venn",
    "close_family": "nær familie",
    "relative": "slektning",
    "workplace": "arbeidsplass",
    "school_place": "skole/studiested",
}

EDUCATION_FACILITY_LABEL_NB: dict[str, str] = {
    "primary_school": "grunnskole",
    "high_school": "videregående skole",
    "university": "universitet/høgskole",
    "adult_language": "voksenopplæring språk",
}

SPECIALIST_TREATMENT_LABEL_NB: dict[str, str] = {
    "dialysis": "dialyse",
    "rehabilitation": "rehabilitering",
    "physical_therapy": "fysioterapi",
    "mental_health": "psykisk helse",
    "oncology": "onkologi (kreft)",
    "cardiology": "kardiologi (hjerte)",
    "maternity": "føde/barsel",
    "pediatrics": "pediatri (barn)",
    "substance_abuse": "rusbehandling",
    "trauma": "traume",
    "orthopedic": "ortopedi",
    "respiratory": "respiratorisk",
}

PROFESSION_LABEL_NB: dict[str, str] = {
    "teacher": "lærer",
    "nurse": "sykepleier",
    "engineer": "ingeniør",
    "developer": "utvikler",
    "farmer": "bonde",
    "driver": "sjåfør",
    "carpenter": "snekker",
    "electrician": "elektriker",
    "chef": "kokk",
    "sales": "salgsmedarbeider",
}

NB_LABELS: dict[str, dict[str, str]] = {
    "person_type": PERSON_TYPE_LABEL_NB,
    "relation": CONNECTION_RELATION_LABEL_NB,
    "education_facility": EDUCATION_FACILITY_LABEL_NB,
    "specialist_treatment": SPECIALIST_TREATMENT_LABEL_NB,
    "profession": PROFESSION_LABEL_NB,
}


def label_nb(labels: Mapping[str, str], key: str) -> str:
    return labels.get(key) or str(key)
