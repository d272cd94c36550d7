"""Synthetic Norwegian municipalities for development and testing.

None of this is real government data. The generator is seeded: the same
(count, seed) always yields the same dataset. Neighbours are the previous
and next municipality in list order; regions are assigned round-robin.
"""

from __future__ import annotations

import random

from hjemsoek.domains.resettlement.connectors.records import (
    MunicipalityDataset,
    MunicipalityRecord,
    Region,
)
from hjemsoek.domains.resettlement.domain_logic.models import (
    SPECIALIST_TREATMENT_TYPES,
    CapacityFacts,
    EducationFacts,
    Group,
    HealthcareFacts,
    Person,
    PersonConnection,
    ProfessionHistory,
    WorkFacts,
)

NORWEGIAN_NAMES = [
    "Oslo", "Bergen", "Trondheim", "Stavanger", "Drammen", "Fredrikstad", "Tromsø",
    "Kristiansand", "Ålesund", "Hamar", "Tønsberg", "Skien", "Bodø", "Sandnes",
    "Arendal", "Molde", "Lillehammer", "Gjøvik", "Halden", "Porsgrunn", "Alta",
    "Narvik", "Harstad", "Lørenskog", "Bærum", "Asker", "Larvik", "Kongsberg",
    "Horten", "Rana", "Stjørdal", "Moss", "Kongsvinger", "Sortland", "Steinkjer",
    "Voss", "Rakkestad", "Eidsvoll", "Klepp", "Sola", "Vindafjord", "Notodden",
    "Karmøy", "Ski", "Jessheim", "Mandal", "Ås", "Flekkefjord", "Levanger", "Drangedal",
]

PROFESSIONS = (
    "teacher", "nurse", "engineer", "developer", "farmer",
    "driver", "carpenter", "electrician", "chef", "sales",
)

REGIONS = (
    Region("akershus", "Akershus"),
    Region("oslo", "Oslo"),
    Region("innlandet", "Innlandet"),
    Region("vestfold-telemark", "Vestfold og Telemark"),
    Region("viken", "Viken"),
    Region("agder", "Agder"),
    Region("rogaland", "Rogaland"),
    Region("vestland", "Vestland"),
    Region("more-romsdal", "Møre og Romsdal"),
    Region("trondelag", "Trøndelag"),
    Region("nordland", "Nordland"),
    Region("troms-finnmark", "Troms og Finnmark"),
)

MAX_SPECIALIST_FACILITIES = 5


def _name_for_index(i: int) -> str:
    base = NORWEGIAN_NAMES[i % len(NORWEGIAN_NAMES)]
    cycle = i // len(NORWEGIAN_NAMES)
    return f"{base}-{cycle}" if cycle else base


def _capacity(rng: random.Random) -> CapacityFacts:
    def pick(lo: int, hi: int) -> int:
        return round(lo + rng.random() * (hi - lo))

    # Skewed toward small municipalities: 55% 5-15, 25% 16-25, 15% 26-40, 5% 41-50
    p = rng.random()
    if p < 0.55:
        total = pick(5, 15)
    elif p < 0.80:
        total = pick(16, 25)
    elif p < 0.95:
        total = pick(26, 40)
    else:
        total = pick(41, 50)

    if total <= 15:
        occupancy = rng.random() ** 1.9 * 0.6
    elif total <= 25:
        occupancy = rng.random() ** 1.5 * 0.7
    elif total <= 40:
        occupancy = rng.random() ** 1.2 * 0.8
    else:
        occupancy = rng.random() * 0.85
    settled = min(round(total * occupancy), total - 1)

    leftover = rng.random()
    if leftover < 0.15:
        settled = total
    elif leftover < 0.40:
        remaining = pick(1, min(5, max(1, total - 1)))
        settled = max(0, total - remaining)
    settled = max(0, min(settled, total))

    free = total - settled
    tentative = None
    if free > 0 and rng.random() < 0.4:
        tentative = max(1, round((0.05 + rng.random() * 0.15) * free))

    return CapacityFacts(
        capacity_total=float(total),
        settled_current=float(settled),
        tentative_claim=float(tentative) if tentative is not None else None,
    )


def _work(rng: random.Random) -> WorkFacts:
    unemployment = round(2 + rng.random() * 10, 1)
    history: dict[str, ProfessionHistory] = {}
    for profession in PROFESSIONS:
        base = rng.randint(0, 9)
        now = max(0, base + rng.randint(-2, 3))
        workforce_base = 100 + rng.randint(0, 199)
        workforce_now = workforce_base + rng.randint(-10, 9)
        # Sparse: roughly half the professions have any history
        if rng.random() < 0.55:
            history[profession] = ProfessionHistory(
                employees_5y_ago=float(base),
                employees_now=float(now),
                pct_workforce_5y_ago=round(base / workforce_base * 100, 2),
                pct_workforce_now=round(now / workforce_now * 100, 2),
            )
    return WorkFacts(unemployment_rate=unemployment, profession_history=history)


def _healthcare(rng: random.Random) -> HealthcareFacts:
    has_hospital = rng.random() < 0.4
    count = rng.randint(0, MAX_SPECIALIST_FACILITIES - 1)
    facilities = rng.sample(SPECIALIST_TREATMENT_TYPES, count)
    return HealthcareFacts(has_hospital=has_hospital, specialist_facilities=frozenset(facilities))


def _education(rng: random.Random) -> EducationFacts:
    return EducationFacts(
        has_primary_school=rng.random() < 0.85,
        has_high_school=rng.random() < 0.55,
        has_university=rng.random() < 0.25,
        has_adult_language=rng.random() < 0.40,
    )


def create_mock_municipalities(count: int = 50, seed: int = 1) -> MunicipalityDataset:
    """Generate ``count`` synthetic municipalities from a local seeded RNG."""
    rng = random.Random(seed)
    ids = [f"no-{i + 1}" for i in range(count)]
    records = []
    for i, municipality_id in enumerate(ids):
        region = REGIONS[i % len(REGIONS)]
        neighbors = tuple(ids[j] for j in (i - 1, i + 1) if 0 <= j < count)
        records.append(
            MunicipalityRecord(
                id=municipality_id,
                name=_name_for_index(i),
                region_id=region.id,
                county=region.name,
                capacity=_capacity(rng),
                work=_work(rng),
                healthcare=_healthcare(rng),
                education=_education(rng),
                neighbors=neighbors,
            )
        )
    return MunicipalityDataset(records, REGIONS)


def get_mock_group() -> Group:
    """A five-person family: working parents, two children and a grandparent."""
    return Group(
        persons=(
            Person(
                id="p1",
                person_type="adult_working",
                profession="nurse",
                connection=PersonConnection(municipality_id="no-2", relation="friend"),
                education_need="adult_language",
            ),
            Person(
                id="p2",
                person_type="adult_not_working",
                profession="teacher",
                connection=PersonConnection(region_id="vestland", relation="close_family"),
                specialist_need="mental_health",
                education_need="adult_language",
            ),
            Person(id="p3", person_type="child", education_need="primary_school"),
            Person(id="p4", person_type="baby"),
            Person(
                id="p5",
                person_type="senior",
                connection=PersonConnection(region_id="vestland", relation="relative"),
                needs_hospital=True,
                specialist_need="cardiology",
            ),
        )
    )
