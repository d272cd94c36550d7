"""Healthcare scorer: hospital and specialist access for persons with needs.

Unlike connection and education, the group score here is the mean of
per-person composites, not a weighted blend of category averages. A person
is scored only on the components they need, with the weights re-normalized
over those components, so needing only a hospital means 100% hospital.
Keep the two aggregation styles separate.
"""

from __future__ import annotations

from hjemsoek.core.scoring.weights import mean, normalize_subweights, subweight_values
from hjemsoek.domains.resettlement.domain_logic.eligibility import confidence_from_eligible
from hjemsoek.domains.resettlement.domain_logic.models import (
    HEALTHCARE_SUBWEIGHT_IDS,
    SPECIALIST_TREATMENT_TYPES,
    HealthcareFacts,
    HealthcareInput,
    HealthcarePersonTrace,
    HealthcareResult,
    Person,
    Subscore,
)
from hjemsoek.domains.resettlement.domain_logic.tiering import category_averages, resolve_tier

HOSPITAL = "healthcare.hospital"
SPECIALIST = "healthcare.specialist"

_NO_FACTS = HealthcareFacts()


def _valid_specialist(person: Person) -> str | None:
    need = person.specialist_need
    return need if need in SPECIALIST_TREATMENT_TYPES else None


def qualifies(person: Person) -> bool:
    return person.needs_hospital or _valid_specialist(person) is not None


class _TierCache:
    """Memoizes tier lookups for one scoring call."""

    def __init__(self, inp: HealthcareInput) -> None:
        self._inp = inp
        self.hospital: float | None = None
        self.specialists: dict[str, float] = {}

    def _facts(self, municipality_id: str) -> HealthcareFacts:
        return self._inp.municipality_healthcare_map.get(municipality_id, _NO_FACTS)

    def _resolve(self, has) -> float:
        inp = self._inp
        return resolve_tier(
            inp.target_municipality_id,
            inp.municipality_region_map,
            inp.adjacency_map,
            has,
        ).score

    def hospital_score(self) -> float:
        if self.hospital is None:
            self.hospital = self._resolve(lambda m: self._facts(m).has_hospital)
        return self.hospital

    def specialist_score(self, specialist: str) -> float:
        if specialist not in self.specialists:
            self.specialists[specialist] = self._resolve(
                lambda m: specialist in self._facts(m).specialist_facilities
            )
        return self.specialists[specialist]


def _score_person(
    person: Person, weights: dict[str, float], tiers: _TierCache
) -> HealthcarePersonTrace:
    specialist = _valid_specialist(person)
    hospital_score = None
    specialist_score = None
    components: list[tuple[float, float]] = []

    if person.needs_hospital and weights[HOSPITAL] > 0:
        hospital_score = tiers.hospital_score()
        components.append((weights[HOSPITAL], hospital_score))
    if specialist and weights[SPECIALIST] > 0:
        specialist_score = tiers.specialist_score(specialist)
        components.append((weights[SPECIALIST], specialist_score))

    total_w = sum(w for w, _ in components)
    composite = sum(w / total_w * s for w, s in components) if total_w > 0 else 0.0

    lines = [
        f"• Needs: hospital={'yes' if person.needs_hospital else 'no'}, "
        f"specialist={specialist or 'none'}"
    ]
    if hospital_score is not None:
        lines.append(f"• Hospital tier score {hospital_score:g}")
    if specialist_score is not None:
        lines.append(f"• Specialist '{specialist}' tier score {specialist_score:g}")
    lines.append(f"• Person composite {composite:.1f}%")

    return HealthcarePersonTrace(
        person_id=person.id,
        needs_hospital=person.needs_hospital,
        specialist_need=specialist,
        hospital_score=hospital_score,
        specialist_score=specialist_score,
        composite=composite,
        explanation="\n".join(lines),
    )


def score_healthcare(inp: HealthcareInput) -> HealthcareResult:
    persons_all = inp.group.persons
    weights = normalize_subweights(inp.subweights, HEALTHCARE_SUBWEIGHT_IDS)
    raw = subweight_values(inp.subweights, HEALTHCARE_SUBWEIGHT_IDS)
    persons = [p for p in persons_all if qualifies(p)]

    if not persons:
        return HealthcareResult(
            effective_score=0.0,
            score=0.0,
            max_possible=0.0,
            confidence=0,
            subscores=tuple(
                Subscore(id=sid, weight=raw[sid], normalized_weight=w)
                for sid, w in weights.items()
            ),
            explanation=(
                "• No persons in the group. Score 0, max possible 0."
                if not persons_all
                else "• No persons with healthcare needs. Score 0, max possible 0, confidence 0."
            ),
            trace={"inputs": {"persons_total": len(persons_all), "included": 0}},
        )

    tiers = _TierCache(inp)
    traces = tuple(_score_person(p, weights, tiers) for p in persons)

    entries = []
    for t in traces:
        if t.hospital_score is not None:
            entries.append((HOSPITAL, t.hospital_score))
        if t.specialist_score is not None:
            entries.append((SPECIALIST, t.specialist_score))
    averages = category_averages(entries, HEALTHCARE_SUBWEIGHT_IDS)

    subscores = tuple(
        Subscore(
            id=sid,
            weight=raw[sid],
            normalized_weight=w,
            score=averages[sid],
            contribution=w * averages[sid],
        )
        for sid, w in weights.items()
    )

    group_score = mean([t.composite for t in traces])

    explanation = "\n".join([
        "• Healthcare score. Higher is better.",
        f"• Persons included {len(persons)} of {len(persons_all)}.",
        "• Subweights: " + ", ".join(f"{s.id} {s.normalized_weight * 100:.1f}%" for s in subscores),
        f"• Average hospital {averages[HOSPITAL]:.1f}%, average specialist {averages[SPECIALIST]:.1f}%",
        f"• Group score (mean of person composites) {group_score:.1f}%",
    ])

    return HealthcareResult(
        effective_score=group_score,
        score=group_score,
        max_possible=100.0,
        confidence=confidence_from_eligible(len(persons)),
        subscores=subscores,
        persons=traces,
        explanation=explanation,
        trace={
            "inputs": {
                "target": inp.target_municipality_id,
                "persons_total": len(persons_all),
                "included_persons": [p.id for p in persons],
                "subweights": weights,
            },
            "tiers": {"hospital": tiers.hospital, "specialists": dict(tiers.specialists)},
            "aggregation": {"formula": "score = avg(person_composite)"},
        },
    )
