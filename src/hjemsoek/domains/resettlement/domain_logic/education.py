"""Education scorer: access to the facility each person needs.

Tier scores are averaged per facility over the persons needing that
facility, then blended with the normalized education subweights.
"""

from __future__ import annotations

from hjemsoek.core.scoring.weights import normalize_subweights, subweight_values
from hjemsoek.domains.resettlement.domain_logic.eligibility import (
    confidence_from_eligible,
    education_needs_list,
)
from hjemsoek.domains.resettlement.domain_logic.models import (
    EDUCATION_FACILITIES,
    EDUCATION_SUBWEIGHT_IDS,
    EducationFacts,
    EducationInput,
    EducationPersonTrace,
    EducationResult,
    Person,
    Subscore,
)
from hjemsoek.domains.resettlement.domain_logic.tiering import (
    TierMatch,
    category_averages,
    resolve_tier,
    weighted_category_score,
)

_NO_FACTS = EducationFacts()


def _tier_for(inp: EducationInput, facility: str) -> TierMatch:
    facts = inp.municipality_education_map
    return resolve_tier(
        inp.target_municipality_id,
        inp.municipality_region_map,
        inp.adjacency_map,
        lambda m: facts.get(m, _NO_FACTS).has(facility),
    )


def _trace_person(person: Person, tiers: dict[str, TierMatch]) -> EducationPersonTrace:
    allowed = education_needs_list(person.person_type)
    need = person.education_need
    lines = [
        f"• Declared need: {need or 'none'}",
        f"• Allowed needs for {person.person_type}: {', '.join(allowed) or 'none'}",
    ]
    if need in allowed:
        match = tiers[need]
        lines.append(f"• Tier score for {need} is {match.score:g} ({match.level})")
        lines.append(f"• Person contribution {match.score:g}")
        return EducationPersonTrace(
            person_id=person.id,
            education_need=need,
            valid=True,
            tier_level=match.level,
            tier_score=match.score,
            explanation="\n".join(lines),
        )
    lines.append("• Declared need is not allowed for this person type; ignored.")
    return EducationPersonTrace(
        person_id=person.id,
        education_need=need,
        valid=False,
        tier_level="none",
        tier_score=0.0,
        explanation="\n".join(lines),
    )


def score_education(inp: EducationInput) -> EducationResult:
    persons_all = inp.group.persons
    weights = normalize_subweights(inp.subweights, EDUCATION_SUBWEIGHT_IDS)
    raw = subweight_values(inp.subweights, EDUCATION_SUBWEIGHT_IDS)

    tiers = {f: _tier_for(inp, f) for f in EDUCATION_FACILITIES}
    traces = tuple(_trace_person(p, tiers) for p in persons_all if p.education_need)
    valid = [t for t in traces if t.valid]

    if not valid:
        if not persons_all:
            explanation = "• No persons in the group. Score 0, max possible 0."
        else:
            explanation = "• No persons with an allowed education need. Score 0, max possible 0, confidence 0."
        return EducationResult(
            effective_score=0.0,
            score=0.0,
            max_possible=0.0,
            confidence=0,
            subscores=tuple(
                Subscore(id=sid, weight=raw[sid], normalized_weight=w)
                for sid, w in weights.items()
            ),
            persons=traces,
            explanation=explanation,
            trace={"inputs": {"persons_total": len(persons_all), "included": 0}},
        )

    averages = category_averages(
        ((f"education.{t.education_need}", t.tier_score) for t in valid),
        EDUCATION_SUBWEIGHT_IDS,
    )
    score = weighted_category_score(averages, weights)

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

    explanation = "\n".join([
        "• Education score. Higher is better.",
        f"• Persons included with allowed needs {len(valid)} of {len(persons_all)}.",
        "• Subweights: " + ", ".join(f"{s.id} {s.normalized_weight * 100:.1f}%" for s in subscores),
        "• Average per facility: " + ", ".join(f"{s.id} {s.score:.1f}" for s in subscores),
        f"• Weighted total {score:.1f}%",
    ])

    return EducationResult(
        effective_score=score,
        score=score,
        max_possible=100.0,
        confidence=confidence_from_eligible(len(valid)),
        subscores=subscores,
        persons=traces,
        explanation=explanation,
        trace={
            "inputs": {
                "target": inp.target_municipality_id,
                "persons_total": len(persons_all),
                "included_persons": [t.person_id for t in valid],
                "subweights": weights,
            },
            "tier_cache": {f: m.score for f, m in tiers.items()},
            "aggregation": {"formula": "score = Σ ŵ_f · avg_tier_f"},
        },
    )
