"""Work opportunity scorer.

Per eligible person:
    chance    C = clamp(100 - unemployment_rate), 0 when the rate is unknown
    growth    G = normalized growth of the person's profession (see growth.py)
    composite S = ŵ_chance·C + ŵ_growth·G
The group score is the mean composite over work-eligible persons.
"""

from __future__ import annotations

from hjemsoek.core.scoring.weights import clamp, mean, normalize_subweights, subweight_values
from hjemsoek.domains.resettlement.domain_logic.eligibility import (
    confidence_from_eligible,
    is_work_eligible,
)
from hjemsoek.domains.resettlement.domain_logic.growth import (
    DEFAULT_CONFIG,
    GrowthAdjustment,
    compute_thresholds,
    normalize_growth,
)
from hjemsoek.domains.resettlement.domain_logic.models import (
    WORK_SUBWEIGHT_IDS,
    GrowthThresholds,
    Person,
    Subscore,
    WorkOpportunityInput,
    WorkOpportunityResult,
    WorkPersonTrace,
)

CHANCE = "work.chance"
GROWTH = "work.growth"


def chance_from_unemployment(unemployment_rate: float | None) -> float:
    if unemployment_rate is None:
        return 0.0
    return clamp(100.0 - unemployment_rate)


def _score_person(
    person: Person,
    inp: WorkOpportunityInput,
    thresholds: GrowthThresholds | None,
    weights: dict[str, float],
) -> WorkPersonTrace:
    facts = inp.municipality
    config = inp.growth_normalization or DEFAULT_CONFIG
    chance = chance_from_unemployment(facts.unemployment_rate)

    flags: list[str] = []
    adjustment: GrowthAdjustment | None = None
    entry = facts.profession_history.get(person.profession) if person.profession else None
    if not person.profession:
        flags.append("no_profession")
        growth_line = "• Growth 0: no profession given"
    elif entry is None:
        flags.append("no_history")
        growth_line = f"• Growth 0: no history for profession {person.profession}"
    else:
        adjustment = normalize_growth(entry, thresholds, config)
        if adjustment.fallback:
            flags.append("fallback")
            growth_line = (
                f"• Growth for {person.profession} uses the capped percentage "
                f"(no comparable history): {adjustment.growth:.1f}%"
            )
        else:
            f = adjustment.factors
            growth_line = (
                f"• Growth for {person.profession}: scenario {adjustment.scenario}, "
                f"F_total {f.f_total:.3f} × {f.positive_pct:.1f}% = {adjustment.adjusted_raw:.1f}, "
                f"capped to {adjustment.growth:.1f}%"
            )
            if f.tiny_base:
                flags.append("tiny_base")
        if adjustment.negative:
            flags.append("negative_growth")

    growth = adjustment.growth if adjustment else 0.0
    composite = weights[CHANCE] * chance + weights[GROWTH] * growth
    rate = facts.unemployment_rate

    return WorkPersonTrace(
        person_id=person.id,
        profession=person.profession,
        chance=chance,
        growth=growth,
        weights={"chance": weights[CHANCE], "growth": weights[GROWTH]},
        composite=composite,
        growth_adjusted_raw=adjustment.adjusted_raw if adjustment else None,
        growth_scenario=adjustment.scenario if adjustment else None,
        growth_factors=adjustment.factors if adjustment else None,
        explanation="\n".join([
            f"• Chance is 100 minus unemployment "
            f"({'not given' if rate is None else f'{rate:g}'}) = {chance:.1f}%",
            growth_line,
            f"• Composite {weights[CHANCE] * 100:.1f}% × chance + "
            f"{weights[GROWTH] * 100:.1f}% × growth = {composite:.1f}%",
        ]),
        flags=tuple(flags),
    )


def score_work_opportunity(inp: WorkOpportunityInput) -> WorkOpportunityResult:
    persons_all = inp.group.persons
    weights = normalize_subweights(inp.subweights, WORK_SUBWEIGHT_IDS)
    raw = subweight_values(inp.subweights, WORK_SUBWEIGHT_IDS)
    eligible = [p for p in persons_all if is_work_eligible(p.person_type)]

    if not eligible:
        return WorkOpportunityResult(
            effective_score=0.0,
            score=0.0,
            max_possible=0.0,
            confidence=0,
            coverage=0.0,
            subscores=tuple(
                Subscore(id=sid, weight=raw[sid], normalized_weight=w)
                for sid, w in weights.items()
            ),
            explanation="• No work-eligible persons. Score 0, max possible 0, confidence 0.",
            trace={"inputs": {"persons_total": len(persons_all), "eligible": 0}},
        )

    thresholds = compute_thresholds(inp.municipality.profession_history)
    rows = tuple(_score_person(p, inp, thresholds, weights) for p in eligible)
    group_score = mean([r.composite for r in rows])
    averages = {
        CHANCE: mean([r.chance for r in rows]),
        GROWTH: mean([r.growth for r in rows]),
    }
    confidence = confidence_from_eligible(len(eligible))

    return WorkOpportunityResult(
        effective_score=group_score,
        score=group_score,
        max_possible=100.0,
        confidence=confidence,
        coverage=1.0,
        thresholds=thresholds,
        subscores=tuple(
            Subscore(
                id=sid,
                weight=raw[sid],
                normalized_weight=w,
                score=averages[sid],
                contribution=w * averages[sid],
            )
            for sid, w in weights.items()
        ),
        persons=rows,
        explanation="\n".join([
            "• Work opportunity per person. Higher is better.",
            f"• Subweights: chance {weights[CHANCE] * 100:.1f}%, growth {weights[GROWTH] * 100:.1f}%",
            f"• Eligible persons {len(eligible)} of {len(persons_all)}; "
            f"group score (mean composite) {group_score:.1f}%",
            f"• Confidence {confidence}",
        ]),
        trace={
            "inputs": {
                "persons_total": len(persons_all),
                "eligible_persons": [p.id for p in eligible],
                "unemployment_rate": inp.municipality.unemployment_rate,
                "professions_in_history": sorted(inp.municipality.profession_history),
            },
            "aggregation": {
                "person_count": len(eligible),
                "formula": "score = (1/N) · Σ Sᵢ,   Sᵢ = ŵ_c·Cᵢ + ŵ_g·Gᵢ",
            },
        },
    )
