"""Capacity scorer: does the group fit the municipality's remaining seats?

Modes:
    feasible          S = 100 * (AE - G) / AE, higher is better
    overflow_penalty  S = min(100, 100 * overflow / CT), lower is better
    infeasible        S = 0 (group does not fit and overflow is disabled)
    missing_data      required facts missing, max_possible = 0
"""

from __future__ import annotations

from hjemsoek.core.scoring.weights import normalize_subweights, subweight_values
from hjemsoek.domains.resettlement.domain_logic.models import (
    CAPACITY_SUBWEIGHT_IDS,
    CapacityInput,
    CapacityResult,
    Subscore,
)

CORE_ID = "capacity.core"


def score_capacity(inp: CapacityInput) -> CapacityResult:
    group_size = inp.group.effective_size
    facts = inp.municipality
    opts = inp.options
    weight = subweight_values(inp.subweights, CAPACITY_SUBWEIGHT_IDS)[CORE_ID]
    core_w = normalize_subweights(inp.subweights, CAPACITY_SUBWEIGHT_IDS)[CORE_ID]

    inputs = {
        "group_size": group_size,
        "capacity_total": facts.capacity_total,
        "settled_current": facts.settled_current,
        "tentative_claim": facts.tentative_claim,
        "include_tentative": opts.include_tentative,
        "allow_overflow": opts.allow_overflow,
    }

    if (
        facts.capacity_total is None
        or facts.settled_current is None
        or facts.capacity_total <= 0
    ):
        return CapacityResult(
            capacity_score=0.0,
            effective_score=0.0,
            score=0.0,
            max_possible=0.0,
            confidence=0,
            mode="missing_data",
            allow_overflow=opts.allow_overflow,
            include_tentative=opts.include_tentative,
            subscores=(
                Subscore(
                    id=CORE_ID,
                    weight=weight,
                    normalized_weight=core_w,
                    formula="Not computed (missing required fields).",
                ),
            ),
            explanation="\n".join([
                "• Capacity: required data missing or invalid. Max possible is 0.",
                f"• capacity_total={facts.capacity_total}, settled_current={facts.settled_current}",
                f"• allow_overflow={opts.allow_overflow}, include_tentative={opts.include_tentative}",
            ]),
            trace={"inputs": inputs},
        )

    capacity_total = facts.capacity_total
    tentative = (facts.tentative_claim or 0.0) if opts.include_tentative else 0.0
    available_base = capacity_total - facts.settled_current
    available_effect = available_base - tentative
    remaining_after = available_effect - group_size
    overflow_units = 0.0

    if available_effect >= group_size:
        mode, direction = "feasible", "higher_better"
        denom = available_effect if available_effect > 0 else 1.0
        core_score = 100.0 * max(0.0, remaining_after) / denom
        formula = "S_core = 100 × (AE − G) / AE"
        values = {"AE": available_effect, "G": float(group_size), "AE_minus_G": max(0.0, remaining_after)}
    elif opts.allow_overflow:
        mode, direction = "overflow_penalty", "lower_better"
        overflow_units = max(0.0, group_size - max(0.0, available_effect))
        # overflow beyond the whole capacity saturates at 100
        core_score = min(100.0, 100.0 * overflow_units / capacity_total)
        formula = "S_core = min(100, 100 × Overflow / CT)"
        values = {"Overflow": overflow_units, "CT": capacity_total}
    else:
        mode, direction = "infeasible", "higher_better"
        core_score = 0.0
        formula = "S_core = 0 (infeasible; overflow disabled)"
        values = {"AE": available_effect, "G": float(group_size)}

    contribution = core_w * core_score
    effective = min(contribution, 100.0)

    explanation = "\n".join([
        f"• Mode {mode} ({direction}); allow_overflow={opts.allow_overflow}, "
        f"include_tentative={opts.include_tentative}",
        f"• Inputs: group size {group_size}, capacity total {capacity_total:g}, "
        f"settled {facts.settled_current:g}, tentative used {tentative:g}",
        f"• Derived: available {available_effect:g}, remaining after {remaining_after:g}, "
        f"overflow units {overflow_units:g}",
        f"• {CORE_ID}: {core_w:.3f} × {core_score:.1f} = {contribution:.1f}",
        f"• Effective score {effective:.1f}",
    ])

    return CapacityResult(
        capacity_score=contribution,
        effective_score=effective,
        score=contribution,
        max_possible=100.0,
        confidence=1,
        mode=mode,
        direction=direction,
        allow_overflow=opts.allow_overflow,
        include_tentative=opts.include_tentative,
        available_effect=available_effect,
        remaining_after=remaining_after,
        overflow_units=overflow_units,
        subscores=(
            Subscore(
                id=CORE_ID,
                weight=weight,
                normalized_weight=core_w,
                score=core_score,
                contribution=contribution,
                formula=formula,
                values=values,
            ),
        ),
        explanation=explanation,
        trace={
            "inputs": {**inputs, "tentative_claim": tentative},
            "derivations": {
                "available_base": available_base,
                "available_effect": available_effect,
                "remaining_after": remaining_after,
                "overflow_units": overflow_units,
            },
        },
    )
