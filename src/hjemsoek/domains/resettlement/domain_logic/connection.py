"""Connection scorer: ties between group members and the target municipality.

Each person may declare one municipality or one region plus a relation.
Per-person base scores are averaged per relation kind and the relation
averages are combined with the normalized connection subweights.
"""

from __future__ import annotations

from hjemsoek.core.scoring.weights import normalize_subweights, subweight_values
from hjemsoek.domains.resettlement.domain_logic.eligibility import (
    allowed_relations,
    can_have_relation,
    confidence_from_eligible,
)
from hjemsoek.domains.resettlement.domain_logic.models import (
    CONNECTION_SUBWEIGHT_IDS,
    CONNECTION_TIER_EXACT,
    CONNECTION_TIER_NEIGHBOR,
    CONNECTION_TIER_SAME_REGION,
    REGION_RELATION_BASE,
    ConnectionInput,
    ConnectionPersonTrace,
    ConnectionResult,
    Person,
    Subscore,
)
from hjemsoek.domains.resettlement.domain_logic.tiering import (
    TierScores,
    category_averages,
    category_counts,
    resolve_tier,
    weighted_category_score,
)

MUNICIPALITY_TIERS = TierScores(
    self_score=CONNECTION_TIER_EXACT,
    neighbor_score=CONNECTION_TIER_NEIGHBOR,
    region_score=CONNECTION_TIER_SAME_REGION,
)

_LEVEL_NAMES = {"self": "exact", "neighbor": "neighbor", "region": "region", "none": "none"}


def _describe(person: Person) -> str:
    conn = person.connection
    if conn is None or not conn.has_location:
        return "• Declared: none"
    if conn.municipality_id:
        return f"• Declared: municipality={conn.municipality_id}"
    return f"• Declared: region={conn.region_id}"


def _evaluate(inp: ConnectionInput, person: Person) -> ConnectionPersonTrace:
    conn = person.connection
    relation = conn.relation if conn else None

    def trace(level: str, base: float, line: str, counted: bool) -> ConnectionPersonTrace:
        return ConnectionPersonTrace(
            person_id=person.id,
            relation=relation,
            declared=conn,
            match_level=level,
            base_score=base,
            counted=counted,
            explanation="\n".join([
                _describe(person),
                line,
                f"• Match level {level}, base score {base:.1f}",
            ]),
        )

    if conn is None:
        return trace("none", 0.0, "• No connection declared.", False)
    if relation is None:
        return trace("none", 0.0, "• Relation not selected.", False)
    if not can_have_relation(person.person_type, relation):
        return trace(
            "none", 0.0,
            f"• Relation {relation} is not allowed for {person.person_type}; ignored.",
            False,
        )
    if not conn.has_location:
        return trace("none", 0.0, "• Connection has no municipality or region.", False)

    target = inp.target_municipality_id

    if conn.municipality_id:
        declared = conn.municipality_id
        match = resolve_tier(
            target,
            inp.municipality_region_map,
            inp.adjacency_map,
            lambda m: m == declared,
            MUNICIPALITY_TIERS,
        )
        level = _LEVEL_NAMES[match.level]
        lines = {
            "exact": "• Exact municipality match gives 100.",
            "neighbor": "• Neighbouring municipality match gives 50.",
            "region": "• Same region, different municipality gives 10.",
            "none": "• Municipality is not the target, a neighbour or in its region.",
        }
        return trace(level, match.score, lines[level], True)

    if inp.municipality_region_map.get(target) == conn.region_id:
        base = REGION_RELATION_BASE[relation]
        return trace("region", base, f"• Region match with relation {relation} gives {base:g}.", True)
    return trace("none", 0.0, "• Declared region does not contain the target; gives 0.", True)


def _zero_result(
    weights: dict[str, float],
    traces: tuple[ConnectionPersonTrace, ...],
    explanation: str,
    trace: dict,
) -> ConnectionResult:
    return ConnectionResult(
        effective_score=0.0,
        score=0.0,
        max_possible=0.0,
        confidence=0,
        subscores=tuple(
            Subscore(id=sid, weight=w, normalized_weight=w) for sid, w in weights.items()
        ),
        persons=traces,
        explanation=explanation,
        trace=trace,
    )


def score_connection(inp: ConnectionInput) -> ConnectionResult:
    persons = inp.group.persons
    weights = normalize_subweights(inp.subweights, CONNECTION_SUBWEIGHT_IDS)
    target = inp.target_municipality_id

    if not persons:
        return _zero_result(
            weights, (),
            "• No persons in the group. Score 0, max possible 0.",
            {"inputs": {"persons_total": 0, "target": target}},
        )

    traced = [p for p in persons if allowed_relations(p.person_type)]
    traces = tuple(_evaluate(inp, p) for p in traced)
    counted = [t for t in traces if t.counted]

    if not counted:
        return _zero_result(
            weights, traces,
            "• No persons qualify for connection scoring. Score 0, max possible 0, confidence 0.",
            {"inputs": {"persons_total": len(persons), "eligible": len(traced), "qualifying": 0}},
        )

    keyed = [(f"connection.{t.relation}", t.base_score) for t in counted]
    averages = category_averages(keyed, CONNECTION_SUBWEIGHT_IDS)
    score = weighted_category_score(averages, weights)

    raw = subweight_values(inp.subweights, CONNECTION_SUBWEIGHT_IDS)
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
        "• Connection score. Higher is better.",
        "• Subweights: " + ", ".join(f"{s.id} {s.normalized_weight * 100:.1f}%" for s in subscores),
        "• Average per relation: " + ", ".join(f"{s.id} {s.score:.1f}" for s in subscores),
        f"• Weighted total {score:.1f}%",
    ])

    return ConnectionResult(
        effective_score=score,
        score=score,
        max_possible=100.0,
        confidence=confidence_from_eligible(len(counted)),
        subscores=subscores,
        persons=traces,
        explanation=explanation,
        trace={
            "inputs": {
                "target": target,
                "persons_total": len(persons),
                "eligible_persons": [p.id for p in traced],
                "weights": weights,
            },
            "aggregation": {"formula": "score = Σ ŵ_r · avg_base_score_r"},
            "relation_counts": category_counts(
                (sid for sid, _ in keyed), CONNECTION_SUBWEIGHT_IDS
            ),
        },
    )

