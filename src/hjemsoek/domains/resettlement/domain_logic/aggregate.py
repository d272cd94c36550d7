"""Combine module results into one weighted overall score."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from hjemsoek.core.scoring.weights import normalize_weights
from hjemsoek.domains.resettlement.domain_logic.models import ModuleResult


@dataclass(frozen=True)
class ModuleContribution:
    module: str
    normalized_weight: float
    impact: float
    contribution: float
    confidence: int


@dataclass(frozen=True)
class AggregateResult:
    weighted_total: float
    overall_max_possible: float
    weights: dict[str, float] = field(default_factory=dict)
    contributions: tuple[ModuleContribution, ...] = ()


def impact_for_module(result: ModuleResult) -> float:
    """Module score oriented so that higher is always better.

    Lower-is-better results (capacity overflow penalty) are inverted.
    """
    if result.direction == "lower_better":
        return 100.0 - result.effective_score
    return result.effective_score


def module_confidence(result: ModuleResult) -> int:
    if result.confidence is not None:
        return result.confidence
    return 1 if result.max_possible > 0 else 0


def aggregate_overall(
    modules: Mapping[str, ModuleResult | None], weights: Mapping[str, Any]
) -> AggregateResult:
    """Weighted total over the present modules.

    Weights are normalized over present modules only. ``overall_max_possible``
    is the ceiling left once modules without signal (confidence 0) are
    counted as empty.
    """
    present = {k: m for k, m in modules.items() if m is not None}
    normalized = normalize_weights(weights, present)

    contributions = []
    for key, result in present.items():
        impact = impact_for_module(result)
        contributions.append(
            ModuleContribution(
                module=key,
                normalized_weight=normalized[key],
                impact=impact,
                contribution=normalized[key] * impact,
                confidence=module_confidence(result),
            )
        )

    return AggregateResult(
        weighted_total=sum(c.contribution for c in contributions),
        overall_max_possible=sum(c.normalized_weight * c.confidence * 100.0 for c in contributions),
        weights=normalized,
        contributions=tuple(contributions),
    )
