"""Geographic need-satisfaction tiering shared by the tiered scorers.

A need is satisfied at the best tier where some municipality satisfies the
predicate: the target itself, one of its neighbours, or any municipality in
the target's region. The first matching tier wins; tiers never combine.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Literal

from hjemsoek.core.scoring.weights import mean
from hjemsoek.domains.resettlement.domain_logic.models import (
    TIER_NEIGHBOR,
    TIER_REGION,
    TIER_SELF,
)

TierLevel = Literal["self", "neighbor", "region", "none"]


@dataclass(frozen=True)
class TierScores:
    self_score: float = TIER_SELF
    neighbor_score: float = TIER_NEIGHBOR
    region_score: float = TIER_REGION


DEFAULT_TIER_SCORES = TierScores()


@dataclass(frozen=True)
class TierMatch:
    level: TierLevel
    score: float


NO_MATCH = TierMatch("none", 0.0)


def resolve_tier(
    target: str,
    region_map: Mapping[str, str],
    adjacency_map: Mapping[str, Iterable[str]],
    has: Callable[[str], bool],
    scores: TierScores = DEFAULT_TIER_SCORES,
) -> TierMatch:
    """Return the best tier at which ``has(municipality_id)`` holds.

    Precedence is self, then any neighbour of ``target``, then any
    municipality sharing ``target``'s region. A target without a region
    can only match self or neighbour.
    """
    if has(target):
        return TierMatch("self", scores.self_score)

    for neighbor in adjacency_map.get(target, ()):
        if has(neighbor):
            return TierMatch("neighbor", scores.neighbor_score)

    target_region = region_map.get(target)
    if target_region:
        for municipality_id, region in region_map.items():
            if region == target_region and has(municipality_id):
                return TierMatch("region", scores.region_score)

    return NO_MATCH


def category_averages(
    entries: Iterable[tuple[str, float]], categories: Iterable[str]
) -> dict[str, float]:
    """Average scores per category over only the entries in that category.

    Categories nobody needed average to 0 and so never dilute the others.
    """
    buckets: dict[str, list[float]] = defaultdict(list)
    for category, score in entries:
        buckets[category].append(score)
    return {c: mean(buckets.get(c, [])) for c in categories}


def category_counts(categories_seen: Iterable[str], categories: Iterable[str]) -> dict[str, int]:
    counts = dict.fromkeys(categories, 0)
    for c in categories_seen:
        if c in counts:
            counts[c] += 1
    return counts


def weighted_category_score(
    averages: Mapping[str, float], weights: Mapping[str, float]
) -> float:
    """Σ ŵ_c · avg_c over the weighted categories."""
    return sum(w * averages.get(c, 0.0) for c, w in weights.items())
