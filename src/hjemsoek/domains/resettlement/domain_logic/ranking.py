"""Score one municipality or rank a whole dataset for a group.

Glue between the dataset, the input builders, the module scorers and the
aggregator. Only modules with a positive template weight are run; when no
module carries weight every module runs.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from hjemsoek.core.scoring.weights import clamp
from hjemsoek.core.templates.models import WeightTemplate
from hjemsoek.domains.resettlement.connectors.builders import (
    BuildResult,
    ValidationIssue,
    build_capacity_input,
    build_connection_input,
    build_education_input,
    build_healthcare_input,
    build_work_input,
)
from hjemsoek.domains.resettlement.connectors.records import MunicipalityDataset
from hjemsoek.domains.resettlement.domain_logic.aggregate import AggregateResult, aggregate_overall
from hjemsoek.domains.resettlement.domain_logic.capacity import score_capacity
from hjemsoek.domains.resettlement.domain_logic.connection import score_connection
from hjemsoek.domains.resettlement.domain_logic.education import score_education
from hjemsoek.domains.resettlement.domain_logic.healthcare import score_healthcare
from hjemsoek.domains.resettlement.domain_logic.models import MODULE_NAMES, Group, ModuleResult
from hjemsoek.domains.resettlement.domain_logic.work import score_work_opportunity

logger = logging.getLogger(__name__)

SORT_KEYS = ("overall", "name", *MODULE_NAMES)


@dataclass(frozen=True)
class MunicipalityScore:
    municipality_id: str
    name: str
    overall: float
    overall_max_possible: float
    stars: float
    modules: dict[str, ModuleResult] = field(default_factory=dict)
    aggregate: AggregateResult | None = None
    issues: tuple[ValidationIssue, ...] = ()

    def module_score(self, module: str) -> float:
        result = self.modules.get(module)
        return result.effective_score if result else 0.0

    def to_dict(self, *, include_modules: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "municipality_id": self.municipality_id,
            "name": self.name,
            "overall": round(self.overall, 2),
            "overall_max_possible": round(self.overall_max_possible, 2),
            "stars": self.stars,
            "module_scores": {k: round(m.effective_score, 2) for k, m in self.modules.items()},
            "issues": [
                {"code": i.code, "level": i.level, "message": i.message} for i in self.issues
            ],
        }
        if include_modules:
            data["modules"] = {k: m.to_dict() for k, m in self.modules.items()}
        return data


def stars_for_score(score: float) -> float:
    """Map a 0-100 score onto 0.5-5.0 stars in 10-point buckets."""
    bucket = min(9, math.floor(clamp(score) / 10))
    return 0.5 + 0.5 * bucket


def active_modules(template: WeightTemplate) -> list[str]:
    weighted = [m for m in MODULE_NAMES if template.module_weight(m) > 0]
    return weighted or list(MODULE_NAMES)


def _runners(
    dataset: MunicipalityDataset, target_id: str, group: Group, template: WeightTemplate
) -> dict[str, Callable[[], tuple[BuildResult, Callable[[Any], ModuleResult]]]]:
    sw = template.subweights_for
    return {
        "capacity": lambda: (
            build_capacity_input(
                dataset, target_id, group,
                options=template.capacity_options, subweights=sw("capacity"),
            ),
            score_capacity,
        ),
        "work_opportunity": lambda: (
            build_work_input(
                dataset, target_id, group,
                subweights=sw("work_opportunity"),
                growth_normalization=template.growth_normalization,
            ),
            score_work_opportunity,
        ),
        "connection": lambda: (
            build_connection_input(dataset, target_id, group, subweights=sw("connection")),
            score_connection,
        ),
        "healthcare": lambda: (
            build_healthcare_input(dataset, target_id, group, subweights=sw("healthcare")),
            score_healthcare,
        ),
        "education": lambda: (
            build_education_input(dataset, target_id, group, subweights=sw("education")),
            score_education,
        ),
    }


def score_municipality(
    dataset: MunicipalityDataset,
    target_id: str,
    group: Group,
    template: WeightTemplate,
) -> MunicipalityScore:
    """Run every active module for one municipality and aggregate them.

    A module whose input cannot be built is left out of the aggregate and
    its issues are reported on the result.
    """
    record = dataset.get(target_id)
    runners = _runners(dataset, target_id, group, template)
    modules: dict[str, ModuleResult] = {}
    issues: list[ValidationIssue] = []

    for module in active_modules(template):
        build, scorer = runners[module]()
        issues.extend(build.issues)
        if build.input is not None:
            modules[module] = scorer(build.input)

    if record is None:
        # every builder reported the same missing target
        issues = issues[:1]

    aggregate = aggregate_overall(modules, template.module_weights)
    return MunicipalityScore(
        municipality_id=target_id,
        name=record.name if record else target_id,
        overall=aggregate.weighted_total,
        overall_max_possible=aggregate.overall_max_possible,
        stars=stars_for_score(aggregate.weighted_total),
        modules=modules,
        aggregate=aggregate,
        issues=tuple(issues),
    )


def _sort_value(score: MunicipalityScore, sort_by: str) -> float | str:
    if sort_by == "overall":
        return score.overall
    if sort_by == "name":
        return score.name
    return score.module_score(sort_by)


def rank_municipalities(
    dataset: MunicipalityDataset,
    group: Group,
    template: WeightTemplate,
    *,
    sort_by: str = "overall",
    descending: bool = True,
    limit: int | None = None,
) -> list[MunicipalityScore]:
    """Score every municipality and sort; ties keep municipality id order."""
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_by!r} (expected one of {SORT_KEYS})")

    scores = [
        score_municipality(dataset, m.id, group, template) for m in dataset.municipalities
    ]
    scores.sort(key=lambda s: s.municipality_id)
    scores.sort(key=lambda s: _sort_value(s, sort_by), reverse=descending)

    logger.debug(
        "Ranked %d municipalities with template %s by %s",
        len(scores), template.id, sort_by,
    )
    return scores[:limit] if limit is not None else scores
