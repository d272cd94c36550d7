"""Build per-module scorer inputs from a municipality dataset.

Builders never raise for data problems. They return the input (or None
when nothing can be scored) together with a list of validation issues.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Generic, Literal, TypeVar

from hjemsoek.domains.resettlement.connectors.records import MunicipalityDataset
from hjemsoek.domains.resettlement.domain_logic.models import (
    CapacityInput,
    CapacityOptions,
    ConnectionInput,
    EducationInput,
    GrowthNormalizationConfig,
    Group,
    HealthcareInput,
    Subweight,
    WorkOpportunityInput,
)

InputT = TypeVar("InputT")


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    level: Literal["error", "warn"]
    message: str
    field_path: str | None = None


@dataclass(frozen=True)
class BuildResult(Generic[InputT]):
    input: InputT | None
    issues: tuple[ValidationIssue, ...] = field(default_factory=tuple)

    @property
    def has_errors(self) -> bool:
        return any(i.level == "error" for i in self.issues)


def _no_municipality(target_id: str) -> BuildResult:
    return BuildResult(
        input=None,
        issues=(
            ValidationIssue(
                code="NO_MUNICIPALITY",
                level="error",
                message=f"Unknown municipality: {target_id!r}",
            ),
        ),
    )


def _subweights(subweights: Iterable[Subweight] | None) -> tuple[Subweight, ...] | None:
    return tuple(subweights) if subweights is not None else None


def build_capacity_input(
    dataset: MunicipalityDataset,
    target_id: str,
    group: Group,
    *,
    options: CapacityOptions | None = None,
    subweights: Iterable[Subweight] | None = None,
) -> BuildResult[CapacityInput]:
    record = dataset.get(target_id)
    if record is None:
        return _no_municipality(target_id)

    cap = record.capacity
    issues = []
    if cap.capacity_total is None or cap.capacity_total <= 0:
        issues.append(ValidationIssue(
            code="MISSING_CAPACITY_TOTAL",
            level="warn",
            message="capacity_total must be > 0",
            field_path="capacity.capacity_total",
        ))
    if cap.settled_current is None or cap.settled_current < 0:
        issues.append(ValidationIssue(
            code="MISSING_SETTLED_CURRENT",
            level="warn",
            message="settled_current must be >= 0",
            field_path="capacity.settled_current",
        ))
    if (
        cap.capacity_total is not None
        and cap.settled_current is not None
        and cap.settled_current > cap.capacity_total
    ):
        issues.append(ValidationIssue(
            code="SETTLED_GT_TOTAL",
            level="warn",
            message="settled_current exceeds capacity_total",
        ))

    return BuildResult(
        input=CapacityInput(
            group=group,
            municipality=cap,
            options=options or CapacityOptions(include_tentative=True),
            subweights=_subweights(subweights),
        ),
        issues=tuple(issues),
    )


def build_work_input(
    dataset: MunicipalityDataset,
    target_id: str,
    group: Group,
    *,
    subweights: Iterable[Subweight] | None = None,
    growth_normalization: GrowthNormalizationConfig | None = None,
) -> BuildResult[WorkOpportunityInput]:
    record = dataset.get(target_id)
    if record is None:
        return _no_municipality(target_id)

    rate = record.work.unemployment_rate
    if rate is not None and not 0 <= rate <= 100:
        return BuildResult(
            input=None,
            issues=(
                ValidationIssue(
                    code="INVALID_UNEMPLOYMENT",
                    level="error",
                    message="unemployment_rate must be within 0..100",
                    field_path="work.unemployment_rate",
                ),
            ),
        )

    return BuildResult(
        input=WorkOpportunityInput(
            group=group,
            municipality=record.work,
            subweights=_subweights(subweights),
            growth_normalization=growth_normalization,
        ),
    )


def build_connection_input(
    dataset: MunicipalityDataset,
    target_id: str,
    group: Group,
    *,
    subweights: Iterable[Subweight] | None = None,
) -> BuildResult[ConnectionInput]:
    if target_id not in dataset:
        return _no_municipality(target_id)
    return BuildResult(
        input=ConnectionInput(
            group=group,
            target_municipality_id=target_id,
            municipality_region_map=dataset.region_map(),
            adjacency_map=dataset.adjacency_map(),
            subweights=_subweights(subweights),
        ),
    )


def build_healthcare_input(
    dataset: MunicipalityDataset,
    target_id: str,
    group: Group,
    *,
    subweights: Iterable[Subweight] | None = None,
) -> BuildResult[HealthcareInput]:
    if target_id not in dataset:
        return _no_municipality(target_id)
    return BuildResult(
        input=HealthcareInput(
            group=group,
            target_municipality_id=target_id,
            municipality_region_map=dataset.region_map(),
            adjacency_map=dataset.adjacency_map(),
            municipality_healthcare_map=dataset.healthcare_map(),
            subweights=_subweights(subweights),
        ),
    )


def build_education_input(
    dataset: MunicipalityDataset,
    target_id: str,
    group: Group,
    *,
    subweights: Iterable[Subweight] | None = None,
) -> BuildResult[EducationInput]:
    if target_id not in dataset:
        return _no_municipality(target_id)
    return BuildResult(
        input=EducationInput(
            group=group,
            target_municipality_id=target_id,
            municipality_region_map=dataset.region_map(),
            adjacency_map=dataset.adjacency_map(),
            municipality_education_map=dataset.education_map(),
            subweights=_subweights(subweights),
        ),
    )
