"""Municipality records and the dataset the scoring layer reads from."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from hjemsoek.domains.resettlement.domain_logic.models import (
    CapacityFacts,
    EducationFacts,
    HealthcareFacts,
    WorkFacts,
)


@dataclass(frozen=True)
class Region:
    id: str
    name: str


@dataclass(frozen=True)
class MunicipalityRecord:
    """Every fact known about one municipality, grouped per module."""

    id: str
    name: str
    region_id: str
    capacity: CapacityFacts = field(default_factory=CapacityFacts)
    work: WorkFacts = field(default_factory=WorkFacts)
    healthcare: HealthcareFacts = field(default_factory=HealthcareFacts)
    education: EducationFacts = field(default_factory=EducationFacts)
    neighbors: tuple[str, ...] = ()
    county: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MunicipalityRecord:
        """Parse the flat municipality shape used by data files.

        Capacity, healthcare and education flags sit at the top level;
        work facts may be nested under ``work_opportunity``.
        """
        work = data.get("work_opportunity") or data.get("work") or {}
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or data["id"]),
            region_id=str(data.get("region_id") or ""),
            capacity=CapacityFacts.from_dict(data.get("capacity") or data),
            work=WorkFacts.from_dict(
                {
                    "unemployment_rate": work.get(
                        "unemployment_rate", data.get("unemployment_rate")
                    ),
                    "profession_history": work.get("profession_history"),
                }
            ),
            healthcare=HealthcareFacts.from_dict(data),
            education=EducationFacts.from_dict(data),
            neighbors=tuple(data.get("neighbors") or ()),
            county=data.get("county"),
        )


class MunicipalityDataset:
    """Ordered municipalities plus regions, with the derived lookup maps.

    The geographic maps handed to the scorers are built here so every
    scorer sees the same view of the data.
    """

    def __init__(
        self,
        municipalities: Iterable[MunicipalityRecord],
        regions: Iterable[Region] = (),
    ) -> None:
        self._records: dict[str, MunicipalityRecord] = {}
        for record in municipalities:
            if record.id in self._records:
                raise ValueError(f"Duplicate municipality id: {record.id!r}")
            self._records[record.id] = record
        self._regions: dict[str, Region] = {r.id: r for r in regions}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, municipality_id: object) -> bool:
        return municipality_id in self._records

    @property
    def municipalities(self) -> list[MunicipalityRecord]:
        return list(self._records.values())

    @property
    def regions(self) -> list[Region]:
        return list(self._regions.values())

    def get(self, municipality_id: str) -> MunicipalityRecord | None:
        return self._records.get(municipality_id)

    def region(self, region_id: str) -> Region | None:
        return self._regions.get(region_id)

    def municipalities_by_id(self) -> dict[str, MunicipalityRecord]:
        return dict(self._records)

    def regions_by_id(self) -> dict[str, Region]:
        return dict(self._regions)

    def region_map(self) -> dict[str, str]:
        return {m.id: m.region_id for m in self._records.values() if m.region_id}

    def adjacency_map(self) -> dict[str, tuple[str, ...]]:
        """Neighbour lists restricted to municipalities in this dataset."""
        return {
            m.id: tuple(n for n in m.neighbors if n in self._records)
            for m in self._records.values()
        }

    def healthcare_map(self) -> dict[str, HealthcareFacts]:
        return {m.id: m.healthcare for m in self._records.values()}

    def education_map(self) -> dict[str, EducationFacts]:
        return {m.id: m.education for m in self._records.values()}
