"""Concrete MunicipalityDataProvider implementations."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from functools import cached_property
from pathlib import Path
from typing import Any

import yaml

from hjemsoek.domains.resettlement.connectors.mock_data import create_mock_municipalities
from hjemsoek.domains.resettlement.connectors.records import (
    MunicipalityDataset,
    MunicipalityRecord,
    Region,
)

logger = logging.getLogger(__name__)


class MockMunicipalityProvider:
    """Uses the seeded mock generator. Always available."""

    def __init__(self, count: int = 50, seed: int = 1) -> None:
        self._count = count
        self._seed = seed

    @cached_property
    def _dataset(self) -> MunicipalityDataset:
        dataset = create_mock_municipalities(self._count, self._seed)
        logger.debug("Generated %d mock municipalities (seed=%d)", len(dataset), self._seed)
        return dataset

    def get_dataset(self) -> MunicipalityDataset:
        return self._dataset

    @property
    def data_source(self) -> str:
        return "mock"

    def get_provenance(self) -> dict[str, str]:
        return {
            "data_source": self.data_source,
            "data_source_note": (
                "All municipality data is synthetic "
                f"({self._count} municipalities, seed {self._seed})."
            ),
        }


class StaticMunicipalityProvider:
    """Serves a fixed, caller-supplied list of municipalities."""

    def __init__(
        self,
        municipalities: Iterable[MunicipalityRecord | Mapping[str, Any]],
        regions: Iterable[Region | Mapping[str, Any]] = (),
        *,
        source_label: str = "static",
    ) -> None:
        self._dataset = MunicipalityDataset(
            (
                m if isinstance(m, MunicipalityRecord) else MunicipalityRecord.from_dict(m)
                for m in municipalities
            ),
            (r if isinstance(r, Region) else Region(id=r["id"], name=r["name"]) for r in regions),
        )
        self._source_label = source_label

    @classmethod
    def from_yaml(cls, path: str | Path) -> StaticMunicipalityProvider:
        """Load ``municipalities`` and ``regions`` lists from a YAML file."""
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}
        provider = cls(
            data.get("municipalities", []),
            data.get("regions", []),
            source_label=path.name,
        )
        logger.info("Loaded %d municipalities from %s", len(provider._dataset), path)
        return provider

    def get_dataset(self) -> MunicipalityDataset:
        return self._dataset

    @property
    def data_source(self) -> str:
        return "static"

    def get_provenance(self) -> dict[str, str]:
        return {
            "data_source": self.data_source,
            "data_source_note": f"Municipalities loaded from {self._source_label}.",
        }
