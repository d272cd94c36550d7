"""Municipality data connectors — where municipality facts come from."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from hjemsoek.domains.resettlement.connectors.records import MunicipalityDataset


@runtime_checkable
class MunicipalityDataProvider(Protocol):
    """Abstract interface for municipality data retrieval.

    The scoring layer asks for a dataset without knowing whether it comes
    from a seeded generator or a hand-curated list.
    """

    def get_dataset(self) -> MunicipalityDataset:
        """All municipalities and regions known to this provider."""
        ...

    @property
    def data_source(self) -> str:
        """Label for the active data source: 'mock' or 'static'."""
        ...

    def get_provenance(self) -> dict[str, str]:
        """Return provenance metadata suitable for merging into a result."""
        ...
