"""Data models for weight templates."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from hjemsoek.core.scoring.weights import normalize_weights, subweight_values
from hjemsoek.domains.resettlement.domain_logic.models import (
    MODULE_NAMES,
    SUBWEIGHT_IDS_BY_MODULE,
    CapacityOptions,
    GrowthNormalizationConfig,
    Subweight,
)


@dataclass
class WeightTemplate:
    """A named preset of module weights, subweights and capacity options.

    Module and subweight values are kept as authored (conventionally
    integers summing to 100); scorers normalize them at call time.
    """

    id: str
    version: str
    display_name: str
    description: str
    module_weights: dict[str, float]
    subweights: dict[str, tuple[Subweight, ...]] = field(default_factory=dict)
    capacity_options: CapacityOptions = field(default_factory=CapacityOptions)
    growth_normalization: GrowthNormalizationConfig | None = None
    tags: list[str] = field(default_factory=list)

    def subweights_for(self, module: str) -> tuple[Subweight, ...]:
        """Subweights configured for ``module`` (empty means module defaults)."""
        return self.subweights.get(module, ())

    def module_weight(self, module: str) -> float:
        return float(self.module_weights.get(module, 0.0))

    def to_weight_configuration(self) -> dict[str, Any]:
        """Export raw and normalized weights, stamped with a UTC timestamp."""
        modules = {m: self.module_weight(m) for m in MODULE_NAMES}
        subweights = {
            m: [{"id": s.id, "weight": s.weight} for s in self.subweights_for(m)]
            for m in MODULE_NAMES
        }
        subweights_normalized = {}
        for module in MODULE_NAMES:
            ids = SUBWEIGHT_IDS_BY_MODULE[module]
            configured = self.subweights_for(module)
            subweights_normalized[module] = normalize_weights(
                subweight_values(configured, ids), ids
            )
        return {
            "template_id": self.id,
            "modules": modules,
            "modules_normalized": normalize_weights(modules, MODULE_NAMES),
            "subweights": subweights,
            "subweights_normalized": subweights_normalized,
            "generated_at": datetime.now(timezone.utc).isoformat(),
        }
