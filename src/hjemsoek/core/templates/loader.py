"""Template loader — reads YAML weight templates from disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from hjemsoek.core.templates.models import WeightTemplate
from hjemsoek.core.templates.registry import TemplateRegistry
from hjemsoek.domains.resettlement.domain_logic.models import (
    CapacityOptions,
    GrowthNormalizationConfig,
    Subweight,
)

logger = logging.getLogger(__name__)

# Bundled templates live under src/hjemsoek/domains/resettlement/templates/
BUNDLED_TEMPLATE_DIR = (
    Path(__file__).resolve().parent.parent.parent / "domains" / "resettlement" / "templates"
)


def load_template_directory(directory: str | Path, registry: TemplateRegistry) -> int:
    """Load all YAML weight templates from a directory (recursively).

    Returns the number of templates loaded.
    Skips files starting with underscore.
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("Template directory does not exist: %s", directory)
        return 0

    count = 0
    for path in sorted(directory.rglob("*.yaml")):
        if path.name.startswith("_"):
            continue
        try:
            template = load_template_file(path)
            registry.register(template)
            count += 1
            logger.info("Loaded template: %s (v%s)", template.id, template.version)
        except Exception:
            logger.exception("Failed to load template from %s", path)
    return count


def _parse_subweights(data: dict[str, Any]) -> dict[str, tuple[Subweight, ...]]:
    """Accept ``{module: {id: weight}}`` or ``{module: [{id, weight}]}``."""
    parsed: dict[str, tuple[Subweight, ...]] = {}
    for module, items in (data or {}).items():
        if isinstance(items, dict):
            parsed[module] = tuple(Subweight(id=k, weight=float(v)) for k, v in items.items())
        else:
            parsed[module] = tuple(Subweight.from_dict(i) for i in items or ())
    return parsed


def load_template_file(path: Path) -> WeightTemplate:
    """Parse a YAML file into a WeightTemplate instance."""
    with open(path, encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f)

    growth = data.get("growth_normalization")

    return WeightTemplate(
        id=data["id"],
        version=str(data["version"]),
        display_name=data["display_name"],
        description=data["description"].strip(),
        module_weights={k: float(v) for k, v in (data.get("module_weights") or {}).items()},
        subweights=_parse_subweights(data.get("subweights", {})),
        capacity_options=CapacityOptions.from_dict(data.get("capacity_options")),
        growth_normalization=GrowthNormalizationConfig.from_overrides(growth) if growth else None,
        tags=data.get("tags", []),
    )
