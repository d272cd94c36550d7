"""Hjemsøk scoring application — application factory.

This module provides create_app() so tests and the CLI entry point get a
fresh, fully wired instance (settings, template registry, data provider).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from hjemsoek.core.config.settings import Settings, get_settings
from hjemsoek.core.templates.loader import BUNDLED_TEMPLATE_DIR, load_template_directory
from hjemsoek.core.templates.models import WeightTemplate
from hjemsoek.core.templates.registry import TemplateRegistry
from hjemsoek.domains.resettlement.connectors import MunicipalityDataProvider
from hjemsoek.domains.resettlement.connectors.providers import MockMunicipalityProvider
from hjemsoek.domains.resettlement.domain_logic.group_description import (
    GroupDescription,
    generate_group_description,
)
from hjemsoek.domains.resettlement.domain_logic.models import Group
from hjemsoek.domains.resettlement.domain_logic.ranking import (
    MunicipalityScore,
    rank_municipalities,
    score_municipality,
)

logger = logging.getLogger(__name__)


class ScoringApp:
    """Facade over the registry and data provider used by callers."""

    def __init__(
        self,
        settings: Settings,
        registry: TemplateRegistry,
        provider: MunicipalityDataProvider,
    ) -> None:
        self.settings = settings
        self.registry = registry
        self.provider = provider

    def template(self, template_id: str | None = None) -> WeightTemplate:
        template_id = template_id or self.settings.default_template_id
        template = self.registry.get(template_id)
        if template is None:
            raise ValueError(
                f"Unknown weight template: {template_id!r} (available: {self.registry.ids()})"
            )
        return template

    def rank(
        self,
        group: Group,
        template_id: str | None = None,
        *,
        sort_by: str = "overall",
        limit: int | None = None,
    ) -> list[MunicipalityScore]:
        template = self.template(template_id)
        return rank_municipalities(
            self.provider.get_dataset(),
            group,
            template,
            sort_by=sort_by,
            limit=limit if limit is not None else self.settings.ranking_limit,
        )

    def score(
        self, group: Group, municipality_id: str, template_id: str | None = None
    ) -> MunicipalityScore:
        return score_municipality(
            self.provider.get_dataset(), municipality_id, group, self.template(template_id)
        )

    def describe_group(self, group: Group) -> GroupDescription:
        dataset = self.provider.get_dataset()
        return generate_group_description(
            group, dataset.municipalities_by_id(), dataset.regions_by_id()
        )

    def health_check(self) -> dict[str, Any]:
        """Basic status information."""
        return {
            "status": "ok",
            "app": "Hjemsøk",
            "version": "0.1.0",
            "templates_loaded": len(self.registry),
            "municipalities": len(self.provider.get_dataset()),
            **self.provider.get_provenance(),
        }


def create_app(
    *,
    provider_override: MunicipalityDataProvider | None = None,
    registry_override: TemplateRegistry | None = None,
) -> ScoringApp:
    """Create and configure the scoring application.

    1. Loads settings
    2. Loads weight templates into a registry
    3. Initializes the municipality data provider (mock unless overridden)
    """
    settings = get_settings()

    if registry_override is not None:
        registry = registry_override
    else:
        template_dir = (
            Path(settings.hjemsoek_templates_dir).expanduser()
            if settings.hjemsoek_templates_dir
            else BUNDLED_TEMPLATE_DIR
        )
        registry = TemplateRegistry()
        count = load_template_directory(template_dir, registry)
        logger.info("Loaded %d weight templates from %s", count, template_dir)

    if provider_override is not None:
        provider = provider_override
    else:
        provider = MockMunicipalityProvider(
            count=settings.mock_municipality_count, seed=settings.mock_seed
        )
        logger.info("Using mock municipality data provider")

    return ScoringApp(settings, registry, provider)
