"""Template registry — in-memory index for loaded weight templates."""

from __future__ import annotations

import logging

from hjemsoek.core.templates.models import WeightTemplate

logger = logging.getLogger(__name__)


class TemplateRegistry:
    """In-memory registry of all loaded weight templates."""

    def __init__(self) -> None:
        self._templates: dict[str, WeightTemplate] = {}
        self._by_tag: dict[str, list[str]] = {}

    def register(self, template: WeightTemplate) -> None:
        """Add a template to all indexes."""
        if template.id in self._templates:
            raise ValueError(f"Duplicate template id registered: {template.id!r}")
        self._templates[template.id] = template

        for tag in template.tags:
            ids = self._by_tag.setdefault(tag, [])
            if template.id not in ids:
                ids.append(template.id)

    def get(self, template_id: str) -> WeightTemplate | None:
        return self._templates.get(template_id)

    def find_by_tag(self, tag: str) -> list[WeightTemplate]:
        ids = self._by_tag.get(tag, [])
        return [self._templates[tid] for tid in ids]

    def ids(self) -> list[str]:
        return list(self._templates)

    def all(self) -> list[WeightTemplate]:
        return list(self._templates.values())

    def __len__(self) -> int:
        return len(self._templates)
