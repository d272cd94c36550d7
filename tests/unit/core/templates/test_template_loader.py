"""Tests for loading weight templates from YAML."""

from __future__ import annotations

from pathlib import Path

import pytest

from hjemsoek.core.templates.loader import (
    BUNDLED_TEMPLATE_DIR,
    load_template_directory,
    load_template_file,
)
from hjemsoek.core.templates.registry import TemplateRegistry
from hjemsoek.domains.resettlement.domain_logic.models import (
    CapacityOptions,
    Subweight,
)

_LIST_STYLE = """\
id: list_style
version: "2.1"
display_name: List style
description: |
  Subweights given as a list.
tags: [test]
module_weights:
  capacity: 50
  work_opportunity: 50
subweights:
  work_opportunity:
    - id: work.chance
      weight: 70
    - id: work.growth
      weight: 30
growth_normalization:
  tinyBaseThreshold: 3
  damp_s4: 0.25
"""


def _write(directory: Path, name: str, text: str) -> Path:
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadTemplateFile:
    def test_bundled_normal_template(self):
        template = load_template_file(BUNDLED_TEMPLATE_DIR / "normal_bosetting.yaml")
        assert template.id == "normal_bosetting"
        assert template.version == "1.0"
        assert template.module_weights["work_opportunity"] == 25.0
        assert sum(template.module_weights.values()) == 100.0
        assert template.capacity_options == CapacityOptions(
            include_tentative=True, allow_overflow=False
        )
        assert Subweight("work.chance", 50.0) in template.subweights_for("work_opportunity")
        assert template.growth_normalization is None

    def test_list_style_subweights_and_growth_overrides(self, tmp_path):
        template = load_template_file(_write(tmp_path, "list_style.yaml", _LIST_STYLE))
        assert template.subweights_for("work_opportunity") == (
            Subweight("work.chance", 70.0),
            Subweight("work.growth", 30.0),
        )
        assert template.description == "Subweights given as a list."
        assert template.growth_normalization.tiny_base_threshold == 3.0
        assert template.growth_normalization.damp_s4 == 0.25
        assert template.growth_normalization.cap_factor == 1.5
        assert template.capacity_options == CapacityOptions()

    def test_missing_required_key_raises(self, tmp_path):
        path = _write(tmp_path, "broken.yaml", "id: broken\nversion: '1.0'\n")
        with pytest.raises(KeyError):
            load_template_file(path)


class TestLoadTemplateDirectory:
    def test_loads_all_bundled_templates(self):
        registry = TemplateRegistry()
        count = load_template_directory(BUNDLED_TEMPLATE_DIR, registry)
        assert count == 3
        assert set(registry.ids()) == {"normal_bosetting", "enslige_mindrearige", "helsefokus"}

    def test_skips_underscore_files_and_broken_files(self, tmp_path):
        _write(tmp_path, "list_style.yaml", _LIST_STYLE)
        _write(tmp_path, "_draft.yaml", _LIST_STYLE.replace("list_style", "draft"))
        _write(tmp_path, "broken.yaml", "id: broken\n")
        registry = TemplateRegistry()
        assert load_template_directory(tmp_path, registry) == 1
        assert registry.ids() == ["list_style"]

    def test_missing_directory_loads_nothing(self, tmp_path):
        registry = TemplateRegistry()
        assert load_template_directory(tmp_path / "nope", registry) == 0
        assert len(registry) == 0
