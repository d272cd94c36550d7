"""Template YAML validator — ensures weight templates are well-formed."""

from __future__ import annotations

import logging
import math
from pathlib import Path

from hjemsoek.core.templates.loader import load_template_file
from hjemsoek.core.templates.models import WeightTemplate
from hjemsoek.domains.resettlement.domain_logic.models import (
    MODULE_NAMES,
    SUBWEIGHT_IDS_BY_MODULE,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ["id", "version", "display_name", "description", "module_weights"]
MODULE_WEIGHT_TOTAL = 100.0


def _display(path: Path, project_root: Path | None) -> str:
    if project_root:
        try:
            return str(path.relative_to(project_root))
        except ValueError:
            pass
    return str(path)


def check_template(template: WeightTemplate, display_path: str) -> list[str]:
    """Semantic checks on an already parsed template."""
    errors: list[str] = []

    for field_name in REQUIRED_FIELDS:
        if not getattr(template, field_name, None):
            errors.append(f"{display_path}: Missing or empty required field '{field_name}'")

    for module, weight in template.module_weights.items():
        if module not in MODULE_NAMES:
            errors.append(f"{display_path}: Unknown module '{module}' in module_weights")
        if weight < 0:
            errors.append(f"{display_path}: Negative weight {weight:g} for module '{module}'")

    total = sum(template.module_weights.values())
    if template.module_weights and not math.isclose(total, MODULE_WEIGHT_TOTAL, abs_tol=1e-6):
        errors.append(
            f"{display_path}: Module weights sum to {total:g}, expected {MODULE_WEIGHT_TOTAL:g}"
        )

    for module, subweights in template.subweights.items():
        known = SUBWEIGHT_IDS_BY_MODULE.get(module)
        if known is None:
            errors.append(f"{display_path}: Unknown module '{module}' in subweights")
            continue
        for sw in subweights:
            if sw.id not in known:
                errors.append(f"{display_path}: Unknown subweight id '{sw.id}' for '{module}'")
            if sw.weight < 0:
                errors.append(f"{display_path}: Negative subweight {sw.weight:g} for '{sw.id}'")

    if template.version and not all(c.isdigit() or c == "." for c in template.version):
        errors.append(
            f"{display_path}: Version '{template.version}' doesn't look like a version number"
        )
    return errors


def validate_template_file(
    path: Path, *, project_root: Path | None = None
) -> tuple[WeightTemplate | None, list[str]]:
    """Validate a single template YAML file.

    Returns: (template_or_none, errors)
    """
    display_path = _display(path, project_root)

    try:
        template = load_template_file(path)
    except Exception as exc:
        return None, [f"{display_path}: Failed to load: {exc}"]

    errors = check_template(template, display_path)

    if path.name != f"{template.id}.yaml":
        errors.append(
            f"{display_path}: Filename '{path.name}' should match template id "
            f"'{template.id}' (expected '{template.id}.yaml')"
        )

    return template, errors


def validate_template_directory(
    directory: str | Path, *, project_root: Path | None = None
) -> tuple[int, list[str]]:
    """Validate all template YAML files in a directory (recursively).

    Returns: (template_count, errors)
    """
    directory = Path(directory)
    if not directory.is_dir():
        return 0, [f"Template directory not found: {directory}"]

    yaml_files = sorted(p for p in directory.rglob("*.yaml") if not p.name.startswith("_"))
    if not yaml_files:
        return 0, [f"No template YAML files found in {directory}"]

    errors: list[str] = []
    seen_ids: dict[str, Path] = {}
    loaded = 0

    for path in yaml_files:
        template, file_errors = validate_template_file(path, project_root=project_root)
        if file_errors:
            errors.extend(file_errors)
            continue

        assert template is not None  # for type checkers
        loaded += 1

        if template.id in seen_ids:
            errors.append(
                f"{_display(path, project_root)}: Duplicate ID '{template.id}', already defined "
                f"in {_display(seen_ids[template.id], project_root)}"
            )
        else:
            seen_ids[template.id] = path

    return loaded, errors


def validate_templates(directory: str | Path) -> tuple[int, int]:
    """Log every problem found; returns (template_count, error_count)."""
    count, errors = validate_template_directory(directory)
    for err in errors:
        logger.error("%s", err)
    return count, len(errors)
