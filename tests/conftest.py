"""Shared test fixtures for Hjemsøk scoring tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from hjemsoek.core.templates.loader import (  # noqa: E402
    BUNDLED_TEMPLATE_DIR,
    load_template_directory,
)
from hjemsoek.core.templates.registry import TemplateRegistry  # noqa: E402
from hjemsoek.domains.resettlement.connectors.mock_data import (  # noqa: E402
    create_mock_municipalities,
    get_mock_group,
)
from hjemsoek.domains.resettlement.connectors.records import MunicipalityDataset  # noqa: E402
from hjemsoek.domains.resettlement.domain_logic.models import (  # noqa: E402
    Group,
    Person,
    PersonConnection,
)

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HJEMSOEK_TEMPLATES_DIR", "")
    monkeypatch.setenv("DEFAULT_TEMPLATE_ID", "normal_bosetting")
    monkeypatch.setenv("MOCK_MUNICIPALITY_COUNT", "50")
    monkeypatch.setenv("MOCK_SEED", "1")
    monkeypatch.setenv("RANKING_LIMIT", "10")


# ---------------------------------------------------------------------------
# Small geography used by the tiered scorers
#
#   region r1: m1, m2      m1 borders m3 (region r2)
#   region r2: m3
# ---------------------------------------------------------------------------

REGION_MAP = {"m1": "r1", "m2": "r1", "m3": "r2"}
ADJACENCY_MAP = {"m1": ("m3",), "m3": ("m1",)}


def make_person(person_id: str = "p1", person_type: str = "adult_working", **kwargs) -> Person:
    """Create a test person with sensible defaults."""
    return Person(id=person_id, person_type=person_type, **kwargs)


def make_group(*persons: Person) -> Group:
    return Group(persons=persons)


def connected(
    person_id: str,
    relation: str,
    *,
    municipality_id: str | None = None,
    region_id: str | None = None,
    person_type: str = "adult_working",
) -> Person:
    """Person with a single declared connection."""
    return make_person(
        person_id,
        person_type,
        connection=PersonConnection(
            municipality_id=municipality_id, region_id=region_id, relation=relation
        ),
    )


@pytest.fixture
def region_map() -> dict[str, str]:
    return dict(REGION_MAP)


@pytest.fixture
def adjacency_map() -> dict[str, tuple[str, ...]]:
    return dict(ADJACENCY_MAP)


# ---------------------------------------------------------------------------
# Templates and datasets
# ---------------------------------------------------------------------------

@pytest.fixture
def template_registry() -> TemplateRegistry:
    """Registry loaded from the bundled weight templates."""
    registry = TemplateRegistry()
    load_template_directory(BUNDLED_TEMPLATE_DIR, registry)
    return registry


@pytest.fixture
def normal_template(template_registry: TemplateRegistry):
    return template_registry.get("normal_bosetting")


@pytest.fixture
def mock_dataset() -> MunicipalityDataset:
    return create_mock_municipalities(count=20, seed=1)


@pytest.fixture
def sample_group() -> Group:
    return get_mock_group()
