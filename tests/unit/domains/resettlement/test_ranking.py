"""Tests for scoring and ranking municipalities."""

from __future__ import annotations

import dataclasses

import pytest

from hjemsoek.domains.resettlement.connectors.records import (
    MunicipalityDataset,
    MunicipalityRecord,
    Region,
)
from hjemsoek.domains.resettlement.domain_logic.models import (
    MODULE_NAMES,
    CapacityFacts,
    WorkFacts,
)
from hjemsoek.domains.resettlement.domain_logic.ranking import (
    active_modules,
    rank_municipalities,
    score_municipality,
    stars_for_score,
)


class TestStars:
    @pytest.mark.parametrize(
        "score, stars",
        [(0, 0.5), (9.99, 0.5), (10, 1.0), (55, 3.0), (99, 5.0), (100, 5.0), (-3, 0.5), (150, 5.0)],
    )
    def test_buckets(self, score, stars):
        assert stars_for_score(score) == stars


class TestActiveModules:
    def test_all_bundled_modules_active(self, normal_template):
        assert active_modules(normal_template) == list(MODULE_NAMES)

    def test_zero_weight_modules_are_skipped(self, normal_template):
        template = dataclasses.replace(normal_template, module_weights={"capacity": 100})
        assert active_modules(template) == ["capacity"]

    def test_no_weights_runs_everything(self, normal_template):
        template = dataclasses.replace(normal_template, module_weights={})
        assert active_modules(template) == list(MODULE_NAMES)


class TestScoreMunicipality:
    def test_scores_every_module(self, mock_dataset, sample_group, normal_template):
        score = score_municipality(mock_dataset, "no-1", sample_group, normal_template)
        assert score.name == "Oslo"
        assert set(score.modules) == set(MODULE_NAMES)
        assert 0.0 <= score.overall <= 100.0
        assert score.overall == pytest.approx(score.aggregate.weighted_total)
        assert score.stars == stars_for_score(score.overall)

    def test_unknown_municipality(self, mock_dataset, sample_group, normal_template):
        score = score_municipality(mock_dataset, "nope", sample_group, normal_template)
        assert score.modules == {}
        assert score.overall == 0.0
        assert score.name == "nope"
        assert [i.code for i in score.issues] == ["NO_MUNICIPALITY"]

    def test_invalid_module_input_is_left_out(self, sample_group, normal_template):
        dataset = MunicipalityDataset(
            [
                MunicipalityRecord(
                    id="x",
                    name="X",
                    region_id="r",
                    capacity=CapacityFacts(capacity_total=10, settled_current=0),
                    work=WorkFacts(unemployment_rate=140),
                )
            ],
            [Region("r", "R")],
        )
        score = score_municipality(dataset, "x", sample_group, normal_template)
        assert "work_opportunity" not in score.modules
        assert "capacity" in score.modules
        assert "INVALID_UNEMPLOYMENT" in [i.code for i in score.issues]

    def test_to_dict(self, mock_dataset, sample_group, normal_template):
        score = score_municipality(mock_dataset, "no-2", sample_group, normal_template)
        data = score.to_dict()
        assert data["municipality_id"] == "no-2"
        assert set(data["module_scores"]) == set(MODULE_NAMES)
        assert "modules" not in data
        full = score.to_dict(include_modules=True)
        assert full["modules"]["capacity"]["module"] == "capacity"


class TestRankMunicipalities:
    def test_sorted_descending_by_overall(self, mock_dataset, sample_group, normal_template):
        ranking = rank_municipalities(mock_dataset, sample_group, normal_template)
        assert len(ranking) == len(mock_dataset)
        overall = [s.overall for s in ranking]
        assert overall == sorted(overall, reverse=True)

    def test_limit(self, mock_dataset, sample_group, normal_template):
        ranking = rank_municipalities(mock_dataset, sample_group, normal_template, limit=3)
        full = rank_municipalities(mock_dataset, sample_group, normal_template)
        assert [s.municipality_id for s in ranking] == [s.municipality_id for s in full[:3]]

    def test_sort_by_module_ascending(self, mock_dataset, sample_group, normal_template):
        ranking = rank_municipalities(
            mock_dataset, sample_group, normal_template, sort_by="healthcare", descending=False
        )
        values = [s.module_score("healthcare") for s in ranking]
        assert values == sorted(values)

    def test_sort_by_name(self, mock_dataset, sample_group, normal_template):
        ranking = rank_municipalities(
            mock_dataset, sample_group, normal_template, sort_by="name", descending=False
        )
        names = [s.name for s in ranking]
        assert names == sorted(names)

    def test_ties_keep_id_order(self, sample_group, normal_template):
        dataset = MunicipalityDataset(
            [MunicipalityRecord(id=i, name=i.upper(), region_id="r") for i in ("b", "a", "c")],
            [Region("r", "R")],
        )
        ranking = rank_municipalities(dataset, sample_group, normal_template)
        assert [s.municipality_id for s in ranking] == ["a", "b", "c"]

    def test_unknown_sort_key(self, mock_dataset, sample_group, normal_template):
        with pytest.raises(ValueError, match="Unknown sort key"):
            rank_municipalities(mock_dataset, sample_group, normal_template, sort_by="vibes")
