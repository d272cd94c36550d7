"""Tests for weight normalization helpers."""

from __future__ import annotations

import pytest

from hjemsoek.core.scoring.weights import (
    clamp,
    mean,
    normalize_subweights,
    normalize_weights,
    subweight_values,
)
from hjemsoek.domains.resettlement.domain_logic.models import Subweight


class TestClampAndMean:
    def test_clamp_bounds(self):
        assert clamp(-5) == 0
        assert clamp(150) == 100
        assert clamp(42.5) == 42.5

    def test_mean_of_empty_is_zero(self):
        assert mean([]) == 0.0

    def test_mean(self):
        assert mean([10, 20, 30]) == pytest.approx(20.0)


class TestNormalizeWeights:
    def test_sums_to_one(self):
        result = normalize_weights({"a": 1, "b": 3}, ["a", "b"])
        assert result == pytest.approx({"a": 0.25, "b": 0.75})

    def test_missing_and_negative_count_as_zero(self):
        result = normalize_weights({"a": 2, "b": -4}, ["a", "b", "c"])
        assert result == pytest.approx({"a": 1.0, "b": 0.0, "c": 0.0})

    def test_all_zero_falls_back_to_uniform(self):
        result = normalize_weights({"a": 0, "b": 0}, ["a", "b"])
        assert result == pytest.approx({"a": 0.5, "b": 0.5})

    def test_garbage_values_do_not_raise(self):
        result = normalize_weights({"a": "x", "b": None}, ["a", "b"])
        assert result == pytest.approx({"a": 0.5, "b": 0.5})

    def test_keys_outside_the_set_are_ignored(self):
        result = normalize_weights({"a": 1, "zzz": 99}, ["a"])
        assert result == {"a": 1.0}

    def test_no_keys(self):
        assert normalize_weights({"a": 1}, []) == {}


class TestSubweights:
    IDS = ("x.one", "x.two")

    def test_defaults_to_equal_split(self):
        assert normalize_subweights(None, self.IDS) == pytest.approx({"x.one": 0.5, "x.two": 0.5})
        assert normalize_subweights([], self.IDS) == pytest.approx({"x.one": 0.5, "x.two": 0.5})

    def test_unknown_ids_ignored(self):
        sws = [Subweight("x.one", 30), Subweight("x.unknown", 1000), Subweight("x.two", 10)]
        assert normalize_subweights(sws, self.IDS) == pytest.approx({"x.one": 0.75, "x.two": 0.25})

    def test_last_duplicate_wins(self):
        sws = [Subweight("x.one", 90), Subweight("x.two", 50), Subweight("x.one", 50)]
        assert subweight_values(sws, self.IDS) == {"x.one": 50.0, "x.two": 50.0}

    def test_missing_id_counts_as_zero(self):
        assert normalize_subweights([Subweight("x.two", 5)], self.IDS) == pytest.approx(
            {"x.one": 0.0, "x.two": 1.0}
        )

    def test_all_zero_falls_back_to_equal_split(self):
        sws = [Subweight("x.one", 0), Subweight("x.two", 0)]
        assert normalize_subweights(sws, self.IDS) == pytest.approx({"x.one": 0.5, "x.two": 0.5})

    def test_accepts_mappings(self):
        sws = [{"id": "x.one", "weight": 1}, {"id": "x.two", "weight": 3}]
        assert normalize_subweights(sws, self.IDS) == pytest.approx({"x.one": 0.25, "x.two": 0.75})
