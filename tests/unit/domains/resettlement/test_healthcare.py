"""Tests for the healthcare scorer."""

from __future__ import annotations

import pytest

from conftest import ADJACENCY_MAP, REGION_MAP, make_group, make_person
from hjemsoek.domains.resettlement.domain_logic.healthcare import qualifies, score_healthcare
from hjemsoek.domains.resettlement.domain_logic.models import (
    HealthcareFacts,
    HealthcareInput,
    Subweight,
)

FACTS = {
    "m1": HealthcareFacts(has_hospital=True, specialist_facilities={"cardiology"}),
    "m2": HealthcareFacts(specialist_facilities={"oncology"}),
    "m3": HealthcareFacts(specialist_facilities={"dialysis"}),
}


def _input(*persons, target: str = "m1", subweights=None) -> HealthcareInput:
    return HealthcareInput(
        group=make_group(*persons),
        target_municipality_id=target,
        municipality_region_map=REGION_MAP,
        adjacency_map=ADJACENCY_MAP,
        municipality_healthcare_map=FACTS,
        subweights=subweights,
    )


def hospital(pid: str = "h", **kwargs):
    return make_person(pid, "senior", needs_hospital=True, **kwargs)


def specialist(pid: str, need: str):
    return make_person(pid, "adult_working", specialist_need=need)


class TestQualifies:
    def test_hospital_or_known_specialist(self):
        assert qualifies(hospital())
        assert qualifies(specialist("s", "dialysis"))

    def test_unknown_specialist_does_not_qualify(self):
        assert not qualifies(specialist("s", "astrology"))
        assert not qualifies(make_person("p"))


class TestPersonComposite:
    def test_hospital_only_uses_full_hospital_weight(self):
        result = score_healthcare(_input(hospital()))
        assert result.persons[0].composite == pytest.approx(100.0)
        assert result.persons[0].specialist_score is None
        assert result.effective_score == pytest.approx(100.0)

    def test_neighbor_specialist(self):
        result = score_healthcare(_input(specialist("s", "dialysis")))
        assert result.effective_score == pytest.approx(50.0)

    def test_region_specialist(self):
        result = score_healthcare(_input(specialist("s", "oncology")))
        assert result.effective_score == pytest.approx(25.0)

    def test_specialist_missing_everywhere(self):
        result = score_healthcare(_input(specialist("s", "trauma")))
        assert result.effective_score == 0.0
        assert result.confidence == 1
        assert result.max_possible == 100.0

    def test_both_needs_blend(self):
        result = score_healthcare(_input(hospital(specialist_need="dialysis")))
        assert result.persons[0].hospital_score == 100.0
        assert result.persons[0].specialist_score == 50.0
        assert result.effective_score == pytest.approx(75.0)

    def test_zero_weight_component_is_skipped(self):
        weights = (Subweight("healthcare.hospital", 0), Subweight("healthcare.specialist", 1))
        result = score_healthcare(_input(hospital(specialist_need="dialysis"), subweights=weights))
        assert result.persons[0].hospital_score is None
        assert result.effective_score == pytest.approx(50.0)

    def test_hospital_from_neighbor(self):
        result = score_healthcare(_input(hospital(), target="m3"))
        assert result.effective_score == pytest.approx(50.0)


class TestGroup:
    def test_group_score_is_mean_of_person_composites(self):
        result = score_healthcare(_input(
            hospital("a"),
            specialist("b", "dialysis"),
            make_person("c"),
        ))
        assert [t.person_id for t in result.persons] == ["a", "b"]
        assert result.effective_score == pytest.approx(75.0)
        by_id = {s.id: s for s in result.subscores}
        assert by_id["healthcare.hospital"].score == pytest.approx(100.0)
        assert by_id["healthcare.specialist"].score == pytest.approx(50.0)
        assert result.trace["tiers"]["hospital"] == 100.0
        assert result.trace["tiers"]["specialists"] == {"dialysis": 50.0}

    def test_no_needs_means_no_signal(self):
        result = score_healthcare(_input(make_person("a"), specialist("b", "astrology")))
        assert result.confidence == 0
        assert result.max_possible == 0.0
        assert "No persons with healthcare needs" in result.explanation

    def test_empty_group(self):
        result = score_healthcare(_input())
        assert result.confidence == 0
        assert "No persons in the group" in result.explanation
