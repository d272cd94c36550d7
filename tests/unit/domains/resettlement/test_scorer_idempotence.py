"""Every scorer is a pure function of its input."""

from __future__ import annotations

import pytest

from hjemsoek.domains.resettlement.connectors.builders import (
    build_capacity_input,
    build_connection_input,
    build_education_input,
    build_healthcare_input,
    build_work_input,
)
from hjemsoek.domains.resettlement.domain_logic.capacity import score_capacity
from hjemsoek.domains.resettlement.domain_logic.connection import score_connection
from hjemsoek.domains.resettlement.domain_logic.education import score_education
from hjemsoek.domains.resettlement.domain_logic.healthcare import score_healthcare
from hjemsoek.domains.resettlement.domain_logic.work import score_work_opportunity

CASES = [
    (build_capacity_input, score_capacity),
    (build_work_input, score_work_opportunity),
    (build_connection_input, score_connection),
    (build_healthcare_input, score_healthcare),
    (build_education_input, score_education),
]


@pytest.mark.parametrize("builder, scorer", CASES)
@pytest.mark.parametrize("target", ["no-1", "no-8", "no-13"])
def test_same_input_same_output(mock_dataset, sample_group, builder, scorer, target):
    inp = builder(mock_dataset, target, sample_group).input
    first = scorer(inp)
    second = scorer(inp)
    assert first == second
    assert first.to_dict() == second.to_dict()


@pytest.mark.parametrize("builder, scorer", CASES)
def test_scores_stay_in_range(mock_dataset, sample_group, builder, scorer):
    for record in mock_dataset.municipalities:
        result = scorer(builder(mock_dataset, record.id, sample_group).input)
        assert 0.0 <= result.effective_score <= 100.0
        assert result.score is None or 0.0 <= result.score <= 100.0
        assert all(0.0 <= s.score <= 100.0 for s in result.subscores)
        assert result.max_possible in (0.0, 100.0)
