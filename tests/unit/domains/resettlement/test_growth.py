"""Tests for robust growth normalization.

The reference history below has thresholds th_abs = 3 (median 2 + MAD 1),
th_pct = 35 (median 20 + MAD 15) and th_share = 0.
"""

from __future__ import annotations

import pytest

from hjemsoek.domains.resettlement.domain_logic.growth import (
    classify_scenario,
    compute_thresholds,
    normalize_growth,
    robust_threshold,
)
from hjemsoek.domains.resettlement.domain_logic.models import (
    GrowthNormalizationConfig,
    GrowthThresholds,
    ProfessionHistory,
)


def _entry(p0: float, p1: float, share0: float = 0.0, share1: float = 0.0) -> ProfessionHistory:
    return ProfessionHistory(
        employees_5y_ago=p0,
        employees_now=p1,
        pct_workforce_5y_ago=share0,
        pct_workforce_now=share1,
    )


HISTORY = {
    "engineer": _entry(100, 110),  # dN 10, +10%  -> scenario 1
    "teacher": _entry(10, 12),     # dN 2,  +20%  -> scenario 2
    "chef": _entry(2, 4),          # dN 2,  +100% -> scenario 4
    "nurse": _entry(50, 80),       # dN 30, +60%  -> scenario 3
    "driver": _entry(20, 21),      # dN 1,  +5%   -> scenario 2
}

THRESHOLDS = GrowthThresholds(th_abs=3.0, th_pct=35.0, th_share=0.0)


class TestThresholds:
    def test_robust_threshold(self):
        assert robust_threshold([]) == 0.0
        assert robust_threshold([1, 2, 2, 10, 30]) == pytest.approx(3.0)

    def test_zero_mad_uses_median(self):
        assert robust_threshold([5, 5, 5]) == 5

    def test_compute_thresholds(self):
        thresholds = compute_thresholds(HISTORY)
        assert thresholds.th_abs == pytest.approx(3.0)
        assert thresholds.th_pct == pytest.approx(35.0)
        assert thresholds.th_share == 0.0

    def test_needs_two_entries(self):
        assert compute_thresholds({}) is None
        assert compute_thresholds({"teacher": HISTORY["teacher"]}) is None


class TestScenarios:
    @pytest.mark.parametrize(
        "big_abs, big_pct, scenario",
        [(True, False, 1), (False, False, 2), (True, True, 3), (False, True, 4)],
    )
    def test_classification(self, big_abs, big_pct, scenario):
        assert classify_scenario(big_abs, big_pct) == scenario

    def test_scenario_1_is_boosted(self):
        result = normalize_growth(HISTORY["engineer"], THRESHOLDS)
        assert result.scenario == 1
        # F_scen = 1 + 0.4 * 10/13, F_abs = 10/13
        assert result.factors.f_total == pytest.approx(170 / 169)
        assert result.growth == pytest.approx(1700 / 169)

    def test_scenario_2_is_neutral(self):
        result = normalize_growth(HISTORY["teacher"], THRESHOLDS)
        assert result.scenario == 2
        assert result.factors.f_scen == 1.0
        assert result.growth == pytest.approx(8.0)

    def test_scenario_3_is_neutral(self):
        result = normalize_growth(HISTORY["nurse"], THRESHOLDS)
        assert result.scenario == 3
        assert result.growth == pytest.approx(600 / 11)

    def test_scenario_4_is_dampened(self):
        result = normalize_growth(HISTORY["chef"], THRESHOLDS)
        assert result.scenario == 4
        assert result.factors.tiny_base is False
        assert result.factors.f_scen == pytest.approx(0.5)
        assert result.growth == pytest.approx(20.0)

    def test_scenarios_from_computed_thresholds(self):
        thresholds = compute_thresholds(HISTORY)
        scenarios = {p: normalize_growth(e, thresholds).scenario for p, e in HISTORY.items()}
        assert scenarios == {"engineer": 1, "teacher": 2, "chef": 4, "nurse": 3, "driver": 2}


class TestEdgeCases:
    def test_tiny_base_applies_base_factor_twice(self):
        result = normalize_growth(_entry(1, 2), THRESHOLDS)
        assert result.scenario == 4
        assert result.factors.tiny_base is True
        assert result.factors.f_base == pytest.approx(0.5)
        # 0.5*0.5 (scenario) * 0.25 (abs) * 1 (struct) * 0.5 (base)
        assert result.factors.f_total == pytest.approx(0.03125)
        assert result.growth == pytest.approx(3.125)

    def test_zero_base_scores_zero(self):
        result = normalize_growth(_entry(0, 3), THRESHOLDS)
        assert result.factors.p0_eff == 1.0
        assert result.factors.recomputed_pct == pytest.approx(200.0)
        assert result.growth == 0.0

    def test_negative_growth_scores_zero(self):
        result = normalize_growth(_entry(10, 5), THRESHOLDS)
        assert result.negative is True
        assert result.factors.negative_growth is True
        assert result.growth == 0.0
        assert result.adjusted_raw == 0.0

    def test_cap_factor(self):
        result = normalize_growth(_entry(1000, 1300, share0=10, share1=30), THRESHOLDS)
        assert result.scenario == 1
        assert result.factors.f_share_raw == pytest.approx(0.8)
        assert result.factors.f_total_raw > 1.5
        assert result.factors.f_total == 1.5
        assert result.growth == pytest.approx(45.0)

    def test_final_cap_then_clamped_to_100(self):
        result = normalize_growth(_entry(10, 60), THRESHOLDS)
        assert result.scenario == 3
        assert result.adjusted_raw == 200.0
        assert result.growth == 100.0

    def test_share_drop_does_not_penalize(self):
        result = normalize_growth(_entry(10, 12, share0=5, share1=2), THRESHOLDS)
        assert result.factors.delta_share_raw == pytest.approx(-3.0)
        assert result.factors.delta_share == 0.0
        assert result.factors.f_struct == 1.0

    def test_numeric_scale_override(self):
        config = GrowthNormalizationConfig.from_overrides({"k_abs_scale": 1})
        result = normalize_growth(HISTORY["teacher"], THRESHOLDS, config)
        assert result.factors.f_abs == pytest.approx(2 / 3)
        assert result.growth == pytest.approx(40 / 3)

    def test_zero_threshold_scale_falls_back_to_one(self):
        thresholds = GrowthThresholds(th_abs=0.0, th_pct=35.0, th_share=0.0)
        result = normalize_growth(HISTORY["teacher"], thresholds)
        assert result.factors.f_abs == pytest.approx(2 / 3)


class TestFallback:
    def test_plain_percentage_without_thresholds(self):
        result = normalize_growth(_entry(10, 15), None)
        assert result.fallback is True
        assert result.scenario is None
        assert result.growth == pytest.approx(50.0)

    def test_fallback_capped_at_100(self):
        assert normalize_growth(_entry(10, 30), None).growth == 100.0

    def test_fallback_negative_is_zero(self):
        result = normalize_growth(_entry(10, 5), None)
        assert result.negative is True
        assert result.growth == 0.0
