"""Profession growth normalization for the work opportunity scorer.

Raw percentage growth overstates small professions (1 -> 2 employees is
"+100%"). Each municipality's own history sets robust thresholds
(median + MAD) for absolute change, percentage change and share change.
Every profession is classified into one of four scenarios and its
percentage growth is multiplied by dampening/boosting factors.

Scenarios (big_abs = |ΔN| >= TH_abs, big_pct = |pct| >= TH_pct):
    1  small pct, big abs   large structural growth, boosted
    2  small pct, small abs neutral
    3  big pct, big abs     neutral
    4  big pct, small abs   small-base noise, dampened
"""

from __future__ import annotations

import statistics
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from hjemsoek.core.scoring.weights import clamp
from hjemsoek.domains.resettlement.domain_logic.models import (
    SCALE_TH_ABS,
    SCALE_TH_SHARE_OR_5PP,
    SHARE_SCALE_FLOOR_PP,
    GrowthFactors,
    GrowthNormalizationConfig,
    GrowthThresholds,
    ProfessionHistory,
)

DEFAULT_CONFIG = GrowthNormalizationConfig()


@dataclass(frozen=True)
class GrowthAdjustment:
    """Final growth score for one profession plus how it was reached."""

    growth: float
    adjusted_raw: float | None
    scenario: int | None
    factors: GrowthFactors | None
    negative: bool
    fallback: bool


@dataclass(frozen=True)
class _Deltas:
    p0_raw: float
    p0_eff: float
    p1: float
    delta_n: float
    pct: float
    share0: float
    share1: float
    delta_share_raw: float
    delta_share: float


def _deltas(entry: ProfessionHistory) -> _Deltas:
    p0_raw = entry.employees_5y_ago or 0.0
    p0_eff = 1.0 if p0_raw == 0 else p0_raw
    p1 = entry.employees_now or 0.0
    delta_n = p1 - p0_eff
    share0 = entry.pct_workforce_5y_ago or 0.0
    share1 = entry.pct_workforce_now or 0.0
    delta_share_raw = share1 - share0
    return _Deltas(
        p0_raw=p0_raw,
        p0_eff=p0_eff,
        p1=p1,
        delta_n=delta_n,
        pct=delta_n / p0_eff * 100.0,
        share0=share0,
        share1=share1,
        delta_share_raw=delta_share_raw,
        delta_share=max(0.0, delta_share_raw),
    )


# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

def robust_threshold(values: Iterable[float]) -> float:
    """median + MAD; the bare median when MAD is 0, and 0 for no values."""
    values = list(values)
    if not values:
        return 0.0
    med = statistics.median(values)
    mad = statistics.median(abs(v - med) for v in values)
    return med + mad if mad > 0 else med


def compute_thresholds(history: Mapping[str, ProfessionHistory]) -> GrowthThresholds | None:
    """Thresholds over every profession in the municipality's history.

    Returns None with fewer than two entries, since a single profession
    has nothing to be compared against.
    """
    if len(history) < 2:
        return None
    deltas = [_deltas(entry) for entry in history.values()]
    return GrowthThresholds(
        th_abs=robust_threshold(abs(d.delta_n) for d in deltas),
        th_pct=robust_threshold(abs(d.pct) for d in deltas),
        th_share=robust_threshold(d.delta_share for d in deltas),
    )


# ---------------------------------------------------------------------------
# Scenario + factors
# ---------------------------------------------------------------------------

def classify_scenario(big_abs: bool, big_pct: bool) -> int:
    if not big_pct and big_abs:
        return 1
    if big_pct and big_abs:
        return 3
    if big_pct and not big_abs:
        return 4
    return 2


def _scale(value: str | float, keyword: str, keyword_value: float, fallback: float) -> float:
    scale = keyword_value if value == keyword else float(value)
    return scale if scale > 0 else fallback


def normalize_growth(
    entry: ProfessionHistory,
    thresholds: GrowthThresholds | None,
    config: GrowthNormalizationConfig = DEFAULT_CONFIG,
) -> GrowthAdjustment:
    """Normalize one profession's growth into a 0-100 score.

    Without thresholds the plain percentage is used, capped at 100.
    Negative growth always scores 0; it never subtracts.
    """
    d = _deltas(entry)
    negative = d.pct < 0
    positive_pct = 0.0 if negative else d.pct

    if thresholds is None:
        return GrowthAdjustment(
            growth=0.0 if negative else min(positive_pct, 100.0),
            adjusted_raw=None,
            scenario=None,
            factors=None,
            negative=negative,
            fallback=True,
        )

    abs_delta = abs(d.delta_n)
    big_abs = abs_delta >= thresholds.th_abs
    big_pct = abs(d.pct) >= thresholds.th_pct
    scenario = classify_scenario(big_abs, big_pct)
    tiny_base = d.p0_raw < config.tiny_base_threshold

    k_abs = _scale(config.k_abs_scale, SCALE_TH_ABS, thresholds.th_abs, 1.0)
    k_boost = _scale(config.k_boost_scale, SCALE_TH_ABS, thresholds.th_abs, 1.0)
    s_share = _scale(
        config.share_scale_mode,
        SCALE_TH_SHARE_OR_5PP,
        max(thresholds.th_share, SHARE_SCALE_FLOOR_PP),
        SHARE_SCALE_FLOOR_PP,
    )

    f_abs = abs_delta / (abs_delta + k_abs)
    f_base = d.p0_raw / config.tiny_base_threshold if tiny_base else 1.0
    f_share_raw = d.delta_share / (d.delta_share + s_share)
    f_struct = 1.0 + config.gamma_share * f_share_raw

    if scenario == 1:
        f_scen = 1.0 + config.beta_boost_s1 * (abs_delta / (abs_delta + k_boost))
    elif scenario == 4:
        f_scen = config.damp_s4 * f_base
    else:
        f_scen = 1.0

    f_total_raw = f_scen * f_abs * f_struct * f_base
    f_total = min(f_total_raw, config.cap_factor)
    adjusted_raw = min(positive_pct * f_total, config.final_cap)
    growth = 0.0 if negative else clamp(min(adjusted_raw, 100.0))

    factors = GrowthFactors(
        p0_raw=d.p0_raw,
        p0_eff=d.p0_eff,
        p1=d.p1,
        delta_n=d.delta_n,
        recomputed_pct=d.pct,
        positive_pct=positive_pct,
        share0=d.share0,
        share1=d.share1,
        delta_share_raw=d.delta_share_raw,
        delta_share=d.delta_share,
        thresholds=thresholds,
        tiny_base=tiny_base,
        negative_growth=negative,
        f_scen=f_scen,
        f_abs=f_abs,
        f_base=f_base,
        f_share_raw=f_share_raw,
        f_struct=f_struct,
        f_total_raw=f_total_raw,
        f_total=f_total,
        params=config,
    )
    return GrowthAdjustment(
        growth=growth,
        adjusted_raw=adjusted_raw,
        scenario=scenario,
        factors=factors,
        negative=negative,
        fallback=False,
    )
