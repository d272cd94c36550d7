"""Weight normalization and small numeric helpers shared by every scorer.

All helpers are pure and total: malformed weights never raise, they fall
back to an equal split over the known keys.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any


def clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    """Clamp a value to [lo, hi]."""
    return max(lo, min(hi, value))


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def _weight(value: Any) -> float:
    """Coerce a raw weight to a non-negative float (None/garbage -> 0)."""
    if value is None:
        return 0.0
    try:
        w = float(value)
    except (TypeError, ValueError):
        return 0.0
    return w if w > 0 else 0.0


def normalize_weights(
    weights: Mapping[str, Any], keys: Iterable[str]
) -> dict[str, float]:
    """Normalize ``weights`` over ``keys`` so the result sums to 1.

    Missing and negative weights count as zero. When no key carries a
    positive weight the result is uniform over ``keys``.
    """
    keys = list(keys)
    if not keys:
        return {}
    raw = {k: _weight(weights.get(k)) for k in keys}
    total = sum(raw.values())
    if total <= 0:
        uniform = 1.0 / len(keys)
        return {k: uniform for k in keys}
    return {k: raw[k] / total for k in keys}


def subweight_values(
    subweights: Iterable[Any] | None, ids: Sequence[str]
) -> dict[str, float]:
    """Raw (unnormalized) weight per id in ``ids``.

    ``subweights`` holds objects with ``id``/``weight`` attributes (or dicts
    with those keys). Unknown ids are ignored and a repeated id keeps its
    last value. Without any subweights every id weighs 1.
    """
    items = list(subweights or ())
    if not items:
        return dict.fromkeys(ids, 1.0)
    raw = dict.fromkeys(ids, 0.0)
    for sw in items:
        if isinstance(sw, Mapping):
            sw_id, sw_weight = sw.get("id"), sw.get("weight")
        else:
            sw_id, sw_weight = getattr(sw, "id", None), getattr(sw, "weight", None)
        if sw_id in raw:
            raw[sw_id] = _weight(sw_weight)
    return raw


def normalize_subweights(
    subweights: Iterable[Any] | None, ids: Sequence[str]
) -> dict[str, float]:
    """Normalize a module's subweight list into ``{id: weight}`` over ``ids``.

    If nothing positive remains, the module default (equal split over
    ``ids``) is returned.
    """
    return normalize_weights(subweight_values(subweights, ids), ids)
