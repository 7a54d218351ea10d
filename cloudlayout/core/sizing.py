# cloudlayout/core/sizing.py
"""
Map word weights onto font sizes in [min_size, max_size].
"linear" interpolates weights directly; "log" interpolates log1p(weight) for skewed counts.
Both are monotone: a heavier word never gets a smaller size.
"""

from __future__ import annotations

import math
from typing import Sequence


def _scaled(weight: float, scale: str) -> float:
    if scale == "log":
        return math.log1p(max(0.0, weight))
    if scale == "linear":
        return weight
    raise ValueError(f"Unknown size scale {scale!r}")


def map_size(
    weight: float,
    min_weight: float,
    max_weight: float,
    min_size: float,
    max_size: float,
    scale: str = "linear",
) -> float:
    """Font size for weight given the observed weight range. Equal weights map to max_size."""
    lo = _scaled(min_weight, scale)
    hi = _scaled(max_weight, scale)
    if hi == lo:
        return max_size
    t = (_scaled(weight, scale) - lo) / (hi - lo)
    size = min_size + t * (max_size - min_size)
    return min(max_size, max(min_size, size))


def resolve_sizes(
    weights: Sequence[float],
    min_size: float,
    max_size: float,
    scale: str = "linear",
) -> list[float]:
    """Sizes for a whole item set, using its own min/max weight."""
    if not weights:
        return []
    lo = min(weights)
    hi = max(weights)
    return [map_size(w, lo, hi, min_size, max_size, scale) for w in weights]
