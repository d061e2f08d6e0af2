"""Confidence-weighted aggregation of provider valuation estimates."""

from __future__ import annotations

import math
from typing import Sequence

from ..models import AggregateValuation, ValuationEstimate

# Reliability assigned to stored estimates that carry no confidence of their own
DEFAULT_CONFIDENCE: dict[str, float] = {
    "zillow": 0.90,
    "redfin": 0.85,
    "housecanary": 0.88,
}
FALLBACK_CONFIDENCE = 0.70


def default_confidence(
    source: str,
    overrides: dict[str, float] | None = None,
    fallback: float = FALLBACK_CONFIDENCE,
) -> float:
    """Confidence for a source, from overrides, then built-in table, then fallback."""
    key = (source or "").strip().lower()
    if overrides and key in overrides:
        return float(overrides[key])
    return DEFAULT_CONFIDENCE.get(key, fallback)


def _round_half_up(value: float) -> float:
    """Round to whole currency units, halves away from zero for positives."""
    return float(math.floor(value + 0.5))


def _weighted(values: Sequence[float], weights: Sequence[float], total: float) -> float:
    return sum(v * w for v, w in zip(values, weights)) / total


def aggregate_valuations(estimates: Sequence[ValuationEstimate]) -> AggregateValuation:
    """Combine per-source estimates into one composite valuation.

    - No estimates: all zeros, ``sources=0``.
    - One estimate: its values are returned unchanged.
    - Several: estimate, low and high are each the confidence-weighted mean
      of the inputs, rounded to whole units. Bounds are averaged, not taken as
      min/max. When every confidence is zero the plain mean is used instead.

    Inputs are not validated (``low <= estimate <= high`` is assumed).
    """
    estimates = tuple(estimates)
    if not estimates:
        return AggregateValuation(weighted_estimate=0, low=0, high=0, sources=0)

    if len(estimates) == 1:
        only = estimates[0]
        return AggregateValuation(
            weighted_estimate=only.estimate,
            low=only.low,
            high=only.high,
            sources=1,
            estimates=estimates,
        )

    weights = [e.confidence for e in estimates]
    total = sum(weights)
    if total == 0:
        weights = [1.0] * len(estimates)
        total = float(len(estimates))

    return AggregateValuation(
        weighted_estimate=_round_half_up(_weighted([e.estimate for e in estimates], weights, total)),
        low=_round_half_up(_weighted([e.low for e in estimates], weights, total)),
        high=_round_half_up(_weighted([e.high for e in estimates], weights, total)),
        sources=len(estimates),
        estimates=estimates,
    )
