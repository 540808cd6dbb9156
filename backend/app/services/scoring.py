"""Maximin ranking of candidate points."""

from __future__ import annotations

import math
from typing import Callable

from app.services.geometry import Point3, min_dist_to_set

SCORE_JITTER = 0.05


def maximin_score(
    cand: Point3,
    chosen: list[Point3],
    anchors: list[Point3],
    rng: Callable[[], float] | None = None,
) -> float:
    """
    Higher is better: 10 * min(dB, dR) + 2 * dB + dR + jitter.

    dB = distance to the nearest chosen point (nearest anchor when nothing is chosen yet),
    dR = distance to the nearest active anchor (infinite without anchors; then it adds 0).
    The min() term rewards relieving whichever spacing is currently tightest.
    Jitter (< SCORE_JITTER) only breaks ties; rng=None gives an exact score.
    """
    d_all = min_dist_to_set(cand, anchors + chosen)
    d_b = min_dist_to_set(cand, chosen) if chosen else d_all
    d_r = min_dist_to_set(cand, anchors) if anchors else math.inf
    jitter = rng() * SCORE_JITTER if rng is not None else 0.0
    return min(d_b, d_r) * 10 + d_b * 2 + (d_r if math.isfinite(d_r) else 0.0) + jitter
