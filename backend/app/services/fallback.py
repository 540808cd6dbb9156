"""
Best-effort layout when the search finds no valid solution.

Greedy: fill the slots one by one from a shuffled candidate list. For each slot, try
filters from strict to loose and use the first one that matches anything:
  1. keys unique + F–P + P–P
  2. keys unique + F–P
  3. keys unique
  4. anything
Among matches, take the top FALLBACK_TOP by maximin score and pick one uniformly.
Result may violate rules; the caller reports it as not feasible.
"""

from __future__ import annotations

import logging
from typing import Callable

from app.services.geometry import Point3
from app.services.rng import Mulberry32, shuffle
from app.services.rules import anchor_key_sets, anchor_point_ok, coord_key, keys_free, point_point_ok
from app.services.scoring import maximin_score

logger = logging.getLogger(__name__)

FALLBACK_TOP = 20


def fallback_points(
    candidates: list[Point3],
    anchors: list[Point3],
    rng: Mulberry32,
    count: int = 5,
) -> list[Point3]:
    """Degraded layout of exactly `count` points (empty if there are no candidates)."""
    if not candidates:
        return []
    used_x, used_y = anchor_key_sets(anchors)
    used_z: set[int] = set()
    chosen: list[Point3] = []
    pool = shuffle(candidates, rng)

    levels: list[Callable[[Point3], bool]] = [
        lambda c: keys_free(c, used_x, used_y, used_z) and anchor_point_ok(c, anchors) and point_point_ok(c, chosen),
        lambda c: keys_free(c, used_x, used_y, used_z) and anchor_point_ok(c, anchors),
        lambda c: keys_free(c, used_x, used_y, used_z),
        lambda c: True,
    ]

    for _ in range(count):
        picked: Point3 | None = None
        for level, ok in enumerate(levels, start=1):
            scored = [(c, maximin_score(c, chosen, anchors, rng)) for c in pool if ok(c)]
            if not scored:
                continue
            scored.sort(key=lambda item: item[1], reverse=True)
            top = scored[:FALLBACK_TOP]
            picked = top[rng.randint_below(len(top))][0]
            if level > 1:
                logger.debug("Fallback slot %d filled at relaxation level %d", len(chosen) + 1, level)
            break
        if picked is not None:
            chosen.append(picked)
            used_x.add(coord_key(picked.x))
            used_y.add(coord_key(picked.y))
            used_z.add(coord_key(picked.z))

    while len(chosen) < count:
        chosen.append(candidates[rng.randint_below(len(candidates))])
    return chosen[:count]
