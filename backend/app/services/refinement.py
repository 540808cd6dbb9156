"""
Local refinement of a chosen layout.

Two passes; in each pass every point i may be swapped for another candidate on the same
Z level that keeps all rules satisfied (X/Y keys unique against the other points and the
active anchors, F–P and P–P distances) and whose maximin score against the other points
is strictly higher. With an RNG the comparison uses jittered scores (the ones recorded in
Replacement). Points are replaced in place; the set is never extended or reordered.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from app.services.geometry import Point3
from app.services.rules import coord_key, distances_ok
from app.services.scoring import maximin_score

REFINE_PASSES = 2


@dataclass
class Replacement:
    """One accepted swap: scores are taken against the same fixed other points."""

    index: int
    old: Point3
    new: Point3
    old_score: float
    new_score: float
    fixed: list[Point3] = field(default_factory=list)


@dataclass
class RefineResult:
    points: list[Point3]
    replacements: list[Replacement] = field(default_factory=list)


def _alternatives(
    i: int,
    points: list[Point3],
    by_z: dict[int, list[Point3]],
    anchors: list[Point3],
) -> list[Point3]:
    """Same-level candidates that could replace points[i] without breaking a rule."""
    current = points[i]
    others = points[:i] + points[i + 1 :]
    taken_x = {coord_key(q.x) for q in others} | {coord_key(r.x) for r in anchors}
    taken_y = {coord_key(q.y) for q in others} | {coord_key(r.y) for r in anchors}
    cur_x, cur_y = coord_key(current.x), coord_key(current.y)

    pool: list[Point3] = []
    for c in by_z.get(coord_key(current.z), []):
        cx, cy = coord_key(c.x), coord_key(c.y)
        if cx == cur_x and cy == cur_y:
            continue
        if cx in taken_x or cy in taken_y:
            continue
        if not distances_ok(c, anchors, others):
            continue
        pool.append(c)
    return pool


def refine_points(
    points: list[Point3],
    by_z: dict[int, list[Point3]],
    anchors: list[Point3],
    rng: Callable[[], float] | None = None,
    passes: int = REFINE_PASSES,
) -> RefineResult:
    """Coordinate-descent style improvement of a valid layout (see module docstring)."""
    best = list(points)
    replacements: list[Replacement] = []
    for _ in range(passes):
        for i in range(len(best)):
            pool = _alternatives(i, best, by_z, anchors)
            others = best[:i] + best[i + 1 :]
            current = best[i]
            score = maximin_score(current, others, anchors, rng)
            start_score = score
            pick = current
            for c in pool:
                sc = maximin_score(c, others, anchors, rng)
                if sc > score:
                    score = sc
                    pick = c
            if pick is not current:
                best[i] = pick
                replacements.append(
                    Replacement(
                        index=i,
                        old=current,
                        new=pick,
                        old_score=start_score,
                        new_score=score,
                        fixed=others,
                    )
                )
    return RefineResult(points=best, replacements=replacements)
