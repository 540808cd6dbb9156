"""
Separation and margin rules for source anchors (F1, F2) and measurement points (P1..P5).

- Margin: every position keeps MARGIN_M from every wall (XY) and from floor and ceiling (Z).
- F–P: 3D distance >= MIN_ANCHOR_POINT_M for every active anchor and every point.
- P–P: 3D distance >= MIN_POINT_POINT_M between points.
- F–F: |dx|, |dy|, |dz| >= MIN_ANCHOR_AXIS_M, each axis checked on its own (only when both active).
- Uniqueness: X and Y keys unique across active anchors and points; Z keys unique among points only.

Coordinate key = coordinate rounded half-up to 0.1 m, stored as integer decimetres.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from app.services.geometry import EPS, Point3, dist3d, min_dist_to_edges, point_in_polygon

GRID_STEP_M = 0.1
MARGIN_M = 0.5
MIN_ANCHOR_POINT_M = 1.0
MIN_POINT_POINT_M = 0.7
MIN_ANCHOR_AXIS_M = 0.7

AXES = ("x", "y", "z")


@dataclass(frozen=True)
class Anchor:
    """Source position with its activation flag. Inactive anchors take part in no rule."""

    point: Point3
    active: bool = True


def active_anchor_points(*anchors: Anchor) -> list[Point3]:
    """Points of the active anchors, in argument order."""
    return [a.point for a in anchors if a.active]


def round01(value: float) -> float:
    """Round half-up to 0.1 m."""
    return math.floor(value * 10 + 0.5) / 10


def coord_key(value: float) -> int:
    """Coordinate key used for uniqueness checks."""
    return int(math.floor(value * 10 + 0.5))


def edge_clearance(x: float, y: float, vertices: list[tuple[float, float]]) -> float | None:
    """Distance to the nearest wall, or None when (x, y) is outside the polygon."""
    if not point_in_polygon(x, y, vertices):
        return None
    return min_dist_to_edges(x, y, vertices)


def clearance_ok(clearance: float, margin: float = MARGIN_M) -> bool:
    return clearance >= margin - EPS


def z_within_margins(z: float, height: float, margin: float = MARGIN_M) -> bool:
    """At least margin above the floor and below the ceiling."""
    return margin - EPS <= z <= height - margin + EPS


def within_margins(p: Point3, vertices: list[tuple[float, float]], height: float, margin: float = MARGIN_M) -> bool:
    """Inside the polygon, >= margin from every edge, and >= margin from floor and ceiling."""
    clearance = edge_clearance(p.x, p.y, vertices)
    if clearance is None or not clearance_ok(clearance, margin):
        return False
    return z_within_margins(p.z, height, margin)


def anchor_axis_gaps(a: Point3, b: Point3) -> dict[str, float]:
    """Absolute per-axis separation between two anchors."""
    return {"x": abs(a.x - b.x), "y": abs(a.y - b.y), "z": abs(a.z - b.z)}


def anchor_axis_ok(a: Point3, b: Point3, min_axis: float = MIN_ANCHOR_AXIS_M) -> dict[str, bool]:
    """Per-axis F–F rule; each axis passes or fails independently."""
    return {axis: gap >= min_axis for axis, gap in anchor_axis_gaps(a, b).items()}


def anchor_point_ok(p: Point3, anchors: Iterable[Point3], min_dist: float = MIN_ANCHOR_POINT_M) -> bool:
    """F–P rule for one point against all given (active) anchors."""
    return all(dist3d(p, r) >= min_dist for r in anchors)


def point_point_ok(p: Point3, others: Iterable[Point3], min_dist: float = MIN_POINT_POINT_M) -> bool:
    """P–P rule for one point against all given points."""
    return all(dist3d(p, q) >= min_dist for q in others)


def distances_ok(p: Point3, anchors: Iterable[Point3], chosen: Iterable[Point3]) -> bool:
    """Both distance rules: F–P against anchors and P–P against already chosen points."""
    return anchor_point_ok(p, anchors) and point_point_ok(p, chosen)


def keys_free(
    p: Point3,
    used_x: set[int],
    used_y: set[int],
    used_z: set[int] | None = None,
) -> bool:
    """True if p's X and Y keys (and Z key when used_z is given) are not committed yet."""
    if coord_key(p.x) in used_x or coord_key(p.y) in used_y:
        return False
    if used_z is not None and coord_key(p.z) in used_z:
        return False
    return True


def anchor_key_sets(anchors: Iterable[Point3]) -> tuple[set[int], set[int]]:
    """X and Y keys reserved by active anchors. Anchors never reserve a Z key."""
    used_x: set[int] = set()
    used_y: set[int] = set()
    for r in anchors:
        used_x.add(coord_key(r.x))
        used_y.add(coord_key(r.y))
    return used_x, used_y
