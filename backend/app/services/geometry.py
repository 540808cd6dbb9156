"""
Geometry primitives for room layouts.

- Units: metres. Room outline is a polygon in the XY (floor) plane; Z is height above floor.
- Polygon: ordered list of (x, y) vertices, closed implicitly (last vertex joins the first).
  Winding order is irrelevant: area uses the absolute shoelace value, containment uses ray casting.
- All functions are pure and total over finite input.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

EPS = 1e-9


@dataclass(frozen=True)
class Point3:
    """Point in room coordinates (metres)."""

    x: float
    y: float
    z: float


@dataclass(frozen=True)
class PlanarDistances:
    """Distances between two points projected onto the three principal planes."""

    xy: float
    xz: float
    yz: float


def dist3d(a: Point3, b: Point3) -> float:
    """Euclidean distance in 3D."""
    dx = a.x - b.x
    dy = a.y - b.y
    dz = a.z - b.z
    return math.sqrt(dx * dx + dy * dy + dz * dz)


def planar_distances(a: Point3, b: Point3) -> PlanarDistances:
    """Distances between a and b in the XY, XZ and YZ planes."""
    dx = a.x - b.x
    dy = a.y - b.y
    dz = a.z - b.z
    return PlanarDistances(xy=math.hypot(dx, dy), xz=math.hypot(dx, dz), yz=math.hypot(dy, dz))


def polygon_area(vertices: list[tuple[float, float]]) -> float:
    """Shoelace formula. Returns area in m² (absolute value)."""
    if len(vertices) < 3:
        return 0.0
    n = len(vertices)
    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += vertices[i][0] * vertices[j][1]
        area -= vertices[j][0] * vertices[i][1]
    return abs(area) / 2.0


def point_in_polygon(px: float, py: float, vertices: list[tuple[float, float]]) -> bool:
    """
    Ray casting: odd number of crossings = inside.

    The crossing abscissa divides by (yj - yi) + EPS, so horizontal edges never divide by zero.
    """
    n = len(vertices)
    if n < 3:
        return False
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = vertices[i]
        xj, yj = vertices[j]
        if (yi > py) != (yj > py) and px < (xj - xi) * (py - yi) / ((yj - yi) + EPS) + xi:
            inside = not inside
        j = i
    return inside


def dist_point_to_segment(
    px: float, py: float,
    ax: float, ay: float, bx: float, by: float,
) -> float:
    """Distance from (px, py) to segment A-B; projection clamped to the segment."""
    vx = bx - ax
    vy = by - ay
    c1 = vx * (px - ax) + vy * (py - ay)
    if c1 <= 0:
        return math.hypot(px - ax, py - ay)
    c2 = vx * vx + vy * vy
    if c2 <= EPS:
        return math.hypot(px - ax, py - ay)
    if c1 >= c2:
        return math.hypot(px - bx, py - by)
    t = c1 / c2
    return math.hypot(px - (ax + t * vx), py - (ay + t * vy))


def min_dist_to_edges(px: float, py: float, vertices: list[tuple[float, float]]) -> float:
    """Minimum distance from (px, py) to any polygon edge. Infinity for an empty polygon."""
    n = len(vertices)
    best = math.inf
    for i in range(n):
        x1, y1 = vertices[i]
        x2, y2 = vertices[(i + 1) % n]
        best = min(best, dist_point_to_segment(px, py, x1, y1, x2, y2))
    return best


def min_dist_to_set(p: Point3, others: list[Point3]) -> float:
    """Minimum 3D distance from p to any point in others (infinity if empty)."""
    best = math.inf
    for q in others:
        best = min(best, dist3d(p, q))
    return best
