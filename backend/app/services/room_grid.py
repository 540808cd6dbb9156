"""
Candidate grid for measurement points inside a room.

- XY lattice at GRID_STEP_M from ceil(min + margin) to (max - margin) inclusive, per axis.
  A cell is kept only if it is inside the polygon and >= margin from every edge.
- Z levels at the same step from margin to (height - margin) inclusive.
- Candidates = valid XY cells x Z levels (cell-major order), indexed by Z key for the search.
- Grid is derived from (vertices, height) only; rebuild it whenever the room changes.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from app.services.geometry import EPS, Point3, polygon_area
from app.services.rules import GRID_STEP_M, MARGIN_M, clearance_ok, coord_key, edge_clearance, round01

logger = logging.getLogger(__name__)


@dataclass
class RoomGrid:
    """Precomputed candidate positions for one room geometry."""

    vertices: list[tuple[float, float]]
    height: float
    xy_cells: list[tuple[float, float]] = field(default_factory=list)
    z_levels: list[float] = field(default_factory=list)
    candidates: list[Point3] = field(default_factory=list)
    by_z: dict[int, list[Point3]] = field(default_factory=dict)
    area_m2: float = 0.0
    volume_m3: float = 0.0

    @property
    def candidates_count(self) -> int:
        return len(self.candidates)


def _axis_values(lo: float, hi: float, margin: float) -> list[float]:
    """Lattice values on one axis: first multiple of the step >= lo + margin, up to hi - margin."""
    out: list[float] = []
    v = math.ceil((lo + margin) / GRID_STEP_M - EPS) * GRID_STEP_M
    while v <= hi - margin + EPS:
        out.append(round01(v))
        v += GRID_STEP_M
    return out


def build_xy_cells(vertices: list[tuple[float, float]], margin: float = MARGIN_M) -> list[tuple[float, float]]:
    """Lattice cells inside the polygon and at least margin from every edge."""
    if len(vertices) < 3:
        return []
    xs = _axis_values(min(v[0] for v in vertices), max(v[0] for v in vertices), margin)
    ys = _axis_values(min(v[1] for v in vertices), max(v[1] for v in vertices), margin)
    cells: list[tuple[float, float]] = []
    for x in xs:
        for y in ys:
            clearance = edge_clearance(x, y, vertices)
            if clearance is None or not clearance_ok(clearance, margin):
                continue
            cells.append((x, y))
    return cells


def build_z_levels(height: float, margin: float = MARGIN_M) -> list[float]:
    """Heights from margin to height - margin at the grid step."""
    return _axis_values(0.0, height, margin)


def build_room_grid(
    vertices: list[tuple[float, float]],
    height: float,
    margin: float = MARGIN_M,
) -> RoomGrid:
    """
    Build the candidate grid and Z index for a room.

    Non-finite input raises ValueError. A polygon with fewer than 3 vertices or a room
    too low for any level yields an empty grid (the search then reports infeasible).
    """
    if not math.isfinite(height):
        raise ValueError("height must be finite")
    if any(not (math.isfinite(x) and math.isfinite(y)) for x, y in vertices):
        raise ValueError("vertex coordinates must be finite")

    verts = [(float(x), float(y)) for x, y in vertices]
    xy_cells = build_xy_cells(verts, margin)
    z_levels = build_z_levels(height, margin)

    candidates: list[Point3] = []
    by_z: dict[int, list[Point3]] = {}
    for x, y in xy_cells:
        for z in z_levels:
            c = Point3(x, y, z)
            candidates.append(c)
            by_z.setdefault(coord_key(z), []).append(c)

    area = polygon_area(verts)
    grid = RoomGrid(
        vertices=verts,
        height=float(height),
        xy_cells=xy_cells,
        z_levels=sorted({c.z for c in candidates}),
        candidates=candidates,
        by_z=by_z,
        area_m2=area,
        volume_m3=area * float(height),
    )
    logger.debug(
        "Room grid: %d cells x %d levels = %d candidates",
        len(xy_cells), len(z_levels), len(candidates),
    )
    return grid
