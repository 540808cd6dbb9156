"""
Measurement point search: five points P1..P5 inside a room, away from the sources F1/F2.

Design:
- Candidates come from the room grid (margins already satisfied), indexed by Z key.
- Preferred heights 1.0, 1.1, ..., 1.4 m for P1..P5. For each slot the available Z levels
  are ordered by |level - target| + tiny jitter; without a seed the order is also rotated
  by a random offset so repeated clicks start from different branches.
- Depth-first search, slot by slot: up to TOP_Z levels per slot; on each level keep the
  candidates with free X/Y keys that pass F–P and P–P, rank them by maximin score + jitter
  and try the best TOP_CANDIDATES. Z keys are unique among points (anchors do not reserve Z).
- Complete layouts go into a pool (MAX_SOLUTIONS); the search stops when the pool is full
  or after MAX_NODES node expansions, keeping what it collected.
- Pick: seeded -> pool[0]; unseeded -> pool[call_counter % len(pool)]. The pick is refined
  locally. Empty pool -> degraded fallback, reported as not feasible.
- Committed coordinate keys are pushed on descent and popped on backtrack (no set copies).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from app.services.fallback import fallback_points
from app.services.geometry import Point3
from app.services.refinement import Replacement, refine_points
from app.services.rng import Mulberry32, make_rng
from app.services.room_grid import RoomGrid
from app.services.rules import (
    Anchor,
    active_anchor_points,
    anchor_key_sets,
    coord_key,
    distances_ok,
    round01,
)
from app.services.scoring import maximin_score

logger = logging.getLogger(__name__)

POINT_COUNT = 5
TARGET_HEIGHTS_M = tuple(round01(z) for z in (1.0, 1.1, 1.2, 1.3, 1.4))
TOP_Z = 18
TOP_CANDIDATES = 22
MAX_SOLUTIONS = 20
MAX_NODES = 60_000
Z_JITTER = 0.001
RANK_JITTER = 0.02


@dataclass
class LayoutResult:
    """Search outcome. feasible=True guarantees every rule holds for `points`."""

    points: list[Point3] = field(default_factory=list)
    feasible: bool = False
    nodes_expanded: int = 0
    pool_size: int = 0
    pool_index: int | None = None
    replacements: list[Replacement] = field(default_factory=list)


@dataclass
class _SearchState:
    # Z key -> [(candidate, x key, y key)], keys computed once per invocation
    levels: dict[int, list[tuple[Point3, int, int]]]
    z_options: list[list[float]]
    anchors: list[Point3]
    rng: Mulberry32
    used_x: set[int]
    used_y: set[int]
    used_z: set[int] = field(default_factory=set)
    chosen: list[Point3] = field(default_factory=list)
    solutions: list[list[Point3]] = field(default_factory=list)
    nodes: int = 0
    max_nodes: int = MAX_NODES
    max_solutions: int = MAX_SOLUTIONS
    aborted: bool = False


def z_preferences(z_levels: list[float], rng: Mulberry32, rotate: bool) -> list[list[float]]:
    """Per slot: Z levels ordered by closeness to the slot's target height (+ jitter)."""
    options: list[list[float]] = []
    for target in TARGET_HEIGHTS_M:
        keyed = [(z, abs(z - target) + rng() * Z_JITTER) for z in z_levels]
        keyed.sort(key=lambda item: item[1])
        ordered = [z for z, _ in keyed]
        if rotate and ordered:
            rot = rng.randint_below(len(ordered))
            ordered = ordered[rot:] + ordered[:rot]
        options.append(ordered)
    return options


def _ranked_pool(state: _SearchState, zk: int) -> list[Point3]:
    """Best TOP_CANDIDATES valid candidates on one Z level, best first."""
    free = [
        c for c, kx, ky in state.levels.get(zk, [])
        if kx not in state.used_x and ky not in state.used_y
    ]
    if not free:
        return []
    valid = [c for c in free if distances_ok(c, state.anchors, state.chosen)]
    if not valid:
        return []
    scored = [
        (c, maximin_score(c, state.chosen, state.anchors, state.rng) + state.rng() * RANK_JITTER)
        for c in valid
    ]
    scored.sort(key=lambda item: item[1], reverse=True)
    return [c for c, _ in scored[:TOP_CANDIDATES]]


def _dfs(state: _SearchState, slot: int) -> bool:
    """Fill slot `slot` and deeper. True means stop: pool full or node budget spent."""
    if state.nodes >= state.max_nodes:
        state.aborted = True
        return True
    state.nodes += 1

    if slot == POINT_COUNT:
        state.solutions.append(list(state.chosen))
        return len(state.solutions) >= state.max_solutions

    for z in state.z_options[slot][:TOP_Z]:
        zk = coord_key(z)
        if zk in state.used_z:
            continue
        for c in _ranked_pool(state, zk):
            kx, ky = coord_key(c.x), coord_key(c.y)
            state.used_x.add(kx)
            state.used_y.add(ky)
            state.used_z.add(zk)
            state.chosen.append(c)
            done = _dfs(state, slot + 1)
            state.chosen.pop()
            state.used_z.discard(zk)
            state.used_y.discard(ky)
            state.used_x.discard(kx)
            if done:
                return True
    return False


def generate_points(
    grid: RoomGrid,
    f1: Anchor,
    f2: Anchor,
    *,
    seed: str | None = None,
    call_counter: int = 0,
    now_ms: int | None = None,
    max_nodes: int = MAX_NODES,
) -> LayoutResult:
    """
    Place P1..P5 in the room.

    - seed (non-empty): deterministic, always the first pooled solution.
    - no seed: RNG from wall clock (now_ms) XOR call_counter; the returned pool entry
      rotates with call_counter.
    - No candidates -> empty, not feasible. No solution -> fallback, not feasible.
    """
    if not grid.candidates:
        return LayoutResult(points=[], feasible=False)

    seeded = bool(seed)
    rng = make_rng(seed, call_counter, now_ms)
    z_options = z_preferences(grid.z_levels, rng, rotate=not seeded)
    anchors = active_anchor_points(f1, f2)
    used_x, used_y = anchor_key_sets(anchors)

    state = _SearchState(
        levels={
            zk: [(c, coord_key(c.x), coord_key(c.y)) for c in level]
            for zk, level in grid.by_z.items()
        },
        z_options=z_options,
        anchors=anchors,
        rng=rng,
        used_x=used_x,
        used_y=used_y,
        max_nodes=max_nodes,
    )
    _dfs(state, 0)

    if state.aborted:
        logger.info(
            "Point search hit node budget (%d) with %d solution(s)",
            state.max_nodes, len(state.solutions),
        )

    if state.solutions:
        idx = 0 if seeded else call_counter % len(state.solutions)
        refined = refine_points(state.solutions[idx], grid.by_z, anchors, rng)
        logger.debug(
            "Point search: %d nodes, pool %d, picked %d, %d refinement swap(s)",
            state.nodes, len(state.solutions), idx, len(refined.replacements),
        )
        return LayoutResult(
            points=refined.points,
            feasible=True,
            nodes_expanded=state.nodes,
            pool_size=len(state.solutions),
            pool_index=idx,
            replacements=refined.replacements,
        )

    logger.info("No valid layout after %d nodes; using fallback", state.nodes)
    points = fallback_points(grid.candidates, anchors, rng, count=POINT_COUNT)
    return LayoutResult(
        points=points,
        feasible=False,
        nodes_expanded=state.nodes,
        pool_size=0,
        pool_index=None,
    )
