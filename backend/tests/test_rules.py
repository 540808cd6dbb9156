"""Tests for rule predicates and coordinate keys."""

from __future__ import annotations

import pytest

from app.services.geometry import Point3
from app.services.rules import (
    Anchor,
    active_anchor_points,
    anchor_axis_gaps,
    anchor_axis_ok,
    anchor_key_sets,
    anchor_point_ok,
    clearance_ok,
    coord_key,
    distances_ok,
    edge_clearance,
    keys_free,
    point_point_ok,
    round01,
    within_margins,
    z_within_margins,
)

RECT = [(0.0, 0.0), (3.0, 0.0), (3.0, 2.0), (0.0, 2.0)]


@pytest.mark.parametrize(
    ("value", "key"),
    [(0.5, 5), (1.04, 10), (1.05, 11), (2.449, 24), (0.0, 0), (-0.0, 0), (-0.04, 0), (-0.06, -1)],
)
def test_coord_key(value: float, key: int) -> None:
    """Half-up rounding to 0.1 m, as integer decimetres."""
    assert coord_key(value) == key


def test_round01_matches_key() -> None:
    for v in (0.30000000000000004, 0.7999999999999999, 1.25, 2.0):
        assert round01(v) == coord_key(v) / 10


def test_within_margins() -> None:
    """Margins on walls, floor and ceiling (0.5 m) in a 2.5 m room."""
    assert within_margins(Point3(0.5, 0.5, 0.5), RECT, 2.5)
    assert within_margins(Point3(2.5, 1.5, 2.0), RECT, 2.5)
    assert not within_margins(Point3(0.4, 1.0, 1.0), RECT, 2.5)
    assert not within_margins(Point3(1.0, 1.0, 0.4), RECT, 2.5)
    assert not within_margins(Point3(1.0, 1.0, 2.1), RECT, 2.5)
    assert not within_margins(Point3(4.0, 1.0, 1.0), RECT, 2.5)


def test_anchor_axis_rule_is_per_axis() -> None:
    """Each axis passes or fails on its own."""
    a, b = Point3(0.5, 1.5, 1.8), Point3(2.5, 0.5, 1.1)
    gaps = anchor_axis_gaps(a, b)
    assert gaps["x"] == pytest.approx(2.0)
    assert gaps["y"] == pytest.approx(1.0)
    assert gaps["z"] == pytest.approx(0.7)
    ok = anchor_axis_ok(a, b)
    assert ok["x"] and ok["y"]

    ok = anchor_axis_ok(Point3(0.5, 0.5, 1.0), Point3(2.0, 0.8, 1.9))
    assert ok == {"x": True, "y": False, "z": True}


def test_anchor_point_rule() -> None:
    """F–P >= 1.0 m in 3D against every anchor."""
    anchors = [Point3(0.5, 1.5, 1.8), Point3(2.5, 0.5, 1.1)]
    assert anchor_point_ok(Point3(1.5, 1.0, 1.0), anchors)
    assert not anchor_point_ok(Point3(0.6, 1.4, 1.5), anchors)
    assert anchor_point_ok(Point3(0.0, 0.0, 0.0), [])


def test_point_point_rule() -> None:
    """P–P >= 0.7 m in 3D; exactly 0.7 passes."""
    assert point_point_ok(Point3(0.0, 0.0, 0.0), [Point3(0.7, 0.0, 0.0)])
    assert not point_point_ok(Point3(0.0, 0.0, 0.0), [Point3(0.4, 0.4, 0.0)])


def test_distances_ok_combines_both_rules() -> None:
    anchors = [Point3(0.5, 1.5, 1.8)]
    chosen = [Point3(2.0, 1.0, 1.0)]
    assert distances_ok(Point3(1.2, 0.6, 1.1), anchors, chosen)
    assert not distances_ok(Point3(0.6, 1.4, 1.5), anchors, chosen)
    assert not distances_ok(Point3(2.1, 1.1, 1.1), anchors, chosen)


def test_keys_free_and_anchor_keys() -> None:
    """Anchors reserve X/Y keys but no Z key."""
    used_x, used_y = anchor_key_sets([Point3(0.5, 1.5, 1.8)])
    assert used_x == {5} and used_y == {15}
    assert not keys_free(Point3(0.5, 1.0, 1.0), used_x, used_y)
    assert not keys_free(Point3(1.0, 1.5, 1.0), used_x, used_y)
    assert keys_free(Point3(1.0, 1.0, 1.8), used_x, used_y)
    assert not keys_free(Point3(1.0, 1.0, 1.8), used_x, used_y, {18})


def test_active_anchor_points_skips_inactive() -> None:
    f1 = Anchor(Point3(0.5, 1.5, 1.8), active=True)
    f2 = Anchor(Point3(2.5, 0.5, 1.1), active=False)
    assert active_anchor_points(f1, f2) == [f1.point]
    assert active_anchor_points(Anchor(f1.point, False), f2) == []


def test_edge_clearance_and_z_margins() -> None:
    """Clearance is None outside, the nearest-wall distance inside."""
    assert edge_clearance(4.0, 1.0, RECT) is None
    assert edge_clearance(0.5, 1.2, RECT) == pytest.approx(0.5)
    assert clearance_ok(0.5)
    assert not clearance_ok(0.49)
    assert z_within_margins(0.5, 2.5) and z_within_margins(2.0, 2.5)
    assert not z_within_margins(2.1, 2.5)
