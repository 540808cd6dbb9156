"""Tests for geometry primitives (distances, containment, edge distance, area)."""

from __future__ import annotations

import math

import pytest

from app.services.geometry import (
    Point3,
    dist3d,
    dist_point_to_segment,
    min_dist_to_edges,
    min_dist_to_set,
    planar_distances,
    point_in_polygon,
    polygon_area,
)

RECT = [(0.0, 0.0), (3.0, 0.0), (3.0, 2.0), (0.0, 2.0)]
# L-shaped room: 4 x 4 with the top-right 2 x 2 quadrant removed
L_SHAPE = [(0.0, 0.0), (4.0, 0.0), (4.0, 2.0), (2.0, 2.0), (2.0, 4.0), (0.0, 4.0)]


def test_dist3d_pythagorean() -> None:
    """3-4-12 box diagonal is 13."""
    assert dist3d(Point3(0, 0, 0), Point3(3, 4, 12)) == pytest.approx(13.0)


def test_dist3d_symmetric_and_zero() -> None:
    """Distance is symmetric and zero for identical points."""
    a, b = Point3(1.2, -0.5, 2.0), Point3(-0.3, 0.7, 1.1)
    assert dist3d(a, b) == dist3d(b, a)
    assert dist3d(a, a) == 0.0


def test_planar_distances() -> None:
    """XY, XZ and YZ projections of a 3-4-12 offset."""
    d = planar_distances(Point3(0, 0, 0), Point3(3, 4, 12))
    assert d.xy == pytest.approx(5.0)
    assert d.xz == pytest.approx(math.hypot(3, 12))
    assert d.yz == pytest.approx(math.hypot(4, 12))


def test_polygon_area_rectangle_and_winding() -> None:
    """Shoelace area is 6 m² for the 3 x 2 room in either winding order."""
    assert polygon_area(RECT) == pytest.approx(6.0)
    assert polygon_area(list(reversed(RECT))) == pytest.approx(6.0)


def test_polygon_area_l_shape() -> None:
    """L-shape: 16 - 4 = 12 m²."""
    assert polygon_area(L_SHAPE) == pytest.approx(12.0)


def test_polygon_area_degenerate() -> None:
    """Fewer than 3 vertices has no area."""
    assert polygon_area([(0.0, 0.0), (1.0, 1.0)]) == 0.0


@pytest.mark.parametrize(
    ("px", "py", "expected"),
    [
        (1.5, 1.0, True),
        (0.1, 1.9, True),
        (-0.1, 1.0, False),
        (3.5, 1.0, False),
        (1.5, 2.5, False),
    ],
)
def test_point_in_polygon_rectangle(px: float, py: float, expected: bool) -> None:
    """Ray casting on the rectangle."""
    assert point_in_polygon(px, py, RECT) is expected


def test_point_in_polygon_concave_notch() -> None:
    """Point in the removed quadrant of the L-shape is outside."""
    assert point_in_polygon(1.0, 3.0, L_SHAPE) is True
    assert point_in_polygon(3.0, 1.0, L_SHAPE) is True
    assert point_in_polygon(3.0, 3.0, L_SHAPE) is False


def test_point_in_polygon_on_horizontal_edge_level() -> None:
    """Ray at the height of a horizontal edge does not blow up and stays consistent."""
    assert point_in_polygon(1.0, 2.0, L_SHAPE) is True
    assert point_in_polygon(3.0, 2.0, L_SHAPE) is False


def test_point_in_polygon_too_few_vertices() -> None:
    assert point_in_polygon(0.0, 0.0, [(0.0, 0.0), (1.0, 0.0)]) is False


def test_dist_point_to_segment_projection_and_clamp() -> None:
    """Interior projection, clamping to both ends, zero-length segment."""
    assert dist_point_to_segment(1.0, 1.0, 0.0, 0.0, 2.0, 0.0) == pytest.approx(1.0)
    assert dist_point_to_segment(-1.0, 0.0, 0.0, 0.0, 2.0, 0.0) == pytest.approx(1.0)
    assert dist_point_to_segment(5.0, 4.0, 0.0, 0.0, 2.0, 0.0) == pytest.approx(5.0)
    assert dist_point_to_segment(3.0, 4.0, 0.0, 0.0, 0.0, 0.0) == pytest.approx(5.0)


def test_min_dist_to_edges() -> None:
    """Nearest wall distance inside the rectangle and near the L-shape's inner corner."""
    assert min_dist_to_edges(1.5, 1.0, RECT) == pytest.approx(1.0)
    assert min_dist_to_edges(0.5, 1.2, RECT) == pytest.approx(0.5)
    assert min_dist_to_edges(1.5, 3.0, L_SHAPE) == pytest.approx(0.5)
    assert min_dist_to_edges(1.5, 1.5, L_SHAPE) == pytest.approx(math.sqrt(0.5))


def test_min_dist_to_set() -> None:
    """Nearest of several points; infinity for an empty set."""
    p = Point3(0, 0, 0)
    assert min_dist_to_set(p, [Point3(3, 0, 0), Point3(0, 2, 0)]) == pytest.approx(2.0)
    assert min_dist_to_set(p, []) == math.inf
