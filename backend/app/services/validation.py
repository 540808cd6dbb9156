"""
Rule check for a complete layout (sources F1/F2 + points P1..Pn).

Returns structured violations, one entry per broken rule instance, so clients can
highlight positions and build their own messages. Subjects are labels "F1", "F2", "P1"...
Inactive anchors are skipped everywhere.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field

from app.services.geometry import Point3, dist3d, planar_distances
from app.services.rules import (
    AXES,
    MARGIN_M,
    MIN_ANCHOR_AXIS_M,
    MIN_ANCHOR_POINT_M,
    MIN_POINT_POINT_M,
    Anchor,
    anchor_axis_gaps,
    anchor_axis_ok,
    anchor_point_ok,
    clearance_ok,
    coord_key,
    edge_clearance,
    point_point_ok,
    z_within_margins,
)

OUTSIDE_POLYGON = "outside_polygon"
EDGE_MARGIN = "edge_margin"
Z_MARGIN = "z_margin"
DUPLICATE_X = "duplicate_x"
DUPLICATE_Y = "duplicate_y"
DUPLICATE_Z = "duplicate_z"
ANCHOR_AXIS_SEPARATION = "anchor_axis_separation"
ANCHOR_POINT_DISTANCE = "anchor_point_distance"
POINT_POINT_DISTANCE = "point_point_distance"


@dataclass
class Violation:
    rule: str
    subjects: tuple[str, ...]
    value: float | None = None
    limit: float | None = None
    axis: str | None = None


@dataclass
class LayoutReport:
    violations: list[Violation] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.violations

    def violations_by_subject(self) -> dict[str, list[str]]:
        """Rule names per subject label, without duplicates, in first-seen order."""
        out: dict[str, list[str]] = {}
        for v in self.violations:
            for s in v.subjects:
                rules = out.setdefault(s, [])
                if v.rule not in rules:
                    rules.append(v.rule)
        return out


@dataclass
class PairDistance:
    """3D and planar distances between two labelled positions."""

    a: str
    b: str
    d3: float
    xy: float
    xz: float
    yz: float


def _labelled_anchors(f1: Anchor, f2: Anchor) -> list[tuple[str, Point3]]:
    out: list[tuple[str, Point3]] = []
    if f1.active:
        out.append(("F1", f1.point))
    if f2.active:
        out.append(("F2", f2.point))
    return out


def _check_margins(
    label: str,
    p: Point3,
    vertices: list[tuple[float, float]],
    height: float,
    report: LayoutReport,
) -> None:
    clearance = edge_clearance(p.x, p.y, vertices)
    if clearance is None:
        report.violations.append(Violation(OUTSIDE_POLYGON, (label,)))
    elif not clearance_ok(clearance):
        report.violations.append(Violation(EDGE_MARGIN, (label,), value=clearance, limit=MARGIN_M))
    if not z_within_margins(p.z, height):
        report.violations.append(Violation(Z_MARGIN, (label,), value=p.z, limit=MARGIN_M))


def _check_duplicates(
    axis: str,
    labelled: list[tuple[str, Point3]],
    report: LayoutReport,
) -> None:
    groups: dict[int, list[str]] = defaultdict(list)
    for label, p in labelled:
        groups[coord_key(getattr(p, axis))].append(label)
    for key, labels in groups.items():
        if len(labels) > 1:
            report.violations.append(
                Violation(f"duplicate_{axis}", tuple(labels), value=key / 10, axis=axis)
            )


def validate_layout(
    vertices: list[tuple[float, float]],
    height: float,
    f1: Anchor,
    f2: Anchor,
    points: list[Point3],
) -> LayoutReport:
    """Check every rule for the active anchors and the given points."""
    report = LayoutReport()
    anchors = _labelled_anchors(f1, f2)
    labelled_points = [(f"P{i + 1}", p) for i, p in enumerate(points)]

    for label, p in anchors + labelled_points:
        _check_margins(label, p, vertices, height, report)

    # X/Y unique across anchors and points; Z only among points
    _check_duplicates("x", anchors + labelled_points, report)
    _check_duplicates("y", anchors + labelled_points, report)
    _check_duplicates("z", labelled_points, report)

    if f1.active and f2.active:
        gaps = anchor_axis_gaps(f1.point, f2.point)
        axis_ok = anchor_axis_ok(f1.point, f2.point)
        for axis in AXES:
            if not axis_ok[axis]:
                report.violations.append(
                    Violation(
                        ANCHOR_AXIS_SEPARATION, ("F1", "F2"),
                        value=gaps[axis], limit=MIN_ANCHOR_AXIS_M, axis=axis,
                    )
                )

    for p_label, p in labelled_points:
        for a_label, a in anchors:
            if not anchor_point_ok(p, [a]):
                report.violations.append(
                    Violation(ANCHOR_POINT_DISTANCE, (a_label, p_label), value=dist3d(p, a), limit=MIN_ANCHOR_POINT_M)
                )

    for i in range(len(labelled_points)):
        for j in range(i + 1, len(labelled_points)):
            (la, a), (lb, b) = labelled_points[i], labelled_points[j]
            if not point_point_ok(a, [b]):
                report.violations.append(
                    Violation(POINT_POINT_DISTANCE, (la, lb), value=dist3d(a, b), limit=MIN_POINT_POINT_M)
                )

    return report


def pairwise_distances(labelled: list[tuple[str, Point3]]) -> list[PairDistance]:
    """All pairs (i < j) with 3D and XY/XZ/YZ distances."""
    out: list[PairDistance] = []
    for i in range(len(labelled)):
        for j in range(i + 1, len(labelled)):
            (la, a), (lb, b) = labelled[i], labelled[j]
            planar = planar_distances(a, b)
            out.append(PairDistance(a=la, b=lb, d3=dist3d(a, b), xy=planar.xy, xz=planar.xz, yz=planar.yz))
    return out
