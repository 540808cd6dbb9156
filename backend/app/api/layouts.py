"""Layouts API: generate measurement points, validate a layout."""

from __future__ import annotations

import itertools
import logging

from fastapi import APIRouter, HTTPException, status

from app.schemas.layouts import (
    AnchorSchema,
    LayoutGenerateRequestSchema,
    LayoutGenerateResponseSchema,
    LayoutReportSchema,
    LayoutValidateRequestSchema,
    LayoutValidateResponseSchema,
    PairDistanceSchema,
    ReplacementSchema,
    ViolationSchema,
)
from app.schemas.rooms import PointSchema
from app.services.geometry import Point3
from app.services.grid_cache import get_room_grid
from app.services.point_search import generate_points
from app.services.rules import Anchor
from app.services.validation import LayoutReport, pairwise_distances, validate_layout

logger = logging.getLogger(__name__)

router = APIRouter()

# Used when the client does not send its own counter; only ever increases.
_call_counter = itertools.count()


def _anchor_from_schema(a: AnchorSchema) -> Anchor:
    return Anchor(point=Point3(a.x, a.y, a.z), active=a.active)


def _point_to_schema(p: Point3) -> PointSchema:
    return PointSchema(x=p.x, y=p.y, z=p.z)


def _report_to_schema(report: LayoutReport) -> LayoutReportSchema:
    return LayoutReportSchema(
        valid=report.valid,
        violations=[
            ViolationSchema(
                rule=v.rule,
                subjects=list(v.subjects),
                value=v.value,
                limit=v.limit,
                axis=v.axis,
            )
            for v in report.violations
        ],
        by_subject=report.violations_by_subject(),
    )


@router.post("/generate", response_model=LayoutGenerateResponseSchema)
def generate_layout_endpoint(payload: LayoutGenerateRequestSchema) -> LayoutGenerateResponseSchema:
    """
    Place five measurement points.

    With a seed the result is deterministic. Without one, each call (call_counter) may
    return a different valid layout. feasible=false means a best-effort layout; see report.
    """
    f1 = _anchor_from_schema(payload.f1)
    f2 = _anchor_from_schema(payload.f2)
    counter = payload.call_counter if payload.call_counter is not None else next(_call_counter)

    try:
        grid = get_room_grid(payload.room.vertices, payload.room.height)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc

    try:
        result = generate_points(grid, f1, f2, seed=payload.seed, call_counter=counter)
    except Exception as exc:
        logger.exception("Point search failed.")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate layout",
        ) from exc

    report = validate_layout(grid.vertices, grid.height, f1, f2, result.points)
    if result.feasible and not report.valid:
        logger.warning("Feasible layout failed rule check: %s", report.violations_by_subject())

    return LayoutGenerateResponseSchema(
        points=[_point_to_schema(p) for p in result.points],
        feasible=result.feasible,
        seed=payload.seed,
        call_counter=counter,
        nodes_expanded=result.nodes_expanded,
        pool_size=result.pool_size,
        pool_index=result.pool_index,
        replacements=[
            ReplacementSchema(
                index=r.index,
                old=_point_to_schema(r.old),
                new=_point_to_schema(r.new),
                old_score=r.old_score,
                new_score=r.new_score,
            )
            for r in result.replacements
        ],
        report=_report_to_schema(report),
    )


@router.post("/validate", response_model=LayoutValidateResponseSchema)
def validate_layout_endpoint(payload: LayoutValidateRequestSchema) -> LayoutValidateResponseSchema:
    """Rule check and pairwise distances for a given layout (active sources + points)."""
    f1 = _anchor_from_schema(payload.f1)
    f2 = _anchor_from_schema(payload.f2)
    points = [Point3(p.x, p.y, p.z) for p in payload.points]

    report = validate_layout(payload.room.vertices, payload.room.height, f1, f2, points)

    labelled: list[tuple[str, Point3]] = []
    if f1.active:
        labelled.append(("F1", f1.point))
    if f2.active:
        labelled.append(("F2", f2.point))
    labelled.extend((f"P{i + 1}", p) for i, p in enumerate(points))

    return LayoutValidateResponseSchema(
        report=_report_to_schema(report),
        distances=[
            PairDistanceSchema(a=d.a, b=d.b, d3=d.d3, xy=d.xy, xz=d.xz, yz=d.yz)
            for d in pairwise_distances(labelled)
        ],
    )
