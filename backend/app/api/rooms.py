"""Rooms API: candidate grid summary for a room geometry."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from app.schemas.rooms import RoomGridResponseSchema, RoomSchema
from app.services.grid_cache import get_room_grid

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/grid", response_model=RoomGridResponseSchema)
def room_grid_endpoint(payload: RoomSchema) -> RoomGridResponseSchema:
    """
    Candidate lattice for the room (0.1 m step, 0.5 m margins), with floor area and volume.
    """
    try:
        grid = get_room_grid(payload.vertices, payload.height)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc

    return RoomGridResponseSchema(
        xy_cells_count=len(grid.xy_cells),
        z_levels=grid.z_levels,
        candidates_count=grid.candidates_count,
        area_m2=grid.area_m2,
        volume_m3=grid.volume_m3,
    )
