"""Pydantic schemas for room geometry and the candidate grid summary."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

MAX_ROOM_SPAN_M = 30.0
# upper bound on lattice points (XY cells x Z levels at 0.1 m) one request may build
MAX_GRID_POINTS = 400_000


class PointSchema(BaseModel):
    """Position in metres."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    x: float
    y: float
    z: float


class RoomSchema(BaseModel):
    """Room: floor polygon (XY, metres) and ceiling height."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    vertices: list[tuple[float, float]] = Field(..., min_length=3, max_length=64)
    height: float = Field(..., gt=0.0, le=50.0)

    @model_validator(mode="after")
    def room_size_within_limits(self) -> "RoomSchema":
        xs = [x for x, _ in self.vertices]
        ys = [y for _, y in self.vertices]
        span_x = max(xs) - min(xs)
        span_y = max(ys) - min(ys)
        if span_x > MAX_ROOM_SPAN_M or span_y > MAX_ROOM_SPAN_M:
            raise ValueError(f"Room extent must not exceed {MAX_ROOM_SPAN_M:g} m per axis")
        lattice = (span_x * 10 + 1) * (span_y * 10 + 1) * (self.height * 10 + 1)
        if lattice > MAX_GRID_POINTS:
            raise ValueError("Room too large: reduce floor area or height")
        return self


class RoomGridResponseSchema(BaseModel):
    """Candidate grid summary and room metrics."""

    xy_cells_count: int
    z_levels: list[float]
    candidates_count: int
    area_m2: float
    volume_m3: float
