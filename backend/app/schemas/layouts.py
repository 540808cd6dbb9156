"""Pydantic schemas for layout generation and validation (request/response)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.schemas.rooms import PointSchema, RoomSchema


class AnchorSchema(PointSchema):
    """Source position (F1/F2) with activation flag."""

    active: bool = True


class LayoutGenerateRequestSchema(BaseModel):
    """POST body: generate measurement points for a room and two sources."""

    model_config = ConfigDict(extra="forbid")

    room: RoomSchema
    f1: AnchorSchema
    f2: AnchorSchema
    seed: str | None = Field(None, max_length=128)
    call_counter: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def blank_seed_means_unseeded(self) -> "LayoutGenerateRequestSchema":
        if self.seed is not None and not self.seed.strip():
            self.seed = None
        return self


class ReplacementSchema(BaseModel):
    """Refinement swap applied to the returned layout."""

    index: int
    old: PointSchema
    new: PointSchema
    old_score: float
    new_score: float


class ViolationSchema(BaseModel):
    rule: str
    subjects: list[str]
    value: float | None = None
    limit: float | None = None
    axis: str | None = None


class LayoutReportSchema(BaseModel):
    """Rule check result; by_subject maps labels (F1, P3, ...) to broken rule names."""

    valid: bool
    violations: list[ViolationSchema]
    by_subject: dict[str, list[str]]


class LayoutGenerateResponseSchema(BaseModel):
    """Response: points, feasibility, search diagnostics and rule check."""

    points: list[PointSchema]
    feasible: bool
    seed: str | None
    call_counter: int
    nodes_expanded: int
    pool_size: int
    pool_index: int | None
    replacements: list[ReplacementSchema]
    report: LayoutReportSchema


class LayoutValidateRequestSchema(BaseModel):
    """POST body: check an existing layout."""

    model_config = ConfigDict(extra="forbid")

    room: RoomSchema
    f1: AnchorSchema
    f2: AnchorSchema
    points: list[PointSchema] = Field(default_factory=list, max_length=20)


class PairDistanceSchema(BaseModel):
    a: str
    b: str
    d3: float
    xy: float
    xz: float
    yz: float


class LayoutValidateResponseSchema(BaseModel):
    report: LayoutReportSchema
    distances: list[PairDistanceSchema]
