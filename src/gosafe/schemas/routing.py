"""Navigation request/response schemas."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field


class CoordinateModel(BaseModel):
    latitude: float
    longitude: float


class RouteRequest(BaseModel):
    start: CoordinateModel
    end: CoordinateModel
    session_id: str = Field(default="default", min_length=1, description="Navigation session the request belongs to.")


class RouteSelectionModel(BaseModel):
    session_id: str
    sequence: int
    verdict: Literal["safe", "danger"]
    hazard_hit_count: int
    source: Literal["direct", "detour"]
    distance_m: float
    duration_s: float
    provider_duration_s: float
    distance_label: str
    duration_label: str
    candidate_count: int
    coordinates: List[CoordinateModel]
