"""Hazard report API schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import HazardCategory
from .routing import CoordinateModel


class ReportCreateRequest(BaseModel):
    location: CoordinateModel
    category: HazardCategory
    note: str = Field(default="", max_length=500)


class ReportModel(BaseModel):
    id: int
    location: CoordinateModel
    category: HazardCategory
    category_label: str
    color: str
    note: str
    owned_by_current_user: bool


class ReportListResponse(BaseModel):
    items: List[ReportModel]
    total: int
    pending_undo_id: Optional[int] = None


class UndoResponse(BaseModel):
    undone: bool


class CategoryModel(BaseModel):
    id: HazardCategory
    label: str
    color: str
