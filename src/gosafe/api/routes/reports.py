"""Hazard report endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...models.domain import Coordinate, HazardCategory, HazardReport
from ...schemas.reports import (
    CategoryModel,
    ReportCreateRequest,
    ReportListResponse,
    ReportModel,
    UndoResponse,
)
from ...schemas.routing import CoordinateModel
from ...services.outputs.formatter import CATEGORY_COLORS, CATEGORY_LABELS
from ...services.reports.service import ReportManager
from ..dependencies import get_report_manager

router = APIRouter(prefix="/reports", tags=["reports"])


def _to_model(report: HazardReport) -> ReportModel:
    return ReportModel(
        id=report.id,
        location=CoordinateModel(latitude=report.location.latitude, longitude=report.location.longitude),
        category=report.category,
        category_label=CATEGORY_LABELS[report.category],
        color=CATEGORY_COLORS[report.category],
        note=report.note,
        owned_by_current_user=report.owned_by_current_user,
    )


@router.get("/categories", response_model=list[CategoryModel])
def list_categories() -> list[CategoryModel]:
    return [
        CategoryModel(id=category, label=CATEGORY_LABELS[category], color=CATEGORY_COLORS[category])
        for category in HazardCategory
    ]


@router.get("", response_model=ReportListResponse)
def list_reports(
    mine: bool = Query(default=False, description="Only reports created by the current user"),
    reports: ReportManager = Depends(get_report_manager),
) -> ReportListResponse:
    items = [_to_model(report) for report in reports.list_reports(mine=mine)]
    return ReportListResponse(items=items, total=len(items), pending_undo_id=reports.pending_undo())


@router.post("", response_model=ReportModel, status_code=status.HTTP_201_CREATED)
def create_report(payload: ReportCreateRequest, reports: ReportManager = Depends(get_report_manager)) -> ReportModel:
    report = reports.create(
        location=Coordinate(latitude=payload.location.latitude, longitude=payload.location.longitude),
        category=payload.category,
        note=payload.note,
    )
    return _to_model(report)


@router.post("/undo", response_model=UndoResponse)
def undo_last_report(reports: ReportManager = Depends(get_report_manager)) -> UndoResponse:
    """Revert the most recent report while its undo window is open."""
    return UndoResponse(undone=reports.undo())


@router.get("/{report_id}", response_model=ReportModel)
def get_report(report_id: int, reports: ReportManager = Depends(get_report_manager)) -> ReportModel:
    report = reports.get(report_id)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Report {report_id} not found")
    return _to_model(report)


@router.delete("/{report_id}", status_code=status.HTTP_200_OK)
def delete_report(report_id: int, reports: ReportManager = Depends(get_report_manager)) -> dict:
    if not reports.delete(report_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Report {report_id} not found")
    return {"success": True, "message": f"Report {report_id} deleted"}
