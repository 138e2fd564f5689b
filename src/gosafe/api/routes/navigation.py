"""Safety-aware navigation endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...models.domain import Coordinate, RouteSelection
from ...schemas.routing import CoordinateModel, RouteRequest, RouteSelectionModel
from ...services.engine import NavigationEngine
from ...services.outputs.formatter import format_distance, format_duration
from ...services.routing.errors import NoRouteFound, ProviderUnavailable
from ...services.routing.session import DEFAULT_SESSION, NavigationSessions
from ..dependencies import get_engine, get_sessions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/navigation", tags=["navigation"])


def _to_model(session_id: str, sequence: int, selection: RouteSelection) -> RouteSelectionModel:
    candidate = selection.candidate
    return RouteSelectionModel(
        session_id=session_id,
        sequence=sequence,
        verdict=selection.verdict.value,
        hazard_hit_count=selection.hazard_hit_count,
        source=candidate.source.value,
        distance_m=candidate.distance_meters,
        duration_s=selection.duration_seconds,
        provider_duration_s=candidate.duration_seconds,
        distance_label=format_distance(candidate.distance_meters),
        duration_label=format_duration(selection.duration_seconds),
        candidate_count=selection.candidate_count,
        coordinates=[CoordinateModel(latitude=point.latitude, longitude=point.longitude) for point in candidate.polyline],
    )


def _superseded(session_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=f"Routing request was superseded by a newer request in session '{session_id}'",
    )


@router.post("/route", response_model=RouteSelectionModel, status_code=status.HTTP_200_OK)
def request_route(
    payload: RouteRequest,
    engine: NavigationEngine = Depends(get_engine),
    sessions: NavigationSessions = Depends(get_sessions),
) -> RouteSelectionModel:
    """Compute the safest walking route. A ``danger`` verdict is still a 200."""
    sequence = sessions.begin(payload.session_id)
    start = Coordinate(latitude=payload.start.latitude, longitude=payload.start.longitude)
    end = Coordinate(latitude=payload.end.latitude, longitude=payload.end.longitude)
    try:
        selection = engine.request_route(start, end)
    except NoRouteFound as exc:
        if not sessions.is_current(payload.session_id, sequence):
            raise _superseded(payload.session_id) from exc
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ProviderUnavailable as exc:
        if not sessions.is_current(payload.session_id, sequence):
            raise _superseded(payload.session_id) from exc
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error computing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to compute route: {str(exc)}",
        ) from exc

    if not sessions.publish(payload.session_id, sequence, selection):
        logger.info(f"Discarding stale route #{sequence} for session '{payload.session_id}'")
        raise _superseded(payload.session_id)
    return _to_model(payload.session_id, sequence, selection)


@router.get("/route", response_model=RouteSelectionModel)
def current_route(
    session_id: str = Query(default=DEFAULT_SESSION),
    sessions: NavigationSessions = Depends(get_sessions),
) -> RouteSelectionModel:
    published = sessions.current(session_id)
    if published is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No active route for session '{session_id}'")
    return _to_model(session_id, published.sequence, published.selection)


@router.delete("/route", status_code=status.HTTP_200_OK)
def cancel_navigation(
    session_id: str = Query(default=DEFAULT_SESSION),
    sessions: NavigationSessions = Depends(get_sessions),
) -> dict:
    cleared = sessions.cancel(session_id)
    return {"success": True, "cleared": cleared}
