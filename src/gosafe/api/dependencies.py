"""Shared service instances for the API layer."""

from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException, status

from ..services.engine import NavigationEngine
from ..services.reports.service import ReportManager
from ..services.routing.errors import ProviderUnavailable
from ..services.routing.service import build_default_provider
from ..services.routing.session import NavigationSessions


@lru_cache(maxsize=1)
def get_report_manager() -> ReportManager:
    return ReportManager()


@lru_cache(maxsize=1)
def get_sessions() -> NavigationSessions:
    return NavigationSessions()


@lru_cache(maxsize=1)
def _build_engine() -> NavigationEngine:
    return NavigationEngine(build_default_provider(), reports=get_report_manager())


def get_engine() -> NavigationEngine:
    try:
        return _build_engine()
    except ProviderUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
