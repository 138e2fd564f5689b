"""Engine facade used by the API layer."""

from __future__ import annotations

from ..models.domain import Coordinate, HazardCategory, HazardReport, RouteSelection
from .reports.service import ReportManager
from .routing.models import RoutingProvider
from .routing.service import SafeRoutingService


class NavigationEngine:
    """Bundles hazard report management with safety-aware routing.

    The routing service reads hazards through ``ReportManager.snapshot`` and
    never mutates them.
    """

    def __init__(self, provider: RoutingProvider, reports: ReportManager | None = None) -> None:
        self.reports = reports or ReportManager()
        self.routing = SafeRoutingService(provider, hazard_source=self.reports.snapshot)

    def request_route(self, start: Coordinate, end: Coordinate) -> RouteSelection:
        return self.routing.request_route(start, end)

    def create_report(
        self,
        location: Coordinate,
        category: HazardCategory | str,
        note: str = "",
        owned_by_current_user: bool = True,
    ) -> HazardReport:
        return self.reports.create(location, category, note, owned_by_current_user)

    def undo_last_report(self) -> bool:
        return self.reports.undo()

    def delete_report(self, report_id: int) -> bool:
        return self.reports.delete(report_id)

    def get_report(self, report_id: int) -> HazardReport | None:
        return self.reports.get(report_id)

    def list_reports(self, mine: bool = False) -> list[HazardReport]:
        return self.reports.list_reports(mine=mine)

    def pending_undo(self) -> int | None:
        return self.reports.pending_undo()
