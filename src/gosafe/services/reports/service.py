"""In-memory hazard report lifecycle with a single-slot undo window."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from ...config import settings
from ...models.domain import Coordinate, HazardCategory, HazardReport

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PendingUndo:
    report_id: int
    expires_at: float


class ReportManager:
    """Owns the hazard collection.

    Readers get copies through ``snapshot``. Only the most recent creation is
    undoable, and only until ``undo_window`` seconds have passed.
    """

    def __init__(
        self,
        undo_window: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        id_clock: Callable[[], float] = time.time,
    ) -> None:
        self.undo_window = undo_window if undo_window is not None else settings.undo_window_seconds
        self._clock = clock
        self._id_clock = id_clock
        self._lock = threading.Lock()
        self._reports: list[HazardReport] = []
        self._pending: PendingUndo | None = None
        self._last_id = 0

    def _next_id(self) -> int:
        # Millisecond timestamp, bumped when two reports land in the same millisecond
        candidate = int(self._id_clock() * 1000)
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id

    def create(
        self,
        location: Coordinate,
        category: HazardCategory | str,
        note: str = "",
        owned_by_current_user: bool = True,
    ) -> HazardReport:
        report_category = HazardCategory(category)
        with self._lock:
            report = HazardReport(
                id=self._next_id(),
                location=location,
                category=report_category,
                note=note,
                owned_by_current_user=owned_by_current_user,
            )
            self._reports.append(report)
            # Replaces any earlier pending undo
            self._pending = PendingUndo(report_id=report.id, expires_at=self._clock() + self.undo_window)
        logger.info(f"Created {report.category.value} report {report.id}")
        return report

    def undo(self) -> bool:
        """Remove the most recently created report if its undo window is still open."""
        with self._lock:
            pending = self._pending
            self._pending = None
            if pending is None:
                return False
            if self._clock() >= pending.expires_at:
                logger.debug(f"Undo window for report {pending.report_id} has expired")
                return False
            removed = self._remove(pending.report_id)
        if removed:
            logger.info(f"Undid report {pending.report_id}")
        return removed

    def delete(self, report_id: int) -> bool:
        with self._lock:
            removed = self._remove(report_id)
            if self._pending is not None and self._pending.report_id == report_id:
                self._pending = None
        if removed:
            logger.info(f"Deleted report {report_id}")
        return removed

    def get(self, report_id: int) -> HazardReport | None:
        with self._lock:
            return next((report for report in self._reports if report.id == report_id), None)

    def list_reports(self, mine: bool = False) -> list[HazardReport]:
        with self._lock:
            return [report for report in self._reports if report.owned_by_current_user or not mine]

    def snapshot(self) -> tuple[HazardReport, ...]:
        with self._lock:
            return tuple(self._reports)

    def pending_undo(self) -> int | None:
        """Id of the report that ``undo`` would remove right now, if any."""
        with self._lock:
            if self._pending is None or self._clock() >= self._pending.expires_at:
                return None
            return self._pending.report_id

    def _remove(self, report_id: int) -> bool:
        for index, report in enumerate(self._reports):
            if report.id == report_id:
                del self._reports[index]
                return True
        return False
