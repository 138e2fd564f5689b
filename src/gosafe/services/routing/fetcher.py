"""Candidate route retrieval from the routing provider."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Sequence

from ...config import settings
from ...models.domain import CandidateSource, Coordinate, RouteCandidate
from .errors import ProviderCallFailed
from .models import ProviderRoute, RoutingProvider

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FetchOutcome:
    """Successful candidates and per-call failures of one fetch phase."""

    candidates: list[RouteCandidate] = field(default_factory=list)
    failures: list[ProviderCallFailed] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.candidates) + len(self.failures)

    def extend(self, other: FetchOutcome) -> None:
        self.candidates.extend(other.candidates)
        self.failures.extend(other.failures)


def _to_candidate(route: ProviderRoute, source: CandidateSource) -> RouteCandidate:
    return RouteCandidate(
        polyline=route.polyline,
        distance_meters=route.distance_meters,
        duration_seconds=route.duration_seconds,
        source=source,
    )


class CandidateFetcher:
    """Runs provider calls concurrently, bounded by a phase deadline.

    A call that fails or is still running when the deadline passes is recorded
    as a failure; the phase keeps whatever did resolve.
    """

    def __init__(
        self,
        provider: RoutingProvider,
        max_parallel_requests: int | None = None,
        phase_timeout: float | None = None,
    ) -> None:
        self.provider = provider
        self.max_parallel_requests = max_parallel_requests or settings.max_parallel_requests
        self.phase_timeout = phase_timeout if phase_timeout is not None else settings.fetch_phase_timeout_seconds

    def fetch_direct(self, start: Coordinate, end: Coordinate) -> FetchOutcome:
        """Fetch the direct route plus any provider-side alternatives."""

        def call() -> list[RouteCandidate]:
            routes = self.provider.route(start, end, alternatives=True)
            return [_to_candidate(route, CandidateSource.DIRECT) for route in routes]

        return self._fan_out([("direct", call)])

    def fetch_detours(self, start: Coordinate, end: Coordinate, waypoints: Sequence[Coordinate]) -> FetchOutcome:
        """Fetch one route per waypoint (start -> waypoint -> end), concurrently."""

        def make_call(waypoint: Coordinate) -> Callable[[], list[RouteCandidate]]:
            def call() -> list[RouteCandidate]:
                routes = self.provider.route(start, end, waypoints=[waypoint], alternatives=False)
                return [_to_candidate(routes[0], CandidateSource.DETOUR)] if routes else []

            return call

        calls = [(f"detour {index}", make_call(waypoint)) for index, waypoint in enumerate(waypoints)]
        return self._fan_out(calls)

    def _fan_out(self, calls: Sequence[tuple[str, Callable[[], list[RouteCandidate]]]]) -> FetchOutcome:
        outcome = FetchOutcome()
        if not calls:
            return outcome

        start_time = time.time()
        executor = ThreadPoolExecutor(max_workers=min(self.max_parallel_requests, len(calls)))
        try:
            future_to_label = {executor.submit(call): label for label, call in calls}
            _, not_done = wait(future_to_label, timeout=self.phase_timeout)

            # Keep submission order so ranking ties stay deterministic
            for future, label in future_to_label.items():
                if future in not_done:
                    future.cancel()
                    logger.warning(f"Routing call '{label}' exceeded the {self.phase_timeout:.1f}s phase deadline")
                    outcome.failures.append(ProviderCallFailed(f"{label}: phase deadline exceeded"))
                    continue
                try:
                    outcome.candidates.extend(future.result())
                except ProviderCallFailed as e:
                    logger.warning(f"Routing call '{label}' failed: {e}")
                    outcome.failures.append(e)
                except Exception as e:
                    logger.warning(f"Routing call '{label}' raised unexpectedly: {e}")
                    outcome.failures.append(ProviderCallFailed(f"{label}: {e}"))
        finally:
            # Stragglers are bounded by the provider's own request timeout
            executor.shutdown(wait=False, cancel_futures=True)

        elapsed = time.time() - start_time
        logger.info(
            f"Fetched {len(outcome.candidates)} candidate(s) from {len(calls)} call(s) "
            f"({len(outcome.failures)} failed) in {elapsed:.2f}s"
        )
        return outcome
