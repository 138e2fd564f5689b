"""Safety-aware routing orchestration service."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from ...config import settings
from ...models.domain import Coordinate, HazardReport, RouteSelection
from .detour import detour_waypoints
from .errors import NoRouteFound, ProviderUnavailable
from .fetcher import CandidateFetcher
from .models import RoutingProvider
from .scoring import score_candidates
from .selector import select_route

logger = logging.getLogger(__name__)

HazardSource = Callable[[], Sequence[HazardReport]]


class SafeRoutingService:
    """Picks the walking route that passes the fewest reported hazards.

    The direct route (with provider alternatives) is always fetched. Detours
    are only requested when none of the direct candidates is hazard-free.
    """

    def __init__(
        self,
        provider: RoutingProvider,
        hazard_source: HazardSource,
        fetcher: CandidateFetcher | None = None,
        safe_distance_threshold: float | None = None,
        detour_offset: float | None = None,
    ) -> None:
        self.provider = provider
        self.hazard_source = hazard_source
        self.fetcher = fetcher or CandidateFetcher(provider)
        self.safe_distance_threshold = (
            safe_distance_threshold if safe_distance_threshold is not None else settings.safe_distance_threshold
        )
        self.detour_offset = detour_offset if detour_offset is not None else settings.detour_offset

    def request_route(self, start: Coordinate, end: Coordinate) -> RouteSelection:
        """Return the safest available route from ``start`` to ``end``.

        Raises:
            NoRouteFound: if neither phase produced a candidate.
            ProviderUnavailable: if every provider call failed to connect.
        """
        outcome = self.fetcher.fetch_direct(start, end)

        # One snapshot for the whole request so create/delete cannot change the scores mid-way
        hazards = tuple(self.hazard_source())
        scored = score_candidates(outcome.candidates, hazards, self.safe_distance_threshold)
        best_direct = min((item.hazard_hit_count for item in scored), default=None)

        if best_direct == 0:
            logger.info(f"Direct route is clear of {len(hazards)} hazard(s); skipping detours")
        else:
            waypoints = detour_waypoints(start, end, self.detour_offset)
            logger.info(
                f"Best direct candidate hits {best_direct if best_direct is not None else 'n/a'} hazard(s); "
                f"trying {len(waypoints)} detour(s)"
            )
            detours = self.fetcher.fetch_detours(start, end, waypoints)
            scored.extend(score_candidates(detours.candidates, hazards, self.safe_distance_threshold))
            outcome.extend(detours)

        if not scored:
            if outcome.failures and all(failure.unreachable for failure in outcome.failures):
                raise ProviderUnavailable("Routing provider could not be reached.")
            raise NoRouteFound(f"No route found after {outcome.attempted} provider call(s).")

        selection = select_route(scored)
        logger.info(
            f"Selected {selection.candidate.source.value} route: {selection.hazard_hit_count} hazard hit(s), "
            f"{selection.distance_meters:.0f} m, verdict={selection.verdict.value}"
        )
        return selection


def build_default_provider() -> RoutingProvider:
    from .osrm_client import OSRMClient

    return OSRMClient()
