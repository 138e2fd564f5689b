"""Route ranking and selection."""

from __future__ import annotations

from typing import Sequence

from ...config import settings
from ...models.domain import RouteSelection, RouteVerdict, ScoredCandidate
from .errors import NoRouteFound


def rank_candidates(scored: Sequence[ScoredCandidate]) -> list[ScoredCandidate]:
    """Order by hazard hits, then distance. Full ties keep their input order."""

    return sorted(scored, key=lambda item: (item.hazard_hit_count, item.candidate.distance_meters))


def corrected_duration(
    distance_meters: float,
    duration_seconds: float,
    enabled: bool | None = None,
    max_speed_mps: float | None = None,
    assumed_speed_mps: float | None = None,
) -> float:
    """Replace implausibly fast (vehicular) timings with a walking estimate."""

    if enabled is None:
        enabled = settings.duration_correction_enabled
    if not enabled:
        return duration_seconds
    max_speed = max_speed_mps if max_speed_mps is not None else settings.max_walking_speed_mps
    walking_speed = assumed_speed_mps if assumed_speed_mps is not None else settings.assumed_walking_speed_mps

    if duration_seconds <= 0:
        return distance_meters / walking_speed
    if distance_meters / duration_seconds > max_speed:
        return distance_meters / walking_speed
    return duration_seconds


def select_route(scored: Sequence[ScoredCandidate]) -> RouteSelection:
    ranked = rank_candidates(scored)
    if not ranked:
        raise NoRouteFound("No candidate routes to choose from.")

    best = ranked[0]
    verdict = RouteVerdict.DANGER if best.hazard_hit_count > 0 else RouteVerdict.SAFE
    return RouteSelection(
        candidate=best.candidate,
        hazard_hit_count=best.hazard_hit_count,
        verdict=verdict,
        duration_seconds=corrected_duration(best.candidate.distance_meters, best.candidate.duration_seconds),
        candidate_count=len(ranked),
    )
