"""Hazard proximity scoring for route candidates."""

from __future__ import annotations

from typing import Iterable, Sequence

from ...config import settings
from ...models.domain import Coordinate, HazardReport, RouteCandidate, ScoredCandidate
from ..geospatial import distance


def count_hazard_hits(
    polyline: Sequence[Coordinate],
    hazards: Iterable[HazardReport],
    threshold: float | None = None,
) -> int:
    """Count the distinct hazards lying within ``threshold`` of any polyline vertex.

    Each hazard is counted at most once per route, however many vertices come
    close to it.
    """

    limit = threshold if threshold is not None else settings.safe_distance_threshold
    hits = 0
    for hazard in hazards:
        for vertex in polyline:
            if distance(vertex, hazard.location) < limit:
                hits += 1
                break
    return hits


def score_candidates(
    candidates: Iterable[RouteCandidate],
    hazards: Sequence[HazardReport],
    threshold: float | None = None,
) -> list[ScoredCandidate]:
    return [
        ScoredCandidate(candidate=candidate, hazard_hit_count=count_hazard_hits(candidate.polyline, hazards, threshold))
        for candidate in candidates
    ]
