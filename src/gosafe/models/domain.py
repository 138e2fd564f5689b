"""Domain models for hazard reports and pedestrian routes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class HazardCategory(str, Enum):
    DANGER = "danger"
    DARKNESS = "darkness"
    DESOLATE = "desolate"
    STRAY = "stray"
    SUSPICIOUS = "suspicious"
    WEATHER = "weather"


class CandidateSource(str, Enum):
    DIRECT = "direct"
    DETOUR = "detour"


class RouteVerdict(str, Enum):
    SAFE = "safe"
    DANGER = "danger"


@dataclass(frozen=True, slots=True)
class Coordinate:
    """WGS84 point. Ranges are not validated."""

    latitude: float
    longitude: float


@dataclass(slots=True)
class HazardReport:
    """Represents a user-submitted point hazard."""

    id: int
    location: Coordinate
    category: HazardCategory
    note: str = ""
    owned_by_current_user: bool = True


@dataclass(frozen=True, slots=True)
class RouteCandidate:
    """One concrete path returned by the routing provider."""

    polyline: tuple[Coordinate, ...]
    distance_meters: float
    duration_seconds: float
    source: CandidateSource = CandidateSource.DIRECT


@dataclass(frozen=True, slots=True)
class ScoredCandidate:
    candidate: RouteCandidate
    hazard_hit_count: int


@dataclass(frozen=True, slots=True)
class RouteSelection:
    """The winning candidate of one routing request.

    ``duration_seconds`` is the sanity-checked duration; the candidate keeps the
    value reported by the provider.
    """

    candidate: RouteCandidate
    hazard_hit_count: int
    verdict: RouteVerdict
    duration_seconds: float
    candidate_count: int

    @property
    def distance_meters(self) -> float:
        return self.candidate.distance_meters

    @property
    def polyline(self) -> tuple[Coordinate, ...]:
        return self.candidate.polyline
