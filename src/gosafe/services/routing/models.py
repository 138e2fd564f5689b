"""Routing provider contract."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from ...models.domain import Coordinate


@dataclass(frozen=True, slots=True)
class ProviderRoute:
    polyline: tuple[Coordinate, ...]
    distance_meters: float
    duration_seconds: float


class RoutingProvider(Protocol):
    """Anything that can turn a start/end pair into walking routes.

    Implementations raise ``ProviderCallFailed`` on any failure and return at
    least one route on success.
    """

    def route(
        self,
        start: Coordinate,
        end: Coordinate,
        waypoints: Sequence[Coordinate] = (),
        alternatives: bool = False,
    ) -> list[ProviderRoute]:
        ...
