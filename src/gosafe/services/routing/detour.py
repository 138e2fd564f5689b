"""Detour waypoint generation."""

from __future__ import annotations

from ...config import settings
from ...models.domain import Coordinate
from ..geospatial import midpoint


def detour_waypoints(start: Coordinate, end: Coordinate, offset: float | None = None) -> list[Coordinate]:
    """Return four waypoints around the start/end midpoint.

    The points sit north, south, east and west of the midpoint at ``offset``
    degrees. Routing through one of them pushes the provider onto a different
    set of streets without prescribing the path.
    """

    step = offset if offset is not None else settings.detour_offset
    center = midpoint(start, end)
    return [
        Coordinate(latitude=center.latitude + step, longitude=center.longitude),
        Coordinate(latitude=center.latitude - step, longitude=center.longitude),
        Coordinate(latitude=center.latitude, longitude=center.longitude + step),
        Coordinate(latitude=center.latitude, longitude=center.longitude - step),
    ]
