"""Geospatial helper functions."""

from __future__ import annotations

import math

from ..models.domain import Coordinate


def distance(a: Coordinate, b: Coordinate) -> float:
    """Euclidean distance in degree space.

    Only meaningful at city scale. The safety threshold and detour offset are
    expressed in the same unit, so this must not be swapped for a great-circle
    distance.
    """

    return math.sqrt((a.latitude - b.latitude) ** 2 + (a.longitude - b.longitude) ** 2)


def midpoint(a: Coordinate, b: Coordinate) -> Coordinate:
    return Coordinate(
        latitude=(a.latitude + b.latitude) / 2,
        longitude=(a.longitude + b.longitude) / 2,
    )
