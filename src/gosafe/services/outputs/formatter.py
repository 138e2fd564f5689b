"""Human-readable labels for routes and hazard categories."""

from __future__ import annotations

import math

from ...models.domain import HazardCategory

CATEGORY_LABELS: dict[HazardCategory, str] = {
    HazardCategory.DANGER: "Danger",
    HazardCategory.DARKNESS: "Darkness",
    HazardCategory.DESOLATE: "Desolate street",
    HazardCategory.STRAY: "Stray animals",
    HazardCategory.SUSPICIOUS: "Suspicious person",
    HazardCategory.WEATHER: "Weather alert",
}

CATEGORY_COLORS: dict[HazardCategory, str] = {
    HazardCategory.DANGER: "#e74c3c",
    HazardCategory.DARKNESS: "#34495e",
    HazardCategory.DESOLATE: "#e67e22",
    HazardCategory.STRAY: "#6c5ce7",
    HazardCategory.SUSPICIOUS: "#8d6e63",
    HazardCategory.WEATHER: "#3498db",
}


def format_duration(seconds: float) -> str:
    """Format a duration in whole minutes, rounded up (e.g. ``"1 h 5 min"``)."""
    minutes = math.ceil(seconds / 60)
    if minutes >= 60:
        hours, mins = divmod(minutes, 60)
        return f"{hours} h {mins} min"
    return f"{minutes} min"


def format_distance(meters: float) -> str:
    if meters >= 1000:
        return f"{meters / 1000:.1f} km"
    return f"{round(meters)} m"
