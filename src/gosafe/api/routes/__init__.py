"""Route group exports."""

from . import health, navigation, reports

__all__ = ["health", "navigation", "reports"]
