"""Routing error taxonomy."""

from __future__ import annotations


class RoutingError(Exception):
    """Base class for routing failures."""


class ProviderCallFailed(RoutingError):
    """A single routing provider call failed.

    ``unreachable`` is set for connection-level failures (DNS, refused
    connection) as opposed to timeouts or bad responses.
    """

    def __init__(self, message: str, *, unreachable: bool = False) -> None:
        super().__init__(message)
        self.unreachable = unreachable


class NoRouteFound(RoutingError):
    """The candidate pool is empty after the direct and detour phases."""


class ProviderUnavailable(RoutingError):
    """The routing provider is not configured or cannot be reached at all."""
