"""HTTP client for the OSRM route service."""

from __future__ import annotations

import logging
import time
from typing import Any, Sequence

import httpx

from ...config import settings
from ...models.domain import Coordinate
from .errors import ProviderCallFailed, ProviderUnavailable
from .models import ProviderRoute

logger = logging.getLogger(__name__)


class OSRMClient:
    """Routing provider backed by an OSRM ``/route`` endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        geometries: str | None = None,
        timeout: float | None = None,
        connect_timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url or "").rstrip("/")
        if not self.base_url:
            raise ProviderUnavailable("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.geometries = geometries or settings.osrm_geometries
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self.connect_timeout = connect_timeout if connect_timeout is not None else settings.osrm_connect_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        # One client per call so the fetcher can use this from worker threads
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.connect_timeout, self.timeout)),
            transport=self._transport,
        )

    def route(
        self,
        start: Coordinate,
        end: Coordinate,
        waypoints: Sequence[Coordinate] = (),
        alternatives: bool = False,
    ) -> list[ProviderRoute]:
        """Get walking routes from ``start`` to ``end`` through ``waypoints``.

        Raises:
            ProviderCallFailed: on timeouts, network errors, non-success status
                codes, or a response without usable routes.
        """
        points = [start, *waypoints, end]
        # OSRM route endpoint expects coordinates as "lon,lat;lon,lat;..."
        coordinate_str = ";".join(f"{point.longitude},{point.latitude}" for point in points)
        params = {
            "overview": "full",
            "geometries": self.geometries,
            "steps": "false",
            "alternatives": "true" if alternatives else "false",
        }
        url = f"{self.base_url}/route/v1/{self.profile}/{coordinate_str}"

        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    return self._parse_routes(response.json())
                except httpx.HTTPStatusError as e:
                    status_code = e.response.status_code
                    # OSRM answers 400 for NoRoute/InvalidQuery, retrying will not help
                    if status_code < 500:
                        raise ProviderCallFailed(f"OSRM route request rejected ({status_code}): {_error_message(e.response)}") from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ProviderCallFailed(f"OSRM route request failed with status {status_code}") from e
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"OSRM route request timed out after {self.max_retries} retries: {e}")
                        raise ProviderCallFailed(f"OSRM route request timed out: {e}") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM route timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except (httpx.ConnectError, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ProviderCallFailed(
                            f"Failed to connect to OSRM service at {self.base_url}: {e}",
                            unreachable=True,
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)
                except httpx.HTTPError as e:
                    raise ProviderCallFailed(f"OSRM route request failed: {e}") from e
                except ValueError as e:
                    # Covers JSON decoding errors and malformed route payloads
                    raise ProviderCallFailed(f"Malformed OSRM route response: {e}") from e
        finally:
            client.close()

    def _parse_routes(self, data: Any) -> list[ProviderRoute]:
        if not isinstance(data, dict):
            raise ValueError("response body is not an object")
        if data.get("code") != "Ok":
            raise ValueError(data.get("message") or f"code {data.get('code')!r}")
        raw_routes = data.get("routes") or []
        if not raw_routes:
            raise ValueError("no routes returned")

        routes: list[ProviderRoute] = []
        for raw in raw_routes:
            try:
                geometry = raw["geometry"]
                if isinstance(geometry, str):
                    polyline = tuple(decode_polyline(geometry))
                else:
                    polyline = tuple(Coordinate(latitude=lat, longitude=lon) for lon, lat in geometry["coordinates"])
                # Scoring needs at least one segment
                if len(polyline) < 2:
                    raise ValueError(f"route geometry has {len(polyline)} point(s)")
                routes.append(
                    ProviderRoute(
                        polyline=polyline,
                        distance_meters=float(raw["distance"]),
                        duration_seconds=float(raw["duration"]),
                    )
                )
            except (KeyError, TypeError, IndexError) as e:
                raise ValueError(f"route entry is missing geometry/distance/duration: {e}") from e
        return routes


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(payload, dict):
        return str(payload.get("message") or payload.get("code") or payload)
    return str(payload)


def decode_polyline(polyline: str, precision: int = 5) -> list[Coordinate]:
    """Decode a Google encoded polyline into coordinates.

    OSRM uses this encoding with precision 5 when ``geometries=polyline``.
    """
    factor = 10 ** precision
    coordinates: list[Coordinate] = []
    index = 0
    lat = 0
    lon = 0

    while index < len(polyline):
        deltas = []
        for _ in range(2):
            shift = 0
            result = 0
            while True:
                b = ord(polyline[index]) - 63
                index += 1
                result |= (b & 0x1F) << shift
                shift += 5
                if b < 0x20:
                    break
            deltas.append(~(result >> 1) if (result & 1) else (result >> 1))
        lat += deltas[0]
        lon += deltas[1]
        coordinates.append(Coordinate(latitude=lat / factor, longitude=lon / factor))

    return coordinates


def check_health(base_url: str | None = None) -> bool:
    """Check OSRM availability with a minimal route request.

    Public OSRM endpoints have no /health endpoint, so a short route in
    Cesena is requested instead.
    """
    base = base_url or settings.osrm_base_url
    if not base:
        return False
    try:
        client = OSRMClient(base_url=base, timeout=5.0, max_retries=0)
        routes = client.route(
            Coordinate(latitude=44.1396, longitude=12.2432),
            Coordinate(latitude=44.1420, longitude=12.2470),
        )
        return bool(routes)
    except ProviderCallFailed:
        return False
