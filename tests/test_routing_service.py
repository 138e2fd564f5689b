import pytest

from gosafe.models.domain import CandidateSource, Coordinate, HazardCategory, RouteVerdict
from gosafe.services.reports.service import ReportManager
from gosafe.services.routing import service as routing_service
from gosafe.services.routing.errors import NoRouteFound, ProviderCallFailed, ProviderUnavailable
from gosafe.services.routing.fetcher import CandidateFetcher
from gosafe.services.routing.models import ProviderRoute
from gosafe.services.routing.service import SafeRoutingService

START = Coordinate(44.10, 12.20)
END = Coordinate(44.15, 12.25)
MIDPOINT = Coordinate(44.125, 12.225)


class DummyOSRM:
    """Direct route runs through the midpoint; detours go through their waypoint."""

    def __init__(self, direct_distance=7000.0, detour_distance=8000.0, fail_direct=None, fail_detour=None):
        self.direct_distance = direct_distance
        self.detour_distance = detour_distance
        self.fail_direct = fail_direct
        self.fail_detour = fail_detour
        self.detour_calls = 0

    def route(self, start, end, waypoints=(), alternatives=False):
        if not waypoints:
            if self.fail_direct:
                raise self.fail_direct
            return [
                ProviderRoute(
                    polyline=(start, MIDPOINT, end),
                    distance_meters=self.direct_distance,
                    duration_seconds=self.direct_distance / 1.2,
                )
            ]
        self.detour_calls += 1
        if self.fail_detour:
            raise self.fail_detour
        return [
            ProviderRoute(
                polyline=(start, waypoints[0], end),
                distance_meters=self.detour_distance,
                duration_seconds=self.detour_distance / 1.2,
            )
        ]


def _service(provider, reports: ReportManager) -> SafeRoutingService:
    fetcher = CandidateFetcher(provider, max_parallel_requests=4, phase_timeout=2.0)
    return SafeRoutingService(
        provider,
        hazard_source=reports.snapshot,
        fetcher=fetcher,
        safe_distance_threshold=0.0012,
        detour_offset=0.0015,
    )


def test_no_hazards_returns_safe_direct_route_without_detours(monkeypatch):
    def unexpected(*args, **kwargs):
        raise AssertionError("detour generator must not run when the direct route is safe")

    monkeypatch.setattr(routing_service, "detour_waypoints", unexpected)
    provider = DummyOSRM()

    selection = _service(provider, ReportManager()).request_route(START, END)

    assert selection.verdict is RouteVerdict.SAFE
    assert selection.candidate.source is CandidateSource.DIRECT
    assert selection.candidate_count == 1
    assert provider.detour_calls == 0


def test_hazard_on_direct_path_prefers_longer_safe_detour():
    reports = ReportManager()
    reports.create(MIDPOINT, HazardCategory.DANGER)
    provider = DummyOSRM(direct_distance=7000.0, detour_distance=12000.0)

    selection = _service(provider, reports).request_route(START, END)

    assert provider.detour_calls == 4
    assert selection.candidate.source is CandidateSource.DETOUR
    assert selection.hazard_hit_count == 0
    assert selection.verdict is RouteVerdict.SAFE
    assert selection.candidate_count == 5


def test_detour_generator_is_called_once_when_direct_is_unsafe(monkeypatch):
    calls = []
    original = routing_service.detour_waypoints

    def recording(start, end, offset=None):
        calls.append((start, end, offset))
        return original(start, end, offset)

    monkeypatch.setattr(routing_service, "detour_waypoints", recording)
    reports = ReportManager()
    reports.create(MIDPOINT, HazardCategory.DARKNESS)

    _service(DummyOSRM(), reports).request_route(START, END)

    assert calls == [(START, END, 0.0015)]


def test_danger_verdict_when_no_safe_candidate_exists():
    reports = ReportManager()
    reports.create(MIDPOINT, HazardCategory.DANGER)
    # Near every endpoint, so all detours hit it as well
    reports.create(Coordinate(44.1001, 12.2001), HazardCategory.STRAY)
    provider = DummyOSRM(direct_distance=7000.0, detour_distance=8000.0)

    selection = _service(provider, reports).request_route(START, END)

    assert selection.verdict is RouteVerdict.DANGER
    assert selection.hazard_hit_count == 1
    assert selection.candidate.source is CandidateSource.DETOUR


def test_failed_detours_fall_back_to_unsafe_direct_route():
    reports = ReportManager()
    reports.create(MIDPOINT, HazardCategory.DANGER)
    provider = DummyOSRM(fail_detour=ProviderCallFailed("timed out"))

    selection = _service(provider, reports).request_route(START, END)

    assert selection.candidate.source is CandidateSource.DIRECT
    assert selection.verdict is RouteVerdict.DANGER


def test_direct_failure_still_tries_detours():
    provider = DummyOSRM(fail_direct=ProviderCallFailed("bad gateway"))

    selection = _service(provider, ReportManager()).request_route(START, END)

    assert provider.detour_calls == 4
    assert selection.candidate.source is CandidateSource.DETOUR


def test_every_call_timing_out_raises_no_route_found():
    timeout = ProviderCallFailed("OSRM route request timed out")
    provider = DummyOSRM(fail_direct=timeout, fail_detour=timeout)

    with pytest.raises(NoRouteFound):
        _service(provider, ReportManager()).request_route(START, END)


def test_unreachable_provider_raises_provider_unavailable():
    unreachable = ProviderCallFailed("connection refused", unreachable=True)
    provider = DummyOSRM(fail_direct=unreachable, fail_detour=unreachable)

    with pytest.raises(ProviderUnavailable):
        _service(provider, ReportManager()).request_route(START, END)


def test_hazards_created_mid_request_are_not_seen():
    reports = ReportManager()
    reports.create(MIDPOINT, HazardCategory.DANGER)

    class MutatingOSRM(DummyOSRM):
        def route(self, start, end, waypoints=(), alternatives=False):
            if waypoints:
                # Would make every detour unsafe if scoring observed it
                reports.create(Coordinate(44.1001, 12.2001), HazardCategory.SUSPICIOUS)
            return super().route(start, end, waypoints, alternatives)

    selection = _service(MutatingOSRM(), reports).request_route(START, END)

    assert selection.verdict is RouteVerdict.SAFE
    assert selection.candidate.source is CandidateSource.DETOUR
    assert len(reports.snapshot()) == 5


def test_hazard_source_is_read_once_per_request():
    reads = []
    reports = ReportManager()
    reports.create(MIDPOINT, HazardCategory.DANGER)

    def source():
        reads.append(1)
        return reports.snapshot()

    fetcher = CandidateFetcher(DummyOSRM(), phase_timeout=2.0)
    SafeRoutingService(DummyOSRM(), hazard_source=source, fetcher=fetcher).request_route(START, END)

    assert len(reads) == 1
