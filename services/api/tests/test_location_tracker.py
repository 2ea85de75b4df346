from __future__ import annotations

import threading
import time

import pytest
from services.api.app.services import nearby_feed as nearby_feed_module
from services.api.app.services.catalog_mock import MockCatalogSource
from services.api.app.services.catalog_sync import LiveCatalogSync
from services.api.app.services.geo import AuthorizationStatus, filter_nearby
from services.api.app.services.location_client import ClientReportedLocationProvider
from services.api.app.services.location_tracker import LocationTracker
from services.api.app.services.nearby_feed import NearbyFeed
from services.api.app.services.sample_data import sample_cook_spot_documents


def _tracker(
    status: AuthorizationStatus = AuthorizationStatus.NOT_DETERMINED,
) -> tuple[LocationTracker, ClientReportedLocationProvider]:
    provider = ClientReportedLocationProvider(status)
    tracker = LocationTracker(provider)
    tracker.start()
    return tracker, provider


def test_start_requests_permission_without_tracking() -> None:
    tracker, provider = _tracker()

    assert provider.authorization_requested is True
    assert provider.is_updating is False
    assert tracker.authorization.value is AuthorizationStatus.NOT_DETERMINED
    assert tracker.search_radius_m.value == 5000.0


def test_start_tracks_immediately_when_already_authorized() -> None:
    _, provider = _tracker(AuthorizationStatus.AUTHORIZED_ALWAYS)
    assert provider.is_updating is True


def test_authorization_and_position_are_independent_streams() -> None:
    tracker, provider = _tracker()
    statuses: list[AuthorizationStatus] = []
    fixes: list[object] = []
    tracker.authorization.subscribe(statuses.append)
    tracker.position.subscribe(fixes.append)

    provider.report_authorization(AuthorizationStatus.AUTHORIZED_WHEN_IN_USE)
    assert statuses == [AuthorizationStatus.AUTHORIZED_WHEN_IN_USE]
    assert fixes == []

    assert provider.report_fix(25.0350, 121.5650) is True
    assert statuses == [AuthorizationStatus.AUTHORIZED_WHEN_IN_USE]
    assert len(fixes) == 1

    fix = tracker.position.value
    assert fix is not None
    assert (fix.latitude, fix.longitude) == (25.0350, 121.5650)
    assert fix.authorization is AuthorizationStatus.AUTHORIZED_WHEN_IN_USE


def test_denied_is_a_persistent_blocked_state_and_stops_updates() -> None:
    tracker, provider = _tracker(AuthorizationStatus.AUTHORIZED_WHEN_IN_USE)

    provider.report_authorization(AuthorizationStatus.DENIED)

    assert tracker.permission_blocked is True
    assert provider.is_updating is False
    assert provider.report_fix(25.0, 121.5) is False
    assert tracker.position.value is None

    tracker.request_authorization()
    assert provider.authorization_requested is True
    assert tracker.permission_blocked is True


def test_new_fix_overwrites_the_previous_one() -> None:
    tracker, provider = _tracker(AuthorizationStatus.AUTHORIZED_WHEN_IN_USE)

    provider.report_fix(25.0, 121.0)
    provider.report_fix(26.0, 122.0)

    fix = tracker.position.value
    assert fix is not None
    assert (fix.latitude, fix.longitude) == (26.0, 122.0)


def test_provider_errors_are_recorded_not_raised() -> None:
    tracker, provider = _tracker(AuthorizationStatus.AUTHORIZED_WHEN_IN_USE)
    provider.report_fix(25.0, 121.0)

    provider.report_error(RuntimeError("gps unavailable"))

    assert isinstance(tracker.last_error, RuntimeError)
    assert tracker.position.value is not None


def test_nearby_feed_recomputes_on_each_input() -> None:
    tracker, provider = _tracker(AuthorizationStatus.AUTHORIZED_WHEN_IN_USE)
    source = MockCatalogSource.with_sample_data("cookSpots")
    catalog = LiveCatalogSync(source, "cookSpots")
    feed = NearbyFeed(tracker, catalog)
    feed.start()
    catalog.start()

    # Catalog loaded but no fix yet.
    assert feed.results.value == []

    provider.report_fix(25.0350, 121.5650)
    tracker.set_search_radius(1000.0)
    assert [r.spot.id for r in feed.results.value] == ["spot-lin"]

    tracker.set_search_radius(7000.0)
    assert {r.spot.id for r in feed.results.value} == {"spot-lin", "spot-chou", "spot-chen"}

    source.publish("cookSpots", {})
    assert feed.results.value == []

    feed.stop()
    assert tracker.position.subscriber_count == 0


def test_nearby_feed_keeps_latest_inputs_across_threads(monkeypatch: pytest.MonkeyPatch) -> None:
    tracker, provider = _tracker(AuthorizationStatus.AUTHORIZED_WHEN_IN_USE)
    source = MockCatalogSource({"cookSpots": {}})
    catalog = LiveCatalogSync(source, "cookSpots")
    feed = NearbyFeed(tracker, catalog)
    feed.start()
    catalog.start()

    entered = threading.Event()
    release = threading.Event()

    def _slow_filter(origin, radius_m, candidates):
        if threading.current_thread().name == "fix-report":
            entered.set()
            release.wait(timeout=5)
        return filter_nearby(origin, radius_m, candidates)

    monkeypatch.setattr(nearby_feed_module, "filter_nearby", _slow_filter)

    fix_thread = threading.Thread(
        target=provider.report_fix, args=(25.0350, 121.5650), name="fix-report"
    )
    fix_thread.start()
    assert entered.wait(timeout=5)

    # The fix thread is mid-recompute with the empty catalog.
    publish_thread = threading.Thread(
        target=source.publish,
        args=("cookSpots", {"spot-lin": sample_cook_spot_documents()["spot-lin"]}),
    )
    publish_thread.start()
    time.sleep(0.05)
    release.set()
    fix_thread.join(timeout=5)
    publish_thread.join(timeout=5)

    assert [r.spot.id for r in feed.results.value] == ["spot-lin"]
    assert feed.results.value == feed.recompute()
