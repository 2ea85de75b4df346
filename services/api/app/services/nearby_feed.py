from __future__ import annotations

import threading

from services.api.app.core.observable import Observable, Unsubscribe
from services.api.app.services.catalog_sync import LiveCatalogSync
from services.api.app.services.geo import NearbyCookSpot, filter_nearby
from services.api.app.services.location_tracker import LocationTracker


class NearbyFeed:
    """Recomputes the nearby list whenever the fix, the radius or the catalog changes.

    Location reports arrive on request threads and catalog deliveries on the event loop, so
    each recompute reads its inputs and publishes under one lock; the last publish always
    reflects the latest inputs.
    """

    def __init__(self, tracker: LocationTracker, catalog: LiveCatalogSync) -> None:
        self._tracker = tracker
        self._catalog = catalog
        self.results: Observable[list[NearbyCookSpot]] = Observable([])
        self._unsubscribers: list[Unsubscribe] = []
        self._lock = threading.RLock()

    def start(self) -> None:
        self.stop()
        self._unsubscribers = [
            self._tracker.position.subscribe(lambda _fix: self.recompute()),
            self._tracker.search_radius_m.subscribe(lambda _radius: self.recompute()),
            self._catalog.snapshot.subscribe(lambda _spots: self.recompute()),
        ]
        self.recompute()

    def stop(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def recompute(self) -> list[NearbyCookSpot]:
        with self._lock:
            results = filter_nearby(
                self._tracker.position.value,
                self._tracker.search_radius_m.value,
                self._catalog.snapshot.value,
            )
            self.results.set(results)
        return results
