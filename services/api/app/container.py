from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from services.api.app.services.auth import AuthService
from services.api.app.services.auth_factory import get_auth_provider
from services.api.app.services.cart import CartStore
from services.api.app.services.catalog_factory import catalog_collection, get_catalog_source
from services.api.app.services.catalog_sync import Dispatcher, LiveCatalogSync, inline_dispatcher
from services.api.app.services.location_client import ClientReportedLocationProvider
from services.api.app.services.location_tracker import DEFAULT_SEARCH_RADIUS_M, LocationTracker
from services.api.app.services.menu import MenuCatalog
from services.api.app.services.nearby_feed import NearbyFeed
from services.api.app.services.order_sink_factory import get_order_sink
from services.api.app.services.order_submission import OrderSubmission
from services.api.app.services.profile_store import ProfileStore
from services.api.app.services.sample_data import SAMPLE_MENU

logger = logging.getLogger(__name__)


def search_radius_from_env() -> float:
    raw = os.getenv("HOMECOOK_SEARCH_RADIUS_M", "").strip()
    if not raw:
        return DEFAULT_SEARCH_RADIUS_M
    return float(raw)


@dataclass
class AppContainer:
    catalog: LiveCatalogSync
    location_provider: ClientReportedLocationProvider
    tracker: LocationTracker
    nearby: NearbyFeed
    menu: MenuCatalog
    cart: CartStore
    orders: OrderSubmission
    profiles: ProfileStore
    auth: AuthService

    def start(self) -> None:
        self.tracker.start()
        self.nearby.start()
        self.catalog.start()

    def close(self) -> None:
        self.nearby.stop()
        self.catalog.close()
        self.tracker.stop()


def build_container(*, dispatcher: Dispatcher = inline_dispatcher) -> AppContainer:
    """Wire one session's services. Adapter choices come from env vars."""

    catalog = LiveCatalogSync(get_catalog_source(), catalog_collection(), dispatcher=dispatcher)

    location_provider = ClientReportedLocationProvider()
    tracker = LocationTracker(location_provider, search_radius_m=search_radius_from_env())

    cart = CartStore()
    profiles = ProfileStore()

    container = AppContainer(
        catalog=catalog,
        location_provider=location_provider,
        tracker=tracker,
        nearby=NearbyFeed(tracker, catalog),
        menu=MenuCatalog(SAMPLE_MENU, spots=lambda: catalog.snapshot.value),
        cart=cart,
        orders=OrderSubmission(cart, get_order_sink()),
        profiles=profiles,
        auth=AuthService(get_auth_provider(), profiles),
    )
    logger.debug("Container built with %s catalog source", catalog.collection)
    return container
