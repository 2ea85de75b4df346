from __future__ import annotations

import logging

from services.api.app.core.observable import Observable
from services.api.app.services.geo import AuthorizationStatus, LocationFix
from services.api.app.services.location_base import (
    Coordinate,
    LocationDelegate,
    LocationProvider,
)

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_RADIUS_M = 5000.0

_BLOCKED = (AuthorizationStatus.DENIED, AuthorizationStatus.RESTRICTED)


class LocationTracker:
    """Owns permission state and the latest fix.

    `authorization` and `position` are independent streams. Updates run only while
    authorized. Provider failures are logged and leave the current state in place.
    """

    def __init__(
        self,
        provider: LocationProvider,
        *,
        search_radius_m: float = DEFAULT_SEARCH_RADIUS_M,
    ) -> None:
        self._provider = provider
        self.authorization: Observable[AuthorizationStatus] = Observable(
            AuthorizationStatus.NOT_DETERMINED
        )
        self.position: Observable[LocationFix | None] = Observable(None)
        self.search_radius_m: Observable[float] = Observable(float(search_radius_m))
        self.last_error: Exception | None = None

    @property
    def permission_blocked(self) -> bool:
        return self.authorization.value in _BLOCKED

    def start(self) -> None:
        self._provider.set_delegate(
            LocationDelegate(
                on_authorization_changed=self.handle_authorization_change,
                on_locations=self.handle_locations,
                on_error=self.handle_error,
            )
        )
        self._provider.request_when_in_use_authorization()

        status = self._provider.authorization_status()
        self.authorization.set(status)
        if status.is_authorized:
            self._provider.start_updating_location()

    def stop(self) -> None:
        self._provider.stop_updating_location()
        self._provider.set_delegate(None)

    def request_authorization(self) -> None:
        self._provider.request_when_in_use_authorization()

    def set_search_radius(self, radius_m: float) -> None:
        self.search_radius_m.set(float(radius_m))

    def handle_authorization_change(self, status: AuthorizationStatus) -> None:
        self.authorization.set(status)
        logger.info("Location authorization changed to %s", status.value)

        if status.is_authorized:
            self._provider.start_updating_location()
        else:
            self._provider.stop_updating_location()

    def handle_locations(self, coordinates: list[Coordinate]) -> None:
        if not coordinates:
            return
        latest = coordinates[-1]
        self.position.set(
            LocationFix(
                latitude=latest.latitude,
                longitude=latest.longitude,
                authorization=self.authorization.value,
            )
        )

    def handle_error(self, error: Exception) -> None:
        self.last_error = error
        logger.warning("Location update failed: %s", error)
