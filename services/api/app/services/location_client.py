from __future__ import annotations

import logging

from services.api.app.services.geo import AuthorizationStatus
from services.api.app.services.location_base import Coordinate, LocationDelegate

logger = logging.getLogger(__name__)


class ClientReportedLocationProvider:
    """Location provider fed by the client device over HTTP.

    The device owns the permission prompt, so requesting authorization only flags that a
    prompt is wanted; the answer arrives later through `report_authorization`. Fixes are
    forwarded only while updates are running.
    """

    def __init__(self, status: AuthorizationStatus = AuthorizationStatus.NOT_DETERMINED) -> None:
        self._status = status
        self._delegate: LocationDelegate | None = None
        self._updating = False
        self.authorization_requested = False

    @property
    def is_updating(self) -> bool:
        return self._updating

    def set_delegate(self, delegate: LocationDelegate | None) -> None:
        self._delegate = delegate

    def authorization_status(self) -> AuthorizationStatus:
        return self._status

    def request_when_in_use_authorization(self) -> None:
        self.authorization_requested = True

    def start_updating_location(self) -> None:
        self._updating = True

    def stop_updating_location(self) -> None:
        self._updating = False

    def report_authorization(self, status: AuthorizationStatus) -> None:
        self._status = status
        self.authorization_requested = False
        if self._delegate is not None:
            self._delegate.on_authorization_changed(status)

    def report_fix(self, latitude: float, longitude: float) -> bool:
        if not self._updating:
            logger.debug("Ignoring location fix while updates are stopped")
            return False
        if self._delegate is not None:
            self._delegate.on_locations([Coordinate(latitude=latitude, longitude=longitude)])
        return True

    def report_error(self, error: Exception) -> None:
        if self._delegate is not None:
            self._delegate.on_error(error)
