from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from services.api.app.services.geo import AuthorizationStatus


@dataclass(frozen=True, slots=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(slots=True)
class LocationDelegate:
    on_authorization_changed: Callable[[AuthorizationStatus], None]
    on_locations: Callable[[list[Coordinate]], None]
    on_error: Callable[[Exception], None]


class LocationProvider(Protocol):
    def set_delegate(self, delegate: LocationDelegate | None) -> None: ...

    def authorization_status(self) -> AuthorizationStatus: ...

    def request_when_in_use_authorization(self) -> None: ...

    def start_updating_location(self) -> None: ...

    def stop_updating_location(self) -> None: ...
