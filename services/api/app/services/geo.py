from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from packages.shared.schemas.cook_spot_v1 import CookSpotV1

EARTH_RADIUS_M = 6_371_000.0


class AuthorizationStatus(str, Enum):
    NOT_DETERMINED = "not_determined"
    DENIED = "denied"
    RESTRICTED = "restricted"
    AUTHORIZED_WHEN_IN_USE = "authorized_when_in_use"
    AUTHORIZED_ALWAYS = "authorized_always"

    @property
    def is_authorized(self) -> bool:
        return self in (
            AuthorizationStatus.AUTHORIZED_WHEN_IN_USE,
            AuthorizationStatus.AUTHORIZED_ALWAYS,
        )


@dataclass(frozen=True, slots=True)
class LocationFix:
    latitude: float
    longitude: float
    authorization: AuthorizationStatus = AuthorizationStatus.AUTHORIZED_WHEN_IN_USE


@dataclass(frozen=True, slots=True)
class NearbyCookSpot:
    spot: CookSpotV1
    distance_m: float


def great_circle_distance_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance in meters between two WGS84 coordinates."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lng2 - lng1)
    a = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    # Rounding can push `a` a hair above 1 for antipodal points.
    a = min(1.0, a)
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def filter_nearby(
    origin: LocationFix | None,
    radius_m: float,
    candidates: Iterable[CookSpotV1],
) -> list[NearbyCookSpot]:
    """Return the candidates within `radius_m` of `origin`, in input order.

    No fix means no results. The boundary is inclusive and a negative radius matches nothing.
    """

    if origin is None or radius_m < 0:
        return []

    lat, lng = origin.latitude, origin.longitude
    out: list[NearbyCookSpot] = []
    for spot in candidates:
        distance = great_circle_distance_m(lat, lng, spot.latitude, spot.longitude)
        if distance <= radius_m:
            out.append(NearbyCookSpot(spot=spot, distance_m=distance))
    return out


def sort_by_distance(origin: LocationFix, candidates: Iterable[CookSpotV1]) -> list[NearbyCookSpot]:
    lat, lng = origin.latitude, origin.longitude
    ranked = [
        NearbyCookSpot(
            spot=spot,
            distance_m=great_circle_distance_m(lat, lng, spot.latitude, spot.longitude),
        )
        for spot in candidates
    ]
    ranked.sort(key=lambda item: item.distance_m)
    return ranked
