from __future__ import annotations

from fastapi import APIRouter, Depends
from services.api.app.container import AppContainer
from services.api.app.db.deps import get_container
from services.api.app.models.location import (
    AuthorizationReport,
    FixReport,
    LocationStateOut,
    RadiusUpdate,
)

router = APIRouter()


def _state(container: AppContainer, accepted: bool | None = None) -> LocationStateOut:
    tracker = container.tracker
    provider = container.location_provider
    fix = tracker.position.value
    return LocationStateOut(
        authorization=tracker.authorization.value,
        permission_blocked=tracker.permission_blocked,
        updating=provider.is_updating,
        authorization_requested=provider.authorization_requested,
        radius_m=tracker.search_radius_m.value,
        latitude=fix.latitude if fix else None,
        longitude=fix.longitude if fix else None,
        accepted=accepted,
    )


@router.get("/v1/location", response_model=LocationStateOut)
def get_location(container: AppContainer = Depends(get_container)) -> LocationStateOut:
    return _state(container)


@router.post("/v1/location/authorization", response_model=LocationStateOut)
def report_authorization(
    payload: AuthorizationReport, container: AppContainer = Depends(get_container)
) -> LocationStateOut:
    container.location_provider.report_authorization(payload.status)
    return _state(container)


@router.post("/v1/location/request-authorization", response_model=LocationStateOut)
def request_authorization(container: AppContainer = Depends(get_container)) -> LocationStateOut:
    container.tracker.request_authorization()
    return _state(container)


@router.post("/v1/location/fix", response_model=LocationStateOut)
def report_fix(payload: FixReport, container: AppContainer = Depends(get_container)) -> LocationStateOut:
    accepted = container.location_provider.report_fix(payload.latitude, payload.longitude)
    return _state(container, accepted=accepted)


@router.put("/v1/location/radius", response_model=LocationStateOut)
def update_radius(payload: RadiusUpdate, container: AppContainer = Depends(get_container)) -> LocationStateOut:
    container.tracker.set_search_radius(payload.radius_m)
    return _state(container)
