from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from packages.shared.schemas.cook_spot_v1 import top_positive_reviews
from services.api.app.container import AppContainer
from services.api.app.db.deps import get_container
from services.api.app.models.cook_spot import (
    CookSpotDetail,
    CookSpotListResponse,
    NearbyCookSpotOut,
    NearbyResponse,
)
from services.api.app.services.geo import great_circle_distance_m, sort_by_distance

router = APIRouter()


def _list_response(container: AppContainer) -> CookSpotListResponse:
    catalog = container.catalog
    spots = list(catalog.snapshot.value)
    return CookSpotListResponse(
        is_loading=catalog.is_loading.value,
        state=catalog.state.value.value,
        count=len(spots),
        spots=spots,
        last_error=str(catalog.last_error) if catalog.last_error else None,
    )


@router.get("/v1/cook-spots", response_model=CookSpotListResponse)
def list_cook_spots(container: AppContainer = Depends(get_container)) -> CookSpotListResponse:
    return _list_response(container)


@router.post("/v1/cook-spots/refresh", response_model=CookSpotListResponse)
async def refresh_cook_spots(
    container: AppContainer = Depends(get_container),
) -> CookSpotListResponse:
    await container.catalog.fetch_once()
    return _list_response(container)


@router.get("/v1/cook-spots/nearby", response_model=NearbyResponse)
def nearby_cook_spots(
    sort: Literal["none", "distance"] = "none",
    container: AppContainer = Depends(get_container),
) -> NearbyResponse:
    tracker = container.tracker
    origin = tracker.position.value
    results = container.nearby.results.value

    if sort == "distance" and origin is not None:
        results = sort_by_distance(origin, [r.spot for r in results])

    return NearbyResponse(
        has_fix=origin is not None,
        permission_blocked=tracker.permission_blocked,
        radius_m=tracker.search_radius_m.value,
        results=[NearbyCookSpotOut(spot=r.spot, distance_m=r.distance_m) for r in results],
    )


@router.get("/v1/cook-spots/{spot_id}", response_model=CookSpotDetail)
def get_cook_spot(spot_id: str, container: AppContainer = Depends(get_container)) -> CookSpotDetail:
    spot = next((s for s in container.catalog.snapshot.value if s.id == spot_id), None)
    if spot is None:
        raise HTTPException(status_code=404, detail="Cook spot not found")

    origin = container.tracker.position.value
    distance = None
    if origin is not None:
        distance = great_circle_distance_m(
            origin.latitude, origin.longitude, spot.latitude, spot.longitude
        )

    return CookSpotDetail(spot=spot, top_reviews=top_positive_reviews(spot), distance_m=distance)
