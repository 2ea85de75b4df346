from __future__ import annotations

from packages.shared.schemas.cook_spot_v1 import CookSpotV1, ReviewV1
from pydantic import BaseModel, Field


class CookSpotListResponse(BaseModel):
    is_loading: bool
    state: str
    count: int
    spots: list[CookSpotV1]
    last_error: str | None = None


class NearbyCookSpotOut(BaseModel):
    spot: CookSpotV1
    distance_m: float


class NearbyResponse(BaseModel):
    has_fix: bool
    permission_blocked: bool
    radius_m: float
    results: list[NearbyCookSpotOut] = Field(default_factory=list)


class CookSpotDetail(BaseModel):
    spot: CookSpotV1
    top_reviews: list[ReviewV1]
    distance_m: float | None = None
