from __future__ import annotations

from pydantic import BaseModel, Field
from services.api.app.services.geo import AuthorizationStatus


class AuthorizationReport(BaseModel):
    status: AuthorizationStatus


class FixReport(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class RadiusUpdate(BaseModel):
    radius_m: float = Field(..., ge=0.0)


class LocationStateOut(BaseModel):
    authorization: AuthorizationStatus
    permission_blocked: bool
    updating: bool
    authorization_requested: bool
    radius_m: float
    latitude: float | None = None
    longitude: float | None = None
    accepted: bool | None = None
