from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from services.api.app.container import AppContainer
from services.api.app.db.deps import get_container
from services.api.app.models.auth import LoginRequest, ProfileOut, RegisterRequest, SessionOut
from services.api.app.services.auth import AuthResult

router = APIRouter()


def _session(container: AppContainer) -> SessionOut:
    uid = container.auth.current_user
    return SessionOut(uid=uid, signed_in=uid is not None)


def _raise_auth_http_error(result: AuthResult, *, status_code: int) -> None:
    if result.local:
        raise HTTPException(status_code=422, detail=result.error)
    raise HTTPException(status_code=status_code, detail=result.error)


@router.post("/v1/auth/register", response_model=SessionOut)
def register(payload: RegisterRequest, container: AppContainer = Depends(get_container)) -> SessionOut:
    result = container.auth.register(
        role=payload.role,
        email=payload.email,
        password=payload.password,
        confirm_password=payload.confirm_password,
        extra=payload.extra,
    )
    if not result.ok:
        _raise_auth_http_error(result, status_code=400)
    return _session(container)


@router.post("/v1/auth/login", response_model=SessionOut)
def login(payload: LoginRequest, container: AppContainer = Depends(get_container)) -> SessionOut:
    result = container.auth.login(email=payload.email, password=payload.password)
    if not result.ok:
        _raise_auth_http_error(result, status_code=401)
    return _session(container)


@router.post("/v1/auth/logout", response_model=SessionOut)
def logout(container: AppContainer = Depends(get_container)) -> SessionOut:
    result = container.auth.logout()
    if not result.ok:
        _raise_auth_http_error(result, status_code=500)
    return _session(container)


@router.get("/v1/auth/session", response_model=SessionOut)
def session(container: AppContainer = Depends(get_container)) -> SessionOut:
    return _session(container)


@router.get("/v1/profile", response_model=ProfileOut)
def get_profile(container: AppContainer = Depends(get_container)) -> ProfileOut:
    uid = container.auth.current_user
    if uid is None:
        raise HTTPException(status_code=401, detail="Not signed in")

    profile = container.profiles.get_profile(uid)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")

    return ProfileOut(
        uid=profile.uid,
        email=profile.email,
        role=profile.role,
        display_name=profile.display_name,
        address=profile.address,
        contact=profile.contact,
        cuisine=profile.cuisine,
    )
