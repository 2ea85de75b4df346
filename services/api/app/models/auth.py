from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field
from services.api.app.services.auth_base import UserRole


class RegisterRequest(BaseModel):
    role: UserRole = UserRole.CUSTOMER
    email: str
    password: str
    confirm_password: str
    # Role-specific profile fields (cook_name, cuisine, address, contact, ...).
    extra: dict[str, Any] = Field(default_factory=dict)


class LoginRequest(BaseModel):
    email: str
    password: str


class SessionOut(BaseModel):
    uid: str | None = None
    signed_in: bool


class ProfileOut(BaseModel):
    uid: str
    email: str
    role: UserRole
    display_name: str | None = None
    address: str | None = None
    contact: str | None = None
    cuisine: str | None = None
