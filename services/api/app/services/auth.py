from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from services.api.app.core.observable import Unsubscribe
from services.api.app.services.auth_base import AuthError, AuthProvider, UserRole
from services.api.app.services.profile_store import ProfileStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuthResult:
    ok: bool
    uid: str | None = None
    error: str | None = None
    # True when the request never reached the provider.
    local: bool = False


def _failure(message: str, *, local: bool = False) -> AuthResult:
    return AuthResult(ok=False, error=message, local=local)


def validate_registration(
    email: str, password: str, confirm_password: str, role: UserRole, extra: dict[str, Any]
) -> str | None:
    if not email.strip() or not password or not confirm_password:
        return "Email and password are required."
    if password != confirm_password:
        return "Passwords do not match."
    if role is UserRole.COOK and not (str(extra.get("cook_name") or "").strip()):
        return "Cooks must provide a kitchen name."
    return None


class AuthService:
    """Register, sign in and sign out; every outcome is an AuthResult, never an exception."""

    def __init__(self, provider: AuthProvider, profiles: ProfileStore) -> None:
        self._provider = provider
        self._profiles = profiles

    @property
    def current_user(self) -> str | None:
        return self._provider.current_user()

    def add_session_listener(self, callback: Callable[[str | None], None]) -> Unsubscribe:
        """Observe the signed-in uid. The current value is delivered on subscribe."""

        return self._provider.add_state_listener(callback)

    def register(
        self,
        *,
        role: UserRole,
        email: str,
        password: str,
        confirm_password: str,
        extra: dict[str, Any] | None = None,
    ) -> AuthResult:
        extra = extra or {}
        problem = validate_registration(email, password, confirm_password, role, extra)
        if problem is not None:
            return _failure(problem, local=True)

        try:
            uid = self._provider.create_account(email, password)
        except AuthError as e:
            return _failure(str(e))
        except Exception as e:
            logger.error("Account creation failed", exc_info=e)
            return _failure("An unknown error occurred. Please try again later.")

        try:
            self._profiles.create_profile(uid, role, email.strip().lower(), extra)
        except Exception as e:
            logger.error("Error writing profile for %s", uid, exc_info=e)
            return _failure("Your account was created but the profile could not be saved.")

        return AuthResult(ok=True, uid=uid)

    def login(self, *, email: str, password: str) -> AuthResult:
        if not email.strip() or not password:
            return _failure("Email and password are required.", local=True)

        try:
            uid = self._provider.sign_in(email, password)
        except AuthError as e:
            return _failure(str(e))
        except Exception as e:
            logger.error("Sign in failed", exc_info=e)
            return _failure("An unknown error occurred. Please try again later.")

        logger.info("User %s signed in", uid)
        return AuthResult(ok=True, uid=uid)

    def logout(self) -> AuthResult:
        try:
            self._provider.sign_out()
        except Exception as e:
            logger.error("Sign out failed", exc_info=e)
            return _failure(str(e) or "Sign out failed.")
        return AuthResult(ok=True)
