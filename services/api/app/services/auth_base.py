from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Protocol

from services.api.app.core.observable import Unsubscribe


class UserRole(str, Enum):
    CUSTOMER = "customer"
    COOK = "cook"


class AuthError(Exception):
    """Provider-side authentication failure. `str(e)` is safe to show to the user."""


class EmailAlreadyInUseError(AuthError):
    def __init__(self) -> None:
        super().__init__("The email address is already in use by another account.")


class InvalidEmailError(AuthError):
    def __init__(self) -> None:
        super().__init__("The email address is badly formatted.")


class WeakPasswordError(AuthError):
    def __init__(self, min_length: int) -> None:
        super().__init__(f"The password must be {min_length} characters long or more.")


class UserNotFoundError(AuthError):
    def __init__(self) -> None:
        super().__init__("There is no user record corresponding to this identifier.")


class WrongPasswordError(AuthError):
    def __init__(self) -> None:
        super().__init__("The password is invalid or the user does not have a password.")


class AuthProvider(Protocol):
    name: str

    def create_account(self, email: str, password: str) -> str: ...

    def sign_in(self, email: str, password: str) -> str: ...

    def sign_out(self) -> None: ...

    def current_user(self) -> str | None: ...

    def add_state_listener(self, callback: Callable[[str | None], None]) -> Unsubscribe: ...
