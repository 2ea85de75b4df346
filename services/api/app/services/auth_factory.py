from __future__ import annotations

import os

from services.api.app.services.auth_base import AuthProvider
from services.api.app.services.auth_local import LocalAuthProvider


def get_auth_provider() -> AuthProvider:
    provider = os.getenv("HOMECOOK_AUTH_PROVIDER", "local").strip().lower()

    if provider == "local":
        return LocalAuthProvider()

    raise ValueError(f"Unknown HOMECOOK_AUTH_PROVIDER={provider!r}. Expected local.")
