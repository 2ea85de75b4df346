from __future__ import annotations

import hashlib
import hmac
import logging
import os
import re
from collections.abc import Callable
from uuid import uuid4

from services.api.app.core.observable import Observable, Unsubscribe
from services.api.app.db.database import session_scope
from services.api.app.db.models import Account
from services.api.app.services.auth_base import (
    EmailAlreadyInUseError,
    InvalidEmailError,
    UserNotFoundError,
    WeakPasswordError,
    WrongPasswordError,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
_PBKDF2_ITERATIONS = 200_000
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def hash_password(password: str, *, salt: bytes | None = None) -> str:
    salt = salt or os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _PBKDF2_ITERATIONS)
    return f"{salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    salt_hex, _, digest_hex = stored.partition("$")
    expected = hash_password(password, salt=bytes.fromhex(salt_hex))
    return hmac.compare_digest(expected.partition("$")[2], digest_hex)


class LocalAuthProvider:
    """Email/password accounts stored in the service database.

    Holds a single signed-in session, matching one device's view of the auth provider.
    """

    name = "local"

    def __init__(self) -> None:
        self._session: Observable[str | None] = Observable(None)

    def create_account(self, email: str, password: str) -> str:
        email = email.strip().lower()
        if not _EMAIL_RE.match(email):
            raise InvalidEmailError()
        if len(password) < MIN_PASSWORD_LENGTH:
            raise WeakPasswordError(MIN_PASSWORD_LENGTH)

        with session_scope() as db:
            if db.query(Account).filter(Account.email == email).first() is not None:
                raise EmailAlreadyInUseError()
            uid = uuid4().hex
            db.add(Account(uid=uid, email=email, password_hash=hash_password(password)))

        self._session.set(uid)
        logger.info("Auth state changed, current uid: %s", uid)
        return uid

    def sign_in(self, email: str, password: str) -> str:
        email = email.strip().lower()
        with session_scope() as db:
            account = db.query(Account).filter(Account.email == email).first()
            if account is None:
                raise UserNotFoundError()
            if not verify_password(password, account.password_hash):
                raise WrongPasswordError()
            uid = account.uid

        self._session.set(uid)
        logger.info("Auth state changed, current uid: %s", uid)
        return uid

    def sign_out(self) -> None:
        self._session.set(None)
        logger.info("Auth state changed, signed out")

    def current_user(self) -> str | None:
        return self._session.value

    def add_state_listener(self, callback: Callable[[str | None], None]) -> Unsubscribe:
        return self._session.subscribe(callback, replay=True)

