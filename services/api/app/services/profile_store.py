from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from services.api.app.db.database import session_scope
from services.api.app.db.models import CookProfile, CustomerProfile
from services.api.app.services.auth_base import UserRole
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

_CUSTOMER_EXTRA = ("display_name", "address", "contact")
_COOK_EXTRA = ("cook_name", "cuisine", "address", "contact")


@dataclass(frozen=True, slots=True)
class Profile:
    uid: str
    email: str
    role: UserRole
    address: str | None = None
    contact: str | None = None
    display_name: str | None = None
    cuisine: str | None = None


class ProfileStore:
    """Role-partitioned profile documents: customers and cooks live in separate tables."""

    def create_profile(self, uid: str, role: UserRole, email: str, extra: dict[str, Any]) -> None:
        if role is UserRole.COOK:
            fields = {k: extra[k] for k in _COOK_EXTRA if extra.get(k)}
            row: CustomerProfile | CookProfile = CookProfile(
                uid=uid, email=email, role=role.value, **fields
            )
        else:
            fields = {k: extra[k] for k in _CUSTOMER_EXTRA if extra.get(k)}
            row = CustomerProfile(uid=uid, email=email, role=role.value, **fields)

        with session_scope() as db:
            db.merge(row)
        logger.info("Created %s profile for %s", role.value, uid)

    def get_profile(self, uid: str) -> Profile | None:
        """Best effort lookup used to prefill checkout; failures read as "no profile"."""

        try:
            with session_scope() as db:
                customer = db.get(CustomerProfile, uid)
                if customer is not None:
                    return Profile(
                        uid=customer.uid,
                        email=customer.email,
                        role=UserRole.CUSTOMER,
                        address=customer.address,
                        contact=customer.contact,
                        display_name=customer.display_name,
                    )

                cook = db.get(CookProfile, uid)
                if cook is not None:
                    return Profile(
                        uid=cook.uid,
                        email=cook.email,
                        role=UserRole.COOK,
                        address=cook.address,
                        contact=cook.contact,
                        display_name=cook.cook_name,
                        cuisine=cook.cuisine,
                    )
        except SQLAlchemyError as e:
            logger.warning("Profile lookup failed for %s: %s", uid, e)
        return None
