from __future__ import annotations

import argparse
import logging

from services.api.app.db.init_db import init_db
from services.api.app.services.auth import AuthService
from services.api.app.services.auth_base import UserRole
from services.api.app.services.auth_local import LocalAuthProvider
from services.api.app.services.profile_store import ProfileStore


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed demo Homecook accounts")
    parser.add_argument("--customer-email", default="customer@example.com")
    parser.add_argument("--cook-email", default="cook@example.com")
    parser.add_argument("--password", default="homecook123")
    parser.add_argument("--address", default="No. 7, Section 5, Xinyi Road, Taipei")
    parser.add_argument("--contact", default="0912-345-678")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    init_db()

    auth = AuthService(LocalAuthProvider(), ProfileStore())
    seeds = (
        (
            UserRole.CUSTOMER,
            args.customer_email,
            {"display_name": "Demo Customer", "address": args.address, "contact": args.contact},
        ),
        (
            UserRole.COOK,
            args.cook_email,
            {"cook_name": "Grandma Lin's Kitchen", "cuisine": "Traditional Taiwanese"},
        ),
    )

    for role, email, extra in seeds:
        result = auth.register(
            role=role,
            email=email,
            password=args.password,
            confirm_password=args.password,
            extra=extra,
        )
        if result.ok:
            print(f"Created {role.value} account {email} ({result.uid})")
        else:
            print(f"Skipped {email}: {result.error}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
