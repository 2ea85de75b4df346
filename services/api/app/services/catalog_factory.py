from __future__ import annotations

import os

from services.api.app.services.catalog_base import RealtimeCatalogSource
from services.api.app.services.catalog_mock import MockCatalogSource


def catalog_collection() -> str:
    return os.getenv("HOMECOOK_CATALOG_COLLECTION", "cookSpots").strip() or "cookSpots"


def get_catalog_source() -> RealtimeCatalogSource:
    """Select the realtime catalog source based on env vars.

    Defaults to the in-memory mock seeded with sample cook spots so tests and local dev are
    deterministic unless explicitly configured otherwise.
    """

    mode = os.getenv("HOMECOOK_CATALOG_SOURCE", "mock").strip().lower()

    if mode == "mock":
        delay_s = float(os.getenv("HOMECOOK_MOCK_CATALOG_DELAY_S", "0"))
        return MockCatalogSource.with_sample_data(catalog_collection(), delay_s=delay_s)

    if mode == "firestore":
        from services.api.app.services.catalog_firestore import FirestoreCatalogSource

        return FirestoreCatalogSource.from_env()

    raise ValueError(f"Unknown HOMECOOK_CATALOG_SOURCE={mode!r}. Expected mock or firestore.")
