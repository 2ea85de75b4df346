from __future__ import annotations

import os
from typing import Any


def firestore_module() -> Any:
    """Import google.cloud.firestore lazily so the default install stays light."""

    try:
        from google.cloud import firestore
    except ImportError:
        return None
    return firestore


def firestore_client(firestore: Any) -> Any:
    project = os.getenv("GOOGLE_CLOUD_PROJECT", "").strip() or None
    return firestore.Client(project=project)
