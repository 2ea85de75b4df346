from __future__ import annotations

from typing import Any

from services.api.app.services.catalog_base import (
    CatalogDelivery,
    CatalogListenError,
    CatalogSourceMissingError,
    ErrorCallback,
    SnapshotCallback,
    SourceDocument,
)
from services.api.app.services.firestore_client import firestore_client, firestore_module


class _WatchRegistration:
    def __init__(self, watch: Any) -> None:
        self._watch = watch

    def remove(self) -> None:
        self._watch.unsubscribe()


class FirestoreCatalogSource:
    """Realtime catalog backed by a Firestore collection snapshot listener.

    Firestore invokes listener callbacks on its own background thread; callers are expected
    to marshal deliveries back onto their context.

    The SDK watch retries stream failures internally and, once it gives up, stops without
    calling the snapshot callback. A stopped stream therefore never reaches `on_error`; only
    documents that cannot be converted are reported there. `fetch` re-reads the collection
    and raises CatalogListenError on read failures, which is how a manual refresh surfaces
    an unreachable backend.

    Env vars:
    - HOMECOOK_CATALOG_SOURCE=firestore
    - GOOGLE_CLOUD_PROJECT (optional, falls back to application default credentials)
    """

    name = "firestore"

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_env(cls) -> FirestoreCatalogSource:
        firestore = firestore_module()
        if firestore is None:
            raise CatalogSourceMissingError("google-cloud-firestore", "firestore")
        return cls(firestore_client(firestore))

    def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> _WatchRegistration:
        def _on_snapshot(docs: list[Any], changes: list[Any], read_time: Any) -> None:
            del changes
            try:
                delivery = _to_delivery(docs, read_time)
            except Exception as e:
                on_error(CatalogListenError(collection, str(e)))
                return
            on_snapshot(delivery)

        watch = self._client.collection(collection).on_snapshot(_on_snapshot)
        return _WatchRegistration(watch)

    def fetch(self, collection: str) -> CatalogDelivery:
        try:
            docs = list(self._client.collection(collection).stream())
        except Exception as e:
            raise CatalogListenError(collection, str(e)) from e
        return _to_delivery(docs, None)


def _to_delivery(docs: list[Any], read_time: Any) -> CatalogDelivery:
    sequence = None
    if read_time is not None and hasattr(read_time, "timestamp"):
        sequence = int(read_time.timestamp() * 1_000_000)

    return CatalogDelivery(
        documents=[SourceDocument(document_id=d.id, data=d.to_dict() or {}) for d in docs],
        sequence=sequence,
    )
