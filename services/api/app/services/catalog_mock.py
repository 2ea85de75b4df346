from __future__ import annotations

import copy
import logging
import threading
from itertools import count
from typing import Any

from services.api.app.services.catalog_base import (
    CatalogDelivery,
    CatalogListenError,
    ErrorCallback,
    SnapshotCallback,
    SourceDocument,
)
from services.api.app.services.sample_data import sample_cook_spot_documents

logger = logging.getLogger(__name__)


class _MockRegistration:
    def __init__(self, source: MockCatalogSource, token: int) -> None:
        self._source = source
        self._token = token

    def remove(self) -> None:
        self._source._remove_listener(self._token)


class MockCatalogSource:
    """In-memory realtime source.

    Mirrors a snapshot-listener backend: each listener gets the current contents on
    subscribe and again after every `publish`. With `delay_s > 0` deliveries happen on a
    timer thread, like a network-backed SDK calling back off the caller's thread.
    """

    name = "mock"

    def __init__(
        self,
        collections: dict[str, dict[str, dict[str, Any]]] | None = None,
        *,
        delay_s: float = 0.0,
    ) -> None:
        self._collections = collections if collections is not None else {}
        self._delay_s = delay_s
        self._listeners: dict[int, tuple[str, SnapshotCallback, ErrorCallback]] = {}
        self._tokens = count()
        self._sequence = count(1)
        self._lock = threading.Lock()

    @classmethod
    def with_sample_data(cls, collection: str, *, delay_s: float = 0.0) -> MockCatalogSource:
        return cls({collection: sample_cook_spot_documents()}, delay_s=delay_s)

    def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> _MockRegistration:
        with self._lock:
            token = next(self._tokens)
            self._listeners[token] = (collection, on_snapshot, on_error)
            delivery = self._delivery(collection)

        self._deliver(on_snapshot, delivery)
        return _MockRegistration(self, token)

    def fetch(self, collection: str) -> CatalogDelivery:
        with self._lock:
            return self._delivery(collection)

    def publish(self, collection: str, documents: dict[str, dict[str, Any]]) -> None:
        """Replace a collection and notify its listeners."""

        with self._lock:
            self._collections[collection] = documents
            delivery = self._delivery(collection)
            targets = [cb for (name, cb, _err) in self._listeners.values() if name == collection]

        for callback in targets:
            self._deliver(callback, delivery)

    def fail(self, collection: str, reason: str = "listener failed") -> None:
        with self._lock:
            targets = [err for (name, _cb, err) in self._listeners.values() if name == collection]

        for on_error in targets:
            on_error(CatalogListenError(collection, reason))

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _remove_listener(self, token: int) -> None:
        with self._lock:
            self._listeners.pop(token, None)

    def _delivery(self, collection: str) -> CatalogDelivery:
        docs = self._collections.get(collection, {})
        return CatalogDelivery(
            documents=[
                SourceDocument(document_id=doc_id, data=copy.deepcopy(data))
                for doc_id, data in docs.items()
            ],
            sequence=next(self._sequence),
        )

    def _deliver(self, callback: SnapshotCallback, delivery: CatalogDelivery) -> None:
        if self._delay_s <= 0:
            callback(delivery)
            return

        timer = threading.Timer(self._delay_s, callback, args=(delivery,))
        timer.daemon = True
        timer.start()
        logger.debug("Scheduled mock delivery in %.2fs", self._delay_s)
