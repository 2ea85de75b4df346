from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest
from services.api.app.services.catalog_base import CatalogDelivery, CatalogListenError
from services.api.app.services.catalog_firestore import FirestoreCatalogSource
from services.api.app.services.sample_data import sample_cook_spot_documents


class _FakeDoc:
    def __init__(self, doc_id: str, data: dict[str, Any] | None, broken: bool = False) -> None:
        self.id = doc_id
        self._data = data
        self._broken = broken

    def to_dict(self) -> dict[str, Any] | None:
        if self._broken:
            raise ValueError("undecodable field")
        return self._data


class _FakeWatch:
    def __init__(self) -> None:
        self.unsubscribed = False

    def unsubscribe(self) -> None:
        self.unsubscribed = True


class _FakeCollection:
    def __init__(self, docs: list[_FakeDoc], stream_error: Exception | None = None) -> None:
        self._docs = docs
        self._stream_error = stream_error
        self.callback = None
        self.watch = _FakeWatch()

    def on_snapshot(self, callback):
        self.callback = callback
        return self.watch

    def stream(self):
        if self._stream_error is not None:
            raise self._stream_error
        return iter(self._docs)


class _FakeClient:
    def __init__(self, collection: _FakeCollection) -> None:
        self._collection = collection

    def collection(self, name: str) -> _FakeCollection:
        assert name == "cookSpots"
        return self._collection


def test_snapshot_callbacks_become_deliveries() -> None:
    collection = _FakeCollection([])
    source = FirestoreCatalogSource(_FakeClient(collection))
    deliveries: list[CatalogDelivery] = []
    errors: list[Exception] = []

    registration = source.subscribe("cookSpots", deliveries.append, errors.append)

    read_time = datetime(2026, 1, 1, tzinfo=timezone.utc)
    collection.callback([_FakeDoc("spot-lin", sample_cook_spot_documents()["spot-lin"])], [], read_time)

    (delivery,) = deliveries
    assert [d.document_id for d in delivery.documents] == ["spot-lin"]
    assert delivery.sequence == int(read_time.timestamp() * 1_000_000)
    assert errors == []

    registration.remove()
    assert collection.watch.unsubscribed is True


def test_unconvertible_documents_are_reported_as_listen_errors() -> None:
    collection = _FakeCollection([])
    source = FirestoreCatalogSource(_FakeClient(collection))
    deliveries: list[CatalogDelivery] = []
    errors: list[Exception] = []
    source.subscribe("cookSpots", deliveries.append, errors.append)

    collection.callback([_FakeDoc("spot-x", None, broken=True)], [], None)

    assert deliveries == []
    (error,) = errors
    assert isinstance(error, CatalogListenError)


def test_fetch_failure_raises_listen_error() -> None:
    source = FirestoreCatalogSource(
        _FakeClient(_FakeCollection([], stream_error=RuntimeError("unavailable")))
    )
    with pytest.raises(CatalogListenError):
        source.fetch("cookSpots")
