from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable

from services.api.app.services.catalog_base import (
    CatalogDelivery,
    CatalogListenError,
    ErrorCallback,
    SnapshotCallback,
    SourceDocument,
)
from services.api.app.services.catalog_mock import MockCatalogSource
from services.api.app.services.catalog_sync import LiveCatalogSync, SyncState, loop_dispatcher
from services.api.app.services.sample_data import sample_cook_spot_documents

COLLECTION = "cookSpots"


class _QueueDispatcher:
    """Holds deliveries until drained, like a UI loop that has not run yet."""

    def __init__(self) -> None:
        self.pending: list[Callable[[], None]] = []

    def __call__(self, fn: Callable[[], None]) -> None:
        self.pending.append(fn)

    def drain(self) -> None:
        while self.pending:
            self.pending.pop(0)()


class _Registration:
    def __init__(self) -> None:
        self.removed = False

    def remove(self) -> None:
        self.removed = True


class _ManualSource:
    name = "manual"

    def __init__(self) -> None:
        self.on_snapshot: SnapshotCallback | None = None
        self.on_error: ErrorCallback | None = None
        self.registrations: list[_Registration] = []

    def subscribe(
        self, collection: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback
    ) -> _Registration:
        del collection
        self.on_snapshot = on_snapshot
        self.on_error = on_error
        registration = _Registration()
        self.registrations.append(registration)
        return registration

    def fetch(self, collection: str) -> CatalogDelivery:
        del collection
        return _delivery(["fetched"])


def _delivery(ids: list[str], sequence: int | None = None) -> CatalogDelivery:
    base = sample_cook_spot_documents()["spot-lin"]
    return CatalogDelivery(
        documents=[SourceDocument(document_id=i, data=dict(base)) for i in ids],
        sequence=sequence,
    )


def test_start_moves_through_loading_to_ready() -> None:
    source = _ManualSource()
    sync = LiveCatalogSync(source, COLLECTION)
    assert sync.state.value is SyncState.IDLE

    sync.start()
    assert sync.state.value is SyncState.LOADING
    assert sync.is_loading.value is True
    assert sync.snapshot.value == ()

    assert source.on_snapshot is not None
    source.on_snapshot(_delivery(["a", "b"]))

    assert sync.state.value is SyncState.READY
    assert sync.is_loading.value is False
    assert [s.id for s in sync.snapshot.value] == ["a", "b"]


def test_every_delivery_replaces_the_snapshot() -> None:
    source = MockCatalogSource.with_sample_data(COLLECTION)
    sync = LiveCatalogSync(source, COLLECTION)
    sync.start()
    assert len(sync.snapshot.value) == 3

    docs = sample_cook_spot_documents()
    source.publish(COLLECTION, {"spot-chen": docs["spot-chen"]})

    assert [s.id for s in sync.snapshot.value] == ["spot-chen"]
    assert sync.state.value is SyncState.READY


def test_error_after_snapshot_keeps_last_known_good_state() -> None:
    source = MockCatalogSource.with_sample_data(COLLECTION)
    sync = LiveCatalogSync(source, COLLECTION)
    sync.start()
    before = sync.snapshot.value
    assert len(before) == 3

    source.fail(COLLECTION, "network down")

    assert sync.snapshot.value == before
    assert sync.is_loading.value is False
    assert isinstance(sync.last_error, CatalogListenError)


def test_error_before_first_delivery_stops_loading_without_raising() -> None:
    source = _ManualSource()
    sync = LiveCatalogSync(source, COLLECTION)
    sync.start()

    assert source.on_error is not None
    source.on_error(CatalogListenError(COLLECTION, "permission denied"))

    assert sync.snapshot.value == ()
    assert sync.is_loading.value is False


def test_successful_delivery_clears_recorded_error() -> None:
    source = _ManualSource()
    sync = LiveCatalogSync(source, COLLECTION)
    sync.start()
    assert source.on_error is not None and source.on_snapshot is not None

    source.on_error(CatalogListenError(COLLECTION, "blip"))
    source.on_snapshot(_delivery(["a"]))

    assert sync.last_error is None


def test_restart_detaches_previous_subscription() -> None:
    source = MockCatalogSource.with_sample_data(COLLECTION)
    sync = LiveCatalogSync(source, COLLECTION)

    sync.start()
    sync.start()

    assert source.listener_count == 1


def test_no_delivery_after_close() -> None:
    dispatcher = _QueueDispatcher()
    source = MockCatalogSource.with_sample_data(COLLECTION)
    sync = LiveCatalogSync(source, COLLECTION, dispatcher=dispatcher)
    published: list[int] = []
    sync.snapshot.subscribe(lambda spots: published.append(len(spots)))

    sync.start()
    assert dispatcher.pending  # delivery queued, not yet published
    sync.close()
    dispatcher.drain()

    assert published == []
    assert source.listener_count == 0


def test_queued_delivery_from_replaced_subscription_is_dropped() -> None:
    dispatcher = _QueueDispatcher()
    source = _ManualSource()
    sync = LiveCatalogSync(source, COLLECTION, dispatcher=dispatcher)

    sync.start()
    old_callback = source.on_snapshot
    sync.start()
    assert source.registrations[0].removed is True

    assert old_callback is not None and source.on_snapshot is not None
    old_callback(_delivery(["stale"]))
    source.on_snapshot(_delivery(["fresh"]))
    dispatcher.drain()

    assert [s.id for s in sync.snapshot.value] == ["fresh"]


def test_out_of_order_sequence_is_discarded() -> None:
    source = _ManualSource()
    sync = LiveCatalogSync(source, COLLECTION)
    sync.start()
    assert source.on_snapshot is not None

    source.on_snapshot(_delivery(["newer"], sequence=5))
    source.on_snapshot(_delivery(["older"], sequence=3))

    assert [s.id for s in sync.snapshot.value] == ["newer"]


def test_unsequenced_deliveries_are_last_writer_wins() -> None:
    source = _ManualSource()
    sync = LiveCatalogSync(source, COLLECTION)
    sync.start()
    assert source.on_snapshot is not None

    source.on_snapshot(_delivery(["first"]))
    source.on_snapshot(_delivery(["second"]))

    assert [s.id for s in sync.snapshot.value] == ["second"]


def test_missing_identity_is_synthesized_once_per_object() -> None:
    docs = sample_cook_spot_documents()
    source = MockCatalogSource({COLLECTION: {}})
    sync = LiveCatalogSync(source, COLLECTION)
    sync.start()

    source.publish(COLLECTION, {"": docs["spot-lin"]})

    (spot,) = sync.snapshot.value
    assert spot.id
    assert spot.id_synthesized is True
    assert sync.snapshot.value[0].id == spot.id


def test_malformed_documents_are_skipped() -> None:
    docs = sample_cook_spot_documents()
    broken = dict(docs["spot-chou"])
    del broken["latitude"]
    source = MockCatalogSource({COLLECTION: {"ok": docs["spot-lin"], "bad": broken}})
    sync = LiveCatalogSync(source, COLLECTION)

    sync.start()

    assert [s.id for s in sync.snapshot.value] == ["ok"]


def test_deliveries_from_worker_threads_publish_on_the_loop_thread() -> None:
    source = MockCatalogSource.with_sample_data(COLLECTION, delay_s=0.01)

    async def _run() -> tuple[list[int], int]:
        loop = asyncio.get_running_loop()
        sync = LiveCatalogSync(source, COLLECTION, dispatcher=loop_dispatcher(loop))
        threads: list[int] = []
        sync.snapshot.subscribe(lambda _spots: threads.append(threading.get_ident()))
        sync.start()
        for _ in range(200):
            if not sync.is_loading.value:
                break
            await asyncio.sleep(0.01)
        sync.close()
        return threads, threading.get_ident()

    threads, loop_thread = asyncio.run(_run())

    assert threads == [loop_thread]


def test_fetch_once_publishes_like_a_snapshot() -> None:
    source = _ManualSource()
    sync = LiveCatalogSync(source, COLLECTION)
    sync.start()

    spots = asyncio.run(sync.fetch_once())

    assert [s.id for s in spots] == ["fetched"]
    assert sync.is_loading.value is False
