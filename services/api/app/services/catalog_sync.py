from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from enum import Enum

from packages.shared.schemas.cook_spot_v1 import CookSpotV1, decode_cook_spot
from pydantic import ValidationError
from services.api.app.core.observable import Observable
from services.api.app.services.catalog_base import (
    CatalogDelivery,
    ListenerRegistration,
    RealtimeCatalogSource,
)

logger = logging.getLogger(__name__)

Dispatcher = Callable[[Callable[[], None]], None]


def inline_dispatcher(fn: Callable[[], None]) -> None:
    fn()


def loop_dispatcher(loop: asyncio.AbstractEventLoop) -> Dispatcher:
    """Run deliveries on `loop`, whichever thread the source calls back from."""

    def _dispatch(fn: Callable[[], None]) -> None:
        loop.call_soon_threadsafe(fn)

    return _dispatch


class SyncState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"


class LiveCatalogSync:
    """Keeps the latest cook spot snapshot from a realtime source.

    Every delivery replaces the snapshot wholesale. Source errors are logged and recorded on
    `errors`; the last good snapshot is kept. Deliveries from a subscription that has been
    replaced or closed are dropped at publish time, so nothing reaches subscribers after
    `close()`.
    """

    def __init__(
        self,
        source: RealtimeCatalogSource,
        collection: str,
        *,
        dispatcher: Dispatcher = inline_dispatcher,
    ) -> None:
        self._source = source
        self._collection = collection
        self._dispatcher = dispatcher

        self.state: Observable[SyncState] = Observable(SyncState.IDLE)
        self.is_loading: Observable[bool] = Observable(False)
        self.snapshot: Observable[tuple[CookSpotV1, ...]] = Observable(())
        self.errors: Observable[Exception | None] = Observable(None)

        self._registration: ListenerRegistration | None = None
        self._generation = 0
        self._last_sequence: int | None = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def collection(self) -> str:
        return self._collection

    @property
    def last_error(self) -> Exception | None:
        return self.errors.value

    @property
    def is_subscribed(self) -> bool:
        return self._registration is not None

    def start(self) -> None:
        """Subscribe to the source, replacing any active subscription."""

        with self._lock:
            if self._closed:
                raise RuntimeError("LiveCatalogSync is closed")
            self._detach_locked()
            self._generation += 1
            generation = self._generation
            self._last_sequence = None

        self.state.set(SyncState.LOADING)
        self.is_loading.set(True)

        registration = self._source.subscribe(
            self._collection,
            lambda delivery: self._schedule(generation, lambda: self._apply_delivery(delivery)),
            lambda error: self._schedule(generation, lambda: self._apply_error(error)),
        )

        with self._lock:
            if generation != self._generation:
                # Closed or restarted while subscribing.
                registration.remove()
                return
            self._registration = registration

        logger.info("Listening to %s via %s source", self._collection, self._source.name)

    async def fetch_once(self) -> tuple[CookSpotV1, ...]:
        """Pull the collection once and publish it like a pushed snapshot."""

        generation = self._generation
        try:
            delivery = await asyncio.to_thread(self._source.fetch, self._collection)
        except Exception as e:
            if self._is_current(generation):
                self._apply_error(e)
            return self.snapshot.value

        if self._is_current(generation):
            self._apply_delivery(delivery)
        return self.snapshot.value

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._generation += 1
            self._detach_locked()

    def _detach_locked(self) -> None:
        if self._registration is not None:
            self._registration.remove()
            self._registration = None

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _schedule(self, generation: int, fn: Callable[[], None]) -> None:
        def _run() -> None:
            if not self._is_current(generation):
                logger.debug("Dropping delivery from a cancelled %s subscription", self._collection)
                return
            fn()

        try:
            self._dispatcher(_run)
        except RuntimeError:
            # Target loop already shut down.
            logger.warning("Catalog delivery dropped, dispatch target is closed")

    def _apply_delivery(self, delivery: CatalogDelivery) -> None:
        if (
            delivery.sequence is not None
            and self._last_sequence is not None
            and delivery.sequence <= self._last_sequence
        ):
            logger.debug(
                "Discarding stale %s delivery seq=%s (last=%s)",
                self._collection,
                delivery.sequence,
                self._last_sequence,
            )
            return

        if delivery.sequence is not None:
            self._last_sequence = delivery.sequence

        spots: list[CookSpotV1] = []
        for document in delivery.documents:
            try:
                spots.append(decode_cook_spot(document.document_id, document.data))
            except ValidationError as e:
                logger.warning(
                    "Skipping malformed cook spot %s: %s",
                    document.document_id,
                    e.errors(include_url=False),
                )

        self.snapshot.set(tuple(spots))
        self.is_loading.set(False)
        self.state.set(SyncState.READY)
        if self.errors.value is not None:
            self.errors.set(None)
        logger.info("Received %d cook spots from %s", len(spots), self._collection)

    def _apply_error(self, error: Exception) -> None:
        logger.warning(
            "Catalog source error on %s, keeping %d cached spots",
            self._collection,
            len(self.snapshot.value),
            exc_info=error,
        )
        self.errors.set(error)
        if self.is_loading.value:
            self.is_loading.set(False)
            self.state.set(SyncState.READY)
