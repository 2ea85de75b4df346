from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Unsubscribe = Callable[[], None]


class Observable(Generic[T]):
    """A value that notifies subscribers synchronously whenever it is set.

    Subscribers are called in subscription order on the thread that calls `set`.
    A subscriber that raises is logged and skipped; it never stops delivery to the rest.
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subscribers: dict[int, Callable[[T], None]] = {}
        self._next_token = 0
        self._lock = threading.Lock()

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        with self._lock:
            self._value = value
            callbacks = list(self._subscribers.values())

        for callback in callbacks:
            try:
                callback(value)
            except Exception:
                logger.exception("Observable subscriber failed")

    def subscribe(self, callback: Callable[[T], None], *, replay: bool = False) -> Unsubscribe:
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._subscribers[token] = callback

        if replay:
            callback(self._value)

        def _unsubscribe() -> None:
            with self._lock:
                self._subscribers.pop(token, None)

        return _unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
