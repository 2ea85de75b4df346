from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from uuid import uuid4

from packages.shared.schemas.cook_spot_v1 import MenuItemV1
from services.api.app.core.observable import Observable

logger = logging.getLogger(__name__)


class CartLockedError(Exception):
    def __init__(self) -> None:
        super().__init__("Cart is locked while an order is being submitted")


@dataclass(frozen=True, slots=True)
class CartLine:
    id: str
    menu_item: MenuItemV1
    quantity: int

    @property
    def line_total(self) -> float:
        return self.menu_item.price * self.quantity


@dataclass(frozen=True, slots=True)
class CartSnapshot:
    lines: tuple[CartLine, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def total_price(self) -> float:
        return sum(line.line_total for line in self.lines)


class CartStore:
    """Cart lines keyed by menu item, at most one line per item.

    Every operation runs under one lock and publishes a fresh snapshot on `changes`.
    Totals are always derived from the current lines.
    """

    def __init__(self) -> None:
        self._lines: list[CartLine] = []
        self._lock = threading.RLock()
        self._checkout_held = False
        self.changes: Observable[CartSnapshot] = Observable(CartSnapshot())

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines)

    @property
    def total_quantity(self) -> int:
        return self.snapshot().total_quantity

    @property
    def total_price(self) -> float:
        return self.snapshot().total_price

    @property
    def checkout_in_progress(self) -> bool:
        return self._checkout_held

    def snapshot(self) -> CartSnapshot:
        with self._lock:
            return CartSnapshot(lines=tuple(self._lines))

    def add_item(self, menu_item: MenuItemV1, quantity: int = 1) -> CartLine:
        if quantity <= 0:
            raise ValueError(f"quantity must be positive, got {quantity}")

        with self._lock:
            self._ensure_unlocked()
            index = self._index_for_item(menu_item.id)
            if index is None:
                line = CartLine(id=uuid4().hex, menu_item=menu_item, quantity=quantity)
                self._lines.append(line)
            else:
                line = replace(self._lines[index], quantity=self._lines[index].quantity + quantity)
                self._lines[index] = line
            self._publish()
            return line

    def update_quantity(self, line_id: str, new_quantity: int) -> CartLine | None:
        """Set a line's quantity; zero or less removes the line. Unknown ids are ignored."""

        with self._lock:
            self._ensure_unlocked()
            index = self._index_for_line(line_id)
            if index is None:
                return None

            if new_quantity > 0:
                line = replace(self._lines[index], quantity=new_quantity)
                self._lines[index] = line
            else:
                del self._lines[index]
                line = None
            self._publish()
            return line

    def remove_item(self, line_id: str) -> bool:
        with self._lock:
            self._ensure_unlocked()
            index = self._index_for_line(line_id)
            if index is None:
                return False
            del self._lines[index]
            self._publish()
            return True

    def clear(self) -> None:
        with self._lock:
            self._ensure_unlocked()
            self._lines = []
            self._publish()

    def begin_checkout(self) -> CartSnapshot:
        """Capture the lines to submit and hold the cart until `end_checkout`."""

        with self._lock:
            self._ensure_unlocked()
            self._checkout_held = True
            return CartSnapshot(lines=tuple(self._lines))

    def end_checkout(self, *, clear: bool) -> None:
        with self._lock:
            if not self._checkout_held:
                return
            self._checkout_held = False
            if clear:
                self._lines = []
                self._publish()
                logger.info("Cart cleared after confirmed order")

    def _ensure_unlocked(self) -> None:
        if self._checkout_held:
            raise CartLockedError()

    def _index_for_item(self, menu_item_id: str) -> int | None:
        for i, line in enumerate(self._lines):
            if line.menu_item.id == menu_item_id:
                return i
        return None

    def _index_for_line(self, line_id: str) -> int | None:
        for i, line in enumerate(self._lines):
            if line.id == line_id:
                return i
        return None

    def _publish(self) -> None:
        self.changes.set(CartSnapshot(lines=tuple(self._lines)))
