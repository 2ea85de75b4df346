from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from packages.shared.schemas.order_v1 import (
    DELIVERY_FEE,
    OrderItemV1,
    OrderRecordV1,
    PaymentMethodV1,
)
from services.api.app.core.observable import Observable
from services.api.app.services.cart import CartLockedError, CartSnapshot, CartStore
from services.api.app.services.order_sink_base import OrderSink

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "We couldn't place your order. Please try again."


class SubmissionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"


class SubmissionErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    EMPTY_CART = "empty_cart"
    IN_FLIGHT = "in_flight"
    SINK_FAILURE = "sink_failure"


@dataclass(frozen=True, slots=True)
class SubmissionError:
    kind: SubmissionErrorKind
    message: str
    fields: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class OrderConfirmation:
    order_id: str
    record: OrderRecordV1
    timestamp: datetime | None


SubmissionResult = OrderConfirmation | SubmissionError


def build_order_record(
    snapshot: CartSnapshot,
    *,
    address: str,
    contact: str,
    payment_method: PaymentMethodV1,
) -> OrderRecordV1:
    """Flatten cart lines into an order; every total comes from the line data."""

    items = [
        OrderItemV1(
            id=line.menu_item.id,
            name=line.menu_item.name,
            price=line.menu_item.price,
            quantity=line.quantity,
            total=line.line_total,
        )
        for line in snapshot.lines
    ]
    subtotal = sum(item.total for item in items)
    return OrderRecordV1(
        items=items,
        address=address,
        contact=contact,
        payment_method=payment_method,
        total_price=subtotal,
        delivery_fee=DELIVERY_FEE,
        final_amount=subtotal + DELIVERY_FEE,
    )


class OrderSubmission:
    """Checkout state machine.

    The cart is snapshotted and held for the whole write, cleared only after the sink
    confirms, and released untouched on failure. All outcomes come back as values.
    """

    def __init__(self, cart: CartStore, sink: OrderSink) -> None:
        self._cart = cart
        self._sink = sink
        self.state: Observable[SubmissionState] = Observable(SubmissionState.IDLE)
        self.last_error: SubmissionError | None = None

    @property
    def in_flight(self) -> bool:
        return self.state.value is SubmissionState.SUBMITTING

    def validate(
        self, address: str, contact: str, payment_method: str | PaymentMethodV1
    ) -> SubmissionError | None:
        missing = tuple(
            name
            for name, value in (("address", address), ("contact", contact))
            if not (value or "").strip()
        )
        if missing:
            return SubmissionError(
                kind=SubmissionErrorKind.INVALID_INPUT,
                message=f"Required fields are empty: {', '.join(missing)}",
                fields=missing,
            )

        try:
            PaymentMethodV1(payment_method)
        except ValueError:
            return SubmissionError(
                kind=SubmissionErrorKind.INVALID_INPUT,
                message=f"Unknown payment method: {payment_method!r}",
                fields=("payment_method",),
            )

        if self._cart.snapshot().is_empty:
            return SubmissionError(
                kind=SubmissionErrorKind.EMPTY_CART,
                message="Your cart is empty.",
            )
        return None

    async def submit(
        self,
        address: str,
        contact: str,
        payment_method: str | PaymentMethodV1 = PaymentMethodV1.CASH_ON_DELIVERY,
    ) -> SubmissionResult:
        if self.in_flight:
            return SubmissionError(
                kind=SubmissionErrorKind.IN_FLIGHT,
                message="An order is already being submitted.",
            )

        invalid = self.validate(address, contact, payment_method)
        if invalid is not None:
            return invalid

        try:
            snapshot = self._cart.begin_checkout()
        except CartLockedError:
            return SubmissionError(
                kind=SubmissionErrorKind.IN_FLIGHT,
                message="An order is already being submitted.",
            )

        if snapshot.is_empty:
            self._cart.end_checkout(clear=False)
            return SubmissionError(kind=SubmissionErrorKind.EMPTY_CART, message="Your cart is empty.")

        self.state.set(SubmissionState.SUBMITTING)
        confirmed = False
        try:
            record = build_order_record(
                snapshot,
                address=address.strip(),
                contact=contact.strip(),
                payment_method=PaymentMethodV1(payment_method),
            )
            try:
                result = await asyncio.to_thread(self._sink.add_order, record.to_document())
            except Exception as e:
                logger.warning("Order submission to %s sink failed: %s", self._sink.name, e)
                self.last_error = SubmissionError(
                    kind=SubmissionErrorKind.SINK_FAILURE,
                    message=GENERIC_FAILURE_MESSAGE,
                )
                return self.last_error

            self._cart.end_checkout(clear=True)
            confirmed = True
        finally:
            if not confirmed:
                # Sink failure, cancellation or a bad record: release the cart untouched
                # and go back to idle so the same cart can be retried.
                self._cart.end_checkout(clear=False)
                self.state.set(SubmissionState.IDLE)

        self.last_error = None
        self.state.set(SubmissionState.SUCCEEDED)
        logger.info(
            "Order %s submitted: %d lines, final amount %.2f",
            result.document_id,
            len(record.items),
            record.final_amount,
        )
        return OrderConfirmation(
            order_id=result.document_id,
            record=record,
            timestamp=result.timestamp,
        )
