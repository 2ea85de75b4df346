from __future__ import annotations

import os

from services.api.app.services.order_sink_base import OrderSink
from services.api.app.services.order_sink_sql import SqlOrderSink


def get_order_sink() -> OrderSink:
    """Select where confirmed orders are written. Defaults to the local SQL database."""

    mode = os.getenv("HOMECOOK_ORDER_SINK", "sql").strip().lower()

    if mode == "sql":
        return SqlOrderSink()

    if mode == "firestore":
        from services.api.app.services.order_sink_firestore import FirestoreOrderSink

        collection = os.getenv("HOMECOOK_ORDERS_COLLECTION", "orders").strip() or "orders"
        return FirestoreOrderSink.from_env(collection)

    raise ValueError(f"Unknown HOMECOOK_ORDER_SINK={mode!r}. Expected sql or firestore.")
