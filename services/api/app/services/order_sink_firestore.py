from __future__ import annotations

import logging
from typing import Any

from services.api.app.services.firestore_client import firestore_client, firestore_module
from services.api.app.services.order_sink_base import (
    OrderSinkMissingError,
    OrderWriteError,
    OrderWriteResult,
)

logger = logging.getLogger(__name__)


class FirestoreOrderSink:
    """Adds order documents to a Firestore collection with a server timestamp.

    Env vars:
    - HOMECOOK_ORDER_SINK=firestore
    - HOMECOOK_ORDERS_COLLECTION (default: orders)
    - GOOGLE_CLOUD_PROJECT (optional)
    """

    name = "firestore"

    def __init__(self, client: Any, server_timestamp: Any, collection: str = "orders") -> None:
        self._client = client
        self._server_timestamp = server_timestamp
        self._collection = collection

    @classmethod
    def from_env(cls, collection: str) -> FirestoreOrderSink:
        firestore = firestore_module()
        if firestore is None:
            raise OrderSinkMissingError("google-cloud-firestore", "firestore")
        return cls(firestore_client(firestore), firestore.SERVER_TIMESTAMP, collection)

    def add_order(self, document: dict[str, Any]) -> OrderWriteResult:
        data = dict(document)
        data["timestamp"] = self._server_timestamp
        try:
            _update_time, ref = self._client.collection(self._collection).add(data)
        except Exception as e:
            logger.error("Error adding order document", exc_info=e)
            raise OrderWriteError(str(e)) from e

        logger.info("Order successfully written with ID: %s", ref.id)
        # The resolved server timestamp is only visible on a re-read.
        return OrderWriteResult(document_id=ref.id, timestamp=None)
