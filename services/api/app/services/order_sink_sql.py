from __future__ import annotations

import logging
from typing import Any
from uuid import uuid4

from services.api.app.db.database import session_scope
from services.api.app.db.models import Order
from services.api.app.services.order_sink_base import OrderWriteError, OrderWriteResult
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class SqlOrderSink:
    """Writes order documents to the `orders` table. The row default assigns the timestamp."""

    name = "sql"

    def add_order(self, document: dict[str, Any]) -> OrderWriteResult:
        order_id = uuid4().hex
        try:
            with session_scope() as db:
                row = Order(
                    id=order_id,
                    total_price=document["totalPrice"],
                    delivery_fee=document["deliveryFee"],
                    final_amount=document["finalAmount"],
                    address=document["address"],
                    contact=document["contact"],
                    payment_method=document["paymentMethod"],
                    items_json=document["items"],
                    status=document["status"],
                )
                db.add(row)
                db.flush()
                timestamp = row.timestamp
        except SQLAlchemyError as e:
            logger.error("Order write failed", exc_info=e)
            raise OrderWriteError(type(e).__name__) from e

        logger.info("Order successfully written with ID: %s", order_id)
        return OrderWriteResult(document_id=order_id, timestamp=timestamp)
