"""Shared order document schema (v1).

`OrderRecordV1.to_document()` produces the exact field names the order sink stores.
Those keys are read by the cook-side clients and must stay stable.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

DELIVERY_FEE = 60.0


class OrderStatusV1(str, Enum):
    PENDING = "Pending"


class PaymentMethodV1(str, Enum):
    CASH_ON_DELIVERY = "cash_on_delivery"
    CARD = "card"
    LINE_PAY = "line_pay"


class OrderItemV1(BaseModel):
    id: str
    name: str
    price: float = Field(..., ge=0.0)
    quantity: int = Field(..., ge=1)
    total: float


class OrderRecordV1(BaseModel):
    items: list[OrderItemV1] = Field(..., min_length=1)
    address: str
    contact: str
    payment_method: PaymentMethodV1

    total_price: float
    delivery_fee: float = DELIVERY_FEE
    final_amount: float

    status: OrderStatusV1 = OrderStatusV1.PENDING

    def to_document(self) -> dict[str, Any]:
        # timestamp is left for the sink to fill with its own server time.
        return {
            "timestamp": None,
            "totalPrice": self.total_price,
            "deliveryFee": self.delivery_fee,
            "finalAmount": self.final_amount,
            "address": self.address,
            "contact": self.contact,
            "paymentMethod": self.payment_method.value,
            "items": [item.model_dump() for item in self.items],
            "status": self.status.value,
        }
