from __future__ import annotations

from packages.shared.schemas.order_v1 import OrderItemV1, PaymentMethodV1
from pydantic import BaseModel


class OrderSubmitRequest(BaseModel):
    address: str
    contact: str
    payment_method: PaymentMethodV1 = PaymentMethodV1.CASH_ON_DELIVERY


class OrderConfirmationOut(BaseModel):
    order_id: str
    status: str
    items: list[OrderItemV1]
    total_price: float
    delivery_fee: float
    final_amount: float
    timestamp: str | None = None


class SubmissionStateOut(BaseModel):
    state: str
    in_flight: bool
    last_error: str | None = None


class OrderListItem(BaseModel):
    order_id: str
    timestamp: str
    status: str
    address: str
    payment_method: str
    items: list[OrderItemV1]
    total_price: float
    delivery_fee: float
    final_amount: float
