from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from packages.shared.schemas.order_v1 import OrderItemV1
from services.api.app.container import AppContainer
from services.api.app.db.deps import get_container, get_db
from services.api.app.db.models import Order
from services.api.app.models.order import (
    OrderConfirmationOut,
    OrderListItem,
    OrderSubmitRequest,
    SubmissionStateOut,
)
from services.api.app.services.order_submission import (
    OrderConfirmation,
    SubmissionError,
    SubmissionErrorKind,
)
from sqlalchemy.orm import Session

router = APIRouter()


def _raise_submission_http_error(error: SubmissionError) -> None:
    if error.kind is SubmissionErrorKind.INVALID_INPUT:
        raise HTTPException(status_code=422, detail=error.message)

    if error.kind is SubmissionErrorKind.EMPTY_CART:
        raise HTTPException(status_code=422, detail=error.message)

    if error.kind is SubmissionErrorKind.IN_FLIGHT:
        raise HTTPException(status_code=409, detail=error.message)

    if error.kind is SubmissionErrorKind.SINK_FAILURE:
        raise HTTPException(status_code=502, detail=error.message)

    raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post("/v1/orders", response_model=OrderConfirmationOut)
async def submit_order(
    payload: OrderSubmitRequest, container: AppContainer = Depends(get_container)
) -> OrderConfirmationOut:
    result = await container.orders.submit(
        address=payload.address,
        contact=payload.contact,
        payment_method=payload.payment_method,
    )
    if isinstance(result, SubmissionError):
        _raise_submission_http_error(result)

    assert isinstance(result, OrderConfirmation)
    record = result.record
    return OrderConfirmationOut(
        order_id=result.order_id,
        status=record.status.value,
        items=record.items,
        total_price=record.total_price,
        delivery_fee=record.delivery_fee,
        final_amount=record.final_amount,
        timestamp=result.timestamp.isoformat() if result.timestamp else None,
    )


@router.get("/v1/orders/state", response_model=SubmissionStateOut)
def submission_state(container: AppContainer = Depends(get_container)) -> SubmissionStateOut:
    orders = container.orders
    return SubmissionStateOut(
        state=orders.state.value.value,
        in_flight=orders.in_flight,
        last_error=orders.last_error.message if orders.last_error else None,
    )


@router.get("/v1/orders", response_model=list[OrderListItem])
def list_orders(db: Session = Depends(get_db)) -> list[OrderListItem]:
    rows = db.query(Order).order_by(Order.timestamp.desc()).limit(200).all()

    return [
        OrderListItem(
            order_id=row.id,
            timestamp=row.timestamp.isoformat(),
            status=row.status,
            address=row.address,
            payment_method=row.payment_method,
            items=[OrderItemV1.model_validate(item) for item in row.items_json],
            total_price=row.total_price,
            delivery_fee=row.delivery_fee,
            final_amount=row.final_amount,
        )
        for row in rows
    ]
