from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from packages.shared.schemas.cook_spot_v1 import MenuItemV1
from services.api.app.container import AppContainer
from services.api.app.db.deps import get_container
from services.api.app.models.cart import CartAddRequest, CartLineOut, CartOut, CartQuantityUpdate
from services.api.app.services.cart import CartLockedError, CartSnapshot

router = APIRouter()


def _cart_out(snapshot: CartSnapshot, checkout_in_progress: bool) -> CartOut:
    return CartOut(
        lines=[
            CartLineOut(
                id=line.id,
                menu_item=line.menu_item,
                quantity=line.quantity,
                line_total=line.line_total,
            )
            for line in snapshot.lines
        ],
        total_quantity=snapshot.total_quantity,
        total_price=snapshot.total_price,
        checkout_in_progress=checkout_in_progress,
    )


def _current(container: AppContainer) -> CartOut:
    return _cart_out(container.cart.snapshot(), container.cart.checkout_in_progress)


@router.get("/v1/menu", response_model=list[MenuItemV1])
def list_menu(container: AppContainer = Depends(get_container)) -> list[MenuItemV1]:
    return container.menu.all()


@router.get("/v1/cart", response_model=CartOut)
def get_cart(container: AppContainer = Depends(get_container)) -> CartOut:
    return _current(container)


@router.post("/v1/cart/items", response_model=CartOut)
def add_cart_item(payload: CartAddRequest, container: AppContainer = Depends(get_container)) -> CartOut:
    item = container.menu.get(payload.menu_item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Menu item not found")
    if not item.is_available:
        raise HTTPException(status_code=409, detail=f"{item.name} is not available today")

    try:
        container.cart.add_item(item, payload.quantity)
    except CartLockedError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return _current(container)


@router.patch("/v1/cart/lines/{line_id}", response_model=CartOut)
def update_cart_line(
    line_id: str, payload: CartQuantityUpdate, container: AppContainer = Depends(get_container)
) -> CartOut:
    try:
        container.cart.update_quantity(line_id, payload.quantity)
    except CartLockedError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return _current(container)


@router.delete("/v1/cart/lines/{line_id}", response_model=CartOut)
def remove_cart_line(line_id: str, container: AppContainer = Depends(get_container)) -> CartOut:
    try:
        container.cart.remove_item(line_id)
    except CartLockedError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return _current(container)


@router.delete("/v1/cart", response_model=CartOut)
def clear_cart(container: AppContainer = Depends(get_container)) -> CartOut:
    try:
        container.cart.clear()
    except CartLockedError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return _current(container)
