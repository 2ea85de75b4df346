from __future__ import annotations

from packages.shared.schemas.cook_spot_v1 import MenuItemV1
from pydantic import BaseModel, Field


class CartAddRequest(BaseModel):
    menu_item_id: str
    quantity: int = Field(default=1, ge=1)


class CartQuantityUpdate(BaseModel):
    # Zero or negative removes the line.
    quantity: int


class CartLineOut(BaseModel):
    id: str
    menu_item: MenuItemV1
    quantity: int
    line_total: float


class CartOut(BaseModel):
    lines: list[CartLineOut]
    total_quantity: int
    total_price: float
    checkout_in_progress: bool
