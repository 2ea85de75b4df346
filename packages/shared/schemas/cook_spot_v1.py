"""Shared cook spot schema (v1).

Cook spots, their reviews and menu items as delivered by the realtime catalog.
Clients key lists by `CookSpotV1.id`, which is always set after ingestion.
"""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field

POSITIVE_REVIEW_THRESHOLD = 4.0


class ReviewV1(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    user_name: str
    comment: str = ""
    rating: float = Field(..., ge=0.0, le=5.0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_positive(self) -> bool:
        return self.rating >= POSITIVE_REVIEW_THRESHOLD


class MenuItemV1(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    price: float = Field(..., ge=0.0)
    is_available: bool = True
    image_url: str | None = None


class CookSpotV1(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    # True when the source document carried no identity and one was generated on ingest.
    id_synthesized: bool = False

    name: str
    chef: str
    cuisine: str
    description: str = ""
    rating: float = Field(..., ge=0.0, le=5.0)
    price_range: str = ""

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)

    reviews: list[ReviewV1] = Field(default_factory=list)
    menu: list[MenuItemV1] = Field(default_factory=list)


def decode_cook_spot(document_id: str | None, data: dict[str, Any]) -> CookSpotV1:
    """Build a cook spot from a raw source document.

    The document id wins over any `id` in the body. When neither is present an id is
    generated here, once, so the returned object keeps it for its whole lifetime.
    Raises pydantic.ValidationError for malformed documents.
    """

    body = dict(data)
    body.pop("id_synthesized", None)
    body_id = body.pop("id", None)

    identity = document_id or body_id
    synthesized = False
    if not identity:
        identity = uuid4().hex
        synthesized = True

    return CookSpotV1(id=str(identity), id_synthesized=synthesized, **body)


def top_positive_reviews(spot: CookSpotV1, limit: int = 3) -> list[ReviewV1]:
    positive = [r for r in spot.reviews if r.is_positive]
    positive.sort(key=lambda r: r.rating, reverse=True)
    return positive[: max(0, limit)]
