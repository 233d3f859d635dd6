"""Pydantic schemas for the cache admin API."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from shiprate.models import CartLineItem, RateRequest


# ── Cart ─────────────────────────────────────────────────
class ParentItemIn(BaseModel):
    product_id: int
    quantity: float = 1.0
    price: float = 0.0
    row_total: float = 0.0
    product_type: str = "simple"
    sku: str = ""


class CartLineItemIn(BaseModel):
    product_id: int
    quantity: float = 1.0
    price: float = 0.0
    row_total: float = 0.0
    product_type: str = "simple"
    sku: str = ""
    weight: float = 0.0
    parent: Optional[ParentItemIn] = None

    def to_model(self) -> CartLineItem:
        parent = None
        if self.parent is not None:
            parent = CartLineItem(**self.parent.model_dump())
        return CartLineItem(**self.model_dump(exclude={"parent"}), parent=parent)


class RateRequestIn(BaseModel):
    dest_postcode: Optional[str] = None
    coupon_code: Optional[str] = None
    items: list[CartLineItemIn] = Field(default_factory=list)

    def to_rate_request(self) -> RateRequest:
        return RateRequest(
            dest_postcode=self.dest_postcode,
            coupon_code=self.coupon_code,
            items=[item.to_model() for item in self.items],
        )


# ── Cache ────────────────────────────────────────────────
class CacheStatusOut(BaseModel):
    type_identifier: str
    tag: str
    enabled: bool
    backend: str


class CacheKeyOut(BaseModel):
    key: str
    items: dict[str, float]


class CachedQuoteOut(BaseModel):
    carrier: str
    carrier_code: str
    service_code: str
    service_description: str
    shipping_price: Decimal
    delivery_time: int
    error: bool
    message: Optional[str] = None

    model_config = {"from_attributes": True}


class CacheLookupOut(BaseModel):
    status: str
    quotes: list[CachedQuoteOut] = Field(default_factory=list)


class CacheFlushOut(BaseModel):
    tag: str
    removed: int
