"""Cart and rate quote data models.

The cart side (``CartLineItem``, ``RateRequest``) is owned by the host
platform and read-only here. ``CachedQuoteRecord`` is the snapshot of one
carrier service quote that is stored in the rate cache.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional


class ProductType(str, Enum):
    """Catalog product types that affect shipping calculation."""
    SIMPLE = "simple"
    CONFIGURABLE = "configurable"
    BUNDLE = "bundle"
    GROUPED = "grouped"
    VIRTUAL = "virtual"
    DOWNLOADABLE = "downloadable"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> Optional["ProductType"]:
        """Map a catalog type tag to a known type, ``None`` when unknown."""
        if not tag:
            return None
        try:
            return cls(tag.strip().lower())
        except ValueError:
            return None


@dataclass
class CartLineItem:
    """Single cart line as exposed by the host platform."""
    product_id: int
    quantity: float = 1.0
    price: float = 0.0
    row_total: float = 0.0
    product_type: str = ProductType.SIMPLE.value
    parent: Optional["CartLineItem"] = None
    weight: float = 0.0
    sku: str = ""

    @property
    def type(self) -> Optional[ProductType]:
        return ProductType.from_tag(self.product_type)

    @property
    def parent_type(self) -> Optional[ProductType]:
        return self.parent.type if self.parent is not None else None


@dataclass
class RateRequest:
    """Facts needed to ask a carrier for shipping prices."""
    dest_postcode: Optional[str] = None
    items: list[CartLineItem] = field(default_factory=list)
    coupon_code: Optional[str] = None


_REQUIRED_QUOTE_FIELDS = ("carrier", "service_code", "shipping_price", "delivery_time")
_KNOWN_QUOTE_FIELDS = _REQUIRED_QUOTE_FIELDS + (
    "carrier_code", "service_description", "error", "message",
)


@dataclass
class CachedQuoteRecord:
    """Snapshot of one shipping service quote."""
    carrier: str
    service_code: str
    shipping_price: Decimal
    delivery_time: int
    carrier_code: str = ""
    service_description: str = ""
    error: bool = False
    message: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        data.update({
            "carrier": self.carrier,
            "carrier_code": self.carrier_code,
            "service_code": self.service_code,
            "service_description": self.service_description,
            "shipping_price": str(self.shipping_price),
            "delivery_time": self.delivery_time,
            "error": self.error,
            "message": self.message,
        })
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "CachedQuoteRecord":
        """Build a record from a stored mapping.

        Raises ``ValueError`` when the mapping is missing a required field or
        a field cannot be converted; partially populated records are never
        returned.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Quote record must be a mapping, got {type(data).__name__}")

        missing = [name for name in _REQUIRED_QUOTE_FIELDS if data.get(name) is None]
        if missing:
            raise ValueError(f"Quote record missing fields: {', '.join(missing)}")

        try:
            price = Decimal(str(data["shipping_price"]))
        except InvalidOperation:
            raise ValueError(f"Invalid shipping_price: {data['shipping_price']!r}")
        if not price.is_finite():
            raise ValueError(f"Invalid shipping_price: {data['shipping_price']!r}")

        delivery_time = data["delivery_time"]
        if isinstance(delivery_time, bool) or not isinstance(delivery_time, (int, str)):
            raise ValueError(f"Invalid delivery_time: {delivery_time!r}")
        try:
            delivery_time = int(delivery_time)
        except ValueError:
            raise ValueError(f"Invalid delivery_time: {delivery_time!r}")

        message = data.get("message")
        return cls(
            carrier=str(data["carrier"]),
            service_code=str(data["service_code"]),
            shipping_price=price,
            delivery_time=delivery_time,
            carrier_code=str(data.get("carrier_code") or ""),
            service_description=str(data.get("service_description") or ""),
            error=bool(data.get("error", False)),
            message=None if message is None else str(message),
            extra={k: v for k, v in data.items() if k not in _KNOWN_QUOTE_FIELDS},
        )
