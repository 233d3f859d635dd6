"""Cache key derivation from the shipping-relevant facts of a cart.

The key is the canonical serialization of::

    [origin postcode, destination postcode, {item key: qty, ...}, coupon, mode]

Item keys are the product id, or ``"<parent product id>-<product id>"`` for
child lines, and are sorted ascending. Only eligible lines are included, so
changes to lines that do not ship leave the key untouched.
"""

from typing import Optional

from shiprate.config import Settings, get_settings
from shiprate.models import CartLineItem, RateRequest
from shiprate.services.coupon import CouponReader, coupon_reader
from shiprate.services.postcode import PostcodeNormalizer, postcode_normalizer
from shiprate.services.quote_items import (
    ItemQuantityCalculator,
    QuoteItemValidator,
    item_quantity_calculator,
    quote_item_validator,
)
from shiprate.services.rate_request import RateRequestContext
from shiprate.services.serializer import JsonSerializer, serializer

MULTI_QUOTE_MARKER = "multi"


def item_key(item: CartLineItem) -> str:
    """Effective product key of a cart line."""
    if item.parent is not None:
        return f"{int(item.parent.product_id)}-{int(item.product_id)}"
    return str(int(item.product_id))


class CacheKeyGenerator:
    """Builds a deterministic cache key for the active rate request."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        validator: QuoteItemValidator = quote_item_validator,
        quantity_calculator: ItemQuantityCalculator = item_quantity_calculator,
        normalizer: PostcodeNormalizer = postcode_normalizer,
        coupons: CouponReader = coupon_reader,
        key_serializer: JsonSerializer = serializer,
    ):
        self.settings = settings or get_settings()
        self.validator = validator
        self.quantity_calculator = quantity_calculator
        self.normalizer = normalizer
        self.coupons = coupons
        self.serializer = key_serializer

    def item_set(self, request: RateRequest) -> dict[str, float]:
        """Eligible item key -> quantity, sorted by key.

        Lines that map to the same key overwrite earlier ones.
        """
        items: dict[str, float] = {}
        for item in request.items:
            if not self.validator.is_eligible(item):
                continue
            items[item_key(item)] = float(self.quantity_calculator.quantity(item))
        return dict(sorted(items.items()))

    def generate(self, context: RateRequestContext) -> bytes:
        """Serialize the cart facts of ``context``.

        Raises ``RateRequestMissingError`` when the context holds no request.
        """
        request = context.require()
        return self.serializer.serialize([
            self.normalizer.format(self.settings.origin_postcode),
            self.normalizer.format(request.dest_postcode),
            self.item_set(request),
            self.coupons.get_coupon_code(request),
            MULTI_QUOTE_MARKER if self.settings.multi_quote_enabled else None,
        ])
