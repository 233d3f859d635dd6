"""Shipping rate lookup with the rate cache in front of the carrier API.

The carrier client itself is supplied by the host as a ``RateProvider``:
any callable taking a ``RateQuery`` and returning quote records. Cache
failures never stop a quote; the provider is always the fallback.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from shiprate.config import Settings, get_settings
from shiprate.exceptions import CacheSerializationError, CacheStoreUnavailableError
from shiprate.models import CachedQuoteRecord, RateRequest
from shiprate.services.cache_key import item_key
from shiprate.services.cache_manager import CacheManager, CacheStatus
from shiprate.services.coupon import CouponReader, coupon_reader
from shiprate.services.item_price import ItemPriceCalculator, item_price_calculator
from shiprate.services.postcode import PostcodeNormalizer, postcode_normalizer
from shiprate.services.quote_items import (
    ItemQuantityCalculator,
    QuoteItemValidator,
    item_quantity_calculator,
    quote_item_validator,
)
from shiprate.services.rate_request import RateRequestContext, rate_request_scope
from shiprate.services.weight import WeightConverter

logger = logging.getLogger(__name__)


@dataclass
class RateQueryItem:
    """One shippable line as sent to the carrier."""
    key: str
    sku: str
    quantity: float
    unit_price: float
    final_price: float
    weight_kg: float


@dataclass
class RateQuery:
    """Normalized request for the carrier API."""
    origin_postcode: str
    dest_postcode: str
    items: list[RateQueryItem] = field(default_factory=list)
    coupon_code: Optional[str] = None
    multi_quote: bool = False

    @property
    def total_weight_kg(self) -> float:
        return round(sum(i.weight_kg * i.quantity for i in self.items), 4)

    @property
    def total_value(self) -> float:
        return round(sum(i.final_price * i.quantity for i in self.items), 2)


RateProvider = Callable[[RateQuery], Sequence[CachedQuoteRecord]]


class ShippingRateService:
    """Answers rate requests from the cache, falling back to the provider."""

    def __init__(
        self,
        cache: CacheManager,
        provider: RateProvider,
        settings: Optional[Settings] = None,
        validator: QuoteItemValidator = quote_item_validator,
        quantity_calculator: ItemQuantityCalculator = item_quantity_calculator,
        price_calculator: ItemPriceCalculator = item_price_calculator,
        normalizer: PostcodeNormalizer = postcode_normalizer,
        coupons: CouponReader = coupon_reader,
    ):
        self.cache = cache
        self.provider = provider
        self.settings = settings or get_settings()
        self.validator = validator
        self.quantity_calculator = quantity_calculator
        self.price_calculator = price_calculator
        self.normalizer = normalizer
        self.coupons = coupons
        self.weights = WeightConverter(self.settings.weight_unit)

    def get_quotes(self, request: RateRequest) -> list[CachedQuoteRecord]:
        """Quotes for ``request``, from cache when the cart facts are unchanged."""
        with rate_request_scope(request) as context:
            cached = self._load(context)
            if cached is not None:
                return cached

            records = list(self.provider(self.build_query(request)))
            self._save(context, records)
            return records

    def build_query(self, request: RateRequest) -> RateQuery:
        items = []
        for item in request.items:
            if not self.validator.is_eligible(item):
                continue
            items.append(RateQueryItem(
                key=item_key(item),
                sku=item.sku,
                quantity=self.quantity_calculator.quantity(item),
                unit_price=self.price_calculator.unit_price(item),
                final_price=self.price_calculator.final_price(item),
                weight_kg=self.weights.to_kg(item.weight),
            ))
        return RateQuery(
            origin_postcode=self.normalizer.format(self.settings.origin_postcode),
            dest_postcode=self.normalizer.format(request.dest_postcode),
            items=items,
            coupon_code=self.coupons.get_coupon_code(request),
            multi_quote=self.settings.multi_quote_enabled,
        )

    def _load(self, context: RateRequestContext) -> Optional[list[CachedQuoteRecord]]:
        try:
            lookup = self.cache.load(context)
        except (CacheStoreUnavailableError, CacheSerializationError) as e:
            logger.warning(f"Rate cache unavailable, quoting live: {e}")
            return None
        if lookup.status is CacheStatus.HIT:
            return lookup.records
        return None

    def _save(self, context: RateRequestContext, records: list[CachedQuoteRecord]) -> None:
        try:
            self.cache.save(context, records)
        except (CacheStoreUnavailableError, CacheSerializationError) as e:
            logger.warning(f"Rate cache write failed: {e}")
