"""Shipping rate service tests."""

import math
from unittest.mock import MagicMock

import pytest

from shiprate.config import CACHE_TYPE_IDENTIFIER, Settings
from shiprate.exceptions import CacheStoreUnavailableError
from shiprate.models import CartLineItem, RateRequest
from shiprate.services.cache_manager import CacheManager
from shiprate.services.cache_state import CacheState
from shiprate.services.cache_store import CacheStore
from shiprate.services.shipping import RateQuery, ShippingRateService
from shiprate.services.weight import KG_TO_LBS_FACTOR, LBS_TO_KG_FACTOR, WeightConverter


class FakeProvider:
    def __init__(self, quotes):
        self.quotes = quotes
        self.queries: list[RateQuery] = []

    def __call__(self, query: RateQuery):
        self.queries.append(query)
        return list(self.quotes)


@pytest.fixture
def provider(quotes) -> FakeProvider:
    return FakeProvider(quotes)


@pytest.fixture
def service(cache_manager, provider, settings) -> ShippingRateService:
    return ShippingRateService(cache_manager, provider, settings=settings)


class TestWeightConverter:
    def test_kg_passthrough(self):
        assert WeightConverter("kg").to_kg(2.5) == 2.5

    def test_lbs_to_kg(self):
        assert WeightConverter("lbs").to_kg(10) == pytest.approx(10 * LBS_TO_KG_FACTOR)

    def test_kg_to_lbs(self):
        assert WeightConverter("KG").to_lbs(1) == pytest.approx(KG_TO_LBS_FACTOR)

    def test_unknown_unit(self):
        with pytest.raises(ValueError, match="Unsupported"):
            WeightConverter("stone")


class TestBuildQuery:
    def test_query_from_cart(self, service, cart):
        query = service.build_query(cart)
        assert query.origin_postcode == "01310100"
        assert query.dest_postcode == "22041001"
        assert [i.key for i in query.items] == ["7", "10-11"]
        assert query.coupon_code is None
        assert query.multi_quote is False

    def test_configurable_child_priced_from_parent(self, service, cart):
        child = service.build_query(cart).items[1]
        assert child.sku == "SHIRT-M"
        assert child.unit_price == 50.0
        assert child.final_price == 100.0

    def test_totals(self, service, cart):
        query = service.build_query(cart)
        assert query.total_weight_kg == pytest.approx(0.4 * 2 + 0.3)
        assert query.total_value == pytest.approx(15.0 * 2 + 100.0)

    def test_weight_in_lbs(self, cache_manager, provider, cart):
        settings = Settings(origin_postcode="01310-100", weight_unit="lbs")
        svc = ShippingRateService(cache_manager, provider, settings=settings)
        mug = svc.build_query(cart).items[0]
        assert mug.weight_kg == pytest.approx(0.4 * LBS_TO_KG_FACTOR)


class TestShippingRateService:
    def test_miss_calls_provider_and_caches(self, service, provider, cart, quotes, store):
        assert service.get_quotes(cart) == quotes
        assert len(provider.queries) == 1
        assert len(store) == 1

    def test_hit_skips_provider(self, service, provider, cart, quotes):
        service.get_quotes(cart)
        assert service.get_quotes(cart) == quotes
        assert len(provider.queries) == 1

    def test_changed_cart_calls_provider_again(self, service, provider, cart):
        service.get_quotes(cart)
        service.get_quotes(RateRequest(dest_postcode="70000-000", items=cart.items))
        assert len(provider.queries) == 2

    def test_disabled_cache_always_live(self, key_generator, provider, settings, cart):
        store = MagicMock(spec=CacheStore)
        manager = CacheManager(store=store, state=CacheState(), key_generator=key_generator)
        svc = ShippingRateService(manager, provider, settings=settings)
        svc.get_quotes(cart)
        svc.get_quotes(cart)
        assert len(provider.queries) == 2
        store.get.assert_not_called()

    def test_store_down_falls_back_to_provider(self, key_generator, provider, settings, cart, quotes):
        store = MagicMock(spec=CacheStore)
        store.get.side_effect = CacheStoreUnavailableError("down")
        store.set.side_effect = CacheStoreUnavailableError("down")
        manager = CacheManager(store=store, state=CacheState([CACHE_TYPE_IDENTIFIER]),
                               key_generator=key_generator)
        svc = ShippingRateService(manager, provider, settings=settings)
        assert svc.get_quotes(cart) == quotes
        assert len(provider.queries) == 1

    def test_unkeyable_cart_falls_back_to_provider(self, service, provider, quotes, store):
        request = RateRequest(dest_postcode="01000-000", items=[
            CartLineItem(product_id=1, quantity=math.inf),
        ])
        assert service.get_quotes(request) == quotes
        assert len(provider.queries) == 1
        assert len(store) == 0

    def test_provider_errors_propagate(self, cache_manager, settings, cart):
        def failing(query):
            raise RuntimeError("carrier API down")

        svc = ShippingRateService(cache_manager, failing, settings=settings)
        with pytest.raises(RuntimeError, match="carrier API down"):
            svc.get_quotes(cart)

    def test_coupon_forwarded(self, service, provider, cart):
        service.get_quotes(RateRequest(dest_postcode=cart.dest_postcode, items=cart.items,
                                       coupon_code=" FRETEGRATIS "))
        assert provider.queries[0].coupon_code == "FRETEGRATIS"

    def test_only_eligible_items_sent(self, service, provider):
        request = RateRequest(dest_postcode="01000-000", items=[
            CartLineItem(product_id=1, quantity=1, weight=1.0),
            CartLineItem(product_id=2, quantity=1, product_type="virtual"),
        ])
        service.get_quotes(request)
        assert [i.key for i in provider.queries[0].items] == ["1"]
