"""Test fixtures."""

from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shiprate.cache import get_cache_manager
from shiprate.config import CACHE_TYPE_IDENTIFIER, Settings
from shiprate.main import app
from shiprate.models import CachedQuoteRecord, CartLineItem, RateRequest
from shiprate.services.cache_key import CacheKeyGenerator
from shiprate.services.cache_manager import CacheManager
from shiprate.services.cache_state import CacheState
from shiprate.services.cache_store import InMemoryCacheStore


@pytest.fixture
def settings() -> Settings:
    return Settings(origin_postcode="01310-100", multi_quote_enabled=False, cache_backend="memory")


@pytest.fixture
def store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def state() -> CacheState:
    return CacheState([CACHE_TYPE_IDENTIFIER])


@pytest.fixture
def key_generator(settings) -> CacheKeyGenerator:
    return CacheKeyGenerator(settings)


@pytest.fixture
def cache_manager(store, state, key_generator) -> CacheManager:
    return CacheManager(store=store, state=state, key_generator=key_generator)


@pytest.fixture
def cart() -> RateRequest:
    shirt = CartLineItem(product_id=10, quantity=1, price=50.0, row_total=100.0,
                         product_type="configurable", sku="SHIRT", weight=0.3)
    return RateRequest(
        dest_postcode="22041-001",
        items=[
            CartLineItem(product_id=7, quantity=2, price=15.0, row_total=30.0, sku="MUG", weight=0.4),
            shirt,
            CartLineItem(product_id=11, quantity=1, product_type="simple", parent=shirt,
                         sku="SHIRT-M", weight=0.3),
            CartLineItem(product_id=99, quantity=1, price=9.9, row_total=9.9,
                         product_type="virtual", sku="WARRANTY"),
        ],
    )


@pytest.fixture
def quotes() -> list[CachedQuoteRecord]:
    return [
        CachedQuoteRecord(
            carrier="Correios", carrier_code="COR", service_code="04014",
            service_description="SEDEX", shipping_price=Decimal("32.90"), delivery_time=2,
        ),
        CachedQuoteRecord(
            carrier="Jadlog", carrier_code="JAD", service_code=".PACKAGE",
            service_description="Jadlog Package", shipping_price=Decimal("24.15"),
            delivery_time=5, extra={"original_delivery_time": 4},
        ),
    ]


@pytest_asyncio.fixture
async def client(cache_manager) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_cache_manager] = lambda: cache_manager
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
