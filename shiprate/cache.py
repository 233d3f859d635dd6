"""Process-wide cache collaborators."""

from functools import lru_cache

from shiprate.config import CACHE_TYPE_IDENTIFIER, get_settings
from shiprate.services.cache_key import CacheKeyGenerator
from shiprate.services.cache_manager import CacheManager
from shiprate.services.cache_state import CacheState
from shiprate.services.cache_store import CacheStore, build_cache_store


@lru_cache
def get_cache_store() -> CacheStore:
    return build_cache_store(get_settings())


@lru_cache
def get_cache_state() -> CacheState:
    settings = get_settings()
    return CacheState([CACHE_TYPE_IDENTIFIER] if settings.cache_enabled else [])


def get_cache_manager() -> CacheManager:
    return CacheManager(
        store=get_cache_store(),
        state=get_cache_state(),
        key_generator=CacheKeyGenerator(get_settings()),
    )
