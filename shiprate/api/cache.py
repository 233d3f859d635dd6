"""Rate cache management API."""

from fastapi import APIRouter, Depends, HTTPException

from shiprate.cache import get_cache_manager
from shiprate.config import Settings, get_settings
from shiprate.exceptions import CacheSerializationError, CacheStoreUnavailableError
from shiprate.schemas import (
    CacheFlushOut,
    CacheKeyOut,
    CacheLookupOut,
    CachedQuoteOut,
    CacheStatusOut,
    RateRequestIn,
)
from shiprate.services.cache_manager import CacheManager
from shiprate.services.rate_request import rate_request_scope

router = APIRouter(prefix="/shipping-cache", tags=["shipping-cache"])


@router.get("/status", response_model=CacheStatusOut)
def cache_status(
    cache: CacheManager = Depends(get_cache_manager),
    settings: Settings = Depends(get_settings),
):
    return CacheStatusOut(
        type_identifier=cache.type_identifier,
        tag=cache.tag,
        enabled=cache.is_enabled(),
        backend=settings.cache_backend,
    )


@router.post("/flush", response_model=CacheFlushOut)
def flush_cache(cache: CacheManager = Depends(get_cache_manager)):
    try:
        removed = cache.purge()
    except CacheStoreUnavailableError as e:
        raise HTTPException(503, str(e))
    return CacheFlushOut(tag=cache.tag, removed=removed)


@router.post("/key", response_model=CacheKeyOut)
def preview_key(payload: RateRequestIn, cache: CacheManager = Depends(get_cache_manager)):
    request = payload.to_rate_request()
    with rate_request_scope(request) as context:
        try:
            key = cache.key_generator.generate(context)
        except CacheSerializationError as e:
            raise HTTPException(422, str(e))
    return CacheKeyOut(
        key=key.decode("utf-8"),
        items=cache.key_generator.item_set(request),
    )


@router.post("/lookup", response_model=CacheLookupOut)
def lookup(payload: RateRequestIn, cache: CacheManager = Depends(get_cache_manager)):
    with rate_request_scope(payload.to_rate_request()) as context:
        try:
            result = cache.load(context)
        except CacheSerializationError as e:
            raise HTTPException(422, str(e))
        except CacheStoreUnavailableError as e:
            raise HTTPException(503, str(e))
    return CacheLookupOut(
        status=result.status.value,
        quotes=[CachedQuoteOut.model_validate(r) for r in result.records],
    )
