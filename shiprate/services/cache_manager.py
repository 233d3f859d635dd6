"""Memoization of carrier rate quotes keyed on cart facts.

Entries are written without expiry and tagged with ``CACHE_TAG`` so the
whole rate cache can be purged at once. Key derivation and payload shaping
live here; storage belongs to the ``CacheStore``.
"""

import hashlib
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from shiprate.config import CACHE_TAG, CACHE_TYPE_IDENTIFIER
from shiprate.exceptions import CacheSerializationError, RateRequestMissingError
from shiprate.models import CachedQuoteRecord
from shiprate.services.cache_key import CacheKeyGenerator
from shiprate.services.cache_state import CacheState
from shiprate.services.cache_store import CacheStore
from shiprate.services.rate_request import RateRequestContext
from shiprate.services.serializer import JsonSerializer, serializer

logger = logging.getLogger(__name__)


class CacheStatus(str, Enum):
    """Outcome of a cache lookup."""
    DISABLED = "disabled"  # cache type switched off
    BYPASS = "bypass"      # no active rate request
    MISS = "miss"
    HIT = "hit"


@dataclass
class CacheLookup:
    status: CacheStatus
    records: list[CachedQuoteRecord] = field(default_factory=list)

    @property
    def hit(self) -> bool:
        return self.status is CacheStatus.HIT


def _digest(key: bytes) -> str:
    return hashlib.sha256(key).hexdigest()[:12]


class CacheManager:
    """Loads and saves rate quotes for the cart held by a request context."""

    def __init__(
        self,
        store: CacheStore,
        state: CacheState,
        key_generator: Optional[CacheKeyGenerator] = None,
        payload_serializer: JsonSerializer = serializer,
        type_identifier: str = CACHE_TYPE_IDENTIFIER,
        tag: str = CACHE_TAG,
    ):
        self.store = store
        self.state = state
        self.key_generator = key_generator or CacheKeyGenerator()
        self.serializer = payload_serializer
        self.type_identifier = type_identifier
        self.tag = tag

    def is_enabled(self) -> bool:
        return bool(self.state.is_enabled(self.type_identifier))

    def load(self, context: RateRequestContext) -> CacheLookup:
        """Look up cached quotes for the active request.

        A corrupted entry is reported as a miss. Store errors propagate as
        ``CacheStoreUnavailableError``.
        """
        if not self.is_enabled():
            return CacheLookup(CacheStatus.DISABLED)

        try:
            key = self.key_generator.generate(context)
        except RateRequestMissingError:
            logger.warning("Rate cache load skipped: no active rate request")
            return CacheLookup(CacheStatus.BYPASS)

        data = self.store.get(key)
        if not data:
            logger.debug(f"Rate cache miss {_digest(key)}")
            return CacheLookup(CacheStatus.MISS)

        try:
            records = self._records_from_payload(data)
        except CacheSerializationError as e:
            logger.warning(f"Rate cache entry {_digest(key)} unreadable, treating as miss: {e}")
            return CacheLookup(CacheStatus.MISS)

        logger.debug(f"Rate cache hit {_digest(key)} ({len(records)} quotes)")
        return CacheLookup(CacheStatus.HIT, records)

    def save(self, context: RateRequestContext, records: Sequence[CachedQuoteRecord]) -> bool:
        """Store quotes for the active request; ``False`` when caching is off."""
        if not self.is_enabled():
            return False

        try:
            key = self.key_generator.generate(context)
        except RateRequestMissingError:
            logger.warning("Rate cache save skipped: no active rate request")
            return False

        payload = self.serializer.serialize([record.to_dict() for record in records])
        saved = bool(self.store.set(key, payload, tags={self.tag}, ttl=None))
        logger.debug(f"Rate cache write {_digest(key)} ({len(records)} quotes): {saved}")
        return saved

    def purge(self) -> int:
        """Drop every rate cache entry."""
        return self.store.purge_tag(self.tag)

    def _records_from_payload(self, data: bytes) -> list[CachedQuoteRecord]:
        services = self.serializer.deserialize(data)
        if not isinstance(services, list):
            raise CacheSerializationError("Cached payload is not a list of quotes")
        try:
            return [CachedQuoteRecord.from_dict(service) for service in services]
        except ValueError as e:
            raise CacheSerializationError(str(e)) from e
