"""Cache store backends.

The rate cache only needs get/set by key with tags, plus purge by tag. The
in-memory store serves tests and single-process tools; Redis serves
deployments with more than one worker.
"""

import hashlib
import logging
import threading
import time
import uuid
from abc import ABC, abstractmethod
from typing import Iterable, Optional

import redis

from shiprate.config import Settings
from shiprate.exceptions import CacheStoreUnavailableError

logger = logging.getLogger(__name__)


class CacheStore(ABC):
    """Key/value store with tag-based invalidation."""

    @abstractmethod
    def get(self, key: bytes) -> Optional[bytes]:
        """Return the stored value, ``None`` when absent."""

    @abstractmethod
    def set(
        self,
        key: bytes,
        value: bytes,
        tags: Iterable[str] = (),
        ttl: Optional[int] = None,
    ) -> bool:
        """Store a value; ``ttl`` of ``None`` keeps it until purged or evicted."""

    @abstractmethod
    def purge_tag(self, tag: str) -> int:
        """Remove every entry carrying ``tag``; return how many were removed."""


class InMemoryCacheStore(CacheStore):
    """Process-local store."""

    def __init__(self):
        self._entries: dict[bytes, tuple[bytes, Optional[float]]] = {}
        self._tags: dict[str, set[bytes]] = {}
        self._lock = threading.Lock()

    def get(self, key: bytes) -> Optional[bytes]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and expires_at <= time.monotonic():
                del self._entries[key]
                return None
            return value

    def set(self, key, value, tags=(), ttl=None) -> bool:
        expires_at = time.monotonic() + ttl if ttl else None
        with self._lock:
            self._entries[key] = (value, expires_at)
            for tag in tags:
                self._tags.setdefault(tag, set()).add(key)
        return True

    def purge_tag(self, tag: str) -> int:
        with self._lock:
            keys = self._tags.pop(tag, set())
            removed = 0
            for key in keys:
                if self._entries.pop(key, None) is not None:
                    removed += 1
            return removed

    def __len__(self) -> int:
        return len(self._entries)


class RedisCacheStore(CacheStore):
    """Redis-backed store; tags are kept as Redis sets of entry keys."""

    def __init__(self, client: redis.Redis, prefix: str = "shiprate:"):
        self.client = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, redis_url: str, prefix: str = "shiprate:") -> "RedisCacheStore":
        client = redis.Redis.from_url(
            redis_url,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        return cls(client, prefix)

    def entry_key(self, key: bytes) -> str:
        # Raw keys embed the cart; store a fixed-length digest instead.
        return f"{self.prefix}entry:{hashlib.sha256(key).hexdigest()}"

    def tag_key(self, tag: str) -> str:
        return f"{self.prefix}tag:{tag}"

    def get(self, key: bytes) -> Optional[bytes]:
        try:
            return self.client.get(self.entry_key(key))
        except redis.RedisError as e:
            raise CacheStoreUnavailableError(f"Redis get failed: {e}") from e

    def set(self, key, value, tags=(), ttl=None) -> bool:
        entry_key = self.entry_key(key)
        try:
            pipe = self.client.pipeline()
            pipe.set(entry_key, value, ex=ttl)
            for tag in tags:
                pipe.sadd(self.tag_key(tag), entry_key)
            results = pipe.execute()
        except redis.RedisError as e:
            raise CacheStoreUnavailableError(f"Redis set failed: {e}") from e
        return bool(results and results[0])

    def purge_tag(self, tag: str) -> int:
        tag_key = self.tag_key(tag)
        # Detach the tag set first so concurrent writes start a fresh one.
        purge_key = f"{tag_key}:purging:{uuid.uuid4().hex}"
        try:
            try:
                self.client.rename(tag_key, purge_key)
            except redis.ResponseError:
                return 0  # no such key
            members = self.client.smembers(purge_key)
            removed = self.client.delete(*members) if members else 0
            self.client.delete(purge_key)
        except redis.RedisError as e:
            raise CacheStoreUnavailableError(f"Redis purge failed: {e}") from e
        logger.info(f"Purged {removed} cache entries tagged {tag}")
        return int(removed)


def build_cache_store(settings: Settings) -> CacheStore:
    """Create the store configured by ``cache_backend``."""
    backend = settings.cache_backend.lower()
    if backend == "redis":
        return RedisCacheStore.from_url(settings.redis_url, settings.cache_key_prefix)
    if backend == "memory":
        return InMemoryCacheStore()
    raise ValueError(f"Unsupported cache backend '{settings.cache_backend}'")
