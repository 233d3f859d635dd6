"""Canonical JSON serializer for cache keys and cache payloads."""

import json
from typing import Any

from shiprate.exceptions import CacheSerializationError


class JsonSerializer:
    """Deterministic JSON encoding.

    Mapping keys are sorted and separators are fixed, so equal structures
    always encode to identical bytes across processes.
    """

    def serialize(self, value: Any) -> bytes:
        try:
            text = json.dumps(
                value,
                sort_keys=True,
                separators=(",", ":"),
                ensure_ascii=False,
                allow_nan=False,
            )
        except (TypeError, ValueError) as e:
            raise CacheSerializationError(f"Cannot serialize value: {e}") from e
        return text.encode("utf-8")

    def deserialize(self, data: bytes | str) -> Any:
        try:
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            return json.loads(data)
        except (UnicodeDecodeError, ValueError) as e:
            raise CacheSerializationError(f"Cannot deserialize payload: {e}") from e


serializer = JsonSerializer()
