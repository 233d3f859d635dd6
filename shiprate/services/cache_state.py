"""Enabled/disabled state of cache types."""

from typing import Iterable


class CacheState:
    """Tracks which cache types are enabled."""

    def __init__(self, enabled: Iterable[str] = ()):
        self._enabled: set[str] = set(enabled)

    def is_enabled(self, type_identifier: str) -> bool:
        return type_identifier in self._enabled

    def enable(self, type_identifier: str) -> None:
        self._enabled.add(type_identifier)

    def disable(self, type_identifier: str) -> None:
        self._enabled.discard(type_identifier)
