"""Bounded TTL cache for external lookup results."""

from collections import OrderedDict
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

MISSING = object()


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str, default: object = None) -> object:
        """Return a cached value if present and not expired, else ``default``."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a value with a TTL in seconds."""


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime


class InMemoryCache(Cache):
    """In-process cache that evicts the oldest entry beyond ``max_entries``.

    ``None`` is a storable value, so callers can cache negative lookups and
    tell them apart from misses via ``default``.
    """

    def __init__(self, max_entries: int = 1024) -> None:
        self.max_entries = max_entries
        self._entries: OrderedDict[str, _CacheEntry] = OrderedDict()

    def get(self, key: str, default: object = None) -> object:
        """Return a cached value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return default
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(key, None)
            return default
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL."""
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=ttl_seconds)
        self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def __len__(self) -> int:
        return len(self._entries)

