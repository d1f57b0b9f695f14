from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import timedelta


@dataclass(slots=True)
class CacheEntry[T]:
    value: T
    loaded_at: datetime = field(default_factory=datetime.now)
    expires_at: datetime | None = None

    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False
        return datetime.now() > self.expires_at


class MemoryCache[T]:
    """Keyed in-process cache for parsed terminology resources.

    Keys are canonical references (``url`` or ``url|version``). Entries may
    carry a time to live; expired entries are dropped on access.
    """

    def __init__(self, default_ttl: timedelta | None = None) -> None:
        super().__init__()
        self._store: dict[str, CacheEntry[T]] = {}
        self._default_ttl = default_ttl
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> T | None:
        entry = self._store.get(key)
        if entry is None:
            self.misses += 1
            return None
        if entry.is_expired():
            del self._store[key]
            self.misses += 1
            return None
        self.hits += 1
        return entry.value

    def set(self, key: str, value: T, ttl: timedelta | None = None) -> None:
        effective_ttl = ttl if ttl is not None else self._default_ttl
        expires_at = datetime.now() + effective_ttl if effective_ttl else None
        self._store[key] = CacheEntry(value=value, expires_at=expires_at)

    def get_or_load(self, key: str, loader: Callable[[], T | None]) -> T | None:
        cached = self.get(key)
        if cached is not None:
            return cached
        value = loader()
        if value is not None:
            self.set(key, value)
        return value

    def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    def clear(self) -> None:
        self._store.clear()
        self.hits = 0
        self.misses = 0

    def has(self, key: str) -> bool:
        entry = self._store.get(key)
        return entry is not None and not entry.is_expired()

    def size(self) -> int:
        return len(self._store)

    def keys(self) -> list[str]:
        return list(self._store.keys())
