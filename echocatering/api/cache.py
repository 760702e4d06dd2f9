"""
Process-local TTL cache for upstream listings.

Entries are stored as ``key -> (value, expires_at)`` and are only touched
from the event loop, so no locking is needed.
"""

import time
from collections.abc import Awaitable, Callable
from typing import Any

from echocatering.api.v1.configs.config import settings
from echocatering.api.v1.configs.logging_init import logger

_MISSING = object()


class TTLCache:
    def __init__(self, ttl: float | None = None, clock: Callable[[], float] = time.monotonic):
        self.ttl = settings.media.cache_ttl_seconds if ttl is None else ttl
        self.clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default
        value, expires_at = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return default
        return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        self._entries[key] = (value, self.clock() + (self.ttl if ttl is None else ttl))

    def exists(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def invalidate(self, key: str | None = None) -> None:
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    async def get_or_set(self, key: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value for ``key``, awaiting ``factory`` on a miss."""
        cached = self.get(key, _MISSING)
        if cached is not _MISSING:
            logger.debug(f"Cache hit: {key}")
            return cached

        value = await factory()
        self.set(key, value)
        logger.debug(f"Cached {key} for {self.ttl}s")
        return value

    def stats(self) -> dict[str, Any]:
        now = self.clock()
        return {
            "keys": len(self._entries),
            "live_keys": sum(1 for _, expires_at in self._entries.values() if now < expires_at),
            "ttl_seconds": self.ttl,
        }


_cache: TTLCache | None = None


def get_cache() -> TTLCache:
    """Get the global cache instance."""
    global _cache
    if _cache is None:
        _cache = TTLCache()
    return _cache
