"""
Caller-owned cache abstraction.

The engine keeps no state between requests. A service that wants to reuse pools or
behavior profiles across requests injects a Cache (Redis, memcached, or the
in-process InMemoryCache below); the engine only calls get/set/expire.
"""

import time
from typing import Any, Callable, Dict, Optional, Protocol, Tuple


class Cache(Protocol):
    async def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when missing or expired."""
        ...

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        ...

    async def expire(self, key: str) -> None:
        """Drop key immediately."""
        ...


class InMemoryCache:
    """
    Process-local TTL cache. Values are stored as-is (the engine caches immutable
    models), so no serialization happens.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        self._entries[key] = (self._clock() + ttl_seconds, value)

    async def expire(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
