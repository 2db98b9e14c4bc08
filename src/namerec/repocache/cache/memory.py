"""In-memory LRU cache backend with TTL."""

import copy
import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from namerec.repocache.cache.protocol import Producer

logger = logging.getLogger(__name__)


@dataclass
class MemoryCacheBackend:
    """
    In-memory LRU cache backend (single process).

    Suitable for:
    - Development and testing
    - Single-process deployments
    - When Redis is not available

    Not suitable for:
    - Multi-process deployments (uvicorn workers)
    - Distributed systems (k8s pods)

    Thread-safe: Yes (uses RLock, never awaits while holding it).
    Values are deep-copied on the way in and out, so callers mutating a
    returned entity never change what is cached.
    `clock` returns seconds and can be replaced in tests.
    """

    max_size: int = 1024
    default_ttl: int | None = None
    clock: Callable[[], float] = time.monotonic
    _cache: OrderedDict[str, tuple[Any, float | None]] = field(default_factory=OrderedDict, init=False)
    _hits: int = field(default=0, init=False)
    _misses: int = field(default=0, init=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False)

    def __post_init__(self) -> None:
        """Validate initialization parameters."""
        if self.max_size <= 0:
            msg = 'max_size must be positive integer'
            raise ValueError(msg)

    async def has(self, key: str) -> bool:
        """Check for a live entry, counting hits and misses."""
        with self._lock:
            if self._live(key):
                self._hits += 1
                return True

            self._misses += 1
            return False

    async def get(self, key: str) -> Any:
        """Get value from cache with LRU update (O(1))."""
        with self._lock:
            if not self._live(key):
                return None
            # Move to end (most recently used) - O(1) with OrderedDict
            self._cache.move_to_end(key)
            return copy.deepcopy(self._cache[key][0])

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store value in cache with LRU eviction (O(1))."""
        ttl = ttl or self.default_ttl
        expires_at = self.clock() + ttl if ttl else None

        with self._lock:
            # Evict oldest if cache full and key is new
            if key not in self._cache and len(self._cache) >= self.max_size:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug(f'Evicted least recently used key {evicted}')

            self._cache[key] = (copy.deepcopy(value), expires_at)
            self._cache.move_to_end(key)

    async def remember(self, key: str, ttl: int | None, producer: Producer) -> Any:
        """Return live value or produce, store and return a fresh one."""
        with self._lock:
            if self._live(key):
                self._cache.move_to_end(key)
                return copy.deepcopy(self._cache[key][0])

        # Producer is awaited outside the lock; concurrent misses both produce
        value = await producer()
        await self.set(key, value, ttl)
        return value

    async def forget(self, key: str) -> bool:
        """Remove entry, reporting whether a live one existed."""
        with self._lock:
            live = self._live(key)
            self._cache.pop(key, None)
            return live

    async def clear(self) -> None:
        """Clear all cache."""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    async def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total = self._hits + self._misses
            return {
                'backend': 'memory',
                'size': len(self._cache),
                'max_size': self.max_size,
                'hits': self._hits,
                'misses': self._misses,
                'hit_rate': self._hits / total if total > 0 else 0.0,
            }

    def _live(self, key: str) -> bool:
        """Check key presence, dropping it if expired. Caller holds the lock."""
        entry = self._cache.get(key)
        if entry is None:
            return False

        expires_at = entry[1]
        if expires_at is not None and self.clock() >= expires_at:
            del self._cache[key]
            return False

        return True
