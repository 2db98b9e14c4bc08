"""Redis cache backend for distributed deployments."""

import logging
from typing import Any

from namerec.repocache.cache.codec import decode
from namerec.repocache.cache.codec import encode
from namerec.repocache.cache.protocol import Producer

logger = logging.getLogger(__name__)


class RedisCacheBackend:
    """
    Redis cache backend (multi-process, multi-container).

    Suitable for:
    - Production deployments
    - Multi-process servers (uvicorn workers)
    - Distributed systems (k8s pods)
    - When cached reads need to be shared across instances

    Requires:
    - redis package (install with: pip install namerec-repocache[redis])
    - Running Redis instance

    Expiry is enforced by Redis itself (SET ... EX).
    """

    def __init__(
        self,
        redis_url: str = 'redis://localhost:6379/0',
        prefix: str = 'repocache:',
        default_ttl: int = 30,
        client: Any = None,
    ) -> None:
        """
        Initialize Redis cache.

        Args:
            redis_url: Redis connection URL
            prefix: Key prefix for namespacing
            default_ttl: Default TTL in seconds
            client: Ready redis.asyncio client (redis_url is ignored when given)

        Raises:
            ImportError: If redis package not installed and no client given
        """
        if client is None:
            try:
                import redis.asyncio
            except ImportError as e:
                msg = 'redis package required for RedisCacheBackend. Install with: pip install redis'
                raise ImportError(msg) from e

            client = redis.asyncio.from_url(redis_url, decode_responses=True)

        self._redis = client
        self._prefix = prefix
        self._default_ttl = default_ttl

        # Stats keys (separate from cached values)
        self._hits_key = f'{prefix}stats:hits'
        self._misses_key = f'{prefix}stats:misses'

    async def has(self, key: str) -> bool:
        """Check key existence in Redis."""
        if await self._redis.exists(self._full_key(key)):
            await self._redis.incr(self._hits_key)
            return True

        await self._redis.incr(self._misses_key)
        return False

    async def get(self, key: str) -> Any:
        """Get value from Redis."""
        data = await self._redis.get(self._full_key(key))
        if data is None:
            return None
        return decode(key, data)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store value in Redis with TTL."""
        ttl = ttl or self._default_ttl
        await self._redis.set(self._full_key(key), encode(value), ex=ttl)

    async def remember(self, key: str, ttl: int | None, producer: Producer) -> Any:
        """Return cached value or produce and store a fresh one."""
        data = await self._redis.get(self._full_key(key))
        if data is not None:
            return decode(key, data)

        value = await producer()
        await self.set(key, value, ttl)
        logger.debug(f'Stored {key} in Redis (ttl={ttl or self._default_ttl})')
        return value

    async def forget(self, key: str) -> bool:
        """Delete key from Redis."""
        return bool(await self._redis.delete(self._full_key(key)))

    async def clear(self) -> None:
        """Clear all keys under the prefix."""
        # Use cursor-based scan for safe deletion
        cursor = 0
        while True:
            cursor, keys = await self._redis.scan(cursor, match=f'{self._prefix}*', count=100)
            if keys:
                await self._redis.delete(*keys)
            if cursor == 0:
                break

    async def stats(self) -> dict[str, Any]:
        """Get cache statistics from Redis."""
        hits = int(await self._redis.get(self._hits_key) or 0)
        misses = int(await self._redis.get(self._misses_key) or 0)
        total = hits + misses

        size = 0
        cursor = 0
        while True:
            cursor, keys = await self._redis.scan(cursor, match=f'{self._prefix}*', count=100)
            size += len([k for k in keys if k not in (self._hits_key, self._misses_key)])
            if cursor == 0:
                break

        return {
            'backend': 'redis',
            'size': size,
            'hits': hits,
            'misses': misses,
            'hit_rate': hits / total if total > 0 else 0.0,
        }

    async def close(self) -> None:
        """Close Redis connections."""
        await self._redis.aclose()

    def _full_key(self, key: str) -> str:
        return f'{self._prefix}{key}'
