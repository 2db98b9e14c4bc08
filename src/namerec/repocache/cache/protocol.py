"""Cache backend protocol definition."""

from collections.abc import Awaitable
from collections.abc import Callable
from typing import Any
from typing import Protocol
from typing import runtime_checkable

Producer = Callable[[], Awaitable[Any]]


@runtime_checkable
class CacheBackend(Protocol):
    """
    Protocol for cache backends.

    Allows structural subtyping - any class implementing these methods
    can be used as a cache backend without explicit inheritance.
    Expiry is enforced by the backend, not by its callers.
    """

    async def has(self, key: str) -> bool:
        """
        Check whether a live entry exists.

        Args:
            key: Cache key

        Returns:
            True if key is present and not expired
        """
        ...

    async def get(self, key: str) -> Any:
        """
        Get cached value by key.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found

        Raises:
            CacheCorruptionError: If the stored value cannot be decoded
        """
        ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """
        Store value.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Optional TTL in seconds (None = use backend default)
        """
        ...

    async def remember(self, key: str, ttl: int | None, producer: Producer) -> Any:
        """
        Return cached value, or await producer and store its result.

        Args:
            key: Cache key
            ttl: TTL in seconds for a freshly produced value
            producer: Coroutine factory called on miss

        Returns:
            Cached or freshly produced value
        """
        ...

    async def forget(self, key: str) -> bool:
        """
        Remove entry.

        Args:
            key: Cache key

        Returns:
            True if an entry was removed
        """
        ...

    async def clear(self) -> None:
        """Clear all cached entries."""
        ...

    async def stats(self) -> dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Statistics dictionary with at least:
            - backend: backend type name
            - size: current number of cached items
            - hits: cache hit count
            - misses: cache miss count
            - hit_rate: hit rate (0.0-1.0)
        """
        ...
