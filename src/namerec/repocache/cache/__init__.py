"""Repository read caching package."""

from namerec.repocache.cache.keys import make_cache_key
from namerec.repocache.cache.memory import MemoryCacheBackend
from namerec.repocache.cache.protocol import CacheBackend

# Redis backend is imported lazily to avoid dependency issues
# Use: from namerec.repocache.cache.redis import RedisCacheBackend

__all__ = [
    'CacheBackend',
    'make_cache_key',
    'MemoryCacheBackend',
]
