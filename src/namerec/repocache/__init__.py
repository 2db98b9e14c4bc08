"""
Repocache - cache-aside decorator for repositories.

Wraps a repository and caches read results keyed by the shape of the query.
"""

from namerec.repocache.cache import CacheBackend
from namerec.repocache.cache import MemoryCacheBackend
from namerec.repocache.cache import make_cache_key
from namerec.repocache.config import DEFAULT_LIFETIME
from namerec.repocache.config import RepoCacheSettings
from namerec.repocache.core.exceptions import CacheCorruptionError
from namerec.repocache.core.exceptions import EntityNotFoundError
from namerec.repocache.core.exceptions import KeyDerivationError
from namerec.repocache.core.exceptions import RepoCacheError
from namerec.repocache.core.exceptions import RepositoryValidationError
from namerec.repocache.core.types import DEFAULT_COLUMNS
from namerec.repocache.core.types import Entity
from namerec.repocache.core.types import Page
from namerec.repocache.core.types import QueryDescriptor
from namerec.repocache.logging_config import configure_logging
from namerec.repocache.repositories import CachingRepository
from namerec.repocache.repositories import Repository
from namerec.repocache.repositories import TableRepository

__version__ = '1.0'

__all__ = [
    # Core types
    'DEFAULT_COLUMNS',
    'Entity',
    'Page',
    'QueryDescriptor',
    # Exceptions
    'RepoCacheError',
    'KeyDerivationError',
    'CacheCorruptionError',
    'EntityNotFoundError',
    'RepositoryValidationError',
    # Cache
    'CacheBackend',
    'MemoryCacheBackend',
    'make_cache_key',
    # Repositories
    'Repository',
    'TableRepository',
    'CachingRepository',
    # Configuration
    'DEFAULT_LIFETIME',
    'RepoCacheSettings',
    'configure_logging',
]
