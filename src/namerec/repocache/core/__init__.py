"""Core repocache components."""

from namerec.repocache.core.exceptions import CacheCorruptionError
from namerec.repocache.core.exceptions import EntityNotFoundError
from namerec.repocache.core.exceptions import KeyDerivationError
from namerec.repocache.core.exceptions import RepoCacheError
from namerec.repocache.core.exceptions import RepositoryValidationError
from namerec.repocache.core.types import DEFAULT_COLUMNS
from namerec.repocache.core.types import Entity
from namerec.repocache.core.types import Page
from namerec.repocache.core.types import QueryDescriptor

__all__ = [
    'DEFAULT_COLUMNS',
    'Entity',
    'Page',
    'QueryDescriptor',
    'RepoCacheError',
    'KeyDerivationError',
    'CacheCorruptionError',
    'EntityNotFoundError',
    'RepositoryValidationError',
]
