"""Repositories and the caching decorator."""

from namerec.repocache.repositories.caching import CachingRepository
from namerec.repocache.repositories.protocol import Repository
from namerec.repocache.repositories.table import TableRepository

__all__ = [
    'CachingRepository',
    'Repository',
    'TableRepository',
]
