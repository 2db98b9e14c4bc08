"""Cache-aside decorator for repositories."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from namerec.repocache.cache.keys import SCALAR_TYPES
from namerec.repocache.cache.keys import make_cache_key
from namerec.repocache.cache.protocol import CacheBackend
from namerec.repocache.cache.protocol import Producer
from namerec.repocache.config import DEFAULT_LIFETIME
from namerec.repocache.config import RepoCacheSettings
from namerec.repocache.core.exceptions import RepositoryValidationError
from namerec.repocache.core.types import DEFAULT_COLUMNS
from namerec.repocache.core.types import Columns
from namerec.repocache.core.types import Entity
from namerec.repocache.core.types import Page
from namerec.repocache.core.types import QueryDescriptor
from namerec.repocache.core.types import is_default_columns
from namerec.repocache.repositories.protocol import Repository

logger = logging.getLogger(__name__)


@dataclass
class CachingRepository:
    """
    Repository decorator with read-through caching.

    Reads are served from the cache when present; on a miss the wrapped
    repository is called and the result is stored for `lifetime` seconds.
    A cache hit is returned as-is even if the store has changed since:
    staleness is bounded only by the lifetime.

    Writes go to the wrapped repository first. Afterwards only the
    identifier-keyed entry of the affected record is refreshed (create,
    update) or forgotten (delete). Entries produced by all(), where() and
    paginate() are left alone and expire by lifetime.

    Example:
        users = CachingRepository.from_settings(
            TableRepository(engine, users_table),
            MemoryCacheBackend(),
        )

        user = await users.find(42)  # Miss: reads database, caches 'users.42'
        user = await users.find(42)  # Hit: no database access
        await users.update(42, {'name': 'John'})  # Refreshes 'users.42'
    """

    repository: Repository
    cache: CacheBackend
    lifetime: int = DEFAULT_LIFETIME

    @classmethod
    def from_settings(
        cls,
        repository: Repository,
        cache: CacheBackend,
        settings: RepoCacheSettings | None = None,
    ) -> 'CachingRepository':
        """
        Create caching repository from settings.

        Args:
            repository: Repository to decorate
            cache: Cache backend
            settings: Settings (default: loaded from environment)

        Returns:
            Configured CachingRepository

        Behaviour:
        - Unset or zero lifetime falls back to DEFAULT_LIFETIME (30 seconds)
        """
        settings = settings or RepoCacheSettings()
        return cls(
            repository=repository,
            cache=cache,
            lifetime=settings.lifetime or DEFAULT_LIFETIME,
        )

    @property
    def namespace(self) -> str:
        """Cache namespace, same as the wrapped repository's."""
        return self.repository.namespace

    def cache_key(self, suffix: Any = None) -> str:
        """Cache key for suffix within this repository's namespace."""
        return make_cache_key(self.namespace, suffix)

    def key_of(self, entity: Entity) -> Any:
        return self.repository.key_of(entity)

    # ========== Reads ==========

    async def all(self, columns: Columns = DEFAULT_COLUMNS) -> list[Entity]:
        """Get all records."""
        cache_key = self.cache_key() if is_default_columns(columns) else self.cache_key({'all': list(columns)})

        async def producer() -> list[Entity]:
            return await self.repository.all(columns)

        return await self._read(cache_key, producer)

    async def where(self, descriptor: QueryDescriptor) -> list[Entity]:
        """
        Get records matching a descriptor.

        Every descriptor field (filters, operator, boolean, columns) is part of
        the cache key.

        Raises:
            KeyDerivationError: If descriptor values cannot be serialized
        """
        cache_key = self.cache_key({'where': descriptor})

        async def producer() -> list[Entity]:
            return await self.repository.where(descriptor)

        return await self._read(cache_key, producer)

    async def paginate(
        self,
        per_page: int = 15,
        page: int = 1,
        columns: Columns = DEFAULT_COLUMNS,
    ) -> Page:
        """Get one page of records."""
        cache_key = self.cache_key({'paginate': per_page, 'page': page, 'columns': list(columns)})

        async def producer() -> Page:
            return await self.repository.paginate(per_page, page, columns)

        return await self._read(cache_key, producer)

    async def find(self, id_value: Any, columns: Columns = DEFAULT_COLUMNS) -> Entity:
        """
        Find a record by primary key.

        Always reads the full row through the identifier key that writes
        refresh and forget; columns are projected from the cached row.

        Raises:
            RepositoryValidationError: If id_value is None or a column is unknown
            EntityNotFoundError: If record not found (nothing is cached)
        """
        if id_value is None:
            raise RepositoryValidationError('id_value must not be None', 'id_value', self.namespace)

        async def producer() -> Entity:
            return await self.repository.find(id_value)

        entity = await self._read(self._identifier_key(id_value), producer)
        return self._project(entity, columns)

    async def find_by(self, column: str, value: Any, columns: Columns = DEFAULT_COLUMNS) -> Entity | None:
        """Find first record where column equals value (cached through where())."""
        return await self.find_where({column: value}, columns)

    async def find_where(self, wheres: Mapping[str, Any], columns: Columns = DEFAULT_COLUMNS) -> Entity | None:
        """Find first record matching all column/value pairs (cached through where())."""
        records = await self.where(QueryDescriptor(dict(wheres), '=', None, 'and', tuple(columns)))
        return records[0] if records else None

    # ========== Writes ==========

    async def create(self, attributes: dict[str, Any]) -> Entity:
        """Insert a record and cache it under its identifier key."""
        instance = await self.repository.create(attributes)
        return await self._refresh(instance)

    async def update(self, id_value: Any, attributes: dict[str, Any]) -> Entity:
        """
        Update a record and replace its identifier-keyed cache entry.

        Raises:
            EntityNotFoundError: If record not found (cache untouched)
        """
        instance = await self.repository.update(id_value, attributes)
        return await self._refresh(instance)

    async def delete(self, id_value: Any) -> bool:
        """
        Forget the record's identifier-keyed entry and delete it.

        The record is resolved first, so a missing record raises before any
        cache entry is touched.

        Raises:
            EntityNotFoundError: If record not found
        """
        instance = await self.repository.find(id_value)
        cache_key = self._identifier_key(self.repository.key_of(instance))

        await self.cache.forget(cache_key)
        logger.debug(f'Forgot {cache_key} before delete')

        return await self.repository.delete(id_value)

    # ========== Helper methods ==========

    async def _read(self, cache_key: str, producer: Producer) -> Any:
        """Return cached value or call producer and cache its result."""
        if await self.cache.has(cache_key):
            logger.debug(f'Cache hit for {cache_key}')
            return await self.cache.get(cache_key)

        logger.debug(f'Cache miss for {cache_key}, reading from {self.namespace}')
        return await self.cache.remember(cache_key, self.lifetime, producer)

    async def _refresh(self, instance: Entity) -> Entity:
        """Replace identifier-keyed entry with a freshly written record."""
        cache_key = self._identifier_key(self.repository.key_of(instance))

        await self.cache.forget(cache_key)

        async def producer() -> Entity:
            return instance

        logger.debug(f'Refreshing {cache_key} after write')
        return await self.cache.remember(cache_key, self.lifetime, producer)

    def _identifier_key(self, id_value: Any) -> str:
        """
        Key of the full-row entry for id_value.

        Scalar ids give `namespace.{id}`; composite ids are digested under a
        'find' tag so they never share a key with all/where/paginate entries.
        """
        if isinstance(id_value, SCALAR_TYPES):
            return self.cache_key(id_value)
        return self.cache_key({'find': id_value})

    def _project(self, entity: Entity, columns: Columns) -> Entity:
        if is_default_columns(columns):
            return entity

        try:
            return {column: entity[column] for column in columns}
        except KeyError as e:
            msg = f'Unknown column {e.args[0]!r} for {self.namespace}'
            raise RepositoryValidationError(msg, 'columns', self.namespace) from e
