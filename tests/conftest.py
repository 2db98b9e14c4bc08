"""Pytest configuration and fixtures."""

from collections import Counter
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy import Column
from sqlalchemy import Integer
from sqlalchemy import MetaData
from sqlalchemy import String
from sqlalchemy import Table
from sqlalchemy.ext.asyncio import create_async_engine

from namerec.repocache import CachingRepository
from namerec.repocache import MemoryCacheBackend
from namerec.repocache import TableRepository


class FakeClock:
    """Controllable clock for TTL tests (seconds)."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SpyRepository:
    """Wraps a repository and counts delegate calls by method name."""

    def __init__(self, repository: Any) -> None:
        self._repository = repository
        self.namespace = repository.namespace
        self.calls: Counter[str] = Counter()

    def __getattr__(self, name: str) -> Any:
        target = getattr(self._repository, name)
        if not callable(target):
            return target

        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            self.calls[name] += 1
            return await target(*args, **kwargs)

        return wrapper

    def key_of(self, entity: dict[str, Any]) -> Any:
        return self._repository.key_of(entity)


@pytest.fixture
def metadata() -> MetaData:
    """Create test metadata with simple schema."""
    metadata = MetaData()

    Table(
        'users',
        metadata,
        Column('id', Integer, primary_key=True),
        Column('name', String(100), nullable=False),
        Column('email', String(100), nullable=False),
    )

    Table(
        'memberships',
        metadata,
        Column('user_id', Integer, primary_key=True),
        Column('group_id', Integer, primary_key=True),
        Column('role', String(50), nullable=False),
    )

    return metadata


@pytest_asyncio.fixture
async def engine(metadata: MetaData):  # noqa: ANN201
    """Create async engine with test database."""
    engine = create_async_engine('sqlite+aiosqlite:///:memory:')

    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def users(engine, metadata) -> TableRepository:  # noqa: ANN001
    """Users table repository with two records."""
    repository = TableRepository(engine, metadata.tables['users'])
    await repository.create({'id': 1, 'name': 'Alice', 'email': 'alice@example.com'})
    await repository.create({'id': 2, 'name': 'Bob', 'email': 'bob@example.com'})
    return repository


@pytest.fixture
def spy(users: TableRepository) -> SpyRepository:
    """Call-counting wrapper around users repository."""
    return SpyRepository(users)


@pytest.fixture
def clock() -> FakeClock:
    """Controllable clock."""
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> MemoryCacheBackend:
    """Memory cache driven by the fake clock."""
    return MemoryCacheBackend(max_size=100, clock=clock)


@pytest.fixture
def cached_users(spy: SpyRepository, cache: MemoryCacheBackend) -> CachingRepository:
    """Caching decorator over the spied users repository."""
    return CachingRepository(repository=spy, cache=cache, lifetime=30)


@pytest.fixture
def memberships(engine, metadata) -> SpyRepository:  # noqa: ANN001
    """Call-counting wrapper around the composite-key memberships repository."""
    return SpyRepository(TableRepository(engine, metadata.tables['memberships']))
