"""
Basic usage example for repocache.

This example demonstrates:
1. Wrapping a table repository with the caching decorator
2. Read-through caching of lookups and filtered queries
3. Identifier-keyed refresh on writes (and stale collection entries)
"""

import asyncio

from sqlalchemy import Column
from sqlalchemy import Integer
from sqlalchemy import MetaData
from sqlalchemy import String
from sqlalchemy import Table
from sqlalchemy.ext.asyncio import create_async_engine

from namerec.repocache import CachingRepository
from namerec.repocache import MemoryCacheBackend
from namerec.repocache import QueryDescriptor
from namerec.repocache import TableRepository
from namerec.repocache import configure_logging


# Define schema
metadata = MetaData()

users_table = Table(
    'users',
    metadata,
    Column('id', Integer, primary_key=True),
    Column('name', String(100), nullable=False),
    Column('email', String(100), nullable=False),
)


async def main() -> None:
    """Run example."""
    configure_logging('DEBUG')

    # Create async engine
    engine = create_async_engine('sqlite+aiosqlite:///:memory:')

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    cache = MemoryCacheBackend()
    users = CachingRepository(
        repository=TableRepository(engine, users_table),
        cache=cache,
        lifetime=60,
    )

    # Example 1: Writes populate identifier keys
    print('\n=== Example 1: Create ===')
    alice = await users.create({'name': 'Alice', 'email': 'alice@example.com'})
    await users.create({'name': 'Bob', 'email': 'bob@example.com'})
    print(f'Created: {alice}')

    # Example 2: Reads go through the cache
    print('\n=== Example 2: Read-through ===')
    await users.find(alice['id'])  # Hit, populated by create()
    everyone = await users.all()  # Miss
    bobs = await users.where(QueryDescriptor('name', '=', 'Bob'))  # Miss
    print(f'All users: {[u["name"] for u in everyone]}')
    print(f'Bobs: {bobs}')

    # Example 3: Update refreshes users.<id>, collections stay as cached
    print('\n=== Example 3: Update ===')
    await users.update(alice['id'], {'name': 'Alicia'})
    print(f'find(): {(await users.find(alice["id"]))["name"]}')
    print(f'all() until lifetime expires: {[u["name"] for u in await users.all()]}')

    print(f'\nCache stats: {await cache.stats()}')

    await engine.dispose()


if __name__ == '__main__':
    asyncio.run(main())
