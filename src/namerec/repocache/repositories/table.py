"""Repository over a single database table."""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import Column
from sqlalchemy import Select
from sqlalchemy import Table
from sqlalchemy import and_
from sqlalchemy import delete as sql_delete
from sqlalchemy import func
from sqlalchemy import insert
from sqlalchemy import or_
from sqlalchemy import select
from sqlalchemy import update as sql_update
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql.expression import ColumnElement

from namerec.repocache.core.exceptions import EntityNotFoundError
from namerec.repocache.core.exceptions import RepositoryValidationError
from namerec.repocache.core.types import DEFAULT_COLUMNS
from namerec.repocache.core.types import Columns
from namerec.repocache.core.types import Entity
from namerec.repocache.core.types import Page
from namerec.repocache.core.types import QueryDescriptor
from namerec.repocache.core.types import is_default_columns

logger = logging.getLogger(__name__)


class TableRepository:
    """
    Repository for a regular database table.

    Uses SQLAlchemy Core on an AsyncEngine. Records are returned as plain
    dictionaries so they can be cached and serialized without ORM state.

    Example:
        users = TableRepository(engine, users_table)
        user = await users.create({'name': 'John', 'email': 'john@example.com'})
        same = await users.find(user['id'])
    """

    def __init__(self, engine: AsyncEngine, table: Table) -> None:
        """
        Initialize table repository.

        Args:
            engine: Async engine for the database holding the table
            table: SQLAlchemy Table

        Raises:
            RepositoryValidationError: If table has no primary key
        """
        self.engine = engine
        self.table = table
        self.namespace = table.name
        self._pk_columns = list(table.primary_key.columns)

        if not self._pk_columns:
            raise RepositoryValidationError(
                message=f'Table "{table.name}" has no primary key',
                namespace=self.namespace,
            )

    async def all(self, columns: Columns = DEFAULT_COLUMNS) -> list[Entity]:
        """SELECT columns FROM table."""
        return await self._fetch_all(self._select(columns))

    async def where(self, descriptor: QueryDescriptor) -> list[Entity]:
        """
        SELECT columns FROM table WHERE <descriptor>.

        Args:
            descriptor: Filter description

        Returns:
            Matching records

        Raises:
            RepositoryValidationError: On unknown column, operator or boolean
        """
        query = self._select(descriptor.columns).where(self._build_condition(descriptor))
        return await self._fetch_all(query)

    async def paginate(
        self,
        per_page: int = 15,
        page: int = 1,
        columns: Columns = DEFAULT_COLUMNS,
    ) -> Page:
        """
        Get one page of records ordered by primary key.

        Raises:
            RepositoryValidationError: If per_page or page is less than 1
        """
        if per_page < 1:
            raise RepositoryValidationError('per_page must be positive', 'per_page', self.namespace)
        if page < 1:
            raise RepositoryValidationError('page must be positive', 'page', self.namespace)

        query = (
            self._select(columns)
            .order_by(*self._pk_columns)
            .limit(per_page)
            .offset((page - 1) * per_page)
        )

        async with self.engine.connect() as conn:
            total = (await conn.execute(select(func.count()).select_from(self.table))).scalar_one()
            rows = (await conn.execute(query)).mappings().all()

        return Page(items=[dict(row) for row in rows], total=total, per_page=per_page, page=page)

    async def find(self, id_value: Any, columns: Columns = DEFAULT_COLUMNS) -> Entity:
        """
        Read through select + filter by id.
        Does not return None - raises EntityNotFoundError.

        Args:
            id_value: Record ID (tuple/list for composite keys)
            columns: Columns to return

        Returns:
            Record data as dictionary

        Raises:
            EntityNotFoundError: If record not found
        """
        query = self._select(columns).where(self._build_pk_condition(id_value))

        async with self.engine.connect() as conn:
            row = (await conn.execute(query)).mappings().first()

        if row is None:
            raise EntityNotFoundError(self.namespace, id_value)

        return dict(row)

    async def create(self, attributes: dict[str, Any]) -> Entity:
        """INSERT and return the stored record."""
        async with self.engine.begin() as conn:
            result = await conn.execute(insert(self.table).values(**attributes))
            inserted = tuple(result.inserted_primary_key)

        id_value = inserted[0] if len(self._pk_columns) == 1 else inserted
        logger.debug(f'Inserted {self.namespace} id={id_value!r}')
        return await self.find(id_value)

    async def update(self, id_value: Any, attributes: dict[str, Any]) -> Entity:
        """
        UPDATE and return the stored record.

        Raises:
            EntityNotFoundError: If record not found
        """
        await self.find(id_value)

        condition = self._build_pk_condition(id_value)
        async with self.engine.begin() as conn:
            await conn.execute(sql_update(self.table).where(condition).values(**attributes))

        logger.debug(f'Updated {self.namespace} id={id_value!r}')
        return await self.find(id_value)

    async def delete(self, id_value: Any) -> bool:
        """
        DELETE by primary key.

        Returns:
            True if deleted

        Raises:
            EntityNotFoundError: If record not found
        """
        await self.find(id_value)

        condition = self._build_pk_condition(id_value)
        async with self.engine.begin() as conn:
            result = await conn.execute(sql_delete(self.table).where(condition))
            deleted = result.rowcount > 0

        logger.debug(f'Deleted {self.namespace} id={id_value!r}')
        return deleted

    def key_of(self, entity: Entity) -> Any:
        """Primary key of a record: scalar, or tuple for composite keys."""
        try:
            if len(self._pk_columns) == 1:
                return entity[self._pk_columns[0].name]
            return tuple(entity[col.name] for col in self._pk_columns)
        except KeyError as e:
            raise RepositoryValidationError(
                message=f'Record has no primary key column {e}',
                field_name=str(e),
                namespace=self.namespace,
            ) from e

    # ========== Helper methods ==========

    async def _fetch_all(self, query: Select) -> list[Entity]:
        async with self.engine.connect() as conn:
            result = await conn.execute(query)
            return [dict(row) for row in result.mappings().all()]

    def _select(self, columns: Columns) -> Select:
        """Build SELECT for requested columns ('*' = whole row)."""
        if is_default_columns(columns):
            return select(self.table)
        return select(*[self._column(name) for name in columns])

    def _column(self, name: str) -> Column:
        try:
            return self.table.c[name]
        except KeyError as e:
            raise RepositoryValidationError(
                message=f'Unknown column "{name}" in {self.namespace}',
                field_name=name,
                namespace=self.namespace,
            ) from e

    def _build_condition(self, descriptor: QueryDescriptor) -> ColumnElement[bool]:
        """Build WHERE clause from descriptor."""
        if isinstance(descriptor.column, Mapping):
            pairs = list(descriptor.column.items())
        else:
            pairs = [(descriptor.column, descriptor.value)]

        if not pairs:
            raise RepositoryValidationError('At least one condition required', 'column', self.namespace)

        conditions = [self._compare(self._column(name), descriptor.operator, value) for name, value in pairs]

        match descriptor.boolean.lower():
            case 'and':
                return and_(*conditions)
            case 'or':
                return or_(*conditions)
            case _:
                raise RepositoryValidationError(
                    message=f'Unknown boolean combinator: {descriptor.boolean}',
                    field_name='boolean',
                    namespace=self.namespace,
                )

    def _compare(self, column: Column, operator: str, value: Any) -> ColumnElement[bool]:
        """Build single comparison."""
        match operator.lower():
            case '=':
                return column.is_(None) if value is None else column == value
            case '!=' | '<>':
                return column.is_not(None) if value is None else column != value
            case '<':
                return column < value
            case '<=':
                return column <= value
            case '>':
                return column > value
            case '>=':
                return column >= value
            case 'like':
                return column.like(value)
            case 'not like':
                return column.not_like(value)
            case 'ilike':
                return column.ilike(value)
            case 'in':
                return column.in_(list(value))
            case 'not in':
                return column.not_in(list(value))
            case _:
                raise RepositoryValidationError(
                    message=f'Unknown comparison operator: {operator}',
                    field_name='operator',
                    namespace=self.namespace,
                )

    def _build_pk_condition(self, id_value: Any) -> ColumnElement[bool]:
        """
        Validate id value and build WHERE condition for primary key.
        Supports simple and composite keys.

        Raises:
            RepositoryValidationError: If id format does not match PK structure
        """
        if len(self._pk_columns) == 1:
            return self._pk_columns[0] == id_value

        if not isinstance(id_value, (tuple, list)) or len(id_value) != len(self._pk_columns):
            raise RepositoryValidationError(
                message=(
                    f'Composite primary key for "{self.namespace}" requires tuple/list '
                    f'with {len(self._pk_columns)} values'
                ),
                field_name='id_value',
                namespace=self.namespace,
            )

        return and_(*[col == val for col, val in zip(self._pk_columns, id_value, strict=True)])
