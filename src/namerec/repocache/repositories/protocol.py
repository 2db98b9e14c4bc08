"""Repository protocol definition."""

from typing import Any
from typing import Protocol
from typing import runtime_checkable

from namerec.repocache.core.types import DEFAULT_COLUMNS
from namerec.repocache.core.types import Columns
from namerec.repocache.core.types import Entity
from namerec.repocache.core.types import Page
from namerec.repocache.core.types import QueryDescriptor


@runtime_checkable
class Repository(Protocol):
    """
    Protocol for repositories over a single entity type.

    Implemented both by storage-backed repositories and by
    CachingRepository, so the two are interchangeable for callers.
    """

    namespace: str

    async def all(self, columns: Columns = DEFAULT_COLUMNS) -> list[Entity]:
        """Get all records."""
        ...

    async def where(self, descriptor: QueryDescriptor) -> list[Entity]:
        """Get records matching a query descriptor."""
        ...

    async def paginate(
        self,
        per_page: int = 15,
        page: int = 1,
        columns: Columns = DEFAULT_COLUMNS,
    ) -> Page:
        """Get one page of records."""
        ...

    async def find(self, id_value: Any, columns: Columns = DEFAULT_COLUMNS) -> Entity:
        """
        Find a record by primary key.

        Raises:
            EntityNotFoundError: If record not found
        """
        ...

    async def create(self, attributes: dict[str, Any]) -> Entity:
        """Insert a record and return it as stored."""
        ...

    async def update(self, id_value: Any, attributes: dict[str, Any]) -> Entity:
        """
        Update a record and return it as stored.

        Raises:
            EntityNotFoundError: If record not found
        """
        ...

    async def delete(self, id_value: Any) -> bool:
        """
        Delete a record by primary key.

        Raises:
            EntityNotFoundError: If record not found
        """
        ...

    def key_of(self, entity: Entity) -> Any:
        """Primary key value of an entity (tuple for composite keys)."""
        ...
