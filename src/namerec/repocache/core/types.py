"""Type definitions for repocache."""

from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from math import ceil
from typing import Any

Entity = dict[str, Any]
Columns = Sequence[str]

DEFAULT_COLUMNS: tuple[str, ...] = ('*',)


def is_default_columns(columns: Columns) -> bool:
    """Check whether columns request the full row."""
    return tuple(columns) == DEFAULT_COLUMNS


@dataclass(frozen=True)
class QueryDescriptor:
    """
    Parameters of a filtered read.

    `column` is either a single column name compared with `value` using
    `operator`, or a mapping {column: value} where every pair is compared with
    `operator` and the resulting conditions are combined with `boolean`.

    Example:
        by_email = QueryDescriptor('email', '=', 'alice@example.com')
        active_alice = QueryDescriptor({'name': 'Alice', 'active': True}, columns=('id', 'name'))
    """

    column: str | Mapping[str, Any]
    operator: str = '='
    value: Any = None
    boolean: str = 'and'
    columns: tuple[str, ...] = DEFAULT_COLUMNS

    def __post_init__(self) -> None:
        """Freeze columns so equal descriptors compare equal."""
        object.__setattr__(self, 'columns', tuple(self.columns))

    def to_dict(self) -> dict[str, Any]:
        """Serializable form, used as cache key input."""
        return {
            'column': dict(self.column) if isinstance(self.column, Mapping) else self.column,
            'operator': self.operator,
            'value': self.value,
            'boolean': self.boolean,
            'columns': list(self.columns),
        }


@dataclass
class Page:
    """One page of a paginated read."""

    items: list[Entity] = field(default_factory=list)
    total: int = 0
    per_page: int = 15
    page: int = 1

    @property
    def last_page(self) -> int:
        """Number of the last page (at least 1)."""
        return max(1, ceil(self.total / self.per_page))

    def to_dict(self) -> dict[str, Any]:
        """Serialize for external storage."""
        return {
            'items': self.items,
            'total': self.total,
            'per_page': self.per_page,
            'page': self.page,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Page':
        """Deserialize from external storage."""
        return cls(
            items=list(data.get('items', [])),
            total=data['total'],
            per_page=data['per_page'],
            page=data.get('page', 1),
        )
