"""Cache key generation."""

import hashlib
import json
from collections.abc import Mapping
from dataclasses import is_dataclass
from datetime import date
from datetime import datetime
from datetime import time
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from namerec.repocache.core.exceptions import KeyDerivationError
from namerec.repocache.core.types import QueryDescriptor

SCALAR_TYPES = (str, int, float, Decimal, UUID)


def make_cache_key(namespace: str, suffix: Any = None) -> str:
    """
    Create cache key for a repository read.

    Key format: {namespace} or {namespace}.{suffix}, where suffix is the
    scalar itself (identifiers, pre-formatted strings like 'paginate.15.1')
    or a digest of the normalized structure (filters, column lists).

    Args:
        namespace: Entity namespace (table name)
        suffix: None, scalar, or structured query descriptor

    Returns:
        Cache key

    Raises:
        KeyDerivationError: If suffix contains values that cannot be serialized

    Example:
        >>> make_cache_key('users')
        'users'
        >>> make_cache_key('users', 42)
        'users.42'
        >>> a = make_cache_key('users', {'column': 'name', 'value': 'Alice'})
        >>> b = make_cache_key('users', {'value': 'Alice', 'column': 'name'})
        >>> a == b  # Field order does not matter
        True
    """
    if suffix is None:
        return namespace

    # bool is an int subclass, keep it scalar too
    if isinstance(suffix, SCALAR_TYPES):
        return f'{namespace}.{suffix}'

    return f'{namespace}.{digest(suffix, namespace)}'


def digest(descriptor: Any, namespace: str | None = None) -> str:
    """
    Digest a structured descriptor into a compact hex string.

    Args:
        descriptor: Mapping, sequence, set or QueryDescriptor
        namespace: Namespace for error context

    Returns:
        32 hex chars (BLAKE2b, 16 bytes)
    """
    payload = json.dumps(
        normalize(descriptor, namespace),
        sort_keys=True,
        ensure_ascii=False,
        separators=(',', ':'),
    )
    return hashlib.blake2b(payload.encode(), digest_size=16).hexdigest()


def normalize(value: Any, namespace: str | None = None) -> Any:
    """
    Convert value into a JSON-compatible structure with stable ordering.

    Mapping key order is handled by `sort_keys` at dump time; sets are sorted
    here. Non-JSON scalars are tagged so that e.g. Decimal('1') and '1' do not
    produce the same key.

    Raises:
        KeyDerivationError: For unsupported types or non-string mapping keys
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value

    if isinstance(value, QueryDescriptor):
        return normalize(value.to_dict(), namespace)

    if isinstance(value, Enum):
        return {'__enum__': normalize(value.value, namespace)}

    if isinstance(value, Mapping):
        result = {}
        for key, item in value.items():
            if not isinstance(key, str):
                msg = f'Cache key mappings must have string keys, got {type(key).__name__}'
                raise KeyDerivationError(msg, value=key, namespace=namespace)
            result[key] = normalize(item, namespace)
        return result

    if isinstance(value, (list, tuple)):
        return [normalize(item, namespace) for item in value]

    if isinstance(value, (set, frozenset)):
        items = [normalize(item, namespace) for item in value]
        return {'__set__': sorted(items, key=lambda item: json.dumps(item, sort_keys=True))}

    # datetime is a date subclass, check it first
    if isinstance(value, datetime):
        return {'__datetime__': value.isoformat()}
    if isinstance(value, date):
        return {'__date__': value.isoformat()}
    if isinstance(value, time):
        return {'__time__': value.isoformat()}
    if isinstance(value, Decimal):
        return {'__decimal__': str(value)}
    if isinstance(value, UUID):
        return {'__uuid__': str(value)}
    if isinstance(value, bytes):
        return {'__bytes__': value.hex()}

    if is_dataclass(value) and not isinstance(value, type) and hasattr(value, 'to_dict'):
        return normalize(value.to_dict(), namespace)

    msg = f'Cannot derive cache key from value of type {type(value).__name__}'
    raise KeyDerivationError(msg, value=value, namespace=namespace)
