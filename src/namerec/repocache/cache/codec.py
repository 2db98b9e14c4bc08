"""JSON codec for values stored in external caches."""

import base64
import json
from datetime import date
from datetime import datetime
from datetime import time
from decimal import Decimal
from typing import Any
from uuid import UUID

from namerec.repocache.core.exceptions import CacheCorruptionError
from namerec.repocache.core.types import Page

TYPE_FIELD = '__type__'
VALUE_FIELD = 'value'


def _tag(value: Any) -> Any:
    """
    Prepare value for json.dumps, tagging values JSON does not support natively.

    Dicts that already carry TYPE_FIELD are wrapped in a 'dict' tag so user
    data is never mistaken for a tag on the way back.
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, dict):
        items = {key: _tag(item) for key, item in value.items()}
        if TYPE_FIELD in value:
            return {TYPE_FIELD: 'dict', VALUE_FIELD: items}
        return items
    if isinstance(value, (list, tuple)):
        return [_tag(item) for item in value]
    if isinstance(value, Page):
        return {TYPE_FIELD: 'page', VALUE_FIELD: _tag(value.to_dict())}

    # datetime is a date subclass, check it first
    if isinstance(value, datetime):
        return {TYPE_FIELD: 'datetime', VALUE_FIELD: value.isoformat()}
    if isinstance(value, date):
        return {TYPE_FIELD: 'date', VALUE_FIELD: value.isoformat()}
    if isinstance(value, time):
        return {TYPE_FIELD: 'time', VALUE_FIELD: value.isoformat()}
    if isinstance(value, Decimal):
        return {TYPE_FIELD: 'decimal', VALUE_FIELD: str(value)}
    if isinstance(value, UUID):
        return {TYPE_FIELD: 'uuid', VALUE_FIELD: str(value)}
    if isinstance(value, bytes):
        return {TYPE_FIELD: 'bytes', VALUE_FIELD: base64.b64encode(value).decode('ascii')}

    msg = f'Object of type {type(value).__name__} is not cacheable'
    raise TypeError(msg)


def _restore(value: Any) -> Any:
    """Restore tagged values, outermost first."""
    if isinstance(value, list):
        return [_restore(item) for item in value]
    if not isinstance(value, dict):
        return value
    if TYPE_FIELD not in value:
        return {key: _restore(item) for key, item in value.items()}

    tag = value[TYPE_FIELD]
    payload = value.get(VALUE_FIELD)

    match tag:
        case 'dict':
            return {key: _restore(item) for key, item in payload.items()}
        case 'datetime':
            return datetime.fromisoformat(payload)
        case 'date':
            return date.fromisoformat(payload)
        case 'time':
            return time.fromisoformat(payload)
        case 'decimal':
            return Decimal(payload)
        case 'uuid':
            return UUID(payload)
        case 'bytes':
            return base64.b64decode(payload)
        case 'page':
            return Page.from_dict(_restore(payload))
        case _:
            msg = f'Unknown cached value type: {tag}'
            raise ValueError(msg)


def encode(value: Any) -> str:
    """
    Serialize value for external storage.

    Args:
        value: Entity, list of entities, Page or any JSON-compatible value

    Returns:
        JSON text

    Raises:
        TypeError: If value contains unsupported types
    """
    return json.dumps(_tag(value), ensure_ascii=False)


def decode(key: str, payload: str | bytes) -> Any:
    """
    Deserialize value read from external storage.

    Args:
        key: Cache key (for error context)
        payload: JSON text

    Returns:
        Restored value

    Raises:
        CacheCorruptionError: If payload cannot be decoded
    """
    try:
        return _restore(json.loads(payload))
    # Decimal raises InvalidOperation, an ArithmeticError
    except (ValueError, TypeError, KeyError, AttributeError, ArithmeticError) as e:
        raise CacheCorruptionError(key, f'Cached value for key "{key}" cannot be decoded: {e}') from e
