"""Tests for cache key generation."""

from datetime import date
from datetime import datetime
from decimal import Decimal
from uuid import UUID

import pytest

from namerec.repocache import KeyDerivationError
from namerec.repocache import QueryDescriptor
from namerec.repocache import make_cache_key


class TestScalarKeys:
    """Test keys for absent and scalar suffixes."""

    def test_no_suffix_is_namespace(self):
        """Missing suffix should produce bare namespace."""
        assert make_cache_key('users') == 'users'

    def test_integer_suffix(self):
        """Identifier suffix should be appended as-is."""
        assert make_cache_key('users', 42) == 'users.42'

    def test_string_suffix(self):
        """Pre-formatted string suffix should be appended as-is."""
        assert make_cache_key('users', 'paginate.15.1') == 'users.paginate.15.1'

    def test_uuid_suffix(self):
        """UUID identifiers are scalars."""
        uid = UUID('12345678-1234-5678-1234-567812345678')
        assert make_cache_key('users', uid) == 'users.12345678-1234-5678-1234-567812345678'


class TestStructuredKeys:
    """Test keys for structured descriptors."""

    def test_same_descriptor_same_key(self):
        """Same descriptor should produce same key."""
        descriptor = {'column': 'name', 'operator': '=', 'value': 'Alice'}
        assert make_cache_key('users', descriptor) == make_cache_key('users', dict(descriptor))

    def test_field_order_does_not_matter(self):
        """Mapping field order must not change the key."""
        key1 = make_cache_key('users', {'column': 'name', 'operator': '=', 'value': 'Alice'})
        key2 = make_cache_key('users', {'value': 'Alice', 'operator': '=', 'column': 'name'})
        assert key1 == key2

    def test_nested_order_does_not_matter(self):
        """Nested mapping order must not change the key."""
        key1 = make_cache_key('users', QueryDescriptor({'name': 'Alice', 'email': 'a@example.com'}))
        key2 = make_cache_key('users', QueryDescriptor({'email': 'a@example.com', 'name': 'Alice'}))
        assert key1 == key2

    def test_set_order_does_not_matter(self):
        """Sets are normalized before hashing."""
        key1 = make_cache_key('users', {'ids': {3, 1, 2}})
        key2 = make_cache_key('users', {'ids': {2, 3, 1}})
        assert key1 == key2

    @pytest.mark.parametrize(
        'other',
        [
            QueryDescriptor('name', '!=', 'Alice'),
            QueryDescriptor('email', '=', 'Alice'),
            QueryDescriptor('name', '=', 'Bob'),
            QueryDescriptor('name', '=', 'Alice', boolean='or'),
            QueryDescriptor('name', '=', 'Alice', columns=('id',)),
        ],
    )
    def test_any_field_changes_key(self, other):
        """Descriptors differing in any field should produce different keys."""
        base = QueryDescriptor('name', '=', 'Alice')
        assert make_cache_key('users', base) != make_cache_key('users', other)

    def test_namespace_affects_key(self):
        """Different namespaces should produce different keys."""
        descriptor = QueryDescriptor('name', '=', 'Alice')
        assert make_cache_key('users', descriptor) != make_cache_key('admins', descriptor)

    def test_typed_values_do_not_collide_with_strings(self):
        """Decimal('1') and '1' are different filter values."""
        key1 = make_cache_key('orders', {'total': Decimal('1')})
        key2 = make_cache_key('orders', {'total': '1'})
        assert key1 != key2

    def test_dates_are_supported(self):
        """Date and datetime values should be serializable."""
        key1 = make_cache_key('events', {'on': date(2024, 1, 1)})
        key2 = make_cache_key('events', {'on': datetime(2024, 1, 1)})
        assert key1 != key2

    def test_key_format(self):
        """Structured key should be namespace plus 32 hex chars."""
        key = make_cache_key('users', ['id', 'name'])
        namespace, digest = key.split('.')
        assert namespace == 'users'
        assert len(digest) == 32  # 16 bytes = 32 hex chars
        assert all(c in '0123456789abcdef' for c in digest)


class TestKeyDerivationErrors:
    """Test unsupported descriptor values."""

    def test_unserializable_value(self):
        """Arbitrary objects cannot be part of a key."""
        with pytest.raises(KeyDerivationError):
            make_cache_key('users', {'value': object()})

    def test_non_string_mapping_key(self):
        """Mapping keys must be strings."""
        with pytest.raises(KeyDerivationError) as exc_info:
            make_cache_key('users', {1: 'Alice'})
        assert exc_info.value.value == 1

    def test_error_is_value_error(self):
        """Key derivation errors are programmer errors."""
        with pytest.raises(ValueError):
            make_cache_key('users', [object()])
