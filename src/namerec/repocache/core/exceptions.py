"""Repocache exception hierarchy."""


class RepoCacheError(Exception):
    """Base exception for repocache errors."""

    def __init__(self, message: str, namespace: str | None = None) -> None:
        """
        Initialize repocache exception.

        Args:
            message: Error message
            namespace: Optional cache namespace (usually the table name)
        """
        self.namespace = namespace
        super().__init__(message)


class KeyDerivationError(RepoCacheError, ValueError):
    """Cache key cannot be derived from the given query descriptor."""

    def __init__(self, message: str, value: object = None, namespace: str | None = None) -> None:
        """
        Initialize key derivation error.

        Args:
            message: Error message
            value: Offending value (kept for debugging)
            namespace: Optional cache namespace
        """
        self.value = value
        super().__init__(message, namespace)


class CacheCorruptionError(RepoCacheError, RuntimeError):
    """Cached value is present but cannot be decoded."""

    def __init__(self, key: str, message: str | None = None) -> None:
        """
        Initialize cache corruption error.

        Args:
            key: Cache key holding the unreadable value
            message: Optional custom message
        """
        self.key = key
        msg = message or f'Cached value for key "{key}" cannot be decoded'
        super().__init__(msg)


class EntityNotFoundError(RepoCacheError):
    """Record not found in the underlying store."""

    def __init__(self, namespace: str, id_value: object, message: str | None = None) -> None:
        """
        Initialize not found error.

        Args:
            namespace: Repository namespace
            id_value: Identifier that was looked up
            message: Optional custom message
        """
        self.id_value = id_value
        msg = message or f'Record with id={id_value!r} not found in {namespace}'
        super().__init__(msg, namespace)


class RepositoryValidationError(RepoCacheError, ValueError):
    """Invalid query or identifier passed to a repository."""

    def __init__(
        self,
        message: str,
        field_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field_name: Optional field name
            namespace: Optional repository namespace
        """
        self.field_name = field_name
        super().__init__(message, namespace)
