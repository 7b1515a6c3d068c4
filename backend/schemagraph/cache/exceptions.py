"""Cache-specific exceptions for the schema graph engine."""


class CacheError(Exception):
    """Base exception for all cache operations.

    This is the parent class for all cache-related errors, allowing callers
    to catch every cache issue with a single except clause.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        """Initialize cache error.

        Args:
            message: Human-readable error description
            cause: Optional underlying exception that caused this error
        """
        super().__init__(message)
        self.cause = cause


class CacheBackendError(CacheError):
    """Error reading from or writing to the backing store.

    Raised when:
    - The backing store cannot be opened or reached
    - A read, write or delete statement fails
    - A stored value cannot be decoded
    """

    pass


class CacheConfigurationError(CacheError):
    """Error in cache configuration.

    Raised when:
    - Unsupported backend type specified
    - Required configuration parameters are missing
    - Configuration values are out of valid range
    """

    pass
