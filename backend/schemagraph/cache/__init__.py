"""Caching layer in front of data-provider calls."""

from .exceptions import CacheBackendError, CacheConfigurationError, CacheError
from .factory import create_cache_backend, create_schema_cache, validate_cache_config
from .interface import CacheBackend
from .memory import MemoryCacheBackend
from .models import CacheBackendType, CacheConfig, CacheMetadata, CacheStats
from .patterns import escape_like, glob_to_like, like_to_regex
from .schema_cache import SchemaCache
from .sqlite import SqliteCacheBackend

__all__ = [
    # Core interface
    "CacheBackend",
    "SchemaCache",
    # Implementations
    "MemoryCacheBackend",
    "SqliteCacheBackend",
    # Factory functions
    "create_cache_backend",
    "create_schema_cache",
    "validate_cache_config",
    # Patterns
    "escape_like",
    "glob_to_like",
    "like_to_regex",
    # Models
    "CacheBackendType",
    "CacheConfig",
    "CacheMetadata",
    "CacheStats",
    # Exceptions
    "CacheBackendError",
    "CacheConfigurationError",
    "CacheError",
]
