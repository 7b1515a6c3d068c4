"""Cache backend factory.

Creates the configured backing store and wraps it in a
:class:`SchemaCache`.
"""

from ..core.hooks import HookDispatcher
from ..core.logging import get_logger
from .exceptions import CacheConfigurationError
from .interface import CacheBackend
from .memory import MemoryCacheBackend
from .models import CacheBackendType, CacheConfig
from .schema_cache import SchemaCache
from .sqlite import SqliteCacheBackend

logger = get_logger(__name__)


def create_cache_backend(config: CacheConfig) -> CacheBackend:
    """Create a backing store instance based on configuration.

    Raises:
        CacheConfigurationError: If backend type is unsupported or config is invalid
    """
    validate_cache_config(config)
    backend_type = str(config.backend_type).lower()

    logger.info("Creating cache backend", backend_type=backend_type)

    if backend_type == CacheBackendType.MEMORY.value:
        return MemoryCacheBackend()

    # validate_cache_config guarantees a path for sqlite
    return SqliteCacheBackend(config.path or ":memory:")


def create_schema_cache(
    config: CacheConfig, hooks: HookDispatcher | None = None
) -> SchemaCache:
    """Create a schema cache over the configured backing store."""
    return SchemaCache(
        create_cache_backend(config),
        prefix=config.prefix,
        default_ttl=config.default_ttl,
        max_key_length=config.max_key_length,
        use_memory_cache=config.use_memory_cache,
        hooks=hooks,
    )


def validate_cache_config(config: CacheConfig) -> None:
    """Validate cache configuration.

    Raises:
        CacheConfigurationError: If configuration is invalid
    """
    supported = [item.value for item in CacheBackendType]
    backend_type = str(config.backend_type).lower()

    if backend_type not in supported:
        raise CacheConfigurationError(
            f"Unsupported cache backend: {backend_type}. "
            f"Supported backends: {', '.join(supported)}"
        )

    if backend_type == CacheBackendType.SQLITE.value and not config.path:
        raise CacheConfigurationError("SQLite cache backend requires a path")

    if not config.prefix:
        raise CacheConfigurationError("Cache key prefix is required")

    if len(config.prefix) >= config.max_key_length:
        raise CacheConfigurationError("Cache key prefix exceeds the key length limit")

    logger.debug("Cache configuration validated", backend_type=backend_type)
