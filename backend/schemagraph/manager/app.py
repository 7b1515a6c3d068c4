"""Application context: the wired set of engine components.

Built once at process or request start and passed to whatever needs the
engine; nothing looks components up globally.
"""

from dataclasses import dataclass

from ..cache import SchemaCache, create_schema_cache
from ..config import Settings
from ..core.hooks import EventDispatcher, HookDispatcher
from ..core.logging import get_logger
from ..core.output import OutputService
from ..providers import ProviderRegistry, SiteDataSource, default_providers
from ..schema_types import SchemaTypeRegistry
from ..validation import SchemaValidator
from .schema_manager import SchemaManager

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Engine components sharing one dispatcher, cache and settings."""

    settings: Settings
    hooks: HookDispatcher
    cache: SchemaCache
    types: SchemaTypeRegistry
    validator: SchemaValidator
    providers: ProviderRegistry
    output: OutputService
    manager: SchemaManager

    def close(self) -> None:
        """Release the cache backing store."""
        self.cache.backend.close()

    def __enter__(self) -> "AppContext":
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()


def create_app_context(
    settings: Settings | None = None,
    site: SiteDataSource | None = None,
    hooks: HookDispatcher | None = None,
    compact_single: bool = False,
) -> AppContext:
    """Wire the engine components.

    Args:
        settings: Engine settings; read from the environment when omitted
        site: Site data source; when given the built-in providers are registered
        hooks: Dispatcher bridging to the host's event system
        compact_single: Render single-piece graphs as a single object

    Raises:
        CacheConfigurationError: If the cache settings are invalid
    """
    settings = settings or Settings()
    hooks = hooks or EventDispatcher()

    cache = create_schema_cache(settings.cache_config, hooks)
    cache.register_invalidation_hooks(hooks)

    types = SchemaTypeRegistry(hooks)
    validator = SchemaValidator(types)
    providers = ProviderRegistry(hooks)
    if site is not None:
        for provider in default_providers(site, hooks):
            providers.register_provider(provider)

    output = OutputService(compact_single=compact_single)
    manager = SchemaManager(
        providers,
        types,
        cache,
        hooks,
        validator=validator,
        settings=settings,
        output=output,
    )

    logger.debug(
        "Application context created",
        cache_backend=settings.cache_backend,
        providers=len(providers),
    )
    return AppContext(
        settings=settings,
        hooks=hooks,
        cache=cache,
        types=types,
        validator=validator,
        providers=providers,
        output=output,
        manager=manager,
    )
